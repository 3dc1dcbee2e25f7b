"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import inspect
import struct
from typing import Optional

from core.crypto import Algorithm, CryptographyHmacProvider, HmacProvider
from core.errors import CryptoProviderError, GenerationError

_COUNTER_MASK = 0xFFFFFFFF  # only the low 4 of the 8 bytes carry the counter


def encode_counter(counter: int) -> bytes:
    """
    Serialise *counter* as the 8-byte big-endian HMAC message.

    Bytes 0-3 are always zero.  Only the low 32 bits of *counter* are
    written, so wider and negative values wrap (-1 becomes 0xFFFFFFFF).
    """
    return struct.pack(">II", 0, counter & _COUNTER_MASK)


def dynamic_truncate(digest: bytes, digits: int = 6) -> str:
    """
    Dynamic truncation (RFC 4226 §5.3).

    Args:
        digest: Raw HMAC output.
        digits: Length of the returned code.

    Returns:
        Zero-padded OTP string.

    Raises:
        GenerationError: If the digest is too short for the selected offset.
    """
    if not digest:
        raise GenerationError("Failed to generate OTP: empty HMAC output")

    offset = digest[-1] & 0x0F
    if len(digest) < offset + 4:
        raise GenerationError(
            f"Failed to generate OTP: {len(digest)}-byte HMAC output is too short "
            f"for offset {offset}"
        )
    code = (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )
    otp = code % (10**digits)
    return str(otp).zfill(digits)


def generate_hotp(
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
    provider: Optional[HmacProvider] = None,
) -> str:
    """
    Generate an HOTP code with a synchronous provider.

    Args:
        secret_bytes: Raw decoded secret bytes.
        counter:      Synchronisation counter value.
        digits:       Number of OTP digits.
        algorithm:    HMAC algorithm.
        provider:     HMAC implementation (``cryptography`` if None).

    Returns:
        Zero-padded OTP string.

    Raises:
        CryptoProviderError: If the provider returns awaitables.
    """
    provider = provider or CryptographyHmacProvider()
    message = encode_counter(counter)
    key = _require_sync(provider.import_key(secret_bytes, algorithm))
    digest = _require_sync(provider.sign(key, message))
    return dynamic_truncate(bytes(digest), digits)


async def generate_hotp_async(
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
    provider: Optional[HmacProvider] = None,
) -> str:
    """Coroutine form of :func:`generate_hotp`; provider results may be awaitables."""
    provider = provider or CryptographyHmacProvider()
    message = encode_counter(counter)
    key = await _resolve(provider.import_key(secret_bytes, algorithm))
    digest = await _resolve(provider.sign(key, message))
    return dynamic_truncate(bytes(digest), digits)


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


def _require_sync(value):
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise CryptoProviderError(
            "Provider returned an awaitable; use generate_totp_async() or generate_hotp_async()."
        )
    return value
