"""
Keyed-hash (HMAC) boundary for totpgen.

The pipeline never hashes anything itself.  It talks to an
:class:`HmacProvider`, which imports raw key bytes for one algorithm and
signs messages with the resulting handle.  The default provider is backed
by ``cryptography``; tests and callers may pass their own, synchronous or
asynchronous.

Supported digests : SHA-1, SHA-256, SHA-512
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Protocol, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from core.errors import CryptoProviderError, InvalidAlgorithmError

logger = logging.getLogger(__name__)


# ── Algorithm selector ────────────────────────────────────────────────────────

class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA-1"
    SHA256 = "SHA-256"
    SHA512 = "SHA-512"


_HASH_MAP: dict[Algorithm, type] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}

# Digest sizes in bytes
DIGEST_SIZES: dict[Algorithm, int] = {
    Algorithm.SHA1: 20,
    Algorithm.SHA256: 32,
    Algorithm.SHA512: 64,
}


def validate_algorithm(name: Union[str, Algorithm]) -> Algorithm:
    """
    Return the :class:`Algorithm` matching *name*, compared case-insensitively.

    Raises:
        InvalidAlgorithmError: If *name* is not SHA-1, SHA-256 or SHA-512.
    """
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm(str(name).upper())
    except ValueError:
        raise InvalidAlgorithmError(
            "Invalid hash algorithm. Use 'SHA-1', 'SHA-256', or 'SHA-512'."
        ) from None


# ── Provider interface ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HmacKey:
    """Opaque handle returned by :meth:`HmacProvider.import_key`."""

    algorithm: Algorithm
    handle: Any = field(repr=False, compare=False)


class HmacProvider(Protocol):
    """
    Host capability the pipeline signs with.

    Either method may return its result directly or as an awaitable;
    :func:`core.totp.generate_totp_async` handles both.
    """

    def import_key(
        self, key: bytes, algorithm: Algorithm
    ) -> Union[HmacKey, Awaitable[HmacKey]]:
        ...

    def sign(self, key: HmacKey, message: bytes) -> Union[bytes, Awaitable[bytes]]:
        ...


# ── Default provider ──────────────────────────────────────────────────────────

class CryptographyHmacProvider:
    """:class:`HmacProvider` backed by ``cryptography.hazmat.primitives.hmac``."""

    def import_key(self, key: bytes, algorithm: Algorithm) -> HmacKey:
        """
        Prepare an HMAC context for *key* and *algorithm*.

        Raises:
            CryptoProviderError: If the key is empty or the backend refuses
                the key or algorithm.
        """
        if not key:
            raise CryptoProviderError("Key data must not be empty.")
        try:
            context = hmac.HMAC(bytes(key), _HASH_MAP[Algorithm(algorithm)]())
        except (UnsupportedAlgorithm, KeyError, TypeError, ValueError) as exc:
            raise CryptoProviderError(f"Unable to import HMAC key: {exc}") from exc
        return HmacKey(algorithm=Algorithm(algorithm), handle=context)

    def sign(self, key: HmacKey, message: bytes) -> bytes:
        """
        Return the HMAC of *message* under *key*.

        The imported context is copied, so a handle can sign any number of
        messages.
        """
        try:
            h = key.handle.copy()
            h.update(message)
            digest = h.finalize()
        except (AttributeError, TypeError, ValueError) as exc:
            raise CryptoProviderError(f"Unable to sign message: {exc}") from exc
        logger.debug("Signed %d-byte message with %s", len(message), key.algorithm.value)
        return digest
