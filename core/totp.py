"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces the 6-digit, 30-second codes shown by Google Authenticator and
every other standards-conformant authenticator.

Pipeline
--------
    wall clock ─▶ time step ─▶ 8-byte counter ─┐
    base32 secret ─▶ key bytes ────────────────┼─▶ HMAC ─▶ truncation ─▶ "287082"
    algorithm name ─▶ Algorithm ───────────────┘
"""

import logging
import math
import time
from typing import Optional, Tuple, Union

from core.crypto import Algorithm, HmacProvider, validate_algorithm
from core.errors import TotpGenerationError
from core.hotp import generate_hotp, generate_hotp_async
from core.utils import decode_secret

logger = logging.getLogger(__name__)

__all__ = [
    "Algorithm",
    "DIGITS",
    "PERIOD",
    "T0",
    "current_time_step",
    "generate_totp",
    "generate_totp_async",
    "remaining_seconds",
    "validate_algorithm",
]

# ── Constants ────────────────────────────────────────────────────────────────

PERIOD = 30   # seconds per time step
DIGITS = 6    # length of the generated code
T0 = 0        # Unix time the step count starts from

_ERROR_PREFIX = "Failed to generate TOTP: "


# ── Time steps ────────────────────────────────────────────────────────────────

def current_time_step(timestamp: Optional[float] = None) -> int:
    """Return ``floor((t - T0) / PERIOD)`` for *timestamp* or the current time."""
    t = timestamp if timestamp is not None else time.time()
    return math.floor((t - T0) / PERIOD)


def remaining_seconds(timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    t = timestamp if timestamp is not None else time.time()
    return PERIOD - (math.floor(t - T0) % PERIOD)


# ── Generation ────────────────────────────────────────────────────────────────

def _prepare(
    secret_key: str,
    hash_algo: Union[str, Algorithm],
    timestamp: Optional[float],
    strict_secret: bool,
) -> Tuple[bytes, int, Algorithm]:
    step = current_time_step(timestamp)
    key = decode_secret(secret_key, strict=strict_secret)
    algorithm = validate_algorithm(hash_algo)
    logger.debug("Generating TOTP for step %d with %s", step, algorithm.value)
    return key, step, algorithm


def _wrap(exc: Exception) -> TotpGenerationError:
    logger.debug("TOTP generation failed", exc_info=True)
    return TotpGenerationError(f"{_ERROR_PREFIX}{exc}")


def generate_totp(
    secret_key: str,
    hash_algo: Union[str, Algorithm] = "SHA-1",
    *,
    timestamp: Optional[float] = None,
    provider: Optional[HmacProvider] = None,
    strict_secret: bool = False,
) -> str:
    """
    Generate the current TOTP code for a base32 secret.

    Args:
        secret_key:    Base32 secret from the 2FA provider.  Whitespace and
                       case are ignored.
        hash_algo:     "SHA-1", "SHA-256" or "SHA-512" (case-insensitive).
        timestamp:     Override Unix timestamp (uses time.time() if None).
        provider:      Synchronous HMAC provider (``cryptography`` if None).
        strict_secret: Reject secrets containing non-base32 characters
                       instead of silently dropping them.

    Returns:
        6-digit, zero-padded OTP string.

    Raises:
        TotpGenerationError: If any stage fails.  The message starts with
            ``"Failed to generate TOTP: "`` followed by the stage's message,
            and the stage's exception is chained as ``__cause__``.
    """
    try:
        key, step, algorithm = _prepare(secret_key, hash_algo, timestamp, strict_secret)
        return generate_hotp(key, step, DIGITS, algorithm, provider)
    except Exception as exc:
        raise _wrap(exc) from exc


async def generate_totp_async(
    secret_key: str,
    hash_algo: Union[str, Algorithm] = "SHA-1",
    *,
    timestamp: Optional[float] = None,
    provider: Optional[HmacProvider] = None,
    strict_secret: bool = False,
) -> str:
    """
    Coroutine form of :func:`generate_totp`.

    The provider's ``import_key`` and ``sign`` may be plain methods or
    coroutines; their results are awaited before truncation.
    """
    try:
        key, step, algorithm = _prepare(secret_key, hash_algo, timestamp, strict_secret)
        return await generate_hotp_async(key, step, DIGITS, algorithm, provider)
    except Exception as exc:
        raise _wrap(exc) from exc
