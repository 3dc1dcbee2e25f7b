"""
Utility helpers for totpgen.
"""

import base64
import logging
import re

from core.errors import DecodeError

logger = logging.getLogger(__name__)

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_WHITESPACE = re.compile(r"\s+")


# ── Base32 ────────────────────────────────────────────────────────────────────

def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip all whitespace and uppercase.

    No padding is added and no characters are validated here.
    """
    return _WHITESPACE.sub("", secret).upper()


def decode_secret(secret: str, strict: bool = False) -> bytes:
    """
    Decode a base32-encoded secret string to raw bytes.

    Characters outside the RFC 4648 alphabet are dropped before the bits
    are packed, so ``"AB1CDEFG"`` decodes exactly like ``"ABCDEFG"``.  A
    mistyped secret therefore still yields a key (and a wrong code); pass
    ``strict=True`` to reject such input instead.  Trailing bits that do
    not fill a whole byte are discarded.

    Args:
        secret: Base32 secret (whitespace is ignored, case-insensitive).
        strict: Raise on characters outside the alphabet.  ``=`` padding
                is always accepted.

    Returns:
        Raw key bytes.  Empty if no alphabet characters were present.

    Raises:
        DecodeError: In strict mode on stray characters, or on an
            unexpected fault while packing the bits.
    """
    cleaned = normalize_secret(secret)

    if strict:
        stray = sorted({ch for ch in cleaned if ch not in BASE32_ALPHABET and ch != "="})
        if stray:
            raise DecodeError(
                "Failed to convert base32 string: invalid characters "
                + ", ".join(repr(ch) for ch in stray)
            )

    try:
        bits = "".join(
            format(BASE32_ALPHABET.index(ch), "05b")
            for ch in cleaned
            if ch in BASE32_ALPHABET
        )
        key = bytes(
            int(bits[i : i + 8], 2) for i in range(0, len(bits) - len(bits) % 8, 8)
        )
    except (ValueError, TypeError) as exc:
        raise DecodeError(f"Failed to convert base32 string: {exc}") from exc

    logger.debug("Decoded secret into %d key bytes", len(key))
    return key


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")
