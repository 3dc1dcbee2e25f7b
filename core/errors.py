"""
Exception types raised by the TOTP pipeline.

Each pipeline stage raises its own type; :func:`core.totp.generate_totp`
re-raises any of them as :class:`TotpGenerationError`.
"""


class TotpError(Exception):
    """Base class for every error raised by totpgen."""


class ValidationError(TotpError, ValueError):
    """An input value is outside the accepted set."""


class InvalidAlgorithmError(ValidationError):
    """The requested hash algorithm is not SHA-1, SHA-256 or SHA-512."""


class DecodeError(TotpError, ValueError):
    """The Base32 secret could not be converted to key bytes."""


class CryptoProviderError(TotpError):
    """The HMAC provider rejected the key, the algorithm or the message."""


class GenerationError(TotpError):
    """Counter encoding or dynamic truncation failed."""


class TotpGenerationError(TotpError):
    """Uniform failure type returned to callers of ``generate_totp``."""
