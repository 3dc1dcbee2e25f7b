"""Tests for core.utils."""

import base64

import pytest

from core.errors import DecodeError
from core.utils import decode_secret, encode_secret, normalize_secret


# ── Normalisation ─────────────────────────────────────────────────────────────

def test_normalize_secret_strips_whitespace() -> None:
    assert normalize_secret(" jbsw y3dp\tehpk\n3pxp ") == "JBSWY3DPEHPK3PXP"


# ── Decoding ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "secret",
    ["JBSWY3DPEHPK3PXP", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", "MZXW6YTBOI======"],
)
def test_decode_matches_stdlib(secret: str) -> None:
    assert decode_secret(secret) == base64.b32decode(secret)


def test_decode_is_case_insensitive() -> None:
    assert decode_secret("jbswy3dpehpk3pxp") == decode_secret("JBSWY3DPEHPK3PXP")


def test_decode_ignores_whitespace() -> None:
    assert decode_secret("ABCD EFGH") == decode_secret("ABCDEFGH")


def test_decode_drops_stray_characters() -> None:
    assert decode_secret("AB1CDEFG") == decode_secret("ABCDEFG")
    assert decode_secret("JBSW-Y3DP!EHPK0PXP") == decode_secret("JBSWY3DPEHPKPXP")


def test_decode_discards_partial_trailing_byte() -> None:
    # 4 characters = 20 bits -> 2 whole bytes
    assert decode_secret("GEZA") == b"12"
    # 1 character = 5 bits -> nothing
    assert decode_secret("G") == b""


def test_decode_without_alphabet_characters_is_empty() -> None:
    assert decode_secret("0189 !?") == b""
    assert decode_secret("") == b""


def test_decode_strict_rejects_stray_characters() -> None:
    with pytest.raises(DecodeError, match="'1'"):
        decode_secret("AB1CDEFG", strict=True)


def test_decode_strict_accepts_padding_and_whitespace() -> None:
    assert decode_secret("GEZA ====", strict=True) == b"12"


def test_decode_roundtrip() -> None:
    raw = b"\x00\x01\x02\x03\x04\x05\x06\x07\x08\x09"
    assert decode_secret(encode_secret(raw)) == raw


def test_encode_secret_has_no_padding() -> None:
    assert encode_secret(b"12") == "GEZA"
