import base64

import pytest

from kraken_api.exceptions import SigningPreconditionError
from kraken_api.signing import Credentials, sign, sign_b64

ZERO_SECRET = bytes(32)
BALANCE_NONCE = 1700000000123456
BALANCE_BODY = "nonce=1700000000123456"
# HMAC-SHA512(32 zero bytes, "/0/private/Balance" + SHA256("1700000000123456nonce=1700000000123456"))
BALANCE_SIGNATURE = "HjPRjfEPCqF9f4hhbOMvojPCjW3lApUOLSK7gUyFfTO8n2MndpxXIlXnk//TaVfVBcQWwNN00UtoCFmbHbIafw=="


def test_balance_golden_signature():
    assert sign_b64(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY) == BALANCE_SIGNATURE


def test_published_add_order_example():
    """Example from Kraken's REST authentication documentation."""
    secret = base64.b64decode("kQH5HW/8p1uGOVjbgWA7FunAmGO8lsSUXNsu3eow76sz84Q18fWxnyRzBHCd3pd5nE9qa99HAZtuZuj6F1huXg==")
    body = "nonce=1616492376594&ordertype=limit&pair=XBTUSD&price=37500&type=buy&volume=1.25"
    signature = sign_b64(secret, "/0/private/AddOrder", 1616492376594, body)
    assert signature == "4/dpxb3iT4tp/ZCVEwSnEsLxx0bqyhLpdfOpc6fn7OR8+UClSV5n9E6aSS8MPtnRfp32bAb0nmbRn6H8ndwLUQ=="


def test_sign_returns_raw_sha512_digest():
    raw = sign(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY)
    assert isinstance(raw, bytes)
    assert len(raw) == 64
    assert base64.b64encode(raw).decode() == BALANCE_SIGNATURE


def test_sign_is_deterministic_and_input_sensitive():
    base = sign(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY)
    assert sign(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY) == base

    variants = [
        sign(ZERO_SECRET, "/0/private/OpenOrders", BALANCE_NONCE, BALANCE_BODY),
        sign(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE + 1, BALANCE_BODY),
        sign(ZERO_SECRET, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY + "&asset=XBT"),
        sign(b"\x01" + bytes(31), "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY),
    ]
    assert all(v != base for v in variants)
    assert len(set(variants)) == len(variants)


@pytest.mark.parametrize("secret", [b"", None])
def test_missing_secret_fails_closed(secret):
    with pytest.raises(SigningPreconditionError, match="secret"):
        sign(secret, "/0/private/Balance", BALANCE_NONCE, BALANCE_BODY)


@pytest.mark.parametrize("path", ["", "0/private/Balance", "/0/private/Bal ance", "/0/private/Balançe"])
def test_malformed_path_fails_closed(path):
    with pytest.raises(SigningPreconditionError, match="path"):
        sign(ZERO_SECRET, path, BALANCE_NONCE, BALANCE_BODY)


@pytest.mark.parametrize("nonce", [-1, "1700000000123456", True, 1.5])
def test_invalid_nonce_fails_closed(nonce):
    with pytest.raises(SigningPreconditionError, match="Nonce"):
        sign(ZERO_SECRET, "/0/private/Balance", nonce, BALANCE_BODY)


def test_credentials_decode_base64_secret():
    creds = Credentials.from_encoded("K", base64.b64encode(ZERO_SECRET).decode())
    assert creds.api_key == "K"
    assert creds.api_secret == ZERO_SECRET


def test_credentials_repr_hides_secret():
    creds = Credentials.from_encoded("K", base64.b64encode(b"very-secret").decode())
    assert "very-secret" not in repr(creds)
    assert "api_secret" not in repr(creds)


def test_credentials_absent_for_public_only_client():
    assert Credentials.from_encoded(None, None) is None
    assert Credentials.from_encoded("", "") is None


def test_credentials_require_both_parts():
    with pytest.raises(SigningPreconditionError, match="required"):
        Credentials.from_encoded("K", None)
    with pytest.raises(SigningPreconditionError, match="required"):
        Credentials.from_encoded(None, "AAAA")


def test_credentials_reject_invalid_base64():
    with pytest.raises(SigningPreconditionError, match="base64"):
        Credentials.from_encoded("K", "not base64!!")
