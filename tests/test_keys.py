import pytest

from otpkit.core import InvalidKeyError
from otpkit.keys import SecretKey, is_hex_key, validate_key

from .util import KEY, KEY_B64, KEY_HEX


def test_hex_and_base64_are_the_same_key():
    assert validate_key(KEY_HEX) == validate_key(KEY_B64) == KEY


@pytest.mark.parametrize(
    "value",
    [
        KEY_HEX.upper(),
        f"  {KEY_HEX}\n",
        KEY_B64.rstrip("="),
        f"\t{KEY_B64} ",
    ],
)
def test_accepted_forms(value):
    key = validate_key(value)
    assert isinstance(key, SecretKey)
    assert key == KEY


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        KEY_HEX[:-1],  # 63 characters
        KEY_HEX + "0",  # 65 characters
        "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHg==",  # 31 bytes
        KEY_B64 * 2,
        "not a key!",
        "g" * 64,
        KEY_B64[:-2] + "\u00e9=",  # non-ASCII
        "\u00e9" * 64,
    ],
)
def test_rejected_forms(value):
    with pytest.raises(InvalidKeyError):
        validate_key(value)


def test_invalid_key_is_value_error():
    with pytest.raises(ValueError):
        validate_key("xyz")


def test_secret_key_length():
    with pytest.raises(InvalidKeyError):
        SecretKey(b"\0" * 31)
    with pytest.raises(InvalidKeyError):
        SecretKey(b"\0" * 33)
    assert len(SecretKey(b"\0" * 32)) == 32


def test_secret_key_repr_hides_key():
    assert KEY_HEX not in repr(validate_key(KEY_HEX))
    assert "redacted" in repr(validate_key(KEY_HEX))


def test_is_hex_key():
    assert is_hex_key(KEY_HEX)
    assert not is_hex_key(KEY_B64)
