import json

import keyring
import pytest

from otpkit.keys import SecretKey
from otpkit.logging import LOG_LEVEL
from otpman.settings import (
    STORE_KEY_NAME,
    Configuration,
    KeystoreError,
    StoreKeys,
)

from .util import KEY


@pytest.fixture(autouse=True)
def isolated(settings_dir, fake_keyring):
    return fake_keyring


def test_store_key_round_trip():
    StoreKeys().put_store_key(SecretKey(KEY))
    assert StoreKeys().get_store_key() == KEY


def test_store_key_is_wrapped_on_disk(settings_dir):
    StoreKeys().put_store_key(SecretKey(KEY))
    with (settings_dir / "data" / "store_keys.json").open() as f:
        data = json.load(f)
    assert KEY.hex() not in data[STORE_KEY_NAME]


def test_no_store_key():
    keys = StoreKeys()
    assert not keys.has_store_key
    assert keys.get_store_key() is None
    assert keys.forget_store_key() is False


def test_forget_store_key():
    StoreKeys().put_store_key(SecretKey(KEY))
    assert StoreKeys().forget_store_key() is True
    assert not StoreKeys().has_store_key


def test_undecryptable_store_key_is_discarded():
    keys = StoreKeys()
    keys[STORE_KEY_NAME] = "garbage"
    keys.write()

    assert StoreKeys().get_store_key() is None
    assert not StoreKeys().has_store_key


@pytest.mark.parametrize("value", ["not hex", "00" * 31, 42])
def test_invalid_store_key_is_discarded(value):
    keys = StoreKeys()
    keys.put_store_key(SecretKey(KEY))
    keys[STORE_KEY_NAME] = keys._unlock().encrypt(json.dumps(value).encode()).decode()
    keys.write()

    assert StoreKeys().get_store_key() is None
    assert not StoreKeys().has_store_key


def test_locked_keyring_keeps_store_key(monkeypatch):
    StoreKeys().put_store_key(SecretKey(KEY))

    def locked(service, username):
        raise keyring.errors.KeyringLocked("locked")

    monkeypatch.setattr("keyring.get_password", locked)
    keys = StoreKeys()
    assert keys.get_store_key() is None
    assert keys.has_store_key
    with pytest.raises(KeystoreError):
        keys.put_store_key(SecretKey(KEY))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("", None),
        ("debug", LOG_LEVEL.DEBUG),
        ("TRAFFIC", LOG_LEVEL.TRAFFIC),
    ],
)
def test_configured_log_level(value, expected):
    config = Configuration()
    if value is not None:
        config["log_level"] = value
        config.write()
    assert Configuration().log_level == expected


def test_invalid_configured_log_level():
    config = Configuration()
    config["log_level"] = "loud"
    config.write()
    with pytest.raises(ValueError):
        Configuration().log_level
