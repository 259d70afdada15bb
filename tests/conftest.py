import pytest
from click.testing import CliRunner

from otpkit.entry import EntryDecoder
from otpkit.keys import SecretKey
from otpman._cli.__main__ import cli
from otpman.settings import Configuration, StoreKeys

from .util import KEY


@pytest.fixture()
def decoder():
    return EntryDecoder()


@pytest.fixture()
def key():
    return SecretKey(KEY)


@pytest.fixture()
def settings_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(StoreKeys, "_dir", str(tmp_path / "data"))
    monkeypatch.setattr(Configuration, "_dir", str(tmp_path / "config"))
    monkeypatch.delenv("OTPMAN_KEY", raising=False)
    return tmp_path


@pytest.fixture()
def fake_keyring(monkeypatch):
    passwords = {}

    def get_password(service, username):
        return passwords.get((service, username))

    def set_password(service, username, password):
        passwords[(service, username)] = password

    monkeypatch.setattr("keyring.get_password", get_password)
    monkeypatch.setattr("keyring.set_password", set_password)
    return passwords


@pytest.fixture()
def otpman_cli(settings_dir, fake_keyring):
    def _otpman_cli(*argv, **kwargs):
        runner = CliRunner()
        result = runner.invoke(cli, list(argv), obj={}, **kwargs)
        if result.exit_code != 0:
            raise result.exception
        return result

    return _otpman_cli
