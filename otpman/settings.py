# Copyright (c) 2026 Yubico AB
# All rights reserved.
#
#   Redistribution and use in source and binary forms, with or
#   without modification, are permitted provided that the following
#   conditions are met:
#
#    1. Redistributions of source code must retain the above copyright
#       notice, this list of conditions and the following disclaimer.
#    2. Redistributions in binary form must reproduce the above
#       copyright notice, this list of conditions and the following
#       disclaimer in the documentation and/or other materials provided
#       with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

from otpkit.keys import SecretKey
from otpkit.logging import LOG_LEVEL

from cryptography.fernet import Fernet, InvalidToken
from pathlib import Path
from typing import Optional

import json
import keyring
import logging
import os


logger = logging.getLogger(__name__)


XDG_DATA_HOME = os.environ.get("XDG_DATA_HOME", "~/.local/share") + "/otpman"
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME", "~/.config") + "/otpman"

KEYRING_SERVICE = os.environ.get("OTPMAN_KEYRING_SERVICE", "otpman")
KEYRING_KEY = os.environ.get("OTPMAN_KEYRING_KEY", "wrap_key")

STORE_KEY_NAME = "store"


class KeystoreError(Exception):
    """Error accessing the OS keystore"""


class _JsonFile(dict):
    _dir = XDG_CONFIG_HOME

    def __init__(self, name: str):
        self.fname = Path(self._dir).expanduser().resolve() / (name + ".json")
        if self.fname.is_file():
            with self.fname.open("r") as fd:
                self.update(json.load(fd))

    def write(self) -> None:
        if not self.fname.parent.is_dir():
            self.fname.parent.mkdir(0o700, parents=True)
        with self.fname.open("w") as fd:
            json.dump(self, fd, indent=2)


class Configuration(_JsonFile):
    """User configuration, read from config.json."""

    _dir = XDG_CONFIG_HOME

    def __init__(self):
        super().__init__("config")

    @property
    def log_level(self) -> Optional[LOG_LEVEL]:
        """The configured default log level, if any.

        :raises ValueError: If the configured value is not a level name.
        """
        name = self.get("log_level")
        if not name:
            return None
        try:
            return LOG_LEVEL[name.upper()]
        except KeyError:
            raise ValueError(f"Invalid log_level in configuration: {name}")


class StoreKeys(_JsonFile):
    """The remembered store key.

    The key is kept as hex, encrypted with a wrapping key held in the OS keyring, so
    the file on disk is useless without access to the keyring.
    """

    _dir = XDG_DATA_HOME

    def __init__(self, keyring_service=KEYRING_SERVICE, keyring_key=KEYRING_KEY):
        super().__init__("store_keys")
        self._service = keyring_service
        self._username = keyring_key
        self._fernet: Optional[Fernet] = None

    def _unlock(self) -> Fernet:
        if self._fernet is None:
            try:
                wrap_key = keyring.get_password(self._service, self._username)
                if wrap_key is None:
                    wrap_key = Fernet.generate_key().decode()
                    keyring.set_password(self._service, self._username, wrap_key)
            except keyring.errors.KeyringError:
                raise KeystoreError("Keyring locked or unavailable")
            self._fernet = Fernet(wrap_key)
        return self._fernet

    @property
    def has_store_key(self) -> bool:
        return STORE_KEY_NAME in self

    def get_store_key(self) -> Optional[SecretKey]:
        """Return the remembered key, or None.

        A remembered value that can't be unwrapped, or isn't a valid key, is
        discarded. A locked keyring leaves it in place.
        """
        if not self.has_store_key:
            return None
        try:
            fernet = self._unlock()
        except KeystoreError as e:
            logger.warning("Unable to read remembered key", exc_info=e)
            return None

        try:
            value = json.loads(fernet.decrypt(self[STORE_KEY_NAME].encode()))
            return SecretKey(bytes.fromhex(value))
        except (InvalidToken, ValueError, TypeError) as e:
            logger.warning(f"Discarding unusable remembered key: {e!r}")
            self.forget_store_key()
            return None

    def put_store_key(self, key: SecretKey) -> None:
        """Remember a key.

        :raises KeystoreError: If the keyring is locked or unavailable.
        """
        fernet = self._unlock()
        self[STORE_KEY_NAME] = fernet.encrypt(json.dumps(key.hex()).encode()).decode()
        self.write()
        logger.info("Store key remembered")

    def forget_store_key(self) -> bool:
        """Delete the remembered key, returning False if there was none."""
        if not self.has_store_key:
            return False
        del self[STORE_KEY_NAME]
        self.write()
        logger.info("Deleted remembered store key")
        return True
