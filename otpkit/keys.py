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

from .core import InvalidKeyError

from base64 import b64decode
import logging
import re


logger = logging.getLogger(__name__)


SECRET_KEY_SIZE = 32

_HEX_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{%d}$" % (SECRET_KEY_SIZE * 2))


class SecretKey(bytes):
    """A 32 byte AES-256 key for the entry store."""

    def __new__(cls, data: bytes):
        if len(data) != SECRET_KEY_SIZE:
            raise InvalidKeyError(
                f"Key must be {SECRET_KEY_SIZE} bytes, got {len(data)} bytes"
            )
        return super(SecretKey, cls).__new__(cls, data)  # type: ignore

    def __repr__(self):
        return "SecretKey(<redacted>)"


def is_hex_key(value: str) -> bool:
    return _HEX_KEY_PATTERN.match(value.strip()) is not None


def validate_key(value: str) -> SecretKey:
    """Parse a store key given as hex or base64 text.

    Surrounding whitespace is ignored. A hex key must be exactly 64 characters, a
    base64 key may omit its trailing padding. Either form must decode to exactly 32
    bytes.

    :param value: The key, as entered by the user.
    :return: The raw key.
    :raises InvalidKeyError: If the value is not a valid key.
    """
    value = value.strip()
    if not value:
        raise InvalidKeyError("Key is empty")

    if _HEX_KEY_PATTERN.match(value):
        logger.debug("Parsing key as hex")
        return SecretKey(bytes.fromhex(value))

    value += "=" * (-len(value) % 4)  # Support unpadded
    try:
        data = b64decode(value, validate=True)
    except ValueError:  # binascii.Error, or non-ASCII input
        raise InvalidKeyError(
            "Invalid key format, expected 64 hex characters or base64"
        )
    logger.debug("Parsing key as base64")
    return SecretKey(data)
