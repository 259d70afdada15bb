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

from enum import IntEnum, unique
from typing import Optional


@unique
class HASH_ALGORITHM(IntEnum):
    """Hash algorithms usable for TOTP code generation."""

    SHA1 = 0x01
    SHA256 = 0x02
    SHA512 = 0x03


class OtpError(ValueError):
    """Base class for all errors raised by otpkit."""


class InvalidKeyError(OtpError):
    """The store key is not 32 bytes of hex or base64."""


class RecordError(OtpError):
    """A single record could not be turned into an account.

    Errors of this type only affect the record they were raised for, and a batch
    import continues with the next record.
    """


class DecryptionError(RecordError):
    """The record was malformed, or failed authentication."""


class SchemaError(RecordError):
    """The decrypted record is not a well-formed entry message."""


class UriParseError(RecordError):
    """The OTP URI did not match the otpauth:// grammar, or lacked a secret."""


class UnsupportedEntryError(RecordError):
    """The entry holds an OTP type that codes cannot be generated for."""


class MissingIdentityError(RecordError):
    """Neither the entry metadata nor the record provided an id."""


class InvalidSecretError(OtpError):
    """An account secret is not valid base32."""

    def __init__(self, message: Optional[str] = None, account_id: Optional[str] = None):
        super().__init__(message or "Invalid base32 secret")
        self.account_id = account_id


def bytes2int(data: bytes) -> int:
    return int.from_bytes(data, "big")
