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

from .core import DecryptionError, InvalidKeyError
from .keys import SECRET_KEY_SIZE

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from dataclasses import dataclass
from typing import Optional

import logging
import os


logger = logging.getLogger(__name__)


NONCE_SIZE = 12
TAG_SIZE = 16
MIN_BLOB_SIZE = NONCE_SIZE + TAG_SIZE

# Associated data bound to every entry, fixed by the store format
ENTRY_CONTENT_AAD = b"entrycontent"


@dataclass(frozen=True)
class EncryptedRecord:
    """An encrypted entry as read from the store.

    The blob is laid out as nonce (12 bytes), ciphertext, tag (16 bytes).
    """

    id: str
    blob: bytes

    def __repr__(self):
        return f"EncryptedRecord(id={self.id!r}, blob=<{len(self.blob)} bytes>)"


def _check_key(key: bytes) -> None:
    if len(key) != SECRET_KEY_SIZE:
        raise InvalidKeyError(f"Key must be {SECRET_KEY_SIZE} bytes")


def decrypt(record: EncryptedRecord, key: bytes) -> bytes:
    """Decrypt and authenticate a single record.

    No plaintext is returned unless the authentication tag verifies.

    :param record: The record to decrypt.
    :param key: The 32 byte store key.
    :return: The plaintext entry.
    :raises DecryptionError: If the blob is malformed or fails authentication.
    """
    _check_key(key)
    blob = record.blob
    if len(blob) < MIN_BLOB_SIZE:
        raise DecryptionError(
            f"Record {record.id!r} is too short ({len(blob)} < {MIN_BLOB_SIZE} bytes)"
        )

    nonce = blob[:NONCE_SIZE]
    # AESGCM expects the tag appended to the ciphertext, as stored
    try:
        plaintext = AESGCM(bytes(key)).decrypt(
            nonce, blob[NONCE_SIZE:], ENTRY_CONTENT_AAD
        )
    except InvalidTag:
        raise DecryptionError(f"Authentication failed for record {record.id!r}")
    except (ValueError, OverflowError) as e:
        raise DecryptionError(f"Unable to decrypt record {record.id!r}: {e}")

    logger.debug(f"Decrypted record {record.id!r}, {len(plaintext)} bytes")
    return plaintext


def encrypt(
    record_id: str, plaintext: bytes, key: bytes, nonce: Optional[bytes] = None
) -> EncryptedRecord:
    """Encrypt an entry into the store's record layout.

    :param record_id: The id to give the record.
    :param plaintext: The serialized entry.
    :param key: The 32 byte store key.
    :param nonce: An explicit 12 byte nonce, a random one is used if omitted.
    """
    _check_key(key)
    if nonce is None:
        nonce = os.urandom(NONCE_SIZE)
    elif len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes")

    sealed = AESGCM(bytes(key)).encrypt(nonce, plaintext, ENTRY_CONTENT_AAD)
    return EncryptedRecord(record_id, nonce + sealed)
