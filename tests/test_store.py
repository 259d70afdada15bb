import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from otpkit.core import DecryptionError, InvalidKeyError
from otpkit.store import (
    ENTRY_CONTENT_AAD,
    MIN_BLOB_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    EncryptedRecord,
    decrypt,
    encrypt,
)

from .util import KEY

NONCE = bytes(range(100, 112))


def test_encrypt_decrypt():
    record = encrypt("1", b"hello entry", KEY)
    assert record.id == "1"
    assert decrypt(record, KEY) == b"hello entry"


def test_blob_layout():
    plaintext = b"some plaintext"
    record = encrypt("1", plaintext, KEY, nonce=NONCE)
    assert record.blob[:NONCE_SIZE] == NONCE
    assert len(record.blob) == NONCE_SIZE + len(plaintext) + TAG_SIZE

    # Matches AES-256-GCM over the same inputs, with the fixed associated data
    expected = AESGCM(KEY).encrypt(NONCE, plaintext, b"entrycontent")
    assert record.blob[NONCE_SIZE:] == expected


def test_random_nonce():
    a = encrypt("1", b"data", KEY)
    b = encrypt("1", b"data", KEY)
    assert a.blob[:NONCE_SIZE] != b.blob[:NONCE_SIZE]


def test_any_bit_flip_fails():
    record = encrypt("1", b"entry", KEY, nonce=NONCE)
    for i in range(len(record.blob) * 8):
        tampered = bytearray(record.blob)
        tampered[i // 8] ^= 1 << (i % 8)
        with pytest.raises(DecryptionError):
            decrypt(EncryptedRecord("1", bytes(tampered)), KEY)


def test_wrong_key_fails():
    record = encrypt("1", b"entry", KEY)
    with pytest.raises(DecryptionError):
        decrypt(record, bytes(32))


def test_wrong_associated_data_fails():
    blob = NONCE + AESGCM(KEY).encrypt(NONCE, b"entry", b"othercontent")
    with pytest.raises(DecryptionError):
        decrypt(EncryptedRecord("1", blob), KEY)


@pytest.mark.parametrize("size", [0, 1, NONCE_SIZE, MIN_BLOB_SIZE - 1])
def test_short_blob(size):
    with pytest.raises(DecryptionError, match="too short"):
        decrypt(EncryptedRecord("1", b"\0" * size), KEY)


def test_empty_plaintext():
    record = encrypt("1", b"", KEY)
    assert len(record.blob) == MIN_BLOB_SIZE
    assert decrypt(record, KEY) == b""


def test_aad_constant():
    assert ENTRY_CONTENT_AAD == b"entrycontent"


@pytest.mark.parametrize("key", [b"", b"\0" * 16, b"\0" * 31, b"\0" * 64])
def test_invalid_key_length(key):
    record = encrypt("1", b"entry", KEY)
    with pytest.raises(InvalidKeyError):
        decrypt(record, key)
    with pytest.raises(InvalidKeyError):
        encrypt("1", b"entry", key)


def test_invalid_nonce_length():
    with pytest.raises(ValueError):
        encrypt("1", b"entry", KEY, nonce=b"\0" * 8)


def test_record_repr_hides_blob():
    record = EncryptedRecord("abc", b"\x01\x02\x03")
    assert repr(record) == "EncryptedRecord(id='abc', blob=<3 bytes>)"
