from urllib.parse import urlencode

from otpkit.entry import DecodedEntry, EntryDecoder, Metadata, TotpContent
from otpkit.store import EncryptedRecord, encrypt


KEY = bytes(range(32))
KEY_HEX = KEY.hex()
KEY_B64 = "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHh8="

# ASCII "12345678901234567890", the RFC 6238 SHA1 test secret
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def totp_uri(label="Example:alice", secret=RFC_SECRET, **params):
    query = {"secret": secret}
    query.update(params)
    return f"otpauth://totp/{label}?{urlencode(query)}"


def make_record(
    decoder: EntryDecoder,
    record_id: str,
    content=None,
    metadata: Metadata = Metadata(),
    key: bytes = KEY,
) -> EncryptedRecord:
    plaintext = decoder.encode(DecodedEntry(metadata, content))
    return encrypt(record_id, plaintext, key)


def make_totp_record(decoder, record_id, entry_id="", **uri_kwargs):
    return make_record(
        decoder,
        record_id,
        TotpContent(totp_uri(**uri_kwargs)),
        Metadata(name="entry", id=entry_id),
    )
