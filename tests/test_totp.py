import pytest

from otpkit.core import HASH_ALGORITHM, InvalidSecretError
from otpkit.totp import (
    Account,
    GeneratedCode,
    format_code,
    generate,
    parse_b32_key,
)
from otpkit.uri import OtpParameters

from .util import RFC_SECRET

SHA256_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZA"
SHA512_SECRET = (
    "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQGEZDGNA"
)

SECRETS = {
    HASH_ALGORITHM.SHA1: RFC_SECRET,
    HASH_ALGORITHM.SHA256: SHA256_SECRET,
    HASH_ALGORITHM.SHA512: SHA512_SECRET,
}


def account(secret=RFC_SECRET, **kwargs):
    kwargs.setdefault("id", "1")
    kwargs.setdefault("name", "alice")
    kwargs.setdefault("issuer", "Example")
    return Account(secret=secret, **kwargs)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("abba", b"\0B"),
        ("ABBA", b"\0B"),
        ("ABBA====", b"\0B"),
        ("AB BA", b"\0B"),
        (" ab\tba\n", b"\0B"),
        ("JBSWY3DPEHPK3PXP", b"Hello!\xde\xad\xbe\xef"),
        (RFC_SECRET, b"12345678901234567890"),
        ("", b""),
    ],
)
def test_parse_b32_key(key, expected):
    assert parse_b32_key(key) == expected


@pytest.mark.parametrize(
    "key", ["ABB1", "AB8A", "A", "ABC", "abba!", "ABBA=A", "GEZD\u00e9", "\u00e9"]
)
def test_parse_b32_key_invalid(key):
    with pytest.raises(InvalidSecretError):
        parse_b32_key(key)


@pytest.mark.parametrize(
    ("payload", "digits", "expected"),
    [
        (b"\0" * 20, 6, "000000"),
        (b"\0" * 20, 8, "00000000"),
        (b"\x00\xbc\x61\x4e" + b"\0" * 16, 6, "345678"),
        (b"\x49\x96\x02\xd2" + b"\0" * 16, 8, "34567890"),
        # Top bit is masked off
        (b"\xff\xff\xff\xff" + b"\0" * 16, 10, "2147483647"),
        # Offset from the low nibble of the last byte
        (b"\0" * 4 + b"\x00\xbc\x61\x4e" + b"\0" * 11 + b"\x04", 6, "345678"),
    ],
)
def test_format_code(payload, digits, expected):
    assert format_code(payload, digits) == expected


@pytest.mark.parametrize(
    ("timestamp", "algorithm", "expected"),
    [
        (59, HASH_ALGORITHM.SHA1, "94287082"),
        (59, HASH_ALGORITHM.SHA256, "46119246"),
        (59, HASH_ALGORITHM.SHA512, "90693936"),
        (1111111109, HASH_ALGORITHM.SHA1, "07081804"),
        (1111111109, HASH_ALGORITHM.SHA256, "68084774"),
        (1111111109, HASH_ALGORITHM.SHA512, "25091201"),
        (1111111111, HASH_ALGORITHM.SHA1, "14050471"),
        (1111111111, HASH_ALGORITHM.SHA256, "67062674"),
        (1111111111, HASH_ALGORITHM.SHA512, "99943326"),
        (1234567890, HASH_ALGORITHM.SHA1, "89005924"),
        (1234567890, HASH_ALGORITHM.SHA256, "91819424"),
        (1234567890, HASH_ALGORITHM.SHA512, "93441116"),
        (2000000000, HASH_ALGORITHM.SHA1, "69279037"),
        (2000000000, HASH_ALGORITHM.SHA256, "90698825"),
        (2000000000, HASH_ALGORITHM.SHA512, "38618901"),
        (20000000000, HASH_ALGORITHM.SHA1, "65353130"),
        (20000000000, HASH_ALGORITHM.SHA256, "77737706"),
        (20000000000, HASH_ALGORITHM.SHA512, "47863826"),
    ],
)
def test_rfc6238_vectors(timestamp, algorithm, expected):
    acc = account(SECRETS[algorithm], digits=8, algorithm=algorithm)
    assert generate(acc, timestamp).current == expected


def test_six_digits():
    assert generate(account(), 59).current == "287082"


def test_unpadded_lowercase_secret():
    assert generate(account(SHA256_SECRET.lower()), 59) == generate(
        account(SHA256_SECRET), 59
    )


def test_next_is_following_window():
    acc = account(digits=8)
    code = generate(acc, 1111111109)
    assert code.current == "07081804"
    assert code.next == "14050471"


@pytest.mark.parametrize("timestamp", [0, 29, 30, 59, 1111111109, 1234567890])
@pytest.mark.parametrize("period", [15, 30, 60])
def test_next_equals_current_one_period_later(timestamp, period):
    acc = account(period=period)
    assert generate(acc, timestamp).next == generate(acc, timestamp + period).current


def test_boundary_changes_code():
    acc = account(digits=8)
    assert generate(acc, 59).current != generate(acc, 60).current
    assert generate(acc, 30).current == generate(acc, 59).current


@pytest.mark.parametrize(
    ("timestamp", "period", "remaining"),
    [(0, 30, 30), (1, 30, 29), (29, 30, 1), (59, 30, 1), (60, 30, 30), (59, 60, 1)],
)
def test_seconds_remaining(timestamp, period, remaining):
    assert generate(account(period=period), timestamp).seconds_remaining == remaining


def test_generate_is_deterministic():
    acc = account()
    assert generate(acc, 1234567890) == generate(acc, 1234567890)
    assert isinstance(generate(acc, 0), GeneratedCode)


def test_generate_default_time(monkeypatch):
    monkeypatch.setattr("otpkit.totp.time", lambda: 59.7)
    assert generate(account(digits=8)).current == "94287082"


def test_generate_negative_time():
    with pytest.raises(ValueError):
        generate(account(), -1)


def test_generate_invalid_secret():
    with pytest.raises(InvalidSecretError) as exc_info:
        generate(account("not base32!", id="bad"), 59)
    assert exc_info.value.account_id == "bad"


@pytest.mark.parametrize("kwargs", [{"period": 0}, {"digits": 0}, {"period": -30}])
def test_account_requires_positive_values(kwargs):
    with pytest.raises(ValueError):
        account(**kwargs)


def test_account_from_parameters():
    params = OtpParameters.parse_uri(
        "otpauth://totp/Example:alice?secret=ABBA&digits=8&algorithm=SHA256"
    )
    acc = Account.from_parameters("id-1", params)
    assert acc == Account(
        id="id-1",
        name="alice",
        issuer="Example",
        secret="ABBA",
        period=30,
        digits=8,
        algorithm=HASH_ALGORITHM.SHA256,
    )


def test_account_sorting():
    a = account(id="1", issuer="", name="zed")
    b = account(id="2", issuer="beta", name="x")
    c = account(id="3", issuer="Alpha", name="y")
    assert sorted([a, b, c]) == [c, b, a]


def test_account_display_name():
    assert account(issuer="Example", name="alice").display_name == "Example:alice"
    assert account(issuer="", name="alice").display_name == "alice"


def test_account_repr_hides_secret():
    assert RFC_SECRET not in repr(account())
