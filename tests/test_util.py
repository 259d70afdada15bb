import pytest

from otpkit.core import HASH_ALGORITHM
from otpkit.logging import LOG_LEVEL
from otpman._cli.util import EnumChoice, pretty_print


def test_enum_choice_defaults():
    choice = EnumChoice(LOG_LEVEL)
    assert choice.hidden == ()
    assert choice.choices_names == [level.name for level in LOG_LEVEL]
    assert choice.convert("debug", None, None) == LOG_LEVEL.DEBUG


def test_enum_choice_hidden_is_per_instance():
    hidden = EnumChoice(LOG_LEVEL, hidden=[LOG_LEVEL.NOTSET])
    assert "NOTSET" not in hidden.choices_names
    assert "NOTSET" in EnumChoice(LOG_LEVEL).choices_names


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", ["plain"]),
        (HASH_ALGORITHM.SHA256, ["SHA256"]),
        ({"Name": "alice", "Digits": 6}, ["Name:   alice", "Digits: 6"]),
    ],
)
def test_pretty_print(value, expected):
    assert pretty_print(value) == expected
