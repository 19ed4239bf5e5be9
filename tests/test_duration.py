from datetime import timedelta

import pytest

from retention.duration import DEFAULT_WINDOW, format_duration, parse_duration
from retention.errors import ConfigurationError, DurationFormatError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5d", timedelta(days=5)),
        ("5 D", timedelta(days=5)),
        ("  30days ", timedelta(days=30)),
        ("5", timedelta(days=5)),
        ("00:05:00", timedelta(minutes=5)),
        ("00:00:05", timedelta(seconds=5)),
        ("01:00", timedelta(hours=1)),
        ("5.00:00:00", timedelta(days=5)),
        ("1.02:03:04.5", timedelta(days=1, hours=2, minutes=3, seconds=4, milliseconds=500)),
        ("PT5M", timedelta(minutes=5)),
        ("p1dt12h", timedelta(days=1, hours=12)),
    ],
)
def test_parse_accepted_forms(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "abc",
        "d",
        "-5d",
        "5x",
        "1.2.3",
        "24:00:00",
        "00:60:00",
        "00:00:60",
        "P1Y",
        "P2M",
        "99999999999d",
    ],
)
def test_parse_rejects_malformed(text):
    with pytest.raises(DurationFormatError):
        parse_duration(text)


def test_parse_error_is_value_and_configuration_error():
    with pytest.raises(ValueError):
        parse_duration("nope")
    with pytest.raises(ConfigurationError):
        parse_duration("nope")


def test_parse_rejects_non_string():
    with pytest.raises(DurationFormatError):
        parse_duration(None)


def test_format_canonical_strings():
    assert format_duration(timedelta(minutes=5)) == "00:05:00"
    assert format_duration(timedelta(days=5)) == "5.00:00:00"
    assert format_duration(DEFAULT_WINDOW) == "36500.00:00:00"
    assert format_duration(timedelta(seconds=4, milliseconds=500)) == "00:00:04.5000000"


@pytest.mark.parametrize("text", ["5d", "5", "00:05:00", "5.00:00:00", "1.02:03:04.25", "PT90M"])
def test_parse_format_round_trip(text):
    parsed = parse_duration(text)
    assert parse_duration(format_duration(parsed)) == parsed


def test_default_window_is_a_century():
    assert DEFAULT_WINDOW == timedelta(days=36500)
