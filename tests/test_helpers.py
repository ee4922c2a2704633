from datetime import timedelta
from fractions import Fraction

import pytest

from smpte_timecode import (
    MICROSECOND,
    MILLISECOND,
    SECOND,
    RateSyntaxError,
    TimecodeError,
    TimecodeSyntaxError,
    to_nanoseconds,
)
from smpte_timecode.helpers import _Timestamp


@pytest.mark.parametrize("value,expected", [
    (0, 0),
    (1234, 1234),
    (-5, -5),
    (timedelta(seconds=1), SECOND),
    (timedelta(microseconds=7), 7 * MICROSECOND),
    (timedelta(days=1), 86400 * SECOND),
    (-timedelta(milliseconds=40), -40 * MILLISECOND),
])
def test_to_nanoseconds(value, expected):
    assert to_nanoseconds(value) == expected


@pytest.mark.parametrize("value", [1.5, "1", None, True])
def test_to_nanoseconds_rejects_other_types(value):
    with pytest.raises(TypeError):
        to_nanoseconds(value)


def test_timestamp_values():
    stamp = _Timestamp(1_001_000_000)
    assert float(stamp) == 1.001
    assert stamp.total_seconds() == 1.001
    assert stamp.exact() == Fraction(1001, 1000)
    assert stamp.nanoseconds() == 1_001_000_000


def test_timestamp_rejects_negative_values():
    with pytest.raises(ValueError):
        _Timestamp(-1)


def test_timestamp_comparisons():
    stamp = _Timestamp(SECOND)
    assert stamp == 1
    assert stamp == Fraction(1)
    assert stamp == _Timestamp(SECOND)
    assert stamp < 1.5
    assert stamp <= _Timestamp(SECOND)
    assert stamp > Fraction(1, 2)
    assert stamp >= 1
    assert stamp != "1"
    assert hash(stamp) == hash(_Timestamp(SECOND))
    with pytest.raises(TypeError):
        stamp < "2"


@pytest.mark.parametrize("ns,usec,expected", [
    (0, False, "00:00:00.000"),
    (3723 * SECOND + 456 * MILLISECOND, False, "01:02:03.456"),
    (25 * 3600 * SECOND, False, "25:00:00.000"),
    (SECOND + 1_234 * MICROSECOND, True, "00:00:01.001234"),
])
def test_timestamp_str(ns, usec, expected):
    assert str(_Timestamp(ns, usec_precision=usec)) == expected


def test_timestamp_repr():
    assert repr(_Timestamp(5)) == "_Timestamp(5)"
    assert repr(_Timestamp(5, True)) == "_Timestamp(5, usec_precision=True)"


def test_syntax_errors_carry_text():
    error = RateSyntaxError("29,97")
    assert error.text == "29,97"
    assert str(error) == 'timecode: parsing rate "29,97": invalid syntax'
    assert isinstance(error, TimecodeError)
    assert isinstance(error, ValueError)

    error = TimecodeSyntaxError("1:2:3:4:5")
    assert error.text == "1:2:3:4:5"
    assert str(error) == (
        'timecode: parsing timecode "1:2:3:4:5": invalid syntax'
    )
    assert isinstance(error, TimecodeError)
