"""
Test Configuration
==================

Pytest fixtures shared by the timecode tests.
"""

import logging

import pytest

from smpte_timecode import MILLISECOND, Rate, TimecodeBuilder


@pytest.fixture
def ntsc():
    """Provide a builder for 29.97 drop-frame timecodes."""
    return TimecodeBuilder(rate="30000/1001")


@pytest.fixture
def debug_log(caplog):
    """Capture the package's debug log records."""
    caplog.set_level(logging.DEBUG, logger="smpte_timecode")
    return caplog


@pytest.fixture
def check_timecode():
    """Provide an assertion helper comparing a timecode to a table row."""

    def _check(row, code):
        _, num, den, frame, second, text = row
        rate = Rate.from_fraction(num, den)
        assert code.rate == rate
        assert code.millisecond == rate.duration(frame) // MILLISECOND
        assert code.second == second
        assert code.frame == frame
        assert code.frame_at_rate(rate) == frame
        assert str(code) == text

    return _check
