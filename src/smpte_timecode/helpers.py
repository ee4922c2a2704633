"""Helper values, errors and units for Timecode handling and byproducts."""

from __future__ import annotations

import sys
from datetime import timedelta
from fractions import Fraction

if sys.version_info >= (3, 11):
    _rate_like_type = Fraction | str | float | tuple[int, int]
else:
    from typing import Tuple, Union
    _rate_like_type = Union[Fraction, str, float, Tuple[int, int]]

_RateLike = _rate_like_type

# Duration units, in nanoseconds.
NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


def to_nanoseconds(duration: int | timedelta) -> int:
    """Convert the given duration to an integer number of nanoseconds.

    Args:
        duration (int | timedelta): Either an integer count of nanoseconds or a
            ``datetime.timedelta``.

    Raises:
        TypeError: If the duration is neither an int nor a timedelta.

    Returns:
        int: The duration in nanoseconds.
    """
    if isinstance(duration, timedelta):
        micros = (duration.days * 86400 + duration.seconds) * 1000000
        return (micros + duration.microseconds) * MICROSECOND
    if isinstance(duration, int) and not isinstance(duration, bool):
        return duration
    raise TypeError(
        "duration should be an int of nanoseconds or a timedelta, "
        f"not a {duration.__class__.__name__}"
    )


class _Timestamp:
    """Wall-clock position of a timecode, at nanosecond precision.

    Args:
        ns (int): Position in nanoseconds. Cannot be negative.
        usec_precision (bool): Print microseconds instead of milliseconds.
    """

    def __init__(self, ns: int, usec_precision: bool = False) -> None:
        if ns < 0:
            raise ValueError(f"Timestamp cannot be negative, got {ns}.")
        self.usec_precision = usec_precision
        self._ns = ns

    def __float__(self) -> float:
        return self._ns / SECOND

    def total_seconds(self) -> float:
        """Return the time in seconds of this Timestamp instance as a float.

        Returns:
            float: timestamp value in seconds of this instance
        """
        return float(self)

    def exact(self) -> Fraction:
        """Return the time in seconds of this Timestamp instance as a fraction.

        Returns:
            Fraction: exact timestamp value in seconds of this instance.
        """
        return Fraction(self._ns, SECOND)

    def nanoseconds(self) -> int:
        """Return the integer nanoseconds of this Timestamp instance."""
        return self._ns

    def _other_ns(self, other: object) -> Fraction | None:
        if isinstance(other, __class__):
            return Fraction(other._ns)
        if isinstance(other, (Fraction, int, float)):
            return Fraction(other) * SECOND
        return None

    def __eq__(self, other: object) -> bool:
        value = self._other_ns(other)
        if value is None:
            return NotImplemented
        return self._ns == value

    def __lt__(self, other: _Timestamp | float | Fraction) -> bool:
        value = self._other_ns(other)
        if value is None:
            return NotImplemented
        return self._ns < value

    def __le__(self, other: _Timestamp | float | Fraction) -> bool:
        value = self._other_ns(other)
        if value is None:
            return NotImplemented
        return self._ns <= value

    def __gt__(self, other: _Timestamp | float | Fraction) -> bool:
        value = self._other_ns(other)
        if value is None:
            return NotImplemented
        return self._ns > value

    def __ge__(self, other: _Timestamp | float | Fraction) -> bool:
        value = self._other_ns(other)
        if value is None:
            return NotImplemented
        return self._ns >= value

    def __hash__(self) -> int:
        return hash(self._ns)

    def __str__(self) -> str:
        """Convert the _Timestamp instance to a ``hh:mm:ss.fff`` string.

        Returns:
            string: Timestamp string of this _Timestamp instance.
        """
        seconds, rest = divmod(self._ns, SECOND)
        hh = seconds // 3600
        mm = seconds // 60 % 60
        ss = seconds % 60
        if self.usec_precision:
            s_decimal_part = f"{rest // MICROSECOND:06d}"
        else:
            s_decimal_part = f"{rest // MILLISECOND:03d}"
        return f"{hh:02d}:{mm:02d}:{ss:02d}.{s_decimal_part}"

    def __repr__(self) -> str:
        usec_part = ", usec_precision=True" * self.usec_precision
        return f"{__class__.__name__}({self._ns}{usec_part})"
####

#%%
class TimecodeError(Exception):
    """Raised when an error occurred in timecode calculation."""


class RateSyntaxError(TimecodeError, ValueError):
    """Raised when a text is not a rate index, decimal or rational rate.

    Args:
        text (str): The text that failed to parse.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f'timecode: parsing rate "{text}": invalid syntax')


class TimecodeSyntaxError(TimecodeError, ValueError):
    """Raised when a text is not a well-formed ``hh:mm:ss:ff`` timecode.

    Args:
        text (str): The text that failed to parse.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f'timecode: parsing timecode "{text}": invalid syntax')
