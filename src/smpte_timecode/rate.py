"""Edit rates and the read-only catalog of standard film, video and TV rates."""

from __future__ import annotations

import logging
import math
import re
from enum import IntEnum
from fractions import Fraction
from types import MappingProxyType

from .helpers import NANOSECOND, SECOND, RateSyntaxError, _RateLike

logger = logging.getLogger(__name__)

# Catalog ids with this bit set denote drop-frame rates.
DROP_FRAME_FLAG = 0x10

_DIGITS = re.compile(r"[0-9]+")
_DECIMAL = re.compile(r"[0-9]+(\.[0-9]*)?")

# Texts that stand for "no rate" when coercing.
_UNKNOWN_TEXT = frozenset(["", "-", "--", "NaN", "unknown"])


class RateIndex(IntEnum):
    """Catalog ids of the standard edit rates.

    Id 0 tags timecodes whose value is a literal ``h:m:s`` plus a frame
    remainder rather than a true duration. ``USER_DEFINED`` tags rates that
    are not in the catalog; ids from 16 up are drop-frame.
    """

    UNKNOWN = 0
    R_23976 = 1  # 24000/1001, NOT a drop-frame rate
    R_24 = 2
    R_25 = 3
    R_30 = 4
    R_48 = 5
    R_50 = 6
    R_60 = 7
    R_96 = 8
    R_100 = 9
    R_120 = 10
    USER_DEFINED = 15
    UNKNOWN_DF = DROP_FRAME_FLAG
    R_30DF = DROP_FRAME_FLAG + 4  # 30000/1001
    R_60DF = DROP_FRAME_FLAG + 7  # 60000/1001


#%%
class Rate:
    """An edit rate.

    A rate has a nominal integer ``fps`` by which timecode address labels are
    assigned, and an exact ``numerator/denominator`` rate at which the media
    advances in real time. For 29.97 drop-frame these are 30 and 30000/1001.

    Rates are immutable. Get them from the module constants or through
    :meth:`from_fraction`, :meth:`from_float`, :meth:`parse` and
    :meth:`coerce`, which snap near-standard input onto catalog entries.

    Two rates compare equal when their frame durations are equal, so
    ``Rate.from_fraction(30, 1) == Rate.from_fraction(60000, 2000)``.

    Args:
        index (int): The catalog id, see :class:`RateIndex`.
        fps (int): Nominal label count per second.
        numerator (int): Numerator of the real-time rate.
        denominator (int): Denominator of the real-time rate.
        drop_frames (int): Labels skipped each minute except every tenth.
        frames_per_10min (int): Actual frame count per 10 minute cycle.
    """

    def __init__(
        self,
        index: int,
        fps: int,
        numerator: int,
        denominator: int,
        drop_frames: int = 0,
        frames_per_10min: int | None = None,
    ) -> None:
        self._index = index
        self._fps = fps
        self._numerator = numerator
        self._denominator = denominator
        self._drop_frames = drop_frames
        if frames_per_10min is None:
            frames_per_10min = fps * 600
        self._frames_per_10min = frames_per_10min

    @classmethod
    def from_fraction(cls, numerator: int, denominator: int) -> Rate:
        """Create a rate from a rational ``numerator/denominator`` value.

        Zero values are replaced by 1. When the rate is close to a standard
        rate the catalog entry is returned, otherwise a user-defined rate that
        keeps the exact numerator and denominator.

        Args:
            numerator (int): The rate numerator.
            denominator (int): The rate denominator.

        Raises:
            ValueError: If either value is negative.

        Returns:
            Rate: The standard or user-defined rate.
        """
        if numerator < 0 or denominator < 0:
            raise ValueError(
                f"Invalid rate {numerator}/{denominator} (negative value)."
            )
        numerator = numerator or 1
        denominator = denominator or 1
        fps = numerator / denominator
        rate = _snap(fps)
        if rate is not None:
            return rate
        logger.debug("No standard rate for %d/%d", numerator, denominator)
        return cls(
            RateIndex.USER_DEFINED,
            math.ceil(fps),
            numerator,
            denominator,
            0,
            math.floor(fps * 600),
        )

    @classmethod
    def from_float(cls, fps: float) -> Rate:
        """Create a rate from a floating point frames per second value.

        Values within a small window around 23.976, 29.97 and 59.94 snap to
        the 24000/1001, 30000/1001 drop-frame and 60000/1001 drop-frame
        entries, exact integer values to the integer rates. Anything else
        becomes a user-defined rate of ``round(fps * 1000)/1000``.

        Args:
            fps (float): The frames per second value.

        Raises:
            ValueError: If fps is negative, infinite or NaN.

        Returns:
            Rate: The standard or user-defined rate.
        """
        fps = float(fps)
        if not math.isfinite(fps) or fps < 0:
            raise ValueError(f"Invalid rate {fps!r} (negative or not finite).")
        rate = _snap(fps)
        if rate is not None:
            return rate
        logger.debug("No standard rate for %r fps", fps)
        return cls(
            RateIndex.USER_DEFINED,
            max(math.ceil(fps), 1),
            round(fps * 1000),
            1000,
            0,
            math.floor(fps * 600),
        )

    @classmethod
    def parse(cls, text: str) -> Rate:
        """Convert the given text to a rate.

        The text is read as a catalog index when it is an integer naming a
        catalog entry (``"20"`` is 29.97 drop-frame), as frames per second
        when it is any other integer or a plain decimal (``"25"``,
        ``"23.976"``; no sign, exponent, blanks or underscores),
        and as a rational rate otherwise (``"30000/1001"``).

        Args:
            text (str): The rate expression.

        Raises:
            RateSyntaxError: If the text is none of the above.

        Returns:
            Rate: The parsed rate.
        """
        if _DIGITS.fullmatch(text):
            index = int(text)
            if index in _INDEXED_RATES:
                return _INDEXED_RATES[index]
            return cls.from_float(index)

        if _DECIMAL.fullmatch(text):
            return cls.from_float(float(text))

        numerator, sep, denominator = text.partition("/")
        if (
            sep
            and _DIGITS.fullmatch(numerator)
            and _DIGITS.fullmatch(denominator)
            and int(denominator) > 0
        ):
            return cls.from_fraction(int(numerator), int(denominator))

        logger.debug("Rejected rate %r", text)
        raise RateSyntaxError(text)

    @classmethod
    def coerce(cls, value: Rate | _RateLike | None) -> Rate:
        """Return a rate for any of the accepted rate representations.

        Args:
            value (Rate | Fraction | str | int | float | tuple[int, int] | None):
                A rate, a rational given as a Fraction or a
                ``(numerator, denominator)`` pair, a frames per second number,
                or a text for :meth:`parse`. None and the texts ``""``,
                ``"-"``, ``"--"``, ``"NaN"`` and ``"unknown"`` mean no rate.

        Raises:
            TypeError: If the value has none of the accepted types.

        Returns:
            Rate: The rate.
        """
        if value is None:
            return IDENTITY_RATE
        if isinstance(value, Rate):
            return value
        if isinstance(value, str):
            if value in _UNKNOWN_TEXT:
                return IDENTITY_RATE
            return cls.parse(value)
        if isinstance(value, (tuple, list)):
            numerator, denominator = map(int, value)
            return cls.from_fraction(numerator, denominator)
        if isinstance(value, Fraction):
            return cls.from_fraction(value.numerator, value.denominator)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.from_float(value)
        raise TypeError(
            f"Can not make a rate from a {value.__class__.__name__}"
        )

    @property
    def index(self) -> int:
        """The catalog id of this rate, see :class:`RateIndex`."""
        return self._index

    @property
    def fps(self) -> int:
        """Nominal timecode labels per second."""
        return self._fps

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def drop_frames(self) -> int:
        """Labels dropped once per minute, except every tenth minute."""
        return self._drop_frames

    @property
    def frames_per_10min(self) -> int:
        """Actual frames (and valid labels) per 10 minutes."""
        return self._frames_per_10min

    @property
    def drop_frame(self) -> bool:
        """True if this rate labels frames in drop-frame timecode."""
        return bool(self._index & DROP_FRAME_FLAG)

    @property
    def fraction(self) -> Fraction:
        """The real-time rate as a normalized fraction.

        Raises:
            ZeroDivisionError: For a rate with a zero denominator.
        """
        return Fraction(self._numerator, self._denominator)

    def is_zero(self) -> bool:
        """Return True if this rate has the identity rate's frame duration.

        Timecodes carrying such a rate have no rate assigned yet.
        """
        return self.is_equal(IDENTITY_RATE)

    def is_valid(self) -> bool:
        """Return True if this rate can be used in frame calculations."""
        return self._numerator > 0 and self._denominator > 0

    def index_string(self) -> str:
        return str(int(self._index))

    def rational_string(self) -> str:
        """Return the rate as ``numerator/denominator`` string."""
        return f"{self._numerator}/{self._denominator}"

    def float_string(self) -> str:
        """Return the rate as decimal string.

        Integer rates use one fraction digit, all other rates three.

        Returns:
            str: e.g. "25.0" or "29.970".
        """
        if self._denominator == 0:
            return "0.0"
        if self._denominator == 1:
            return f"{self._numerator:.1f}"
        return f"{self._numerator / self._denominator:.3f}"

    def __float__(self) -> float:
        if self._denominator == 0:
            return 0.0
        return self._numerator / self._denominator

    @property
    def frame_duration(self) -> int:
        """Return the duration of a single frame in nanoseconds.

        Degenerate rates report 1 ns instead of dividing by zero.

        Returns:
            int: The frame duration in nanoseconds.
        """
        if self._numerator == 0:
            return NANOSECOND
        return max(SECOND * self._denominator // self._numerator, NANOSECOND)

    def duration(self, frames: int) -> int:
        """Return the duration of the given number of frames at this rate.

        The result is the start of the frame, rounded down to whole
        nanoseconds, so :meth:`frames` reads back the same count.

        Args:
            frames (int): Number of frames, may be negative.

        Returns:
            int: The duration in nanoseconds.
        """
        if frames < 0:
            return -self.duration(-frames)
        if self._numerator == 0:
            return 0
        return self.truncate(self._frame_start(frames), 2)

    def _frame_start(self, frame: int) -> int:
        # exact rational start of the frame, floored to whole nanoseconds
        return frame * SECOND * self._denominator // self._numerator

    def frames(self, duration: int) -> int:
        """Return the number of whole frames within the given duration.

        Frame starts are computed with exact integers rather than from the
        rounded :attr:`frame_duration`, so the count does not drift over
        long durations.

        Args:
            duration (int): Duration in nanoseconds.

        Returns:
            int: The frame count.
        """
        if not self.is_valid():
            return duration // self.frame_duration
        # the last frame whose floored start is not after duration
        return (
            ((duration + 1) * self._numerator - 1)
            // (SECOND * self._denominator)
        )

    def truncate(self, duration: int, precision: int = 2) -> int:
        """Clip the given duration to this rate's frame interval.

        Most frame durations are periodic fractions (33.3666... ms at 29.97),
        so durations computed from frame counts carry a small remainder past
        the start of a frame. Frame starts are exact rational multiples
        floored to whole nanoseconds. A remainder above half a frame is
        rounded up to the next frame start, one above ``1/precision`` of a
        frame is dropped, smaller ones are kept.

        Args:
            duration (int): Duration in nanoseconds.
            precision (int): Divisor of the frame duration below which a
                remainder is kept. Must be at least 1.

        Raises:
            ValueError: If precision is smaller than 1.

        Returns:
            int: The clipped duration in nanoseconds.
        """
        if precision < 1:
            raise ValueError(f"precision should be at least 1, not {precision}")
        if duration < 0:
            return -self.truncate(-duration, precision)
        if not self.is_valid():
            return duration
        frame = self.frames(duration)
        start = self._frame_start(frame)
        end = self._frame_start(frame + 1)
        n = end - start
        x = duration - start
        if x > n // 2:
            return end
        if x > n // precision:
            return start
        return duration

    def display_frame(self, frame: int) -> int:
        """Return the timecode label index for the given frame number.

        For drop-frame rates the labels ``:00`` and ``:01`` (``:00`` to
        ``:03`` at 59.94) of every minute are skipped, except every tenth
        minute. Non-drop rates return the frame number unchanged.

        Args:
            frame (int): The 0-based frame number.

        Returns:
            int: The label index counted at the nominal fps.
        """
        if not self.drop_frame:
            return frame
        drop = self._drop_frames
        frames_per_minute = self._frames_per_10min // 10
        d = frame // self._frames_per_10min
        m = frame % self._frames_per_10min
        if m > drop:
            return frame + drop * 9 * d + drop * ((m - drop) // frames_per_minute)
        return frame + drop * 9 * d

    def true_frame(self, label: int) -> int:
        """Return the frame number for the given label index.

        This reverses :meth:`display_frame`: every labelled minute that is
        not a tenth minute gave away ``drop_frames`` labels.

        Args:
            label (int): The label index counted at the nominal fps.

        Returns:
            int: The 0-based frame number.
        """
        if not self.drop_frame:
            return label
        total_minutes = label // (self._fps * 60)
        return label - self._drop_frames * (total_minutes - total_minutes // 10)

    def is_smaller(self, other: Rate) -> bool:
        """Return True if this rate has a shorter frame duration than other."""
        return self.frame_duration < other.frame_duration

    def is_equal(self, other: Rate) -> bool:
        """Return True if both rates have the same frame duration."""
        return self.frame_duration == other.frame_duration

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rate):
            return self.is_equal(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.frame_duration)

    def __str__(self) -> str:
        return self.float_string()

    def __repr__(self) -> str:
        return (
            f"{__class__.__name__}(index={int(self._index)}, fps={self._fps}, "
            f"rate={self.rational_string()}, drop_frames={self._drop_frames})"
        )
####


def min_rate(a: Rate, b: Rate) -> Rate:
    """Return the slower of two rates, the one with the longer frame duration.

    Args:
        a (Rate): First rate.
        b (Rate): Second rate.

    Returns:
        Rate: ``a`` if its frame duration is longer, otherwise ``b``.
    """
    if a.frame_duration > b.frame_duration:
        return a
    return b


def max_rate(a: Rate, b: Rate) -> Rate:
    """Return the faster of two rates, the one with the shorter frame duration.

    Args:
        a (Rate): First rate.
        b (Rate): Second rate.

    Returns:
        Rate: ``a`` if its frame duration is shorter, otherwise ``b``.
    """
    if a.frame_duration < b.frame_duration:
        return a
    return b


def _snap(fps: float) -> Rate | None:
    # windows around the NTSC rates, exact match for integer rates
    if 23.975 <= fps < 23.997:
        return RATE_23976
    if 29.96 < fps < 29.98:
        return RATE_30DF
    if 59.93 < fps < 59.95:
        return RATE_60DF
    return _INTEGER_RATES.get(fps)


#%%
# 1ns "frames": literal timecodes keep their frame number as nanoseconds
IDENTITY_RATE = Rate(RateIndex.UNKNOWN, SECOND, SECOND, 1, 0, SECOND * 600)
IDENTITY_RATE_DF = Rate(RateIndex.UNKNOWN_DF, SECOND, SECOND, 1, 0, SECOND * 600)
# placeholder for a user-defined rate whose numbers are not known
INVALID_RATE = Rate(RateIndex.USER_DEFINED, 0, 0, 0, 0, 0)

RATE_23976 = Rate(RateIndex.R_23976, 24, 24000, 1001)
RATE_24 = Rate(RateIndex.R_24, 24, 24, 1)
RATE_25 = Rate(RateIndex.R_25, 25, 25, 1)
RATE_30 = Rate(RateIndex.R_30, 30, 30, 1)
RATE_30DF = Rate(RateIndex.R_30DF, 30, 30000, 1001, 2, 17982)
RATE_48 = Rate(RateIndex.R_48, 48, 48, 1)
RATE_50 = Rate(RateIndex.R_50, 50, 50, 1)
RATE_60 = Rate(RateIndex.R_60, 60, 60, 1)
RATE_60DF = Rate(RateIndex.R_60DF, 60, 60000, 1001, 4, 35964)
RATE_96 = Rate(RateIndex.R_96, 96, 96, 1)
RATE_100 = Rate(RateIndex.R_100, 100, 100, 1)
RATE_120 = Rate(RateIndex.R_120, 120, 120, 1)

RATES = MappingProxyType({
    rate.index: rate
    for rate in (
        IDENTITY_RATE,
        IDENTITY_RATE_DF,
        RATE_23976,
        RATE_24,
        RATE_25,
        RATE_30,
        RATE_30DF,
        RATE_48,
        RATE_50,
        RATE_60,
        RATE_60DF,
        RATE_96,
        RATE_100,
        RATE_120,
    )
})

# ids accepted by Rate.parse, the unknown drop-frame tag is not a rate
_INDEXED_RATES = MappingProxyType({
    index: rate for index, rate in RATES.items()
    if index != RateIndex.UNKNOWN_DF
})

_INTEGER_RATES = MappingProxyType({
    rate.numerator: rate
    for rate in (
        RATE_24, RATE_25, RATE_30, RATE_48, RATE_50,
        RATE_60, RATE_96, RATE_100, RATE_120,
    )
})
