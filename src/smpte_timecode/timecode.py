"""Timecode class for handling timecode calculations."""

# Standard Library Imports
from __future__ import annotations

import logging
import re
import sys
from datetime import timedelta

from .helpers import (
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    SECOND,
    TimecodeError,
    TimecodeSyntaxError,
    _RateLike,
    _Timestamp,
    to_nanoseconds,
)
from .rate import (
    IDENTITY_RATE,
    IDENTITY_RATE_DF,
    INVALID_RATE,
    RATES,
    Rate,
    RateIndex,
)

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

RATE_BITS = 5  # 16 non-drop + 16 drop-frame rate ids
TIME_BITS = 59  # ~9 years at 1 ns
TIME_MASK = (1 << TIME_BITS) - 1
INVALID = (1 << (RATE_BITS + TIME_BITS)) - 1
ORIGIN = "00:00:00:00"

# drop-frame flag of the packed SMPTE ST 12-1 time word
SMPTE_DROP_FRAME = 0x40

_LITERAL_TAGS = (RateIndex.UNKNOWN, RateIndex.UNKNOWN_DF)
_DIGITS = re.compile(r"[0-9]+")


#%%
class Timecode:
    """The main timecode class.

    A timecode is a non-negative duration in nanoseconds tagged with an edit
    rate. The frame number, the ``hh:mm:ss:ff`` label and the packed forms
    are all derived from those two values.

    A timecode parsed from a string without a rate suffix is tagged with the
    identity rate: its duration holds the literal ``h:m:s`` and the frame
    number as nanoseconds. Such a timecode prints back unchanged, but frame
    and second values are only meaningful after :meth:`set_rate`.

    Args:
        rate (Rate | Fraction | str | int | float | tuple[int, int] | None):
            The edit rate. Anything :meth:`Rate.coerce` accepts. None leaves
            the timecode without a rate.
        start_timecode (None | str | Timecode): The start timecode. When a
            rate is also given it is assigned with :meth:`set_rate`, so a
            string without rate suffix is read at that rate.
        duration (int | timedelta): Duration in nanoseconds. It is clipped
            to the rate's frame boundary before storage.
        frames (int): Timecode objects can be initialized with the 0-based
            frame number.

    Start timecode has priority over frames, frames over duration. Without
    any of them the timecode is ``00:00:00:00``.
    """
    def __init__(
        self,
        rate: Rate | _RateLike | None = None,
        start_timecode: str | Timecode | None = None,
        duration: int | timedelta | None = None,
        frames: int | None = None,
    ) -> None:
        self._rate = Rate.coerce(rate)
        self._duration = 0
        self._dispatch_set_frames(
            rate=rate,
            start_timecode=start_timecode,
            duration=duration,
            frames=frames,
        )

    def _dispatch_set_frames(self, **kwargs) -> None:
        """Helper to dispatch the arguments to set the Timecode value.

        Args:
            kwargs (dict): dictionary of possible input values to set the
            value. The following order of priority applies:
                1. start_timecode: Timecode string, or Timecode object.
                2. frames: frame number of the Timecode.
                3. duration: nanoseconds or timedelta.
        """
        if (start_timecode := kwargs.get("start_timecode")) is not None:
            if isinstance(start_timecode, Timecode):
                source = start_timecode.copy()
            else:
                source = Timecode.parse(start_timecode)
            if kwargs.get("rate") is not None:
                source.set_rate(self._rate)
            self._rate = source._rate
            self._duration = source._duration
        elif (frames := kwargs.get("frames")) is not None:
            self.set_frame(frames)
        elif (duration := kwargs.get("duration")) is not None:
            self._set_duration(to_nanoseconds(duration))
    ####

    def _set_duration(self, duration: int) -> None:
        if duration < 0:
            raise ValueError(
                f"{self.__class__.__name__} can not be negative, got {duration} ns"
            )
        duration = self._rate.truncate(duration, 2)
        if duration > TIME_MASK:
            raise TimecodeError(
                f"Duration of {duration} ns exceeds the {TIME_BITS} bit range"
            )
        self._duration = duration

    @classmethod
    def parse(cls, text: str) -> Timecode:
        """Parse the given timecode string.

        Well-formed timecodes have up to four numeric segments ``hh:mm:ss:ff``.
        Drop-frame timecodes use a semicolon as last separator. An empty
        string is ``00:00:00:00``.

        A rate expression may follow an ``@`` (``"00:01:00;02@29.97"``), see
        :meth:`Rate.parse`. The segments are then read as a frame label at the
        rate's nominal fps, and drop-frame labels are converted back to the
        actual frame number.

        Without rate the value is kept as literal hours, minutes, seconds and
        frames until :meth:`set_rate` is called.

        Args:
            text (str): The timecode string.

        Raises:
            TimecodeSyntaxError: If a segment is not a number or there are
                more than four segments.
            RateSyntaxError: If the rate expression is invalid.

        Returns:
            Timecode: The parsed timecode.
        """
        if text == "":
            text = ORIGIN

        body, has_rate, rate_text = text.partition("@")
        drop_frame = ";" in body
        segments = body.replace(";", ":").split(":")
        if len(segments) > 4 or not all(map(_DIGITS.fullmatch, segments)):
            logger.debug("Rejected timecode %r", text)
            raise TimecodeSyntaxError(text)
        values = [int(segment) for segment in segments]

        if has_rate:
            rate = Rate.parse(rate_text)
            fps = rate.fps
            # the segments count labels, not literal time
            label = sum(
                value * scale
                for value, scale in zip(values, (3600 * fps, 60 * fps, fps, 1))
            )
            return cls(rate, frames=rate.true_frame(label))

        literal = sum(
            value * unit for value, unit in zip(values, (HOUR, MINUTE, SECOND, 1))
        )
        return cls(IDENTITY_RATE_DF if drop_frame else IDENTITY_RATE, duration=literal)

    @classmethod
    def from_int(cls, value: int) -> Timecode:
        """Unpack a timecode from its 64 bit integer form.

        The 5 most significant bits hold the rate id, the 59 least
        significant bits the duration in nanoseconds. User-defined rates do
        not fit the rate id; they come back as :data:`INVALID_RATE`, with the
        duration intact, until :meth:`set_rate` assigns the rate again.

        Args:
            value (int): The packed value, as returned by ``int(timecode)``.

        Raises:
            ValueError: If the value is not an unsigned 64 bit integer.
            TimecodeError: If the value is :data:`INVALID` or carries an
                unassigned rate id.

        Returns:
            Timecode: The unpacked timecode.
        """
        if not 0 <= value <= INVALID:
            raise ValueError(f"{value} is not an unsigned 64 bit integer")
        if value == INVALID:
            raise TimecodeError("Invalid timecode value")
        tag = value >> TIME_BITS
        if tag == RateIndex.USER_DEFINED:
            rate = INVALID_RATE
        elif (rate := RATES.get(tag)) is None:
            raise TimecodeError(f"Unknown rate id {tag} in packed timecode")
        return cls(rate, duration=value & TIME_MASK)

    @classmethod
    def from_smpte(
        cls,
        word: int,
        user_bits: int = 0,
        rate: Rate | _RateLike | None = None,
    ) -> Timecode:
        """Unpack a SMPTE ST 12-1 time address word.

        The word holds two BCD digits each for hours, minutes, seconds and
        frames, plus the drop-frame flag at bit 6. The result has no rate
        unless one is given here or later through :meth:`set_rate`.

        Args:
            word (int): The 32 bit time address.
            user_bits (int): The 32 bit user bits word. Not interpreted.
            rate (Rate | Fraction | str | int | float | tuple[int, int] | None):
                Optional rate to assign after unpacking.

        Returns:
            Timecode: The unpacked timecode.
        """
        hh = ((word >> 28) & 0x03) * 10 + ((word >> 24) & 0x0F)
        mm = ((word >> 20) & 0x07) * 10 + ((word >> 16) & 0x0F)
        ss = ((word >> 12) & 0x07) * 10 + ((word >> 8) & 0x0F)
        ff = ((word >> 4) & 0x03) * 10 + (word & 0x0F)
        tag = IDENTITY_RATE_DF if word & SMPTE_DROP_FRAME else IDENTITY_RATE
        tc = cls(tag, duration=hh * HOUR + mm * MINUTE + ss * SECOND + ff)
        if rate is not None:
            tc.set_rate(rate)
        return tc

    def to_smpte(self) -> tuple[int, int]:
        """Pack this timecode into a SMPTE ST 12-1 time address word.

        The frame tens field is 2 bits wide, so labels are packed as they
        are and only frames 0 to 39 fit. Rates above 40 fps (50, 60, 96,
        100, 120) fail for the higher frame labels of each second; they are
        not packed as frame pairs.

        Raises:
            TimecodeError: If hours or frames exceed the two BCD digits
                the word has room for (39).

        Returns:
            (int, int): The time address word and the user bits, which are
                always 0.
        """
        hh, mm, ss, ff = self._fields()
        if hh > 39 or ff > 39:
            raise TimecodeError(f"{self} does not fit a SMPTE time address")
        word = (
            (hh // 10) << 28 | (hh % 10) << 24
            | (mm // 10) << 20 | (mm % 10) << 16
            | (ss // 10) << 12 | (ss % 10) << 8
            | (ff // 10) << 4 | (ff % 10)
        )
        if self._rate.drop_frame:
            word |= SMPTE_DROP_FRAME
        return word, 0

    def to_int(self) -> int:
        """Return the packed 64 bit integer form of this timecode.

        Returns:
            int: Rate id in the 5 most significant bits, duration in
                nanoseconds in the 59 least significant bits.
        """
        return (int(self._rate.index) << TIME_BITS) | self._duration

    def __int__(self) -> int:
        return self.to_int()

    @property
    def rate(self) -> Rate:
        """Return the edit rate of this timecode."""
        return self._rate

    @property
    def duration(self) -> int:
        """Return the duration in nanoseconds."""
        return self._duration

    def is_zero(self) -> bool:
        """Return True if the duration is zero, whatever the rate."""
        return self._duration == 0

    def copy(self) -> Self:
        """Return an independent copy of this timecode."""
        return self.__class__(self._rate, duration=self._duration)

    def set_rate(self, rate: Rate | _RateLike) -> Self:
        """Set a new edit rate and keep the frame number.

        Use this to change the rate of a timecode or to assign the initial
        rate of a timecode parsed without one. For the latter the literal
        ``hh:mm:ss:ff`` is read as a frame label at the new rate, including
        the drop-frame conversion for drop-frame rates.

        Args:
            rate (Rate | Fraction | str | int | float | tuple[int, int]): The
                new rate.

        Returns:
            Timecode: Returns self.
        """
        rate = Rate.coerce(rate)
        if self._rate.index in _LITERAL_TAGS:
            seconds, frames = divmod(self._duration, SECOND)
            label = seconds * rate.fps + frames
            duration = rate.duration(rate.true_frame(label))
        elif not self._rate.is_valid():
            logger.debug("Assigning %r to a timecode of unknown user rate", rate)
            duration = self._duration
        else:
            # keep current frame number and adjust time to new rate
            duration = rate.duration(self.frame)
        self._rate = rate
        self._set_duration(duration)
        return self

    def set_frame(self, frame: int) -> Self:
        """Set the timecode to the given frame number, keeping its rate.

        Args:
            frame (int): A positive int or zero, the 0-based frame number.

        Raises:
            TypeError: If frame is not an int.
            ValueError: If frame is negative.

        Returns:
            Timecode: Returns self.
        """
        if not isinstance(frame, int) or isinstance(frame, bool):
            raise TypeError(
                f"{self.__class__.__name__}.frame should be a positive integer "
                f"or zero, not a {frame.__class__.__name__}"
            )
        if frame < 0:
            raise ValueError(
                f"{self.__class__.__name__}.frame should be a positive integer "
                f"or zero, not {frame}"
            )
        self._set_duration(self._rate.duration(frame))
        return self

    @property
    def frame(self) -> int:
        """Return the 0-based frame number at the timecode's rate.

        Returns:
            int: The frame number.
        """
        return self.frame_at_rate(self._rate)

    def frame_at_rate(self, rate: Rate | _RateLike) -> int:
        """Return the 0-based frame number of this timecode at the given rate.

        Args:
            rate (Rate | Fraction | str | int | float | tuple[int, int]): The
                rate to count frames at.

        Returns:
            int: The frame number.
        """
        rate = Rate.coerce(rate)
        if rate.index in _LITERAL_TAGS:
            # the frame within the second is stored as nanoseconds
            return rate.fps * self.second + self._duration % SECOND
        return rate.frames(self._duration)

    @property
    def second(self) -> int:
        """Return the number of whole seconds covered by the timecode.

        Durations built from frame counts sit slightly off the second for
        almost all rates (33.366666 ms per frame at 29.97), so one
        millisecond is added before rounding down.

        Returns:
            int: The seconds.
        """
        return (self._duration + MILLISECOND) // SECOND

    @property
    def millisecond(self) -> int:
        return self._duration // MILLISECOND

    def sub(self, other: Timecode) -> int:
        """Return the difference between this timecode and the other one.

        Args:
            other (Timecode): The timecode to subtract.

        Returns:
            int: Signed difference in nanoseconds.
        """
        return self._duration - other._duration

    def add(self, delta: int | timedelta) -> Timecode:
        """Return a new timecode with the given duration added.

        The rate is kept. A negative result is clipped to zero.

        Args:
            delta (int | timedelta): Nanoseconds to add, may be negative.

        Returns:
            Timecode: The resultant Timecode instance.
        """
        delta = to_nanoseconds(delta)
        duration = self._duration + delta
        if duration < 0:
            logger.debug("Clipping %s%+d ns to zero", self, delta)
            duration = 0
        return Timecode(self._rate, duration=duration)

    def add_frames(self, frames: int) -> Timecode:
        """Return a new timecode moved by the given number of frames.

        Args:
            frames (int): Frames to add, negative to go back. A result before
                the first frame is clipped to zero.

        Raises:
            TypeError: If frames is not an int.

        Returns:
            Timecode: The resultant Timecode instance.
        """
        if not isinstance(frames, int) or isinstance(frames, bool):
            raise TypeError(
                f"frames should be an int, not a {frames.__class__.__name__}"
            )
        duration = self._duration + self._rate.duration(frames)
        if duration < 0:
            logger.debug("Clipping %s%+d frames to zero", self, frames)
            duration = 0
        return Timecode(self._rate, duration=duration)

    def _fields(self) -> tuple[int, int, int, int]:
        # unknown user rates print their raw nanoseconds
        rate = self._rate if self._rate.is_valid() else IDENTITY_RATE
        label = rate.display_frame(self.frame_at_rate(rate))
        fps = rate.fps
        hh = label // (fps * 3600)
        mm = label // (fps * 60) % 60
        ss = label // fps % 60
        ff = label % fps
        return hh, mm, ss, ff

    @property
    def frame_delimiter(self) -> str:
        """Return ";" for drop-frame timecodes, ":" otherwise."""
        return ";" if self._rate.drop_frame else ":"

    def to_string(self) -> str:
        """Return the ``hh:mm:ss:ff`` label of this timecode.

        Returns:
            str: The label, with ``;`` as last separator for drop-frame rates.
        """
        hh, mm, ss, ff = self._fields()
        return f"{hh:02d}:{mm:02d}:{ss:02d}{self.frame_delimiter}{ff:02d}"

    def to_string_with_rate(self) -> str:
        """Return the label followed by ``@`` and the rate as decimal.

        The rate part is left out for timecodes without rate, so the result
        always parses back with :meth:`parse`.

        Returns:
            str: e.g. "00:01:00;02@29.970".
        """
        if self._rate.is_zero():
            return self.to_string()
        return f"{self.to_string()}@{self._rate.float_string()}"

    def to_timedelta(self) -> timedelta:
        """Return the duration as timedelta, truncated to microseconds."""
        return timedelta(microseconds=self._duration // MICROSECOND)

    def to_realtime(self) -> _Timestamp:
        """Return the wall-clock position of this timecode.

        Returns:
            _Timestamp of the duration.
        """
        return _Timestamp(self._duration)

    def _coerce_timecode(self, text: str) -> Timecode:
        # a string without rate is read at this timecode's rate
        other = Timecode.parse(text)
        if other._rate.index in _LITERAL_TAGS and not self._rate.is_zero():
            other.set_rate(self._rate)
        return other

    def _operands(self, other: object, op: str) -> tuple[int, int]:
        if isinstance(other, Timecode):
            return self._duration, other._duration
        if isinstance(other, str):
            return self._duration, self._coerce_timecode(other)._duration
        if isinstance(other, int) and not isinstance(other, bool):
            return self.frame, other
        raise TypeError(
            f"'{op}' not supported between instances of 'Timecode' and "
            f"'{other.__class__.__name__}'"
        )

    def __eq__(self, other: object) -> bool:
        """Override the equality operator.

        Args:
            other (int | str | Timecode): Either an int compared to the frame
                number, a str parsed at this timecode's rate when it has no
                rate of its own, or a Timecode.

        Returns:
            bool: True if rate and duration (or frame number) are equal.
        """
        if isinstance(other, str):
            other = self._coerce_timecode(other)
        if isinstance(other, Timecode):
            return (
                self._rate.index == other._rate.index
                and self._rate == other._rate
                and self._duration == other._duration
            )
        if isinstance(other, int) and not isinstance(other, bool):
            return self.frame == other
        return False

    def __ge__(self, other: int | str | Timecode) -> bool:
        mine, theirs = self._operands(other, ">=")
        return mine >= theirs

    def __gt__(self, other: int | str | Timecode) -> bool:
        mine, theirs = self._operands(other, ">")
        return mine > theirs

    def __le__(self, other: int | str | Timecode) -> bool:
        mine, theirs = self._operands(other, "<=")
        return mine <= theirs

    def __lt__(self, other: int | str | Timecode) -> bool:
        mine, theirs = self._operands(other, "<")
        return mine < theirs

    def __add__(self, other: int | timedelta | Timecode) -> Timecode:
        """Return a new Timecode with frames or a duration added to this one.

        Args:
            other (int | timedelta | Timecode): A number of frames, a
                timedelta, or a Timecode whose duration is added.

        Raises:
            TimecodeError: If the other is not an int, timedelta or Timecode.

        Returns:
            Timecode: The resultant Timecode instance.
        """
        if isinstance(other, Timecode):
            return self.add(other._duration)
        if isinstance(other, timedelta):
            return self.add(other)
        if isinstance(other, int) and not isinstance(other, bool):
            return self.add_frames(other)
        raise TimecodeError(
            f"Type {other.__class__.__name__} not supported for arithmetic."
        )

    def __sub__(self, other: int | timedelta | Timecode) -> Timecode | int:
        """Subtract frames, a duration or another Timecode.

        Args:
            other (int | timedelta | Timecode): A number of frames or a
                timedelta to go back by, or a Timecode to take the difference
                to.

        Raises:
            TimecodeError: If the other is not an int, timedelta or Timecode.

        Returns:
            Timecode | int: The resultant Timecode instance, or the signed
                difference in nanoseconds when other is a Timecode.
        """
        if isinstance(other, Timecode):
            return self.sub(other)
        if isinstance(other, timedelta):
            return self.add(-other)
        if isinstance(other, int) and not isinstance(other, bool):
            return self.add_frames(-other)
        raise TimecodeError(
            f"Type {other.__class__.__name__} not supported for arithmetic."
        )

    def __float__(self) -> float:
        """Convert this Timecode instance to seconds.

        Returns:
            float: The duration in seconds.
        """
        return self._duration / SECOND

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{__class__.__name__}({self._rate!r}, duration={self._duration})"

    @property
    def hrs(self) -> int:
        """Return the hours part of the timecode label."""
        hrs, _, _, _ = self._fields()
        return hrs

    @property
    def mins(self) -> int:
        """Return the minutes part of the timecode label."""
        _, mins, _, _ = self._fields()
        return mins

    @property
    def secs(self) -> int:
        """Return the seconds part of the timecode label."""
        _, _, secs, _ = self._fields()
        return secs

    @property
    def frs(self) -> int:
        """Return the frames part of the timecode label."""
        _, _, _, frs = self._fields()
        return frs
####

#%%
class TimecodeBuilder:
    """Helper class to pre-configure instantiation of Timecodes.

    Keyword arguments of class Timecode given to the builder are used each
    time the builder is called, typically to fix the rate::

        ntsc = TimecodeBuilder(rate="30000/1001")
        ntsc("00:01:00;02").frame  # 1800

    Args:
        kwargs (dict): list of pre-configured arguments for the Timecodes
            instantiated by calling this builder. Refer to Timecode docu.
    """

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs

    def __call__(
        self, start_timecode: str | Timecode | None = None, **kwargs
    ) -> Timecode:
        """Create a Timecode combining the preconfigured and user arguments.

        Returns:
            Timecode: timecode instance given the arguments.
        """
        kwargs = self.kwargs | kwargs
        return Timecode(start_timecode=start_timecode, **kwargs)
####
