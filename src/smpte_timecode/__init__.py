"""SMPTE ST 12-1 timecodes at standard and user-defined edit rates.

Convert between timecode labels, frame numbers and real-time durations, with
drop-frame labels handled for 29.97 and 59.94 fps. A timecode and its rate
pack into a single 64 bit integer.
"""

from .helpers import (
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    NANOSECOND,
    SECOND,
    RateSyntaxError,
    TimecodeError,
    TimecodeSyntaxError,
    to_nanoseconds,
)
from .rate import (
    DROP_FRAME_FLAG,
    IDENTITY_RATE,
    IDENTITY_RATE_DF,
    INVALID_RATE,
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
    RATES,
    Rate,
    RateIndex,
    max_rate,
    min_rate,
)
from .timecode import (
    INVALID,
    ORIGIN,
    RATE_BITS,
    SMPTE_DROP_FRAME,
    TIME_BITS,
    TIME_MASK,
    Timecode,
    TimecodeBuilder,
)

__version__ = "1.0.0"

__all__ = [
    "DROP_FRAME_FLAG",
    "HOUR",
    "IDENTITY_RATE",
    "IDENTITY_RATE_DF",
    "INVALID",
    "INVALID_RATE",
    "MICROSECOND",
    "MILLISECOND",
    "MINUTE",
    "NANOSECOND",
    "ORIGIN",
    "RATES",
    "RATE_100",
    "RATE_120",
    "RATE_23976",
    "RATE_24",
    "RATE_25",
    "RATE_30",
    "RATE_30DF",
    "RATE_48",
    "RATE_50",
    "RATE_60",
    "RATE_60DF",
    "RATE_96",
    "RATE_BITS",
    "Rate",
    "RateIndex",
    "RateSyntaxError",
    "SECOND",
    "SMPTE_DROP_FRAME",
    "TIME_BITS",
    "TIME_MASK",
    "Timecode",
    "TimecodeBuilder",
    "TimecodeError",
    "TimecodeSyntaxError",
    "max_rate",
    "min_rate",
    "to_nanoseconds",
]
