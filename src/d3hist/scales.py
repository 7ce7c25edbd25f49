"""
Domains, scales and tick generation.

Scales follow the D3 conventions the charts were designed around: a
continuous scale maps a closed domain onto a pixel range, ``ticks(count)``
returns roughly ``count`` human-friendly values inside the domain, and
``tick_format(count)`` returns a formatter matching those ticks.
"""

import bisect
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Callable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .errors import EmptyInputError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


class Domain(NamedTuple):
    """Closed interval ``[lower, upper]`` of uniform values."""
    lower: Any
    upper: Any

    @property
    def is_degenerate(self) -> bool:
        return self.lower == self.upper

    def contains(self, value) -> bool:
        return self.lower <= value <= self.upper


def _js_round(x: float) -> int:
    # Half-up rounding, not banker's rounding
    return int(math.floor(x + 0.5))


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def ticks(start: float, stop: float, count: int) -> List[float]:
    """
    Return nicely rounded values between start and stop (inclusive).

    Steps are powers of ten multiplied by 1, 2 or 5, chosen so that about
    ``count`` values are returned.

    Examples:
        ticks(0, 87, 10)  # [0, 10, 20, ..., 80]
        ticks(0, 35, 10)  # [0, 5, 10, ..., 35]
    """
    if not count > 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    try:
        i1, i2, inc = _tick_spec(start, stop, count)
    except (OverflowError, ValueError, ZeroDivisionError):
        # Spans near the float limits have no representable step
        return []
    if i2 < i1 or not math.isfinite(inc):
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [float((i1 + i) * inc) for i in range(i2 - i1 + 1)]
    if reverse:
        values.reverse()
    return values


def tick_step(start: float, stop: float, count: int) -> float:
    """
    Return the spacing ``ticks(start, stop, count)`` would use.

    Raises OverflowError, ValueError or ZeroDivisionError for spans too
    close to the float limits to have a step.
    """
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    inc = _tick_spec(lo, hi, count)[2]
    step = 1 / -inc if inc < 0 else inc
    return -step if reverse else step


class LinearScale:
    """
    Linear mapping from a numeric domain to a pixel range.

    A degenerate domain maps every value to the start of the range.
    """

    def __init__(self, domain: Sequence[Any], range_: Sequence[float], round_output: bool = False):
        self.domain = Domain(domain[0], domain[1])
        self.range = (float(range_[0]), float(range_[1]))
        self.round_output = round_output

    def _to_number(self, value) -> float:
        return float(value)

    def __call__(self, value) -> float:
        d0 = self._to_number(self.domain.lower)
        d1 = self._to_number(self.domain.upper)
        r0, r1 = self.range
        span = d1 - d0
        t = (self._to_number(value) - d0) / span if span else 0.0
        result = r0 * (1 - t) + r1 * t
        if self.round_output:
            return float(_js_round(result))
        return result

    def ticks(self, count: int = 10) -> List[Any]:
        return ticks(self.domain.lower, self.domain.upper, count)

    def tick_format(self, count: int = 10) -> Callable[[Any], str]:
        lower, upper = self.domain
        if lower == upper:
            precision = 0 if float(lower).is_integer() else 6
        else:
            try:
                step = abs(tick_step(lower, upper, count))
                precision = max(0, -math.floor(math.log10(step)))
            except (OverflowError, ValueError, ZeroDivisionError):
                return lambda value: f"{value:g}"
        return lambda value: f"{value:,.{precision}f}"

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return (self.domain, self.range, self.round_output) == (other.domain, other.range, other.round_output)

    __hash__ = None

    def __repr__(self):
        return f"<{self.__class__.__name__} {tuple(self.domain)} -> {self.range}>"


def to_seconds(value: datetime) -> float:
    """Seconds since the (naive) epoch."""
    return (value - EPOCH).total_seconds()


class TimeInterval:
    """
    A calendar interval such as "day" or "month".

    Args:
        name: Interval name used in logs and reprs
        floor: Truncates a datetime to the start of its interval
        offset: Moves an interval start forward by n intervals
        field: Interval number used to filter ``every`` steps
        duration: Approximate length in seconds (months 30 days, years 365)
    """

    def __init__(self, name: str, floor: Callable[[datetime], datetime],
                 offset: Callable[[datetime, int], datetime],
                 field: Callable[[datetime], int], duration: float):
        self.name = name
        self.floor = floor
        self.offset = offset
        self.field = field
        self.duration = duration

    def ceil(self, value: datetime) -> datetime:
        floored = self.floor(value)
        if floored < value:
            floored = self.offset(floored, 1)
        return floored

    def range(self, start: datetime, stop: datetime, step: int = 1) -> Iterator[datetime]:
        """Yield interval starts in ``[start, stop]`` whose field is a multiple of step."""
        current = self.ceil(start)
        while current <= stop:
            if self.field(current) % step == 0:
                yield current
            current = self.offset(current, 1)

    def __repr__(self):
        return f"<TimeInterval {self.name}>"


def _add_months(value: datetime, months: int) -> datetime:
    total = value.year * 12 + value.month - 1 + months
    return value.replace(year=total // 12, month=total % 12 + 1)


SECOND = TimeInterval(
    "second",
    lambda d: d.replace(microsecond=0),
    lambda d, n: d + timedelta(seconds=n),
    lambda d: d.second,
    1,
)
MINUTE = TimeInterval(
    "minute",
    lambda d: d.replace(second=0, microsecond=0),
    lambda d, n: d + timedelta(minutes=n),
    lambda d: d.minute,
    60,
)
HOUR = TimeInterval(
    "hour",
    lambda d: d.replace(minute=0, second=0, microsecond=0),
    lambda d, n: d + timedelta(hours=n),
    lambda d: d.hour,
    3600,
)
DAY = TimeInterval(
    "day",
    lambda d: d.replace(hour=0, minute=0, second=0, microsecond=0),
    lambda d, n: d + timedelta(days=n),
    lambda d: d.day - 1,
    86400,
)
# Weeks start on Sunday
WEEK = TimeInterval(
    "week",
    lambda d: DAY.floor(d) - timedelta(days=(d.weekday() + 1) % 7),
    lambda d, n: d + timedelta(weeks=n),
    lambda d: 0,
    604800,
)
MONTH = TimeInterval(
    "month",
    lambda d: DAY.floor(d).replace(day=1),
    _add_months,
    lambda d: d.month - 1,
    2592000,
)
YEAR = TimeInterval(
    "year",
    lambda d: DAY.floor(d).replace(month=1, day=1),
    lambda d, n: d.replace(year=d.year + n),
    lambda d: d.year,
    31536000,
)

_TICK_INTERVALS = [
    (SECOND, 1), (SECOND, 5), (SECOND, 15), (SECOND, 30),
    (MINUTE, 1), (MINUTE, 5), (MINUTE, 15), (MINUTE, 30),
    (HOUR, 1), (HOUR, 3), (HOUR, 6), (HOUR, 12),
    (DAY, 1), (DAY, 2),
    (WEEK, 1),
    (MONTH, 1), (MONTH, 3),
    (YEAR, 1),
]
_TICK_DURATIONS = [interval.duration * step for interval, step in _TICK_INTERVALS]


def tick_interval(start: datetime, stop: datetime, count: int) -> Tuple[TimeInterval, int]:
    """Pick the calendar interval and step closest to ``count`` ticks over the span."""
    lo, hi = to_seconds(start), to_seconds(stop)
    target = abs(hi - lo) / count
    i = bisect.bisect_right(_TICK_DURATIONS, target)
    if i == len(_TICK_INTERVALS):
        step = tick_step(lo / YEAR.duration, hi / YEAR.duration, count)
        return YEAR, max(1, int(math.floor(step)))
    if i == 0:
        return SECOND, 1
    if target / _TICK_DURATIONS[i - 1] < _TICK_DURATIONS[i] / target:
        i -= 1
    return _TICK_INTERVALS[i]


def time_ticks(start: datetime, stop: datetime, count: int) -> List[datetime]:
    if not count > 0:
        return []
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    if start == stop:
        return [start]
    interval, step = tick_interval(start, stop, count)
    values = list(interval.range(start, stop, step))
    if reverse:
        values.reverse()
    return values


def format_time(value: datetime) -> str:
    """Multi-scale calendar format: the coarsest unit the value falls on."""
    if SECOND.floor(value) < value:
        return value.strftime(".%f")[:4]
    if MINUTE.floor(value) < value:
        return value.strftime(":%S")
    if HOUR.floor(value) < value:
        return value.strftime("%I:%M")
    if DAY.floor(value) < value:
        return value.strftime("%I %p")
    if MONTH.floor(value) < value:
        if WEEK.floor(value) < value:
            return value.strftime("%a %d")
        return value.strftime("%b %d")
    if YEAR.floor(value) < value:
        return value.strftime("%B")
    return value.strftime("%Y")


class TimeScale(LinearScale):
    """Linear mapping from a datetime domain to a pixel range."""

    def _to_number(self, value) -> float:
        return to_seconds(value)

    def ticks(self, count: int = 10) -> List[datetime]:
        return time_ticks(self.domain.lower, self.domain.upper, count)

    def tick_format(self, count: int = 10) -> Callable[[datetime], str]:
        return format_time


def compute_domain(values: Sequence[Any], adapter) -> Domain:
    """
    Compute the domain of a uniform value sequence.

    The adapter decides the policy (zero-anchored for numbers, true extent
    for dates).

    Raises:
        EmptyInputError: If values is empty
    """
    if not values:
        raise EmptyInputError("Cannot compute a domain without values")
    domain = adapter.extent(values)
    logger.debug("Computed %s domain %s", adapter.kind, tuple(domain))
    return domain


def compute_scale(domain: Domain, pixel_extent: float, adapter=None,
                  invert: bool = False, round_output: Optional[bool] = None) -> LinearScale:
    """
    Build a scale mapping domain onto ``[0, pixel_extent]``.

    Args:
        domain: Domain to map
        pixel_extent: Length of the pixel range
        adapter: Type adapter choosing the scale class (numeric when omitted)
        invert: Map onto ``[pixel_extent, 0]`` instead, for count axes
        round_output: Round to whole pixels (defaults to ``not invert``)
    """
    range_ = (pixel_extent, 0) if invert else (0, pixel_extent)
    if round_output is None:
        round_output = not invert
    scale_class = adapter.scale_class if adapter is not None else LinearScale
    return scale_class(domain, range_, round_output=round_output)


def compute_height_scale(bins: Sequence[Any], pixel_extent: float) -> LinearScale:
    """Count scale ``[0, max(bin.count)]`` -> ``[pixel_extent, 0]``."""
    top = max((b.count for b in bins), default=0)
    return compute_scale(Domain(0, top), pixel_extent, invert=True)
