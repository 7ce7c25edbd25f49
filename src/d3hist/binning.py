"""
Binning: aggregate uniform values into contiguous bins.
"""

import bisect
import logging
import operator
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .errors import InvalidBinCountError
from .scales import Domain, LinearScale

logger = logging.getLogger(__name__)

DEFAULT_BIN_COUNT = 10


@dataclass(frozen=True)
class Bin:
    """Interval ``[x0, x1)`` and the number of values inside it (the last bin is closed)."""
    x0: Any
    x1: Any
    count: int

    def __len__(self):
        return self.count


def validate_bin_count(bin_count: Any) -> int:
    """Return bin_count as an int; integer-like values such as numpy ints are accepted."""
    if isinstance(bin_count, bool):
        raise InvalidBinCountError(bin_count)
    try:
        count = operator.index(bin_count)
    except TypeError:
        raise InvalidBinCountError(bin_count) from None
    if count <= 0:
        raise InvalidBinCountError(bin_count)
    return count


def compute_bins(values: Sequence[Any], domain: Domain, thresholds: Sequence[Any]) -> Tuple[List[Bin], int]:
    """
    Count values into the bins delimited by thresholds.

    Thresholds outside the open domain interval are ignored. Values equal to
    a threshold belong to the bin starting there; the domain maximum belongs
    to the last bin.

    Args:
        values: Uniform values
        domain: Closed domain the bins cover
        thresholds: Ascending interior edges

    Returns:
        (bins, excluded) where excluded counts values outside the domain
    """
    lower, upper = domain
    if domain.is_degenerate:
        inside = sum(1 for value in values if value == lower)
        return [Bin(lower, upper, inside)], len(values) - inside

    edges = [t for t in thresholds if lower < t < upper]
    counts = [0] * (len(edges) + 1)
    excluded = 0
    for value in values:
        if not domain.contains(value):
            excluded += 1
            continue
        counts[bisect.bisect_right(edges, value)] += 1

    bounds = [lower] + edges + [upper]
    bins = [Bin(bounds[i], bounds[i + 1], counts[i]) for i in range(len(counts))]
    return bins, excluded


def _even_thresholds(domain: Domain, bin_count: int) -> List[Any]:
    lower, upper = domain
    width = (upper - lower) / bin_count
    return [lower + width * i for i in range(1, bin_count)]


def choose_thresholds(scale: LinearScale, bin_count: int) -> List[Any]:
    """
    Pick at most ``bin_count`` interior thresholds from the scale's nice ticks.

    Nice ticks can overshoot the requested count, so fewer ticks are requested
    until they fit. Evenly spaced edges are the last resort, also used when
    the domain has no nice ticks at all.
    """
    domain = scale.domain
    count = bin_count
    while count > 0:
        candidates = scale.ticks(count)
        if not candidates:
            break
        inner = [t for t in candidates if domain.lower < t < domain.upper]
        if len(inner) <= bin_count:
            return inner
        count -= 1
    logger.debug("No nice thresholds fit %d bins over %s, using even spacing", bin_count, tuple(domain))
    return _even_thresholds(domain, bin_count)


def bin_values(values: Sequence[Any], scale: LinearScale, bin_count: int = DEFAULT_BIN_COUNT) -> Tuple[List[Bin], int]:
    """
    Bin values over the width scale's domain.

    Raises:
        InvalidBinCountError: If bin_count is not a positive integer
    """
    bin_count = validate_bin_count(bin_count)
    thresholds = choose_thresholds(scale, bin_count)
    bins, excluded = compute_bins(values, scale.domain, thresholds)
    if excluded:
        logger.warning("%d value(s) fall outside the domain %s and were not binned",
                       excluded, tuple(scale.domain))
    logger.debug("Binned %d value(s) into %d bin(s)", len(values) - excluded, len(bins))
    return bins, excluded
