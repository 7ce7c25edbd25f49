"""
Type adapters: turn raw record fields into uniform values.

An adapter bundles everything that differs between numeric and date
histograms: how a field is parsed, which domain policy applies and which
scale maps that domain to pixels.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidFieldError
from .scales import EPOCH, Domain, LinearScale, TimeScale

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

InvalidPolicy = Literal["skip", "raise"]
INVALID_POLICIES = ("skip", "raise")

_MISSING = object()


def parse_number(raw: Any) -> Optional[float]:
    """Coerce a raw field to a finite float, or None when that is not possible."""
    if hasattr(raw, "item") and callable(getattr(raw, "item")):
        raw = raw.item()
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_date(raw: Any) -> Optional[datetime]:
    """
    Parse ``YYYY-MM-DD`` strings (e.g. "2004-04-15") into naive datetimes.

    Timezone-aware datetimes are converted to naive UTC so they compare with
    parsed strings.
    """
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            return raw.astimezone(timezone.utc).replace(tzinfo=None)
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if not isinstance(raw, str):
        return None
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT)
    except ValueError:
        return None


def _numeric_extent(values: Sequence[float]) -> Domain:
    # Bars share a zero baseline
    return Domain(0.0, max(0.0, max(values)))


def _temporal_extent(values: Sequence[datetime]) -> Domain:
    return Domain(min(values), max(values))


@dataclass(frozen=True)
class TypeAdapter:
    """
    Strategy describing one kind of uniform value.

    Attributes:
        kind: "numeric" or "temporal"
        parse: Raw field value -> uniform value, or None when invalid
        extent: Domain policy over a non-empty value sequence
        scale_class: Scale used for the value axis
        zero: Value used for the zero-extent domain of an empty histogram
    """
    kind: str
    parse: Callable[[Any], Any]
    extent: Callable[[Sequence[Any]], Domain]
    scale_class: type
    zero: Any

    def adapt(self, records: Sequence[Mapping[str, Any]], field: str,
              on_invalid: InvalidPolicy = "skip") -> Tuple[List[Any], int]:
        """
        Extract and parse ``field`` from every record.

        Args:
            records: Raw records (left untouched)
            field: Name of the plotted field
            on_invalid: "skip" drops bad records with a warning, "raise" fails

        Returns:
            (values, skipped) where skipped counts dropped records

        Raises:
            InvalidFieldError: On a missing or unparseable field when on_invalid="raise"
        """
        if on_invalid not in INVALID_POLICIES:
            raise ValueError(f"on_invalid must be one of {INVALID_POLICIES}, got {on_invalid!r}")

        values = []
        skipped = 0
        for index, record in enumerate(records):
            raw = record.get(field, _MISSING) if isinstance(record, Mapping) else _MISSING
            if raw is _MISSING:
                error = InvalidFieldError(index, field, reason="missing")
            else:
                value = self.parse(raw)
                if value is not None:
                    values.append(value)
                    continue
                error = InvalidFieldError(index, field, raw, reason=f"not a valid {self.kind} value")
            if on_invalid == "raise":
                raise error
            logger.warning("Skipping record: %s", error)
            skipped += 1
        return values, skipped


NUMERIC = TypeAdapter(
    kind="numeric",
    parse=parse_number,
    extent=_numeric_extent,
    scale_class=LinearScale,
    zero=0.0,
)

TEMPORAL = TypeAdapter(
    kind="temporal",
    parse=parse_date,
    extent=_temporal_extent,
    scale_class=TimeScale,
    zero=EPOCH,
)

ADAPTERS = {
    "numeric": NUMERIC,
    "int": NUMERIC,
    "temporal": TEMPORAL,
    "date": TEMPORAL,
}


def get_adapter(kind: Union[str, TypeAdapter]) -> TypeAdapter:
    """Resolve an adapter by name ("numeric"/"int" or "temporal"/"date")."""
    if isinstance(kind, TypeAdapter):
        return kind
    try:
        return ADAPTERS[kind]
    except KeyError:
        raise ValueError(f"Unknown value kind: {kind!r}. Expected one of {sorted(ADAPTERS)}")
