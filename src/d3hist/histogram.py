"""
The Histogram chart: records in, bins and SVG out.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from .adapters import INVALID_POLICIES, InvalidPolicy, TypeAdapter, get_adapter
from .binning import DEFAULT_BIN_COUNT, Bin, bin_values, validate_bin_count
from .config import ChartConfig
from .errors import EmptyInputError
from .layout import Layout, compose_layout
from .render import Chart, SvgRenderer
from .scales import Domain, LinearScale, compute_domain, compute_height_scale, compute_scale

logger = logging.getLogger(__name__)

DEFAULT_FIELD = "value"


@dataclass(frozen=True)
class HistogramResult:
    """
    Everything computed for one set of records.

    Attributes:
        values: Uniform values that survived parsing
        domain: Value domain covered by the bins
        width_scale: Domain -> horizontal pixels
        height_scale: Bin count -> vertical pixels (inverted)
        bins: Ascending, contiguous bins
        skipped: Records dropped because the field was missing or invalid
        excluded: Valid values outside the domain (e.g. negative numbers)
    """
    values: List[Any]
    domain: Domain
    width_scale: LinearScale
    height_scale: LinearScale
    bins: List[Bin]
    skipped: int = 0
    excluded: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.bins

    @property
    def total(self) -> int:
        return sum(b.count for b in self.bins)


class Histogram:
    """
    Univariate histogram over one field of a record sequence.

    The value kind is chosen at construction: "numeric" parses the field as a
    float and anchors the domain at zero, "temporal" parses "%Y-%m-%d" dates
    and uses the true extent.

    Args:
        config: Chart dimensions, margins and colours
        bin_count: Requested number of thresholds (at most bin_count + 1 bins)
        field: Record key to plot
        kind: "numeric" / "int", "temporal" / "date", or a TypeAdapter
        on_invalid: "skip" or "raise" for records with a missing or bad field

    Example:
        h = Histogram(bin_count=10)
        result = h.compute([{"value": "5"}, {"value": "1"}, {"value": "35"}])
        result.domain  # Domain(lower=0.0, upper=35.0)
        chart = h.plot(records)
        chart.save("histogram.html")
    """

    def __init__(self, config: Optional[ChartConfig] = None, bin_count: int = DEFAULT_BIN_COUNT,
                 field: str = DEFAULT_FIELD, kind: Union[str, TypeAdapter] = "numeric",
                 on_invalid: InvalidPolicy = "skip"):
        if on_invalid not in INVALID_POLICIES:
            raise ValueError(f"on_invalid must be one of {INVALID_POLICIES}, got {on_invalid!r}")
        self.config = config or ChartConfig()
        self.bin_count = validate_bin_count(bin_count)
        self.field = field
        self.adapter = get_adapter(kind)
        self.on_invalid = on_invalid

    def __repr__(self):
        return (f"<Histogram {self.adapter.kind} field={self.field!r} "
                f"bins={self.bin_count} {self.config.width}x{self.config.height}>")

    def _empty_result(self, skipped: int) -> HistogramResult:
        zero = self.adapter.zero
        domain = Domain(zero, zero)
        return HistogramResult(
            values=[],
            domain=domain,
            width_scale=compute_scale(domain, self.config.inner_width, self.adapter),
            height_scale=compute_height_scale([], self.config.inner_height),
            bins=[],
            skipped=skipped,
        )

    def compute(self, records: Sequence[Mapping[str, Any]], bin_count: Optional[int] = None) -> HistogramResult:
        """
        Adapt, scale and bin the records.

        Nothing is kept between calls; the same records always give the same
        result. An input with no usable values gives an empty result instead
        of an error.

        Raises:
            InvalidBinCountError: If bin_count is not a positive integer
            InvalidFieldError: On a bad record when on_invalid="raise"
        """
        bin_count = self.bin_count if bin_count is None else validate_bin_count(bin_count)
        values, skipped = self.adapter.adapt(records, self.field, self.on_invalid)

        try:
            domain = compute_domain(values, self.adapter)
        except EmptyInputError:
            logger.info("No %s values in field '%s', producing an empty histogram", self.adapter.kind, self.field)
            return self._empty_result(skipped)

        width_scale = compute_scale(domain, self.config.inner_width, self.adapter)
        bins, excluded = bin_values(values, width_scale, bin_count)
        height_scale = compute_height_scale(bins, self.config.inner_height)
        return HistogramResult(
            values=values,
            domain=domain,
            width_scale=width_scale,
            height_scale=height_scale,
            bins=bins,
            skipped=skipped,
            excluded=excluded,
        )

    def layout(self, result: HistogramResult) -> Layout:
        return compose_layout(result.bins, result.width_scale, result.height_scale, self.config)

    def plot(self, records: Sequence[Mapping[str, Any]], bin_count: Optional[int] = None) -> Chart:
        """
        Compute the histogram for records and render it.

        Args:
            records: A list of mappings sharing the plotted field
            bin_count: Override the configured bin count for this call

        Returns:
            Chart holding the SVG and the computed result
        """
        result = self.compute(records, bin_count)
        layout = self.layout(result)
        svg = SvgRenderer(self.config).render(layout)
        return Chart(svg, result=result, layout=layout, config=self.config)


def hist(records, field=DEFAULT_FIELD, kind="numeric", bins=DEFAULT_BIN_COUNT, width=960, height=500,
         margin=None, colour=None, title=None, xlabel=None, ylabel=None, on_invalid="skip",
         show=False, **kwargs) -> Chart:
    """
    Create a histogram chart from a list of records.

    Args:
        records: List of mappings, e.g. [{"value": "5"}, {"value": "1"}]
        field: Record key to plot (default: "value")
        kind: "numeric" or "date" (default: "numeric")
        bins: Requested number of bins (default: 10)
        width: Outer chart width in pixels (default: 960)
        height: Outer chart height in pixels (default: 500)
        margin: Margin or dict with top/right/bottom/left
        colour: Colour or dict with top/bottom background colours
        title: Chart title (optional)
        xlabel: X-axis label (optional)
        ylabel: Y-axis label (optional)
        on_invalid: "skip" or "raise" for bad records
        show: Whether to display the chart immediately
        **kwargs: Further ChartConfig fields (bar_fill, xticks, yticks)

    Returns:
        Chart object

    Examples:
        d3hist.hist(records)
        d3hist.hist(records, field="date", kind="date", bins=12, title="Signups")
    """
    config_kwargs = dict(width=width, height=height, title=title, xlabel=xlabel, ylabel=ylabel, **kwargs)
    if margin is not None:
        config_kwargs['margin'] = margin
    if colour is not None:
        config_kwargs['colour'] = colour
    config = ChartConfig(**config_kwargs)

    chart = Histogram(config, bin_count=bins, field=field, kind=kind, on_invalid=on_invalid).plot(records)
    if show:
        chart.show()
    return chart
