"""
d3hist - D3-style histograms for Python

Turns a list of records into binned counts and renders them as an SVG
histogram: bars, count labels and axes, ready for a browser page or a
Jupyter notebook.

Features:
- Numeric histograms: values parsed as floats, domain anchored at zero
- Date histograms: "YYYY-MM-DD" strings, calendar-aligned bins
- Nice bin thresholds (1, 2, 5 x 10^n steps, or calendar intervals)
- SVG and standalone HTML output

Usage:
    import d3hist

    records = [{"value": "5"}, {"value": "1"}, {"value": "35"}]

    # Compute only
    result = d3hist.Histogram(bin_count=10).compute(records)
    result.domain      # Domain(lower=0.0, upper=35.0)
    result.bins        # [Bin(x0=0.0, x1=5.0, count=1), ...]

    # Render
    chart = d3hist.hist(records, bins=10, title="Values")
    display(chart)             # Jupyter: direct SVG display
    chart.save("values.html")  # Browser document
"""

from .adapters import NUMERIC, TEMPORAL, TypeAdapter, get_adapter
from .binning import Bin
from .config import ChartConfig, Colour, Margin
from .errors import EmptyInputError, HistogramError, InvalidBinCountError, InvalidFieldError
from .histogram import Histogram, HistogramResult, hist
from .logging_config import configure_logging
from .render import Chart, SvgRenderer
from .scales import Domain, LinearScale, TimeScale

__version__ = "0.1.0"

__all__ = [
    'hist', 'Histogram', 'HistogramResult', 'Chart', 'SvgRenderer',
    'ChartConfig', 'Margin', 'Colour', 'Bin', 'Domain', 'LinearScale', 'TimeScale',
    'TypeAdapter', 'NUMERIC', 'TEMPORAL', 'get_adapter', 'configure_logging',
    'HistogramError', 'InvalidFieldError', 'InvalidBinCountError', 'EmptyInputError',
]
