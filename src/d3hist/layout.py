"""
Layout: turn bins and scales into bar, label and axis geometry.

Coordinates are relative to the plot area (inside the margins), with the
origin at the top left.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .binning import Bin
from .config import ChartConfig
from .scales import LinearScale

BAR_GAP = 1
LABEL_OFFSET = 6


@dataclass(frozen=True)
class Bar:
    x: float
    y: float
    width: float
    height: float
    bin: Bin


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    text: str
    dy: str = ".75em"


@dataclass(frozen=True)
class Tick:
    value: Any
    position: float
    text: str


@dataclass(frozen=True)
class Axis:
    orient: str
    ticks: List[Tick]
    length: float
    offset: float = 0.0


@dataclass(frozen=True)
class Layout:
    width: float
    height: float
    bars: List[Bar]
    labels: List[Label]
    x_axis: Axis
    y_axis: Axis


def format_count(count: int) -> str:
    return f"{count:,.0f}"


def axis_ticks(scale: LinearScale, count: int) -> List[Tick]:
    fmt = scale.tick_format(count)
    return [Tick(value, scale(value), fmt(value)) for value in scale.ticks(count)]


def compose_layout(bins: Sequence[Bin], width_scale: LinearScale, height_scale: LinearScale,
                   config: Optional[ChartConfig] = None) -> Layout:
    """
    Place one bar and one count label per bin, plus both axes.

    Each bar is one pixel narrower than its bin so neighbouring bars stay
    visually apart. A single bin over a degenerate domain spans the whole
    plot width.
    """
    config = config or ChartConfig()
    width = config.inner_width
    height = config.inner_height
    full_width = width_scale.domain.lower == width_scale.domain.upper

    bars = []
    labels = []
    for b in bins:
        if full_width:
            x, span = 0.0, float(width)
        else:
            x = width_scale(b.x0)
            span = width_scale(b.x1) - x
        y = height_scale(b.count)
        bars.append(Bar(x=x, y=y, width=max(0.0, span - BAR_GAP), height=height - y, bin=b))
        labels.append(Label(x=x + span / 2, y=y + LABEL_OFFSET, text=format_count(b.count)))

    x_axis = Axis("bottom", axis_ticks(width_scale, config.xticks), width, offset=height)
    y_axis = Axis("left", axis_ticks(height_scale, config.yticks), height)
    return Layout(width=width, height=height, bars=bars, labels=labels, x_axis=x_axis, y_axis=y_axis)
