"""
Chart configuration shared by the layout and the SVG renderer.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Margin:
    top: int = 10
    right: int = 30
    bottom: int = 30
    left: int = 30


@dataclass(frozen=True)
class Colour:
    """Gradient end points behind the plot area."""
    top: str = "rgb(237, 85, 101)"
    bottom: str = "rgb(255, 255, 255)"


@dataclass(frozen=True)
class ChartConfig:
    """
    Dimensions and styling for a histogram chart.

    ``width`` and ``height`` are the outer SVG size; the plot area is what
    remains after subtracting the margins.
    """
    width: int = 960
    height: int = 500
    margin: Margin = field(default_factory=Margin)
    colour: Colour = field(default_factory=Colour)
    bar_fill: str = "steelblue"
    title: Optional[str] = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    xticks: int = 10
    yticks: int = 10

    def __post_init__(self):
        if isinstance(self.margin, dict):
            object.__setattr__(self, "margin", Margin(**self.margin))
        if isinstance(self.colour, dict):
            object.__setattr__(self, "colour", Colour(**self.colour))
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ValueError(
                f"Margins {self.margin} leave no plot area in a {self.width}x{self.height} chart"
            )

    @property
    def inner_width(self) -> int:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margin.top - self.margin.bottom

