"""
SVG rendering and the Chart wrapper.

The renderer is the only place that touches a drawing surface: it receives
finished Layout geometry and writes the SVG document D3 would have built
in the browser (svg.graph > g canvas > rect.bar, text, g.x.axis, g.y.axis).
"""

import logging
from html import escape
import xml.etree.ElementTree as ET
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import ChartConfig
from .layout import Axis, Layout

logger = logging.getLogger(__name__)

# Optional imports for Jupyter notebook support
try:
    import ipywidgets as widgets
    from IPython.display import display
    JUPYTER_AVAILABLE = True
except ImportError:
    widgets = None
    display = None
    JUPYTER_AVAILABLE = False

SVG_NS = "http://www.w3.org/2000/svg"
TICK_SIZE = 6
TICK_PADDING = 3

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{svg}
</body>
</html>
"""


def _num(value: float) -> str:
    value = round(float(value), 3)
    return str(int(value)) if value.is_integer() else str(value)


def _translate(x: float, y: float) -> str:
    return f"translate({_num(x)},{_num(y)})"


class SvgRenderer:
    """Writes Layout geometry into an SVG document."""

    def __init__(self, config: Optional[ChartConfig] = None):
        self.config = config or ChartConfig()
        self.last_svg = None

    @contextmanager
    def surface(self) -> Iterator[ET.Element]:
        """
        Acquire a fresh SVG root and yield its plot canvas.

        The canvas is translated by the margins. The root is serialized into
        ``self.last_svg`` and released when the block exits, even on error.
        """
        config = self.config
        root = ET.Element("svg", {
            "xmlns": SVG_NS,
            "class": "graph svg",
            "width": str(config.width),
            "height": str(config.height),
        })
        self._add_background(root)
        canvas = ET.SubElement(root, "g", {"transform": _translate(config.margin.left, config.margin.top)})
        self.last_svg = None
        try:
            yield canvas
            self.last_svg = ET.tostring(root, encoding="unicode")
        finally:
            root.clear()

    def _add_background(self, root: ET.Element):
        colour = self.config.colour
        defs = ET.SubElement(root, "defs")
        gradient = ET.SubElement(defs, "linearGradient", {
            "id": "background-gradient", "x1": "0", "y1": "0", "x2": "0", "y2": "1",
        })
        ET.SubElement(gradient, "stop", {"offset": "0%", "stop-color": colour.top})
        ET.SubElement(gradient, "stop", {"offset": "100%", "stop-color": colour.bottom})
        ET.SubElement(root, "rect", {
            "class": "background",
            "width": "100%",
            "height": "100%",
            "fill": "url(#background-gradient)",
        })

    def render(self, layout: Layout) -> str:
        """Render the layout and return the SVG markup."""
        with self.surface() as canvas:
            for bar, label in zip(layout.bars, layout.labels):
                ET.SubElement(canvas, "rect", {
                    "class": "bar",
                    "x": _num(bar.x),
                    "y": _num(bar.y),
                    "width": _num(bar.width),
                    "height": _num(bar.height),
                    "transform": _translate(1, 0),
                    "fill": self.config.bar_fill,
                })
                text = ET.SubElement(canvas, "text", {
                    "class": "count",
                    "x": _num(label.x),
                    "y": _num(label.y),
                    "dy": label.dy,
                    "text-anchor": "middle",
                })
                text.text = label.text
            self._render_axis(canvas, layout.x_axis, "x axis")
            self._render_axis(canvas, layout.y_axis, "y axis")
            self._render_titles(canvas, layout)
        return self.last_svg

    def _render_axis(self, canvas: ET.Element, axis: Axis, css_class: str):
        group = ET.SubElement(canvas, "g", {
            "class": css_class,
            "font-size": "10",
            "font-family": "sans-serif",
        })
        if axis.orient == "bottom":
            group.set("transform", _translate(0, axis.offset))
            group.set("text-anchor", "middle")
            ET.SubElement(group, "path", {
                "class": "domain", "stroke": "currentColor", "fill": "none",
                "d": f"M0.5,{TICK_SIZE}V0.5H{_num(axis.length + 0.5)}V{TICK_SIZE}",
            })
        else:
            group.set("text-anchor", "end")
            ET.SubElement(group, "path", {
                "class": "domain", "stroke": "currentColor", "fill": "none",
                "d": f"M-{TICK_SIZE},{_num(axis.length + 0.5)}H0.5V0.5H-{TICK_SIZE}",
            })

        for tick in axis.ticks:
            if axis.orient == "bottom":
                node = ET.SubElement(group, "g", {"class": "tick", "transform": _translate(tick.position + 0.5, 0)})
                ET.SubElement(node, "line", {"stroke": "currentColor", "y2": str(TICK_SIZE)})
                text = ET.SubElement(node, "text", {
                    "fill": "currentColor", "y": str(TICK_SIZE + TICK_PADDING), "dy": "0.71em",
                })
            else:
                node = ET.SubElement(group, "g", {"class": "tick", "transform": _translate(0, tick.position + 0.5)})
                ET.SubElement(node, "line", {"stroke": "currentColor", "x2": str(-TICK_SIZE)})
                text = ET.SubElement(node, "text", {
                    "fill": "currentColor", "x": str(-(TICK_SIZE + TICK_PADDING)), "dy": "0.32em",
                })
            text.text = tick.text

    def _render_titles(self, canvas: ET.Element, layout: Layout):
        config = self.config
        if config.title:
            title = ET.SubElement(canvas, "text", {
                "class": "title", "x": _num(layout.width / 2), "y": "0", "text-anchor": "middle",
            })
            title.text = config.title
        if config.xlabel:
            xlabel = ET.SubElement(canvas, "text", {
                "class": "x label", "x": _num(layout.width), "y": _num(layout.height + config.margin.bottom - 2),
                "text-anchor": "end",
            })
            xlabel.text = config.xlabel
        if config.ylabel:
            ylabel = ET.SubElement(canvas, "text", {
                "class": "y label", "transform": "rotate(-90)", "y": "6", "dy": ".75em",
                "text-anchor": "end",
            })
            ylabel.text = config.ylabel


def display_svg(svg_string: str, width: int = 600, height: int = 400):
    """
    Display an SVG string using ipywidgets HTML (if available).

    Args:
        svg_string: SVG content as string
        width: Container width
        height: Container height

    Returns:
        ipywidgets.HTML widget if Jupyter is available, otherwise None
    """
    if not JUPYTER_AVAILABLE:
        logger.warning("Jupyter not available. SVG generated (%d chars) but cannot display.", len(svg_string))
        return None

    html_content = f"""
    <div style="width: {width}px; height: {height}px; margin: 10px 0;
                background: white; overflow: hidden;">
        {svg_string}
    </div>
    """

    widget = widgets.HTML(value=html_content)
    display(widget)
    return widget


class Chart:
    """
    A rendered histogram: the SVG markup plus the data it was built from.
    """

    def __init__(self, svg: str, result=None, layout: Optional[Layout] = None,
                 config: Optional[ChartConfig] = None):
        self.svg = svg
        self.result = result
        self.layout = layout
        self.config = config or ChartConfig()

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def bins(self):
        return self.result.bins if self.result is not None else []

    def show(self, display_width: int = None, display_height: int = None):
        """Display the chart in a Jupyter notebook."""
        w = display_width or self.width
        h = display_height or self.height
        return display_svg(self.svg, w, h)

    def plot(self, display_width: int = None, display_height: int = None):
        """Alias for show()."""
        return self.show(display_width, display_height)

    def _repr_html_(self):
        return self.svg

    def __repr__(self):
        return f"<Chart {self.width}x{self.height} bins={len(self.bins)}>"

    def to_html(self) -> str:
        """A standalone browser document containing the chart."""
        title = self.config.title or "Histogram"
        return HTML_TEMPLATE.format(title=escape(title), svg=self.svg)

    def _write(self, filepath: str, content: str):
        full_path = Path(filepath).expanduser().resolve()
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise RuntimeError(f"Failed to save chart to {full_path}: {e}") from e
        logger.info("Saved chart to %s", full_path)
        return full_path

    def save_svg(self, filepath: str) -> Path:
        """
        Save chart as SVG file.

        Example:
            chart.save_svg("results/histogram.svg")
        """
        return self._write(filepath, self.svg)

    def save_html(self, filepath: str) -> Path:
        """Save chart wrapped in an HTML page."""
        return self._write(filepath, self.to_html())

    def save(self, filepath: str) -> Path:
        """
        Save chart with format auto-detected from file extension.

        Supported formats:
            .svg - Scalable Vector Graphics
            .html / .htm - Browser document
        """
        extension = Path(filepath).suffix.lower()
        if extension == '.svg':
            return self.save_svg(filepath)
        if extension in ('.html', '.htm'):
            return self.save_html(filepath)
        supported_formats = ['.svg', '.html', '.htm']
        raise ValueError(f"Unsupported file format '{extension}'. "
                         f"Supported formats: {', '.join(supported_formats)}")
