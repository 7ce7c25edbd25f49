import logging
import xml.etree.ElementTree as ET

import pytest

from d3hist import Chart, ChartConfig, Histogram, SvgRenderer, configure_logging
from d3hist import render


def _elements(svg, tag, css_class=None):
    root = ET.fromstring(svg)
    found = [el for el in root.iter() if el.tag.split('}')[-1] == tag]
    if css_class is not None:
        found = [el for el in found if el.get("class") == css_class]
    return found


def test_svg_structure(sample_records):
    chart = Histogram(ChartConfig(title="Sample", xlabel="value", ylabel="count")).plot(sample_records)
    root = ET.fromstring(chart.svg)
    assert root.get("class") == "graph svg"
    assert root.get("width") == "960"
    assert root.get("height") == "500"

    bars = _elements(chart.svg, "rect", "bar")
    assert len(bars) == len(chart.bins)
    assert bars[0].get("fill") == "steelblue"
    assert bars[0].get("width") == "102"

    counts = [el.text for el in _elements(chart.svg, "text", "count")]
    assert counts == ["8", "4", "5", "6", "4", "7", "1", "4", "1"]
    assert len(_elements(chart.svg, "g", "x axis")) == 1
    assert len(_elements(chart.svg, "g", "y axis")) == 1
    assert _elements(chart.svg, "text", "title")[0].text == "Sample"


def test_canvas_is_translated_by_margins(sample_records):
    config = ChartConfig(margin={"top": 20, "right": 10, "bottom": 30, "left": 40})
    chart = Histogram(config).plot(sample_records)
    canvases = [g for g in _elements(chart.svg, "g") if g.get("transform") == "translate(40,20)"]
    assert len(canvases) == 1


def test_gradient_uses_configured_colours(sample_records):
    chart = Histogram().plot(sample_records)
    stops = [el.get("stop-color") for el in _elements(chart.svg, "stop")]
    assert stops == ["rgb(237, 85, 101)", "rgb(255, 255, 255)"]


def test_empty_chart_renders_without_bars():
    chart = Histogram().plot([])
    assert _elements(chart.svg, "rect", "bar") == []


def test_surface_is_released_on_error():
    renderer = SvgRenderer()
    with pytest.raises(RuntimeError):
        with renderer.surface() as canvas:
            ET.SubElement(canvas, "rect")
            raise RuntimeError("boom")
    assert renderer.last_svg is None


def test_save_by_extension(tmp_path, sample_records):
    chart = Histogram(ChartConfig(title="Values & counts")).plot(sample_records)

    svg_path = chart.save(str(tmp_path / "out" / "chart.svg"))
    assert svg_path.read_text(encoding="utf-8") == chart.svg

    html_path = chart.save(str(tmp_path / "chart.html"))
    html = html_path.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Values &amp; counts</title>" in html
    assert chart.svg in html

    with pytest.raises(ValueError):
        chart.save(str(tmp_path / "chart.png"))


def test_save_failure_is_wrapped(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    chart = Chart("<svg></svg>")
    with pytest.raises(RuntimeError, match="Failed to save chart"):
        chart.save(str(blocker / "chart.svg"))


def test_show_without_jupyter(monkeypatch, caplog):
    monkeypatch.setattr(render, "JUPYTER_AVAILABLE", False)
    chart = Chart("<svg></svg>")
    with caplog.at_level(logging.WARNING, logger="d3hist.render"):
        assert chart.show() is None
    assert "Jupyter not available" in caplog.text


def test_show_with_jupyter(monkeypatch):
    shown = []

    class FakeWidgets:
        @staticmethod
        def HTML(value):
            return {"value": value}

    monkeypatch.setattr(render, "JUPYTER_AVAILABLE", True)
    monkeypatch.setattr(render, "widgets", FakeWidgets)
    monkeypatch.setattr(render, "display", shown.append)

    widget = Chart("<svg></svg>", config=ChartConfig(width=300, height=200)).plot()
    assert shown == [widget]
    assert "<svg></svg>" in widget["value"]
    assert "width: 300px" in widget["value"]


def test_chart_repr_and_html():
    chart = Chart("<svg></svg>", config=ChartConfig(width=320, height=240, title="Counts"))
    assert repr(chart) == "<Chart 320x240 bins=0>"
    assert chart._repr_html_() == "<svg></svg>"
    assert "<title>Counts</title>" in chart.to_html()


def test_configure_logging():
    package_logger = logging.getLogger("d3hist")
    try:
        assert configure_logging("debug") == logging.DEBUG
        assert package_logger.level == logging.DEBUG
        assert configure_logging(logging.WARNING) == logging.WARNING
    finally:
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_reads_environment_per_call(monkeypatch):
    package_logger = logging.getLogger("d3hist")
    try:
        monkeypatch.setenv("D3HIST_LOG_LEVEL", "error")
        assert configure_logging() == logging.ERROR
        monkeypatch.setenv("D3HIST_LOG_LEVEL", "debug")
        assert configure_logging() == logging.DEBUG
        monkeypatch.delenv("D3HIST_LOG_LEVEL")
        assert configure_logging() == logging.INFO
    finally:
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_accepts_notset(monkeypatch):
    monkeypatch.setenv("D3HIST_LOG_LEVEL", "error")
    assert configure_logging(logging.NOTSET) == logging.NOTSET
    assert logging.getLogger("d3hist").level == logging.NOTSET
