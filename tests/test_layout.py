import pytest

from d3hist import ChartConfig, Histogram, Margin
from d3hist.layout import compose_layout, format_count


def test_bars_follow_scales(sample_records):
    histogram = Histogram()
    result = histogram.compute(sample_records)
    layout = histogram.layout(result)

    first = layout.bars[0]
    assert (first.x, first.y) == (0, 0)
    assert first.width == 102
    assert first.height == 460
    for bar in layout.bars:
        assert bar.x == result.width_scale(bar.bin.x0)
        assert bar.width == result.width_scale(bar.bin.x1) - result.width_scale(bar.bin.x0) - 1
        assert bar.y + bar.height == pytest.approx(layout.height)


def test_labels_are_centered_counts(sample_records):
    histogram = Histogram()
    layout = histogram.layout(histogram.compute(sample_records))
    label = layout.labels[0]
    assert label.text == "8"
    assert label.x == pytest.approx(51.5)
    assert label.y == pytest.approx(6)


def test_axes(sample_records):
    histogram = Histogram()
    layout = histogram.layout(histogram.compute(sample_records))
    assert [t.text for t in layout.x_axis.ticks] == ["0", "10", "20", "30", "40", "50", "60", "70", "80"]
    assert layout.x_axis.offset == layout.height
    assert layout.y_axis.ticks[0].position == layout.height


def test_degenerate_domain_spans_full_width():
    histogram = Histogram()
    result = histogram.compute([{"value": "0"}, {"value": "0"}])
    layout = compose_layout(result.bins, result.width_scale, result.height_scale, histogram.config)
    assert len(layout.bars) == 1
    assert layout.bars[0].x == 0
    assert layout.bars[0].width == histogram.config.inner_width - 1


def test_empty_result_has_axes_but_no_bars():
    histogram = Histogram()
    layout = histogram.layout(histogram.compute([]))
    assert layout.bars == []
    assert layout.labels == []
    assert layout.x_axis.ticks


def test_format_count_uses_thousands_separator():
    assert format_count(1234) == "1,234"


def test_config_validation():
    with pytest.raises(ValueError):
        ChartConfig(width=50, margin={"top": 10, "right": 30, "bottom": 30, "left": 30})
    config = ChartConfig(margin={"top": 5, "right": 10, "bottom": 20, "left": 40})
    assert config.margin == Margin(top=5, right=10, bottom=20, left=40)
    assert (config.inner_width, config.inner_height) == (910, 475)
