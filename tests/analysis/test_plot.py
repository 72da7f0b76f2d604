"""Tests for RegressionPlotter."""

import pytest

from carvalue.analysis import RegressionLine, RegressionPlotter
from carvalue.errors import ConfigurationError, DegenerateInputError


@pytest.fixture
def line():
    return RegressionLine(slope=0.9, intercept=1500.0)


class TestRender:
    @pytest.mark.parametrize("suffix", [".png", ".svg"])
    def test_writes_file(self, tmp_path, line, suffix):
        path = RegressionPlotter().render(
            [10000.0, 20000.0, 30000.0],
            [11000.0, 18500.0, 29000.0],
            line,
            tmp_path / "plots" / f"distribution{suffix}",
        )
        assert path.exists()
        assert path.stat().st_size > 0

    def test_svg_content(self, tmp_path, line):
        path = RegressionPlotter().render([1.0, 2.0], [1.0, 2.0], line, tmp_path / "chart.svg")
        assert "<svg" in path.read_text()

    def test_empty_input(self, tmp_path, line):
        with pytest.raises(DegenerateInputError):
            RegressionPlotter().render([], [], line, tmp_path / "chart.png")

    def test_length_mismatch(self, tmp_path, line):
        with pytest.raises(DegenerateInputError):
            RegressionPlotter().render([1.0, 2.0], [1.0], line, tmp_path / "chart.png")

    def test_unsupported_format(self, tmp_path, line):
        with pytest.raises(ConfigurationError, match="Unsupported") as exc:
            RegressionPlotter().render([1.0], [1.0], line, tmp_path / "chart.gif")
        assert exc.value.stage == "plot"
        assert not (tmp_path / "chart.gif").exists()

    def test_figures_closed(self, tmp_path, line):
        import matplotlib.pyplot as plt

        before = len(plt.get_fignums())
        RegressionPlotter().render([1.0, 2.0], [1.0, 2.0], line, tmp_path / "chart.png")
        assert len(plt.get_fignums()) == before
