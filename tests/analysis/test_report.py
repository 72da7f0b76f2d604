"""Tests for ReportFormatter text blocks."""

import pytest

from carvalue.analysis import ReportFormatter, format_number
from carvalue.pipeline import RegressionMetrics


@pytest.fixture
def metrics():
    return RegressionMetrics(
        loss_function=4567891.237,
        r_squared=0.8549,
        mean_absolute_error=1234.5,
        mean_squared_error=4567891.237,
        root_mean_squared_error=2137.263,
        n_samples=200,
    )


class TestFormatNumber:
    @pytest.mark.parametrize("value,expected", [
        (0.8549, "0.85"),
        (0.5, "0.5"),
        (2.0, "2"),
        (1234.567, "1234.57"),
        (0.125, "0.13"),
        (-0.5, "-0.5"),
        (0.0, "0"),
        (0.001, "0"),
    ])
    def test_zero_integer_kept(self, value, expected):
        assert format_number(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (0.5, ".5"),
        (0.0, ""),
        (12.3, "12.3"),
        (-0.25, "-.25"),
    ])
    def test_zero_integer_dropped(self, value, expected):
        assert format_number(value, keep_zero=False) == expected

    def test_three_decimals(self):
        assert format_number(0.12345, decimals=3) == "0.123"

    def test_nan(self):
        assert format_number(float("nan")) == "NaN"


class TestFormatMetrics:
    def test_exact_block(self, metrics):
        text = ReportFormatter().format_metrics(metrics, name="LightGbm")
        assert text.splitlines() == [
            "*************************************************",
            "*       Metrics for LightGbm regression model      ",
            "*------------------------------------------------",
            "*       LossFn:        4567891.24",
            "*       R2 Score:      0.85",
            "*       Absolute loss: 1234.5",
            "*       Squared loss:  4567891.24",
            "*       RMS loss:      2137.26",
            "*************************************************",
        ]

    def test_without_name(self, metrics):
        header = ReportFormatter().format_metrics(metrics).splitlines()[1]
        assert header == "*       Metrics for regression model      "

    def test_field_order(self, metrics):
        text = ReportFormatter().format_metrics(metrics)
        labels = ["LossFn:", "R2 Score:", "Absolute loss:", "Squared loss:", "RMS loss:"]
        positions = [text.index(label) for label in labels]
        assert positions == sorted(positions)

    def test_nan_r_squared(self, metrics):
        from dataclasses import replace

        text = ReportFormatter().format_metrics(replace(metrics, r_squared=float("nan")))
        assert "*       R2 Score:      NaN" in text


class TestFormatCrossValidation:
    def test_averages(self):
        folds = [
            RegressionMetrics(10.0, 0.8, 2.0, 10.0, 3.0, 50),
            RegressionMetrics(20.0, 0.9, 3.0, 20.0, 4.0, 50),
        ]
        lines = ReportFormatter().format_cross_validation(folds).splitlines()
        assert lines[3] == "*       Average L1 Loss:       2.5 "
        assert lines[4] == "*       Average L2 Loss:       15  "
        assert lines[5] == "*       Average RMS:           3.5  "
        assert lines[6] == "*       Average Loss Function: 15  "
        assert lines[7] == "*       Average R-squared:     0.85  "

    def test_no_folds(self):
        with pytest.raises(ValueError):
            ReportFormatter().format_cross_validation([])
