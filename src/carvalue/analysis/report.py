"""Plain-text metric reports.

The block layout and labels are consumed by existing tooling, so they
are fixed:

    *************************************************
    *       Metrics for {name} regression model
    *------------------------------------------------
    *       LossFn:        ...
    *       R2 Score:      ...
    *       Absolute loss: ...
    *       Squared loss:  ...
    *       RMS loss:      ...
    *************************************************

Number patterns:
    "0.##"  up to two decimals, trailing zeros dropped   (0.5 → "0.5")
    "#.##"  same, but a zero integer part is omitted     (0.5 → ".5", 0 → "")
    "0.###" up to three decimals
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from carvalue.pipeline.evaluator import RegressionMetrics, average_metrics

BORDER = "*" * 49
DIVIDER = "*" + "-" * 48
CV_BORDER = "*" * 109
CV_DIVIDER = "*" + "-" * 108


def format_number(value: float, decimals: int = 2, keep_zero: bool = True) -> str:
    """Render a number with up to `decimals` decimals, trailing zeros trimmed.

    Args:
        value: Number to render.
        decimals: Maximum decimals (midpoints round away from zero).
        keep_zero: Show a zero integer part ("0.5"). When False, the
            integer part is omitted if it is zero (".5", and 0 → "").
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "0" if keep_zero else ""

    sign = "-" if rounded < 0 else ""
    text = f"{abs(rounded):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if not keep_zero and text.startswith("0."):
        text = text[1:]
    return sign + text


class ReportFormatter:
    """Renders RegressionMetrics as fixed-layout text blocks."""

    def format_metrics(self, metrics: RegressionMetrics, name: Optional[str] = None) -> str:
        """Single-evaluation metrics block.

        Args:
            metrics: Evaluation result.
            name: Optional model name shown in the header.
        """
        title = f"{name} regression model" if name else "regression model"
        lines = [
            BORDER,
            f"*       Metrics for {title}      ",
            DIVIDER,
            f"*       LossFn:        {format_number(metrics.loss_function)}",
            f"*       R2 Score:      {format_number(metrics.r_squared)}",
            f"*       Absolute loss: {format_number(metrics.mean_absolute_error, keep_zero=False)}",
            f"*       Squared loss:  {format_number(metrics.mean_squared_error, keep_zero=False)}",
            f"*       RMS loss:      {format_number(metrics.root_mean_squared_error, keep_zero=False)}",
            BORDER,
        ]
        return "\n".join(lines)

    def format_cross_validation(self, results: Sequence[RegressionMetrics]) -> str:
        """Fold-averaged metrics block for a cross-validation run.

        Raises:
            ValueError: If there are no fold results.
        """
        avg = average_metrics(list(results))
        if avg is None:
            raise ValueError("No cross-validation results to report")

        def fmt(value: float) -> str:
            return format_number(value, decimals=3)

        lines = [
            CV_BORDER,
            "*       Metrics for Regression model      ",
            CV_DIVIDER,
            f"*       Average L1 Loss:       {fmt(avg.mean_absolute_error)} ",
            f"*       Average L2 Loss:       {fmt(avg.mean_squared_error)}  ",
            f"*       Average RMS:           {fmt(avg.root_mean_squared_error)}  ",
            f"*       Average Loss Function: {fmt(avg.loss_function)}  ",
            f"*       Average R-squared:     {fmt(avg.r_squared)}  ",
            CV_BORDER,
        ]
        return "\n".join(lines)

    def format_summary(self, metrics: RegressionMetrics) -> List[str]:
        """Short "label: value" lines for interactive display."""
        return [
            f"R-squared: {format_number(metrics.r_squared)}",
            f"Absolute loss: {format_number(metrics.mean_absolute_error)}",
            f"Squared loss: {format_number(metrics.mean_squared_error)}",
            f"RMS loss: {format_number(metrics.root_mean_squared_error)}",
            f"Loss function: {format_number(metrics.loss_function)}",
        ]
