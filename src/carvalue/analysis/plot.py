"""Scatter plot of measured vs predicted prices with the fitted trend line.

Rendered with matplotlib's non-interactive Agg backend, so it works in
scripts and tests without a display. Output format follows the file
suffix (.svg or .png).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Tuple, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from carvalue.analysis.regression_line import RegressionLine
from carvalue.config import LINE_X_MAX, LINE_X_START, PLOT_WINDOW
from carvalue.errors import ConfigurationError, DegenerateInputError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {".svg": "svg", ".png": "png"}
TITLE = "Distribution of price prediction"


class RegressionPlotter:
    """Draws the prediction scatter for one test set."""

    def __init__(self, window: Tuple[float, float] = PLOT_WINDOW):
        self.window = window

    def render(
        self,
        actual: Sequence[float],
        predicted: Sequence[float],
        line: RegressionLine,
        path: Union[str, Path],
    ) -> Path:
        """Write the chart to `path`.

        Args:
            actual: Measured prices (x axis).
            predicted: Model prices (y axis).
            line: Trend line drawn from LINE_X_START to LINE_X_MAX.
            path: Output file; the suffix picks the format.

        Raises:
            DegenerateInputError: If the inputs are empty or differ in length.
            ConfigurationError: If the suffix is not .svg or .png.
        """
        actual = list(actual)
        predicted = list(predicted)
        if not actual:
            raise DegenerateInputError("Nothing to plot: no points")
        if len(actual) != len(predicted):
            raise DegenerateInputError(
                f"Length mismatch: {len(actual)} measured vs {len(predicted)} predicted"
            )

        path = Path(path)
        fmt = SUPPORTED_FORMATS.get(path.suffix.lower())
        if fmt is None:
            raise ConfigurationError(
                f"Unsupported plot format '{path.suffix}'. Use one of {sorted(SUPPORTED_FORMATS)}",
                stage="plot",
            )
        path.parent.mkdir(parents=True, exist_ok=True)

        low, high = self.window
        (x1, y1), (x2, y2) = line.endpoints(LINE_X_START, LINE_X_MAX)

        fig, ax = plt.subplots(figsize=(10, 10))
        try:
            ax.scatter(actual, predicted, s=12, color="tab:blue", alpha=0.6)
            ax.plot([x1, x2], [y1, y2], color="tab:red", linewidth=2)
            ax.set_xlim(low, high)
            ax.set_ylim(low, high)
            ax.set_xlabel("Measured")
            ax.set_ylabel("Predicted")
            ax.set_title(TITLE, fontsize=14, fontweight="bold")
            fig.tight_layout()
            fig.savefig(path, format=fmt, dpi=150)
        finally:
            plt.close(fig)

        logger.info(f"Chart saved to {path} ({len(actual):,} points)")
        return path
