"""Least-squares trend line through (actual, predicted) price pairs.

Drawn over the prediction scatter plot to show how predictions track
measured prices.

    slope     = |meanX·meanY − meanXY| / |meanX² − meanXX|
    intercept = meanY − slope·meanX

The slope is taken as an absolute value, so negatively correlated data
still yields a rising line. Callers relying on the sign of the trend must
compute it themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from carvalue.config import LINE_X_MAX, LINE_X_START
from carvalue.errors import DegenerateInputError

# Relative tolerance for the zero-variance check on x
DENOMINATOR_RTOL = 1e-12


@dataclass(frozen=True)
class RegressionLine:
    """y = slope·x + intercept."""

    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept

    def endpoints(
        self,
        x_start: float = LINE_X_START,
        x_end: float = LINE_X_MAX,
    ) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Two points on the line, for plotting."""
        return (x_start, self.predict(x_start)), (x_end, self.predict(x_end))


class RegressionLineFitter:
    """Fits a RegressionLine to (x, y) pairs."""

    def fit(self, pairs: Iterable[Tuple[float, float]]) -> RegressionLine:
        """Fit a line through the pairs.

        Args:
            pairs: (actual, predicted) tuples.

        Raises:
            DegenerateInputError: If there are no pairs or every x is the
                same (the slope denominator vanishes).
        """
        points = np.asarray(list(pairs), dtype=float)
        if points.size == 0:
            raise DegenerateInputError("Cannot fit a regression line to zero points")
        if points.ndim != 2 or points.shape[1] != 2:
            raise DegenerateInputError(f"Expected (x, y) pairs, got array of shape {points.shape}")

        x, y = points[:, 0], points[:, 1]
        mean_x = float(np.mean(x))
        mean_y = float(np.mean(y))
        mean_xy = float(np.mean(x * y))
        mean_xx = float(np.mean(x * x))

        denominator = mean_x * mean_x - mean_xx
        if abs(denominator) <= DENOMINATOR_RTOL * mean_xx:
            raise DegenerateInputError("All x values are identical; slope is undefined")

        slope = abs((mean_x * mean_y - mean_xy) / denominator)
        return RegressionLine(slope=slope, intercept=mean_y - slope * mean_x)
