"""Model evaluation against held-out listings.

Provides separate evaluation logic (decoupled from training).

Key Classes:
    RegressionMetrics - Loss, R², MAE, MSE, RMSE for one evaluation
    Evaluator - Scores a fitted model, or cross-validates a configuration

Metrics Explained:
    MAE: Average absolute error in PLN (lower is better)
    MSE: Average squared error (penalizes large misses)
    RMSE: sqrt(MSE), back in PLN
    R²: 1 - SSres/SStot. NaN when every actual price is identical
        (SStot = 0, the ratio is undefined)
    Loss: the booster objective's loss on the same predictions

Usage:
    from carvalue.pipeline import Evaluator

    metrics = Evaluator().evaluate(model, test_df)
    print(metrics)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.model_selection import KFold

from carvalue.config import CV_FOLDS, DEFAULT_SEED, SCORE_COLUMN
from carvalue.errors import ConfigurationError, DataError
from carvalue.features.definitions import ColumnSpec
from carvalue.models.price_model import PriceModel
from carvalue.pipeline.builder import PipelineBuilder
from carvalue.pipeline.trainer import Trainer, TrainerConfig

logger = logging.getLogger(__name__)

HUBER_DELTA = 1.0


def _squared_loss(residuals: np.ndarray) -> float:
    return float(np.mean(residuals ** 2))


def _absolute_loss(residuals: np.ndarray) -> float:
    return float(np.mean(np.abs(residuals)))


def _huber_loss(residuals: np.ndarray) -> float:
    abs_r = np.abs(residuals)
    quadratic = 0.5 * residuals ** 2
    linear = HUBER_DELTA * (abs_r - 0.5 * HUBER_DELTA)
    return float(np.mean(np.where(abs_r <= HUBER_DELTA, quadratic, linear)))


# Booster objective -> per-prediction loss
OBJECTIVE_LOSSES: Dict[str, Callable[[np.ndarray], float]] = {
    "regression": _squared_loss,
    "regression_l2": _squared_loss,
    "l2": _squared_loss,
    "mse": _squared_loss,
    "regression_l1": _absolute_loss,
    "l1": _absolute_loss,
    "mae": _absolute_loss,
    "huber": _huber_loss,
}


@dataclass(frozen=True)
class RegressionMetrics:
    """Goodness of fit of one model on one dataset."""

    loss_function: float
    r_squared: float
    mean_absolute_error: float
    mean_squared_error: float
    root_mean_squared_error: float
    n_samples: int = 0

    def to_dict(self) -> dict:
        return {
            "loss_function": round(self.loss_function, 4),
            "r_squared": None if math.isnan(self.r_squared) else round(self.r_squared, 4),
            "mean_absolute_error": round(self.mean_absolute_error, 4),
            "mean_squared_error": round(self.mean_squared_error, 4),
            "root_mean_squared_error": round(self.root_mean_squared_error, 4),
            "n_samples": self.n_samples,
        }

    def __repr__(self) -> str:
        return (
            f"MAE: {self.mean_absolute_error:.2f}, RMSE: {self.root_mean_squared_error:.2f}, "
            f"R²: {self.r_squared:.3f} (n={self.n_samples})"
        )


def compute_metrics(
    actual: Iterable[float],
    predicted: Iterable[float],
    objective: str = "regression",
) -> RegressionMetrics:
    """Compute regression metrics from (actual, predicted) arrays.

    Args:
        actual: True prices.
        predicted: Model prices, same length.
        objective: Booster objective, selects the reported loss.

    Raises:
        DataError: If there are no pairs or the lengths differ.
    """
    y_true = np.asarray(list(actual), dtype=float).flatten()
    y_pred = np.asarray(list(predicted), dtype=float).flatten()

    if len(y_true) != len(y_pred):
        raise DataError(
            f"Length mismatch: {len(y_true)} actual vs {len(y_pred)} predicted",
            stage="evaluate",
        )
    if len(y_true) == 0:
        raise DataError("Cannot evaluate on an empty dataset", stage="evaluate")

    mae = float(mean_absolute_error(y_true, y_pred))
    mse = float(mean_squared_error(y_true, y_pred))

    # R-squared (undefined when the actuals have no variance)
    ss_res = float(np.sum((y_true - y_pred) ** 2))
    ss_tot = float(np.sum((y_true - np.mean(y_true)) ** 2))
    r2 = 1.0 - ss_res / ss_tot if ss_tot > 0 else float("nan")

    loss_fn = OBJECTIVE_LOSSES.get(objective, _squared_loss)

    return RegressionMetrics(
        loss_function=loss_fn(y_true - y_pred),
        r_squared=r2,
        mean_absolute_error=mae,
        mean_squared_error=mse,
        root_mean_squared_error=math.sqrt(mse),
        n_samples=len(y_true),
    )


class Evaluator:
    """Evaluate fitted price models on held-out listings."""

    def evaluate(self, model: PriceModel, test_data: pd.DataFrame) -> RegressionMetrics:
        """Evaluate a model on a dataset.

        Args:
            model: Fitted PriceModel.
            test_data: Listings including the label column.

        Returns:
            RegressionMetrics for the dataset.

        Raises:
            DataError: If the dataset is empty or lacks the label.
        """
        if test_data is None or len(test_data) == 0:
            raise DataError("Cannot evaluate on an empty dataset", stage="evaluate")
        if model.label not in test_data.columns:
            raise DataError(f"Missing label column '{model.label}'", stage="evaluate")

        scored = model.transform(test_data)
        metrics = compute_metrics(
            scored[model.label].values,
            scored[SCORE_COLUMN].values,
            objective=model.objective,
        )
        logger.info(f"Evaluated on {metrics.n_samples:,} rows: {metrics!r}")
        return metrics

    def cross_validate(
        self,
        builder: Optional[PipelineBuilder],
        columns: Iterable[ColumnSpec],
        trainer_config: TrainerConfig,
        data: pd.DataFrame,
        folds: int = CV_FOLDS,
        seed: int = DEFAULT_SEED,
        trainer: Optional[Trainer] = None,
    ) -> List[RegressionMetrics]:
        """K-fold cross-validation of one column/trainer configuration.

        A fresh pipeline is built and fitted for every fold.

        Returns:
            One RegressionMetrics per fold.

        Raises:
            ConfigurationError: If folds < 2 or there are fewer rows than folds.
        """
        if folds < 2:
            raise ConfigurationError(f"Cross-validation needs at least 2 folds, got {folds}")
        if len(data) < folds:
            raise ConfigurationError(f"Cannot split {len(data)} rows into {folds} folds")

        columns = tuple(columns)
        builder = builder or PipelineBuilder()
        trainer = trainer or Trainer(schema=builder.schema)

        results = []
        splitter = KFold(n_splits=folds, shuffle=True, random_state=seed)
        for i, (train_idx, test_idx) in enumerate(splitter.split(data), start=1):
            pipeline = builder.build(columns, trainer_config, seed=seed)
            model = trainer.fit(pipeline, data.iloc[train_idx])
            metrics = self.evaluate(model, data.iloc[test_idx])
            logger.info(f"Fold {i}/{folds}: {metrics!r}")
            results.append(metrics)
        return results


def average_metrics(results: List[RegressionMetrics]) -> Optional[RegressionMetrics]:
    """Mean of each metric across folds (None for no folds)."""
    if not results:
        return None
    return RegressionMetrics(
        loss_function=float(np.mean([m.loss_function for m in results])),
        r_squared=float(np.mean([m.r_squared for m in results])),
        mean_absolute_error=float(np.mean([m.mean_absolute_error for m in results])),
        mean_squared_error=float(np.mean([m.mean_squared_error for m in results])),
        root_mean_squared_error=float(np.mean([m.root_mean_squared_error for m in results])),
        n_samples=sum(m.n_samples for m in results),
    )
