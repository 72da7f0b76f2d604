"""Model trainer for car price prediction.

ALL TRAINING LOGIC MUST LIVE HERE.
The boosted-tree regressor itself is LightGBM, treated as an opaque
fit/predict box; this module owns its hyperparameters and the fit call.

Key Classes:
    TrainerConfig - Flat, immutable set of booster hyperparameters
    Trainer - Fits a built pipeline on the training split

Usage:
    from carvalue.pipeline import PipelineBuilder, Trainer
    from carvalue.pipeline.trainer import TrainerConfig

    config = TrainerConfig(number_of_iterations=100)
    pipeline = PipelineBuilder().build(columns, config)
    model = Trainer().fit(pipeline, train_df)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd
from sklearn.pipeline import Pipeline

from carvalue.config import DEFAULT_SEED
from carvalue.data.schemas import LISTING_SCHEMA, ListingSchema
from carvalue.errors import CarValueError, ConfigurationError, TrainingError
from carvalue.models.price_model import PriceModel

logger = logging.getLogger(__name__)


# =============================================================================
# Hyperparameters (centralized)
# =============================================================================

# Fixed LightGBM settings that are not user-tunable
BASE_PARAMS: Dict[str, Any] = {
    "boosting_type": "gbdt",
    "verbosity": -1,
    "deterministic": True,
}


@dataclass(frozen=True)
class TrainerConfig:
    """Hyperparameters of the boosted-tree regressor.

    Attributes:
        number_of_iterations: Boosting rounds.
        learning_rate: Shrinkage per round.
        number_of_leaves: Max leaves per tree.
        minimum_example_count_per_leaf: Min rows in a leaf.
        use_categorical_split: Split natively on raw text columns.
        handle_missing_value: Learn a direction for missing values.
        minimum_example_count_per_group: Min rows per categorical group.
        maximum_categorical_split_point_count: Max categories in one split.
        categorical_smoothing: Smoothing of categorical split statistics.
        l2_categorical_regularization: L2 on categorical splits.
        l1_regularization: Booster L1 on leaf weights.
        l2_regularization: Booster L2 on leaf weights.
        objective: LightGBM objective; also decides the reported loss.
    """

    number_of_iterations: int = 50
    learning_rate: float = 0.07721677
    number_of_leaves: int = 91
    minimum_example_count_per_leaf: int = 20
    use_categorical_split: bool = True
    handle_missing_value: bool = True
    minimum_example_count_per_group: int = 100
    maximum_categorical_split_point_count: int = 8
    categorical_smoothing: float = 20
    l2_categorical_regularization: float = 0.1
    l1_regularization: float = 0.5
    l2_regularization: float = 0.0
    objective: str = "regression"

    def __post_init__(self):
        if self.number_of_iterations < 1:
            raise ConfigurationError(f"number_of_iterations must be >= 1, got {self.number_of_iterations}")
        if self.learning_rate <= 0:
            raise ConfigurationError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.number_of_leaves < 2:
            raise ConfigurationError(f"number_of_leaves must be >= 2, got {self.number_of_leaves}")
        negative = [
            f.name for f in dataclasses.fields(self)
            if f.name.startswith(("minimum_", "maximum_", "categorical_", "l1_", "l2_"))
            and getattr(self, f.name) < 0
        ]
        if negative:
            raise ConfigurationError(f"Hyperparameters must be non-negative: {negative}")

    def with_overrides(self, **overrides: Any) -> "TrainerConfig":
        """Copy with some fields replaced.

        Raises:
            ConfigurationError: If an override names no known field.
        """
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown trainer options: {unknown}. Must be one of: {sorted(known)}")
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def to_lgbm_params(self, seed: int = DEFAULT_SEED) -> Dict[str, Any]:
        """LightGBM (sklearn API) constructor arguments."""
        return {
            **BASE_PARAMS,
            "objective": self.objective,
            "n_estimators": self.number_of_iterations,
            "learning_rate": self.learning_rate,
            "num_leaves": self.number_of_leaves,
            "min_child_samples": self.minimum_example_count_per_leaf,
            "use_missing": self.handle_missing_value,
            "min_data_per_group": self.minimum_example_count_per_group,
            "max_cat_threshold": self.maximum_categorical_split_point_count,
            "cat_smooth": self.categorical_smoothing,
            "cat_l2": self.l2_categorical_regularization,
            "reg_alpha": self.l1_regularization,
            "reg_lambda": self.l2_regularization,
            "random_state": seed,
        }


class Trainer:
    """Canonical trainer for price models.

    ALL training flows through this class. No other file may fit models.
    """

    def __init__(self, schema: ListingSchema = LISTING_SCHEMA):
        self.schema = schema

    def fit(self, pipeline: Pipeline, training_data: pd.DataFrame) -> PriceModel:
        """Fit a built pipeline on the training split.

        Args:
            pipeline: Unfitted pipeline from PipelineBuilder.build().
            training_data: Listings with the configured columns and the label.

        Returns:
            Fitted PriceModel.

        Raises:
            TrainingError: If the data is empty, a configured column or the
                label is missing, or the underlying fit fails.
        """
        label = self.schema.label
        column_names = list(pipeline.named_steps["concat"].columns)

        if training_data is None or len(training_data) == 0:
            raise TrainingError("Training data is empty")

        required = column_names + [label]
        missing = [c for c in required if c not in training_data.columns]
        if missing:
            raise TrainingError(f"Missing required columns: {missing}")

        y = training_data[label].astype(float)
        if y.isna().any():
            raise TrainingError(f"{int(y.isna().sum())} training rows have no {label}")

        logger.info(f"Training LightGBM on {len(training_data):,} rows, columns={column_names}")
        try:
            pipeline.fit(training_data, y)
        except CarValueError:
            raise
        except Exception as e:
            raise TrainingError(f"LightGBM fit failed: {e}") from e

        regressor = pipeline.named_steps["regressor"]
        model = PriceModel(
            pipeline=pipeline,
            column_names=column_names,
            schema=self.schema,
            objective=regressor.get_params().get("objective") or "regression",
        )
        logger.info(f"  → {len(model.feature_names)} packed features, {regressor.n_estimators} iterations")
        return model


__all__ = ["Trainer", "TrainerConfig", "BASE_PARAMS"]
