"""Training pipeline builder.

Turns an ordered column selection plus a TrainerConfig into an unfitted
scikit-learn Pipeline:

    [one stage per transformed column] → concat → regressor

Columns with TransformKind.NONE add no stage; they are packed into the
feature block as they are. Concatenation always comes after every column
stage and before the regressor. The label column is fixed to "price".

Construction is pure: nothing is fitted here, so normalization statistics
are learned later from the training split only.

Usage:
    from carvalue.pipeline.builder import PipelineBuilder

    pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, TrainerConfig())
    len(pipeline.steps)  # transformed columns + 2
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from lightgbm import LGBMRegressor
from sklearn.base import BaseEstimator
from sklearn.pipeline import Pipeline

from carvalue.config import DEFAULT_SEED
from carvalue.data.schemas import LISTING_SCHEMA, ListingSchema
from carvalue.features.definitions import ColumnSpec, TransformKind, bind_columns
from carvalue.features.transforms import TRANSFORM_STAGES, Concatenate
from carvalue.pipeline.trainer import TrainerConfig

logger = logging.getLogger(__name__)

CONCAT_STEP = "concat"
REGRESSOR_STEP = "regressor"


class PipelineBuilder:
    """Builds transform-then-train pipelines for one listing schema."""

    def __init__(self, schema: ListingSchema = LISTING_SCHEMA):
        self.schema = schema

    def build(
        self,
        columns: Iterable[ColumnSpec],
        trainer_config: TrainerConfig,
        seed: int = DEFAULT_SEED,
    ) -> Pipeline:
        """Build an unfitted pipeline.

        Args:
            columns: Ordered column selection. Snapshotted on entry.
            trainer_config: Booster hyperparameters.
            seed: Random seed for the booster.

        Returns:
            sklearn Pipeline whose steps are the column stages (input order),
            "concat" and "regressor".

        Raises:
            ConfigurationError: If the column set is empty, has duplicates,
                names an unknown column, or pairs a transform with the wrong
                column kind.
        """
        bound = bind_columns(tuple(columns), self.schema)

        steps: List[Tuple[str, BaseEstimator]] = []
        for column in bound:
            stage_cls = TRANSFORM_STAGES[column.transform]
            if stage_cls is None:
                continue
            steps.append((f"{column.name}_{column.transform.value}", stage_cls(column.name)))

        names = tuple(c.name for c in bound)
        steps.append((CONCAT_STEP, Concatenate(columns=names, categorical=trainer_config.use_categorical_split)))
        steps.append((REGRESSOR_STEP, LGBMRegressor(**trainer_config.to_lgbm_params(seed))))

        logger.debug(f"Built pipeline: {' → '.join(name for name, _ in steps)}")
        return Pipeline(steps)

    @staticmethod
    def describe(pipeline: Pipeline) -> List[str]:
        """Human-readable step list, e.g. ['make: one_hot', ..., 'concat', 'regressor']."""
        described = []
        for name, _ in pipeline.steps:
            if name in (CONCAT_STEP, REGRESSOR_STEP):
                described.append(name)
                continue
            column, _, transform = name.partition("_")
            described.append(f"{column}: {transform}")
        return described


def count_transformed(columns: Iterable[ColumnSpec]) -> int:
    """Number of columns that get their own pipeline stage."""
    return sum(1 for c in columns if c.transform is not TransformKind.NONE)
