"""Fitted price model.

Wraps the fitted transform-then-train pipeline together with what is
needed to use it later: the configured column names, the listing schema
and the objective the booster was trained with.

GUARDRAIL: A PriceModel is produced by Trainer.fit() only. It is never
re-fitted; a new training run builds a new pipeline and a new model.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, ValidationError
from sklearn.pipeline import Pipeline

from carvalue.config import SCORE_COLUMN
from carvalue.data.schemas import LISTING_SCHEMA, ListingSchema
from carvalue.errors import DataError


class PriceModel:
    """Fitted pipeline + the metadata to score new listings."""

    def __init__(
        self,
        pipeline: Pipeline,
        column_names: Sequence[str],
        schema: ListingSchema = LISTING_SCHEMA,
        objective: str = "regression",
    ):
        """Initialize with a fitted pipeline.

        Args:
            pipeline: Fitted sklearn Pipeline (column stages, concat, regressor)
            column_names: Configured feature columns, in input order
            schema: Listing schema the columns were bound against
            objective: LightGBM objective the regressor was trained with
        """
        self._pipeline = pipeline
        self._column_names = list(column_names)
        self.schema = schema
        self.objective = objective

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    @property
    def column_names(self) -> List[str]:
        """Feature columns this model expects."""
        return self._column_names.copy()

    @property
    def label(self) -> str:
        return self.schema.label

    @property
    def feature_names(self) -> List[str]:
        """Source column behind each packed feature."""
        return list(self._pipeline.named_steps["concat"].feature_names_)

    def predict(self, data: pd.DataFrame) -> np.ndarray:
        """Predict prices for a DataFrame of listings.

        Raises:
            DataError: If required feature columns are missing.
        """
        missing = [c for c in self._column_names if c not in data.columns]
        if missing:
            raise DataError(f"Missing required feature columns: {missing}", stage="evaluate")
        return np.asarray(self._pipeline.predict(data), dtype=float)

    def transform(self, data: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of `data` with predictions in the Score column."""
        result = data.copy()
        result[SCORE_COLUMN] = self.predict(data)
        return result

    def predict_listing(self, listing: Union[BaseModel, Dict[str, Any]]) -> float:
        """Predict the price of a single listing.

        Args:
            listing: Record instance or a dict of field values (validated
                against the schema's record type).

        Raises:
            DataError: If the listing does not validate.
        """
        if not isinstance(listing, BaseModel):
            try:
                listing = self.schema.record_type.model_validate(listing)
            except ValidationError as e:
                raise DataError(f"Invalid listing: {e}", stage="evaluate") from e
        frame = pd.DataFrame([listing.model_dump()])
        return float(self.predict(frame)[0])

    def __repr__(self) -> str:
        return f"PriceModel(columns={self._column_names}, objective={self.objective!r})"
