"""Per-column transform stages for the training pipeline.

Every stage is a scikit-learn transformer that takes a DataFrame and
returns a DataFrame in which its source column has been replaced by a
block of numeric columns named "{column}__{i}". Statistics (categories,
means, ranges) are learned in fit(), so they only ever see the training
split.

Key Classes:
    OneHotColumn - One indicator per distinct training value
    HashedOneHotColumn - Indicators in a fixed-size hashed space
    MeanVarianceColumn - Zero mean, unit variance
    MinMaxColumn - Rescale to [0, 1]
    Concatenate - Pack the configured columns into one feature block

TRANSFORM_STAGES maps every TransformKind to its stage class (None for
pass-through columns).
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Type

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.feature_extraction import FeatureHasher
from sklearn.preprocessing import MinMaxScaler, OneHotEncoder, StandardScaler
from sklearn.utils.validation import check_is_fitted

from carvalue.config import FEATURES_COLUMN, HASH_BITS
from carvalue.errors import DataError
from carvalue.features.definitions import TransformKind

BLOCK_SEPARATOR = "__"


def block_name(column: str, index: int) -> str:
    """Name of the index-th output column produced from a source column."""
    return f"{column}{BLOCK_SEPARATOR}{index}"


def _require_columns(X: pd.DataFrame, columns: Sequence[str], stage: str) -> None:
    missing = [c for c in columns if c not in X.columns]
    if missing:
        raise DataError(f"Missing required columns: {missing}", stage=stage)


class ColumnStage(TransformerMixin, BaseEstimator):
    """Base class: fit on one column, replace it with a numeric block."""

    def __init__(self, column: str):
        self.column = column

    def fit(self, X: pd.DataFrame, y=None) -> "ColumnStage":
        _require_columns(X, [self.column], stage="fit")
        self._fit_column(X[self.column])
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self)
        _require_columns(X, [self.column], stage="evaluate")

        block = np.asarray(self._transform_column(X[self.column]), dtype=float)
        names = [block_name(self.column, i) for i in range(block.shape[1])]
        block_df = pd.DataFrame(block, columns=names, index=X.index)
        return pd.concat([X.drop(columns=[self.column]), block_df], axis=1)

    def _fit_column(self, values: pd.Series) -> None:
        raise NotImplementedError

    def _transform_column(self, values: pd.Series) -> np.ndarray:
        raise NotImplementedError


class OneHotColumn(ColumnStage):
    """Categorical one-hot encoding over the training split's values.

    Values never seen during fit encode as an all-zero block.
    """

    def _fit_column(self, values: pd.Series) -> None:
        self.encoder_ = OneHotEncoder(handle_unknown="ignore", sparse_output=False, dtype=float)
        self.encoder_.fit(values.astype(str).to_frame())

    def _transform_column(self, values: pd.Series) -> np.ndarray:
        return self.encoder_.transform(values.astype(str).to_frame())

    @property
    def categories(self) -> List[str]:
        check_is_fitted(self)
        return list(self.encoder_.categories_[0])


class HashedOneHotColumn(ColumnStage):
    """One-hot encoding into 2**hash_bits hashed slots.

    Dimensionality is fixed regardless of how many distinct values exist;
    colliding values share a slot.
    """

    def __init__(self, column: str, hash_bits: int = HASH_BITS):
        super().__init__(column)
        self.hash_bits = hash_bits

    def _fit_column(self, values: pd.Series) -> None:
        self.hasher_ = FeatureHasher(
            n_features=2 ** self.hash_bits,
            input_type="string",
            alternate_sign=False,
        )

    def _transform_column(self, values: pd.Series) -> np.ndarray:
        tokens = [[str(v)] for v in values]
        return self.hasher_.transform(tokens).toarray()


class MeanVarianceColumn(ColumnStage):
    """Rescale to zero mean and unit variance. Missing values stay missing."""

    def _fit_column(self, values: pd.Series) -> None:
        self.scaler_ = StandardScaler().fit(values.astype(float).to_frame())

    def _transform_column(self, values: pd.Series) -> np.ndarray:
        return self.scaler_.transform(values.astype(float).to_frame())


class MinMaxColumn(ColumnStage):
    """Rescale into [0, 1] using the training minimum and maximum."""

    def _fit_column(self, values: pd.Series) -> None:
        self.scaler_ = MinMaxScaler().fit(values.astype(float).to_frame())

    def _transform_column(self, values: pd.Series) -> np.ndarray:
        return self.scaler_.transform(values.astype(float).to_frame())


class Concatenate(TransformerMixin, BaseEstimator):
    """Pack configured columns, in order, into one feature block.

    Each configured column contributes either its transformed block
    ("{column}__0", "{column}__1", ...) or, when no stage touched it, the raw
    column. Raw text columns become a pandas category (so LightGBM can split
    on them natively) when `categorical` is True, otherwise integer codes.
    Output columns are named "Features_0" .. "Features_{n-1}".

    Attributes (after fit):
        feature_names_: Source column behind each packed feature.
        categories_: Training vocabulary of each raw text column.
    """

    def __init__(self, columns: Sequence[str], categorical: bool = True):
        self.columns = columns
        self.categorical = categorical

    def fit(self, X: pd.DataFrame, y=None) -> "Concatenate":
        if len(self.columns) == 0:
            raise DataError("Nothing to concatenate: no columns configured", stage="build")

        sources: List[str] = []
        categories: Dict[str, List[str]] = {}
        for name in self.columns:
            if name in X.columns:
                sources.append(name)
                if not pd.api.types.is_numeric_dtype(X[name]):
                    categories[name] = sorted(X[name].dropna().astype(str).unique())
                continue

            prefix = f"{name}{BLOCK_SEPARATOR}"
            block = [c for c in X.columns if str(c).startswith(prefix)]
            if not block:
                raise DataError(f"Column '{name}' not found in data", stage="fit")
            sources.extend(block)

        self.feature_names_ = sources
        self.categories_ = categories
        return self

    @property
    def n_features(self) -> int:
        check_is_fitted(self)
        return len(self.feature_names_)

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self)
        _require_columns(X, self.feature_names_, stage="evaluate")

        packed = {}
        for i, source in enumerate(self.feature_names_):
            target = f"{FEATURES_COLUMN}_{i}"
            if source in self.categories_:
                cat = pd.Categorical(X[source].astype(str), categories=self.categories_[source])
                if self.categorical:
                    packed[target] = pd.Series(cat, index=X.index)
                else:
                    codes = cat.codes.astype(float)
                    codes[codes < 0] = np.nan
                    packed[target] = pd.Series(codes, index=X.index)
            else:
                packed[target] = X[source].astype(float)

        return pd.DataFrame(packed, index=X.index)


TRANSFORM_STAGES: Dict[TransformKind, Optional[Type[ColumnStage]]] = {
    TransformKind.NONE: None,
    TransformKind.ONE_HOT: OneHotColumn,
    TransformKind.ONE_HOT_HASH: HashedOneHotColumn,
    TransformKind.NORMALIZE_MEAN_VARIANCE: MeanVarianceColumn,
    TransformKind.NORMALIZE_MIN_MAX: MinMaxColumn,
}

_unmapped = set(TransformKind) - set(TRANSFORM_STAGES)
if _unmapped:
    raise TypeError(f"TransformKind values without a stage mapping: {sorted(_unmapped)}")
