"""Feature module - column specs and per-column transform stages.

Public API:
    ColumnSpec - Column name + transform selection
    TransformKind - Closed set of transforms
    DEFAULT_COLUMNS - Starting column selection
    bind_columns - Validate a column set against a schema

Usage:
    from carvalue.features import ColumnSpec, TransformKind

    columns = [ColumnSpec("mileage", TransformKind.NORMALIZE_MEAN_VARIANCE)]
"""

from carvalue.features.definitions import (
    ALLOWED_TRANSFORMS,
    DEFAULT_COLUMNS,
    NUMBER_TRANSFORMS,
    TEXT_TRANSFORMS,
    BoundColumn,
    ColumnSpec,
    TransformKind,
    bind_column,
    bind_columns,
)
from carvalue.features.transforms import TRANSFORM_STAGES, Concatenate

__all__ = [
    # Core API
    "ColumnSpec",
    "TransformKind",
    "DEFAULT_COLUMNS",
    "bind_columns",
    # Binding details
    "BoundColumn",
    "bind_column",
    "ALLOWED_TRANSFORMS",
    "TEXT_TRANSFORMS",
    "NUMBER_TRANSFORMS",
    # Stages
    "TRANSFORM_STAGES",
    "Concatenate",
]
