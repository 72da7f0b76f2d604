"""Column specs and transform kinds.

A ColumnSpec names one listing column and the transform to apply to it
before training. Specs are plain values: they only become meaningful once
bound against a ListingSchema, which checks the name exists and that the
transform suits the column's kind.

Transform kinds:
- NONE: column goes into the feature vector untouched
- ONE_HOT / ONE_HOT_HASH: categorical encodings, text columns only
- NORMALIZE_MEAN_VARIANCE / NORMALIZE_MIN_MAX: rescaling, numeric columns only

DEFAULT_COLUMNS is the selection the model builder starts from.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Tuple

from carvalue.data.schemas import LISTING_SCHEMA, ColumnKind, ListingSchema
from carvalue.errors import ConfigurationError


class TransformKind(str, Enum):
    """Closed set of per-column transforms."""

    NONE = "none"
    ONE_HOT = "one_hot"
    ONE_HOT_HASH = "one_hot_hash"
    NORMALIZE_MEAN_VARIANCE = "normalize_mean_variance"
    NORMALIZE_MIN_MAX = "normalize_min_max"


# Transforms offered per column kind
TEXT_TRANSFORMS: FrozenSet[TransformKind] = frozenset({
    TransformKind.ONE_HOT,
    TransformKind.ONE_HOT_HASH,
    TransformKind.NONE,
})
NUMBER_TRANSFORMS: FrozenSet[TransformKind] = frozenset({
    TransformKind.NORMALIZE_MEAN_VARIANCE,
    TransformKind.NORMALIZE_MIN_MAX,
    TransformKind.NONE,
})

ALLOWED_TRANSFORMS: Dict[ColumnKind, FrozenSet[TransformKind]] = {
    ColumnKind.TEXT: TEXT_TRANSFORMS,
    ColumnKind.NUMBER: NUMBER_TRANSFORMS,
}


@dataclass(frozen=True)
class ColumnSpec:
    """One feature column and the transform applied to it."""

    name: str
    transform: TransformKind = TransformKind.NONE

    def __post_init__(self):
        # Accept plain strings ("one_hot") from CLIs and the app
        if not isinstance(self.transform, TransformKind):
            try:
                object.__setattr__(self, "transform", TransformKind(self.transform))
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown transform '{self.transform}' for column '{self.name}'. "
                    f"Must be one of: {[t.value for t in TransformKind]}"
                ) from e


@dataclass(frozen=True)
class BoundColumn:
    """A ColumnSpec matched against a live schema."""

    name: str
    transform: TransformKind
    kind: ColumnKind

    @property
    def spec(self) -> ColumnSpec:
        return ColumnSpec(self.name, self.transform)


def bind_column(spec: ColumnSpec, schema: ListingSchema = LISTING_SCHEMA) -> BoundColumn:
    """Bind one spec to a schema.

    Raises:
        ConfigurationError: If the column is unknown, is the label, or the
            transform does not suit the column kind.
    """
    if spec.name not in schema:
        raise ConfigurationError(
            f"Unknown column: '{spec.name}'. Must be one of: {schema.feature_names}"
        )
    if spec.name == schema.label:
        raise ConfigurationError(f"Label column '{spec.name}' cannot be used as a feature")

    kind = schema.kind_of(spec.name)
    if spec.transform not in ALLOWED_TRANSFORMS[kind]:
        allowed = sorted(t.value for t in ALLOWED_TRANSFORMS[kind])
        raise ConfigurationError(
            f"Transform '{spec.transform.value}' is not valid for {kind.value} column "
            f"'{spec.name}'. Allowed: {allowed}"
        )
    return BoundColumn(name=spec.name, transform=spec.transform, kind=kind)


def bind_columns(
    specs: Iterable[ColumnSpec],
    schema: ListingSchema = LISTING_SCHEMA,
) -> Tuple[BoundColumn, ...]:
    """Bind an ordered column set to a schema.

    Raises:
        ConfigurationError: If the set is empty, has duplicate names, or any
            single column fails to bind.
    """
    specs = tuple(specs)
    if not specs:
        raise ConfigurationError("No columns configured: the feature vector would be empty")

    counts = Counter(s.name for s in specs)
    duplicates = sorted(name for name, n in counts.items() if n > 1)
    if duplicates:
        raise ConfigurationError(f"Duplicate columns: {duplicates}")

    return tuple(bind_column(spec, schema) for spec in specs)


DEFAULT_COLUMNS: Tuple[ColumnSpec, ...] = (
    ColumnSpec("make", TransformKind.ONE_HOT),
    ColumnSpec("model", TransformKind.ONE_HOT),
    ColumnSpec("year", TransformKind.NORMALIZE_MIN_MAX),
    ColumnSpec("mileage", TransformKind.NORMALIZE_MEAN_VARIANCE),
    ColumnSpec("engine", TransformKind.ONE_HOT),
    ColumnSpec("fuel", TransformKind.ONE_HOT),
)
