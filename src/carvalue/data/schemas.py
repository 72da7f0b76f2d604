"""Pydantic schemas for car listing data.

Defines the listing record and the column schema derived from it.
The schema is what column specs are bound against before a pipeline
is built, so it decides which transforms make sense for which column.

Models:
    CarListing - One listing, engine as free text (e.g. "1.9 TDI")
    CarListingNumericEngine - Same listing, engine as capacity (float)

Schemas:
    LISTING_SCHEMA - Columns and kinds of CarListing
    NUMERIC_ENGINE_SCHEMA - Columns and kinds of CarListingNumericEngine

Usage:
    from carvalue.data.schemas import CarListing, LISTING_SCHEMA

    listing = CarListing.model_validate(row)
    LISTING_SCHEMA.kind_of("mileage")  # ColumnKind.NUMBER
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Tuple, Type, get_args

from pydantic import BaseModel, ConfigDict

from carvalue.config import LABEL_COLUMN


class ColumnKind(str, Enum):
    """Storage kind of a listing column."""

    TEXT = "text"
    NUMBER = "number"


# Type mapping from Python annotations to column kinds
PYTHON_TO_KIND: Dict[Type, ColumnKind] = {
    str: ColumnKind.TEXT,
    float: ColumnKind.NUMBER,
    int: ColumnKind.NUMBER,
}


class CarListing(BaseModel):
    """One used-car listing (make;model;price;year;mileage;engine;fuel)."""

    model_config = ConfigDict(frozen=True)

    make: str
    model: str
    price: float = 0.0
    year: float
    mileage: float
    engine: str
    fuel: str


class CarListingNumericEngine(BaseModel):
    """Listing variant where engine is the capacity in litres."""

    model_config = ConfigDict(frozen=True)

    make: str
    model: str
    price: float = 0.0
    year: float
    mileage: float
    engine: float
    fuel: str


def annotation_to_kind(annotation: Any) -> ColumnKind:
    """Map a pydantic field annotation to a ColumnKind.

    Optional[X] is unwrapped to X. Unknown types are treated as text.
    """
    args = [a for a in get_args(annotation) if a is not type(None)]
    if args:
        annotation = args[0]
    return PYTHON_TO_KIND.get(annotation, ColumnKind.TEXT)


class ListingSchema:
    """Ordered column name -> kind mapping for a listing record class."""

    def __init__(self, columns: List[Tuple[str, ColumnKind]], record_type: Type[BaseModel], label: str = LABEL_COLUMN):
        self._columns = dict(columns)
        self.record_type = record_type
        self.label = label

    @classmethod
    def from_record(cls, record_type: Type[BaseModel], label: str = LABEL_COLUMN) -> "ListingSchema":
        columns = [
            (name, annotation_to_kind(field_info.annotation))
            for name, field_info in record_type.model_fields.items()
        ]
        return cls(columns, record_type=record_type, label=label)

    @property
    def names(self) -> List[str]:
        """All column names, in file order."""
        return list(self._columns)

    @property
    def feature_names(self) -> List[str]:
        """Column names that may be used as features (everything but the label)."""
        return [name for name in self._columns if name != self.label]

    @property
    def numeric_names(self) -> List[str]:
        return [name for name, kind in self._columns.items() if kind is ColumnKind.NUMBER]

    def kind_of(self, name: str) -> ColumnKind:
        """Kind of a column.

        Raises:
            KeyError: If the column is not part of the schema.
        """
        return self._columns[name]

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ListingSchema):
            return NotImplemented
        return self._columns == other._columns and self.label == other.label

    def __hash__(self) -> int:
        return hash((tuple(self._columns.items()), self.label))

    def __repr__(self) -> str:
        cols = ", ".join(f"{n}:{k.value}" for n, k in self._columns.items())
        return f"ListingSchema({cols})"


LISTING_SCHEMA = ListingSchema.from_record(CarListing)
NUMERIC_ENGINE_SCHEMA = ListingSchema.from_record(CarListingNumericEngine)

