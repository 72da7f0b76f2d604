"""Data module - listing schema, CSV access and cleanup.

Public API:
    ListingReader - Listing CSV access
    Wrangler - Row filtering and text cleanup
    CarListing, CarListingNumericEngine - Pydantic listing records
    ListingSchema, ColumnKind - Column schema used for binding column specs
"""

from carvalue.data.reader import ListingReader
from carvalue.data.wrangler import Wrangler
from carvalue.data.schemas import (
    LISTING_SCHEMA,
    NUMERIC_ENGINE_SCHEMA,
    CarListing,
    CarListingNumericEngine,
    ColumnKind,
    ListingSchema,
)

__all__ = [
    "ListingReader",
    "Wrangler",
    "CarListing",
    "CarListingNumericEngine",
    "ColumnKind",
    "ListingSchema",
    "LISTING_SCHEMA",
    "NUMERIC_ENGINE_SCHEMA",
]
