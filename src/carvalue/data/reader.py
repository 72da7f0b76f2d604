"""Read-only access layer for listing CSV files.

Provides ListingReader for loading the delimited listing export
(make, model, price, year, mileage, engine, fuel) into a DataFrame typed
according to a ListingSchema.

Key Methods:
    load() - Read, validate and type the whole file

Usage:
    from carvalue.data import ListingReader

    reader = ListingReader("storage/otomoto.csv")
    df = reader.load()
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from carvalue.config import CSV_DELIMITER, CSV_QUOTECHAR, DEFAULT_DATA_PATH
from carvalue.data.schemas import LISTING_SCHEMA, ColumnKind, ListingSchema
from carvalue.errors import DataError

logger = logging.getLogger(__name__)


class ListingReader:
    """Lightweight CSV client for listing data."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        delimiter: str = CSV_DELIMITER,
        schema: ListingSchema = LISTING_SCHEMA,
    ) -> None:
        self.path = Path(path or DEFAULT_DATA_PATH)
        self.delimiter = delimiter
        self.schema = schema

    def load(self) -> pd.DataFrame:
        """Load the listing file.

        Header row is required. Extra columns are dropped, numeric columns are
        coerced to float (unparseable values become NaN) and rows without a
        price are discarded.

        Returns:
            DataFrame with exactly the schema's columns, in schema order.

        Raises:
            DataError: If the file is missing, the header lacks schema columns,
                or no usable rows remain.
        """
        if not self.path.exists():
            raise DataError(f"Listing file not found: {self.path}")

        text_cols = [n for n in self.schema.names if self.schema.kind_of(n) is ColumnKind.TEXT]
        try:
            with open(self.path, newline="", encoding="utf-8") as fh:
                df = pd.read_csv(
                    fh,
                    sep=self.delimiter,
                    quotechar=CSV_QUOTECHAR,
                    quoting=csv.QUOTE_MINIMAL,
                    header=0,
                    dtype={name: str for name in text_cols},
                    keep_default_na=False,
                    skipinitialspace=True,
                )
        except pd.errors.EmptyDataError as e:
            raise DataError(f"Listing file is empty: {self.path}") from e
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise DataError(f"Malformed listing file {self.path}: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        missing = [c for c in self.schema.names if c not in df.columns]
        if missing:
            raise DataError(f"Missing required columns in {self.path.name}: {missing}")

        df = self._format_columns(df[self.schema.names])
        if df.empty:
            raise DataError(f"No listings in {self.path}")

        logger.info(f"Loaded {len(df):,} listings from {self.path}")
        return df

    def _format_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Coerce numeric columns and drop rows with no usable label."""
        df = df.copy()
        for name in self.schema.numeric_names:
            df[name] = pd.to_numeric(df[name], errors="coerce").astype(float)

        label = self.schema.label
        unlabeled = df[label].isna()
        if unlabeled.any():
            logger.warning(f"Dropping {int(unlabeled.sum())} rows without a valid {label}")
            df = df[~unlabeled]

        return df.reset_index(drop=True)
