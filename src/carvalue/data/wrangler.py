"""Data wrangling utilities for listing preparation.

Provides the Wrangler class for cleaning raw listings before they reach
the training pipeline. Single-purpose: row filtering and text cleanup.
Scaling/encoding is done by the pipeline's column stages, not here.

Key Methods:
    get_training_ready_data() - Master orchestrator for the cleaning steps
    filter_ranges() - Keep rows with plausible mileage and year

Usage:
    from carvalue.data import Wrangler

    wrangler = Wrangler()
    df = wrangler.get_training_ready_data()
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import pandas as pd

from carvalue.config import MILEAGE_RANGE, YEAR_RANGE
from carvalue.data.reader import ListingReader
from carvalue.data.schemas import ColumnKind

logger = logging.getLogger(__name__)


class Wrangler:
    """Row-level cleanup of listing data."""

    def __init__(
        self,
        reader: Optional[ListingReader] = None,
        mileage_range: Tuple[float, float] = MILEAGE_RANGE,
        year_range: Tuple[float, float] = YEAR_RANGE,
    ):
        self.reader = reader or ListingReader()
        self.mileage_range = mileage_range
        self.year_range = year_range

    def get_training_ready_data(self) -> pd.DataFrame:
        """Master orchestrator: load, clean and filter listings.

        Coordinates cleaning pipeline:
        1. Load all listings
        2. Strip whitespace from text columns
        3. Drop listings outside the valid mileage/year ranges

        Returns:
            Clean DataFrame ready for splitting.
        """
        df = self.reader.load()
        df = self._strip_text(df)
        df = self.filter_ranges(df)
        return df

    def _strip_text(self, df: pd.DataFrame) -> pd.DataFrame:
        """Strip surrounding whitespace from text columns."""
        df = df.copy()
        schema = self.reader.schema
        for name in schema.names:
            if schema.kind_of(name) is ColumnKind.TEXT:
                df[name] = df[name].astype(str).str.strip()
        return df

    def filter_ranges(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep rows whose mileage and year fall inside [lower, upper).

        Rows with a missing mileage or year are dropped as well.

        Returns:
            Filtered DataFrame with a fresh index.
        """
        lo_m, hi_m = self.mileage_range
        lo_y, hi_y = self.year_range
        mask = (
            (df["mileage"] >= lo_m) & (df["mileage"] < hi_m)
            & (df["year"] >= lo_y) & (df["year"] < hi_y)
        )
        dropped = int((~mask).sum())
        if dropped:
            logger.info(f"Filtered out {dropped:,} / {len(df):,} listings outside valid ranges")
        return df[mask].reset_index(drop=True)
