"""Train/test dataset creation for price model training.

Listings carry no time axis, so the split is a seeded random shuffle:
the same seed always yields the same train/test partition.

Key Classes:
    DatasetSplitter - Creates train/test splits
    Datasets - Container for the two splits

Usage:
    from carvalue.models import DatasetSplitter

    datasets = DatasetSplitter(test_fraction=0.2, seed=1).split(df)
    datasets.print_summary()

    # Or save to CSV files
    DatasetSplitter().save(datasets, out_dir="storage/datasets")
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pandas as pd
from sklearn.model_selection import train_test_split

from carvalue.config import DEFAULT_SEED, TEST_FRACTION
from carvalue.errors import ConfigurationError, DataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitConfig:
    """Configuration for train/test dataset creation.

    Attributes:
        test_fraction: Share of rows held out for testing, in (0, 1).
        seed: Shuffle seed.
    """
    test_fraction: float = TEST_FRACTION
    seed: int = DEFAULT_SEED

    def __post_init__(self):
        if not 0.0 < self.test_fraction < 1.0:
            raise ConfigurationError(f"test_fraction must be in (0, 1), got {self.test_fraction}")


@dataclass
class Datasets:
    """Container for train/test datasets."""
    train: pd.DataFrame
    test: pd.DataFrame

    @property
    def summary(self) -> Dict[str, Any]:
        return {
            "train_rows": len(self.train),
            "test_rows": len(self.test),
        }

    def print_summary(self) -> None:
        """Print dataset summary to console."""
        print("Datasets Summary:")
        print(f"  Train: {len(self.train):,} rows")
        print(f"  Test:  {len(self.test):,} rows")


class DatasetSplitter:
    """Seeded random train/test splitter."""

    def __init__(self, test_fraction: float = TEST_FRACTION, seed: int = DEFAULT_SEED) -> None:
        """Initialize splitter.

        Raises:
            ConfigurationError: If test_fraction is outside (0, 1).
        """
        self.config = SplitConfig(test_fraction=test_fraction, seed=seed)

    def split(self, df: pd.DataFrame) -> Datasets:
        """Split a frame of listings into train and test sets.

        Both sides always get at least one row.

        Raises:
            DataError: If there are fewer than 2 rows.
        """
        if df is None or len(df) < 2:
            n = 0 if df is None else len(df)
            raise DataError(f"Need at least 2 rows to split, got {n}")

        train_df, test_df = train_test_split(
            df,
            test_size=self.config.test_fraction,
            random_state=self.config.seed,
            shuffle=True,
        )
        logger.info(
            f"Split {len(df):,} rows → train {len(train_df):,}, test {len(test_df):,} "
            f"(test_fraction={self.config.test_fraction}, seed={self.config.seed})"
        )
        return Datasets(
            train=train_df.reset_index(drop=True),
            test=test_df.reset_index(drop=True),
        )

    def save(self, datasets: Datasets, out_dir: str = "storage/datasets", prefix: str = "") -> None:
        """Save datasets to CSV files plus a small metadata file."""
        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)

        pfx = f"{prefix}_" if prefix else ""
        datasets.train.to_csv(out_path / f"{pfx}train.csv", index=False)
        datasets.test.to_csv(out_path / f"{pfx}test.csv", index=False)

        meta = {
            "config": {
                "test_fraction": self.config.test_fraction,
                "seed": self.config.seed,
            },
            "summary": datasets.summary,
        }
        with open(out_path / f"{pfx}dataset_info.json", "w") as f:
            json.dump(meta, f, indent=2)

        logger.info(f"Saved datasets to {out_path}/")
