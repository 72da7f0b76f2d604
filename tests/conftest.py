"""Pytest fixtures/config for carvalue tests."""

import os
import sys

import numpy as np
import pandas as pd
import pytest


def pytest_sessionstart(session) -> None:  # type: ignore[unused-argument]
    repo_root = os.path.dirname(os.path.dirname(__file__))
    src_path = os.path.join(repo_root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


MAKES = {
    "Audi": ["A3", "A4", "A6"],
    "BMW": ["320", "520", "X3"],
    "Opel": ["Astra", "Corsa", "Insignia"],
    "Skoda": ["Fabia", "Octavia", "Superb"],
}
ENGINES = ["1398", "1598", "1968", "2993"]
FUELS = ["Benzyna", "Diesel", "LPG"]


def synthetic_listings(n: int = 1000, seed: int = 7, noise: float = 1500.0) -> pd.DataFrame:
    """Listings whose price falls linearly with mileage (plus a little noise).

    Mileage and year stay inside the wrangler's valid ranges.
    """
    rng = np.random.default_rng(seed)
    makes = rng.choice(list(MAKES), size=n)
    models = [rng.choice(MAKES[m]) for m in makes]
    mileage = rng.uniform(20_000, 300_000, size=n).round()
    year = rng.integers(1995, 2017, size=n).astype(float)
    price = 60_000 - 0.15 * mileage + rng.normal(0, noise, size=n)
    return pd.DataFrame({
        "make": makes,
        "model": models,
        "price": price.round(2),
        "year": year,
        "mileage": mileage,
        "engine": rng.choice(ENGINES, size=n),
        "fuel": rng.choice(FUELS, size=n),
    })


@pytest.fixture
def listings_df() -> pd.DataFrame:
    """1000 clean synthetic listings."""
    return synthetic_listings()


@pytest.fixture
def small_listings_df() -> pd.DataFrame:
    """200 clean synthetic listings for quick fits."""
    return synthetic_listings(n=200, seed=3)


@pytest.fixture
def listings_csv(tmp_path, listings_df):
    """The synthetic listings written as a comma-separated file."""
    path = tmp_path / "otomoto.csv"
    listings_df.to_csv(path, index=False)
    return path


@pytest.fixture
def fast_config():
    """Trainer settings small enough for unit tests."""
    from carvalue.pipeline.trainer import TrainerConfig

    return TrainerConfig(
        number_of_iterations=20,
        number_of_leaves=15,
        minimum_example_count_per_leaf=5,
        minimum_example_count_per_group=5,
    )


@pytest.fixture
def make_listings():
    """Factory for synthetic listings of any size."""
    return synthetic_listings
