"""Models module - fitted price models, dataset splitting and persistence.

This module contains:
- price_model: PriceModel, the fitted pipeline plus its metadata
- splits: Seeded train/test splitting
- persistence: joblib save/load of fitted models
"""

from carvalue.models.price_model import PriceModel
from carvalue.models.splits import DatasetSplitter, Datasets, SplitConfig
from carvalue.models.persistence import load_model, save_model

__all__ = [
    "PriceModel",
    # Dataset splitting
    "DatasetSplitter",
    "Datasets",
    "SplitConfig",
    # Persistence
    "save_model",
    "load_model",
]
