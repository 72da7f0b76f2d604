"""Centralized configuration for carvalue.

All paths, column names, filter bounds and plot settings in one place.
Environment variables can override defaults.

Path Constants:
    PROJECT_ROOT - Root directory of the project
    STORAGE_DIR - Storage for listing data, models and plots
    DEFAULT_DATA_PATH - Listing CSV (overridable via CARVALUE_DATA_PATH)
    DEFAULT_MODEL_PATH - Trained model bundle (overridable via CARVALUE_MODEL_PATH)

Environment Variables:
    CARVALUE_DATA_PATH - Override listing CSV path
    CARVALUE_MODEL_PATH - Override model bundle path
    CARVALUE_SEED - Session-wide random seed (split shuffling + booster)
    CARVALUE_CSV_DELIMITER - Field separator of the listing CSV
    CARVALUE_HASH_BITS - Slot count (2**bits) of hashed one-hot encoding
    CARVALUE_LOG_LEVEL - Logging level for entry points
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root (src/carvalue/config.py -> carvalue -> src -> project_root)
PROJECT_ROOT = Path(__file__).parent.parent.parent
STORAGE_DIR = PROJECT_ROOT / "storage"
MODELS_DIR = STORAGE_DIR / "models"
PLOTS_DIR = STORAGE_DIR / "plots"

DEFAULT_DATA_PATH = os.environ.get(
    "CARVALUE_DATA_PATH",
    str(STORAGE_DIR / "otomoto.csv"),
)
DEFAULT_MODEL_PATH = os.environ.get(
    "CARVALUE_MODEL_PATH",
    str(MODELS_DIR / "model.joblib"),
)

# Reproducibility: one seed per session, used for shuffling and the booster
DEFAULT_SEED = int(os.environ.get("CARVALUE_SEED", "1"))

# Listing CSV format
CSV_DELIMITER = os.environ.get("CARVALUE_CSV_DELIMITER", ",")
CSV_QUOTECHAR = '"'

# Column names
LABEL_COLUMN = "price"
SCORE_COLUMN = "Score"
FEATURES_COLUMN = "Features"

# Valid ranges [lower, upper) applied before training
MILEAGE_RANGE = (10000.0, 600000.0)
YEAR_RANGE = (1980.0, 2018.0)

# Train/test split
TEST_FRACTION = 0.2
CV_FOLDS = 5

# Hashed one-hot encoding uses 2**HASH_BITS indicator slots
HASH_BITS = int(os.environ.get("CARVALUE_HASH_BITS", "8"))

# Diagnostic plot (price window in PLN)
PLOT_WINDOW = (0.0, 60000.0)
LINE_X_START = 1.0
LINE_X_MAX = 50000.0

# Logging
LOG_LEVEL = os.environ.get("CARVALUE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
