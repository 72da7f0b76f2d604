"""Saving and loading fitted price models.

A saved model is a joblib bundle:

    {"model": PriceModel, "schema": ListingSchema,
     "columns": [...], "format_version": 1}

The schema travels with the model so a loaded model validates single
listings against the same record type it was trained on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import joblib

from carvalue.config import DEFAULT_MODEL_PATH
from carvalue.data.schemas import ListingSchema
from carvalue.errors import DataError
from carvalue.models.price_model import PriceModel

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
BUNDLE_KEYS = ("model", "schema", "columns", "format_version")


def save_model(
    model: PriceModel,
    schema: Optional[ListingSchema] = None,
    path: Union[str, Path] = DEFAULT_MODEL_PATH,
) -> Path:
    """Write a fitted model (and its schema) to disk.

    Args:
        model: Fitted PriceModel.
        schema: Schema the model was trained against (defaults to model.schema).
        path: Target file; parent directories are created.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    bundle = {
        "model": model,
        "schema": schema if schema is not None else model.schema,
        "columns": model.column_names,
        "format_version": FORMAT_VERSION,
    }
    with open(path, "wb") as f:
        joblib.dump(bundle, f)

    logger.info(f"Model saved to {path}")
    return path


def load_model(path: Union[str, Path] = DEFAULT_MODEL_PATH) -> PriceModel:
    """Load a model written by save_model().

    Raises:
        DataError: If the file is missing or is not a model bundle.
    """
    path = Path(path)
    if not path.exists():
        raise DataError(f"Model file not found: {path}")

    with open(path, "rb") as f:
        bundle = joblib.load(f)

    if not isinstance(bundle, dict) or any(k not in bundle for k in BUNDLE_KEYS):
        raise DataError(f"Not a model bundle: {path}")
    if bundle["format_version"] != FORMAT_VERSION:
        raise DataError(
            f"Unsupported model format version {bundle['format_version']} "
            f"(expected {FORMAT_VERSION}): {path}"
        )

    model = bundle["model"]
    if not isinstance(model, PriceModel):
        raise DataError(f"Bundle does not contain a PriceModel: {path}")
    model.schema = bundle["schema"]

    logger.info(f"Loaded {model!r} from {path}")
    return model
