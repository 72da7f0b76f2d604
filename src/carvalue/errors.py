"""Error taxonomy for carvalue.

Every failure raised by the library carries the stage it came from, so a
caller (CLI, app, background job) can say *where* things went wrong
without parsing messages.

Stages:
    build    - pipeline construction / column configuration
    load     - reading and validating listing data
    fit      - model training
    evaluate - metrics computation
    plot     - regression line and chart rendering
"""

from __future__ import annotations

from typing import Optional


class CarValueError(Exception):
    """Base class for all carvalue failures."""

    default_stage = "unknown"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class ConfigurationError(CarValueError, ValueError):
    """Invalid column set, unknown column, bad transform pairing or option."""

    default_stage = "build"


class DataError(CarValueError, ValueError):
    """Missing or malformed listing data, schema mismatch, empty dataset."""

    default_stage = "load"


class TrainingError(CarValueError, RuntimeError):
    """The boosted-tree fit failed or could not start."""

    default_stage = "fit"


class DegenerateInputError(CarValueError, ValueError):
    """Regression line requested over zero-variance or empty input."""

    default_stage = "plot"


__all__ = [
    "CarValueError",
    "ConfigurationError",
    "DataError",
    "TrainingError",
    "DegenerateInputError",
]
