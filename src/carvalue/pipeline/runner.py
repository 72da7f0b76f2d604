"""Car price training runs.

End-to-end run that orchestrates:
1. Data gathering (ListingReader + Wrangler)
2. Train/test split (DatasetSplitter)
3. Pipeline construction (PipelineBuilder)
4. Model training (Trainer)
5. Evaluation on the test split (Evaluator)

Everything a run depends on (data file, seed, split fraction, schema)
lives on an explicit, immutable TrainingSession instead of shared state.

Usage:
    from carvalue.pipeline import TrainingSession
    from carvalue.features import DEFAULT_COLUMNS
    from carvalue.pipeline.trainer import TrainerConfig

    session = TrainingSession(data_path="storage/otomoto.csv", seed=1)
    result = session.run(DEFAULT_COLUMNS, TrainerConfig())
    print(result.metrics)

    # Or off the calling thread
    trainer = BackgroundTrainer()
    trainer.subscribe(lambda outcome: print(outcome))
    future = trainer.submit(session, DEFAULT_COLUMNS, TrainerConfig())
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from carvalue.config import (
    CSV_DELIMITER,
    DEFAULT_DATA_PATH,
    DEFAULT_SEED,
    MILEAGE_RANGE,
    TEST_FRACTION,
    YEAR_RANGE,
)
from carvalue.data.reader import ListingReader
from carvalue.data.schemas import LISTING_SCHEMA, ListingSchema
from carvalue.data.wrangler import Wrangler
from carvalue.errors import DataError, TrainingError
from carvalue.features.definitions import ColumnSpec
from carvalue.models.price_model import PriceModel
from carvalue.models.splits import Datasets, DatasetSplitter
from carvalue.pipeline.builder import PipelineBuilder
from carvalue.pipeline.evaluator import Evaluator, RegressionMetrics
from carvalue.pipeline.trainer import Trainer, TrainerConfig

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Outcome of one training run.

    Attributes:
        model: Fitted model (always present).
        metrics: Test-split metrics, or None if evaluation failed.
        metrics_error: The evaluation failure, if any.
        datasets: The train/test split the run used.
    """
    model: PriceModel
    metrics: Optional[RegressionMetrics]
    metrics_error: Optional[Exception] = None
    datasets: Optional[Datasets] = None

    @property
    def succeeded(self) -> bool:
        return self.metrics is not None

    def actual_vs_predicted(self) -> Tuple[np.ndarray, np.ndarray]:
        """(measured, predicted) prices over the test split."""
        if self.datasets is None:
            raise DataError("Result carries no test split", stage="plot")
        test = self.datasets.test
        return test[self.model.label].to_numpy(dtype=float), self.model.predict(test)


@dataclass(frozen=True)
class TrainingSession:
    """Inputs shared by every run in one session."""

    data_path: Union[str, Path] = DEFAULT_DATA_PATH
    seed: int = DEFAULT_SEED
    test_fraction: float = TEST_FRACTION
    delimiter: str = CSV_DELIMITER
    schema: ListingSchema = LISTING_SCHEMA
    mileage_range: Tuple[float, float] = MILEAGE_RANGE
    year_range: Tuple[float, float] = YEAR_RANGE

    def load_data(self) -> pd.DataFrame:
        """Step 1: Read and clean listings from the session's CSV."""
        reader = ListingReader(self.data_path, delimiter=self.delimiter, schema=self.schema)
        wrangler = Wrangler(reader, mileage_range=self.mileage_range, year_range=self.year_range)
        return wrangler.get_training_ready_data()

    def split(self, data: pd.DataFrame) -> Datasets:
        """Step 2: Seeded train/test split."""
        return DatasetSplitter(test_fraction=self.test_fraction, seed=self.seed).split(data)

    def run(
        self,
        columns: Iterable[ColumnSpec],
        trainer_config: TrainerConfig,
        data: Optional[pd.DataFrame] = None,
    ) -> TrainingResult:
        """Build, fit and evaluate one model.

        Args:
            columns: Column selection for the pipeline.
            trainer_config: Booster hyperparameters.
            data: Already-cleaned listings; read from data_path when omitted.

        Returns:
            TrainingResult. An evaluation failure is stored on the result
            (metrics=None, metrics_error set) so the model can still be used.

        Raises:
            ConfigurationError: Invalid column set.
            DataError: Unreadable or too-small dataset.
            TrainingError: The fit failed.
        """
        columns = tuple(columns)
        pipeline = PipelineBuilder(self.schema).build(columns, trainer_config, seed=self.seed)

        if data is None:
            data = self.load_data()
        datasets = self.split(data)

        model = Trainer(self.schema).fit(pipeline, datasets.train)

        metrics, metrics_error = None, None
        try:
            metrics = Evaluator().evaluate(model, datasets.test)
        except Exception as e:
            logger.warning(f"Evaluation failed, keeping fitted model: {e}")
            metrics_error = e

        return TrainingResult(
            model=model,
            metrics=metrics,
            metrics_error=metrics_error,
            datasets=datasets,
        )


Subscriber = Callable[[Union[TrainingResult, BaseException]], None]


class BackgroundTrainer:
    """Runs one training job at a time on a worker thread.

    Subscribers are called with the TrainingResult, or with the exception
    when the run failed.
    """

    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="carvalue-train")
        self._lock = threading.Lock()
        self._current: Optional[Future] = None
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._current is not None and not self._current.done()

    def submit(
        self,
        session: TrainingSession,
        columns: Iterable[ColumnSpec],
        trainer_config: TrainerConfig,
        data: Optional[pd.DataFrame] = None,
    ) -> "Future[TrainingResult]":
        """Start a training run.

        Raises:
            TrainingError: If a run is already in flight.
        """
        columns = tuple(columns)
        with self._lock:
            if self._current is not None and not self._current.done():
                raise TrainingError("A training run is already in progress")
            future = self._executor.submit(session.run, columns, trainer_config, data)
            self._current = future

        logger.info(f"Submitted background training run ({len(columns)} columns)")
        future.add_done_callback(self._notify)
        return future

    def _notify(self, future: Future) -> None:
        error = future.exception()
        outcome = error if error is not None else future.result()
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(outcome)
            except Exception:
                logger.exception("Training subscriber raised")

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundTrainer":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
