"""Tests for TrainingSession and BackgroundTrainer."""

import threading

import numpy as np
import pytest

from carvalue.errors import DataError, TrainingError
from carvalue.features import DEFAULT_COLUMNS
from carvalue.pipeline import BackgroundTrainer, TrainingResult, TrainingSession


class TestTrainingSession:
    def test_run_from_csv(self, listings_csv, fast_config):
        result = TrainingSession(data_path=listings_csv, seed=1).run(DEFAULT_COLUMNS, fast_config)

        assert isinstance(result, TrainingResult)
        assert result.succeeded
        assert result.metrics_error is None
        assert result.metrics.n_samples == len(result.datasets.test)

    def test_run_with_frame(self, small_listings_df, fast_config):
        result = TrainingSession(seed=1).run(DEFAULT_COLUMNS, fast_config, data=small_listings_df)
        assert len(result.datasets.train) + len(result.datasets.test) == len(small_listings_df)

    def test_same_seed_same_metrics(self, small_listings_df, fast_config):
        session = TrainingSession(seed=9)
        a = session.run(DEFAULT_COLUMNS, fast_config, data=small_listings_df)
        b = session.run(DEFAULT_COLUMNS, fast_config, data=small_listings_df)
        assert a.metrics == b.metrics

    def test_load_data_filters_ranges(self, tmp_path, make_listings):
        df = make_listings(n=50)
        df.loc[0, "mileage"] = 5.0
        df.loc[1, "year"] = 2019.0
        path = tmp_path / "listings.csv"
        df.to_csv(path, index=False)

        loaded = TrainingSession(data_path=path).load_data()
        assert len(loaded) == 48

    def test_missing_file(self, tmp_path, fast_config):
        session = TrainingSession(data_path=tmp_path / "missing.csv")
        with pytest.raises(DataError):
            session.run(DEFAULT_COLUMNS, fast_config)

    def test_actual_vs_predicted(self, small_listings_df, fast_config):
        result = TrainingSession().run(DEFAULT_COLUMNS, fast_config, data=small_listings_df)
        actual, predicted = result.actual_vs_predicted()
        assert len(actual) == len(predicted) == len(result.datasets.test)
        assert np.isfinite(predicted).all()

    def test_evaluation_failure_is_kept_on_result(self, small_listings_df, fast_config, monkeypatch):
        from carvalue.pipeline import runner

        def broken(self, model, test_data):
            raise DataError("boom", stage="evaluate")

        monkeypatch.setattr(runner.Evaluator, "evaluate", broken)
        result = TrainingSession().run(DEFAULT_COLUMNS, fast_config, data=small_listings_df)

        assert not result.succeeded
        assert result.model is not None
        assert isinstance(result.metrics_error, DataError)


class BlockingSession:
    """Session whose run() waits until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def run(self, columns, trainer_config, data=None):
        self.started.set()
        self.release.wait(timeout=10)
        return "done"


class FailingSession:
    def run(self, columns, trainer_config, data=None):
        raise TrainingError("fit exploded")


class TestBackgroundTrainer:
    def test_returns_future_with_result(self, small_listings_df, fast_config):
        with BackgroundTrainer() as trainer:
            future = trainer.submit(TrainingSession(), DEFAULT_COLUMNS, fast_config, data=small_listings_df)
            result = future.result(timeout=120)
        assert result.succeeded

    def test_rejects_concurrent_submit(self, fast_config):
        session = BlockingSession()
        with BackgroundTrainer() as trainer:
            first = trainer.submit(session, DEFAULT_COLUMNS, fast_config)
            assert session.started.wait(timeout=10)
            assert trainer.busy
            with pytest.raises(TrainingError, match="already in progress"):
                trainer.submit(session, DEFAULT_COLUMNS, fast_config)
            session.release.set()
            assert first.result(timeout=10) == "done"

    def test_accepts_new_run_after_completion(self, fast_config):
        session = BlockingSession()
        session.release.set()
        with BackgroundTrainer() as trainer:
            trainer.submit(session, DEFAULT_COLUMNS, fast_config).result(timeout=10)
            assert trainer.submit(session, DEFAULT_COLUMNS, fast_config).result(timeout=10) == "done"

    def test_subscribers_notified(self, fast_config):
        session = BlockingSession()
        session.release.set()
        received = []
        notified = threading.Event()

        def on_done(outcome):
            received.append(outcome)
            notified.set()

        with BackgroundTrainer() as trainer:
            trainer.subscribe(on_done)
            trainer.submit(session, DEFAULT_COLUMNS, fast_config)
            assert notified.wait(timeout=10)
        assert received == ["done"]

    def test_subscribers_receive_exception(self, fast_config):
        received = []
        notified = threading.Event()

        def on_done(outcome):
            received.append(outcome)
            notified.set()

        with BackgroundTrainer() as trainer:
            trainer.subscribe(on_done)
            future = trainer.submit(FailingSession(), DEFAULT_COLUMNS, fast_config)
            with pytest.raises(TrainingError):
                future.result(timeout=10)
            assert notified.wait(timeout=10)
        assert isinstance(received[0], TrainingError)

    def test_subscribe_from_many_threads(self, fast_config):
        session = BlockingSession()
        counts = []
        lock = threading.Lock()

        def on_done(outcome):
            with lock:
                counts.append(outcome)

        with BackgroundTrainer() as trainer:
            first = trainer.submit(session, DEFAULT_COLUMNS, fast_config)
            threads = [threading.Thread(target=trainer.subscribe, args=(on_done,)) for _ in range(16)]
            for t in threads:
                t.start()
            session.release.set()
            for t in threads:
                t.join(timeout=10)
            first.result(timeout=10)

            trainer.submit(FailingSession(), DEFAULT_COLUMNS, fast_config).exception(timeout=10)
        # The second run notifies every registered callback
        assert sum(isinstance(c, TrainingError) for c in counts) == 16
