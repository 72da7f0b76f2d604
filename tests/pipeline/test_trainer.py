"""Tests for TrainerConfig and Trainer."""

import numpy as np
import pytest

from carvalue.errors import ConfigurationError, TrainingError
from carvalue.features import DEFAULT_COLUMNS, ColumnSpec, TransformKind
from carvalue.models import PriceModel
from carvalue.pipeline import PipelineBuilder, Trainer, TrainerConfig


class TestTrainerConfig:
    def test_defaults(self):
        config = TrainerConfig()
        assert config.number_of_iterations == 50
        assert config.learning_rate == pytest.approx(0.07721677)
        assert config.number_of_leaves == 91
        assert config.minimum_example_count_per_group == 100
        assert config.maximum_categorical_split_point_count == 8
        assert config.l1_regularization == 0.5

    def test_lgbm_param_names(self):
        params = TrainerConfig().to_lgbm_params(seed=3)
        assert params["n_estimators"] == 50
        assert params["min_child_samples"] == 20
        assert params["cat_smooth"] == 20
        assert params["cat_l2"] == 0.1
        assert params["max_cat_threshold"] == 8
        assert params["random_state"] == 3
        assert params["verbosity"] == -1

    def test_with_overrides(self):
        config = TrainerConfig().with_overrides(number_of_iterations=5)
        assert config.number_of_iterations == 5
        assert TrainerConfig().number_of_iterations == 50

    def test_unknown_override(self):
        with pytest.raises(ConfigurationError, match="Unknown trainer options"):
            TrainerConfig().with_overrides(max_depth=3)

    @pytest.mark.parametrize("kwargs", [
        {"number_of_iterations": 0},
        {"learning_rate": 0.0},
        {"number_of_leaves": 1},
        {"l1_regularization": -1.0},
        {"categorical_smoothing": -0.5},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            TrainerConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            TrainerConfig().learning_rate = 1.0


class TestTrainer:
    def test_fit_returns_price_model(self, small_listings_df, fast_config):
        pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, fast_config)
        model = Trainer().fit(pipeline, small_listings_df)

        assert isinstance(model, PriceModel)
        assert model.column_names == [c.name for c in DEFAULT_COLUMNS]
        preds = model.predict(small_listings_df)
        assert preds.shape == (len(small_listings_df),)
        assert np.isfinite(preds).all()

    def test_same_seed_same_predictions(self, small_listings_df, fast_config):
        builder = PipelineBuilder()
        a = Trainer().fit(builder.build(DEFAULT_COLUMNS, fast_config, seed=5), small_listings_df)
        b = Trainer().fit(builder.build(DEFAULT_COLUMNS, fast_config, seed=5), small_listings_df)
        np.testing.assert_allclose(a.predict(small_listings_df), b.predict(small_listings_df))

    def test_raw_text_columns_without_categorical_split(self, small_listings_df, fast_config):
        columns = [ColumnSpec("make"), ColumnSpec("mileage", TransformKind.NORMALIZE_MIN_MAX)]
        config = fast_config.with_overrides(use_categorical_split=False)
        model = Trainer().fit(PipelineBuilder().build(columns, config), small_listings_df)
        assert np.isfinite(model.predict(small_listings_df)).all()

    def test_empty_data(self, small_listings_df, fast_config):
        pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, fast_config)
        with pytest.raises(TrainingError, match="empty") as exc:
            Trainer().fit(pipeline, small_listings_df.iloc[0:0])
        assert exc.value.stage == "fit"

    def test_missing_configured_column(self, small_listings_df, fast_config):
        pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, fast_config)
        with pytest.raises(TrainingError, match="fuel"):
            Trainer().fit(pipeline, small_listings_df.drop(columns=["fuel"]))

    def test_missing_label(self, small_listings_df, fast_config):
        pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, fast_config)
        with pytest.raises(TrainingError, match="price"):
            Trainer().fit(pipeline, small_listings_df.drop(columns=["price"]))

    def test_fit_failure_is_wrapped(self, small_listings_df, fast_config):
        pipeline = PipelineBuilder().build([ColumnSpec("year", TransformKind.NORMALIZE_MIN_MAX)], fast_config)
        bad = small_listings_df.copy()
        bad["year"] = "not a number"
        with pytest.raises(TrainingError) as exc:
            Trainer().fit(pipeline, bad)
        assert exc.value.__cause__ is not None
