"""Tests for saving and loading price models."""

import joblib
import numpy as np
import pytest

from carvalue.data import LISTING_SCHEMA, CarListing
from carvalue.errors import DataError
from carvalue.features import DEFAULT_COLUMNS
from carvalue.models import load_model, save_model
from carvalue.pipeline import PipelineBuilder, Trainer


@pytest.fixture
def fitted_model(small_listings_df, fast_config):
    pipeline = PipelineBuilder().build(DEFAULT_COLUMNS, fast_config)
    return Trainer().fit(pipeline, small_listings_df)


class TestRoundTrip:
    def test_loaded_model_predicts_the_same(self, tmp_path, fitted_model, small_listings_df):
        path = save_model(fitted_model, LISTING_SCHEMA, tmp_path / "models" / "model.joblib")
        loaded = load_model(path)

        np.testing.assert_allclose(loaded.predict(small_listings_df), fitted_model.predict(small_listings_df))
        assert loaded.column_names == fitted_model.column_names
        assert loaded.schema == LISTING_SCHEMA

    def test_predict_listing_after_load(self, tmp_path, fitted_model):
        loaded = load_model(save_model(fitted_model, path=tmp_path / "model.joblib"))
        listing = CarListing(make="Audi", model="A4", year=2010, mileage=150000, engine="1968", fuel="Diesel")
        assert np.isfinite(loaded.predict_listing(listing))

    def test_bundle_layout(self, tmp_path, fitted_model):
        path = save_model(fitted_model, path=tmp_path / "model.joblib")
        bundle = joblib.load(path)
        assert set(bundle) == {"model", "schema", "columns", "format_version"}
        assert bundle["columns"] == [c.name for c in DEFAULT_COLUMNS]


class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError, match="not found"):
            load_model(tmp_path / "nope.joblib")

    def test_not_a_bundle(self, tmp_path):
        path = tmp_path / "junk.joblib"
        joblib.dump({"something": 1}, path)
        with pytest.raises(DataError, match="Not a model bundle"):
            load_model(path)

    def test_unknown_format_version(self, tmp_path, fitted_model):
        path = tmp_path / "model.joblib"
        joblib.dump({"model": fitted_model, "schema": LISTING_SCHEMA, "columns": [], "format_version": 99}, path)
        with pytest.raises(DataError, match="format version"):
            load_model(path)
