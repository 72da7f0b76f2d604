"""Tests for ListingReader CSV loading."""

import pytest

from carvalue.data import LISTING_SCHEMA, NUMERIC_ENGINE_SCHEMA, ListingReader
from carvalue.errors import DataError

HEADER = "make,model,price,year,mileage,engine,fuel"


def write(tmp_path, text, name="listings.csv"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoad:
    def test_loads_all_rows_in_schema_order(self, listings_csv, listings_df):
        df = ListingReader(listings_csv).load()
        assert list(df.columns) == LISTING_SCHEMA.names
        assert len(df) == len(listings_df)

    def test_numeric_columns_are_float(self, listings_csv):
        df = ListingReader(listings_csv).load()
        for name in ("price", "year", "mileage"):
            assert df[name].dtype == float

    def test_text_columns_stay_text(self, tmp_path):
        path = write(tmp_path, f"{HEADER}\nAudi,A4,20000,2010,150000,1968,Diesel\n")
        df = ListingReader(path).load()
        assert df["engine"].iloc[0] == "1968"
        assert isinstance(df["engine"].iloc[0], str)

    def test_numeric_engine_schema_parses_engine(self, tmp_path):
        path = write(tmp_path, f"{HEADER}\nAudi,A4,20000,2010,150000,1.9,Diesel\n")
        df = ListingReader(path, schema=NUMERIC_ENGINE_SCHEMA).load()
        assert df["engine"].iloc[0] == pytest.approx(1.9)

    def test_custom_delimiter(self, tmp_path):
        text = HEADER.replace(",", ";") + "\nOpel;Astra;9000;2005;210000;1598;Benzyna\n"
        path = write(tmp_path, text)
        df = ListingReader(path, delimiter=";").load()
        assert df["model"].iloc[0] == "Astra"
        assert df["price"].iloc[0] == 9000.0

    def test_quoted_field_with_delimiter(self, tmp_path):
        path = write(tmp_path, f'{HEADER}\nBMW,"Seria 3, Touring",30000,2012,120000,1995,Diesel\n')
        df = ListingReader(path).load()
        assert df["model"].iloc[0] == "Seria 3, Touring"

    def test_extra_columns_dropped(self, tmp_path):
        path = write(tmp_path, f"{HEADER},color\nAudi,A4,20000,2010,150000,1968,Diesel,red\n")
        df = ListingReader(path).load()
        assert "color" not in df.columns

    def test_rows_without_price_dropped(self, tmp_path):
        text = (
            f"{HEADER}\n"
            "Audi,A4,20000,2010,150000,1968,Diesel\n"
            "Audi,A6,n/a,2011,140000,1968,Diesel\n"
            "Audi,A3,,2012,90000,1598,Benzyna\n"
        )
        df = ListingReader(write(tmp_path, text)).load()
        assert list(df["model"]) == ["A4"]

    def test_unparseable_mileage_becomes_nan(self, tmp_path):
        path = write(tmp_path, f"{HEADER}\nAudi,A4,20000,2010,lots,1968,Diesel\n")
        df = ListingReader(path).load()
        assert df["mileage"].isna().all()


class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError) as exc:
            ListingReader(tmp_path / "nope.csv").load()
        assert exc.value.stage == "load"

    def test_empty_file(self, tmp_path):
        with pytest.raises(DataError):
            ListingReader(write(tmp_path, "")).load()

    def test_header_only(self, tmp_path):
        with pytest.raises(DataError, match="No listings"):
            ListingReader(write(tmp_path, f"{HEADER}\n")).load()

    def test_missing_columns(self, tmp_path):
        path = write(tmp_path, "make,model,price\nAudi,A4,20000\n")
        with pytest.raises(DataError, match="Missing required columns"):
            ListingReader(path).load()

    def test_wrong_delimiter_looks_like_missing_columns(self, listings_csv):
        with pytest.raises(DataError):
            ListingReader(listings_csv, delimiter=";").load()
