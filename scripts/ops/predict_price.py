"""Price a single listing with a saved model.

Usage:
    python scripts/ops/predict_price.py --make Audi --model A4 --year 2012 \
        --mileage 150000 --engine 1968 --fuel Diesel
"""

import argparse
import logging
from pathlib import Path

from carvalue.config import DEFAULT_MODEL_PATH, LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL
from carvalue.errors import CarValueError
from carvalue.models import load_model


def main():
    parser = argparse.ArgumentParser(description="Predict the price of one car listing")
    parser.add_argument("--model-path", type=Path, default=Path(DEFAULT_MODEL_PATH))
    parser.add_argument("--make", required=True)
    parser.add_argument("--model", required=True)
    parser.add_argument("--year", type=float, required=True)
    parser.add_argument("--mileage", type=float, required=True)
    parser.add_argument("--engine", required=True, help="Engine capacity (cm3)")
    parser.add_argument("--fuel", required=True)

    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    listing = {
        "make": args.make,
        "model": args.model,
        "year": args.year,
        "mileage": args.mileage,
        "engine": args.engine,
        "fuel": args.fuel,
    }

    try:
        model = load_model(args.model_path)
        price = model.predict_listing(listing)
    except CarValueError as e:
        print(f"FAILED {e}")
        return 1

    print(f"{price:.0f} PLN")
    return 0


if __name__ == "__main__":
    exit(main())
