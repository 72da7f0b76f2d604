"""Training + evaluation runner for the car price model.

Orchestrates the complete training workflow:
1. Load and clean listings from CSV
2. Split into train/test
3. Build the pipeline and train
4. Evaluate on the test split (optionally cross-validate)
5. Save the model
6. Fit the regression line and draw the chart (failures here are warnings)

Usage:
    python scripts/ops/train_and_eval.py --data storage/otomoto.csv
    python scripts/ops/train_and_eval.py --iterations 200 --plot storage/plots/dist.svg
    python scripts/ops/train_and_eval.py --cross-validate --folds 5
"""

import argparse
import logging
from pathlib import Path

from carvalue.analysis import RegressionLineFitter, RegressionPlotter, ReportFormatter
from carvalue.config import (
    CV_FOLDS,
    DEFAULT_DATA_PATH,
    DEFAULT_MODEL_PATH,
    DEFAULT_SEED,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_LEVEL,
    PLOTS_DIR,
    TEST_FRACTION,
)
from carvalue.data import LISTING_SCHEMA, NUMERIC_ENGINE_SCHEMA
from carvalue.errors import CarValueError
from carvalue.features import DEFAULT_COLUMNS, ColumnSpec, TransformKind
from carvalue.models import save_model
from carvalue.pipeline import Evaluator, PipelineBuilder, TrainerConfig, TrainingSession

logger = logging.getLogger(__name__)


def parse_column(text: str) -> ColumnSpec:
    """'mileage=normalize_mean_variance' → ColumnSpec (transform defaults to none)."""
    name, _, transform = text.partition("=")
    return ColumnSpec(name.strip(), transform.strip() or TransformKind.NONE)


def main():
    """Run full training + evaluation workflow."""
    parser = argparse.ArgumentParser(
        description="Train and evaluate the used-car price model"
    )
    parser.add_argument("--data", default=DEFAULT_DATA_PATH, help="Listing CSV")
    parser.add_argument("--delimiter", default=None, help="CSV field separator")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed")
    parser.add_argument(
        "--test-fraction",
        type=float,
        default=TEST_FRACTION,
        help="Share of listings held out for testing",
    )
    parser.add_argument(
        "--column",
        dest="columns",
        action="append",
        type=parse_column,
        help="Column selection as name=transform (repeatable). Default: all columns",
    )
    parser.add_argument(
        "--numeric-engine",
        action="store_true",
        help="Treat engine capacity as a number instead of text",
    )
    parser.add_argument("--iterations", type=int, default=TrainerConfig.number_of_iterations)
    parser.add_argument("--learning-rate", type=float, default=TrainerConfig.learning_rate)
    parser.add_argument("--leaves", type=int, default=TrainerConfig.number_of_leaves)
    parser.add_argument("--objective", default=TrainerConfig.objective)
    parser.add_argument(
        "--cross-validate",
        action="store_true",
        help="Also report K-fold cross-validation averages",
    )
    parser.add_argument("--folds", type=int, default=CV_FOLDS)
    parser.add_argument(
        "--plot",
        type=Path,
        default=PLOTS_DIR / "RegressionDistribution.png",
        help="Chart output (.png or .svg)",
    )
    parser.add_argument("--no-plot", action="store_true", help="Skip the chart")
    parser.add_argument("--model-out", type=Path, default=Path(DEFAULT_MODEL_PATH))
    parser.add_argument("--name", default="LightGbm", help="Model name in the report")

    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    schema = NUMERIC_ENGINE_SCHEMA if args.numeric_engine else LISTING_SCHEMA
    columns = tuple(args.columns or DEFAULT_COLUMNS)
    if args.numeric_engine and not args.columns:
        columns = tuple(
            ColumnSpec("engine", TransformKind.NORMALIZE_MEAN_VARIANCE) if c.name == "engine" else c
            for c in columns
        )

    session_kwargs = {"data_path": args.data, "seed": args.seed, "test_fraction": args.test_fraction, "schema": schema}
    if args.delimiter:
        session_kwargs["delimiter"] = args.delimiter

    try:
        session = TrainingSession(**session_kwargs)
        config = TrainerConfig(
            number_of_iterations=args.iterations,
            learning_rate=args.learning_rate,
            number_of_leaves=args.leaves,
            objective=args.objective,
        )

        print("\n" + "=" * 70)
        print("CARVALUE TRAINING + EVALUATION PIPELINE")
        print("=" * 70)

        # Step 1: Load
        print("\n[1/5] LOADING DATA")
        print("-" * 70)
        data = session.load_data()
        print(f"Loaded {len(data):,} listings from {args.data}")

        # Step 2-4: Split, train, evaluate
        print("\n[2/5] TRAINING")
        print("-" * 70)
        for step in PipelineBuilder.describe(PipelineBuilder(schema).build(columns, config, seed=args.seed)):
            print(f"  {step}")
        result = session.run(columns, config, data=data)
        result.datasets.print_summary()

        print("\n[3/5] EVALUATION")
        print("-" * 70)
        formatter = ReportFormatter()
        if result.succeeded:
            print(formatter.format_metrics(result.metrics, name=args.name))
        else:
            print(f"Evaluation failed: {result.metrics_error}")

        if args.cross_validate:
            print(f"\nCross-validating ({args.folds} folds)...")
            folds = Evaluator().cross_validate(
                PipelineBuilder(schema), columns, config, data, folds=args.folds, seed=args.seed
            )
            print(formatter.format_cross_validation(folds))

        # Step 5: Save
        print("\n[4/5] SAVING MODEL")
        print("-" * 70)
        save_model(result.model, schema, args.model_out)

        # Step 6: Regression line + chart
        print("\n[5/5] REGRESSION LINE")
        print("-" * 70)
        try:
            actual, predicted = result.actual_vs_predicted()
            line = RegressionLineFitter().fit(zip(actual, predicted))
            print(f"y = {line.slope:.4f}·x + {line.intercept:.2f}")
            if not args.no_plot:
                path = RegressionPlotter().render(actual, predicted, line, args.plot)
                print(f"Chart: {path}")
        except CarValueError as e:
            logger.warning(f"Regression line skipped: {e}")
            print(f"Chart skipped: {e}")

        print("\n" + "=" * 70)
        print("PIPELINE COMPLETE")
        print("=" * 70)
        print(f"Model: {args.model_out}")
        print(f"Features: {len(result.model.feature_names)} packed columns")
    except CarValueError as e:
        print(f"\nFAILED {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
