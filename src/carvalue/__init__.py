"""
carvalue - Used-car price prediction with a configurable training pipeline

Pick a transform per listing column, tune the boosted-tree regressor,
train, and check how close the predictions land.

Structure:
    data/      - Listing schema, CSV reader, row filtering
    features/  - Column specs and per-column transform stages
    pipeline/  - Builder, trainer, evaluator, session runner
    models/    - Train/test splitting and model persistence
    analysis/  - Regression line, text report, scatter plot

Usage:
    from carvalue.pipeline import PipelineBuilder, Trainer, Evaluator
    from carvalue.features import DEFAULT_COLUMNS
    from carvalue.pipeline.trainer import TrainerConfig
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
