"""
Training Pipeline Module

Build, fit and evaluate car price models.

Components:
    PipelineBuilder   - Column stages → concat → regressor
    Trainer           - LightGBM fit on the training split
    TrainerConfig     - Booster hyperparameters
    Evaluator         - Test-split metrics and cross-validation
    TrainingSession   - Full run (load → split → build → fit → evaluate)
    BackgroundTrainer - One run at a time on a worker thread
"""

from carvalue.pipeline.trainer import Trainer, TrainerConfig
from carvalue.pipeline.builder import PipelineBuilder
from carvalue.pipeline.evaluator import Evaluator, RegressionMetrics
from carvalue.pipeline.runner import BackgroundTrainer, TrainingResult, TrainingSession

__all__ = [
    "PipelineBuilder",
    "Trainer",
    "TrainerConfig",
    "Evaluator",
    "RegressionMetrics",
    "TrainingSession",
    "TrainingResult",
    "BackgroundTrainer",
]
