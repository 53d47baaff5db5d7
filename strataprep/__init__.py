"""strataprep: Stratified splitting and preprocessing for tabular regression.

This library partitions a dataset into train and test sets by sampling the
same fraction of every income stratum, then label-encodes categorical
columns and imputes missing values with statistics learned on train only.

Example usage:
    from strataprep import Pipeline, PipelineConfig

    config = PipelineConfig.builder() \\
        .target_column("median_house_value") \\
        .evaluate_on("test") \\
        .build()

    result = Pipeline.builder() \\
        .config(config) \\
        .on_progress(lambda u: print(f"{u.progress:.0%} - {u.message}")) \\
        .build() \\
        .run(dataframe)

    print(result.metrics.mae)
    predictions = result.model.predict_batch(new_rows)
"""

from __future__ import annotations

# Configuration
from .config import (
    EvaluationTarget,
    ImputationStrategy,
    PipelineConfig,
    PipelineConfigBuilder,
    UnknownCategoryPolicy,
)

# Types (from core module)
from .core import (
    ColumnType,
    PartitionPair,
    PipelineContext,
    PipelineResult,
    PipelineStage,
    RegressionMetrics,
    Schema,
)

# Dataset
from .dataset import load_dataset

# Errors
from .errors import (
    InvalidConfigError,
    InvalidDataError,
    ModelError,
    NotFittedError,
    SchemaError,
    StrataPrepError,
    UnknownCategoryError,
)

# Model
from .inference import TrainedModel

# Pipeline
from .pipeline import Pipeline, PipelineBuilder

# Preprocessing
from .preprocessing import (
    CategoricalEncoder,
    EncodingMap,
    MissingValueImputer,
    Preprocessor,
    sentinel_fill,
)

# Progress
from .progress import (
    CallbackProgressReporter,
    NullProgressReporter,
    PipelineStep,
    ProgressCallback,
    ProgressReporter,
    ProgressUpdate,
)

# Sampling
from .sampling import CategoryBinner, StratifiedSplitter, finalize, stratified_partition

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "PipelineConfig",
    "PipelineConfigBuilder",
    "ImputationStrategy",
    "UnknownCategoryPolicy",
    "EvaluationTarget",
    # Pipeline
    "Pipeline",
    "PipelineBuilder",
    # Model
    "TrainedModel",
    # Dataset
    "load_dataset",
    # Sampling
    "CategoryBinner",
    "StratifiedSplitter",
    "finalize",
    "stratified_partition",
    # Preprocessing
    "CategoricalEncoder",
    "EncodingMap",
    "MissingValueImputer",
    "Preprocessor",
    "sentinel_fill",
    # Progress
    "PipelineStep",
    "ProgressUpdate",
    "ProgressCallback",
    "ProgressReporter",
    "CallbackProgressReporter",
    "NullProgressReporter",
    # Types (from core)
    "ColumnType",
    "Schema",
    "PartitionPair",
    "PipelineResult",
    "RegressionMetrics",
    "PipelineStage",
    "PipelineContext",
    # Errors
    "StrataPrepError",
    "InvalidConfigError",
    "InvalidDataError",
    "SchemaError",
    "UnknownCategoryError",
    "NotFittedError",
    "ModelError",
]
