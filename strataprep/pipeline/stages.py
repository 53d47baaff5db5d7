"""Pipeline stages implementing the PipelineStage protocol.

Each stage is a single-responsibility class that operates on PipelineContext,
performing one step of the preparation pipeline. The order is fixed by data
dependencies: strata must exist before splitting, encoders and the imputer
are fitted on the finalized train partition only, and the label is removed
before the imputer sees the features.
"""

from __future__ import annotations

import logging

import numpy as np

from ..config import EvaluationTarget
from ..core import ColumnType, PipelineContext, RegressionMetrics, Schema
from ..errors import InvalidDataError, ModelError, SchemaError
from ..models import create_model
from ..preprocessing import Preprocessor
from ..progress import PipelineStep, ProgressUpdate
from ..sampling import CategoryBinner, StratifiedSplitter, finalize

logger = logging.getLogger(__name__)


def _report(context: PipelineContext, step: PipelineStep, progress: float, message: str) -> None:
    logger.info(message)
    context.reporter.report(ProgressUpdate(step=step, progress=progress, message=message))


class ValidationStage:
    """Validates the input frame before anything is split.

    Checks for:
    - Non-empty data
    - Numeric target column without missing values
    - Numeric, finite stratification source column
    - No infinite values in numeric columns
    - Categorical columns to encode, and no other non-numeric feature

    Sets on context: schema, categorical_columns
    """

    name = "validation"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute validation stage."""
        _report(context, PipelineStep.VALIDATION, 0.05, "Validating data...")

        if context.data is None or len(context.data) == 0:
            raise InvalidDataError("No data provided to pipeline")

        config = context.config
        data = context.data
        schema = Schema.from_frame(data)

        schema.require(config.target_column, ColumnType.FLOAT, ColumnType.INTEGER)
        if data[config.target_column].isna().any():
            raise InvalidDataError(f"Target column '{config.target_column}' has missing values")

        schema.require(config.stratify_source, ColumnType.FLOAT, ColumnType.INTEGER)
        source = data[config.stratify_source].to_numpy(dtype=np.float64, na_value=np.nan)
        if not np.isfinite(source).all():
            raise InvalidDataError(
                f"Stratification column '{config.stratify_source}' has missing or "
                "non-finite values"
            )

        for col in schema.columns_of(ColumnType.FLOAT, ColumnType.INTEGER):
            values = data[col].to_numpy(dtype=np.float64, na_value=np.nan)
            if np.isinf(values).any():
                raise InvalidDataError(f"Column '{col}' has infinite values")

        if config.strata_column in schema.columns:
            raise SchemaError(config.strata_column, "strata column already exists in the data")

        if config.categorical_columns is None:
            categorical = [
                c for c in schema.columns_of(ColumnType.CATEGORICAL) if c != config.target_column
            ]
        else:
            categorical = list(config.categorical_columns)
            for col in categorical:
                schema.require(col, ColumnType.CATEGORICAL)

        for col in schema.columns_of(ColumnType.CATEGORICAL):
            if col not in categorical:
                raise SchemaError(col, "non-numeric column is not listed for encoding")

        context.schema = schema
        context.categorical_columns = categorical
        return context


class BinningStage:
    """Bins the stratification source into the strata column.

    Sets on context: data (with the strata column added)
    """

    name = "binning"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute binning stage."""
        _report(context, PipelineStep.BINNING, 0.10, "Binning strata...")

        if context.data is None or context.schema is None:
            raise InvalidDataError("Validation stage must run before binning")

        config = context.config
        binner = CategoryBinner(config.bin_boundaries)
        strata = binner.bin_series(context.data[config.stratify_source])
        context.data = context.data.assign(**{config.strata_column: strata})
        return context


class StratifiedSplitStage:
    """Samples the test partition per stratum and removes it from train.

    Sets on context: train, test
    """

    name = "split"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute split stage."""
        _report(context, PipelineStep.SPLITTING, 0.20, "Splitting data by stratum...")

        config = context.config
        if context.data is None or config.strata_column not in context.data.columns:
            raise InvalidDataError("Binning stage must run before split")

        splitter = StratifiedSplitter(config.test_size, config.random_seed)
        raw = splitter.split(context.data, config.strata_column)
        partitions = finalize(context.data, raw.test)

        for stratum in splitter.sparse_strata:
            context.warnings.append(f"Stratum {stratum!r} has at most one row")

        context.train = partitions.train
        context.test = partitions.test
        return context


class DropStrataStage:
    """Removes the strata helper column from both partitions.

    Sets on context: train, test
    """

    name = "drop_strata"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute drop stage."""
        if context.train is None or context.test is None:
            raise InvalidDataError("Split stage must run before dropping strata")

        column = context.config.strata_column
        context.train = context.train.drop(columns=[column])
        context.test = context.test.drop(columns=[column])
        return context


class EncodingStage:
    """Label-encodes categorical columns with maps fitted on train only.

    The test partition is encoded with the same maps only when it is used
    for evaluation.

    Sets on context: preprocessor, train, test, schema
    """

    name = "encoding"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute encoding stage."""
        _report(context, PipelineStep.ENCODING, 0.35, "Encoding categorical columns...")

        if context.train is None or context.test is None:
            raise InvalidDataError("Split stage must run before encoding")

        config = context.config
        preprocessor = Preprocessor(
            context.categorical_columns,
            imputation_strategy=config.imputation_strategy,
            unknown_category=config.unknown_category,
        )
        preprocessor.fit_encoders(context.train)

        context.train = preprocessor.encode(context.train)
        if config.evaluate_on is EvaluationTarget.TEST:
            context.test = preprocessor.encode(context.test)

        # Encoded columns are now integer codes
        context.schema = Schema.from_frame(context.train)
        context.preprocessor = preprocessor
        return context


class SentinelFillStage:
    """Normalizes missing numeric cells to NaN in every float column.

    Sets on context: train, test
    """

    name = "sentinel_fill"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute sentinel fill stage."""
        if context.train is None or context.test is None:
            raise InvalidDataError("Encoding stage must run before sentinel fill")

        context.train = Preprocessor.fill_sentinels(context.train)
        if context.config.evaluate_on is EvaluationTarget.TEST:
            context.test = Preprocessor.fill_sentinels(context.test)
        return context


class LabelSeparationStage:
    """Splits the label column off the feature frames.

    Sets on context: features_train, y_train, features_test, y_test
    """

    name = "label_separation"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute label separation stage."""
        if context.train is None or context.test is None:
            raise InvalidDataError("Sentinel fill stage must run before label separation")

        target = context.config.target_column
        context.features_train = context.train.drop(columns=[target])
        context.y_train = context.train[target].to_numpy(dtype=np.float64)
        context.features_test = context.test.drop(columns=[target])
        context.y_test = context.test[target].to_numpy(dtype=np.float64)
        return context


class ImputationStage:
    """Fits the imputer on train features and produces numeric matrices.

    Sets on context: X_train, X_test (held-out evaluation only)
    """

    name = "imputation"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute imputation stage."""
        _report(context, PipelineStep.IMPUTATION, 0.50, "Imputing missing values...")

        if context.preprocessor is None or context.features_train is None:
            raise InvalidDataError("Label separation stage must run before imputation")

        if context.features_train.empty:
            raise InvalidDataError("Training partition is empty")

        preprocessor = context.preprocessor
        preprocessor.fit_imputer(context.features_train)
        context.X_train = preprocessor.impute(context.features_train)

        holdout = context.config.evaluate_on is EvaluationTarget.TEST
        if holdout and context.features_test is not None:
            context.X_test = preprocessor.impute(context.features_test)
        return context


class ModelTrainingStage:
    """Fits the configured regressor on the training matrix.

    Sets on context: model
    """

    name = "training"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute training stage."""
        _report(
            context,
            PipelineStep.TRAINING,
            0.70,
            f"Training {context.config.algorithm}...",
        )

        if context.X_train is None or context.y_train is None:
            raise InvalidDataError("Imputation stage must run before training")

        model = create_model(context.config.algorithm, context.config.random_seed)
        try:
            model.fit(context.X_train, context.y_train)
        except Exception as e:
            raise ModelError(f"Fitting {context.config.algorithm} failed: {e}") from e

        context.model = model
        return context


class EvaluationStage:
    """Compares predictions to labels on the configured partition.

    Evaluating on train reproduces the reference mechanics and only shows
    how well the model fits data it has seen; a warning is recorded.

    Sets on context: metrics
    """

    name = "evaluation"

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute evaluation stage."""
        _report(context, PipelineStep.EVALUATION, 0.90, "Calculating metrics...")

        if context.model is None:
            raise InvalidDataError("Training stage must run before evaluation")

        if context.config.evaluate_on is EvaluationTarget.TEST:
            X, y = context.X_test, context.y_test
            if X is not None and len(X) == 0:
                raise InvalidDataError("Test partition is empty; cannot evaluate on it")
        else:
            X, y = context.X_train, context.y_train
            context.warnings.append("Metrics were computed on the training partition")

        if X is None or y is None:
            raise InvalidDataError("Imputation stage must run before evaluation")

        try:
            predictions = context.model.predict(X)
        except Exception as e:
            raise ModelError(f"Prediction failed: {e}") from e

        context.metrics = RegressionMetrics.compute(
            y, predictions, context.config.evaluate_on.value
        )
        return context


# Stages that only partition the data
SPLIT_STAGES: list[type] = [
    ValidationStage,
    BinningStage,
    StratifiedSplitStage,
    DropStrataStage,
]

# Default stage order for the pipeline
DEFAULT_STAGES: list[type] = [
    *SPLIT_STAGES,
    EncodingStage,
    SentinelFillStage,
    LabelSeparationStage,
    ImputationStage,
    ModelTrainingStage,
    EvaluationStage,
]
