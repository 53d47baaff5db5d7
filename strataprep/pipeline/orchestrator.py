"""Preparation pipeline orchestrator.

This module provides the Pipeline class that runs the stratified split and
preprocessing stages in their fixed order and hands the result to the
regression model.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import pandas as pd

from ..config import PipelineConfig
from ..core import PartitionPair, PipelineContext, PipelineResult, PipelineStage
from ..errors import StrataPrepError
from ..inference import TrainedModel
from ..models import create_model
from ..progress import (
    CallbackProgressReporter,
    NullProgressReporter,
    PipelineStep,
    ProgressCallback,
    ProgressReporter,
    ProgressUpdate,
)
from .stages import DEFAULT_STAGES, SPLIT_STAGES

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)


class Pipeline:
    """Stratified split and preprocessing pipeline.

    The pipeline executes a sequence of stages:
    1. ValidationStage - Checks the schema before anything is split
    2. BinningStage - Bins the stratification source into strata
    3. StratifiedSplitStage - Samples per stratum, then set-difference
    4. DropStrataStage - Removes the strata helper column
    5. EncodingStage - Label-encodes categoricals fitted on train
    6. SentinelFillStage - Normalizes missing numeric cells to NaN
    7. LabelSeparationStage - Separates the label from the features
    8. ImputationStage - Fits the imputer on train and fills NaN
    9. ModelTrainingStage - Fits the regressor
    10. EvaluationStage - Computes error metrics

    There is no partial success: any stage error aborts the run, and the
    raised StrataPrepError carries the failing stage in ``stage``.

    Usage:
        result = Pipeline.builder() \\
            .config(config) \\
            .on_progress(lambda u: print(u.message)) \\
            .build() \\
            .run(dataframe)
    """

    def __init__(
        self,
        config: PipelineConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize pipeline.

        Use Pipeline.builder() for a fluent interface.

        Raises:
            InvalidConfigError: If the configured algorithm is unknown.
        """
        self._config = config
        self._reporter: ProgressReporter = (
            CallbackProgressReporter(progress_callback)
            if progress_callback
            else NullProgressReporter()
        )
        # Fail at construction on an unknown algorithm rather than after splitting
        create_model(config.algorithm, config.random_seed)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @classmethod
    def builder(cls) -> PipelineBuilder:
        """Create a builder for Pipeline."""
        return PipelineBuilder()

    def run(self, data: pd.DataFrame) -> PipelineResult:
        """Split, preprocess, fit and evaluate.

        Args:
            data: Raw frame with the target, stratification source and
                feature columns.

        Returns:
            PipelineResult with metrics and the fitted model.

        Raises:
            SchemaError: If a required column is missing or mistyped.
            InvalidDataError: If data validation fails.
            UnknownCategoryError: If a test category is unseen in train.
            ModelError: If the regressor fails.
        """
        context = self._execute([stage() for stage in DEFAULT_STAGES], data, time.time())

        run_time = time.time() - context.start_time
        self._report(PipelineStep.COMPLETE, 1.0, "Pipeline complete!")
        return self._build_result(context, run_time)

    def split(self, data: pd.DataFrame) -> PartitionPair:
        """Run only the partitioning stages and return train and test frames."""
        context = self._execute([stage() for stage in SPLIT_STAGES], data, time.time())
        assert context.train is not None and context.test is not None
        self._report(PipelineStep.COMPLETE, 1.0, "Split complete!")
        return PartitionPair(train=context.train, test=context.test)

    def _execute(
        self,
        stages: list[PipelineStage],
        data: pd.DataFrame,
        start_time: float,
    ) -> PipelineContext:
        self._report(PipelineStep.INITIALIZING, 0.0, "Initializing pipeline...")

        context = PipelineContext(
            config=self._config,
            reporter=self._reporter,
            data=data,
            start_time=start_time,
        )

        for stage in stages:
            try:
                context = stage.execute(context)
            except Exception as e:
                if isinstance(e, StrataPrepError) and e.stage is None:
                    e.stage = stage.name
                logger.error(f"Stage '{stage.name}' failed: {e}")
                self._report(PipelineStep.FAILED, 0.0, f"Stage '{stage.name}' failed: {e}")
                raise

        for warning in context.warnings:
            logger.warning(warning)
        return context

    def _report(self, step: PipelineStep, progress: float, message: str) -> None:
        """Report progress."""
        self._reporter.report(ProgressUpdate(step=step, progress=progress, message=message))

    def _build_result(self, context: PipelineContext, run_time: float) -> PipelineResult:
        """Build PipelineResult from completed context."""
        # Ensure required fields are present
        assert context.metrics is not None
        assert context.preprocessor is not None
        assert context.train is not None and context.test is not None

        model = TrainedModel(
            model=context.model,
            preprocessor=context.preprocessor,
            target_column=self._config.target_column,
            algorithm=self._config.algorithm,
        )
        return PipelineResult(
            success=True,
            metrics=context.metrics,
            model=model,
            n_train=len(context.train),
            n_test=len(context.test),
            feature_names=context.preprocessor.feature_names,
            run_time_seconds=run_time,
            warnings=context.warnings,
        )


class PipelineBuilder:
    """Builder for Pipeline with fluent interface."""

    def __init__(self) -> None:
        self._config: PipelineConfig | None = None
        self._progress_callback: ProgressCallback | None = None

    def config(self, config: PipelineConfig) -> Self:
        """Set the pipeline configuration."""
        self._config = config
        return self

    def on_progress(self, callback: ProgressCallback) -> Self:
        """Set the progress callback."""
        self._progress_callback = callback
        return self

    def build(self) -> Pipeline:
        """Build the Pipeline."""
        if self._config is None:
            raise ValueError("config is required")

        return Pipeline(
            config=self._config,
            progress_callback=self._progress_callback,
        )
