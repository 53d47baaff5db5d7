"""Protocols and shared interfaces for the pipeline stages.

This module defines the PipelineStage protocol that all pipeline stages implement,
along with the PipelineContext dataclass that flows through the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import pandas as pd
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..config import PipelineConfig
    from ..preprocessing import Preprocessor
    from ..progress import ProgressReporter
    from .metrics import RegressionMetrics
    from .types import Schema


@dataclass
class PipelineContext:
    """Context object that flows through pipeline stages.

    This contains all the state needed by pipeline stages, avoiding
    the need to pass many parameters between stages.
    """

    # Configuration (always present)
    config: PipelineConfig
    reporter: ProgressReporter

    # Raw data and its validated schema (set by validation stage)
    data: pd.DataFrame | None = None
    schema: Schema | None = None
    categorical_columns: list[str] = field(default_factory=list)

    # Partitions (set by split stage, rewritten by the preprocessing stages)
    train: pd.DataFrame | None = None
    test: pd.DataFrame | None = None

    # Fitted preprocessing state (set by encoding and imputation stages)
    preprocessor: Preprocessor | None = None

    # Feature frames without the label (set by label separation stage)
    features_train: pd.DataFrame | None = None
    features_test: pd.DataFrame | None = None

    # Numeric matrices (set by label separation and imputation stages)
    X_train: NDArray[Any] | None = None
    y_train: NDArray[Any] | None = None
    X_test: NDArray[Any] | None = None
    y_test: NDArray[Any] | None = None

    # Model and evaluation (set by training and evaluation stages)
    model: Any = None
    metrics: RegressionMetrics | None = None

    # Warnings accumulated during pipeline execution
    warnings: list[str] = field(default_factory=list)

    # Run start time for calculating total duration
    start_time: float = 0.0


class PipelineStage(Protocol):
    """Protocol for pipeline stages.

    Each stage takes a PipelineContext, performs its work, and returns
    the (possibly modified) context. This allows stages to be composed
    and executed in sequence.
    """

    name: str

    def execute(self, context: PipelineContext) -> PipelineContext:
        """Execute the pipeline stage.

        Args:
            context: The current pipeline context.

        Returns:
            The updated pipeline context.

        Raises:
            Various exceptions depending on the stage.
        """
        ...
