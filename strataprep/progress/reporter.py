"""Progress reporting classes and types.

This module contains the core progress reporting infrastructure including
the PipelineStep enum, ProgressUpdate dataclass, and reporter implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class PipelineStep(Enum):
    """Steps of the preparation pipeline."""

    INITIALIZING = "initializing"
    VALIDATION = "validation"
    BINNING = "binning"
    SPLITTING = "splitting"
    ENCODING = "encoding"
    IMPUTATION = "imputation"
    TRAINING = "training"
    EVALUATION = "evaluation"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class ProgressUpdate:
    """Progress update during a pipeline run.

    Attributes:
        step: Current pipeline step.
        progress: Progress value from 0.0 to 1.0.
        message: Human-readable status message.
    """

    step: PipelineStep
    progress: float  # 0.0 to 1.0
    message: str


# Type alias for progress callback
ProgressCallback = Callable[[ProgressUpdate], None]


class ProgressReporter(Protocol):
    """Protocol for progress reporting.

    Implement this protocol to receive progress updates during a run.
    """

    def report(self, update: ProgressUpdate) -> None:
        """Report a progress update.

        Args:
            update: The progress update to report.
        """
        ...


class CallbackProgressReporter:
    """Progress reporter that forwards every update to a callback."""

    def __init__(self, progress_callback: ProgressCallback | None = None) -> None:
        self._progress_callback = progress_callback

    def report(self, update: ProgressUpdate) -> None:
        """Report progress update via callback."""
        if self._progress_callback is not None:
            self._progress_callback(update)


class NullProgressReporter:
    """No-op progress reporter.

    Use this when you don't need progress reporting.
    """

    def report(self, update: ProgressUpdate) -> None:
        """Do nothing."""
        pass
