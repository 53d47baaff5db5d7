"""Progress reporting for strataprep.

This module provides step tracking and callback-based reporting during a
pipeline run.
"""

from __future__ import annotations

from .reporter import (
    CallbackProgressReporter,
    NullProgressReporter,
    PipelineStep,
    ProgressCallback,
    ProgressReporter,
    ProgressUpdate,
)

__all__ = [
    "PipelineStep",
    "ProgressUpdate",
    "ProgressCallback",
    "ProgressReporter",
    "CallbackProgressReporter",
    "NullProgressReporter",
]
