"""Core types and protocols for strataprep.

This module contains the foundational types, metrics, and protocols
used throughout the library.
"""

from __future__ import annotations

from .metrics import RegressionMetrics
from .protocols import PipelineContext, PipelineStage
from .types import ColumnType, PartitionPair, PipelineResult, Schema

__all__ = [
    # Metrics
    "RegressionMetrics",
    # Types
    "ColumnType",
    "Schema",
    "PartitionPair",
    "PipelineResult",
    # Protocols
    "PipelineStage",
    "PipelineContext",
]
