"""Pipeline module for split and preprocessing orchestration.

This module provides the Pipeline class and the stages it runs.
"""

from __future__ import annotations

from .orchestrator import Pipeline, PipelineBuilder
from .stages import (
    DEFAULT_STAGES,
    SPLIT_STAGES,
    BinningStage,
    DropStrataStage,
    EncodingStage,
    EvaluationStage,
    ImputationStage,
    LabelSeparationStage,
    ModelTrainingStage,
    SentinelFillStage,
    StratifiedSplitStage,
    ValidationStage,
)

__all__ = [
    # Main orchestrator
    "Pipeline",
    "PipelineBuilder",
    # Stages
    "ValidationStage",
    "BinningStage",
    "StratifiedSplitStage",
    "DropStrataStage",
    "EncodingStage",
    "SentinelFillStage",
    "LabelSeparationStage",
    "ImputationStage",
    "ModelTrainingStage",
    "EvaluationStage",
    "SPLIT_STAGES",
    "DEFAULT_STAGES",
]
