"""Scoring with a fitted model and its preprocessing state."""

from __future__ import annotations

from .model import TrainedModel

__all__ = ["TrainedModel"]
