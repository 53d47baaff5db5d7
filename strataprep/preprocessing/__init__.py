"""Data preprocessing for model fitting.

This module provides categorical label encoding and missing-value
handling, fitted on the training partition only.
"""

from __future__ import annotations

from .encoder import CategoricalEncoder, EncodingMap, Lookup
from .missing import MissingValueImputer, sentinel_fill, sentinel_fill_frame
from .preprocessor import Preprocessor

__all__ = [
    "CategoricalEncoder",
    "EncodingMap",
    "Lookup",
    "MissingValueImputer",
    "Preprocessor",
    "sentinel_fill",
    "sentinel_fill_frame",
]
