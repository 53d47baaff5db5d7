"""Stratified sampling of a frame into train and test partitions.

This module provides the stratum binner, the per-stratum test sampler and
the set-difference step that makes the two partitions disjoint.
"""

from __future__ import annotations

import pandas as pd

from ..core import PartitionPair
from .binning import CategoryBinner
from .partition import finalize, row_keys
from .splitter import StratifiedSplitter


def stratified_partition(
    data: pd.DataFrame,
    strata_column: str,
    test_size: float = 0.2,
    random_seed: int = 42,
) -> PartitionPair:
    """Split ``data`` by stratum and make the partitions disjoint."""
    raw = StratifiedSplitter(test_size, random_seed).split(data, strata_column)
    return finalize(data, raw.test)


__all__ = [
    "CategoryBinner",
    "StratifiedSplitter",
    "finalize",
    "row_keys",
    "stratified_partition",
]
