"""Set-difference finalization of a raw split.

Row identity is the full tuple of values across all columns. Rows that are
value-identical are one logical row: duplicates in the original frame
collapse to a single train row, and a row sampled into the test partition
removes every copy of itself from train. Callers that need positional
fidelity must add a unique identifier column before splitting.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..core import PartitionPair
from ..errors import SchemaError

logger = logging.getLogger(__name__)


def row_keys(data: pd.DataFrame) -> pd.Series:
    """Build a hashable key per row from all of its values.

    Missing values are normalized to None so that two absent cells compare
    equal, which NaN does not.
    """
    keys = [
        tuple(None if pd.isna(value) else value for value in row)
        for row in data.itertuples(index=False, name=None)
    ]
    return pd.Series(keys, index=data.index, dtype=object)


def finalize(original: pd.DataFrame, test_raw: pd.DataFrame) -> PartitionPair:
    """Remove the test rows from the original frame.

    Args:
        original: The full frame the test rows were sampled from.
        test_raw: Raw test partition from the stratified splitter.

    Returns:
        PartitionPair with ``train = original - test_raw`` as a set of row
        values and ``test = test_raw`` unchanged.

    Raises:
        SchemaError: If the two frames do not share the same columns.
    """
    if list(original.columns) != list(test_raw.columns):
        missing = sorted(set(original.columns) ^ set(test_raw.columns))
        raise SchemaError(
            ", ".join(map(str, missing)) or "<order>",
            "train and test partitions must share the same columns",
        )

    test_keys = set(row_keys(test_raw))

    seen: set[tuple] = set()
    keep: list[bool] = []
    collapsed = 0
    for key in row_keys(original):
        if key in seen:
            collapsed += 1
            keep.append(False)
            continue
        seen.add(key)
        keep.append(key not in test_keys)

    if collapsed:
        logger.warning(f"{collapsed} duplicate-valued rows collapsed during partitioning")

    train = original.loc[np.asarray(keep, dtype=bool)].reset_index(drop=True)
    logger.info(f"Finalized partitions: {len(train)} train rows, {len(test_raw)} test rows")
    return PartitionPair(train=train, test=test_raw)
