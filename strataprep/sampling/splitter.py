"""Stratified train/test sampling."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from ..core import PartitionPair
from ..errors import InvalidConfigError, SchemaError

logger = logging.getLogger(__name__)


class StratifiedSplitter:
    """Draws the same fraction of rows from every stratum.

    Each stratum is sampled independently, uniformly and without
    replacement, ``round(test_size * count)`` rows. A fresh generator seeded
    with ``random_seed`` is used for every stratum, so two strata of equal
    size pick the same row offsets. No global random state is consulted.

    After ``split`` the ``sparse_strata`` attribute lists the strata that
    had zero or one row.
    """

    def __init__(self, test_size: float = 0.2, random_seed: int = 42) -> None:
        if not 0 < test_size < 1:
            raise InvalidConfigError("test_size must be between 0 and 1")
        self.test_size = test_size
        self.random_seed = random_seed
        self.sparse_strata: list[Any] = []

    def split(self, data: pd.DataFrame, strata_column: str) -> PartitionPair:
        """Sample the raw test partition.

        Args:
            data: Frame containing ``strata_column``.
            strata_column: Column holding the stratum of every row.

        Returns:
            PartitionPair whose ``train`` is still the entire input frame and
            whose ``test`` holds the per-stratum samples, concatenated in
            stratum order and source order within a stratum. Use
            ``finalize`` to remove the test rows from ``train``.

        Raises:
            SchemaError: If ``strata_column`` is missing.
        """
        if strata_column not in data.columns:
            raise SchemaError(strata_column, "missing strata column")

        strata = data[strata_column]
        if strata.isna().any():
            logger.warning(
                f"{int(strata.isna().sum())} rows have no stratum and are never sampled"
            )

        self.sparse_strata = []
        samples: list[pd.DataFrame] = []
        for stratum in self._distinct_strata(strata):
            members = data[strata == stratum]
            count = len(members)
            if count <= 1:
                logger.warning(
                    f"Stratum {stratum!r} has only {count} row(s); its test sample is degenerate"
                )
                self.sparse_strata.append(stratum)

            n_test = round(self.test_size * count)
            if n_test == 0:
                continue
            rng = np.random.default_rng(self.random_seed)
            offsets = np.sort(rng.choice(count, size=n_test, replace=False))
            samples.append(members.iloc[offsets])

        test_raw = pd.concat(samples) if samples else data.iloc[0:0].copy()
        logger.info(f"Sampled {len(test_raw)} of {len(data)} rows into the test partition")
        return PartitionPair(train=data.copy(), test=test_raw)

    @staticmethod
    def _distinct_strata(strata: pd.Series) -> list[Any]:
        # Declared categories include strata with no rows
        if isinstance(strata.dtype, pd.CategoricalDtype):
            return list(strata.cat.categories)
        return list(pd.unique(strata.dropna()))
