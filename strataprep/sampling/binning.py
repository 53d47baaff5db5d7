"""Binning of a continuous column into ordered strata."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence

import numpy as np
import pandas as pd

from ..errors import InvalidConfigError


class CategoryBinner:
    """Maps a continuous value onto strata ``1..len(boundaries) + 1``.

    Intervals are half-open: stratum ``i`` covers values strictly below
    boundary ``i`` and at or above boundary ``i - 1``. The last stratum is
    unbounded above. With boundaries ``[1.5, 3.0, 4.5, 6.0]``, ``1.2`` is in
    stratum 1, ``1.5`` in stratum 2 and anything from ``6.0`` up in stratum 5.

    Non-finite values must be rejected by the caller.
    """

    def __init__(self, boundaries: Sequence[float]) -> None:
        self._boundaries = [float(b) for b in boundaries]
        if not self._boundaries:
            raise InvalidConfigError("bin boundaries must not be empty")
        if any(a >= b for a, b in zip(self._boundaries, self._boundaries[1:])):
            raise InvalidConfigError(
                f"bin boundaries must be strictly ascending, got {self._boundaries}"
            )

    @property
    def boundaries(self) -> list[float]:
        return self._boundaries.copy()

    @property
    def labels(self) -> list[int]:
        """All stratum labels in ascending order."""
        return list(range(1, len(self._boundaries) + 2))

    def bin(self, value: float) -> int:
        """Return the stratum of a single value."""
        return bisect_right(self._boundaries, value) + 1

    def bin_series(self, values: pd.Series) -> pd.Series:
        """Bin a whole column.

        Returns:
            An ordered categorical Series whose categories are all labels,
            so strata with no rows are still visible to the splitter.
        """
        codes = np.searchsorted(self._boundaries, values.to_numpy(dtype=float), side="right") + 1
        return pd.Series(
            pd.Categorical(codes, categories=self.labels, ordered=True),
            index=values.index,
            name=values.name,
        )
