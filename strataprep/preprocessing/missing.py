"""Missing-value handling for numeric features.

Missing cells are first normalized to NaN so that a frame can be held in a
single float64 matrix. The imputer then learns a per-column statistic from
the training matrix only and replaces NaN with it in any later matrix.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from sklearn.impute import SimpleImputer

from ..config import ImputationStrategy
from ..errors import InvalidDataError, NotFittedError

logger = logging.getLogger(__name__)


def sentinel_fill(values: pd.Series) -> pd.Series:
    """Return the column as float64 with every absent entry set to NaN."""
    try:
        return pd.to_numeric(values, errors="raise").astype(np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidDataError(f"Column '{values.name}' is not numeric: {e}") from e


def sentinel_fill_frame(data: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Apply sentinel_fill to the given columns of a copy of ``data``."""
    result = data.copy()
    for col in columns:
        result[col] = sentinel_fill(result[col])
    return result


class MissingValueImputer:
    """Replaces NaN entries with a statistic fitted on training data.

    The fitted statistics are never recomputed by transform, so scoring a
    test or inference matrix cannot leak its values into the imputer.
    """

    def __init__(self, strategy: ImputationStrategy = ImputationStrategy.MEDIAN) -> None:
        self.strategy = strategy
        self._imputer: SimpleImputer | None = None
        self._statistics: NDArray[Any] | None = None

    @property
    def is_fitted(self) -> bool:
        return self._statistics is not None

    @property
    def statistics(self) -> NDArray[Any]:
        """Fitted per-column statistics (a copy)."""
        if self._statistics is None:
            raise NotFittedError("MissingValueImputer")
        return self._statistics.copy()

    def fit(self, X: NDArray[Any]) -> MissingValueImputer:
        """Learn the per-column statistic from the training matrix."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2 or X.shape[0] == 0:
            raise InvalidDataError(f"Imputer needs a non-empty 2D matrix, got shape {X.shape}")

        empty = np.isnan(X).all(axis=0)
        if empty.any():
            logger.warning(
                f"{int(empty.sum())} feature column(s) have no observed values; imputing 0"
            )

        # keep_empty_features keeps all-NaN columns so the shape is stable
        imputer = SimpleImputer(
            strategy=self.strategy.value,
            keep_empty_features=True,
        )
        try:
            imputer.fit(X)
        except ValueError as e:
            raise InvalidDataError(f"Cannot fit imputer: {e}") from e
        self._imputer = imputer
        self._statistics = np.where(empty, 0.0, imputer.statistics_).astype(np.float64)
        return self

    def transform(self, X: NDArray[Any]) -> NDArray[Any]:
        """Replace NaN entries with the fitted statistics.

        Raises:
            NotFittedError: If called before fit.
            InvalidDataError: If the column count differs from the fitted one
                or the matrix holds infinite values.
        """
        if self._imputer is None or self._statistics is None:
            raise NotFittedError("MissingValueImputer")

        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2 or X.shape[1] != len(self._statistics):
            raise InvalidDataError(
                f"Expected {len(self._statistics)} feature columns, got shape {X.shape}"
            )
        if X.shape[0] == 0:
            return X.copy()

        try:
            return np.asarray(self._imputer.transform(X), dtype=np.float64)
        except ValueError as e:
            raise InvalidDataError(f"Cannot impute feature matrix: {e}") from e

    def fit_transform(self, X: NDArray[Any]) -> NDArray[Any]:
        return self.fit(X).transform(X)
