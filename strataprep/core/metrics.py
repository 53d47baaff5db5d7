"""Metrics dataclasses for model evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


@dataclass
class RegressionMetrics:
    """Error metrics for a fitted regressor.

    Attributes:
        mae: Mean absolute error.
        mse: Mean squared error.
        rmse: Root mean squared error.
        r2: Coefficient of determination.
        evaluated_on: Partition the predictions were made on ("train" or "test").
        n_samples: Number of rows evaluated.
    """

    mae: float = 0.0
    mse: float = 0.0
    rmse: float = 0.0
    r2: float = 0.0
    evaluated_on: str = "train"
    n_samples: int = 0

    @classmethod
    def compute(
        cls,
        y_true: NDArray[Any],
        y_pred: NDArray[Any],
        evaluated_on: str,
    ) -> RegressionMetrics:
        """Compute all metrics from labels and predictions."""
        mse = float(mean_squared_error(y_true, y_pred))
        # r2 is undefined for fewer than two samples
        r2 = float(r2_score(y_true, y_pred)) if len(y_true) > 1 else float("nan")
        return cls(
            mae=float(mean_absolute_error(y_true, y_pred)),
            mse=mse,
            rmse=float(np.sqrt(mse)),
            r2=r2,
            evaluated_on=evaluated_on,
            n_samples=len(y_true),
        )
