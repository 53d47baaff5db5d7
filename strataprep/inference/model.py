"""TrainedModel class for scoring new rows."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from ..core import RegressionMetrics
from ..errors import InvalidDataError, ModelError
from ..preprocessing import Preprocessor


class TrainedModel:
    """Fitted regressor together with its train-fitted preprocessing.

    Scoring reuses the encoders and imputer fitted on the training
    partition; nothing is refitted on the data being scored. The model is
    held in memory only.

    Example:
        result = pipeline.run(frame)
        predictions = result.model.predict_batch(new_rows)
    """

    def __init__(
        self,
        model: Any,
        preprocessor: Preprocessor,
        target_column: str,
        algorithm: str,
    ) -> None:
        self._model = model
        self._preprocessor = preprocessor
        self._target_column = target_column
        self._algorithm = algorithm

    @property
    def target_column(self) -> str:
        """Get the name of the target column."""
        return self._target_column

    @property
    def algorithm(self) -> str:
        """Get the name of the regressor algorithm."""
        return self._algorithm

    @property
    def feature_names(self) -> list[str]:
        """Get the names of input features."""
        return self._preprocessor.feature_names

    @property
    def preprocessor(self) -> Preprocessor:
        return self._preprocessor

    @property
    def estimator(self) -> Any:
        return self._model

    def predict_batch(self, data: pd.DataFrame | str | Path) -> NDArray[Any]:
        """Predict the target for every row.

        Args:
            data: DataFrame or path to CSV file. Extra columns, including
                the target, are ignored.

        Returns:
            Array of predictions, one per row.

        Raises:
            UnknownCategoryError: If a category was unseen during fit.
            ModelError: If the regressor fails to predict.
        """
        df = pd.read_csv(data) if isinstance(data, (str, Path)) else data
        X = self._preprocessor.transform(self._features(df))
        try:
            return np.asarray(self._model.predict(X), dtype=np.float64)
        except Exception as e:
            raise ModelError(f"Prediction failed: {e}") from e

    def evaluate(self, data: pd.DataFrame, evaluated_on: str = "external") -> RegressionMetrics:
        """Score labelled rows and compare predictions to their target."""
        if self._target_column not in data.columns:
            raise InvalidDataError(f"Target column '{self._target_column}' not in data")
        y_true = data[self._target_column].to_numpy(dtype=np.float64)
        return RegressionMetrics.compute(y_true, self.predict_batch(data), evaluated_on)

    def _features(self, df: pd.DataFrame) -> pd.DataFrame:
        names = set(self.feature_names)
        return df[[c for c in df.columns if c in names]]
