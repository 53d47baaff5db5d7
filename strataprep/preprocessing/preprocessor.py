"""Feature preprocessing for model fitting and scoring.

Holds the train-fitted categorical encoders and imputer so that training,
evaluation and later scoring all transform features the same way.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from ..config import ImputationStrategy, UnknownCategoryPolicy
from ..errors import InvalidDataError, NotFittedError, SchemaError
from .encoder import CategoricalEncoder
from .missing import MissingValueImputer, sentinel_fill_frame

logger = logging.getLogger(__name__)


class Preprocessor:
    """Encodes categorical columns and imputes missing numeric values.

    Steps, in order:
    - ``fit_encoders`` / ``encode``: label-encode the categorical columns
    - ``fill_sentinels``: cast float columns to float64 with NaN for gaps
    - ``fit_imputer`` / ``impute``: replace NaN with train statistics

    Every fit step must only ever see training data.
    """

    def __init__(
        self,
        categorical_columns: list[str],
        imputation_strategy: ImputationStrategy = ImputationStrategy.MEDIAN,
        unknown_category: UnknownCategoryPolicy = UnknownCategoryPolicy.ERROR,
    ) -> None:
        """Initialize preprocessor.

        Args:
            categorical_columns: Columns to label-encode.
            imputation_strategy: Statistic learned by the imputer.
            unknown_category: Policy for categories unseen during fit.
        """
        self.categorical_columns = list(categorical_columns)
        self.unknown_category = unknown_category
        self._encoders: dict[str, CategoricalEncoder] = {}
        self._imputer = MissingValueImputer(imputation_strategy)
        self._feature_names: list[str] = []

    @property
    def is_fitted(self) -> bool:
        """Whether both the encoders and the imputer have been fitted."""
        return bool(self._encoders or not self.categorical_columns) and self._imputer.is_fitted

    @property
    def encoders(self) -> dict[str, CategoricalEncoder]:
        return dict(self._encoders)

    @property
    def imputer(self) -> MissingValueImputer:
        return self._imputer

    @property
    def feature_names(self) -> list[str]:
        """Feature column order of the fitted matrix."""
        return self._feature_names.copy()

    def fit_encoders(self, train: pd.DataFrame) -> Preprocessor:
        """Fit one encoder per categorical column on the training frame."""
        for col in self.categorical_columns:
            if col not in train.columns:
                raise SchemaError(col, "categorical column missing from training data")
            encoder = CategoricalEncoder(col, self.unknown_category).fit(train[col])
            logger.info(f"Encoded '{col}' with {len(encoder.mapping)} categories")
            self._encoders[col] = encoder
        return self

    def encode(self, data: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of ``data`` with categorical columns encoded."""
        if self.categorical_columns and not self._encoders:
            raise NotFittedError("Preprocessor encoders")
        result = data.copy()
        for col, encoder in self._encoders.items():
            if col not in result.columns:
                raise SchemaError(col, "categorical column missing")
            result[col] = encoder.transform(result[col])
        return result

    @staticmethod
    def fill_sentinels(data: pd.DataFrame) -> pd.DataFrame:
        """Normalize every float column to float64 with NaN for missing cells."""
        float_columns = [
            col
            for col in data.columns
            if pd.api.types.is_float_dtype(data[col]) or data[col].isna().any()
        ]
        return sentinel_fill_frame(data, float_columns)

    def fit_imputer(self, X: pd.DataFrame) -> Preprocessor:
        """Fit the imputer on the training feature frame."""
        self._feature_names = [str(c) for c in X.columns]
        self._imputer.fit(self._to_matrix(X))
        return self

    def impute(self, X: pd.DataFrame) -> NDArray[Any]:
        """Convert a feature frame to a float64 matrix with no NaN entries."""
        if not self._imputer.is_fitted:
            raise NotFittedError("Preprocessor imputer")
        missing = [c for c in self._feature_names if c not in X.columns]
        if missing:
            raise SchemaError(", ".join(missing), "feature columns missing")
        return self._imputer.transform(self._to_matrix(X[self._feature_names]))

    @staticmethod
    def _to_matrix(X: pd.DataFrame) -> NDArray[Any]:
        try:
            return X.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidDataError(f"Feature columns are not numeric: {e}") from e

    def transform(self, X: pd.DataFrame) -> NDArray[Any]:
        """Run encode, sentinel fill and impute on a raw feature frame.

        Raises:
            NotFittedError: If the preprocessor is not fitted.
            UnknownCategoryError: If a category was unseen during fit.
        """
        if not self.is_fitted:
            raise NotFittedError("Preprocessor")
        return self.impute(self.fill_sentinels(self.encode(X)))
