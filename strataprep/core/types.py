"""Data model types for strataprep.

This module contains the column schema used to validate input frames up
front, and the result dataclasses returned by the pipeline.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import pandas as pd

from ..errors import SchemaError

if TYPE_CHECKING:
    from ..inference import TrainedModel
    from .metrics import RegressionMetrics


class ColumnType(Enum):
    """Declared type of a column."""

    FLOAT = "float"
    INTEGER = "integer"
    CATEGORICAL = "categorical"

    @property
    def is_numeric(self) -> bool:
        return self is not ColumnType.CATEGORICAL


@dataclass(frozen=True)
class Schema:
    """Ordered mapping from column name to declared type."""

    columns: dict[str, ColumnType]

    @classmethod
    def from_frame(cls, data: pd.DataFrame) -> Schema:
        """Infer the schema of a DataFrame from its dtypes."""
        columns: dict[str, ColumnType] = {}
        for col in data.columns:
            dtype = data[col].dtype
            if pd.api.types.is_bool_dtype(dtype) or pd.api.types.is_integer_dtype(dtype):
                columns[str(col)] = ColumnType.INTEGER
            elif pd.api.types.is_float_dtype(dtype):
                columns[str(col)] = ColumnType.FLOAT
            else:
                columns[str(col)] = ColumnType.CATEGORICAL
        return cls(columns)

    @property
    def names(self) -> list[str]:
        return list(self.columns)

    def columns_of(self, *types: ColumnType) -> list[str]:
        """Names of the columns declared with any of the given types."""
        return [name for name, kind in self.columns.items() if kind in types]

    def require(self, column: str, *types: ColumnType) -> ColumnType:
        """Check that a column exists and, if types are given, has one of them.

        Raises:
            SchemaError: If the column is missing or has another type.
        """
        if column not in self.columns:
            raise SchemaError(column, f"missing (available: {self.names})")
        kind = self.columns[column]
        if types and kind not in types:
            expected = ", ".join(t.value for t in types)
            raise SchemaError(column, f"expected {expected}, got {kind.value}")
        return kind


@dataclass
class PartitionPair:
    """Schema-identical train and test partitions.

    No row value appears in both sides. Row order of ``train`` carries no
    meaning.
    """

    train: pd.DataFrame
    test: pd.DataFrame

    def __iter__(self) -> Iterator[pd.DataFrame]:
        return iter((self.train, self.test))


@dataclass
class PipelineResult:
    """Complete pipeline result.

    This is the public-facing result returned by Pipeline.run().
    """

    success: bool
    metrics: RegressionMetrics
    model: TrainedModel
    n_train: int
    n_test: int
    feature_names: list[str]
    run_time_seconds: float
    warnings: list[str] = field(default_factory=list)
