"""Exception hierarchy for strataprep."""

from __future__ import annotations

from typing import Any


class StrataPrepError(Exception):
    """Base exception for strataprep.

    Attributes:
        stage: Name of the pipeline stage that raised the error. Set by the
            pipeline orchestrator; None when raised outside a pipeline run.
    """

    stage: str | None = None


class InvalidConfigError(StrataPrepError):
    """Invalid configuration provided."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid configuration: {message}")


class InvalidDataError(StrataPrepError):
    """Data validation failed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid data: {message}")


class SchemaError(StrataPrepError):
    """A required column is missing or has the wrong type."""

    def __init__(self, column: str, reason: str) -> None:
        self.column = column
        self.reason = reason
        super().__init__(f"Schema error on column '{column}': {reason}")


class UnknownCategoryError(StrataPrepError):
    """A categorical value was not seen when the encoder was fitted."""

    def __init__(self, column: str, values: list[Any]) -> None:
        self.column = column
        self.values = values
        super().__init__(f"Unknown categories in column '{column}': {values}")


class NotFittedError(StrataPrepError):
    """A component was used before being fitted."""

    def __init__(self, component: str) -> None:
        self.component = component
        super().__init__(f"{component} is not fitted; call fit() before transform()")


class ModelError(StrataPrepError):
    """Fitting or predicting with the regression model failed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Model failed: {message}")
