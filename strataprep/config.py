"""Configuration dataclasses for strataprep."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .errors import InvalidConfigError

if TYPE_CHECKING:
    from typing import Self


class ImputationStrategy(Enum):
    """Column statistic used to replace missing numeric values."""

    MEDIAN = "median"
    MEAN = "mean"
    MOST_FREQUENT = "most_frequent"


class UnknownCategoryPolicy(Enum):
    """What the encoder does with a value it never saw during fit."""

    ERROR = "error"
    RESERVE = "reserve"  # map to the extra index k


class EvaluationTarget(Enum):
    """Partition the fitted model is evaluated on."""

    TRAIN = "train"
    TEST = "test"


DEFAULT_BIN_BOUNDARIES: tuple[float, ...] = (1.5, 3.0, 4.5, 6.0)


@dataclass
class PipelineConfig:
    """Configuration for the preparation pipeline.

    Attributes:
        target_column: Name of the numeric label column.
        stratify_source: Continuous column binned into strata.
        strata_column: Name of the helper column holding the strata. It is
            dropped from both partitions after the split.
        bin_boundaries: Strictly ascending stratum boundaries.
        test_size: Fraction of every stratum drawn into the test partition.
        random_seed: Seed reused verbatim for every per-stratum draw.
        imputation_strategy: Statistic used by the imputer.
        categorical_columns: Columns to label-encode. If None, every
            categorical column except the target is encoded.
        unknown_category: Policy for values unseen at fit time.
        evaluate_on: Partition used for evaluation.
        algorithm: Name of the regressor in the model registry.
    """

    target_column: str = "median_house_value"
    stratify_source: str = "median_income"
    strata_column: str = "income_cat"
    bin_boundaries: tuple[float, ...] = DEFAULT_BIN_BOUNDARIES
    test_size: float = 0.2
    random_seed: int = 42
    imputation_strategy: ImputationStrategy = ImputationStrategy.MEDIAN
    categorical_columns: tuple[str, ...] | None = None
    unknown_category: UnknownCategoryPolicy = UnknownCategoryPolicy.ERROR
    evaluate_on: EvaluationTarget = EvaluationTarget.TRAIN
    algorithm: str = "linear_regression"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        try:
            self.imputation_strategy = ImputationStrategy(self.imputation_strategy)
            self.unknown_category = UnknownCategoryPolicy(self.unknown_category)
            self.evaluate_on = EvaluationTarget(self.evaluate_on)
        except ValueError as e:
            raise InvalidConfigError(str(e)) from e

        self.bin_boundaries = tuple(float(b) for b in self.bin_boundaries)
        if self.categorical_columns is not None:
            self.categorical_columns = tuple(self.categorical_columns)

        if not self.bin_boundaries:
            raise InvalidConfigError("bin_boundaries must not be empty")
        if any(a >= b for a, b in zip(self.bin_boundaries, self.bin_boundaries[1:])):
            raise InvalidConfigError(
                f"bin_boundaries must be strictly ascending, got {list(self.bin_boundaries)}"
            )
        if not 0 < self.test_size < 1:
            raise InvalidConfigError("test_size must be between 0 and 1")
        if not self.target_column:
            raise InvalidConfigError("target_column must not be empty")
        if not self.stratify_source:
            raise InvalidConfigError("stratify_source must not be empty")
        if self.strata_column in (self.target_column, self.stratify_source):
            raise InvalidConfigError(
                f"strata_column '{self.strata_column}' would overwrite an input column"
            )
        if self.categorical_columns and self.target_column in self.categorical_columns:
            raise InvalidConfigError("target_column cannot be encoded as a categorical feature")

    @classmethod
    def builder(cls) -> PipelineConfigBuilder:
        """Create a builder for PipelineConfig."""
        return PipelineConfigBuilder()


class PipelineConfigBuilder:
    """Builder for PipelineConfig with fluent interface."""

    def __init__(self) -> None:
        self._target_column: str = "median_house_value"
        self._stratify_source: str = "median_income"
        self._strata_column: str = "income_cat"
        self._bin_boundaries: tuple[float, ...] = DEFAULT_BIN_BOUNDARIES
        self._test_size: float = 0.2
        self._random_seed: int = 42
        self._imputation_strategy = ImputationStrategy.MEDIAN
        self._categorical_columns: tuple[str, ...] | None = None
        self._unknown_category = UnknownCategoryPolicy.ERROR
        self._evaluate_on = EvaluationTarget.TRAIN
        self._algorithm: str = "linear_regression"

    def target_column(self, value: str) -> Self:
        """Set the target column name."""
        self._target_column = value
        return self

    def stratify_source(self, value: str) -> Self:
        """Set the continuous column used to build strata."""
        self._stratify_source = value
        return self

    def strata_column(self, value: str) -> Self:
        """Set the name of the helper strata column."""
        self._strata_column = value
        return self

    def bin_boundaries(self, value: Sequence[float]) -> Self:
        """Set the stratum boundaries."""
        self._bin_boundaries = tuple(value)
        return self

    def test_size(self, value: float) -> Self:
        """Set the test set size fraction."""
        self._test_size = value
        return self

    def random_seed(self, value: int) -> Self:
        """Set the random seed."""
        self._random_seed = value
        return self

    def imputation_strategy(self, value: ImputationStrategy | str) -> Self:
        """Set the imputation statistic."""
        self._imputation_strategy = ImputationStrategy(value)
        return self

    def categorical_columns(self, value: Sequence[str]) -> Self:
        """Set the columns to label-encode."""
        self._categorical_columns = tuple(value)
        return self

    def unknown_category(self, value: UnknownCategoryPolicy | str) -> Self:
        """Set the unseen-category policy."""
        self._unknown_category = UnknownCategoryPolicy(value)
        return self

    def evaluate_on(self, value: EvaluationTarget | str) -> Self:
        """Set the partition used for evaluation."""
        self._evaluate_on = EvaluationTarget(value)
        return self

    def algorithm(self, value: str) -> Self:
        """Set the regressor to fit."""
        self._algorithm = value
        return self

    def build(self) -> PipelineConfig:
        """Build the PipelineConfig."""
        return PipelineConfig(
            target_column=self._target_column,
            stratify_source=self._stratify_source,
            strata_column=self._strata_column,
            bin_boundaries=self._bin_boundaries,
            test_size=self._test_size,
            random_seed=self._random_seed,
            imputation_strategy=self._imputation_strategy,
            categorical_columns=self._categorical_columns,
            unknown_category=self._unknown_category,
            evaluate_on=self._evaluate_on,
            algorithm=self._algorithm,
        )
