"""Tests for full pipeline integration."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from strataprep import (
    ColumnType,
    InvalidConfigError,
    InvalidDataError,
    NullProgressReporter,
    Pipeline,
    PipelineConfig,
    PipelineContext,
    PipelineStep,
    RegressionMetrics,
    SchemaError,
    StrataPrepError,
)
from strataprep.pipeline import SPLIT_STAGES, EncodingStage
from strataprep.sampling import row_keys


class TestPipelineBuilder:
    """Tests for Pipeline.builder() interface."""

    def test_builder_requires_config(self):
        """build() raises if config not set."""
        with pytest.raises(ValueError, match="config is required"):
            Pipeline.builder().build()

    def test_builder_with_config_only(self, default_config):
        """Can build pipeline with just config."""
        pipeline = Pipeline.builder().config(default_config).build()
        assert pipeline.config is default_config

    def test_builder_returns_self(self, default_config):
        """Builder methods return self for chaining."""
        builder = Pipeline.builder()

        assert builder.config(default_config) is builder
        assert builder.on_progress(lambda u: None) is builder

    def test_unknown_algorithm_fails_at_construction(self):
        """An unknown regressor is rejected before any data is seen."""
        config = PipelineConfig(algorithm="quantum_forest")

        with pytest.raises(InvalidConfigError, match="Unknown algorithm"):
            Pipeline.builder().config(config).build()


class TestPipelineValidation:
    """Tests for schema checks that run before splitting."""

    def test_missing_target(self, housing_data, default_config):
        """A missing target column fails in the validation stage."""
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(SchemaError) as exc_info:
            pipeline.run(housing_data.drop(columns=["median_house_value"]))

        assert exc_info.value.stage == "validation"
        assert exc_info.value.column == "median_house_value"

    def test_categorical_target_rejected(self, housing_data, default_config):
        """The target must be numeric."""
        housing_data["median_house_value"] = "expensive"
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(SchemaError):
            pipeline.run(housing_data)

    def test_missing_stratify_source(self, housing_data, default_config):
        """The stratification source must exist."""
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(SchemaError):
            pipeline.run(housing_data.drop(columns=["median_income"]))

    def test_non_finite_stratify_source(self, housing_data, default_config):
        """NaN in the stratification source is rejected before binning."""
        housing_data.loc[3, "median_income"] = np.nan
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(InvalidDataError) as exc_info:
            pipeline.run(housing_data)

        assert exc_info.value.stage == "validation"

    def test_missing_target_values(self, housing_data, default_config):
        """Rows without a label are rejected."""
        housing_data.loc[0, "median_house_value"] = np.nan
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(InvalidDataError):
            pipeline.run(housing_data)

    def test_existing_strata_column(self, housing_data, default_config):
        """The strata helper column may not already exist."""
        housing_data["income_cat"] = 1
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(SchemaError):
            pipeline.run(housing_data)

    def test_unlisted_text_column(self, housing_data):
        """Text columns not listed for encoding fail fast."""
        housing_data["notes"] = "n/a"
        config = PipelineConfig(categorical_columns=("ocean_proximity",))
        pipeline = Pipeline.builder().config(config).build()

        with pytest.raises(SchemaError) as exc_info:
            pipeline.run(housing_data)

        assert exc_info.value.column == "notes"

    def test_infinite_feature_value(self, housing_data, default_config):
        """Infinite feature values fail in the validation stage."""
        housing_data.loc[3, "total_rooms"] = np.inf
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(StrataPrepError) as exc_info:
            pipeline.run(housing_data)

        assert isinstance(exc_info.value, InvalidDataError)
        assert exc_info.value.stage == "validation"
        assert "total_rooms" in str(exc_info.value)

    def test_empty_data(self, housing_data, default_config):
        """An empty frame is rejected."""
        pipeline = Pipeline.builder().config(default_config).build()

        with pytest.raises(InvalidDataError):
            pipeline.run(housing_data.iloc[0:0])


class TestPipelineSplit:
    """Tests for Pipeline.split()."""

    def test_split_partitions(self, housing_data, default_config):
        """split() returns disjoint partitions without the strata column."""
        pipeline = Pipeline.builder().config(default_config).build()

        train, test = pipeline.split(housing_data)

        assert "income_cat" not in train.columns
        assert "income_cat" not in test.columns
        assert list(train.columns) == list(housing_data.columns)
        assert set(row_keys(train)).isdisjoint(set(row_keys(test)))
        assert len(train) + len(test) == len(housing_data)

    def test_split_is_reproducible(self, housing_data, default_config):
        """Same seed gives the same partitions."""
        pipeline = Pipeline.builder().config(default_config).build()

        first = pipeline.split(housing_data)
        second = pipeline.split(housing_data)

        pd.testing.assert_frame_equal(first.test, second.test)
        pd.testing.assert_frame_equal(first.train, second.train)

    def test_split_does_not_mutate_input(self, housing_data, default_config):
        """The input frame is left untouched."""
        before = housing_data.copy()
        Pipeline.builder().config(default_config).build().split(housing_data)

        pd.testing.assert_frame_equal(housing_data, before)


class TestPipelineRun:
    """Tests for end-to-end runs."""

    @pytest.mark.integration
    def test_run_on_train(self, housing_data, default_config):
        """The default run evaluates on the training partition."""
        pipeline = Pipeline.builder().config(default_config).build()

        result = pipeline.run(housing_data)

        assert result.success is True
        assert isinstance(result.metrics, RegressionMetrics)
        assert result.metrics.evaluated_on == "train"
        assert result.metrics.n_samples == result.n_train
        assert result.n_train + result.n_test == len(housing_data)
        assert result.metrics.mae > 0
        assert "Metrics were computed on the training partition" in result.warnings

    @pytest.mark.integration
    def test_run_on_test(self, housing_data, holdout_config):
        """Held-out evaluation scores the test partition."""
        pipeline = Pipeline.builder().config(holdout_config).build()

        result = pipeline.run(housing_data)

        assert result.metrics.evaluated_on == "test"
        assert result.metrics.n_samples == result.n_test
        assert np.isfinite(result.metrics.mae)

    @pytest.mark.integration
    def test_feature_names(self, housing_data, default_config):
        """Features exclude the target and the strata helper column."""
        result = Pipeline.builder().config(default_config).build().run(housing_data)

        assert "median_house_value" not in result.feature_names
        assert "income_cat" not in result.feature_names
        assert "ocean_proximity" in result.feature_names
        assert len(result.feature_names) == len(housing_data.columns) - 1

    @pytest.mark.integration
    def test_imputer_fitted_on_train_only(self, housing_data, default_config):
        """The stored median comes from the training partition."""
        pipeline = Pipeline.builder().config(default_config).build()
        train, _ = pipeline.split(housing_data)

        result = pipeline.run(housing_data)

        statistics = result.model.preprocessor.imputer.statistics
        col = result.feature_names.index("total_bedrooms")
        assert statistics[col] == pytest.approx(train["total_bedrooms"].median())

    @pytest.mark.integration
    def test_run_is_reproducible(self, housing_data, default_config):
        """Two runs with the same seed give identical metrics."""
        pipeline = Pipeline.builder().config(default_config).build()

        first = pipeline.run(housing_data)
        second = pipeline.run(housing_data)

        assert first.metrics.mae == second.metrics.mae

    @pytest.mark.integration
    def test_progress_reported(
        self, housing_data, default_config, progress_callback, progress_tracker
    ):
        """Progress updates cover every step and end at 1.0."""
        pipeline = (
            Pipeline.builder().config(default_config).on_progress(progress_callback).build()
        )

        pipeline.run(housing_data)

        steps = progress_tracker["steps"]
        assert steps[0] == PipelineStep.INITIALIZING
        assert steps[-1] == PipelineStep.COMPLETE
        assert PipelineStep.SPLITTING in steps
        assert PipelineStep.IMPUTATION in steps
        assert progress_tracker["final_progress"] == 1.0

    def test_failure_reported(
        self, housing_data, default_config, progress_callback, progress_tracker
    ):
        """A failing stage reports FAILED before raising."""
        pipeline = (
            Pipeline.builder().config(default_config).on_progress(progress_callback).build()
        )

        with pytest.raises(SchemaError):
            pipeline.run(housing_data.drop(columns=["median_income"]))

        assert progress_tracker["steps"][-1] == PipelineStep.FAILED

    @pytest.mark.slow
    @pytest.mark.integration
    @pytest.mark.parametrize("algorithm", ["decision_tree", "random_forest"])
    def test_other_algorithms(self, housing_data, algorithm):
        """Other registered regressors run end to end."""
        config = PipelineConfig(algorithm=algorithm, evaluate_on="test")
        result = Pipeline.builder().config(config).build().run(housing_data)

        assert result.metrics.evaluated_on == "test"


class TestPipelineStages:
    """Tests for individual stages run on a shared context."""

    def _context(self, data, config) -> PipelineContext:
        return PipelineContext(config=config, reporter=NullProgressReporter(), data=data)

    def test_encoding_updates_schema(self, housing_data, default_config):
        """Encoded columns are declared as integer codes afterwards."""
        context = self._context(housing_data, default_config)
        for stage in [*SPLIT_STAGES, EncodingStage]:
            context = stage().execute(context)

        assert context.schema.columns["ocean_proximity"] == ColumnType.INTEGER
        assert context.schema.columns["total_bedrooms"] == ColumnType.FLOAT

    def test_run_time_measured_from_context_start(self, housing_data, default_config):
        """The reported run time covers the whole run."""
        result = Pipeline.builder().config(default_config).build().run(housing_data)

        assert result.run_time_seconds > 0
