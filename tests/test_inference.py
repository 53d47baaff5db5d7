"""Tests for TrainedModel scoring."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from strataprep import (
    InvalidDataError,
    Pipeline,
    PipelineConfig,
    PipelineResult,
    TrainedModel,
    UnknownCategoryError,
    UnknownCategoryPolicy,
)


@pytest.fixture
def result(housing_data, holdout_config) -> PipelineResult:
    """Run the pipeline once with held-out evaluation."""
    return Pipeline.builder().config(holdout_config).build().run(housing_data)


class TestTrainedModel:
    """Tests for TrainedModel properties and prediction."""

    def test_properties(self, result):
        """The model exposes its configuration."""
        model = result.model

        assert isinstance(model, TrainedModel)
        assert model.target_column == "median_house_value"
        assert model.algorithm == "linear_regression"
        assert model.feature_names == result.feature_names

    def test_predict_batch_shape(self, result, housing_data):
        """One prediction per row, ignoring the target column."""
        predictions = result.model.predict_batch(housing_data.head(10))

        assert predictions.shape == (10,)
        assert predictions.dtype == np.float64

    def test_predict_batch_without_target(self, result, housing_data):
        """Rows without a label can be scored."""
        rows = housing_data.drop(columns=["median_house_value"]).head(5)
        assert len(result.model.predict_batch(rows)) == 5

    def test_predict_batch_imputes_missing(self, result, housing_data):
        """Missing feature values are filled with the train statistics."""
        rows = housing_data.head(3).copy()
        rows["total_bedrooms"] = np.nan

        assert np.isfinite(result.model.predict_batch(rows)).all()

    def test_predict_batch_from_csv(self, result, housing_csv):
        """A CSV path can be scored directly."""
        predictions = result.model.predict_batch(housing_csv)
        assert len(predictions) == 200

    def test_unknown_category_raises(self, result, housing_data):
        """Scoring a category unseen in train fails explicitly."""
        rows = housing_data.head(2).copy()
        rows["ocean_proximity"] = "ISLAND"

        with pytest.raises(UnknownCategoryError):
            result.model.predict_batch(rows)

    def test_unknown_category_reserved(self, housing_data):
        """With RESERVE, unseen categories are scored."""
        config = PipelineConfig(unknown_category=UnknownCategoryPolicy.RESERVE)
        result = Pipeline.builder().config(config).build().run(housing_data)
        rows = housing_data.head(2).copy()
        rows["ocean_proximity"] = "ISLAND"

        assert len(result.model.predict_batch(rows)) == 2

    def test_non_numeric_feature_raises(self, result, housing_data):
        """A stray string in a numeric feature is reported as invalid data."""
        rows = housing_data.head(3).copy()
        rows["total_rooms"] = ["many", 10.0, 20.0]

        with pytest.raises(InvalidDataError):
            result.model.predict_batch(rows)

    def test_infinite_feature_raises(self, result, housing_data):
        """Infinite feature values are reported as invalid data."""
        rows = housing_data.head(3).copy()
        rows.loc[rows.index[0], "total_rooms"] = np.inf

        with pytest.raises(InvalidDataError):
            result.model.predict_batch(rows)

    def test_scoring_does_not_refit(self, result, housing_data):
        """Scoring shifted data leaves the fitted statistics unchanged."""
        before = result.model.preprocessor.imputer.statistics
        shifted = housing_data.copy()
        shifted["total_rooms"] = shifted["total_rooms"] * 100

        result.model.predict_batch(shifted)

        np.testing.assert_allclose(result.model.preprocessor.imputer.statistics, before)

    def test_evaluate(self, result, housing_data):
        """evaluate() computes metrics on labelled rows."""
        metrics = result.model.evaluate(housing_data, evaluated_on="full")

        assert metrics.evaluated_on == "full"
        assert metrics.n_samples == len(housing_data)
        assert metrics.rmse >= metrics.mae

    def test_evaluate_without_target_raises(self, result, housing_data):
        """evaluate() requires the target column."""
        with pytest.raises(InvalidDataError):
            result.model.evaluate(housing_data.drop(columns=["median_house_value"]))

    def test_evaluate_matches_pipeline_metrics(self, housing_data, holdout_config):
        """Scoring the test partition reproduces the held-out metrics."""
        pipeline = Pipeline.builder().config(holdout_config).build()
        _, test = pipeline.split(housing_data)
        result = pipeline.run(housing_data)

        metrics = result.model.evaluate(pd.DataFrame(test), evaluated_on="test")

        assert metrics.mae == pytest.approx(result.metrics.mae)
