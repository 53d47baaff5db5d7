"""Shared test fixtures and utilities for strataprep tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import pytest

from strataprep import EvaluationTarget, PipelineConfig, ProgressUpdate

# =============================================================================
# Test Data Fixtures
# =============================================================================

OCEAN_PROXIMITY = ["<1H OCEAN", "INLAND", "NEAR OCEAN", "NEAR BAY"]


@pytest.fixture
def housing_data() -> pd.DataFrame:
    """Create a housing-like regression dataset.

    Returns:
        DataFrame with numeric features, one categorical feature, missing
        bedroom counts and a continuous target.
    """
    np.random.seed(42)
    n_samples = 200

    income = np.random.uniform(0.5, 10.0, n_samples)
    rooms = np.random.uniform(500, 5000, n_samples)
    bedrooms = rooms / np.random.uniform(4, 6, n_samples)
    bedrooms[np.random.choice(n_samples, 10, replace=False)] = np.nan

    data = {
        "longitude": np.random.uniform(-124, -114, n_samples),
        "latitude": np.random.uniform(32, 42, n_samples),
        "housing_median_age": np.random.randint(1, 52, n_samples).astype(float),
        "total_rooms": rooms,
        "total_bedrooms": bedrooms,
        "population": np.random.uniform(100, 3000, n_samples),
        "median_income": income,
        "ocean_proximity": np.random.choice(OCEAN_PROXIMITY, n_samples),
    }
    data["median_house_value"] = (
        income * 40000 + np.random.randn(n_samples) * 20000 + 50000
    )

    return pd.DataFrame(data)


@pytest.fixture
def two_strata_data() -> pd.DataFrame:
    """Ten distinct rows split evenly between two strata."""
    return pd.DataFrame(
        {
            "id": list(range(10)),
            "value": [float(v) for v in range(10, 20)],
            "stratum": [1] * 5 + [2] * 5,
        }
    )


@pytest.fixture
def housing_csv(housing_data: pd.DataFrame, tmp_path: Path) -> Path:
    """Write the housing dataset to a CSV file."""
    path = tmp_path / "housing.csv"
    housing_data.to_csv(path, index=False)
    return path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config() -> PipelineConfig:
    """Default config evaluating on the training partition."""
    return PipelineConfig()


@pytest.fixture
def holdout_config() -> PipelineConfig:
    """Config evaluating on the held-out test partition."""
    return PipelineConfig.builder().evaluate_on(EvaluationTarget.TEST).build()


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def progress_tracker() -> dict[str, Any]:
    """Create a progress tracker for testing callbacks.

    Returns:
        Dictionary to store progress updates.
    """
    tracker: dict[str, Any] = {
        "updates": [],
        "steps": [],
        "final_progress": 0.0,
    }
    return tracker


@pytest.fixture
def progress_callback(progress_tracker: dict[str, Any]):
    """Create a progress callback that stores updates in the tracker."""

    def callback(update: ProgressUpdate) -> None:
        progress_tracker["updates"].append(update)
        progress_tracker["steps"].append(update.step)
        progress_tracker["final_progress"] = update.progress

    return callback


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (full pipeline)"
    )
