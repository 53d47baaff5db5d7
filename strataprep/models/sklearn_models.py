"""Scikit-learn regressor definitions."""

from __future__ import annotations

from typing import Any

from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import LinearRegression
from sklearn.tree import DecisionTreeRegressor

# Model registry
SKLEARN_MODELS: dict[str, dict[str, Any]] = {
    "linear_regression": {
        "regression": LinearRegression,
        "default_params": {},
    },
    "decision_tree": {
        "regression": DecisionTreeRegressor,
        "default_params": {},
    },
    "random_forest": {
        "regression": RandomForestRegressor,
        "default_params": {"n_estimators": 100},
    },
}
