"""Model registry for strataprep.

The regression model is an external capability: any estimator exposing
``fit(X, y)`` and ``predict(X)``. This module maps names to configured
scikit-learn regressors.
"""

from __future__ import annotations

import inspect
from typing import Any

from ..errors import InvalidConfigError
from .sklearn_models import SKLEARN_MODELS


def get_available_algorithms() -> list[str]:
    """Get list of available regressor names."""
    return list(SKLEARN_MODELS)


def create_model(name: str, random_seed: int = 42) -> Any:
    """Create an unfitted regressor.

    Args:
        name: Algorithm name (e.g., "linear_regression").
        random_seed: Random seed passed to estimators that accept one.

    Returns:
        Configured model instance.

    Raises:
        InvalidConfigError: If the algorithm name is unknown.
    """
    if name not in SKLEARN_MODELS:
        raise InvalidConfigError(
            f"Unknown algorithm '{name}'. Available: {get_available_algorithms()}"
        )

    config = SKLEARN_MODELS[name]
    model_class = config["regression"]
    params = config.get("default_params", {}).copy()

    if "random_state" in _get_model_params(model_class):
        params["random_state"] = random_seed

    return model_class(**params)


def _get_model_params(model_class: type) -> set[str]:
    """Get parameter names accepted by a model class."""
    try:
        sig = inspect.signature(model_class.__init__)
        return set(sig.parameters.keys()) - {"self"}
    except (ValueError, TypeError):
        return set()


__all__ = [
    "get_available_algorithms",
    "create_model",
]
