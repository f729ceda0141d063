"""Mean squared error and its gradients.

Loss: L = (1 / n) * sum((y_hat - y)^2)
Gradients:
    dL/dy_hat_i = (2 / n) * (y_hat_i - y_i)
    dL/dw_j     = (2 / n) * sum((y_hat_i - y_i) * x_ij)
    dL/db       = (2 / n) * sum(y_hat_i - y_i)
"""

from __future__ import annotations

import numpy as np

from .validation import as_rows, as_vector, check_matrix, check_pair, ensure, equal_length, non_empty


def mean_squared_error(predicted, actual) -> float:
    """Mean of squared differences between ``predicted`` and ``actual``."""
    predicted = as_vector(predicted)
    actual = as_vector(actual)
    check_pair(predicted, actual)
    return _mean_squared_error(predicted, actual)


def gradient_mse(predicted, actual) -> np.ndarray:
    """Gradient of the MSE with respect to each prediction."""
    predicted = as_vector(predicted)
    actual = as_vector(actual)
    check_pair(predicted, actual)
    return _gradient_mse(predicted, actual)


def parameter_gradient(x, predicted, actual) -> tuple[np.ndarray, float]:
    """Project the per-sample gradient through the features.

    Args:
        x: Feature matrix with shape (n_samples, n_features).
        predicted: Predictions with shape (n_samples,).
        actual: Targets with shape (n_samples,).

    Returns:
        The gradient for each coefficient and the gradient for the intercept.
    """
    rows = as_rows(x)
    predicted = as_vector(predicted)
    actual = as_vector(actual)
    check_matrix(rows, "x")
    ensure(
        non_empty(predicted, "predicted"),
        non_empty(actual, "actual"),
        equal_length(rows, actual, "x vs actual"),
        equal_length(predicted, actual, "predicted vs actual"),
    )
    return _parameter_gradient(np.vstack(rows), predicted, actual)


def _mean_squared_error(predicted: np.ndarray, actual: np.ndarray) -> float:
    return float(np.mean((predicted - actual) ** 2))


def _gradient_mse(predicted: np.ndarray, actual: np.ndarray) -> np.ndarray:
    n_samples = predicted.shape[0]
    return (2.0 / n_samples) * (predicted - actual)


def _parameter_gradient(
    X: np.ndarray, predicted: np.ndarray, actual: np.ndarray
) -> tuple[np.ndarray, float]:
    n_samples = X.shape[0]
    error = predicted - actual
    grad_w = (2.0 / n_samples) * (X.T @ error)
    grad_b = (2.0 / n_samples) * float(np.sum(error))
    return grad_w, grad_b
