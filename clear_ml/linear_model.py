import logging
from typing import Optional

import numpy as np

from .config import GradientDescentConfig
from .loss_functions import _gradient_mse, _mean_squared_error, _parameter_gradient
from .validation import as_rows, as_vector, check_matrix, check_pair, ensure, equal_length, non_empty

logger = logging.getLogger(__name__)


class LinearModel:
    """Linear regression trained with batch gradient descent.

    y = intercept + coefficients[0] * x_0 + ... + coefficients[n - 1] * x_(n-1)

    Only the coefficients are learned. The intercept keeps whatever value it
    had before ``fit`` (0.0 for a fresh model).
    """

    def __init__(
        self,
        intercept: float = 0.0,
        coefficients=None,
        config: Optional[GradientDescentConfig] = None,
    ) -> None:
        self.intercept = float(intercept)
        self.coefficients = (
            np.zeros(0, dtype=float) if coefficients is None else as_vector(coefficients).copy()
        )
        self.config = config or GradientDescentConfig()
        self.loss_history: list[float] = []
        self.grad_history: list[float] = []
        self.coef_history: list[np.ndarray] = []
        self.n_iter_ = 0
        self.converged_ = False

    def __repr__(self) -> str:
        return f"LinearModel(intercept={self.intercept!r}, coefficients={self.coefficients.tolist()!r})"

    def fit(self, X, y, config: Optional[GradientDescentConfig] = None) -> "LinearModel":
        """Fit the coefficients using batch gradient descent.

        Args:
            X: Feature matrix with shape (n_samples, n_features).
            y: Target vector with shape (n_samples,).
            config: Overrides the model's own config for this call.

        Raises:
            EmptyVector: ``X`` or ``y`` has no elements.
            DimensionMismatch: ``X`` and ``y`` differ in length, or ``X`` is ragged.
        """
        rows = as_rows(X)
        y = as_vector(y)
        ensure(non_empty(rows, "x"), non_empty(y, "y"), equal_length(rows, y, "x vs y"))
        check_matrix(rows)

        config = config or self.config
        X = np.vstack(rows)
        n_features = X.shape[1]

        model = LinearModel(self.intercept, np.zeros(n_features, dtype=float), config)
        loss_history: list[float] = []
        grad_history: list[float] = []
        coef_history: list[np.ndarray] = []
        n_iter = 0
        converged = False

        for _ in range(config.max_iterations):
            loss_history.append(_mean_squared_error(model._predict(X), y))
            model, gradient_norm = step(model, X, y, config)
            grad_history.append(gradient_norm)
            if gradient_norm < config.tolerance:
                converged = True
                break
            n_iter += 1
            coef_history.append(model.coefficients.copy())

        self.coefficients = model.coefficients
        self.loss_history = loss_history
        self.grad_history = grad_history
        self.coef_history = coef_history
        self.n_iter_ = n_iter
        self.converged_ = converged

        if converged:
            logger.debug("Converged after %d iterations", n_iter)
        else:
            logger.debug(
                "Stopped after %d iterations, gradient norm %.3g",
                n_iter,
                grad_history[-1],
            )
        return self

    def predict(self, X) -> np.ndarray:
        """Predict targets for input features.

        Raises:
            EmptyVector: ``X`` has no rows.
            DimensionMismatch: a row's length differs from the number of coefficients.
        """
        rows = as_rows(X)
        ensure(non_empty(rows, "x"))
        for idx, row in enumerate(rows):
            ensure(equal_length(row, self.coefficients, f"x[{idx}] vs coefficients"))
        return self._predict(np.vstack(rows))

    def score(self, X, y) -> float:
        """Mean squared error of the predictions for ``X`` against ``y``."""
        predicted = self.predict(X)
        y = as_vector(y)
        check_pair(predicted, y)
        return _mean_squared_error(predicted, y)

    def _predict(self, X: np.ndarray) -> np.ndarray:
        return X @ self.coefficients + self.intercept


def step(
    model: LinearModel,
    X: np.ndarray,
    y: np.ndarray,
    config: GradientDescentConfig,
) -> tuple[LinearModel, float]:
    """Run a single gradient descent update.

    ``X`` and ``y`` must already be validated arrays. The returned gradient
    norm is the largest absolute per-sample gradient at the input model's
    parameters. When it is below ``config.tolerance`` the input model is
    returned as is; otherwise a new model holds the updated coefficients.
    ``model`` itself is never modified.
    """
    predicted = model._predict(X)
    gradient = _gradient_mse(predicted, y)
    gradient_norm = float(np.max(np.abs(gradient)))
    if gradient_norm < config.tolerance:
        return model, gradient_norm

    grad_w, _grad_b = _parameter_gradient(X, predicted, y)
    # Intercept is carried over unchanged.
    updated = LinearModel(
        model.intercept,
        model.coefficients - config.learning_rate * grad_w,
        model.config,
    )
    return updated, gradient_norm
