"""
Min-max feature scaling.

x_norm = (x - min(x)) / (max(x) - min(x)), per column.
"""

from __future__ import annotations

import numpy as np

from .validation import as_rows, check_matrix, ensure, equal_length


def scale_min_max(X) -> np.ndarray:
    """Scale every column of ``X`` into [0, 1].

    A column whose values are all equal becomes 0.0. The input is left as is.
    """
    return MinMaxScaler().fit_transform(X)


class MinMaxScaler:
    """Column-wise min-max scaler that remembers the fitted ranges."""

    def __init__(self) -> None:
        self.data_min_: np.ndarray | None = None
        self.data_max_: np.ndarray | None = None

    def fit(self, X) -> "MinMaxScaler":
        X = _checked_matrix(X)
        self.data_min_ = X.min(axis=0)
        self.data_max_ = X.max(axis=0)
        return self

    def transform(self, X) -> np.ndarray:
        if self.data_min_ is None:
            raise ValueError("Scaler is not fitted yet.")
        X = _checked_matrix(X)
        ensure(equal_length(X[0], self.data_min_, "x row vs fitted columns"))
        span = self.data_max_ - self.data_min_
        return np.divide(
            X - self.data_min_,
            span,
            out=np.zeros_like(X, dtype=float),
            where=span != 0,
        )

    def fit_transform(self, X) -> np.ndarray:
        return self.fit(X).transform(X)

    def inverse_transform(self, X) -> np.ndarray:
        if self.data_min_ is None:
            raise ValueError("Scaler is not fitted yet.")
        X = _checked_matrix(X)
        ensure(equal_length(X[0], self.data_min_, "x row vs fitted columns"))
        return X * (self.data_max_ - self.data_min_) + self.data_min_


def _checked_matrix(X) -> np.ndarray:
    rows = as_rows(X)
    check_matrix(rows)
    return np.vstack(rows)
