"""Boundary checks shared by every public entry point.

The numeric code in this package trusts its inputs. Anything coming from a
caller goes through ``non_empty``/``equal_length`` first, and ``ensure``
raises the first failure before any computation starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .errors import ClearMLError, DimensionMismatch, EmptyVector


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    error: Optional[ClearMLError] = None

    def __bool__(self) -> bool:
        return self.ok


OK = ValidationResult(ok=True)


def non_empty(values: Sequence, name: str = "input") -> ValidationResult:
    if len(values) == 0:
        return ValidationResult(ok=False, error=EmptyVector(name))
    return OK


def equal_length(a: Sequence, b: Sequence, name: str = "input") -> ValidationResult:
    if len(a) != len(b):
        return ValidationResult(ok=False, error=DimensionMismatch(name, len(a), len(b)))
    return OK


def ensure(*results: ValidationResult) -> None:
    """Raise the error carried by the first failed result, if any."""
    for result in results:
        if not result.ok:
            raise result.error


def as_rows(x) -> list[np.ndarray]:
    """Split a feature matrix into float rows without assuming it is rectangular.

    A scalar row counts as a single feature. Rows with more than one
    dimension raise ``DimensionMismatch``.
    """
    if hasattr(x, "to_numpy"):
        x = x.to_numpy()
    rows = []
    for idx, row in enumerate(x):
        row = np.asarray(row, dtype=float)
        if row.ndim > 1:
            raise DimensionMismatch(f"x[{idx}] dimensions", 1, row.ndim)
        rows.append(row.ravel())
    return rows


def as_vector(values) -> np.ndarray:
    if hasattr(values, "to_numpy"):
        values = values.to_numpy()
    return np.asarray(values, dtype=float).ravel()


def check_matrix(rows: Sequence[np.ndarray], name: str = "x") -> None:
    """Matrix must have at least one row, and every row the length of the first."""
    ensure(non_empty(rows, name))
    first = rows[0]
    for idx, row in enumerate(rows[1:], start=1):
        ensure(equal_length(first, row, f"{name}[{idx}]"))


def check_pair(a: Sequence, b: Sequence, names: tuple[str, str] = ("predicted", "actual")) -> None:
    ensure(
        non_empty(a, names[0]),
        non_empty(b, names[1]),
        equal_length(a, b, f"{names[0]} vs {names[1]}"),
    )
