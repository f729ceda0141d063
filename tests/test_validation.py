import pytest

from clear_ml import DimensionMismatch, EmptyVector, ensure, equal_length, non_empty
from clear_ml.validation import as_rows, check_matrix, check_pair


def test_non_empty():
    assert non_empty([1]).ok
    result = non_empty([], "y")
    assert not result
    assert isinstance(result.error, EmptyVector)
    assert result.error.name == "y"


def test_equal_length():
    assert equal_length([1, 2], [3, 4]).ok
    result = equal_length([1, 2], [3])
    assert isinstance(result.error, DimensionMismatch)
    assert (result.error.expected, result.error.actual) == (2, 1)


def test_ensure_raises_first_failure():
    with pytest.raises(EmptyVector):
        ensure(non_empty([1]), non_empty([]), equal_length([1], []))


def test_ensure_passes():
    ensure(non_empty([1]), equal_length([1], [2]))


def test_check_matrix():
    check_matrix([[1, 2], [3, 4]])
    with pytest.raises(EmptyVector):
        check_matrix([])
    with pytest.raises(DimensionMismatch):
        check_matrix([[1, 2], [3, 4], [5]])


def test_check_pair_order():
    with pytest.raises(EmptyVector):
        check_pair([], [1])
    with pytest.raises(DimensionMismatch):
        check_pair([1], [1, 2])


def test_as_rows_rejects_nested_rows():
    with pytest.raises(DimensionMismatch):
        as_rows([[[1.0, 2.0]], [[3.0, 4.0]]])


def test_as_rows_scalar_rows_are_single_features():
    assert [row.tolist() for row in as_rows([1.0, 2.0])] == [[1.0], [2.0]]
