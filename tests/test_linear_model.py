import numpy as np
import pandas as pd
import pytest

from clear_ml import (
    ClearMLError,
    DimensionMismatch,
    EmptyVector,
    GradientDescentConfig,
    LinearModel,
    step,
)


def test_new_model_is_zero_model():
    model = LinearModel()
    assert model.intercept == 0.0
    assert model.coefficients.size == 0


def test_fit_empty_vector():
    with pytest.raises(EmptyVector):
        LinearModel().fit([], [])


def test_fit_empty_target():
    with pytest.raises(EmptyVector):
        LinearModel().fit([[1.0]], [])


def test_fit_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        LinearModel().fit([[1.0, 2.0, 3.0]], [0.0, 0.0, 0.0])


def test_fit_ragged_rows():
    with pytest.raises(DimensionMismatch):
        LinearModel().fit([[1.0, 2.0], [1.0]], [1.0, 2.0])


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        LinearModel().fit([], [])
    assert issubclass(DimensionMismatch, ClearMLError)


def test_fit_line_through_origin():
    model = LinearModel()
    returned = model.fit([[1.0], [2.0]], [2.0, 4.0])

    assert returned is model
    assert model.intercept == 0.0
    assert model.coefficients.shape == (1,)
    assert abs(model.coefficients[0] - 2.0) < 1e-5
    assert model.converged_
    assert model.n_iter_ < 1000


def test_fit_leaves_intercept_untouched():
    model = LinearModel(intercept=1.0)
    model.fit([[1.0], [2.0]], [3.0, 5.0])

    assert model.intercept == 1.0
    assert abs(model.coefficients[0] - 2.0) < 1e-5


def test_fit_multiple_features():
    config = GradientDescentConfig(learning_rate=0.1)
    model = LinearModel(config=config)
    model.fit([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]], [1.0, 2.0, 3.0])

    np.testing.assert_allclose(model.coefficients, [1.0, 2.0], atol=1e-5)


def test_fit_stops_at_max_iterations():
    model = LinearModel()
    model.fit([[1.0], [2.0]], [2.0, 4.0], config=GradientDescentConfig(max_iterations=5))

    assert model.n_iter_ == 5
    assert not model.converged_
    assert len(model.loss_history) == 5
    assert len(model.grad_history) == 5
    assert len(model.coef_history) == 5


def test_loss_decreases_during_fit():
    model = LinearModel().fit([[1.0], [2.0], [3.0]], [1.5, 3.0, 4.5])
    assert model.loss_history[-1] < model.loss_history[0]


def test_fit_resets_coefficients_to_feature_count():
    model = LinearModel(coefficients=[5.0, 5.0, 5.0])
    model.fit([[1.0], [2.0]], [2.0, 4.0])
    assert model.coefficients.shape == (1,)


def test_failed_fit_keeps_previous_parameters():
    model = LinearModel().fit([[1.0], [2.0]], [2.0, 4.0])
    before = model.coefficients.copy()

    with pytest.raises(DimensionMismatch):
        model.fit([[1.0, 2.0]], [1.0, 2.0])

    np.testing.assert_array_equal(model.coefficients, before)


def test_fit_accepts_dataframe():
    X = pd.DataFrame({"a": [1.0, 2.0, 3.0]})
    y = pd.Series([2.0, 4.0, 6.0])
    model = LinearModel().fit(X, y)
    np.testing.assert_allclose(model.predict(X), [2.0, 4.0, 6.0], atol=1e-5)


def test_predict_empty_vector():
    with pytest.raises(EmptyVector):
        LinearModel().predict([])


def test_predict_before_fit():
    with pytest.raises(DimensionMismatch):
        LinearModel().predict([[1.0]])


def test_predict_different_row_length():
    model = LinearModel(intercept=1.0, coefficients=[1.0, 1.0])
    with pytest.raises(DimensionMismatch):
        model.predict([[1.0, 1.0], [1.0]])


def test_predict():
    model = LinearModel()
    model.intercept = 1.0
    model.coefficients = np.array([1.0])

    assert model.predict([[1.0], [2.0], [3.0]]).tolist() == [2.0, 3.0, 4.0]


def test_predict_with_multiple_coefficients():
    model = LinearModel(intercept=1.0, coefficients=[1.0, 2.0])

    assert model.predict([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]]).tolist() == [4.0, 7.0, 10.0]


def test_predict_is_repeatable():
    model = LinearModel(intercept=0.5, coefficients=[0.3, -1.2])
    X = [[1.0, 2.0], [3.0, 4.0]]

    first = model.predict(X)
    second = model.predict(X)

    np.testing.assert_array_equal(first, second)
    assert model.coefficients.tolist() == [0.3, -1.2]


def test_score():
    model = LinearModel(intercept=1.0, coefficients=[1.0])
    assert model.score([[1.0], [2.0], [3.0]], [1.0, 2.0, 3.0]) == 1.0


def test_step_does_not_mutate_model():
    model = LinearModel(coefficients=[0.0])
    X = np.array([[1.0], [2.0]])
    y = np.array([2.0, 4.0])

    updated, gradient_norm = step(model, X, y, GradientDescentConfig())

    assert updated is not model
    assert model.coefficients.tolist() == [0.0]
    # dL/dw = 2/2 * (-2 * 1 + -4 * 2) = -10
    np.testing.assert_allclose(updated.coefficients, [0.1])
    assert gradient_norm == 4.0


def test_step_returns_same_model_when_converged():
    model = LinearModel(coefficients=[2.0])
    X = np.array([[1.0], [2.0]])
    y = np.array([2.0, 4.0])

    updated, gradient_norm = step(model, X, y, GradientDescentConfig())

    assert updated is model
    assert gradient_norm == 0.0


def test_step_keeps_intercept():
    model = LinearModel(intercept=3.0, coefficients=[0.0])
    updated, _ = step(model, np.array([[1.0]]), np.array([10.0]), GradientDescentConfig())
    assert updated.intercept == 3.0


def test_constructor_copies_coefficients():
    coefficients = np.array([1.0, 2.0])
    model = LinearModel(coefficients=coefficients)

    coefficients[0] = 99.0

    assert model.coefficients.tolist() == [1.0, 2.0]


def test_fit_rejects_nested_rows():
    X = np.ones((2, 2, 2))
    with pytest.raises(DimensionMismatch):
        LinearModel().fit(X, [1.0, 2.0])
