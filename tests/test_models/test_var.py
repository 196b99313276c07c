"""
Tests for VectorAutoregression.

What we test
------------
prepare_data:
  - Y / X shapes are (T-p) x k and (T-p) x (p·k).
  - Row contents: Y row i = data[i+p]; X row i = lag 1 first, lag p last.
  - Series of length <= p raises InsufficientDataError.
  - Observations of the wrong width raise DimensionMismatchError.

fit:
  - Produces p coefficient matrices, each k x k.
  - Recovers the exact coefficients of a noise-free VAR(1) / VAR(2).
  - Collinear lags raise SingularMatrixError.
  - Re-fitting replaces coefficients.

predict / predict_next:
  - Forecast shapes and finiteness.
  - Multi-step predict equals manual sliding-window predict_next.
  - Unfitted use raises ModelNotFittedError.
  - Input series is never mutated.
"""

from __future__ import annotations

import copy
import math

import pytest

from ts_forecaster.linalg.matrix import DimensionMismatchError, Matrix, SingularMatrixError
from ts_forecaster.models.var import (
    DesignMatrices,
    InsufficientDataError,
    ModelNotFittedError,
    VectorAutoregression,
)


def _ar2_series(n: int = 10) -> list[list[float]]:
    """Scalar series from x_t = 0.5·x_{t-1} + 0.3·x_{t-2}."""
    series = [[1.0], [2.0]]
    while len(series) < n:
        series.append([0.5 * series[-1][0] + 0.3 * series[-2][0]])
    return series


# ── Construction ──────────────────────────────────────────────────────────────

def test_init_stores_hyperparameters() -> None:
    model = VectorAutoregression(2, 3)
    assert model.p == 2
    assert model.k == 3
    assert model.coefficients == []
    assert not model.is_fitted


@pytest.mark.parametrize("p, k", [(0, 2), (2, 0), (-1, 1)])
def test_init_rejects_invalid_hyperparameters(p: int, k: int) -> None:
    with pytest.raises(ValueError):
        VectorAutoregression(p, k)


# ── prepare_data ──────────────────────────────────────────────────────────────

def test_prepare_data_shapes_small_series() -> None:
    model = VectorAutoregression(2, 2)
    Y, X = model.prepare_data([[1, 2], [3, 4], [5, 6], [7, 8]])
    assert (Y.rows, Y.cols) == (2, 2)
    assert (X.rows, X.cols) == (2, 4)


def test_prepare_data_returns_named_matrices(bivariate_series) -> None:
    p, k = 2, 2
    result = VectorAutoregression(p, k).prepare_data(bivariate_series)
    assert isinstance(result, DesignMatrices)
    assert isinstance(result.Y, Matrix)
    assert isinstance(result.X, Matrix)
    assert result.Y.rows == len(bivariate_series) - p
    assert result.X.rows == len(bivariate_series) - p
    assert result.Y.cols == k
    assert result.X.cols == p * k


def test_prepare_data_row_layout_puts_lag_one_first() -> None:
    data = [[1, 2], [3, 4], [5, 6], [7, 8]]
    Y, X = VectorAutoregression(2, 2).prepare_data(data)
    assert Y.to_list() == [[5.0, 6.0], [7.0, 8.0]]
    assert X.to_list() == [
        [3.0, 4.0, 1.0, 2.0],
        [5.0, 6.0, 3.0, 4.0],
    ]


@pytest.mark.parametrize("n_obs", [0, 1, 2])
def test_prepare_data_insufficient_raises(n_obs: int) -> None:
    data = [[1.0, 2.0]] * n_obs
    with pytest.raises(InsufficientDataError, match="Series too short") as exc_info:
        VectorAutoregression(2, 2).prepare_data(data)
    assert exc_info.value.required == 3
    assert exc_info.value.actual == n_obs


def test_prepare_data_wrong_width_raises() -> None:
    with pytest.raises(DimensionMismatchError):
        VectorAutoregression(1, 2).prepare_data([[1, 2], [3, 4, 5], [6, 7]])


def test_prepare_data_does_not_fit() -> None:
    model = VectorAutoregression(2, 2)
    model.prepare_data([[1, 2], [3, 4], [5, 6], [7, 8]])
    assert not model.is_fitted


# ── fit ───────────────────────────────────────────────────────────────────────

def test_fit_produces_p_square_coefficients(bivariate_series) -> None:
    p, k = 2, 2
    model = VectorAutoregression(p, k).fit(bivariate_series)
    assert model.is_fitted
    assert len(model.coefficients) == p
    for coef in model.coefficients:
        assert isinstance(coef, Matrix)
        assert (coef.rows, coef.cols) == (k, k)


def test_fit_recovers_var1_transition(var1_series, var1_coefficients) -> None:
    model = VectorAutoregression(1, 2).fit(var1_series)
    expected = Matrix.from_rows(var1_coefficients)
    assert model.coefficients[0].allclose(expected, tol=1e-6)


def test_fit_recovers_scalar_ar2() -> None:
    model = VectorAutoregression(2, 1).fit(_ar2_series())
    assert model.coefficients[0].at(0, 0) == pytest.approx(0.5, abs=1e-6)
    assert model.coefficients[1].at(0, 0) == pytest.approx(0.3, abs=1e-6)


def test_fit_collinear_series_raises_singular() -> None:
    """Second variable is always twice the first: XᵀX has rank 1."""
    data = [[float(t), 2.0 * t] for t in range(1, 9)]
    with pytest.raises(SingularMatrixError):
        VectorAutoregression(1, 2).fit(data)


def test_fit_underdetermined_raises_singular() -> None:
    """T - p = 2 regression rows for p·k = 4 unknowns per equation."""
    data = [[1.0, 2.0], [2.0, 1.0], [3.0, 5.0], [4.0, 3.0]]
    with pytest.raises(SingularMatrixError):
        VectorAutoregression(2, 2).fit(data)


def test_fit_insufficient_data_raises() -> None:
    with pytest.raises(InsufficientDataError):
        VectorAutoregression(2, 2).fit([[1, 2], [3, 4]])


def test_refit_replaces_coefficients(var1_series, bivariate_series) -> None:
    model = VectorAutoregression(1, 2).fit(var1_series)
    first = list(model.coefficients)
    model.fit(bivariate_series)
    assert len(model.coefficients) == 1
    assert model.coefficients[0] != first[0]


def test_fit_does_not_mutate_input(bivariate_series) -> None:
    snapshot = copy.deepcopy(bivariate_series)
    VectorAutoregression(2, 2).fit(bivariate_series)
    assert bivariate_series == snapshot


# ── predict_next ──────────────────────────────────────────────────────────────

def test_predict_next_returns_k_finite_values(bivariate_series) -> None:
    p, k = 2, 2
    model = VectorAutoregression(p, k).fit(bivariate_series)
    prediction = model.predict_next(bivariate_series[-p:])
    assert isinstance(prediction, list)
    assert len(prediction) == k
    assert all(math.isfinite(v) for v in prediction)


def test_predict_next_applies_lag_order() -> None:
    """window[-1] is lag 1: 0.5·2 + 0.3·1 = 1.3."""
    model = VectorAutoregression(2, 1).fit(_ar2_series())
    assert model.predict_next([[1.0], [2.0]])[0] == pytest.approx(1.3, abs=1e-6)


def test_predict_next_wrong_window_length(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    with pytest.raises(InsufficientDataError):
        model.predict_next(bivariate_series[-1:])
    with pytest.raises(ValueError):
        model.predict_next(bivariate_series[-3:])


def test_predict_next_wrong_width(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    with pytest.raises(DimensionMismatchError):
        model.predict_next([[1.0, 2.0], [3.0]])


def test_predict_next_unfitted_raises() -> None:
    with pytest.raises(ModelNotFittedError):
        VectorAutoregression(2, 2).predict_next([[1, 2], [3, 4]])


# ── predict ───────────────────────────────────────────────────────────────────

def test_predict_returns_steps_vectors(bivariate_series) -> None:
    p, k, steps = 2, 2, 3
    model = VectorAutoregression(p, k).fit(bivariate_series)
    forecast = model.predict(bivariate_series, steps)
    assert isinstance(forecast, list)
    assert len(forecast) == steps
    for vec in forecast:
        assert isinstance(vec, list)
        assert len(vec) == k
        assert all(math.isfinite(v) for v in vec)


def test_predict_matches_manual_recursion(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    forecast = model.predict(bivariate_series, 4)

    window = [list(obs) for obs in bivariate_series[-2:]]
    for step in forecast:
        expected = model.predict_next(window)
        assert step == pytest.approx(expected)
        window = window[1:] + [expected]


def test_predict_continues_exact_var1(var1_series, var1_coefficients) -> None:
    model = VectorAutoregression(1, 2).fit(var1_series[:8])
    forecast = model.predict(var1_series[:8], 4)
    for predicted, actual in zip(forecast, var1_series[8:12]):
        assert predicted == pytest.approx(actual, abs=1e-6)


def test_predict_zero_steps_is_empty(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    assert model.predict(bivariate_series, 0) == []


def test_predict_negative_steps_raises(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    with pytest.raises(ValueError):
        model.predict(bivariate_series, -1)


def test_predict_short_seed_raises(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    with pytest.raises(InsufficientDataError):
        model.predict(bivariate_series[:1], 3)


def test_predict_unfitted_raises(bivariate_series) -> None:
    with pytest.raises(ModelNotFittedError):
        VectorAutoregression(2, 2).predict(bivariate_series, 3)


def test_predict_does_not_mutate_input(bivariate_series) -> None:
    model = VectorAutoregression(2, 2).fit(bivariate_series)
    snapshot = copy.deepcopy(bivariate_series)
    model.predict(bivariate_series, 5)
    assert bivariate_series == snapshot
