"""
Tests for the multivariate baseline models and the VAR adapter.

All models:
  - Return ``steps`` vectors from predict().
  - Can be re-fit without carrying state from a previous fit.
"""

from __future__ import annotations

import pytest

from ts_forecaster.backtest.models import (
    DriftModel,
    LastValueModel,
    RollingMeanModel,
    VarModelAdapter,
    all_baseline_models,
)
from ts_forecaster.models.var import InsufficientDataError


# ── LastValueModel ────────────────────────────────────────────────────────────

def test_last_value_repeats_last_observation() -> None:
    model = LastValueModel()
    series = [[1.0, 2.0], [3.0, 4.0]]
    model.fit(series)
    assert model.predict(series, 2) == [[3.0, 4.0], [3.0, 4.0]]


def test_last_value_empty_series_raises() -> None:
    with pytest.raises(InsufficientDataError):
        LastValueModel().fit([])


# ── RollingMeanModel ──────────────────────────────────────────────────────────

def test_rolling_mean_uses_only_tail() -> None:
    model = RollingMeanModel(window=2)
    series = [[1.0, 1.0], [3.0, 5.0], [5.0, 9.0]]
    model.fit(series)
    assert model.predict(series, 1) == [pytest.approx([4.0, 7.0])]


def test_rolling_mean_rejects_bad_window() -> None:
    with pytest.raises(ValueError):
        RollingMeanModel(window=0)


# ── DriftModel ────────────────────────────────────────────────────────────────

def test_drift_extrapolates_average_step() -> None:
    model = DriftModel()
    series = [[0.0, 10.0], [2.0, 8.0], [4.0, 6.0]]
    model.fit(series)
    forecast = model.predict(series, 2)
    assert forecast[0] == pytest.approx([6.0, 4.0])
    assert forecast[1] == pytest.approx([8.0, 2.0])


def test_drift_needs_two_observations() -> None:
    with pytest.raises(InsufficientDataError):
        DriftModel().fit([[1.0]])


def test_drift_refit_replaces_state() -> None:
    model = DriftModel()
    model.fit([[0.0], [10.0]])
    model.fit([[0.0], [1.0]])
    assert model.predict([[1.0]], 1) == [pytest.approx([2.0])]


def test_drift_empty_series_uses_fitted_last_value() -> None:
    model = DriftModel()
    model.fit([[0.0], [1.0], [2.0]])
    assert model.predict([], 2) == [pytest.approx([3.0]), pytest.approx([4.0])]


def test_drift_empty_series_unfitted_raises() -> None:
    with pytest.raises(InsufficientDataError):
        DriftModel().predict([], 1)


# ── VarModelAdapter ───────────────────────────────────────────────────────────

def test_var_adapter_matches_interface(var1_series) -> None:
    adapter = VarModelAdapter(1, 2)
    assert adapter.name == "var_p1"
    adapter.fit(var1_series[:8])
    forecast = adapter.predict(var1_series[:8], 2)
    assert forecast[1] == pytest.approx(var1_series[9], abs=1e-6)


def test_all_baseline_models_returns_fresh_instances() -> None:
    first, second = all_baseline_models(), all_baseline_models()
    assert [m.name for m in first] == ["last_value", "rolling_mean", "drift"]
    assert all(a is not b for a, b in zip(first, second))
