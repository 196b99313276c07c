"""
Baseline forecasters for multivariate series.

Why baselines?
--------------
A VAR is only worth its coefficients if it beats forecasts that need none:

  LastValueModel   → "Each variable is a random walk; the best forecast is
                      the latest observation."

  RollingMeanModel → "Variables revert to a recent average."

  DriftModel       → "Each variable continues its average historical
                      per-step change."

Interface contract
------------------
Every model (baselines and ``VarModelAdapter``) implements:

  fit(series: list[list[float]]) → None
    Receive the training observations, oldest first.

  predict(series, steps: int) → list[list[float]]
    Forecast ``steps`` vectors continuing ``series``.

The evaluator calls ``fit()`` once per fold, then ``predict()`` once.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ts_forecaster.models.var import InsufficientDataError, VectorAutoregression

Series = Sequence[Sequence[float]]


class LastValueModel:
    """Naive baseline: every forecast step repeats the last observation."""

    name = "last_value"

    def __init__(self) -> None:
        self._last: list[float] | None = None

    def fit(self, series: Series) -> None:
        if not series:
            raise InsufficientDataError(1, 0)
        self._last = [float(v) for v in series[-1]]

    def predict(self, series: Series, steps: int) -> list[list[float]]:
        last = [float(v) for v in series[-1]] if series else self._last
        if last is None:
            raise InsufficientDataError(1, 0)
        return [list(last) for _ in range(steps)]


class RollingMeanModel:
    """Rolling-mean baseline: forecast = per-variable mean of the last ``window`` rows."""

    name = "rolling_mean"

    def __init__(self, window: int = 5) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}.")
        self._window = window
        self._mean: list[float] | None = None

    def fit(self, series: Series) -> None:
        if not series:
            raise InsufficientDataError(1, 0)
        self._mean = _column_means(series[-self._window:])

    def predict(self, series: Series, steps: int) -> list[list[float]]:
        mean = _column_means(series[-self._window:]) if series else self._mean
        if mean is None:
            raise InsufficientDataError(1, 0)
        return [list(mean) for _ in range(steps)]


class DriftModel:
    """Random walk with drift: last value plus h times the mean historical step."""

    name = "drift"

    def __init__(self) -> None:
        self._drift: list[float] | None = None
        self._last: list[float] | None = None

    def fit(self, series: Series) -> None:
        if len(series) < 2:
            raise InsufficientDataError(2, len(series))
        first, last = series[0], series[-1]
        span = len(series) - 1
        self._drift = [(float(b) - float(a)) / span for a, b in zip(first, last)]
        self._last = [float(v) for v in last]

    def predict(self, series: Series, steps: int) -> list[list[float]]:
        last = [float(v) for v in series[-1]] if series else self._last
        if self._drift is None or last is None:
            raise InsufficientDataError(2, len(series), "Call fit() before predict().")
        return [
            [v + (h + 1) * d for v, d in zip(last, self._drift)]
            for h in range(steps)
        ]


class VarModelAdapter:
    """Exposes ``VectorAutoregression`` through the baseline interface."""

    name = "var"

    def __init__(self, p: int, k: int, pivot_tolerance: float | None = None) -> None:
        kwargs: dict[str, Any] = {}
        if pivot_tolerance is not None:
            kwargs["pivot_tolerance"] = pivot_tolerance
        self.model = VectorAutoregression(p, k, **kwargs)
        self.name = f"var_p{p}"

    def fit(self, series: Series) -> None:
        self.model.fit(series)

    def predict(self, series: Series, steps: int) -> list[list[float]]:
        return self.model.predict(series, steps)


def all_baseline_models(window: int = 5) -> list[Any]:
    """Return fresh instances of every baseline model (no shared state)."""
    return [
        LastValueModel(),
        RollingMeanModel(window=window),
        DriftModel(),
    ]


def _column_means(rows: Series) -> list[float]:
    n = len(rows)
    return [sum(float(v) for v in col) / n for col in zip(*rows)]
