"""
Point-forecast accuracy for backtest output.

Every metric is computed over the records that have both an actual and a
prediction; abstentions (``predicted is None``) only count towards
``n_predictions``.

Metrics
-------
mae
  Mean of |actual - predicted|, in the units of the variable.
rmse
  Square root of the mean squared error. Never below ``mae``; the wider the
  gap, the more the score is driven by a handful of large misses.
mape
  Mean of |error| / |actual|, skipping actuals closer to zero than
  ``MAPE_EPSILON``. Unit-free, so it can be compared across variables.
directional_accuracy
  Share of records where the forecast and the actual moved the same way
  relative to ``last_known``. Flat actuals are left out of the denominator.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass

MAPE_EPSILON = 1e-8  # minimum |actual| to include in MAPE


@dataclass(frozen=True)
class PredictionRecord:
    """One forecast-vs-actual comparison for a single fold/model/variable.

    Attributes:
        fold_index: Fold this came from.
        model_name: Model that produced the forecast.
        variable:   Name of the forecast variable.
        train_end:  Last index the model was trained on.
        test_index: Index being predicted.
        horizon:    Steps ahead of ``train_end``.
        actual:     Observed value at ``test_index``.
        predicted:  Forecast value (None = model abstained).
        last_known: Observed value at ``train_end`` (for directional accuracy).
    """

    fold_index: int
    model_name: str
    variable: str
    train_end: int
    test_index: int
    horizon: int
    actual: float | None
    predicted: float | None
    last_known: float | None


@dataclass(frozen=True)
class BacktestMetrics:
    """Aggregated metrics over a set of ``PredictionRecord``s.

    Float fields are None when there is nothing to evaluate.
    """

    n_predictions: int
    n_evaluated: int
    mae: float | None
    rmse: float | None
    mape: float | None
    directional_accuracy: float | None
    n_directional: int
    model_name: str | None = None
    variable: str | None = None


def compute_metrics(
    records: list[PredictionRecord],
    model_name: str | None = None,
    variable: str | None = None,
) -> BacktestMetrics:
    """Compute MAE, RMSE, MAPE and directional accuracy for ``records``.

    Records with a None actual or predicted value are excluded from the
    computations but counted in ``n_predictions``.
    """
    evaluated = [r for r in records if r.actual is not None and r.predicted is not None]
    pairs = [(r.actual, r.predicted) for r in evaluated]

    mae = rmse = mape = None
    if pairs:
        abs_errors = [abs(a - p) for a, p in pairs]
        mae = math.fsum(abs_errors) / len(pairs)
        rmse = math.sqrt(math.fsum(e * e for e in abs_errors) / len(pairs))
        mape = _mean([
            err / abs(a)
            for err, (a, _) in zip(abs_errors, pairs)
            if abs(a) >= MAPE_EPSILON
        ])

    moved = [r for r in evaluated if r.last_known is not None and r.actual != r.last_known]
    hits = [
        _direction(r.predicted, r.last_known) == _direction(r.actual, r.last_known)
        for r in moved
    ]

    return BacktestMetrics(
        n_predictions=len(records),
        n_evaluated=len(evaluated),
        mae=mae,
        rmse=rmse,
        mape=mape,
        directional_accuracy=_mean([float(h) for h in hits]),
        n_directional=len(moved),
        model_name=model_name,
        variable=variable,
    )


def summarize_by_model(records: list[PredictionRecord]) -> dict[str, BacktestMetrics]:
    """Group records by model name and compute metrics for each group."""
    grouped: dict[str, list[PredictionRecord]] = defaultdict(list)
    for r in records:
        grouped[r.model_name].append(r)
    return {name: compute_metrics(recs, model_name=name) for name, recs in grouped.items()}


def _mean(values: list[float]) -> float | None:
    return math.fsum(values) / len(values) if values else None


def _direction(value: float, reference: float) -> int:
    """Sign of ``value - reference``: +1, -1 or 0."""
    return (value > reference) - (value < reference)
