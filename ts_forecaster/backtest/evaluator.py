"""
Backtest evaluator: refit each model at every rolling origin and score it.

How it works
------------
For each fold:
  a. Slice ``series[fold.train_start : fold.train_end + 1]`` as training data.
  b. For each model:
     - model.fit(train)
     - forecast = model.predict(train, fold.horizon)
     - take the last forecast step (the one landing on ``fold.test_index``)
     - emit one PredictionRecord per variable.

A model that cannot be fitted on a fold (too little data, or a singular
normal-equations matrix) is logged and skipped for that fold only; other
models and folds still run.

Leakage proof
-------------
Models only receive ``train`` (indices ``<= fold.train_end``); the actual
value at ``fold.test_index`` is read afterwards for scoring.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ts_forecaster.backtest.metrics import PredictionRecord
from ts_forecaster.backtest.splits import BacktestFold
from ts_forecaster.linalg.matrix import SingularMatrixError
from ts_forecaster.models.var import InsufficientDataError

log = logging.getLogger(__name__)


def run_backtest(
    series: Sequence[Sequence[float]],
    folds: list[BacktestFold],
    models: list[Any],
    variable_names: list[str] | None = None,
) -> list[PredictionRecord]:
    """Evaluate every model over every fold.

    Args:
        series:         Full observation series, oldest first.
        folds:          Folds from ``generate_rolling_origin_splits()``.
        models:         Objects implementing ``fit(series)`` / ``predict(series, steps)``.
        variable_names: Labels for each variable; defaults to ``x0, x1, …``.

    Returns:
        All PredictionRecords, in fold → model → variable order.
    """
    if not series:
        return []
    k = len(series[0])
    names = variable_names or [f"x{j}" for j in range(k)]
    if len(names) != k:
        raise ValueError(f"Expected {k} variable names, got {len(names)}.")

    records: list[PredictionRecord] = []
    skipped = 0

    for fold in folds:
        train = [list(obs) for obs in series[fold.train_start:fold.train_end + 1]]
        actual = series[fold.test_index]
        last_known = train[-1]

        for model in models:
            model_name = getattr(model, "name", type(model).__name__)
            try:
                model.fit(train)
                forecast = model.predict(train, fold.horizon)[-1]
            except (SingularMatrixError, InsufficientDataError) as exc:
                skipped += 1
                log.warning(
                    "Skipping model %s on fold %d: %s", model_name, fold.fold_index, exc
                )
                continue

            for j, name in enumerate(names):
                records.append(
                    PredictionRecord(
                        fold_index=fold.fold_index,
                        model_name=model_name,
                        variable=name,
                        train_end=fold.train_end,
                        test_index=fold.test_index,
                        horizon=fold.horizon,
                        actual=float(actual[j]),
                        predicted=float(forecast[j]),
                        last_known=float(last_known[j]),
                    )
                )

    log.info(
        "Backtest complete: %d folds, %d models, %d records, %d skipped fits.",
        len(folds), len(models), len(records), skipped,
    )
    return records
