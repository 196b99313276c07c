"""
Rolling-origin split generation over integer time indices.

Design
------
Rolling-origin evaluation simulates how a forecaster is used in practice:
at each origin the model may only see observations up to and including
that origin, and is asked to predict ``horizon`` steps past it.

Split structure (expanding window)
----------------------------------
Given:
  n_obs          = number of observations in the series
  min_train_size = observations in the first training window
  step           = how far the origin advances each fold
  horizon        = how many steps ahead to forecast

Each fold:
  train_start = 0
  train_end   = origin                 ← last index the model may use
  test_index  = origin + horizon       ← what we predict

The origin starts at ``min_train_size - 1`` and advances by ``step`` while
``test_index < n_obs``.

Leakage prevention
------------------
``test_index > train_end`` for every fold by construction; the evaluator
only ever hands ``series[train_start : train_end + 1]`` to a model.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BacktestFold:
    """One rolling-origin evaluation fold.

    Attributes:
        fold_index:  Zero-based fold number.
        train_start: First index in the training window.
        train_end:   Last index in the training window (the origin).
        test_index:  Index being predicted (``train_end + horizon``).
        horizon:     Steps ahead of the origin.
    """

    fold_index: int
    train_start: int
    train_end: int
    test_index: int
    horizon: int

    @property
    def train_size(self) -> int:
        return self.train_end - self.train_start + 1


def generate_rolling_origin_splits(
    n_obs: int,
    min_train_size: int,
    step: int = 1,
    horizon: int = 1,
) -> list[BacktestFold]:
    """Generate expanding-window folds for a series of ``n_obs`` observations.

    Args:
        n_obs:          Length of the series.
        min_train_size: Training observations in the first fold (>= 1).
        step:           Origin advance per fold (>= 1).
        horizon:        Forecast distance (>= 1).

    Returns:
        Folds ordered by origin.  Empty when the series is too short for
        even one fold.

    Raises:
        ValueError: If any size parameter is < 1.
    """
    if min_train_size < 1:
        raise ValueError(f"min_train_size must be >= 1, got {min_train_size}.")
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}.")
    if horizon < 1:
        raise ValueError(f"horizon must be >= 1, got {horizon}.")

    folds: list[BacktestFold] = []
    origin = min_train_size - 1
    while origin + horizon < n_obs:
        folds.append(
            BacktestFold(
                fold_index=len(folds),
                train_start=0,
                train_end=origin,
                test_index=origin + horizon,
                horizon=horizon,
            )
        )
        origin += step
    return folds
