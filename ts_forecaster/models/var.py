"""
Vector autoregression (VAR) fitted by ordinary least squares.

Model
-----
A VAR(p) over ``k`` variables predicts each observation as a linear
combination of the previous ``p`` observations::

    y_t = A_1 · y_{t-1} + A_2 · y_{t-2} + … + A_p · y_{t-p}

where every ``A_i`` is a ``k x k`` matrix.  No intercept term is estimated.

Fitting
-------
``prepare_data()`` turns a series of ``T`` observations into a supervised
regression problem with ``T - p`` rows:

  Y row i  =  data[i + p]                                  (k columns)
  X row i  =  data[i+p-1] ‖ data[i+p-2] ‖ … ‖ data[i]      (p·k columns)

Lag 1 (most recent) comes first in every X row.  ``fit()`` solves the normal
equations ``B = (XᵀX)⁻¹ XᵀY`` for the ``(p·k) x k`` matrix ``B`` and splits
it into ``p`` row-blocks of ``k`` rows.  Block ``i`` is stored TRANSPOSED as
``coefficients[i]`` (= ``A_{i+1}``) so that ``coefficients[i] × y_{t-i-1}ᵀ``
is the lag-``(i+1)`` contribution to the forecast.

Forecasting
-----------
``predict()`` forecasts recursively: the window of the last ``p``
observations is advanced by appending each new forecast and dropping the
oldest entry, so step ``h`` is conditioned on forecasts ``1 … h-1``.  The
window is a fixed-size ``deque`` of copied vectors; the caller's series is
never mutated.

Failure modes
-------------
  InsufficientDataError   series has ``<= p`` observations (fit), or fewer
                          than ``p`` (predict / predict_next).
  DimensionMismatchError  an observation does not have exactly ``k`` values.
  SingularMatrixError     ``XᵀX`` is singular, e.g. collinear lags or fewer
                          than ``p·k`` regression rows.
  ModelNotFittedError     predict / predict_next called before fit.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from typing import NamedTuple

from ts_forecaster.linalg.matrix import (
    PIVOT_TOLERANCE,
    DimensionMismatchError,
    Matrix,
)

logger = logging.getLogger(__name__)

Observation = Sequence[float]


# ── Custom exceptions ─────────────────────────────────────────────────────────


class InsufficientDataError(ValueError):
    """Raised when a series is too short for the model's lag order.

    Attributes:
        required: Minimum number of observations needed.
        actual:   Number of observations supplied.
    """

    def __init__(self, required: int, actual: int, detail: str = "") -> None:
        self.required = required
        self.actual   = actual
        msg = f"Series too short: need at least {required} observations, got {actual}."
        if detail:
            msg += f" {detail}"
        super().__init__(msg)


class ModelNotFittedError(RuntimeError):
    """Raised when a forecast is requested from a model that was never fitted."""

    def __init__(self, model_name: str = "VectorAutoregression") -> None:
        super().__init__(f"{model_name} is not fitted. Call fit() before predicting.")


# ── Result type ───────────────────────────────────────────────────────────────


class DesignMatrices(NamedTuple):
    """Regression matrices built by ``VectorAutoregression.prepare_data()``.

    Attributes:
        Y: Response matrix, ``(T - p) x k``.
        X: Lagged design matrix, ``(T - p) x (p·k)``.
    """

    Y: Matrix
    X: Matrix


# ── Model ─────────────────────────────────────────────────────────────────────


class VectorAutoregression:
    """VAR(p) model over ``k`` variables.

    Args:
        p:               Lag order (>= 1).
        k:               Number of variables per observation (>= 1).
        pivot_tolerance: Pivot threshold passed to ``Matrix.inverse()``.

    Attributes:
        coefficients: ``p`` matrices of shape ``k x k`` once fitted; empty
                      before the first ``fit()``.
    """

    name = "var"

    def __init__(self, p: int, k: int, pivot_tolerance: float = PIVOT_TOLERANCE) -> None:
        if p < 1:
            raise ValueError(f"Lag order p must be >= 1, got {p}.")
        if k < 1:
            raise ValueError(f"Variable count k must be >= 1, got {k}.")
        self.p = p
        self.k = k
        self.pivot_tolerance = pivot_tolerance
        self.coefficients: list[Matrix] = []

    @property
    def is_fitted(self) -> bool:
        return len(self.coefficients) == self.p

    def prepare_data(self, data: Sequence[Observation]) -> DesignMatrices:
        """Build the response and lagged design matrices for ``data``.

        Args:
            data: Ordered observations, each a sequence of ``k`` numbers.

        Returns:
            ``DesignMatrices(Y, X)``.

        Raises:
            InsufficientDataError:  If ``len(data) <= p``.
            DimensionMismatchError: If any observation length differs from ``k``.
        """
        n_obs = len(data)
        if n_obs <= self.p:
            raise InsufficientDataError(
                self.p + 1, n_obs, f"A VAR({self.p}) needs more than p observations."
            )
        self._check_observations(data)

        y_rows: list[list[float]] = []
        x_rows: list[list[float]] = []
        for t in range(self.p, n_obs):
            y_rows.append([float(v) for v in data[t]])
            lagged: list[float] = []
            for lag in range(1, self.p + 1):
                lagged.extend(float(v) for v in data[t - lag])
            x_rows.append(lagged)

        n_rows = n_obs - self.p
        return DesignMatrices(
            Y=Matrix(n_rows, self.k, y_rows),
            X=Matrix(n_rows, self.p * self.k, x_rows),
        )

    def fit(self, data: Sequence[Observation]) -> VectorAutoregression:
        """Estimate the lag coefficient matrices by OLS.

        Re-fitting replaces any previously estimated coefficients.

        Raises:
            InsufficientDataError:  If ``len(data) <= p``.
            DimensionMismatchError: If any observation length differs from ``k``.
            SingularMatrixError:    If ``XᵀX`` cannot be inverted.
        """
        Y, X = self.prepare_data(data)
        logger.debug(
            "Fitting VAR(%d) k=%d on %d regression rows (X %dx%d).",
            self.p, self.k, Y.rows, X.rows, X.cols,
        )

        Xt = X.transpose()
        B = Xt.multiply(X).inverse(self.pivot_tolerance).multiply(Xt).multiply(Y)

        b_rows = B.to_list()
        coefficients: list[Matrix] = []
        for i in range(self.p):
            block = Matrix(self.k, self.k, b_rows[i * self.k:(i + 1) * self.k])
            coefficients.append(block.transpose())

        self.coefficients = coefficients
        return self

    def predict_next(self, window: Sequence[Observation]) -> list[float]:
        """One-step-ahead forecast from the ``p`` most recent observations.

        Args:
            window: Exactly ``p`` observations, ordered oldest → newest
                    (``window[-1]`` is lag 1).

        Returns:
            Forecast vector of ``k`` floats.

        Raises:
            ModelNotFittedError:    If ``fit()`` has not been called.
            InsufficientDataError:  If ``window`` has fewer than ``p`` entries.
            ValueError:             If ``window`` has more than ``p`` entries.
            DimensionMismatchError: If an observation length differs from ``k``.
        """
        self._require_fitted()
        if len(window) < self.p:
            raise InsufficientDataError(self.p, len(window))
        if len(window) > self.p:
            raise ValueError(
                f"Window must hold exactly p={self.p} observations, got {len(window)}."
            )
        self._check_observations(window)

        forecast = Matrix.zeros(self.k, 1)
        for i, coef in enumerate(self.coefficients):
            lagged = Matrix.column(window[-(i + 1)])
            forecast = forecast.add(coef.multiply(lagged))
        return [forecast.at(j, 0) for j in range(self.k)]

    def predict(self, data: Sequence[Observation], steps: int) -> list[list[float]]:
        """Recursive multi-step forecast continuing ``data``.

        Args:
            data:  Observed series; its last ``p`` observations seed the window.
            steps: Number of future vectors to produce (>= 0).

        Returns:
            ``steps`` forecast vectors, each of ``k`` floats.

        Raises:
            ModelNotFittedError:    If ``fit()`` has not been called.
            InsufficientDataError:  If ``len(data) < p``.
            ValueError:             If ``steps`` is negative.
        """
        self._require_fitted()
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}.")
        if len(data) < self.p:
            raise InsufficientDataError(self.p, len(data))

        window: deque[list[float]] = deque(
            ([float(v) for v in obs] for obs in data[-self.p:]), maxlen=self.p
        )
        forecasts: list[list[float]] = []
        for _ in range(steps):
            next_obs = self.predict_next(list(window))
            forecasts.append(next_obs)
            window.append(list(next_obs))

        logger.debug("VAR(%d) produced %d forecast step(s).", self.p, steps)
        return forecasts

    # ── Private helpers ───────────────────────────────────────────────────────

    def _require_fitted(self) -> None:
        if not self.is_fitted:
            raise ModelNotFittedError(type(self).__name__)

    def _check_observations(self, data: Sequence[Observation]) -> None:
        for t, obs in enumerate(data):
            if len(obs) != self.k:
                raise DimensionMismatchError(
                    "observation",
                    detail=f"observation {t} has {len(obs)} values, expected k={self.k}",
                )
