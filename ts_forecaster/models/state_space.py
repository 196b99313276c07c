"""
Linear-Gaussian state-space model with a Kalman filter.

Model
-----
    x_{t+1} = F · x_t + w_t      w_t ~ N(0, Q)     (state transition)
    y_t     = H · x_t + v_t      v_t ~ N(0, R)     (observation)

with ``n`` hidden states and ``m`` observed variables:

  F  transition         n x n
  H  observation        m x n
  Q  process noise      n x n
  R  measurement noise  m x m
  x0 initial state      n x 1
  P0 initial covariance n x n

Filtering
---------
For each observation the filter runs the usual predict / update pair::

    x⁻ = F x            P⁻ = F P Fᵀ + Q
    S  = H P⁻ Hᵀ + R    K  = P⁻ Hᵀ S⁻¹
    x  = x⁻ + K (y - H x⁻)
    P  = (I - K H) P⁻

``S⁻¹`` is computed with ``Matrix.inverse()``; a singular innovation
covariance raises ``SingularMatrixError``.  After ``filter()`` the model
holds the last filtered state, and ``forecast()`` projects it forward.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ts_forecaster.linalg.matrix import PIVOT_TOLERANCE, DimensionMismatchError, Matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KalmanFilterResult:
    """Output of ``StateSpaceModel.filter()``.

    Attributes:
        states:      Filtered state vector after each observation.
        covariances: Filtered state covariance after each observation.
        predictions: One-step-ahead observation forecast made before each
                     observation was seen.
    """

    states: list[list[float]]
    covariances: list[Matrix]
    predictions: list[list[float]]


class StateSpaceModel:
    """Kalman-filtered linear state-space model.

    Raises:
        DimensionMismatchError: If the system matrices have incompatible shapes.
    """

    name = "state_space"

    def __init__(
        self,
        transition: Matrix,
        observation: Matrix,
        process_noise: Matrix,
        measurement_noise: Matrix,
        initial_state: Sequence[float],
        initial_covariance: Matrix,
        pivot_tolerance: float = PIVOT_TOLERANCE,
    ) -> None:
        n = transition.rows
        m = observation.rows
        if transition.shape != (n, n):
            raise DimensionMismatchError("state_space", transition.shape, detail="F must be square")
        if observation.cols != n:
            raise DimensionMismatchError("state_space", observation.shape, (m, n))
        if process_noise.shape != (n, n):
            raise DimensionMismatchError("state_space", process_noise.shape, (n, n))
        if measurement_noise.shape != (m, m):
            raise DimensionMismatchError("state_space", measurement_noise.shape, (m, m))
        if initial_covariance.shape != (n, n):
            raise DimensionMismatchError("state_space", initial_covariance.shape, (n, n))
        if len(initial_state) != n:
            raise DimensionMismatchError(
                "state_space", detail=f"initial state has {len(initial_state)} values, expected {n}"
            )

        self.F = transition
        self.H = observation
        self.Q = process_noise
        self.R = measurement_noise
        self.pivot_tolerance = pivot_tolerance
        self.state = Matrix.column(initial_state)
        self.covariance = initial_covariance

    @property
    def n_states(self) -> int:
        return self.F.rows

    @property
    def n_observed(self) -> int:
        return self.H.rows

    def filter(self, observations: Sequence[Sequence[float]]) -> KalmanFilterResult:
        """Run the Kalman filter over ``observations`` and keep the final state.

        Args:
            observations: Ordered observation vectors, each of length ``m``.

        Raises:
            DimensionMismatchError: If an observation has the wrong length.
            SingularMatrixError:    If the innovation covariance is singular.
        """
        identity = Matrix.identity(self.n_states)
        Ft = self.F.transpose()
        Ht = self.H.transpose()

        x, P = self.state, self.covariance
        states: list[list[float]] = []
        covariances: list[Matrix] = []
        predictions: list[list[float]] = []

        for t, obs in enumerate(observations):
            if len(obs) != self.n_observed:
                raise DimensionMismatchError(
                    "filter",
                    detail=f"observation {t} has {len(obs)} values, expected {self.n_observed}",
                )
            x_prior = self.F @ x
            P_prior = self.F @ P @ Ft + self.Q

            y_hat = self.H @ x_prior
            predictions.append(_column_values(y_hat))

            S = self.H @ P_prior @ Ht + self.R
            K = P_prior @ Ht @ S.inverse(self.pivot_tolerance)
            innovation = Matrix.column(obs) - y_hat

            x = x_prior + K @ innovation
            P = (identity - K @ self.H) @ P_prior
            states.append(_column_values(x))
            covariances.append(P)

        self.state, self.covariance = x, P
        logger.debug("Kalman filter processed %d observation(s).", len(states))
        return KalmanFilterResult(states=states, covariances=covariances, predictions=predictions)

    def forecast(self, steps: int) -> list[list[float]]:
        """Project the current state ``steps`` periods ahead; returns observation vectors."""
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}.")
        x = self.state
        result: list[list[float]] = []
        for _ in range(steps):
            x = self.F @ x
            result.append(_column_values(self.H @ x))
        return result


def local_level_model(
    process_variance: float,
    measurement_variance: float,
    initial_level: float = 0.0,
    initial_variance: float = 1e6,
) -> StateSpaceModel:
    """Scalar random-walk-plus-noise model.

    The level follows a random walk with variance ``process_variance`` and is
    observed with noise of variance ``measurement_variance``.  The large
    default ``initial_variance`` makes the first observation dominate the
    starting level.
    """
    if process_variance < 0 or measurement_variance < 0:
        raise ValueError("Variances must be non-negative.")
    return StateSpaceModel(
        transition=Matrix.identity(1),
        observation=Matrix.identity(1),
        process_noise=Matrix(1, 1, [[process_variance]]),
        measurement_noise=Matrix(1, 1, [[measurement_variance]]),
        initial_state=[initial_level],
        initial_covariance=Matrix(1, 1, [[initial_variance]]),
    )


def _column_values(vec: Matrix) -> list[float]:
    return [vec.at(i, 0) for i in range(vec.rows)]
