"""
Exponential-smoothing forecasters for univariate series.

Variants
--------
  exponential_smoothing_forecast         Simple (level-only) smoothing.
                                         Flat forecast at the final level.

  double_exponential_smoothing_additive  Holt's linear trend: level + trend.
                                         forecast(h) = L + h·T

  double_exponential_smoothing_multiplicative
                                         Level × growth factor.  Needs a
                                         strictly positive series.
                                         forecast(h) = L · T^h

  triple_exponential_smoothing           Additive Holt–Winters: level, trend
                                         and a repeating seasonal component.
                                         forecast(h) = L + h·T + S[h mod m]

All routines operate on plain lists of floats and return new lists; the
input series is never modified.  Smoothing factors are range-checked up
front and a ``ValueError`` is raised on violation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class DoubleExponentialSmoothingResult:
    """Fitted state of a double (level + trend) exponential smoothing run.

    Attributes:
        level:          Smoothed level at each time step.
        trend:          Smoothed trend at each time step (additive difference
                        or multiplicative ratio, depending on the variant).
        smoothed_data:  In-sample one-step fitted values.
        multiplicative: True for the multiplicative (growth-factor) variant.
    """

    level: list[float]
    trend: list[float]
    smoothed_data: list[float]
    multiplicative: bool = False

    def forecast(self, steps: int) -> list[float]:
        """Extrapolate the final level and trend ``steps`` periods ahead."""
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}.")
        last_level = self.level[-1]
        last_trend = self.trend[-1]
        if self.multiplicative:
            return [last_level * last_trend ** (h + 1) for h in range(steps)]
        return [last_level + (h + 1) * last_trend for h in range(steps)]


@dataclass(frozen=True)
class HoltWintersResult:
    """Fitted state and forecast from additive Holt–Winters smoothing.

    Attributes:
        level:         Smoothed level per time step.
        trend:         Smoothed trend per time step.
        seasonals:     Seasonal component per time step.
        smoothed_data: In-sample one-step fitted values.
        forecast:      Out-of-sample forecast, ``horizon`` values.
    """

    level: list[float]
    trend: list[float]
    seasonals: list[float]
    smoothed_data: list[float]
    forecast: list[float]


# ── Simple exponential smoothing ──────────────────────────────────────────────


def exponential_smoothing(data: Sequence[float], alpha: float) -> list[float]:
    """Return the smoothed level series, seeded with the first observation."""
    _check_open_unit(alpha, "smoothing_level")
    if not data:
        raise ValueError("data must contain at least one observation.")
    levels = [float(data[0])]
    for value in data[1:]:
        levels.append(alpha * float(value) + (1 - alpha) * levels[-1])
    return levels


def exponential_smoothing_forecast(
    data: Sequence[float],
    forecast_horizon: int,
    smoothing_level: float = 0.2,
) -> list[float]:
    """Forecast ``forecast_horizon`` periods with simple exponential smoothing.

    The forecast is flat: every future value equals the final smoothed level.

    Args:
        data:             Observed series (non-empty).
        forecast_horizon: Number of future points.
        smoothing_level:  Alpha, strictly between 0 and 1.

    Raises:
        ValueError: If ``smoothing_level`` is outside (0, 1) or ``data`` is empty.
    """
    levels = exponential_smoothing(data, smoothing_level)
    return [levels[-1]] * max(0, forecast_horizon)


# ── Double exponential smoothing ──────────────────────────────────────────────


def double_exponential_smoothing_additive(
    data: Sequence[float],
    alpha: float,
    beta: float,
) -> DoubleExponentialSmoothingResult:
    """Holt's linear-trend smoothing.

    Initial level is ``data[0]`` and initial trend ``data[1] - data[0]``.

    Raises:
        ValueError: If alpha/beta are outside (0, 1] or fewer than two points.
    """
    _check_half_open_unit(alpha, "alpha")
    _check_half_open_unit(beta, "beta")
    if len(data) < 2:
        raise ValueError("Data must contain at least two data points for initialization.")

    level = [float(data[0])]
    trend = [float(data[1]) - float(data[0])]
    smoothed = [float(data[0])]
    for value in data[1:]:
        current_level = alpha * float(value) + (1 - alpha) * (level[-1] + trend[-1])
        current_trend = beta * (current_level - level[-1]) + (1 - beta) * trend[-1]
        level.append(current_level)
        trend.append(current_trend)
        smoothed.append(current_level + current_trend)

    return DoubleExponentialSmoothingResult(level=level, trend=trend, smoothed_data=smoothed)


def double_exponential_smoothing_multiplicative(
    data: Sequence[float],
    alpha: float,
    beta: float,
) -> DoubleExponentialSmoothingResult:
    """Level × growth-factor smoothing for strictly positive series.

    Initial level is ``data[0]`` and initial growth ``data[1] / data[0]``.

    Raises:
        ValueError: If alpha/beta are outside (0, 1], or the series has fewer
            than two points or any non-positive value.
    """
    _check_half_open_unit(alpha, "alpha")
    _check_half_open_unit(beta, "beta")
    if len(data) < 2 or any(d <= 0 for d in data):
        raise ValueError(
            "Data must contain at least two positive data points for initialization."
        )

    level = [float(data[0])]
    trend = [float(data[1]) / float(data[0])]
    smoothed = [float(data[0])]
    for value in data[1:]:
        current_level = alpha * float(value) + (1 - alpha) * level[-1] * trend[-1]
        current_trend = beta * (current_level / level[-1]) + (1 - beta) * trend[-1]
        level.append(current_level)
        trend.append(current_trend)
        smoothed.append(current_level * current_trend)

    return DoubleExponentialSmoothingResult(
        level=level, trend=trend, smoothed_data=smoothed, multiplicative=True
    )


# ── Triple exponential smoothing (Holt–Winters) ───────────────────────────────


def triple_exponential_smoothing(
    data: Sequence[float],
    season_length: int,
    alpha: float,
    beta: float,
    gamma: float,
    horizon: int,
) -> HoltWintersResult:
    """Additive Holt–Winters smoothing and forecast.

    Initialisation uses the first two full seasons:
      - level:     mean of season 1
      - trend:     mean per-period change between season 1 and season 2
      - seasonals: season-1 values minus the initial level

    Args:
        data:          Observed series, at least ``2 * season_length`` points.
        season_length: Period of the seasonal cycle (>= 1).
        alpha:         Level smoothing factor in (0, 1).
        beta:          Trend smoothing factor in (0, 1).
        gamma:         Seasonal smoothing factor in (0, 1).
        horizon:       Number of future points to forecast.

    Raises:
        ValueError: On out-of-range parameters or a too-short series.
    """
    _check_open_unit(alpha, "alpha")
    _check_open_unit(beta, "beta")
    _check_open_unit(gamma, "gamma")
    if season_length < 1:
        raise ValueError(f"season_length must be >= 1, got {season_length}.")
    if len(data) < 2 * season_length:
        raise ValueError(
            f"Data must contain at least two full seasons "
            f"({2 * season_length} points), got {len(data)}."
        )

    m = season_length
    values = [float(v) for v in data]
    first, second = values[:m], values[m:2 * m]
    init_level = sum(first) / m
    init_trend = sum((b - a) for a, b in zip(first, second)) / (m * m)

    level = [init_level]
    trend = [init_trend]
    seasonals = [v - init_level for v in first]
    smoothed: list[float] = []

    for t, value in enumerate(values):
        season = seasonals[t]
        smoothed.append(level[-1] + trend[-1] + season)
        current_level = alpha * (value - season) + (1 - alpha) * (level[-1] + trend[-1])
        current_trend = beta * (current_level - level[-1]) + (1 - beta) * trend[-1]
        seasonals.append(gamma * (value - current_level) + (1 - gamma) * season)
        level.append(current_level)
        trend.append(current_trend)

    n = len(values)
    forecast = [
        level[-1] + (h + 1) * trend[-1] + seasonals[n + h % m]
        for h in range(max(0, horizon))
    ]

    return HoltWintersResult(
        level=level[1:],
        trend=trend[1:],
        seasonals=seasonals[:n],
        smoothed_data=smoothed,
        forecast=forecast,
    )


# ── Private helpers ────────────────────────────────────────────────────────────


def _check_open_unit(value: float, name: str) -> None:
    if not 0.0 < value < 1.0:
        raise ValueError(f"{name} must be strictly between 0 and 1, got {value}.")


def _check_half_open_unit(value: float, name: str) -> None:
    if not 0.0 < value <= 1.0:
        raise ValueError(f"{name} must be in (0, 1], got {value}.")
