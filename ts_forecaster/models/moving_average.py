"""
Trailing simple moving averages.

``moving_average`` returns one value per full window, aligned to the window's
last element, so the result has ``len(data) - window + 1`` entries.
"""

from __future__ import annotations

from collections.abc import Sequence


def moving_average(data: Sequence[float], window: int) -> list[float]:
    """Trailing simple moving average over ``window`` points.

    Raises:
        ValueError: If ``window < 1`` or ``window > len(data)``.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}.")
    if window > len(data):
        raise ValueError(
            f"window ({window}) cannot exceed the number of observations ({len(data)})."
        )

    values = [float(v) for v in data]
    running = sum(values[:window])
    result = [running / window]
    for i in range(window, len(values)):
        running += values[i] - values[i - window]
        result.append(running / window)
    return result


def moving_average_forecast(data: Sequence[float], window: int, horizon: int) -> list[float]:
    """Flat forecast: the mean of the last ``window`` observations, ``horizon`` times."""
    last = moving_average(data, window)[-1]
    return [last] * max(0, horizon)
