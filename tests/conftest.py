"""
Shared pytest fixtures for the ts-forecaster test suite.

Provides:
  - ``bivariate_series``: 10 observations of two roughly linearly increasing
    variables.
  - ``var1_coefficients`` / ``var1_series``: a series generated exactly by a
    known VAR(1) process, for coefficient-recovery tests.
  - ``write_csv``: factory writing CSV text to a temp file.
  - an autouse fixture restoring the root logger after each test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


# ── Series fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
def bivariate_series() -> list[list[float]]:
    """Ten-row bivariate series with a mild upward trend and noise."""
    return [
        [1.0, 2.0],
        [1.5, 2.5],
        [1.3, 2.7],
        [1.8, 3.1],
        [2.0, 3.0],
        [2.2, 3.4],
        [2.5, 3.7],
        [2.3, 3.5],
        [2.8, 4.0],
        [3.0, 4.2],
    ]


@pytest.fixture
def var1_coefficients() -> list[list[float]]:
    """Stable 2x2 transition matrix used to generate ``var1_series``."""
    return [[0.5, 0.1], [0.2, 0.3]]


@pytest.fixture
def var1_series(var1_coefficients: list[list[float]]) -> list[list[float]]:
    """Twelve observations of x_{t+1} = A · x_t, starting from [1, 2]."""
    a = var1_coefficients
    series = [[1.0, 2.0]]
    for _ in range(11):
        x = series[-1]
        series.append([
            a[0][0] * x[0] + a[0][1] * x[1],
            a[1][0] * x[0] + a[1][1] * x[1],
        ])
    return series


# ── File fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a function that writes CSV content to ``tmp_path / name``."""

    def _write(content: str, name: str = "series.csv") -> Path:
        p = tmp_path / name
        p.write_text(content, encoding="utf-8")
        return p

    return _write


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo root-logger changes made by ``configure_logging`` (CLI commands)."""
    import logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
