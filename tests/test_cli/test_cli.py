"""
Tests for the typer CLI.

Each test writes a small config (log level ERROR, so stdout carries only the
JSON payload) and a CSV series into ``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ts_forecaster.cli import app

runner = CliRunner()

SERIES_CSV = (
    "a,b\n"
    "1.0,2.0\n1.5,2.5\n1.3,2.7\n1.8,3.1\n2.0,3.0\n"
    "2.2,3.4\n2.5,3.7\n2.3,3.5\n2.8,4.0\n3.0,4.2\n"
    "3.1,4.4\n3.3,4.3\n3.6,4.8\n3.5,4.9\n3.9,5.1\n"
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    p = tmp_path / "config.toml"
    p.write_text('[logging]\nlevel = "ERROR"\n[backtest]\nmin_train_size = 8\n', encoding="utf-8")
    return p


@pytest.fixture
def series_file(tmp_path: Path) -> Path:
    p = tmp_path / "series.csv"
    p.write_text(SERIES_CSV, encoding="utf-8")
    return p


def test_validate_config(config_file):
    result = runner.invoke(app, ["validate-config", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "[OK] Config valid." in result.stdout


def test_validate_config_missing_file(tmp_path):
    result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "none.toml")])
    assert result.exit_code == 1


def test_var_forecast_outputs_json(config_file, series_file):
    result = runner.invoke(
        app,
        ["var-forecast", "--file", str(series_file), "--lags", "2", "--steps", "3",
         "--config", str(config_file)],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["model"] == "VAR(2)"
    assert payload["columns"] == ["a", "b"]
    assert len(payload["coefficients"]) == 2
    assert len(payload["forecast"]) == 3
    assert all(len(v) == 2 for v in payload["forecast"])


def test_var_forecast_too_many_lags_fails(config_file, series_file):
    result = runner.invoke(
        app,
        ["var-forecast", "--file", str(series_file), "--lags", "20", "--config", str(config_file)],
    )
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


def test_var_forecast_missing_file_fails(config_file, tmp_path):
    result = runner.invoke(
        app,
        ["var-forecast", "--file", str(tmp_path / "none.csv"), "--config", str(config_file)],
    )
    assert result.exit_code == 1


def test_var_forecast_nan_cell_fails(config_file, tmp_path):
    csv_path = tmp_path / "with_nan.csv"
    csv_path.write_text(SERIES_CSV.replace("2.2,3.4", "nan,3.4"), encoding="utf-8")
    result = runner.invoke(
        app,
        ["var-forecast", "--file", str(csv_path), "--lags", "1", "--config", str(config_file)],
    )
    assert result.exit_code == 1
    assert "Non-finite" in result.output
    assert "NaN" not in result.stdout


@pytest.mark.parametrize(
    "method", ["ses", "holt", "holt-multiplicative", "holt-winters", "moving-average"]
)
def test_smooth_methods(config_file, series_file, method):
    result = runner.invoke(
        app,
        ["smooth", "--file", str(series_file), "--column", "a", "--method", method,
         "--horizon", "4", "--config", str(config_file)],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["method"] == method
    assert len(payload["forecast"]) == 4


def test_smooth_unknown_method(config_file, series_file):
    result = runner.invoke(
        app,
        ["smooth", "--file", str(series_file), "--column", "a", "--method", "arima",
         "--config", str(config_file)],
    )
    assert result.exit_code == 1


def test_backtest_reports_every_model(config_file, series_file):
    result = runner.invoke(
        app,
        ["backtest", "--file", str(series_file), "--lags", "1", "--config", str(config_file)],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["n_folds"] == 7
    assert set(payload["metrics"]) == {"var_p1", "last_value", "rolling_mean", "drift"}
