"""
ts-forecaster — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate the input series.
  4. Fit / forecast / evaluate.
  5. Print the result as JSON to stdout.

Install and run::

    pip install -e .
    ts-forecaster --help
    ts-forecaster validate-config
    ts-forecaster var-forecast --file data.csv --lags 2 --steps 5
    ts-forecaster smooth --file data.csv --column sales --method holt
    ts-forecaster backtest --file data.csv --lags 1 --horizon 1
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="ts-forecaster",
    help="Time-series forecasting toolkit: VAR, exponential smoothing, backtests.",
    add_completion=False,
)

SMOOTHING_METHODS = ("ses", "holt", "holt-multiplicative", "holt-winters", "moving-average")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from ts_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from ts_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


def _split_columns(columns: Optional[str]) -> Optional[list[str]]:
    if not columns:
        return None
    return [c.strip() for c in columns.split(",") if c.strip()]


def _load_series_or_exit(file: str, columns: Optional[list[str]]):
    from ts_forecaster.ingestion.series_csv import parse_series_csv

    try:
        table = parse_series_csv(Path(file), columns)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    if not table.observations:
        typer.echo(f"[ERROR] No observations in {file}.", err=True)
        raise typer.Exit(code=1)
    return table


def _emit(payload: dict) -> None:
    typer.echo(json.dumps(payload, indent=2))


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  VAR lag order:     {config.var.lag_order}")
    typer.echo(f"  Forecast steps:    {config.var.forecast_steps}")
    typer.echo(f"  Pivot tolerance:   {config.linalg.pivot_tolerance:g}")
    typer.echo(f"  Smoothing alpha:   {config.smoothing.alpha}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("var-forecast")
def var_forecast(
    file: str = typer.Option(..., "--file", "-f", help="CSV file with a header row."),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated columns to model (default: all)."
    ),
    lags: Optional[int] = typer.Option(None, "--lags", "-p", help="Lag order (default: config)."),
    steps: Optional[int] = typer.Option(None, "--steps", "-n", help="Forecast steps (default: config)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Fit a VAR(p) model to the series and forecast future observations."""
    from ts_forecaster.linalg.matrix import DimensionMismatchError, SingularMatrixError
    from ts_forecaster.models.var import InsufficientDataError, VectorAutoregression

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    table = _load_series_or_exit(file, _split_columns(columns))
    p = lags if lags is not None else config.var.lag_order
    n_steps = steps if steps is not None else config.var.forecast_steps

    try:
        model = VectorAutoregression(p, len(table.columns), config.linalg.pivot_tolerance)
        model.fit(table.observations)
        forecast = model.predict(table.observations, n_steps)
    except (InsufficientDataError, SingularMatrixError, DimensionMismatchError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    _emit({
        "model": f"VAR({p})",
        "columns": table.columns,
        "n_observations": len(table),
        "coefficients": [c.to_list() for c in model.coefficients],
        "forecast": forecast,
    })


@app.command("smooth")
def smooth(
    file: str = typer.Option(..., "--file", "-f", help="CSV file with a header row."),
    column: str = typer.Option(..., "--column", "-c", help="Column to forecast."),
    method: str = typer.Option(
        "ses", "--method", "-m", help=f"One of: {', '.join(SMOOTHING_METHODS)}."
    ),
    horizon: Optional[int] = typer.Option(None, "--horizon", "-n", help="Forecast steps (default: config)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Forecast a single column with a smoothing or moving-average method."""
    from ts_forecaster.models.moving_average import moving_average_forecast
    from ts_forecaster.models.smoothing import (
        double_exponential_smoothing_additive,
        double_exponential_smoothing_multiplicative,
        exponential_smoothing_forecast,
        triple_exponential_smoothing,
    )

    if method not in SMOOTHING_METHODS:
        typer.echo(
            f"[ERROR] Unknown method '{method}'. Choose from: {', '.join(SMOOTHING_METHODS)}.",
            err=True,
        )
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    table = _load_series_or_exit(file, [column])
    data = table.column(column)
    n_steps = horizon if horizon is not None else config.var.forecast_steps
    s = config.smoothing

    try:
        if method == "ses":
            forecast = exponential_smoothing_forecast(data, n_steps, s.alpha)
        elif method == "holt":
            forecast = double_exponential_smoothing_additive(data, s.alpha, s.beta).forecast(n_steps)
        elif method == "holt-multiplicative":
            forecast = double_exponential_smoothing_multiplicative(
                data, s.alpha, s.beta
            ).forecast(n_steps)
        elif method == "holt-winters":
            forecast = triple_exponential_smoothing(
                data, s.season_length, s.alpha, s.beta, s.gamma, n_steps
            ).forecast
        else:
            forecast = moving_average_forecast(data, s.moving_average_window, n_steps)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    _emit({"method": method, "column": column, "forecast": forecast})


@app.command("backtest")
def backtest(
    file: str = typer.Option(..., "--file", "-f", help="CSV file with a header row."),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated columns to model (default: all)."
    ),
    lags: Optional[int] = typer.Option(None, "--lags", "-p", help="VAR lag order (default: config)."),
    horizon: Optional[int] = typer.Option(None, "--horizon", help="Steps ahead (default: config)."),
    min_train: Optional[int] = typer.Option(
        None, "--min-train", help="Observations in the first training window (default: config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rolling-origin backtest of VAR(p) against naive baselines."""
    from ts_forecaster.backtest.evaluator import run_backtest
    from ts_forecaster.backtest.metrics import summarize_by_model
    from ts_forecaster.backtest.models import VarModelAdapter, all_baseline_models
    from ts_forecaster.backtest.splits import generate_rolling_origin_splits

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    table = _load_series_or_exit(file, _split_columns(columns))
    bt = config.backtest
    p = lags if lags is not None else config.var.lag_order

    try:
        folds = generate_rolling_origin_splits(
            len(table),
            min_train_size=min_train if min_train is not None else bt.min_train_size,
            step=bt.step,
            horizon=horizon if horizon is not None else bt.horizon,
        )
        models = [
            VarModelAdapter(p, len(table.columns), config.linalg.pivot_tolerance),
            *all_baseline_models(window=bt.baseline_window),
        ]
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if not folds:
        typer.echo("[ERROR] Series too short to produce any backtest fold.", err=True)
        raise typer.Exit(code=1)

    records = run_backtest(table.observations, folds, models, table.columns)
    summary = summarize_by_model(records)

    _emit({
        "n_folds": len(folds),
        "metrics": {
            name: {
                "n_evaluated": m.n_evaluated,
                "mae": m.mae,
                "rmse": m.rmse,
                "mape": m.mape,
                "directional_accuracy": m.directional_accuracy,
            }
            for name, m in summary.items()
        },
    })


if __name__ == "__main__":
    app()
