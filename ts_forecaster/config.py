"""
Configuration for ts-forecaster.

Layers, lowest precedence first:
  1. ``config/default.toml``  (committed defaults)
  2. ``local.toml`` beside it (optional, not committed)
  3. ``.env`` at the project root, loaded into the process environment
  4. ``TS_FORECASTER_*`` environment variables

Call ``load_config()`` to get a frozen ``AppConfig``.

The CLI builds models from an ``AppConfig`` instance; library code takes
plain arguments and never reads configuration itself.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from ts_forecaster.linalg.matrix import PIVOT_TOLERANCE

# ── Sub-config models ─────────────────────────────────────────────────────────


class LinalgConfig(BaseModel):
    """Numeric tolerances for the matrix primitive."""

    model_config = ConfigDict(frozen=True)

    pivot_tolerance: float = PIVOT_TOLERANCE

    @field_validator("pivot_tolerance")
    @classmethod
    def validate_tolerance(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"pivot_tolerance must be > 0, got {v}.")
        return v


class VarConfig(BaseModel):
    """Vector autoregression defaults."""

    model_config = ConfigDict(frozen=True)

    lag_order: int = 2
    forecast_steps: int = 3

    @field_validator("lag_order", "forecast_steps")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be >= 1, got {v}.")
        return v


class SmoothingConfig(BaseModel):
    """Defaults for the exponential-smoothing and moving-average routines."""

    model_config = ConfigDict(frozen=True)

    alpha: float = 0.5
    beta: float = 0.3
    gamma: float = 0.1
    season_length: int = 4
    moving_average_window: int = 3

    @field_validator("alpha", "beta", "gamma")
    @classmethod
    def validate_factor(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError(f"Smoothing factor must be in (0.0, 1.0), got {v}.")
        return v

    @field_validator("season_length", "moving_average_window")
    @classmethod
    def validate_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Length must be >= 1, got {v}.")
        return v


class BacktestConfig(BaseModel):
    """Rolling-origin backtesting parameters."""

    model_config = ConfigDict(frozen=True)

    min_train_size: int = 10
    step: int = 1
    horizon: int = 1
    baseline_window: int = 5


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    linalg: LinalgConfig = LinalgConfig()
    var: VarConfig = VarConfig()
    smoothing: SmoothingConfig = SmoothingConfig()
    backtest: BacktestConfig = BacktestConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

# env var -> (section, key); a None section targets the top level.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "TS_FORECASTER_LOG_LEVEL": ("logging", "level"),
    "TS_FORECASTER_LAG_ORDER": ("var", "lag_order"),
    "TS_FORECASTER_PIVOT_TOLERANCE": ("linalg", "pivot_tolerance"),
    "TS_FORECASTER_DEBUG": (None, "debug"),
}


def _find_project_root() -> Path:
    """Return the nearest ancestor of this package holding ``pyproject.toml``."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return here.parent


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build an ``AppConfig`` from every configuration layer.

    Args:
        config_path: TOML file to start from. When omitted,
            ``config/default.toml`` under the project root is used. A
            ``local.toml`` next to it, if present, is merged on top.

    Returns:
        The validated, frozen configuration.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        pydantic.ValidationError: A merged value is out of range.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local_path = path.with_name("local.toml")
    if local_path.is_file():
        raw = _deep_merge(raw, _read_toml(local_path))

    return _build_app_config(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested tables merge key by key."""
    merged = dict(base)
    for key, val in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(val, dict):
            merged[key] = _deep_merge(current, val)
        else:
            merged[key] = val
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Copy set ``TS_FORECASTER_*`` variables into ``raw``.

    Values stay strings and are coerced by pydantic, except the debug flag,
    which accepts ``1``, ``true`` or ``yes`` in any case.
    """
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value: Any = os.environ.get(env_name)
        if not value:
            continue
        if section is None:
            raw[key] = value.lower() in ("1", "true", "yes")
        else:
            raw.setdefault(section, {})[key] = value
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    sections = {
        "linalg": LinalgConfig,
        "var": VarConfig,
        "smoothing": SmoothingConfig,
        "backtest": BacktestConfig,
        "logging": LoggingConfig,
    }
    return AppConfig(
        **{name: model(**raw.get(name, {})) for name, model in sections.items()},
        debug=raw.get("debug", False),
    )
