"""
Logging setup for ts-forecaster.

The CLI calls ``configure_logging(config.logging)`` before loading any data.
Library modules only ever do ``logger = logging.getLogger(__name__)``.

Handlers
--------
- stderr, always. stdout is kept for the JSON payload each command prints.
- a UTF-8 log file, when ``log_file`` is set (parent dirs are created).

With ``json_format = true`` each record becomes one line such as::

    {"ts": "2026-02-24T15:00:00Z", "level": "WARNING",
     "logger": "ts_forecaster.backtest.evaluator", "msg": "Skipping model ..."}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ts_forecaster.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Keys present on every LogRecord; anything else was passed through ``extra=``.
_RESERVED_KEYS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime


class _JsonFormatter(_UtcFormatter):
    """One JSON object per record, with ``extra=`` fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": self.formatTime(record, LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _RESERVED_KEYS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _attach(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Install root handlers according to ``config``.

    Replaces any handlers already on the root logger, so calling it twice
    (e.g. from tests) does not duplicate output.

    Args:
        config: The ``[logging]`` section of ``AppConfig``.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = (
        _JsonFormatter()
        if config.json_format
        else _UtcFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers = [_attach(logging.StreamHandler(sys.stderr), level, formatter)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _attach(logging.FileHandler(log_path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)
