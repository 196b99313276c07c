"""
CSV loader for multivariate numeric time series.

Format — comma delimited, with a header row naming each variable.
One row per observation, oldest first::

    gdp,consumption
    1.0,2.0
    1.5,2.5

Column selection:
  ``columns=None``          → every column, in header order
  ``columns=["b", "a"]``    → only those columns, in the given order

Every selected cell must parse as a finite float (``nan`` and ``inf``
are rejected).  All rows are checked before anything is returned; if any
cell fails, a single ``ValueError`` lists the first 10 failures.
"""

from __future__ import annotations

import csv
import logging
import math
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)


class SeriesTable(BaseModel):
    """Parsed series: variable names and observation vectors (oldest first)."""

    model_config = ConfigDict(frozen=True)

    columns: list[str]
    observations: list[list[float]]

    @model_validator(mode="after")
    def check_row_widths(self) -> "SeriesTable":
        width = len(self.columns)
        for i, obs in enumerate(self.observations):
            if len(obs) != width:
                raise ValueError(
                    f"Observation {i} has {len(obs)} values, expected {width}."
                )
        return self

    def column(self, name: str) -> list[float]:
        """Return one variable as a flat list."""
        try:
            idx = self.columns.index(name)
        except ValueError:
            raise KeyError(f"Unknown column '{name}'. Available: {self.columns}") from None
        return [obs[idx] for obs in self.observations]

    def __len__(self) -> int:
        return len(self.observations)


def parse_series_csv(path: Path, columns: Optional[list[str]] = None) -> SeriesTable:
    """Parse a CSV file into a validated :class:`SeriesTable`.

    Args:
        path:    Path to the CSV file (must exist).
        columns: Columns to keep, in order.  Defaults to all header columns.

    Returns:
        ``SeriesTable`` with one observation per data row.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the header is missing, requested columns are absent,
            or any selected cell is not numeric.
    """
    if not path.exists():
        raise FileNotFoundError(f"Series CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        header = [name.strip() for name in reader.fieldnames]
        selected = [c.strip() for c in columns] if columns else header
        missing = [c for c in selected if c not in header]
        if missing:
            raise ValueError(
                f"CSV missing requested columns: {missing}\n"
                f"Found columns: {header}"
            )

        rows = [
            {(k or "").strip(): (v or "") for k, v in row.items()}
            for row in reader
        ]

    if not rows:
        logger.warning("Series CSV is empty (header only): %s", path)
        return SeriesTable(columns=selected, observations=[])

    observations: list[list[float]] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            observations.append([_parse_float(row, c) for c in selected])
        except ValueError as exc:
            errors.append((line_no, str(exc)))

    if errors:
        max_shown = 10
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d observations x %d variables from %s",
                len(observations), len(selected), path.name)
    return SeriesTable(columns=selected, observations=observations)


# ── Private helpers ────────────────────────────────────────────────────────────

def _parse_float(row: dict[str, str], key: str) -> float:
    """Parse a required numeric field from a CSV row."""
    raw = row.get(key, "").strip()
    if not raw:
        raise ValueError(f"Required numeric field '{key}' is empty.")
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid number for '{key}': '{raw}'.")
    if not math.isfinite(value):
        raise ValueError(f"Non-finite value for '{key}': '{raw}'.")
    return value
