"""Read open positions and exchange rates from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel

from .models import ExchangeRate, OpenPosition


def load_positions(path: str | Path) -> list[OpenPosition]:
    """Return every valid record in *path* as an ``OpenPosition``.

    The file must hold a JSON array of objects whose keys match the
    ``OpenPosition`` fields, in snake_case or camelCase.  Invalid records are
    skipped with a warning.
    """
    positions = _load_records(path, OpenPosition)
    logger.info("Loaded {} open position(s) from {}", len(positions), path)
    return positions


def load_exchange_rates(path: str | Path) -> list[ExchangeRate]:
    """Return every valid record in *path* as an ``ExchangeRate``."""
    rates = _load_records(path, ExchangeRate)
    logger.info("Loaded {} exchange rate(s) from {}", len(rates), path)
    return rates


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------


def _load_records(path: str | Path, model: type[BaseModel]) -> list[Any]:
    """Parse *path* as a JSON array and validate each element against *model*.

    Raises ``OSError`` when the file cannot be read and ``ValueError`` when it
    is not a JSON array.
    """
    logger.debug("Reading {} records from {}…", model.__name__, path)
    rows = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"Expected a JSON array in {path}, got {type(rows).__name__}")

    records: list[Any] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Skipping invalid {} row {}: {}", model.__name__, row, exc)
    return records
