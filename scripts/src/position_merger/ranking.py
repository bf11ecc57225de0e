"""Portfolio weights and deterministic ordering of merged positions."""

from __future__ import annotations

from collections.abc import Iterable

from .models import MergedPosition


def apply_position_weights(merged: Iterable[MergedPosition]) -> list[MergedPosition]:
    """Return copies of *merged* with ``position_pct`` filled in.

    Weights come from ``market_value_base``, the sum of each row's
    constituents' own base-currency values, so cross-currency reconciliation
    never feeds into the ranking.  All weights are 0 when the portfolio total
    is not positive.
    """
    rows = list(merged)
    total = sum(row.market_value_base for row in rows)
    return [
        row.model_copy(
            update={"position_pct": 100.0 * row.market_value_base / total if total > 0 else 0.0}
        )
        for row in rows
    ]


def sort_key(row: MergedPosition) -> tuple[float, str, str, str]:
    return (-row.position_pct, row.symbol, row.currency, row.asset_name)


def sort_positions(merged: Iterable[MergedPosition]) -> list[MergedPosition]:
    """Largest weight first; equal weights in ascending symbol order."""
    return sorted(merged, key=sort_key)
