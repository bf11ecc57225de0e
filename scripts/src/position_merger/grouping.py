"""Partition open positions into merge groups."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable

from .models import OpenPosition


def listing_key(position: OpenPosition) -> tuple[str, str]:
    """Group key for one tradable listing: ``(symbol, currency)``."""
    return (position.symbol, position.currency.upper())


def asset_key(position: OpenPosition) -> str:
    """Group key for one underlying asset: its name, or the symbol when unnamed."""
    return position.asset_name or position.symbol


def group_positions(
    positions: Iterable[OpenPosition],
    key: Callable[[OpenPosition], Hashable],
) -> dict[Hashable, list[OpenPosition]]:
    """Return positions grouped by *key*, in order of each key's first occurrence."""
    groups: dict[Hashable, list[OpenPosition]] = {}
    for position in positions:
        groups.setdefault(key(position), []).append(position)
    return groups
