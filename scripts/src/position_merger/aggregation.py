"""Merge positions that share one listing (same symbol and currency)."""

from __future__ import annotations

from collections.abc import Sequence

from .currency import CurrencyConverter
from .models import MergedPosition, OpenPosition


def aggregate_same_currency(
    group: Sequence[OpenPosition],
    converter: CurrencyConverter,
) -> MergedPosition:
    """Collapse *group* into one row using quantity-weighted averages.

    All members are assumed to quote the same live price, so the first
    member's ``current_price`` is used for the whole group.  Market value is
    recomputed from the merged quantity rather than summed, keeping it
    consistent with the merged average cost.
    """
    first = group[0]
    total_quantity = sum(p.quantity for p in group)
    average_cost = safe_div(sum(p.quantity * p.average_cost for p in group), total_quantity)
    unrealized_pl = sum(p.unrealized_pl for p in group)

    return MergedPosition(
        symbol=first.symbol,
        asset_name=first.asset_name,
        quantity=total_quantity,
        average_cost=average_cost,
        current_price=first.current_price,
        market_value=total_quantity * first.current_price,
        market_value_base=base_market_value(group, converter),
        unrealized_pl=unrealized_pl,
        unrealized_return_percent=safe_div(unrealized_pl, total_quantity * average_cost),
        total_dividends=sum(p.total_dividends for p in group),
        days_open_weighted=safe_div(sum(p.quantity * p.days_open for p in group), total_quantity),
        currency=first.currency,
        accounts=join_accounts(group),
        activity_ids=union_activity_ids(group),
    )


# ------------------------------------------------------------------
# Shared helpers
# ------------------------------------------------------------------


def safe_div(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator``, or 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def base_market_value(group: Sequence[OpenPosition], converter: CurrencyConverter) -> float:
    """Sum of the members' reported market values in the base currency."""
    return sum(converter.to_base(p.market_value, p.currency) for p in group)


def join_accounts(group: Sequence[OpenPosition]) -> str:
    """Alphabetically sorted, de-duplicated account names joined with ``", "``."""
    return ", ".join(sorted({p.account_name for p in group if p.account_name}))


def union_activity_ids(group: Sequence[OpenPosition]) -> tuple[str, ...]:
    return tuple(sorted({activity_id for p in group for activity_id in p.activity_ids}))
