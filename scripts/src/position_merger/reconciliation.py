"""Fold listings of one asset quoted in different currencies into a single row.

Each listing arrives already merged across accounts.  The listing with the
largest base-currency market value becomes the primary.  Every other listing
is expressed as an *equivalent quantity* of primary shares: its market value
converted into the primary currency, divided by the primary's current price.
This treats value parity as share parity and does not model real conversion
ratios between, say, an ADR and an ordinary share.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from .aggregation import safe_div
from .currency import CurrencyConverter
from .models import MergedPosition


def select_primary(base_values: Sequence[float]) -> int:
    """Index of the largest base-currency value; the first one wins ties."""
    best = 0
    for index, value in enumerate(base_values):
        if value > base_values[best]:
            best = index
    return best


def partition_primary(
    listings: Sequence[MergedPosition], primary_index: int
) -> tuple[MergedPosition, list[MergedPosition]]:
    """Split *listings* into the primary and the remaining secondaries, in order."""
    secondaries = [p for index, p in enumerate(listings) if index != primary_index]
    return listings[primary_index], secondaries


def equivalent_quantity(
    secondary: MergedPosition,
    primary: MergedPosition,
    converter: CurrencyConverter,
) -> float:
    """Number of primary shares worth the same as the *secondary* holding.

    Without a primary price there is nothing to compare against, so the
    secondary's own share count is used.
    """
    if primary.current_price == 0:
        return secondary.quantity
    value_in_primary = converter.convert(secondary.market_value, secondary.currency, primary.currency)
    return value_in_primary / primary.current_price


def reconcile_cross_currency(
    listings: Sequence[MergedPosition],
    converter: CurrencyConverter,
    accounts: str,
) -> MergedPosition:
    """Merge per-listing rows of one asset into the primary listing's currency.

    Profit/loss and dividends are converted into the primary currency before
    summing.  The average cost is built in the base currency from each
    listing's ``quantity * average_cost`` and then converted back into the
    primary currency.  ``market_value_base`` on each listing is the sum of its
    accounts' reported values and drives both primary election and weighting.
    """
    base_values = [row.market_value_base for row in listings]
    primary, secondaries = partition_primary(listings, select_primary(base_values))
    currency = primary.currency

    weights = [primary.quantity] + [equivalent_quantity(s, primary, converter) for s in secondaries]
    members = [primary] + secondaries
    merged_quantity = sum(weights)

    cost_base = sum(converter.to_base(p.quantity * p.average_cost, p.currency) for p in members)
    average_cost = converter.from_base(safe_div(cost_base, merged_quantity), currency)

    unrealized_pl = sum(converter.convert(p.unrealized_pl, p.currency, currency) for p in members)
    total_dividends = sum(
        converter.convert(p.total_dividends, p.currency, currency) for p in members
    )
    days_open_weighted = safe_div(
        sum(weight * p.days_open_weighted for weight, p in zip(weights, members)),
        merged_quantity,
    )

    logger.debug(
        "Reconciled {} listing(s) of '{}' into {} ({}): quantity {:.4f}",
        len(members),
        primary.asset_name,
        primary.symbol,
        currency,
        merged_quantity,
    )

    return MergedPosition(
        symbol=primary.symbol,
        asset_name=primary.asset_name,
        quantity=merged_quantity,
        average_cost=average_cost,
        current_price=primary.current_price,
        market_value=merged_quantity * primary.current_price,
        market_value_base=sum(base_values),
        unrealized_pl=unrealized_pl,
        unrealized_return_percent=safe_div(unrealized_pl, merged_quantity * average_cost),
        total_dividends=total_dividends,
        days_open_weighted=days_open_weighted,
        currency=currency,
        accounts=accounts,
        activity_ids=tuple(sorted({a for p in members for a in p.activity_ids})),
    )
