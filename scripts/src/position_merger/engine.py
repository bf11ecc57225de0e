"""Consolidate open positions into a single ranked view."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from .currency import ConvertToBase, CurrencyConverter, DefaultRateProvider
from .grouping import group_positions
from .models import ExchangeRate, MergedPosition, MergeMode, OpenPosition
from .ranking import apply_position_weights, sort_positions
from .strategies import strategy_for


def merge_positions(
    positions: Iterable[OpenPosition],
    mode: MergeMode | str = MergeMode.BY_LISTING,
    exchange_rates: Iterable[ExchangeRate] | None = None,
    base_currency: str = "USD",
    convert_to_base: ConvertToBase | None = None,
    default_rates: DefaultRateProvider | Mapping[str, float] | None = None,
) -> list[MergedPosition]:
    """Merge *positions* and return them ranked by share of portfolio value.

    Parameters
    ----------
    positions:
        Open positions, possibly spread over several accounts and currencies.
        The sequence is read but never modified.
    mode:
        ``by-listing`` merges identical ``(symbol, currency)`` listings;
        ``by-asset`` merges every listing sharing an asset name.
    exchange_rates:
        Optional rate records used when *convert_to_base* is not given.
    base_currency:
        Currency used for weighting and cross-currency arithmetic.
    convert_to_base:
        Optional ``(amount, from_currency) -> amount_in_base`` callable.
    default_rates:
        Fallback rate provider, or a plain mapping of reference-currency
        (USD) units per currency.  Defaults to the built-in table.

    Returns
    -------
    list[MergedPosition]
        Sorted by ``position_pct`` descending, then ``symbol`` ascending.
    """
    strategy = strategy_for(mode)
    if isinstance(default_rates, Mapping):
        default_rates = DefaultRateProvider(rates=dict(default_rates))
    converter = CurrencyConverter(
        base_currency=base_currency,
        exchange_rates=exchange_rates,
        convert_to_base=convert_to_base,
        default_rates=default_rates,
    )

    groups = group_positions(positions, strategy.group_key)
    merged = [strategy.reduce(group, converter) for group in groups.values()]
    logger.debug(
        "Merged {} position(s) into {} row(s) ({}, base {})",
        sum(len(group) for group in groups.values()),
        len(merged),
        strategy.mode.value,
        converter.base_currency,
    )
    return sort_positions(apply_position_weights(merged))
