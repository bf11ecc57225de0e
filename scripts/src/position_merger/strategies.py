"""Merge strategies: how positions are grouped and how a group is reduced."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Protocol

from .aggregation import aggregate_same_currency, join_accounts
from .currency import CurrencyConverter
from .grouping import asset_key, group_positions, listing_key
from .models import MergedPosition, MergeMode, OpenPosition
from .reconciliation import reconcile_cross_currency


class MergeStrategy(Protocol):
    mode: MergeMode

    def group_key(self, position: OpenPosition) -> Hashable: ...

    def reduce(
        self, group: Sequence[OpenPosition], converter: CurrencyConverter
    ) -> MergedPosition: ...


class ListingMerge:
    """Merge the same listing held across several accounts."""

    mode = MergeMode.BY_LISTING

    def group_key(self, position: OpenPosition) -> Hashable:
        return listing_key(position)

    def reduce(
        self, group: Sequence[OpenPosition], converter: CurrencyConverter
    ) -> MergedPosition:
        return aggregate_same_currency(group, converter)


class AssetMerge:
    """Merge every listing of one underlying asset, across currencies.

    Positions are first merged per listing with the plain same-listing
    aggregation; only two or more distinct listings are reconciled across
    currencies.  Groups whose members disagree on ``asset_name`` are reduced
    with the plain aggregation as a whole.
    """

    mode = MergeMode.BY_ASSET

    def group_key(self, position: OpenPosition) -> Hashable:
        return asset_key(position)

    def reduce(
        self, group: Sequence[OpenPosition], converter: CurrencyConverter
    ) -> MergedPosition:
        if len({p.asset_name for p in group}) > 1:
            return aggregate_same_currency(group, converter)
        listings = [
            aggregate_same_currency(members, converter)
            for members in group_positions(group, listing_key).values()
        ]
        if len(listings) == 1:
            return listings[0]
        return reconcile_cross_currency(listings, converter, join_accounts(group))


_STRATEGIES: dict[MergeMode, MergeStrategy] = {
    MergeMode.BY_LISTING: ListingMerge(),
    MergeMode.BY_ASSET: AssetMerge(),
}


def strategy_for(mode: MergeMode | str) -> MergeStrategy:
    """Return the strategy for *mode*; raises ``ValueError`` for unknown modes."""
    return _STRATEGIES[MergeMode(mode)]
