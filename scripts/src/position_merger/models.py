"""Pydantic V2 data models for the position merger."""

from datetime import date, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MergeMode(str, Enum):
    """How open positions are grouped before merging."""

    BY_LISTING = "by-listing"
    BY_ASSET = "by-asset"


class OpenPosition(BaseModel):
    """A single open position held in one account, in its listing currency.

    Fields accept both snake_case names and the camelCase names used by the
    portfolio API, e.g. ``asset_name`` or ``assetName``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default="", description="Source position identifier")
    symbol: str = Field(..., description="Listing ticker, e.g. BABA or 9988.HK")
    asset_name: str = Field(default="", description="Issuer name shared by listings of one asset")
    quantity: float = Field(..., ge=0, description="Number of shares held")
    average_cost: float = Field(..., ge=0, description="Average cost per share in `currency`")
    current_price: float = Field(..., ge=0, description="Latest price per share in `currency`")
    market_value: float = Field(..., description="Market value in `currency`")
    unrealized_pl: float = Field(
        default=0.0, alias="unrealizedPL", description="Unrealized profit/loss in `currency`"
    )
    unrealized_return_percent: float = Field(
        default=0.0, description="Unrealized return as a fraction of cost basis"
    )
    total_dividends: float = Field(default=0.0, description="Dividends received in `currency`")
    days_open: float = Field(default=0.0, ge=0, description="Days since the position was opened")
    open_date: date | None = Field(default=None, description="Date the position was opened")
    account_id: str = Field(default="", description="Holding account identifier")
    account_name: str = Field(default="", description="Holding account display name")
    currency: str = Field(..., description="ISO 4217 code of the listing currency")
    activity_ids: tuple[str, ...] = Field(
        default=(), description="Source transaction identifiers backing this position"
    )


class MergedPosition(BaseModel):
    """One row of the consolidated view, produced by merging a group of positions."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    symbol: str = Field(..., description="Symbol of the representative listing")
    asset_name: str = Field(default="", description="Issuer name of the representative listing")
    quantity: float = Field(..., description="Merged share count, in representative-listing shares")
    average_cost: float = Field(..., description="Weighted average cost per share in `currency`")
    current_price: float = Field(..., description="Price of the representative listing")
    market_value: float = Field(..., description="quantity x current_price, in `currency`")
    market_value_base: float = Field(
        default=0.0, description="Sum of constituent market values in the base currency"
    )
    unrealized_pl: float = Field(
        default=0.0, alias="unrealizedPL", description="Unrealized profit/loss in `currency`"
    )
    unrealized_return_percent: float = Field(
        default=0.0, description="Unrealized return as a fraction of merged cost basis"
    )
    total_dividends: float = Field(default=0.0, description="Dividends received in `currency`")
    days_open_weighted: float = Field(default=0.0, description="Quantity-weighted days open")
    currency: str = Field(..., description="Currency inherited from the representative listing")
    accounts: str = Field(default="", description="Sorted, de-duplicated account names")
    activity_ids: tuple[str, ...] = Field(default=(), description="Union of constituent activity ids")
    position_pct: float = Field(default=0.0, description="Share of total portfolio value, 0-100")

    def as_open_position(self) -> OpenPosition:
        """Return this row as an ``OpenPosition`` so it can be merged again."""
        return OpenPosition(
            symbol=self.symbol,
            asset_name=self.asset_name,
            quantity=self.quantity,
            average_cost=self.average_cost,
            current_price=self.current_price,
            market_value=self.market_value,
            unrealized_pl=self.unrealized_pl,
            unrealized_return_percent=self.unrealized_return_percent,
            total_dividends=self.total_dividends,
            days_open=self.days_open_weighted,
            account_name=self.accounts,
            currency=self.currency,
            activity_ids=self.activity_ids,
        )


class ExchangeRate(BaseModel):
    """A conversion rate: one unit of ``from_currency`` is worth ``rate`` ``to_currency``."""

    model_config = ConfigDict(frozen=True)

    from_currency: str = Field(
        ...,
        validation_alias=AliasChoices("from_currency", "fromCurrency", "from"),
        description="Source currency code",
    )
    to_currency: str = Field(
        ...,
        validation_alias=AliasChoices("to_currency", "toCurrency", "to"),
        description="Target currency code",
    )
    rate: float = Field(..., description="Units of `to_currency` per unit of `from_currency`")
    timestamp: datetime | None = Field(default=None, description="When the rate was observed")
