"""Application configuration loaded from environment variables via pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import DEFAULT_FALLBACK_RATES
from .models import MergeMode


class Settings(BaseSettings):
    """Position merger configuration.

    All fields are loaded from environment variables prefixed with ``POSITION_MERGER_``.

    Example::

        export POSITION_MERGER_POSITIONS_PATH="/data/open-positions.json"
        export POSITION_MERGER_MERGE_MODE=by-asset
        export POSITION_MERGER_FALLBACK_RATES='{"HKD": 0.1283, "CNY": 0.1401}'
    """

    model_config = SettingsConfigDict(
        env_prefix="POSITION_MERGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    positions_path: str = Field(
        ...,
        description="Path to a JSON array of open positions",
    )
    exchange_rates_path: str | None = Field(
        default=None,
        description="Optional path to a JSON array of exchange rate records",
    )
    base_currency: str = Field(
        default="USD",
        description="Currency used for weighting and cross-currency arithmetic",
    )
    merge_mode: MergeMode = Field(
        default=MergeMode.BY_LISTING,
        description="by-listing merges identical listings; by-asset merges dual listings too",
    )
    fallback_rates: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_FALLBACK_RATES),
        description="USD per unit of each currency, used when no other rate is available",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level written to stderr",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    return Settings()  # type: ignore[call-arg]
