"""Main entry point for the position merger."""

from __future__ import annotations

import sys

from loguru import logger

from .config import get_settings
from .currency import DefaultRateProvider
from .engine import merge_positions
from .loader import load_exchange_rates, load_positions

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | "
    "{message}"
)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, format=_LOG_FORMAT, level=level.upper(), colorize=True)


def main() -> None:
    """Load positions, merge them, and log the consolidated view."""
    settings = get_settings()
    _configure_logging(settings.log_level)
    logger.info("=== Position Merger starting ===")
    logger.info(
        "Config loaded — positions={} rates={} base={} mode={}",
        settings.positions_path,
        settings.exchange_rates_path,
        settings.base_currency,
        settings.merge_mode.value,
    )

    # 1. Read inputs.
    positions = load_positions(settings.positions_path)
    if not positions:
        logger.warning("No open positions found — nothing to do")
        return

    rates = load_exchange_rates(settings.exchange_rates_path) if settings.exchange_rates_path else []

    # 2. Merge and rank.
    merged = merge_positions(
        positions,
        mode=settings.merge_mode,
        exchange_rates=rates,
        base_currency=settings.base_currency,
        default_rates=DefaultRateProvider(rates=settings.fallback_rates),
    )

    # 3. Summary.
    for row in merged:
        logger.info(
            "{:<10} {:>6.2f}% | qty {:>12.4f} @ {:>10.4f} {} | value {:>14.2f} ({:.2f} {}) | {}",
            row.symbol,
            row.position_pct,
            row.quantity,
            row.average_cost,
            row.currency,
            row.market_value,
            row.market_value_base,
            settings.base_currency,
            row.accounts,
        )

    total_base = sum(row.market_value_base for row in merged)
    logger.info(
        "=== Done — {} position(s) merged into {} row(s), total {:.2f} {} ===",
        len(positions),
        len(merged),
        total_base,
        settings.base_currency,
    )


if __name__ == "__main__":
    main()
