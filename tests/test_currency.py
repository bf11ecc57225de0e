from __future__ import annotations

import math

import pytest

from position_merger.currency import CurrencyConverter, DefaultRateProvider
from position_merger.models import ExchangeRate


def test_base_currency_amounts_are_unchanged():
    converter = CurrencyConverter(base_currency="usd")
    assert converter.to_base(123.45, "USD") == 123.45


def test_callable_takes_precedence_over_rate_records():
    converter = CurrencyConverter(
        base_currency="USD",
        exchange_rates=[ExchangeRate(from_currency="HKD", to_currency="USD", rate=0.2)],
        convert_to_base=lambda amount, currency: amount * 0.1283,
    )
    assert converter.to_base(1000, "HKD") == pytest.approx(128.3)


@pytest.mark.parametrize("bad", [None, 0, float("nan"), float("inf"), "12.5", True, [1.0]])
def test_bad_callable_results_fall_back_to_identity(bad):
    converter = CurrencyConverter(convert_to_base=lambda amount, currency: bad)
    assert converter.to_base(50.0, "HKD") == 50.0


def test_callable_returning_zero_for_zero_amount_is_kept():
    converter = CurrencyConverter(convert_to_base=lambda amount, currency: 0.0)
    assert converter.to_base(0.0, "HKD") == 0.0


def test_raising_callable_falls_back_to_identity():
    rates = {"USD": 1.0, "HKD": 0.1283}
    converter = CurrencyConverter(convert_to_base=lambda amount, currency: amount * rates[currency])
    assert converter.to_base(10.0, "EUR") == 10.0


def test_direct_rate_record_is_used():
    converter = CurrencyConverter(
        exchange_rates=[ExchangeRate.model_validate({"fromCurrency": "EUR", "toCurrency": "USD", "rate": 1.1})]
    )
    assert converter.to_base(100, "EUR") == pytest.approx(110)


def test_reverse_rate_record_divides():
    converter = CurrencyConverter(
        exchange_rates=[ExchangeRate.model_validate({"from": "USD", "to": "JPY", "rate": 150})]
    )
    assert converter.to_base(300, "JPY") == pytest.approx(2)


def test_first_rate_record_for_a_pair_wins():
    converter = CurrencyConverter(
        exchange_rates=[
            ExchangeRate(from_currency="EUR", to_currency="USD", rate=1.1),
            ExchangeRate(from_currency="EUR", to_currency="USD", rate=9.9),
        ]
    )
    assert converter.to_base(1, "EUR") == pytest.approx(1.1)


def test_non_positive_rate_records_are_ignored():
    converter = CurrencyConverter(
        exchange_rates=[ExchangeRate(from_currency="HKD", to_currency="USD", rate=0)]
    )
    # Falls through to the built-in table.
    assert converter.to_base(1000, "HKD") == pytest.approx(128.4)


def test_default_table_then_identity():
    converter = CurrencyConverter()
    assert converter.to_base(1000, "CNY") == pytest.approx(143.0)
    assert converter.to_base(1000, "XYZ") == 1000


def test_default_provider_supports_cross_rates():
    provider = DefaultRateProvider(rates={"HKD": 0.125, "EUR": 1.25})
    assert provider.rate("EUR", "HKD") == pytest.approx(10.0)
    assert provider.rate("HKD", "HKD") == 1.0
    assert provider.rate("GBP", "USD") is None


def test_non_usd_base_uses_default_cross_rates():
    converter = CurrencyConverter(base_currency="HKD")
    assert converter.to_base(1.0, "USD") == pytest.approx(1 / 0.1284)


def test_from_base_inverts_unit_rate():
    converter = CurrencyConverter(convert_to_base=lambda amount, currency: amount * 0.125)
    assert converter.from_base(12.5, "HKD") == pytest.approx(100.0)


def test_convert_between_two_foreign_currencies():
    converter = CurrencyConverter(
        default_rates=DefaultRateProvider(rates={"HKD": 0.125, "EUR": 1.25})
    )
    assert converter.convert(10.0, "EUR", "HKD") == pytest.approx(100.0)
    assert converter.convert(7.0, "HKD", "hkd") == 7.0


def test_conversion_results_are_finite():
    converter = CurrencyConverter(exchange_rates=[])
    for currency in ("USD", "HKD", "CNY", "BRL", ""):
        assert math.isfinite(converter.to_base(42.0, currency))
        assert math.isfinite(converter.from_base(42.0, currency))
