"""Currency normalisation for merging positions held in different currencies."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from .models import ExchangeRate

ConvertToBase = Callable[[float, str], "float | None"]

# Units of USD per one unit of each currency, as of 2026-01-07.
DEFAULT_FALLBACK_RATES: dict[str, float] = {
    "USD": 1.0,
    "HKD": 0.1284,
    "CNY": 0.1430,
}


@dataclass(frozen=True)
class DefaultRateProvider:
    """Last-resort rate table used when no caller rates cover a currency.

    ``rates`` holds units of ``reference_currency`` per one unit of each
    currency.  Any two currencies present in the table can be converted
    through the reference currency.
    """

    rates: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_FALLBACK_RATES))
    reference_currency: str = "USD"

    def rate(self, from_currency: str, to_currency: str) -> float | None:
        """Return units of ``to_currency`` per one ``from_currency``, or ``None`` if unknown."""
        source = from_currency.upper()
        target = to_currency.upper()
        if source == target:
            return 1.0
        source_rate = self._reference_rate(source)
        target_rate = self._reference_rate(target)
        if source_rate is None or target_rate is None:
            return None
        return source_rate / target_rate

    def _reference_rate(self, currency: str) -> float | None:
        if currency == self.reference_currency.upper():
            return 1.0
        value = self.rates.get(currency)
        if value is None or not math.isfinite(value) or value <= 0:
            return None
        return value


class CurrencyConverter:
    """Convert amounts to and from a single base currency.

    Resolution order for ``to_base``:

    1. amounts already in the base currency are returned unchanged;
    2. the caller's ``convert_to_base`` callable, when supplied;
    3. a direct ``currency -> base`` or reverse ``base -> currency`` rate
       from ``exchange_rates``;
    4. the ``default_rates`` provider;
    5. identity, i.e. the amount is returned unconverted.

    Conversion never raises; a missing rate only degrades accuracy.

    Parameters
    ----------
    base_currency:
        ISO 4217 code every amount is normalised into.
    exchange_rates:
        Optional rate records.  The first record for a currency pair wins.
    convert_to_base:
        Optional ``(amount, from_currency) -> amount_in_base`` callable.
    default_rates:
        Fallback table; defaults to a ``DefaultRateProvider`` with
        ``DEFAULT_FALLBACK_RATES``.
    """

    def __init__(
        self,
        base_currency: str = "USD",
        exchange_rates: Iterable[ExchangeRate] | None = None,
        convert_to_base: ConvertToBase | None = None,
        default_rates: DefaultRateProvider | None = None,
    ) -> None:
        self.base_currency = base_currency.upper()
        self._convert_to_base = convert_to_base
        self._default_rates = default_rates if default_rates is not None else DefaultRateProvider()
        self._rates: dict[tuple[str, str], float] = {}
        for record in exchange_rates or ():
            pair = (record.from_currency.upper(), record.to_currency.upper())
            self._rates.setdefault(pair, record.rate)
        self._unconverted: set[str] = set()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def to_base(self, amount: float, currency: str) -> float:
        """Return *amount* expressed in the base currency."""
        code = currency.upper()
        if not code or code == self.base_currency:
            return amount

        if self._convert_to_base is not None:
            return self._call_converter(amount, currency)

        rate = self._lookup_rate(code)
        if rate is not None:
            return amount * rate

        if code not in self._unconverted:
            self._unconverted.add(code)
            logger.debug(
                "No {}->{} rate available; leaving amounts unconverted",
                code,
                self.base_currency,
            )
        return amount

    def from_base(self, amount: float, currency: str) -> float:
        """Return a base-currency *amount* expressed in *currency*."""
        unit = self.to_base(1.0, currency)
        if unit == 0:
            return amount
        return amount / unit

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert *amount* between two currencies through the base currency."""
        if from_currency.upper() == to_currency.upper():
            return amount
        return self.from_base(self.to_base(amount, from_currency), to_currency)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _call_converter(self, amount: float, currency: str) -> float:
        try:
            result = self._convert_to_base(amount, currency)  # type: ignore[misc]
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Converter failed for {} {}: {}; using the unconverted amount",
                amount,
                currency,
                exc,
            )
            return amount
        if (
            isinstance(result, bool)
            or not isinstance(result, (int, float))
            or not math.isfinite(result)
            or (result == 0 and amount != 0)
        ):
            logger.warning(
                "Converter returned {!r} for {} {}; using the unconverted amount",
                result,
                amount,
                currency,
            )
            return amount
        return result

    def _lookup_rate(self, code: str) -> float | None:
        direct = self._rates.get((code, self.base_currency))
        if direct is not None and direct > 0:
            return direct

        reverse = self._rates.get((self.base_currency, code))
        if reverse is not None and reverse > 0:
            return 1.0 / reverse

        return self._default_rates.rate(code, self.base_currency)
