from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from practice_desk.core.defaults import CONVERSION_PRECISION, MAX_EXCHANGE_RATE

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    symbol: str
    name: str
    decimals: int = 2


CURRENCIES: dict[str, CurrencyInfo] = {
    "INR": CurrencyInfo("INR", "₹", "Indian Rupee"),
    "USD": CurrencyInfo("USD", "$", "US Dollar"),
    "EUR": CurrencyInfo("EUR", "€", "Euro"),
    "GBP": CurrencyInfo("GBP", "£", "British Pound"),
    "AED": CurrencyInfo("AED", "د.إ", "UAE Dirham"),
    "JPY": CurrencyInfo("JPY", "¥", "Japanese Yen", decimals=0),
}
SUPPORTED_CURRENCIES = tuple(CURRENCIES)


def normalize_currency(code: str | None, default: str = "") -> str:
    return str(code or "").strip().upper() or default


def _group_indian(digits: str) -> str:
    # Last three digits, then pairs: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_amount(amount: float, decimals: int = 2) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    grouped = _group_indian(whole)
    return f"{sign}{grouped}.{fraction}" if decimals > 0 else f"{sign}{grouped}"


def format_currency(amount: float, currency: str, *, show_symbol: bool = True) -> str:
    code = normalize_currency(currency)
    info = CURRENCIES.get(code)
    decimals = info.decimals if info else 2
    formatted = format_amount(amount, decimals)
    if not show_symbol or info is None:
        return formatted
    return f"{info.symbol}{formatted}"


def format_amount_with_currency(amount: float, currency: str, *, show_code: bool = True) -> str:
    formatted = format_currency(amount, currency)
    return f"{formatted} {normalize_currency(currency)}" if show_code else formatted


def convert_amount(
    amount: float,
    from_currency: str,
    to_currency: str,
    exchange_rates: Mapping[str, float] | None,
) -> float:
    """Convert with a source -> target rate; an unusable rate returns the input unchanged."""
    if not amount:
        return 0.0
    source = normalize_currency(from_currency)
    if source == normalize_currency(to_currency):
        return float(amount)
    rate = (exchange_rates or {}).get(source)
    if rate is None:
        LOGGER.debug("Missing exchange rate for %s to %s.", source, to_currency)
        return float(amount)
    if float(rate) <= 0:
        LOGGER.debug("Invalid exchange rate for %s: %s", source, rate)
        return float(amount)
    return round(float(amount) * float(rate), CONVERSION_PRECISION)


@dataclass(frozen=True)
class RateCheck:
    missing_rates: list[str]
    invalid_rates: list[str]

    @property
    def is_valid(self) -> bool:
        return not self.missing_rates and not self.invalid_rates

    def error_message(self) -> str | None:
        if self.missing_rates:
            return f"Missing exchange rates for: {', '.join(self.missing_rates)}"
        if self.invalid_rates:
            return (
                f"Invalid exchange rates for: {', '.join(self.invalid_rates)}. "
                f"Rates must be > 0 and <= {MAX_EXCHANGE_RATE:g}"
            )
        return None


def validate_exchange_rates(
    currencies: Iterable[str],
    exchange_rates: Mapping[str, float] | None,
    target_currency: str,
) -> RateCheck:
    target = normalize_currency(target_currency)
    rates = exchange_rates or {}
    missing: list[str] = []
    invalid: list[str] = []
    for currency in currencies:
        code = normalize_currency(currency)
        if code == target or code in missing or code in invalid:
            continue
        rate = rates.get(code)
        if rate is None:
            missing.append(code)
        elif float(rate) <= 0 or float(rate) > MAX_EXCHANGE_RATE:
            invalid.append(code)
    return RateCheck(missing_rates=missing, invalid_rates=invalid)
