from __future__ import annotations

import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.billing import (  # noqa: E402
    convert_amount,
    format_amount_with_currency,
    format_currency,
    validate_exchange_rates,
)


def test_rupee_amounts_use_lakh_grouping() -> None:
    assert format_currency(1234567.891, "INR") == "₹12,34,567.89"
    assert format_currency(999, "inr") == "₹999.00"


def test_yen_has_no_minor_unit() -> None:
    assert format_currency(1234.5, "JPY") == "¥1,235"


def test_amount_with_code_and_unknown_currency() -> None:
    assert format_amount_with_currency(100, "usd") == "$100.00 USD"
    assert format_currency(5, "XYZ") == "5.00"
    assert format_currency(5, "USD", show_symbol=False) == "5.00"


def test_convert_amount_uses_source_rate() -> None:
    assert convert_amount(100, "USD", "INR", {"USD": 83.123456}) == pytest.approx(8312.3456)


@pytest.mark.parametrize(
    ("amount", "source", "target", "rates", "expected"),
    [
        (0, "USD", "INR", {"USD": 83}, 0.0),
        (100, "INR", "inr", {}, 100.0),
        (100, "USD", "INR", {}, 100.0),
        (100, "USD", "INR", None, 100.0),
        (100, "USD", "INR", {"USD": 0}, 100.0),
    ],
)
def test_convert_amount_passthrough_cases(amount, source, target, rates, expected) -> None:
    assert convert_amount(amount, source, target, rates) == expected


def test_missing_rates_are_reported_first() -> None:
    check = validate_exchange_rates(["USD", "EUR", "INR", "EUR"], {"USD": 83, "GBP": 0}, "INR")

    assert check.missing_rates == ["EUR"]
    assert check.invalid_rates == []
    assert not check.is_valid
    assert check.error_message() == "Missing exchange rates for: EUR"


def test_out_of_range_rates_are_invalid() -> None:
    check = validate_exchange_rates(["USD", "EUR"], {"USD": 0, "EUR": 20000}, "INR")

    assert check.invalid_rates == ["USD", "EUR"]
    assert check.error_message() == (
        "Invalid exchange rates for: USD, EUR. Rates must be > 0 and <= 10000"
    )


def test_complete_rates_pass() -> None:
    check = validate_exchange_rates(["USD", "INR"], {"USD": 83.2}, "INR")

    assert check.is_valid
    assert check.error_message() is None
