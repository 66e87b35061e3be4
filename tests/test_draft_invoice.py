from __future__ import annotations

import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.billing import DraftInvoice, calculate_totals  # noqa: E402


def _totals(payload: dict):
    return calculate_totals(DraftInvoice.from_payload(payload))


def test_missing_rate_blocks_save_but_preview_still_sums() -> None:
    totals = _totals(
        {
            "invoiceCurrency": "INR",
            "timesheets": [
                {"originalAmount": 5000, "currency": "INR"},
                {"originalAmount": 100, "currency": "USD"},
            ],
        }
    )

    assert totals.save_errors == ["Missing exchange rates for: USD"]
    assert totals.can_save is False
    assert totals.subtotal == pytest.approx(5100)
    assert totals.is_multi_currency


def test_entered_rate_converts_into_invoice_currency() -> None:
    totals = _totals(
        {
            "invoiceCurrency": "INR",
            "timesheets": [
                {"originalAmount": 5000, "currency": "INR"},
                {"originalAmount": 100, "currency": "USD"},
            ],
            "exchangeRates": {"USD": 83},
        }
    )

    assert totals.save_errors == []
    assert totals.subtotal == pytest.approx(13300)
    assert totals.final_amount == pytest.approx(13300)
    assert totals.amount_in_base_currency == pytest.approx(13300)


def test_invalid_rate_blocks_save() -> None:
    totals = _totals(
        {
            "invoiceCurrency": "INR",
            "timesheets": [{"originalAmount": 100, "currency": "USD"}],
            "exchangeRates": {"USD": 20000},
        }
    )

    assert totals.save_errors == ["Invalid exchange rates for: USD. Rates must be > 0 and <= 10000"]


def test_expenses_are_booked_in_rupees() -> None:
    totals = _totals(
        {
            "invoiceCurrency": "USD",
            "timesheets": [{"originalAmount": 200, "currency": "USD"}],
            "expenses": [{"amount": 830}, {"amount": 0}],
            "exchangeRates": {"INR": 0.012},
        }
    )

    assert [(row.currency, row.amount) for row in totals.breakdown] == [("INR", 830), ("USD", 200)]
    assert totals.expense_subtotal == pytest.approx(9.96)
    assert totals.subtotal == pytest.approx(209.96)
    assert totals.save_errors == []


def test_billed_amount_and_matter_currency_fallbacks() -> None:
    totals = _totals(
        {
            "invoiceCurrency": "INR",
            "matterCurrency": "USD",
            "timesheets": [{"billedAmount": 50}, {"originalAmount": 0, "billedAmount": 0}],
        }
    )

    assert [(row.currency, row.amount) for row in totals.breakdown] == [("USD", 50)]
    assert totals.save_errors == ["Missing exchange rates for: USD"]


def test_stored_subtotal_is_used_without_lines() -> None:
    totals = _totals({"invoiceCurrency": "INR", "subtotal": 1500})

    assert totals.calculated_subtotal == 0
    assert totals.subtotal == pytest.approx(1500)
    assert totals.breakdown == []


@pytest.mark.parametrize(
    ("discount_type", "value", "final_amount"),
    [
        ("percentage", 10, 4500),
        ("fixed", 700, 4300),
        (None, 700, 5000),
    ],
)
def test_discounts(discount_type, value, final_amount) -> None:
    totals = _totals(
        {
            "invoiceCurrency": "INR",
            "timesheets": [{"originalAmount": 5000, "currency": "INR"}],
            "discountType": discount_type,
            "discountValue": value,
        }
    )

    assert totals.final_amount == pytest.approx(final_amount)


def test_discount_bounds_are_advisory() -> None:
    base = {"invoiceCurrency": "INR", "timesheets": [{"originalAmount": 5000, "currency": "INR"}]}

    too_high = _totals({**base, "discountType": "percentage", "discountValue": 150})
    over_subtotal = _totals({**base, "discountType": "fixed", "discountValue": 6000})

    assert too_high.warnings == ["Percentage cannot exceed 100%"]
    assert too_high.can_save is True
    assert over_subtotal.warnings == ["Discount cannot exceed subtotal"]


def test_foreign_invoice_reports_base_amount_only_with_user_rate() -> None:
    payload = {"invoiceCurrency": "USD", "timesheets": [{"originalAmount": 100, "currency": "USD"}]}

    assert _totals(payload).amount_in_base_currency is None
    assert _totals({**payload, "userExchangeRate": 83}).amount_in_base_currency == pytest.approx(8300)


def test_totals_payload_shape() -> None:
    payload = _totals(
        {"invoiceCurrency": "INR", "timesheets": [{"originalAmount": 1234567.891, "currency": "INR"}]}
    ).to_payload()

    assert payload["formattedFinalAmount"] == "₹12,34,567.89 INR"
    assert payload["canSave"] is True
    assert payload["breakdown"][0]["currency"] == "INR"
