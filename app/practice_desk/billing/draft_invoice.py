"""
Draft invoice totals across source currencies.

Timesheet lines keep their original currency; expenses are always booked in
the firm's base currency. Every line is converted into the invoice currency
with the operator-entered rates (source -> invoice currency). Lines whose rate
is not entered yet contribute their unconverted amount so the preview keeps
working, while ``save_errors`` blocks the save until every rate is present
and in range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from practice_desk.billing.currency import (
    convert_amount,
    format_amount_with_currency,
    normalize_currency,
    validate_exchange_rates,
)
from practice_desk.core.defaults import BASE_CURRENCY, EXPENSE_CURRENCY
from practice_desk.core.util import as_float

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"
DISCOUNT_TYPES = (DISCOUNT_PERCENTAGE, DISCOUNT_FIXED)


def _amount(*values: Any) -> float:
    for value in values:
        parsed = as_float(value, default=0.0)
        if parsed:
            return parsed
    return 0.0


def _rates(payload: Any) -> dict[str, float]:
    if not isinstance(payload, Mapping):
        return {}
    rates: dict[str, float] = {}
    for code, rate in payload.items():
        if rate is None or str(rate).strip() == "":
            continue
        rates[normalize_currency(code)] = as_float(rate, default=0.0)
    return rates


@dataclass(frozen=True)
class TimesheetLine:
    amount: float
    currency: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TimesheetLine":
        # originalAmount is in the line's own currency; billedAmount may already be converted.
        return cls(
            amount=_amount(payload.get("originalAmount"), payload.get("billedAmount")),
            currency=normalize_currency(payload.get("currency")) or None,
        )


@dataclass(frozen=True)
class ExpenseLine:
    amount: float

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExpenseLine":
        return cls(amount=_amount(payload.get("originalAmount"), payload.get("amount")))


@dataclass(frozen=True)
class InvoiceMatter:
    id: int
    title: str = ""
    currency: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "InvoiceMatter":
        return cls(
            id=int(as_float(payload.get("id"), default=0.0)),
            title=str(payload.get("title") or ""),
            currency=normalize_currency(payload.get("currency")) or None,
        )


@dataclass
class DraftInvoice:
    invoice_currency: str = BASE_CURRENCY
    matter_currency: str | None = None
    matters: list[InvoiceMatter] = field(default_factory=list)
    timesheets: list[TimesheetLine] = field(default_factory=list)
    expenses: list[ExpenseLine] = field(default_factory=list)
    exchange_rates: dict[str, float] = field(default_factory=dict)
    discount_type: str | None = None
    discount_value: float | None = None
    stored_subtotal: float | None = None
    user_exchange_rate: float | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DraftInvoice":
        matter_currency = normalize_currency(payload.get("matterCurrency")) or None
        matters = [InvoiceMatter.from_payload(item) for item in payload.get("matters") or []]
        if not matters and isinstance(payload.get("matter"), Mapping):
            matters = [InvoiceMatter.from_payload(payload["matter"])]
        invoice_currency = normalize_currency(payload.get("invoiceCurrency")) or matter_currency
        if not invoice_currency and matters and matters[0].currency:
            invoice_currency = matters[0].currency
        discount_type = str(payload.get("discountType") or "").strip().lower() or None
        stored = payload.get("subtotal")
        if stored is None:
            stored = payload.get("finalAmount", payload.get("invoiceAmount"))
        return cls(
            invoice_currency=invoice_currency or BASE_CURRENCY,
            matter_currency=matter_currency,
            matters=matters,
            timesheets=[TimesheetLine.from_payload(item) for item in payload.get("timesheets") or []],
            expenses=[ExpenseLine.from_payload(item) for item in payload.get("expenses") or []],
            exchange_rates=_rates(payload.get("exchangeRates")),
            discount_type=discount_type if discount_type in DISCOUNT_TYPES else None,
            discount_value=None if payload.get("discountValue") is None else as_float(payload.get("discountValue"), default=0.0),
            stored_subtotal=None if stored is None else as_float(stored, default=0.0),
            user_exchange_rate=None if payload.get("userExchangeRate") is None else as_float(payload.get("userExchangeRate"), default=0.0),
        )

    def line_currency(self, line: TimesheetLine) -> str:
        return line.currency or self.matter_currency or self.invoice_currency or BASE_CURRENCY


@dataclass(frozen=True)
class CurrencyBreakdown:
    currency: str
    amount: float
    matters: tuple[InvoiceMatter, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {
            "currency": self.currency,
            "amount": self.amount,
            "formatted": format_amount_with_currency(self.amount, self.currency),
            "matters": [{"id": matter.id, "title": matter.title} for matter in self.matters],
        }


@dataclass(frozen=True)
class InvoiceTotals:
    invoice_currency: str
    breakdown: list[CurrencyBreakdown]
    timesheet_subtotal: float
    expense_subtotal: float
    calculated_subtotal: float
    subtotal: float
    discount_amount: float
    final_amount: float
    amount_in_base_currency: float | None
    warnings: list[str]
    save_errors: list[str]

    @property
    def is_multi_currency(self) -> bool:
        return len(self.breakdown) > 1

    @property
    def can_save(self) -> bool:
        return not self.save_errors

    def to_payload(self) -> dict[str, Any]:
        return {
            "invoiceCurrency": self.invoice_currency,
            "breakdown": [item.to_payload() for item in self.breakdown],
            "timesheetSubtotal": self.timesheet_subtotal,
            "expenseSubtotal": self.expense_subtotal,
            "calculatedSubtotal": self.calculated_subtotal,
            "subtotal": self.subtotal,
            "discountAmount": self.discount_amount,
            "finalAmount": self.final_amount,
            "amountInBaseCurrency": self.amount_in_base_currency,
            "formattedFinalAmount": format_amount_with_currency(self.final_amount, self.invoice_currency),
            "isMultiCurrency": self.is_multi_currency,
            "warnings": list(self.warnings),
            "saveErrors": list(self.save_errors),
            "canSave": self.can_save,
        }


def currency_breakdown(invoice: DraftInvoice) -> list[CurrencyBreakdown]:
    amounts: dict[str, float] = {}
    matters: dict[str, list[InvoiceMatter]] = {}
    for matter in invoice.matters:
        code = matter.currency or invoice.matter_currency or BASE_CURRENCY
        amounts.setdefault(code, 0.0)
        matters.setdefault(code, []).append(matter)
    for line in invoice.timesheets:
        if not line.amount:
            continue
        code = invoice.line_currency(line)
        amounts[code] = amounts.get(code, 0.0) + line.amount
    if invoice.expenses:
        amounts.setdefault(EXPENSE_CURRENCY, 0.0)
        for expense in invoice.expenses:
            if expense.amount > 0:
                amounts[EXPENSE_CURRENCY] += expense.amount
    return [
        CurrencyBreakdown(currency=code, amount=amounts[code], matters=tuple(matters.get(code, ())))
        for code in sorted(amounts)
    ]


def _contribution(amount: float, currency: str, invoice: DraftInvoice) -> float:
    if currency == invoice.invoice_currency:
        return amount
    rate = invoice.exchange_rates.get(currency)
    if rate is not None and rate > 0:
        return amount * rate
    # Placeholder until the operator enters a rate.
    return amount


def timesheet_subtotal(invoice: DraftInvoice) -> float:
    return sum(
        _contribution(line.amount, invoice.line_currency(line), invoice)
        for line in invoice.timesheets
        if line.amount
    )


def expense_subtotal(invoice: DraftInvoice) -> float:
    return sum(
        _contribution(expense.amount, EXPENSE_CURRENCY, invoice)
        for expense in invoice.expenses
        if expense.amount
    )


def discount_amount(subtotal: float, discount_type: str | None, discount_value: float | None) -> float:
    if not discount_type or not discount_value:
        return 0.0
    if discount_type == DISCOUNT_PERCENTAGE:
        return subtotal * (discount_value / 100)
    return float(discount_value)


def discount_warnings(subtotal: float, discount_type: str | None, discount_value: float | None) -> list[str]:
    if discount_value is None:
        return []
    if discount_type == DISCOUNT_PERCENTAGE and discount_value > 100:
        return ["Percentage cannot exceed 100%"]
    if discount_type == DISCOUNT_FIXED and discount_value > subtotal:
        return ["Discount cannot exceed subtotal"]
    return []


def save_errors(invoice: DraftInvoice, breakdown: list[CurrencyBreakdown] | None = None) -> list[str]:
    rows = breakdown if breakdown is not None else currency_breakdown(invoice)
    pending = [item.currency for item in rows if item.currency != invoice.invoice_currency]
    check = validate_exchange_rates(pending, invoice.exchange_rates, invoice.invoice_currency)
    message = check.error_message()
    return [message] if message else []


def calculate_totals(invoice: DraftInvoice) -> InvoiceTotals:
    breakdown = currency_breakdown(invoice)
    timesheets = timesheet_subtotal(invoice)
    expenses = expense_subtotal(invoice)
    calculated = timesheets + expenses
    subtotal = calculated if calculated > 0 else float(invoice.stored_subtotal or 0.0)
    discount = discount_amount(subtotal, invoice.discount_type, invoice.discount_value)
    final_amount = subtotal - discount

    if invoice.invoice_currency == BASE_CURRENCY:
        in_base: float | None = final_amount
    elif invoice.user_exchange_rate and invoice.user_exchange_rate > 0:
        in_base = convert_amount(
            final_amount,
            invoice.invoice_currency,
            BASE_CURRENCY,
            {invoice.invoice_currency: invoice.user_exchange_rate},
        )
    else:
        in_base = None

    return InvoiceTotals(
        invoice_currency=invoice.invoice_currency,
        breakdown=breakdown,
        timesheet_subtotal=timesheets,
        expense_subtotal=expenses,
        calculated_subtotal=calculated,
        subtotal=subtotal,
        discount_amount=discount,
        final_amount=final_amount,
        amount_in_base_currency=in_base,
        warnings=discount_warnings(subtotal, invoice.discount_type, invoice.discount_value),
        save_errors=save_errors(invoice, breakdown),
    )
