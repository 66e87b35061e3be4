from practice_desk.billing.currency import (
    CURRENCIES,
    SUPPORTED_CURRENCIES,
    convert_amount,
    format_amount_with_currency,
    format_currency,
    validate_exchange_rates,
)
from practice_desk.billing.draft_invoice import DraftInvoice, InvoiceTotals, calculate_totals

__all__ = [
    "CURRENCIES",
    "DraftInvoice",
    "InvoiceTotals",
    "SUPPORTED_CURRENCIES",
    "calculate_totals",
    "convert_amount",
    "format_amount_with_currency",
    "format_currency",
    "validate_exchange_rates",
]
