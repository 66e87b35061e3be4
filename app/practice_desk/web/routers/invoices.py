from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from practice_desk.billing import CURRENCIES, DraftInvoice, calculate_totals

router = APIRouter(prefix="/api")


@router.get("/currencies")
def api_currencies():
    return {
        "ok": True,
        "currencies": [
            {"code": info.code, "symbol": info.symbol, "name": info.name, "decimals": info.decimals}
            for info in CURRENCIES.values()
        ],
    }


@router.post("/invoices/draft/totals")
def api_draft_invoice_totals(invoice: dict[str, Any] = Body(...)):
    totals = calculate_totals(DraftInvoice.from_payload(invoice))
    return {"ok": True, **totals.to_payload()}
