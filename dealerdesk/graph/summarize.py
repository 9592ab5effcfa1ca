# dealerdesk/graph/summarize.py
"""Plain-text digests of fetched records, one block per record."""
from typing import Dict, List

from ..config import CURRENCY_SYMBOL
from .state import Record

SALE_DETAIL_LIMIT = 5

NO_SKUS = "No SKUs found."
NO_CLAIMS = "No claims found."
NO_SALES = "No sales found."
OVERVIEW_HEADING = "Here's an overview of your data"

def format_currency(amount, symbol: str = CURRENCY_SYMBOL) -> str:
    value = float(amount or 0)
    if value.is_integer():
        return f"{symbol}{value:,.0f}"
    return f"{symbol}{value:,.2f}"

def summarize_skus(skus: List[Record], symbol: str = CURRENCY_SYMBOL) -> str:
    if not skus:
        return NO_SKUS
    return "\n\n".join(
        f"• {s['name']} ({s['id']})\n"
        f"  📦 Stock: {s['stock']} units\n"
        f"  📍 Location: {s['warehouse']}, {s['zone']}\n"
        f"  💰 Price: {format_currency(s['price'], symbol)}\n"
        f"  📁 Category: {s['category']}"
        for s in skus
    )

def summarize_claims(claims: List[Record], symbol: str = CURRENCY_SYMBOL) -> str:
    if not claims:
        return NO_CLAIMS
    return "\n\n".join(
        f"• Claim {c['id']}\n"
        f"  🏢 Dealer: {c['dealer_name']}\n"
        f"  📊 Status: {c['status']}\n"
        f"  💰 Amount: {format_currency(c['amount'], symbol)}\n"
        f"  📋 Type: {c['type']}\n"
        f"  📅 Submitted: {c['submitted_date']}"
        for c in claims
    )

def summarize_sales(sales: List[Record], symbol: str = CURRENCY_SYMBOL) -> str:
    if not sales:
        return NO_SALES
    total = sum(float(s["amount"] or 0) for s in sales)
    head = f"Total: {format_currency(total, symbol)} across {len(sales)} transactions\n\n"
    details = "\n\n".join(
        f"• {s['sku_name']} ({s['id']})\n"
        f"  🏢 Dealer: {s['dealer_name']}\n"
        f"  📦 Qty: {s['quantity']}\n"
        f"  💰 Amount: {format_currency(s['amount'], symbol)}\n"
        f"  📅 Date: {s['date']}"
        for s in sales[:SALE_DETAIL_LIMIT]
    )
    return head + details

_BY_INTENT = {"sku": summarize_skus, "claim": summarize_claims, "sale": summarize_sales}

def summarize(intent: str, records: List[Record], symbol: str = CURRENCY_SYMBOL) -> str:
    try:
        fn = _BY_INTENT[intent]
    except KeyError:
        raise ValueError(f"No summary for intent: {intent}") from None
    return fn(records, symbol)

def summarize_overview(samples: Dict[str, List[Record]], symbol: str = CURRENCY_SYMBOL) -> str:
    """General queries: a short sample of each kind, missing kinds shown as empty."""
    return (
        f"{OVERVIEW_HEADING}\n\n"
        f"SKUs:\n{summarize_skus(samples.get('skus') or [], symbol)}\n\n"
        f"Claims:\n{summarize_claims(samples.get('claims') or [], symbol)}\n\n"
        f"Sales:\n{summarize_sales(samples.get('sales') or [], symbol)}"
    )
