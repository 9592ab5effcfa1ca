# dealerdesk/analytics.py
import datetime as dt
from typing import Any, Dict, List, Optional

import pandas as pd

from .store import RecordStore

Rows = List[Dict[str, Any]]

CARD_LABELS = {
    "dealer": ("Available SKUs", "My Claims", "My Sales", "My Revenue"),
}
DEFAULT_LABELS = ("Total SKUs", "Pending Claims", "Today's Sales", "Total Revenue")

def _frame(rows: Rows, columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame(rows or [], columns=columns)

def sales_by_month(sales: Rows) -> List[Dict[str, Any]]:
    df = _frame(sales, ["date", "amount"])
    if df.empty:
        return []
    df["month"] = pd.to_datetime(df["date"]).dt.strftime("%Y-%m")
    totals = df.groupby("month", sort=True)["amount"].sum()
    return [{"month": m, "amount": float(a)} for m, a in totals.items()]

def claims_by_status(claims: Rows) -> Dict[str, int]:
    df = _frame(claims, ["status"])
    return {s: int(n) for s, n in df["status"].value_counts().sort_index().items()}

def top_products(sales: Rows, n: int = 10) -> List[Dict[str, Any]]:
    df = _frame(sales, ["sku_name", "quantity"])
    if df.empty:
        return []
    qty = df.groupby("sku_name", sort=True)["quantity"].sum()
    qty = qty.sort_values(ascending=False, kind="mergesort").head(n)
    return [{"product": p, "quantity": int(q)} for p, q in qty.items()]

def regional_sales(sales: Rows) -> List[Dict[str, Any]]:
    df = _frame(sales, ["region", "amount"])
    if df.empty:
        return []
    totals = df.groupby("region", sort=True)["amount"].sum()
    return [{"region": r, "amount": float(a)} for r, a in totals.items()]

def summary_cards(role: Optional[str], skus: Rows, claims: Rows, sales: Rows,
                  today: Optional[dt.date] = None) -> List[Dict[str, Any]]:
    today = (today or dt.date.today()).isoformat()
    labels = CARD_LABELS.get(role or "", DEFAULT_LABELS)
    sales_df = _frame(sales, ["date", "amount"])
    claims_df = _frame(claims, ["status"])
    values = (
        len(skus or []),
        int((claims_df["status"] == "Pending").sum()),
        int((sales_df["date"].astype(str) == today).sum()),
        float(sales_df["amount"].sum()) if not sales_df.empty else 0.0,
    )
    return [{"label": label, "value": value} for label, value in zip(labels, values)]

def build_summary(store: RecordStore, role: Optional[str], dealer_id: Optional[str] = None,
                  today: Optional[dt.date] = None) -> Dict[str, Any]:
    skus = store.all("skus")
    claims = store.all("claims")
    sales = store.all("sales")
    dealers = store.all("dealers")
    if dealer_id:
        claims = [c for c in claims if c.get("dealer_id") == dealer_id]
        sales = [s for s in sales if s.get("dealer_id") == dealer_id]
    return {
        "role": role,
        "dealer_id": dealer_id,
        "cards": summary_cards(role, skus, claims, sales, today),
        "sales_by_month": sales_by_month(sales),
        "claims_by_status": claims_by_status(claims),
        "top_products": top_products(sales),
        "regional_sales": regional_sales(sales),
        "active_dealers": sum(1 for d in dealers if d.get("status") == "Active"),
    }
