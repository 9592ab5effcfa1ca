# dealerdesk/graph/classifier.py
from typing import List, Tuple

from .state import Intent

# Checked in this order; the first intent with any keyword present wins.
# "return" is a claim word even though it also shows up in product talk.
KEYWORDS: Tuple[Tuple[Intent, Tuple[str, ...]], ...] = (
    ("sku", ("sku", "stock", "inventory", "product")),
    ("claim", ("claim", "warranty", "return")),
    ("sale", ("sale", "revenue", "performance")),
)

EXAMPLE_QUERIES = [
    "Show me SKU availability in Chennai",
    "What's the status of my recent claims?",
    "Display sales data for this month",
    "Which products are low in stock?",
    "Show pending claims for approval",
]

def classify(query: str) -> Intent:
    q = (query or "").lower()
    for intent, words in KEYWORDS:
        if any(w in q for w in words):
            return intent
    return "general"

def suggest_queries(query: str) -> List[str]:
    """Example queries that contain the input or are contained in it."""
    q = (query or "").strip().lower()
    if not q:
        return []
    return [s for s in EXAMPLE_QUERIES if q in s.lower() or s.lower() in q]
