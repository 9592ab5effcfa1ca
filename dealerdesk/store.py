# dealerdesk/store.py
"""Read access to the four record collections (SKUs, claims, sales, dealers).

The pipeline only ever talks to a ``RecordStore``. Which backend sits behind it
(the SQL database or the in-process demo data) is decided by configuration.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .db import TABLES, init_db, make_engine
from .errors import StoreUnavailable

log = logging.getLogger(__name__)

KINDS = ("skus", "claims", "sales", "dealers")
INTENT_KINDS = {"sku": "skus", "claim": "claims", "sale": "sales"}

INTENT_LIMIT = 10
SAMPLE_LIMIT = 3
TABLE_LIMIT = 50

# fields matched for a chat query, per intent
INTENT_FIELDS = {
    "sku": ["id", "name", "category", "description", "zone", "warehouse"],
    "claim": ["id", "dealer_name", "status", "type"],
    "sale": ["id", "dealer_name", "sku_name", "region", "zone"],
}
INTENT_ORDER = {"sale": "date"}

# fields matched by the search box of the data tables
TABLE_FIELDS = {
    "skus": ["id", "name", "category"],
    "claims": ["id", "dealer_name", "status"],
    "sales": ["id", "dealer_name", "sku_name"],
    "dealers": ["id", "name", "region"],
}
TABLE_ORDER = {"sales": "date"}

_STOP_WORDS = {
    "a", "about", "all", "an", "and", "any", "are", "as", "at", "by", "can",
    "check", "data", "details", "display", "do", "does", "for", "from", "get",
    "give", "have", "how", "i", "in", "is", "it", "list", "many", "me", "much",
    "my", "of", "on", "or", "our", "please", "recent", "show", "status",
    "tell", "that", "the", "their", "there", "this", "to", "we", "what",
    "whats", "which", "with", "you", "your",
    # generic nouns that pick the intent rather than narrow it
    "sku", "skus", "stock", "stocks", "inventory", "product", "products",
    "claim", "claims", "sale", "sales", "revenue", "performance",
}

MIN_TERM_LENGTH = 2

def search_terms(query: str) -> List[str]:
    """Free text -> lower-case filter terms, de-duplicated, in order.

    A trailing "'s" is cut ("raj's" -> "raj", "what's" -> "what"), other
    apostrophes are dropped ("don't" -> "dont"), and one-letter words are ignored.
    """
    text = (query or "").lower()
    text = re.sub(r"['’]s\b", "", text)
    text = re.sub(r"['’]", "", text)
    terms: List[str] = []
    for word in re.split(r"[^0-9a-z]+", text):
        if len(word) < MIN_TERM_LENGTH or word in _STOP_WORDS or word in terms:
            continue
        terms.append(word)
    return terms


class RecordStore(ABC):
    """Filtered, read-only lookups over the record collections.

    ``terms`` x ``fields`` form an OR of case-insensitive substring tests; an
    empty ``terms`` list means no filter. ``order_by`` sorts descending.
    """

    @abstractmethod
    def query(
        self,
        kind: str,
        terms: Iterable[str] = (),
        fields: Iterable[str] = (),
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        ...

    def all(self, kind: str) -> List[Dict[str, Any]]:
        return self.query(kind)


def _check_kind(kind: str) -> None:
    if kind not in KINDS:
        raise ValueError(f"Unknown record kind: {kind}")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlRecordStore(RecordStore):
    def __init__(self, engine: Engine):
        self.engine = engine

    def query(self, kind, terms=(), fields=(), limit=None, order_by=None):
        _check_kind(kind)
        table = TABLES[kind]
        stmt = select(table)
        preds = [
            table.c[f].ilike(f"%{_escape_like(t)}%", escape="\\")
            for f in fields for t in terms
        ]
        if preds:
            stmt = stmt.where(or_(*preds))
        if order_by:
            stmt = stmt.order_by(table.c[order_by].desc())
        if limit is not None:
            stmt = stmt.limit(int(limit))
        try:
            with self.engine.connect() as conn:
                return [dict(r._mapping) for r in conn.execute(stmt)]
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"{kind} query failed: {e}") from e


class MemoryRecordStore(RecordStore):
    """In-process collections; the demo backend and the test double."""

    def __init__(self, records: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        records = records or {}
        self._rows = {k: [dict(r) for r in records.get(k, [])] for k in KINDS}

    def query(self, kind, terms=(), fields=(), limit=None, order_by=None):
        _check_kind(kind)
        terms, fields = list(terms), list(fields)
        rows = self._rows[kind]
        if terms and fields:
            rows = [r for r in rows if _matches(r, terms, fields)]
        if order_by:
            rows = sorted(rows, key=lambda r: r.get(order_by) or "", reverse=True)
        if limit is not None:
            rows = rows[: int(limit)]
        return [dict(r) for r in rows]


def _matches(row: Dict[str, Any], terms: List[str], fields: List[str]) -> bool:
    for f in fields:
        value = row.get(f)
        if value is None:
            continue
        value = str(value).lower()
        if any(t in value for t in terms):
            return True
    return False


def build_store(settings: Settings) -> RecordStore:
    if settings.store_backend == "memory":
        from .seed import demo_records
        log.info("Using in-memory record store with demo data")
        return MemoryRecordStore(demo_records())
    if settings.store_backend != "sql":
        raise ValueError(f"Unknown STORE_BACKEND: {settings.store_backend}")
    engine = make_engine(settings.database_url)
    init_db(engine)
    return SqlRecordStore(engine)

# ---------- Lookups used by the pipeline and the tables ----------

def fetch_by_intent(store: RecordStore, intent: str, query: str, limit: int = INTENT_LIMIT):
    if intent not in INTENT_KINDS:
        raise ValueError(f"No record kind for intent: {intent}")
    return store.query(
        INTENT_KINDS[intent],
        terms=search_terms(query),
        fields=INTENT_FIELDS[intent],
        limit=limit,
        order_by=INTENT_ORDER.get(intent),
    )

def fetch_sample(store: RecordStore, kind: str, limit: int = SAMPLE_LIMIT):
    return store.query(kind, limit=limit)

def fetch_table(store: RecordStore, kind: str, q: Optional[str] = None, limit: int = TABLE_LIMIT):
    _check_kind(kind)
    text = (q or "").strip().lower()
    return store.query(
        kind,
        terms=[text] if text else [],
        fields=TABLE_FIELDS[kind],
        limit=limit,
        order_by=TABLE_ORDER.get(kind),
    )
