# tests/test_store.py
import pytest

from dealerdesk.config import Settings
from dealerdesk.db import make_engine
from dealerdesk.errors import StoreUnavailable
from dealerdesk.seed import demo_records, seed
from dealerdesk.store import (
    MemoryRecordStore,
    SqlRecordStore,
    build_store,
    fetch_by_intent,
    fetch_sample,
    fetch_table,
    search_terms,
)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryRecordStore(demo_records())
    engine = make_engine("sqlite://")
    seed(engine)
    return SqlRecordStore(engine)


def ids(rows):
    return [r["id"] for r in rows]


def test_search_terms_drop_noise_words():
    assert search_terms("Show SKU availability in Chennai") == ["availability", "chennai"]
    assert search_terms("pending claims") == ["pending"]
    assert search_terms("Sales performance") == []
    assert search_terms("warranty, warranty & RETURN!") == ["warranty", "return"]
    assert search_terms("") == []


def test_sku_lookup_matches_warehouse(store):
    rows = fetch_by_intent(store, "sku", "Show SKU availability in Chennai")
    assert ids(rows) == ["SKU00001", "SKU00002", "SKU00012"]
    assert all(r["warehouse"] == "Chennai" for r in rows)


def test_claim_lookup_matches_status(store):
    rows = fetch_by_intent(store, "claim", "pending claims")
    assert ids(rows) == ["CLM00001", "CLM00004", "CLM00006"]


def test_search_terms_handle_apostrophes():
    assert search_terms("What's the status of Raj's pending claims?") == ["raj", "pending"]
    assert search_terms("Kumar’s returns") == ["kumar", "returns"]
    assert search_terms("don't a b x") == ["dont"]


def test_possessive_query_does_not_match_everything(store):
    rows = fetch_by_intent(store, "claim", "What's the status of Raj's pending claims?")
    assert ids(rows) == ["CLM00001", "CLM00004", "CLM00005", "CLM00006"]
    assert all(r["status"] == "Pending" or r["dealer_name"] == "Raj Electronics" for r in rows)


def test_claim_lookup_matches_type(store):
    rows = fetch_by_intent(store, "claim", "warranty claims")
    assert ids(rows) == ["CLM00001", "CLM00005"]


def test_sales_newest_first(store):
    rows = fetch_by_intent(store, "sale", "sales performance")
    dates = [r["date"] for r in rows]
    assert len(rows) == 10
    assert dates == sorted(dates, reverse=True)
    assert rows[0]["id"] == "SAL00001"


def test_sales_filtered_by_region(store):
    rows = fetch_by_intent(store, "sale", "sales in chennai")
    assert ids(rows) == ["SAL00001", "SAL00006", "SAL00010"]


def test_limit_caps_results(store):
    assert len(fetch_by_intent(store, "sku", "products", limit=5)) == 5
    assert len(fetch_by_intent(store, "sku", "products")) == 10
    assert len(fetch_sample(store, "claims")) == 3


def test_general_has_no_single_kind(store):
    with pytest.raises(ValueError):
        fetch_by_intent(store, "general", "hello")


def test_table_search(store):
    assert ids(fetch_table(store, "skus", "Tools")) == ["SKU00003", "SKU00007"]
    assert ids(fetch_table(store, "dealers", "south")) == []
    assert ids(fetch_table(store, "dealers", "kolkata")) == ["D005"]
    assert len(fetch_table(store, "skus")) == 12


def test_like_wildcards_are_literal(store):
    assert fetch_table(store, "skus", "%") == []
    assert fetch_table(store, "skus", "_") == []


def test_unknown_kind(store):
    with pytest.raises(ValueError):
        store.query("orders")
    with pytest.raises(ValueError):
        fetch_table(store, "orders")


def test_backends_return_identical_rows():
    engine = make_engine("sqlite://")
    seed(engine)
    sql, mem = SqlRecordStore(engine), MemoryRecordStore(demo_records())
    for kind in ("skus", "claims", "sales", "dealers"):
        assert sql.all(kind) == mem.all(kind)


def test_seed_is_repeatable():
    engine = make_engine("sqlite://")
    seed(engine)
    counts = seed(engine)
    assert counts == {"dealers": 6, "skus": 12, "claims": 8, "sales": 10}
    assert len(SqlRecordStore(engine).all("skus")) == 12


def test_sql_errors_become_store_unavailable():
    empty = SqlRecordStore(make_engine("sqlite://"))
    with pytest.raises(StoreUnavailable):
        empty.query("skus")


def test_build_store_from_settings():
    assert isinstance(build_store(Settings(store_backend="memory")), MemoryRecordStore)
    sql = build_store(Settings(store_backend="sql", database_url="sqlite://"))
    assert isinstance(sql, SqlRecordStore)
    assert sql.all("skus") == []
    with pytest.raises(ValueError):
        build_store(Settings(store_backend="mongo"))
