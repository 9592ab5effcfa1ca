# tests/conftest.py
import os

# before anything imports dealerdesk.config / the API module
os.environ["STORE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREDENTIALS_PATH"] = ""
os.environ.pop("COHERE_API_KEY", None)
os.environ.pop("CO_API_KEY", None)

import pytest

from dealerdesk.config import ApiKeyStore, Settings
from dealerdesk.errors import StoreUnavailable
from dealerdesk.graph.build_graph import Composer
from dealerdesk.seed import demo_records
from dealerdesk.store import MemoryRecordStore, RecordStore


class FakeCompleter:
    def __init__(self, reply="Remote answer", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system, user):
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply


class BrokenStore(RecordStore):
    """Raises for the listed kinds, answers from demo data otherwise."""

    def __init__(self, broken=("skus", "claims", "sales", "dealers"), error=None):
        self.broken = set(broken)
        self.error = error or StoreUnavailable("connection refused")
        self.inner = MemoryRecordStore(demo_records())

    def query(self, kind, terms=(), fields=(), limit=None, order_by=None):
        if kind in self.broken:
            raise self.error
        return self.inner.query(kind, terms, fields, limit, order_by)


@pytest.fixture
def settings():
    return Settings(store_backend="memory", database_url="sqlite://")


@pytest.fixture
def demo_store():
    return MemoryRecordStore(demo_records())


@pytest.fixture
def make_composer(settings, demo_store):
    def _make(store=None, api_key=None, completer=None):
        keys = ApiKeyStore(initial=api_key)
        return Composer(
            store or demo_store,
            keys,
            settings,
            completer_factory=(lambda key: completer) if completer is not None else None,
        )
    return _make

