from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from ..config import ApiKeyStore, Settings, load_settings
from ..errors import Outcome
from ..llm import CohereCompleter
from ..store import RecordStore
from .nodes import (
    APOLOGY,
    classifier_node,
    fetch_node,
    local_node,
    remote_node,
    sample_node,
    summarize_node,
)
from .state import QueryState

log = logging.getLogger(__name__)

SAMPLE_NODES = ["fetch_skus", "fetch_claims", "fetch_sales"]


@dataclass(frozen=True)
class ComposedReply:
    text: str
    intent: Optional[str]
    outcome: str
    used_remote: bool = False


def build_graph(store: RecordStore, make_completer: Callable[[str], Any], settings: Settings):
    g = StateGraph(QueryState)

    def _fetch(state: Dict[str, Any]):   return fetch_node(state, store)
    def _skus(state: Dict[str, Any]):    return sample_node(state, store, "skus")
    def _claims(state: Dict[str, Any]):  return sample_node(state, store, "claims")
    def _sales(state: Dict[str, Any]):   return sample_node(state, store, "sales")
    def _summarize(state: Dict[str, Any]): return summarize_node(state, settings.currency_symbol)
    def _remote(state: Dict[str, Any], config: RunnableConfig):
        return remote_node(state, config, make_completer, settings.llm_context_chars)

    g.add_node("classify", classifier_node)
    g.add_node("fetch", _fetch)
    g.add_node("fetch_skus", _skus)
    g.add_node("fetch_claims", _claims)
    g.add_node("fetch_sales", _sales)
    g.add_node("summarize", _summarize)
    g.add_node("remote", _remote)
    g.add_node("local", local_node)

    g.add_edge(START, "classify")

    def _route_fetch(state: Dict[str, Any]):
        # general fans out to all three kinds and joins at summarize
        if state.get("intent") == "general":
            return SAMPLE_NODES
        return "fetch"

    def _route_compose(state: Dict[str, Any]) -> str:
        found = state.get("outcome") in (Outcome.FOUND.value, Outcome.OVERVIEW.value)
        return "remote" if state.get("remote_enabled") and found else "local"

    def _after_remote(state: Dict[str, Any]) -> str:
        return END if state.get("answer") else "local"

    g.add_conditional_edges("classify", _route_fetch, ["fetch", *SAMPLE_NODES])
    g.add_edge("fetch", "summarize")
    g.add_edge(SAMPLE_NODES, "summarize")
    g.add_conditional_edges("summarize", _route_compose, ["remote", "local"])
    g.add_conditional_edges("remote", _after_remote, ["local", END])
    g.add_edge("local", END)

    return g.compile()


class Composer:
    """Answers one free-text query: classify, fetch, summarize, then reply
    through the remote model when a key is configured, else locally.
    """

    def __init__(self, store: RecordStore, keys: ApiKeyStore,
                 settings: Optional[Settings] = None,
                 completer_factory: Optional[Callable[[str], Any]] = None):
        self.store = store
        self.keys = keys
        self.settings = settings or load_settings()
        self.completer_factory = completer_factory or (
            lambda key: CohereCompleter.from_settings(key, self.settings)
        )
        self.graph = build_graph(store, self.completer_factory, self.settings)

    def respond(self, query: str, role: Optional[str] = "dealer") -> ComposedReply:
        # one read of the key per request
        api_key = self.keys.get()
        state = {
            "query": query,
            "role": role or "dealer",
            "remote_enabled": api_key is not None,
            "store_errors": [],
        }
        try:
            out = self.graph.invoke(state, config={"configurable": {"api_key": api_key}})
        except Exception:
            log.exception("query pipeline failed")
            return ComposedReply(text=APOLOGY, intent=None, outcome=Outcome.FAILED.value)

        reply = ComposedReply(
            text=out.get("answer") or APOLOGY,
            intent=out.get("intent"),
            outcome=out.get("outcome") or Outcome.FAILED.value,
            used_remote=bool(out.get("used_remote")),
        )
        log.info("query answered", extra={
            "intent": reply.intent, "outcome": reply.outcome, "remote": reply.used_remote,
        })
        return reply
