# dealerdesk/graph/nodes.py
import logging
from typing import Any, Callable, Dict

from langchain_core.runnables import RunnableConfig

from ..errors import Outcome, RemoteUnavailable, StoreUnavailable
from ..llm import build_system_prompt
from ..store import INTENT_KINDS, RecordStore, fetch_by_intent, fetch_sample
from .classifier import classify
from .persona import personalize
from .summarize import summarize, summarize_overview

log = logging.getLogger(__name__)

NOT_FOUND_TEMPLATE = (
    "I couldn't find any {intent} data matching your query \"{query}\". "
    "Please try different search terms or check if you have the right permissions "
    "to access this data."
)
APOLOGY = "I'm sorry, I encountered an error while processing your request. Please try again."

_LEADS = {
    "sku": "Here are the SKUs I found for \"{query}\":",
    "claim": "Here are the claims matching \"{query}\":",
    "sale": "Here are the recent sales data:",
    "general": "Here's what I found in your data:",
}

# ---------- Local composition ----------
def compose_local(query: str, role: str, intent: str, outcome: str, digest: str) -> str:
    if outcome in (Outcome.NOT_FOUND.value, Outcome.STORE_UNAVAILABLE.value):
        return NOT_FOUND_TEMPLATE.format(intent=intent, query=query)
    lead = _LEADS.get(intent, _LEADS["general"]).format(query=query)
    return personalize(f"{lead}\n\n{digest}", role)

# ---------- Node functions ----------
def classifier_node(state: Dict[str, Any]):
    intent = classify(state["query"])
    log.debug("classified query", extra={"intent": intent})
    return {"intent": intent}

def fetch_node(state: Dict[str, Any], store: RecordStore):
    intent = state["intent"]
    try:
        return {"records": fetch_by_intent(store, intent, state["query"])}
    except StoreUnavailable:
        log.warning("record fetch failed", exc_info=True, extra={"intent": intent})
        return {"records": [], "store_errors": [INTENT_KINDS[intent]]}

def sample_node(state: Dict[str, Any], store: RecordStore, kind: str):
    key = f"sample_{kind}"
    try:
        return {key: fetch_sample(store, kind)}
    except StoreUnavailable:
        log.warning("sample fetch failed", exc_info=True, extra={"kind": kind})
        return {key: [], "store_errors": [kind]}

def summarize_node(state: Dict[str, Any], symbol: str):
    intent = state["intent"]
    if intent == "general":
        samples = {
            "skus": state.get("sample_skus"),
            "claims": state.get("sample_claims"),
            "sales": state.get("sample_sales"),
        }
        return {"digest": summarize_overview(samples, symbol), "outcome": Outcome.OVERVIEW.value}

    records = state.get("records") or []
    if records:
        outcome = Outcome.FOUND
    elif state.get("store_errors"):
        outcome = Outcome.STORE_UNAVAILABLE
    else:
        outcome = Outcome.NOT_FOUND
    return {"digest": summarize(intent, records, symbol), "outcome": outcome.value}

def remote_node(state: Dict[str, Any], config: RunnableConfig,
                make_completer: Callable[[str], Any], budget: int):
    api_key = (config.get("configurable") or {}).get("api_key")
    if not api_key:
        return {"answer": None, "used_remote": False}
    system = build_system_prompt(state.get("role") or "dealer", state.get("digest", ""), budget)
    try:
        text = make_completer(api_key).complete(system, state["query"])
    except RemoteUnavailable as e:
        log.warning("remote completion unavailable, using local reply: %s", e,
                    extra={"intent": state.get("intent"), "remote": False})
        return {"answer": None, "used_remote": False}
    return {"answer": text, "used_remote": True}

def local_node(state: Dict[str, Any]):
    text = compose_local(
        state["query"],
        state.get("role") or "",
        state["intent"],
        state["outcome"],
        state.get("digest", ""),
    )
    return {"answer": text, "used_remote": False}
