# tests/test_composer.py
import pytest
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from conftest import BrokenStore, FakeCompleter
from dealerdesk.config import ApiKeyStore, Settings
from dealerdesk.errors import Outcome, RemoteUnavailable
from dealerdesk.graph.build_graph import Composer
from dealerdesk.graph.nodes import APOLOGY, NOT_FOUND_TEMPLATE, compose_local
from dealerdesk.graph.persona import ROLE_PREFIXES, role_prefix
from dealerdesk.llm import CohereCompleter, build_system_prompt
from dealerdesk.seed import demo_records
from dealerdesk.store import MemoryRecordStore


def without_pending_claims():
    data = demo_records()
    data["claims"] = [c for c in data["claims"] if c["status"] != "Pending"]
    return MemoryRecordStore(data)


# ---------- Local path ----------
def test_sku_scenario_chennai(make_composer):
    reply = make_composer().respond("Show SKU availability in Chennai", "dealer")
    assert reply.intent == "sku"
    assert reply.outcome == Outcome.FOUND.value
    assert reply.used_remote is False
    assert reply.text.startswith(
        'Hi there! As your business partner, Here are the SKUs I found for '
        '"Show SKU availability in Chennai":\n\n'
    )
    assert "• Inverter 1.5kVA (SKU00001)" in reply.text
    assert "📦 Stock: 120 units" in reply.text
    assert "💰 Price: ₹18,500" in reply.text


@pytest.mark.parametrize("role", ["dealer", "sales_rep", "admin"])
def test_role_prefix(make_composer, role):
    reply = make_composer().respond("sales performance", role)
    assert reply.text.startswith(ROLE_PREFIXES[role] + " Here are the recent sales data:")


def test_unknown_role_gets_neutral_prefix(make_composer):
    reply = make_composer().respond("pending claims", "auditor")
    assert reply.text.startswith('Hello! Here are the claims matching "pending claims":')


@pytest.mark.parametrize("role", [None, ""])
def test_missing_role_defaults_to_dealer(make_composer, role):
    reply = make_composer().respond("pending claims", role)
    assert reply.text.startswith(ROLE_PREFIXES["dealer"])
    # the prefix table itself stays neutral for a missing tag
    assert role_prefix(role) == "Hello!"


def test_not_found_scenario(make_composer):
    reply = make_composer(store=without_pending_claims()).respond("pending claims", "dealer")
    assert reply.outcome == Outcome.NOT_FOUND.value
    assert reply.text == NOT_FOUND_TEMPLATE.format(intent="claim", query="pending claims")
    assert "try different search terms" in reply.text


def test_general_overview(make_composer):
    reply = make_composer().respond("hello", "dealer")
    assert reply.intent == "general"
    assert reply.outcome == Outcome.OVERVIEW.value
    assert reply.text.startswith(
        "Hi there! As your business partner, Here's what I found in your data:\n\n"
        "Here's an overview of your data"
    )
    for sample_id in ("SKU00001", "SKU00003", "CLM00001", "CLM00003", "SAL00001", "SAL00003"):
        assert sample_id in reply.text
    assert "SKU00004" not in reply.text


def test_general_overview_with_empty_store(make_composer):
    reply = make_composer(store=MemoryRecordStore()).respond("hello", "admin")
    assert reply.outcome == Outcome.OVERVIEW.value
    assert "No SKUs found." in reply.text
    assert "No claims found." in reply.text
    assert "No sales found." in reply.text


def test_local_path_is_deterministic(make_composer):
    composer = make_composer()
    first = composer.respond("Show SKU availability in Chennai", "admin")
    second = composer.respond("Show SKU availability in Chennai", "admin")
    assert first == second


# ---------- Store failures ----------
def test_store_failure_renders_like_not_found(make_composer):
    reply = make_composer(store=BrokenStore()).respond("pending claims", "dealer")
    assert reply.outcome == Outcome.STORE_UNAVAILABLE.value
    assert reply.text == NOT_FOUND_TEMPLATE.format(intent="claim", query="pending claims")


def test_one_failed_sample_keeps_the_others(make_composer):
    reply = make_composer(store=BrokenStore(broken=["claims"])).respond("hello", "dealer")
    assert reply.outcome == Outcome.OVERVIEW.value
    assert "Claims:\nNo claims found." in reply.text
    assert "SKU00001" in reply.text
    assert "SAL00001" in reply.text


def test_all_samples_failing_still_answers(make_composer):
    reply = make_composer(store=BrokenStore()).respond("good morning", "dealer")
    assert reply.outcome == Outcome.OVERVIEW.value
    assert "No SKUs found." in reply.text


def test_unexpected_error_gives_apology(make_composer):
    store = BrokenStore(error=RuntimeError("boom"))
    reply = make_composer(store=store).respond("inventory", "dealer")
    assert reply.text == APOLOGY
    assert reply.outcome == Outcome.FAILED.value


# ---------- Remote path ----------
def test_remote_reply_used_when_key_configured(make_composer):
    fake = FakeCompleter(reply="Chennai has three SKUs in stock.")
    reply = make_composer(api_key="k-123", completer=fake).respond(
        "Show SKU availability in Chennai", "sales_rep")
    assert reply.text == "Chennai has three SKUs in stock."
    assert reply.used_remote is True
    assert reply.outcome == Outcome.FOUND.value
    system, user = fake.calls[0]
    assert user == "Show SKU availability in Chennai"
    assert "User role: sales_rep" in system
    assert "SKU00001" in system


def test_remote_context_is_truncated(demo_store):
    fake = FakeCompleter()
    settings = Settings(store_backend="memory", llm_context_chars=200)
    composer = Composer(demo_store, ApiKeyStore("k"), settings, completer_factory=lambda key: fake)
    composer.respond("inventory", "dealer")
    system, _ = fake.calls[0]
    context = system.split("Current data context: ", 1)[1]
    assert len(context) == 200


@pytest.mark.parametrize("error", [
    RemoteUnavailable("cohere chat failed: ReadTimeout"),
    RemoteUnavailable("cohere chat failed: ApiError"),
    RemoteUnavailable("cohere chat returned no text"),
])
@pytest.mark.parametrize("query, role", [
    ("Show SKU availability in Chennai", "dealer"),
    ("sales performance", "admin"),
    ("hello", "sales_rep"),
])
def test_remote_failure_matches_local_reply(make_composer, error, query, role):
    local = make_composer().respond(query, role)
    fake = FakeCompleter(error=error)
    fallback = make_composer(api_key="k", completer=fake).respond(query, role)
    assert len(fake.calls) == 1
    assert fallback == local


def test_not_found_skips_remote(make_composer):
    fake = FakeCompleter()
    reply = make_composer(store=without_pending_claims(), api_key="k", completer=fake).respond(
        "pending claims", "dealer")
    assert fake.calls == []
    assert reply.outcome == Outcome.NOT_FOUND.value


def test_key_cleared_between_queries(make_composer):
    fake = FakeCompleter()
    composer = make_composer(api_key="k", completer=fake)
    assert composer.respond("inventory").used_remote is True
    composer.keys.clear()
    assert composer.respond("inventory").used_remote is False
    assert len(fake.calls) == 1


# ---------- compose_local / prompt ----------
def test_compose_local_templates():
    assert compose_local("q", "admin", "claim", "found", "DIGEST") == (
        'Good day! From the system overview, Here are the claims matching "q":\n\nDIGEST'
    )
    assert compose_local("q", "admin", "sku", "store_unavailable", "x").startswith(
        "I couldn't find any sku data")


def test_system_prompt_budget():
    prompt = build_system_prompt("admin", "x" * 5000, budget=100)
    assert prompt.endswith("Current data context: " + "x" * 100)
    assert "User role: admin" in prompt


# ---------- Cohere chain wrapper ----------
def test_cohere_completer_reads_text():
    seen = []

    def fake_model(prompt_value):
        seen.extend(prompt_value.to_messages())
        return AIMessage(content=" hi ")

    assert CohereCompleter(RunnableLambda(fake_model)).complete("sys", "user") == "hi"
    assert [(m.type, m.content) for m in seen] == [("system", "sys"), ("human", "user")]


def test_cohere_completer_keeps_braces_in_context():
    seen = []
    completer = CohereCompleter(RunnableLambda(
        lambda pv: seen.extend(pv.to_messages()) or AIMessage(content="ok")))
    completer.complete("context {not a var}", "q")
    assert seen[0].content == "context {not a var}"


@pytest.mark.parametrize("content", ["", "   ", []])
def test_cohere_completer_rejects_empty(content):
    completer = CohereCompleter(RunnableLambda(lambda pv: AIMessage(content=content)))
    with pytest.raises(RemoteUnavailable):
        completer.complete("sys", "user")


def test_cohere_completer_wraps_errors():
    def boom(prompt_value):
        raise TimeoutError("read timed out")

    with pytest.raises(RemoteUnavailable, match="TimeoutError"):
        CohereCompleter(RunnableLambda(boom)).complete("sys", "user")


def test_cohere_completer_from_settings():
    completer = CohereCompleter.from_settings("test-key", Settings(store_backend="memory"))
    bound = completer.chain.last
    assert bound.kwargs == {"max_tokens": 500}
    assert bound.bound.model == "command-a-03-2025"
    assert bound.bound.temperature == 0.7
