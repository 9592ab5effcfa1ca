# dealerdesk/api/server.py
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from prometheus_fastapi_instrumentator import Instrumentator
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from dealerdesk.obs.logging_config import setup_logging
from ..analytics import build_summary
from ..config import ApiKeyStore, ensure_dirs, load_settings
from ..errors import StoreUnavailable
from ..graph.build_graph import Composer
from ..graph.classifier import suggest_queries
from ..graph.persona import role_permissions, welcome_message
from ..models import ApiKeyIn, AskIn, AskOut
from ..sessions import ChatService, SessionStore
from ..store import KINDS, build_store, fetch_table

# ----------------- Bootstrap -----------------
ensure_dirs()
settings = load_settings()
store = build_store(settings)
keys = ApiKeyStore.from_settings(settings)
composer = Composer(store, keys, settings)
sessions = SessionStore()
chat = ChatService(composer, sessions)

app = FastAPI(title="DealerDesk API")

# CORS so Streamlit can call it
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Observability ----
setup_logging()
if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[FastApiIntegration()],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES", "0.0")),
    )
if os.getenv("PROMETHEUS_ENABLE", "0") == "1":
    Instrumentator().instrument(app).expose(app, include_in_schema=False, endpoint="/metrics")

# ----------------- Misc -----------------
@app.get("/")
def root():
    return {"message": "DealerDesk API", "try": ["/docs", "/health", "/info"]}

@app.get("/health")
def health():
    return {"status": "ok", "llm_ready": keys.is_configured()}

@app.get("/info")
def info():
    return {
        "llm_ready": keys.is_configured(),
        "model": settings.model_name,
        "store_backend": settings.store_backend,
    }

# ----------------- Chat -----------------
@app.post("/sessions")
def api_open_session():
    sid = sessions.open()
    return {"session_id": sid, "messages": sessions.messages(sid)}

@app.get("/sessions/{session_id}/messages")
def api_session_messages(session_id: str):
    try:
        return sessions.messages(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session")

@app.post("/ask", response_model=AskOut)
def ask(body: AskIn):
    sid = body.session_id or sessions.open()
    try:
        _, bot_msg, reply = chat.submit(sid, body.question, body.role)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return AskOut(
        answer=reply.text,
        intent=reply.intent,
        outcome=reply.outcome,
        used_remote=reply.used_remote,
        session_id=sid,
        message_id=bot_msg.id,
        reply_to=bot_msg.reply_to,
    )

@app.get("/suggestions")
def api_suggestions(q: str = ""):
    return suggest_queries(q)

# ----------------- Model key -----------------
@app.get("/settings/llm-key")
def api_key_status():
    return {"configured": keys.is_configured()}

@app.put("/settings/llm-key")
def api_set_key(body: ApiKeyIn):
    try:
        keys.set(body.api_key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"configured": True}

@app.delete("/settings/llm-key")
def api_clear_key():
    keys.clear()
    return {"configured": False}

# ----------------- Tables -----------------
@app.get("/records/{kind}")
def api_records(kind: str, q: Optional[str] = None):
    if kind not in KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown record kind: {kind}")
    try:
        return fetch_table(store, kind, q)
    except StoreUnavailable:
        raise HTTPException(status_code=503, detail="Record store unavailable")

# ----------------- Analytics -----------------
@app.get("/analytics/summary")
def api_analytics(role: Optional[str] = None, dealer_id: Optional[str] = None):
    try:
        return build_summary(store, role, dealer_id)
    except StoreUnavailable:
        raise HTTPException(status_code=503, detail="Record store unavailable")

@app.get("/roles/{role}")
def api_role(role: str, name: str = "", region: str = ""):
    return {
        "role": role,
        "welcome": welcome_message(role, name, region),
        "permissions": role_permissions(role),
    }
