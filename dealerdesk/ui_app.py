# dealerdesk/ui_app.py
import os
import requests
import pandas as pd
import streamlit as st

# -------------------- Config --------------------
API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")

st.set_page_config(page_title="DealerDesk", layout="wide")
st.title("🏭 Manufacturing AI Assistant")

# -------------------- HTTP helpers --------------------
def req_get(path: str, **kwargs):
    url = f"{API_BASE}{path}"
    try:
        r = requests.get(url, timeout=15, **kwargs)
        r.raise_for_status()
        return r.json()
    except Exception as e:
        st.error(f"GET {url} failed: {e}")
        return None

def req_send(method: str, path: str, payload: dict | None = None):
    url = f"{API_BASE}{path}"
    try:
        r = requests.request(method, url, json=payload, timeout=30)
        if r.status_code >= 400:
            st.error(f"{method} {url} failed [{r.status_code}]: {r.text}")
            return None
        return r.json()
    except Exception as e:
        st.error(f"{method} {url} failed: {e}")
        return None

# -------------------- Sidebar: role & model key --------------------
with st.sidebar:
    role = st.selectbox("Role", ["dealer", "sales_rep", "admin"], key="role")
    name = st.text_input("Name", value="Raj Kumar", key="user_name")
    region = st.text_input("Region", value="Chennai", key="user_region")
    dealer_id = st.text_input("Dealer ID (dealer role)", value="D001", key="dealer_id")

    key_state = req_get("/settings/llm-key") or {}
    st.caption("Cohere key: " + ("configured" if key_state.get("configured") else "not set"))
    new_key = st.text_input("Cohere API key", type="password", key="llm_key")
    if st.button("Save API Key", key="llm_key_btn") and new_key.strip():
        if req_send("PUT", "/settings/llm-key", {"api_key": new_key.strip()}) is not None:
            st.success("API key saved. Remote responses are now active.")

role_info = req_get(f"/roles/{role}", params={"name": name, "region": region}) or {}
st.subheader(role_info.get("welcome", ""))
st.caption(" · ".join(role_info.get("permissions", [])))

scoped_dealer = dealer_id if role == "dealer" and dealer_id.strip() else None
summary = req_get("/analytics/summary", params={"role": role, "dealer_id": scoped_dealer}) or {}
cards = summary.get("cards") or []
if cards:
    cols = st.columns(len(cards))
    for col, card in zip(cols, cards):
        value = card["value"]
        col.metric(card["label"], f"₹{value / 1_000_000:.1f}M" if isinstance(value, float) else value)

tab_chat, tab_analytics, tab_data = st.tabs(["💬 AI Assistant", "📈 Analytics", "🗂️ Data"])

# =========================================================
# Chat Tab
# =========================================================
with tab_chat:
    if "session_id" not in st.session_state:
        opened = req_send("POST", "/sessions") or {}
        st.session_state.session_id = opened.get("session_id")

    sid = st.session_state.session_id
    transcript = req_get(f"/sessions/{sid}/messages") if sid else []
    for msg in transcript or []:
        with st.chat_message("user" if msg["sender"] == "user" else "assistant"):
            st.markdown(msg["content"])

    q = st.chat_input("Ask me about SKUs, claims, sales, or anything else...")
    if q and q.strip() and sid:
        with st.spinner("Thinking..."):
            res = req_send("POST", "/ask", {"question": q, "role": role, "session_id": sid})
        if res is not None:
            st.rerun()

    hints = req_get("/suggestions", params={"q": q}) if q else None
    if hints:
        st.caption("Try: " + " · ".join(hints))

# =========================================================
# Analytics Tab
# =========================================================
with tab_analytics:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("### Sales Trend")
        monthly = summary.get("sales_by_month") or []
        if monthly:
            st.line_chart(pd.DataFrame(monthly).set_index("month"), height=240)
        else:
            st.info("No sales yet.")
        st.markdown("### Top Selling Products")
        top = summary.get("top_products") or []
        if top:
            st.bar_chart(pd.DataFrame(top).set_index("product"), height=240)
    with c2:
        st.markdown("### Claims Distribution")
        by_status = summary.get("claims_by_status") or {}
        if by_status:
            st.bar_chart(pd.Series(by_status, name="claims"), height=240)
        else:
            st.info("No claims.")
        st.markdown("### Regional Performance")
        regional = summary.get("regional_sales") or []
        if regional:
            st.bar_chart(pd.DataFrame(regional).set_index("region"), height=240)
    st.metric("Active Dealers", summary.get("active_dealers", 0))

# =========================================================
# Data Tab
# =========================================================
with tab_data:
    term = st.text_input("Search across all data...", key="data_search")
    for kind, title in [("skus", "SKU Inventory"), ("claims", "Claims Management"),
                        ("sales", "Sales Transactions"), ("dealers", "Dealers")]:
        rows = req_get(f"/records/{kind}", params={"q": term} if term else None) or []
        st.markdown(f"### {title} ({len(rows)})")
        if rows:
            st.dataframe(pd.json_normalize(rows), use_container_width=True)
        else:
            st.info("No data.")
