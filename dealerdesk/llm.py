# dealerdesk/llm.py
import logging

from langchain_cohere import ChatCohere
from langchain_core.prompts import ChatPromptTemplate

from .config import Settings
from .errors import RemoteUnavailable

log = logging.getLogger(__name__)

PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system}"),
    ("user", "{question}"),
])

def build_system_prompt(role: str, context: str, budget: int = 2000) -> str:
    return (
        "You are a helpful AI assistant for a manufacturing company. You help users with "
        "SKU availability, claims status, and sales data.\n\n"
        f"User role: {role}\n\n"
        "Be conversational, friendly, and provide actionable insights. Format your response "
        "clearly with bullet points or tables when showing data.\n\n"
        f"Current data context: {(context or '')[:budget]}"
    )

def _content_text(ans) -> str:
    content = ans.content if hasattr(ans, "content") else ans
    if isinstance(content, list):
        content = "".join(
            p.get("text", "") if isinstance(p, dict) else str(p) for p in content
        )
    return (content or "").strip()

class CohereCompleter:
    """One chat completion per call. No retries; every failure is RemoteUnavailable."""

    def __init__(self, llm):
        self.chain = PROMPT | llm

    @classmethod
    def from_settings(cls, api_key: str, settings: Settings) -> "CohereCompleter":
        llm = ChatCohere(
            model=settings.model_name,
            temperature=settings.llm_temperature,
            cohere_api_key=api_key,
            timeout_seconds=settings.llm_timeout,
        )
        return cls(llm.bind(max_tokens=settings.llm_max_tokens))

    def complete(self, system: str, user: str) -> str:
        try:
            ans = self.chain.invoke({"system": system, "question": user})
        except Exception as e:
            raise RemoteUnavailable(f"cohere chat failed: {type(e).__name__}") from e
        text = _content_text(ans)
        if not text:
            raise RemoteUnavailable("cohere chat returned no text")
        return text
