import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env once per process
load_dotenv()

# === Cohere keys ===
def get_cohere_key() -> str | None:
    return os.getenv("CO_API_KEY") or os.getenv("COHERE_API_KEY")

# === App paths & models ===
BASE_DIR = Path(__file__).resolve().parent.parent
DB_PATH = os.getenv("DB_PATH", str(BASE_DIR / "data" / "dealerdesk.db"))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()
CREDENTIALS_PATH = os.getenv("CREDENTIALS_PATH", "")

MODEL_NAME = os.getenv("MODEL_NAME", "command-a-03-2025")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "20"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "500"))
LLM_CONTEXT_CHARS = int(os.getenv("LLM_CONTEXT_CHARS", "2000"))

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration handed to the store and the composer."""
    store_backend: str = "sql"
    database_url: str = f"sqlite:///{DB_PATH}"
    model_name: str = "command-a-03-2025"
    llm_timeout: float = 20.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500
    llm_context_chars: int = 2000
    currency_symbol: str = "₹"
    credentials_path: str = ""


def load_settings() -> Settings:
    return Settings(
        store_backend=STORE_BACKEND,
        database_url=DATABASE_URL,
        model_name=MODEL_NAME,
        llm_timeout=LLM_TIMEOUT,
        llm_temperature=LLM_TEMPERATURE,
        llm_max_tokens=LLM_MAX_TOKENS,
        llm_context_chars=LLM_CONTEXT_CHARS,
        currency_symbol=CURRENCY_SYMBOL,
        credentials_path=CREDENTIALS_PATH,
    )


def ensure_dirs() -> None:
    if DATABASE_URL.startswith("sqlite:///"):
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)


class ApiKeyStore:
    """Holds the model API key. The composer only cares whether one is set.

    A key set at runtime is written to ``path`` (if given) so it survives a
    restart, the way a browser client keeps it in local storage.
    """

    def __init__(self, initial: Optional[str] = None, path: str = ""):
        self._lock = threading.Lock()
        self._path = Path(path) if path else None
        self._key = (initial or "").strip() or None
        if self._key is None and self._path and self._path.is_file():
            self._key = self._path.read_text(encoding="utf-8").strip() or None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiKeyStore":
        return cls(initial=get_cohere_key(), path=settings.credentials_path)

    def get(self) -> Optional[str]:
        with self._lock:
            return self._key

    def is_configured(self) -> bool:
        return self.get() is not None

    def set(self, key: str) -> None:
        key = (key or "").strip()
        if not key:
            raise ValueError("API key must not be blank")
        with self._lock:
            self._key = key
            if self._path:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(key, encoding="utf-8")

    def clear(self) -> None:
        with self._lock:
            self._key = None
            if self._path and self._path.exists():
                self._path.unlink()
