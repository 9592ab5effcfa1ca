# dealerdesk/sessions.py
import logging
import threading
import uuid
from typing import Dict, List, Optional, Tuple

from .graph.build_graph import Composer, ComposedReply
from .models import Message

log = logging.getLogger(__name__)

GREETING = (
    "Hello! 👋 I'm your AI business assistant. I can help you with:\n\n"
    "📦 **Product & Inventory**: Check SKU availability, stock levels, and product information\n"
    "📋 **Claims Management**: Review warranty claims, returns, and their status\n"
    "📊 **Sales Analytics**: Analyze sales performance, revenue trends, and dealer insights\n"
    "🔍 **Smart Search**: Find specific data across your business operations\n\n"
    "What would you like to explore today?"
)

class SessionStore:
    """Append-only transcripts, kept in memory for the life of the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, List[Message]] = {}

    def open(self) -> str:
        sid = uuid.uuid4().hex
        with self._lock:
            self._sessions[sid] = [Message(sender="assistant", content=GREETING)]
        return sid

    def exists(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def append(self, session_id: str, sender: str, content: str,
               reply_to: Optional[str] = None) -> Message:
        msg = Message(sender=sender, content=content, reply_to=reply_to)
        with self._lock:
            if session_id not in self._sessions:
                raise KeyError(session_id)
            self._sessions[session_id].append(msg)
        return msg

    def messages(self, session_id: str) -> List[Message]:
        with self._lock:
            if session_id not in self._sessions:
                raise KeyError(session_id)
            return list(self._sessions[session_id])


class ChatService:
    def __init__(self, composer: Composer, sessions: SessionStore):
        self.composer = composer
        self.sessions = sessions

    def submit(self, session_id: str, text: str,
               role: Optional[str] = "dealer") -> Tuple[Message, Message, ComposedReply]:
        """Log the user's message, answer it, log the answer against it."""
        text = (text or "").strip()
        if not text:
            raise ValueError("Message must not be blank")
        if not self.sessions.exists(session_id):
            raise KeyError(session_id)
        user_msg = self.sessions.append(session_id, "user", text)
        reply = self.composer.respond(text, role)
        bot_msg = self.sessions.append(session_id, "assistant", reply.text, reply_to=user_msg.id)
        log.info("message answered", extra={"session_id": session_id, "intent": reply.intent})
        return user_msg, bot_msg, reply
