"""Bounded per-session conversation memory."""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from datetime import datetime, timezone

from chat_agent.config import MemoryConfig
from chat_agent.types import MemoryEntry, Role, SessionMemory

logger = logging.getLogger(__name__)

NO_CONVERSATION = "No previous conversation"
SUMMARY_SEPARATOR = " | "
SUMMARY_MAX_CHARS = 240

_WHITESPACE = re.compile(r"\s+")


class SessionMemoryStore:
    """In-memory session logs with per-session and global caps.

    Sessions are kept in an ordered mapping that is re-ordered on every write,
    so the front of the mapping is always the least recently updated session
    and eviction just pops from the front.
    """

    def __init__(self, config: MemoryConfig | None = None) -> None:
        self.config = config or MemoryConfig()
        self._sessions: OrderedDict[str, SessionMemory] = OrderedDict()
        self._lock = threading.Lock()

    def get_session(self, session_id: str) -> list[MemoryEntry]:
        """Return the most recent entries of a session; unknown ids give []."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return []
            return session.messages[-self.config.max_messages_per_session :]

    def add_message(self, session_id: str, role: Role, content: str) -> None:
        entry = MemoryEntry(role=role, content=content, timestamp=_now())
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = SessionMemory(
                    session_id=session_id, messages=[], last_updated=entry.timestamp
                )
                self._sessions[session_id] = session
            session.messages.append(entry)
            session.last_updated = entry.timestamp
            self._sessions.move_to_end(session_id)

            overflow = len(session.messages) - self.config.max_messages_per_session
            if overflow > 0:
                del session.messages[:overflow]

            evicted = self._evict_oldest()
        if evicted:
            logger.info("Cleaned up %d old sessions", evicted)

    def create_memory_summary(self, session_id: str) -> str:
        """Compact one-line view of the last two turns of a session."""

        messages = self.get_session(session_id)
        if not messages:
            return NO_CONVERSATION
        return SUMMARY_SEPARATOR.join(_format_entry(entry) for entry in messages[-2:])

    def clear_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.info("Cleared session: %s", session_id)

    def clear_all_sessions(self) -> None:
        with self._lock:
            self._sessions.clear()
        logger.info("Cleared all sessions")

    def stats(self) -> dict[str, int]:
        with self._lock:
            total_messages = sum(len(s.messages) for s in self._sessions.values())
            return {"totalSessions": len(self._sessions), "totalMessages": total_messages}

    def _evict_oldest(self) -> int:
        evicted = 0
        while len(self._sessions) > self.config.max_sessions:
            self._sessions.popitem(last=False)
            evicted += 1
        return evicted


def _format_entry(entry: MemoryEntry) -> str:
    collapsed = _WHITESPACE.sub(" ", entry.content).strip()
    if len(collapsed) > SUMMARY_MAX_CHARS:
        collapsed = collapsed[: SUMMARY_MAX_CHARS - 3] + "..."
    return f"{entry.role}: {collapsed}"


def _now() -> datetime:
    return datetime.now(timezone.utc)
