"""
In-memory session store.

Process-local dict keyed by sender. A restart silently resets every
conversation.
"""

import logging
from typing import Dict, Optional
from uuid import uuid4

from agent.sessions.base import SessionStore

logger = logging.getLogger(__name__)


class InMemorySessionStore(SessionStore):
    """
    Dict-backed session store.

    get_or_create has no await point, so insert-if-absent is atomic on the
    event loop and needs no lock.
    """

    def __init__(self, session_timeout_ms: int = 3600000):
        self.session_timeout_ms = session_timeout_ms
        self._sessions: Dict[str, str] = {}  # {user_id: session_id}

    def get_or_create(self, user_id: str) -> str:
        session_id = self._sessions.get(user_id)
        if session_id is None:
            session_id = str(uuid4())
            self._sessions[user_id] = session_id
            logger.info(
                "Created new session",
                extra={"user_id": user_id, "session_id": session_id},
            )
        return session_id

    def clear(self, user_id: str) -> None:
        if self._sessions.pop(user_id, None) is not None:
            logger.info("Session cleared", extra={"user_id": user_id})

    def count(self) -> int:
        return len(self._sessions)

    def cleanup(self, max_age_ms: Optional[int] = None) -> int:
        """
        Log a cleanup pass.

        Creation times are not tracked, so nothing is evicted yet.
        """
        logger.info(
            "Session cleanup triggered",
            extra={
                "active_sessions": len(self._sessions),
                "max_age_ms": max_age_ms or self.session_timeout_ms,
            },
        )
        return 0
