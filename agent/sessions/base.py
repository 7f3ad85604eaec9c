"""
Abstract session store interface.

Maps a stable user identifier (the WhatsApp sender) to the conversation
session id the hosted agent uses to keep context between messages.
The orchestrator and agent backends depend only on this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """
    Abstract session boundary.

    Invariant: at most one session id per user at any time, and a session
    id never changes once assigned.
    """

    @abstractmethod
    def get_or_create(self, user_id: str) -> str:
        """Return the session id for user_id, creating one if absent."""
        raise NotImplementedError

    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Forget the session for user_id. No-op if absent."""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        """Number of live sessions."""
        raise NotImplementedError

    @abstractmethod
    def cleanup(self, max_age_ms: Optional[int] = None) -> int:
        """
        Evict sessions older than max_age_ms.

        Returns:
            Number of sessions evicted
        """
        raise NotImplementedError
