"""
Session registry exports.

Clean interface for agent to import session components.
"""

from agent.sessions.base import SessionStore
from agent.sessions.memory import InMemorySessionStore

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
]
