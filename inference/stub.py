from .base import AgentBackend
from .types import AgentReply


class StubAgentBackend(AgentBackend):
    """
    Deterministic fake agent for testing and CI.

    Echoes the user text back. Session ids are still resolved so the
    registry behaves as it does against the real agent.
    """

    def __init__(self, session_store=None):
        self.session_store = session_store

    async def detect_intent(
        self,
        text: str,
        user_id: str,
        language_code: str = "en",
    ) -> AgentReply:
        if self.session_store is not None:
            self.session_store.get_or_create(user_id)

        return AgentReply(
            text=f"You said: {text}",
            intent="stub.echo",
            confidence=1.0,
            language_code=language_code,
        )
