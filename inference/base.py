from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .types import AgentReply, FALLBACK_REPLY


class AgentBackend(ABC):
    """
    Abstract conversational-agent boundary.
    Orchestration code must depend ONLY on this interface.
    """

    @abstractmethod
    async def detect_intent(
        self,
        text: str,
        user_id: str,
        language_code: str = "en",
    ) -> AgentReply:
        """Send user text to the agent and return its reply."""
        raise NotImplementedError


def extract_response_text(response_messages: List[Dict[str, Any]]) -> str:
    """
    Join every text segment of every text-typed response message.

    Non-text messages (payloads, audio, handoffs) are skipped. Falls back to
    FALLBACK_REPLY when nothing usable is present.
    """
    segments: List[str] = []
    for message in response_messages or []:
        text_block = message.get("text")
        if not text_block:
            continue
        segments.extend(text_block.get("text") or [])

    if not segments:
        return FALLBACK_REPLY
    return "\n".join(segments)
