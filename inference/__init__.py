"""
Conversational-agent boundary.

This package provides a clean abstraction for intent detection, allowing
the orchestrator to remain agnostic of the hosted agent.

Supported backends:
- StubAgentBackend: Deterministic echo agent (default for CI/tests)
- DialogflowCXBackend: Hosted Dialogflow CX agent

Example usage:
    from inference import StubAgentBackend

    backend = StubAgentBackend()
    reply = await backend.detect_intent("Hello", user_id="whatsapp:+15550001111")
"""

from .types import AgentReply, FALLBACK_REPLY, UNKNOWN_INTENT
from .base import AgentBackend, extract_response_text
from .stub import StubAgentBackend
from .dialogflow import DialogflowCXBackend

__all__ = [
    "AgentReply",
    "FALLBACK_REPLY",
    "UNKNOWN_INTENT",
    "AgentBackend",
    "extract_response_text",
    "StubAgentBackend",
    "DialogflowCXBackend",
]
