"""
Dialogflow CX backend (REST, v3).

Each WhatsApp user is mapped to one agent session through the session store,
so the agent keeps conversational context across messages.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from agent.sessions import SessionStore
from errors import IntentDetectionError
from services.google_auth import TokenProvider

from .base import AgentBackend, extract_response_text
from .types import AgentReply, UNKNOWN_INTENT

logger = logging.getLogger(__name__)


def api_host(location: str) -> str:
    """Regional endpoint for a location; the global agent lives on the bare host."""
    if location == "global":
        return "dialogflow.googleapis.com"
    return f"{location}-dialogflow.googleapis.com"


class DialogflowCXBackend(AgentBackend):
    """
    Dialogflow CX detectIntent over HTTPS with an OAuth bearer token.
    """

    def __init__(
        self,
        project_id: str,
        location: str,
        agent_id: str,
        session_store: SessionStore,
        token_provider: TokenProvider,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = 30.0,
    ):
        """
        Args:
            project_id: Google Cloud project
            location: Agent location ("global" or a region such as "us-central1")
            agent_id: Dialogflow CX agent id
            session_store: user id → session id registry
            token_provider: OAuth bearer token source
            http_client: Shared AsyncClient (one is created if omitted)
            timeout_s: Per-request timeout
        """
        self.project_id = project_id
        self.location = location
        self.agent_id = agent_id
        self.session_store = session_store
        self.token_provider = token_provider
        self.timeout_s = timeout_s
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_s)

    def session_path(self, session_id: str) -> str:
        return (
            f"projects/{self.project_id}/locations/{self.location}"
            f"/agents/{self.agent_id}/sessions/{session_id}"
        )

    def detect_intent_url(self, session_id: str) -> str:
        return f"https://{api_host(self.location)}/v3/{self.session_path(session_id)}:detectIntent"

    async def detect_intent(
        self,
        text: str,
        user_id: str,
        language_code: str = "en",
    ) -> AgentReply:
        session_id = self.session_store.get_or_create(user_id)

        logger.info(
            "Detecting intent",
            extra={"user_id": user_id, "text": text, "language_code": language_code},
        )

        body = {
            "queryInput": {
                "text": {"text": text},
                "languageCode": language_code,
            }
        }

        try:
            token = await self.token_provider.get_token()
            response = await self._http_client.post(
                self.detect_intent_url(session_id),
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.error(
                f"Intent detection failed: {e}",
                extra={"user_id": user_id},
            )
            raise IntentDetectionError(f"Failed to process message: {e}") from e

        reply = parse_query_result(data.get("queryResult") or {}, language_code)

        logger.info(
            "Intent detected",
            extra={
                "intent": reply.intent,
                "confidence": reply.confidence,
                "response_length": len(reply.text),
            },
        )
        return reply


def parse_query_result(query_result: Dict[str, Any], language_code: str) -> AgentReply:
    intent = query_result.get("intent") or (query_result.get("match") or {}).get("intent") or {}
    match = query_result.get("match") or {}

    return AgentReply(
        text=extract_response_text(query_result.get("responseMessages") or []),
        intent=intent.get("displayName") or UNKNOWN_INTENT,
        confidence=float(
            query_result.get("intentDetectionConfidence") or match.get("confidence") or 0.0
        ),
        parameters=query_result.get("parameters"),
        language_code=language_code,
    )
