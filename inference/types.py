from dataclasses import dataclass
from typing import Optional, Dict, Any

FALLBACK_REPLY = "I'm sorry, I didn't understand that. Could you rephrase?"
UNKNOWN_INTENT = "unknown"


@dataclass
class AgentReply:
    text: str
    intent: str = UNKNOWN_INTENT
    confidence: float = 0.0
    parameters: Optional[Dict[str, Any]] = None
    language_code: str = "en"
