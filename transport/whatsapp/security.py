"""
Twilio Signature Verification

SECURITY BOUNDARY - Verify the X-Twilio-Signature header.
No agent imports. No retries. No logic.

Twilio signs the full webhook URL followed by every POST parameter
(sorted by name, name immediately followed by value) with HMAC-SHA1 keyed
by the account auth token, then base64-encodes the digest.
"""

import base64
import hashlib
import hmac
from typing import Any, Mapping, Optional

from fastapi import HTTPException, Request, status

SIGNATURE_HEADER = "X-Twilio-Signature"


def compute_signature(auth_token: str, url: str, params: Mapping[str, Any]) -> str:
    """Expected signature for a URL and its POST parameters."""
    payload = url + "".join(f"{key}{params[key]}" for key in sorted(params))
    digest = hmac.new(
        key=auth_token.encode("utf-8"),
        msg=payload.encode("utf-8"),
        digestmod=hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")

def is_valid_signature(
    auth_token: str,
    url: str,
    params: Mapping[str, Any],
    signature: Optional[str],
) -> bool:
    if not signature:
        return False
    expected = compute_signature(auth_token, url, params)
    # Constant-time compare
    return hmac.compare_digest(expected, signature)

def verify_signature(
    request: Request,
    params: Mapping[str, Any],
    auth_token: str,
    public_url: Optional[str] = None,
) -> None:
    """
    Verify the Twilio signature on a webhook request.

    Args:
        request: FastAPI Request object
        params: Parsed POST parameters
        auth_token: Twilio auth token
        public_url: Externally visible webhook URL. Behind a proxy the URL
            the app sees differs from the one Twilio signed.

    Raises:
        HTTPException(403): Missing or invalid signature
    """
    url = public_url or str(request.url)
    signature = request.headers.get(SIGNATURE_HEADER)

    if not is_valid_signature(auth_token, url, params, signature):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid signature",
        )
