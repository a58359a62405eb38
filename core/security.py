"""
Optional bearer key protection.

The gallery has no user accounts. When API_BEARER_KEY is configured,
routes that write or call the generative API require the same key in the
Authorization header.
"""

import hmac
import logging

from fastapi import Header

from .config import get_settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of a "Bearer <token>" header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_bearer_key(token: str | None, expected: str | None) -> bool:
    """
    Check a presented token against the configured key.

    Always succeeds when no key is configured.
    """
    if not expected:
        return True
    if not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


async def require_bearer_key(authorization: str | None = Header(None)) -> None:
    """FastAPI dependency enforcing the optional bearer key."""
    settings = get_settings()
    token = extract_bearer_token(authorization)

    if not verify_bearer_key(token, settings.api_bearer_key):
        logger.warning("Rejected request with missing or invalid bearer key")
        raise AuthenticationError(message="Invalid or missing bearer key")
