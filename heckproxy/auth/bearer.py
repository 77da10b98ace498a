"""Bearer token authentication for the public API."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import HTTPException, Request

logger = logging.getLogger("heckproxy")

PROTECTED_PREFIXES = ("/v1/", "/chat/")


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header value, else None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class BearerTokenValidator:
    """Checks the Authorization header against the configured token.

    With no token configured every request is allowed.
    """

    def __init__(self, token: Optional[str]) -> None:
        self._token = token or None

    @property
    def enabled(self) -> bool:
        return self._token is not None

    def requires_auth(self, path: str) -> bool:
        return self.enabled and path.startswith(PROTECTED_PREFIXES)

    def is_authorized(self, authorization: Optional[str]) -> bool:
        if not self.enabled:
            return True
        provided = extract_bearer_token(authorization)
        if provided is None:
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self._token.encode("utf-8"))

    def validate_request(self, request: Request) -> None:
        """Raise 401 when the request lacks a matching bearer token.

        Raises:
            HTTPException: 401 with an OpenAI-style error body.
        """
        if not self.requires_auth(request.url.path):
            return
        if self.is_authorized(request.headers.get("authorization")):
            return
        logger.warning(f"Rejected unauthorized request to {request.url.path}")
        raise HTTPException(
            status_code=401,
            detail={
                "error": {
                    "message": "Unauthorized Access",
                    "type": "authentication_error",
                    "code": "invalid_api_key",
                }
            },
        )
