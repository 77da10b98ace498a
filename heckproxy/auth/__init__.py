"""Authentication for the gateway."""

from .bearer import BearerTokenValidator, extract_bearer_token

__all__ = [
    "BearerTokenValidator",
    "extract_bearer_token",
]
