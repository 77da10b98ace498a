"""API routes for the gateway."""

from .chat import chat_completions, handle_chat_request
from .models import list_models
from .status import service_status

__all__ = [
    "chat_completions",
    "handle_chat_request",
    "list_models",
    "service_status",
]
