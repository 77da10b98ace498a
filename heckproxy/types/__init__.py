"""Type definitions for the gateway."""

from .chat import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    Delta,
    Message,
    normalize_content,
    parse_chat_request,
    parse_message,
    parse_messages,
)

__all__ = [
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "Delta",
    "Message",
    "normalize_content",
    "parse_chat_request",
    "parse_message",
    "parse_messages",
]
