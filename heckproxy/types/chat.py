"""Types for the caller-facing chat completions protocol.

Inbound messages are normalised here, at the deserialisation boundary, so the
rest of the gateway only ever sees plain-string message content:

- a string is used as-is
- an array is concatenated in order (strings verbatim, text content parts by
  their ``text`` field, anything else JSON-stringified)
- null or a missing field becomes an empty string
- any other JSON value is JSON-stringified
"""

import json
from dataclasses import dataclass
from typing import Any, List, Mapping

from typing_extensions import TypedDict

from ..core.exceptions import InvalidRequestError


# =============================================================================
# Outbound (OpenAI-compatible) shapes
# =============================================================================


class Delta(TypedDict, total=False):
    """A streamed delta of a choice in a chat completion chunk.

    Attributes:
        role: Role indicator, only present on the opening chunk.
        content: Incremental text content.
    """
    role: str
    content: str


class ResponseMessage(TypedDict):
    """The full assistant message of a non-streaming completion."""
    role: str
    content: str


class ChunkChoice(TypedDict):
    index: int
    delta: Delta
    finish_reason: str | None


class CompletionChoice(TypedDict):
    index: int
    message: ResponseMessage
    finish_reason: str | None


class ChatCompletionChunk(TypedDict):
    """One ``chat.completion.chunk`` object of a streamed response."""
    id: str
    object: str
    created: int
    model: str
    choices: list[ChunkChoice]


class ChatCompletion(TypedDict):
    """The ``chat.completion`` object of a non-streaming response."""
    id: str
    object: str
    created: int
    model: str
    choices: list[CompletionChoice]


# =============================================================================
# Inbound request
# =============================================================================


@dataclass(frozen=True)
class Message:
    """A single chat message with normalised string content."""

    role: str
    content: str


@dataclass(frozen=True)
class ChatCompletionRequest:
    """The parts of an inbound chat completions request the gateway uses."""

    model: str
    messages: List[Message]
    stream: bool = False


def _stringify(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _fragment_text(fragment: Any) -> str:
    if isinstance(fragment, str):
        return fragment
    if isinstance(fragment, Mapping) and isinstance(fragment.get("text"), str):
        return fragment["text"]
    if fragment is None:
        return ""
    return _stringify(fragment)


def normalize_content(content: Any) -> str:
    """Collapse a raw ``content`` value into a single string."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_fragment_text(fragment) for fragment in content)
    return _stringify(content)


def parse_message(raw: Any, index: int = 0) -> Message:
    """Build a Message from one raw JSON array element."""
    if not isinstance(raw, Mapping):
        raise InvalidRequestError(
            f"Message at index {index} must be an object",
            code="invalid_message",
        )
    role = raw.get("role")
    if role is None:
        role = ""
    elif not isinstance(role, str):
        role = _stringify(role)
    return Message(role=role, content=normalize_content(raw.get("content")))


def parse_messages(raw_messages: Any) -> List[Message]:
    """Parse the ``messages`` field; a missing field is an empty history."""
    if raw_messages is None:
        return []
    if not isinstance(raw_messages, list):
        raise InvalidRequestError(
            "messages must be an array",
            code="invalid_messages",
        )
    return [parse_message(raw, idx) for idx, raw in enumerate(raw_messages)]


def parse_chat_request(payload: Any) -> ChatCompletionRequest:
    """Validate a decoded JSON body and build a ChatCompletionRequest.

    Raises:
        InvalidRequestError: If the body is not an object, ``messages`` is
            not an array of objects, or ``stream`` is not a boolean.
    """
    if not isinstance(payload, Mapping):
        raise InvalidRequestError(
            "Request body must be a JSON object",
            code="invalid_json_shape",
        )
    model = payload.get("model")
    if not isinstance(model, str):
        model = "" if model is None else _stringify(model)
    stream = payload.get("stream")
    if stream is None:
        stream = False
    elif not isinstance(stream, bool):
        raise InvalidRequestError(
            "stream must be a boolean",
            code="invalid_stream",
        )
    return ChatCompletionRequest(
        model=model,
        messages=parse_messages(payload.get("messages")),
        stream=stream,
    )
