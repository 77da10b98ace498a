"""Build caller-facing chat completion envelopes from translated events."""

import time
from typing import TYPE_CHECKING, Any, Callable, Optional

from .sse import format_sse_event
from .translator import FINISH_REASON_STOP, EventKind, TranslationEvent

if TYPE_CHECKING:
    from ..types.chat import ChatCompletion, ChatCompletionChunk, Delta

CHUNK_OBJECT = "chat.completion.chunk"
COMPLETION_OBJECT = "chat.completion"
ASSISTANT_ROLE = "assistant"


class ResponseAssembler:
    """Shapes events into OpenAI-style objects for one request.

    Every object shares ``response_id`` and carries the model name the caller
    asked for, never the upstream one. ``created`` is taken at emission time.
    """

    def __init__(
        self,
        response_id: str,
        model: str,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.response_id = response_id
        self.model = model
        self._clock = clock or time.time

    def _created(self) -> int:
        return int(self._clock())

    def chunk(self, event: TranslationEvent) -> "ChatCompletionChunk":
        """Build the ``chat.completion.chunk`` for one streamed event."""
        delta: "Delta" = {}
        finish_reason = None
        if event.kind is EventKind.ROLE:
            delta["role"] = ASSISTANT_ROLE
        elif event.kind is EventKind.CONTENT:
            delta["content"] = event.text
        else:
            finish_reason = event.finish_reason or FINISH_REASON_STOP
        return {
            "id": self.response_id,
            "object": CHUNK_OBJECT,
            "created": self._created(),
            "model": self.model,
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
        }

    def completion(
        self, content: str, finish_reason: str | None = FINISH_REASON_STOP
    ) -> "ChatCompletion":
        """Build the single ``chat.completion`` object of a non-streaming reply."""
        return {
            "id": self.response_id,
            "object": COMPLETION_OBJECT,
            "created": self._created(),
            "model": self.model,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": ASSISTANT_ROLE, "content": content},
                    "finish_reason": finish_reason,
                }
            ],
        }

    def sse_chunk(self, event: TranslationEvent) -> bytes:
        return format_sse_event(self.chunk(event))


def build_error_body(message: str, error_type: str, code: str) -> dict[str, Any]:
    """OpenAI-style error object, used for HTTP errors and in-stream errors."""
    return {"error": {"message": message, "type": error_type, "code": code}}
