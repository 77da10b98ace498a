"""Translation engine for the upstream sentinel SSE protocol.

The upstream frames its answer with sentinel payloads::

    data: [ANSWER_START]
    data: 你好
    data: ，世界
    data: [RELATE_Q_START]...
    data: [RELATE_Q_DONE]...
    data: [ANSWER_DONE]

``SentinelStreamTranslator`` is a pure state machine (no I/O) that turns each
upstream line into zero or more ``TranslationEvent``s:

    IDLE --[ANSWER_START]--> ANSWERING --[ANSWER_DONE]--> DONE

- ROLE is emitted once, when the answer opens.
- CONTENT is emitted for every non-empty payload while ANSWERING, except the
  related-question markers.
- FINISH is emitted on ``[ANSWER_DONE]`` from any state.
- Nothing is emitted before ANSWER_START or after DONE.

``translate_lines`` drives the machine from an async line iterator and is the
single engine behind both the streaming and the aggregating response paths.
"""

import enum
import logging
from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator, Iterable, List

from .exceptions import StreamTruncatedError
from .sse import (
    ANSWER_DONE,
    ANSWER_START,
    is_related_question_marker,
    parse_data_line,
)

logger = logging.getLogger("heckproxy")

FINISH_REASON_STOP = "stop"


class TranslationState(enum.Enum):
    IDLE = "idle"
    ANSWERING = "answering"
    DONE = "done"


class EventKind(enum.Enum):
    ROLE = "role"
    CONTENT = "content"
    FINISH = "finish"


@dataclass(frozen=True)
class TranslationEvent:
    """One caller-visible step of the translated answer."""

    kind: EventKind
    text: str = ""
    finish_reason: str | None = None

    @classmethod
    def role(cls) -> "TranslationEvent":
        return cls(EventKind.ROLE)

    @classmethod
    def content(cls, text: str) -> "TranslationEvent":
        return cls(EventKind.CONTENT, text=text)

    @classmethod
    def finish(cls, reason: str = FINISH_REASON_STOP) -> "TranslationEvent":
        return cls(EventKind.FINISH, finish_reason=reason)


class SentinelStreamTranslator:
    """State machine translating upstream sentinel payloads into events."""

    def __init__(self) -> None:
        self.state = TranslationState.IDLE
        self.lines_seen = 0
        self.fragments_emitted = 0

    @property
    def answering(self) -> bool:
        return self.state is TranslationState.ANSWERING

    @property
    def finished(self) -> bool:
        return self.state is TranslationState.DONE

    def feed(self, line: str) -> List[TranslationEvent]:
        """Consume one upstream line and return the events it produces."""
        if self.state is TranslationState.DONE:
            return []
        self.lines_seen += 1
        payload = parse_data_line(line)
        if payload is None:
            return []
        return self.transition(payload)

    def transition(self, payload: str) -> List[TranslationEvent]:
        """Apply one trimmed ``data:`` payload to the state machine."""
        if self.state is TranslationState.DONE:
            return []

        if payload == ANSWER_DONE:
            self.state = TranslationState.DONE
            return [TranslationEvent.finish()]

        if self.state is TranslationState.IDLE:
            if payload == ANSWER_START:
                self.state = TranslationState.ANSWERING
                return [TranslationEvent.role()]
            return []

        # ANSWERING
        if payload == ANSWER_START or not payload or is_related_question_marker(payload):
            return []
        self.fragments_emitted += 1
        return [TranslationEvent.content(payload)]

    def feed_lines(self, lines: Iterable[str]) -> List[TranslationEvent]:
        """Feed a batch of lines, stopping at DONE."""
        events: List[TranslationEvent] = []
        for line in lines:
            events.extend(self.feed(line))
            if self.finished:
                break
        return events


async def translate_lines(
    lines: AsyncIterable[str],
    translator: SentinelStreamTranslator | None = None,
    *,
    fail_on_truncation: bool = True,
) -> AsyncIterator[TranslationEvent]:
    """Lazily translate an async stream of upstream lines.

    Stops pulling input as soon as ``[ANSWER_DONE]`` is seen. If the input
    ends first the answer is truncated: a warning is logged and, when
    ``fail_on_truncation`` is set, ``StreamTruncatedError`` is raised after
    every event produced so far has been yielded.
    """
    translator = translator or SentinelStreamTranslator()
    async for line in lines:
        for event in translator.feed(line):
            yield event
        if translator.finished:
            return

    logger.warning(
        "Upstream stream ended before %s (state=%s, lines=%d, fragments=%d)",
        ANSWER_DONE,
        translator.state.value,
        translator.lines_seen,
        translator.fragments_emitted,
    )
    if fail_on_truncation:
        raise StreamTruncatedError("Upstream stream ended before the answer was complete")


@dataclass
class CollectedAnswer:
    """The aggregated result of a non-streaming translation."""

    content: str
    finish_reason: str | None


async def collect_answer(events: AsyncIterable[TranslationEvent]) -> CollectedAnswer:
    """Accumulate CONTENT events into a single answer text.

    ROLE and FINISH events add no text; FINISH only records the reason.
    """
    parts: List[str] = []
    finish_reason: str | None = None
    async for event in events:
        if event.kind is EventKind.CONTENT:
            parts.append(event.text)
        elif event.kind is EventKind.FINISH:
            finish_reason = event.finish_reason
    return CollectedAnswer(content="".join(parts), finish_reason=finish_reason)
