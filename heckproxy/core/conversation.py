"""Derive the upstream question and prior exchange from a chat history."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..types.chat import Message

logger = logging.getLogger("heckproxy")

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass(frozen=True)
class ConversationContext:
    """The question to ask now plus one prior question/answer pair."""

    question: str = ""
    previous_question: str = ""
    previous_answer: str = ""


def extract_question(history: Sequence["Message"]) -> str:
    """Return the content of the last user message, or "" if there is none."""
    for message in reversed(history):
        if message.role == USER_ROLE:
            return message.content
    return ""


def extract_previous_exchange(history: Sequence["Message"]) -> tuple[str, str]:
    """Return the (question, answer) pair that precedes the newest message.

    The scan starts at the second-to-last message and walks backwards to the
    first user message. The answer is only taken when the message directly
    after that user message is an assistant message.
    """
    count = len(history)
    if count < 2:
        return "", ""
    for idx in range(count - 2, -1, -1):
        if history[idx].role != USER_ROLE:
            continue
        previous_question = history[idx].content
        previous_answer = ""
        if history[idx + 1].role == ASSISTANT_ROLE:
            previous_answer = history[idx + 1].content
        return previous_question, previous_answer
    return "", ""


def extract_conversation(history: Sequence["Message"]) -> ConversationContext:
    """Build the ConversationContext for an upstream call."""
    previous_question, previous_answer = extract_previous_exchange(history)
    context = ConversationContext(
        question=extract_question(history),
        previous_question=previous_question,
        previous_answer=previous_answer,
    )
    logger.debug(
        "Extracted conversation from %d messages (has_previous=%s)",
        len(history),
        bool(previous_question),
    )
    return context
