"""SSE (Server-Sent Events) line helpers for both sides of the gateway."""

import json
from typing import Any, Optional

DATA_PREFIX = "data: "

# Sentinel payloads used by the upstream as control signals
ANSWER_START = "[ANSWER_START]"
ANSWER_DONE = "[ANSWER_DONE]"
RELATE_Q_START = "[RELATE_Q_START]"
RELATE_Q_DONE = "[RELATE_Q_DONE]"


def parse_data_line(line: str) -> Optional[str]:
    """Return the trimmed payload of a ``data: `` line, or None for any other line.

    Blank separators and non-data fields (``event:``, ``id:``, comments) yield
    None. The line terminator is tolerated whether or not it was stripped.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):].strip()


def is_related_question_marker(payload: str) -> bool:
    """True for the follow-up-question block markers, which are not answer text."""
    return payload.startswith(RELATE_Q_START) or payload.startswith(RELATE_Q_DONE)


def format_sse_event(data: Any) -> bytes:
    """Serialise one caller-facing SSE event as ``data: <json>\\n\\n``."""
    json_str = json.dumps(data, ensure_ascii=False)
    return f"{DATA_PREFIX}{json_str}\n\n".encode("utf-8")
