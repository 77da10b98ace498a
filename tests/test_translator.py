"""Tests for the sentinel stream translation engine."""

import pytest

from conftest import aiter_lines

from heckproxy.core.exceptions import StreamTruncatedError
from heckproxy.core.translator import (
    EventKind,
    SentinelStreamTranslator,
    TranslationEvent,
    TranslationState,
    collect_answer,
    translate_lines,
)

EXAMPLE_LINES = [
    "data: [ANSWER_START]\n",
    "data: Hello\n",
    "data: [RELATE_Q_START]x\n",
    "data: [ANSWER_DONE]\n",
]


class TestSentinelStreamTranslator:
    """Tests for the I/O-free state machine."""

    def test_starts_idle(self):
        translator = SentinelStreamTranslator()
        assert translator.state is TranslationState.IDLE
        assert not translator.answering
        assert not translator.finished

    def test_example_sequence_emits_role_content_finish(self):
        translator = SentinelStreamTranslator()
        events = translator.feed_lines(EXAMPLE_LINES)
        assert events == [
            TranslationEvent.role(),
            TranslationEvent.content("Hello"),
            TranslationEvent.finish("stop"),
        ]
        assert translator.state is TranslationState.DONE

    def test_answer_start_opens_answer(self):
        translator = SentinelStreamTranslator()
        assert translator.feed("data: [ANSWER_START]") == [TranslationEvent.role()]
        assert translator.answering

    @pytest.mark.parametrize("count", [1, 3, 10])
    def test_content_before_answer_start_is_ignored(self, count):
        translator = SentinelStreamTranslator()
        for _ in range(count):
            assert translator.feed("data: too early") == []
        assert translator.state is TranslationState.IDLE
        events = translator.feed_lines(["data: [ANSWER_START]", "data: real", "data: [ANSWER_DONE]"])
        assert [e.text for e in events if e.kind is EventKind.CONTENT] == ["real"]

    def test_non_data_lines_are_ignored(self):
        translator = SentinelStreamTranslator()
        translator.feed("data: [ANSWER_START]")
        for line in ["", "event: message", "id: 7", ": keep-alive", "data:nospace"]:
            assert translator.feed(line) == []
        assert translator.answering

    def test_related_question_block_and_empty_payloads_are_skipped(self):
        translator = SentinelStreamTranslator()
        translator.feed("data: [ANSWER_START]")
        assert translator.feed("data: [RELATE_Q_START][\"a\", \"b\"]") == []
        assert translator.feed("data: [RELATE_Q_DONE]") == []
        assert translator.feed("data: ") == []
        assert translator.feed("data:    ") == []
        assert translator.answering

    def test_payload_is_trimmed(self):
        translator = SentinelStreamTranslator()
        translator.feed("data: [ANSWER_START]  \r\n")
        assert translator.feed("data:   padded  \n") == [TranslationEvent.content("padded")]

    def test_repeated_answer_start_does_not_reopen(self):
        translator = SentinelStreamTranslator()
        translator.feed("data: [ANSWER_START]")
        assert translator.feed("data: [ANSWER_START]") == []
        assert translator.fragments_emitted == 0

    def test_answer_done_from_idle_finishes(self):
        translator = SentinelStreamTranslator()
        assert translator.feed("data: [ANSWER_DONE]") == [TranslationEvent.finish()]
        assert translator.finished

    def test_nothing_emitted_after_done(self):
        translator = SentinelStreamTranslator()
        translator.feed_lines(EXAMPLE_LINES)
        assert translator.feed("data: late text") == []
        assert translator.feed("data: [ANSWER_START]") == []
        assert translator.feed("data: [ANSWER_DONE]") == []

    def test_feed_lines_stops_at_done(self):
        translator = SentinelStreamTranslator()
        events = translator.feed_lines(EXAMPLE_LINES + ["data: after"])
        assert len(events) == 3
        assert translator.lines_seen == 4


class TestTranslateLines:
    """Tests for the async pull-based driver."""

    @pytest.mark.asyncio
    async def test_streaming_mode_yields_three_events(self):
        events = [event async for event in translate_lines(aiter_lines(EXAMPLE_LINES))]
        assert [event.kind for event in events] == [
            EventKind.ROLE,
            EventKind.CONTENT,
            EventKind.FINISH,
        ]
        assert events[1].text == "Hello"
        assert events[2].finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_non_streaming_mode_collects_exact_content(self):
        answer = await collect_answer(translate_lines(aiter_lines(EXAMPLE_LINES)))
        assert answer.content == "Hello"
        assert answer.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_stops_pulling_input_after_done(self):
        pulled = []

        async def lines():
            for line in EXAMPLE_LINES + ["data: never read"]:
                pulled.append(line)
                yield line

        [event async for event in translate_lines(lines())]
        assert pulled == EXAMPLE_LINES

    @pytest.mark.asyncio
    async def test_truncated_stream_raises_after_partial_events(self):
        lines = ["data: [ANSWER_START]", "data: partial"]
        received = []
        with pytest.raises(StreamTruncatedError):
            async for event in translate_lines(aiter_lines(lines)):
                received.append(event)
        assert received == [TranslationEvent.role(), TranslationEvent.content("partial")]

    @pytest.mark.asyncio
    async def test_truncated_stream_ends_silently_when_allowed(self):
        lines = ["data: [ANSWER_START]", "data: partial"]
        answer = await collect_answer(
            translate_lines(aiter_lines(lines), fail_on_truncation=False)
        )
        assert answer.content == "partial"
        assert answer.finish_reason is None

    @pytest.mark.asyncio
    async def test_multiple_fragments_concatenate_in_order(self):
        lines = [
            "data: [ANSWER_START]",
            "",
            "data: 你好",
            "",
            "data: ，世界",
            "data: [RELATE_Q_START]['下一个问题']",
            "data: [RELATE_Q_DONE]",
            "data: [ANSWER_DONE]",
        ]
        answer = await collect_answer(translate_lines(aiter_lines(lines)))
        assert answer.content == "你好，世界"
