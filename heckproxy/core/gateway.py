"""Request orchestration: resolve, extract, call upstream, translate, assemble."""

import logging
import uuid
from typing import TYPE_CHECKING, AsyncIterator, Optional

from fastapi import Response
from fastapi.responses import JSONResponse, StreamingResponse

from .assembler import ResponseAssembler, build_error_body
from .conversation import extract_conversation
from .exceptions import StreamTruncatedError
from .models import resolve_model
from .sse import format_sse_event
from .translator import collect_answer, translate_lines
from .upstream import UpstreamClient, UpstreamStream, build_upstream_request

if TYPE_CHECKING:
    from ..settings import GatewaySettings
    from ..types.chat import ChatCompletionRequest

logger = logging.getLogger("heckproxy")

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class ChatGateway:
    """Serves chat completions by translating to and from the upstream protocol.

    Holds only read-only state, so one instance is shared by all requests.
    """

    def __init__(
        self,
        settings: "GatewaySettings",
        client: Optional[UpstreamClient] = None,
    ) -> None:
        self.settings = settings
        self.client = client or UpstreamClient(settings.upstream)

    async def complete(self, chat_request: "ChatCompletionRequest") -> Response:
        """Answer one chat completions request.

        Raises:
            ModelNotFoundError: Unknown model; raised before any upstream call.
            UpstreamError: Upstream unreachable, non-2xx, or (non-streaming
                only) truncated.
        """
        upstream_model = resolve_model(chat_request.model)
        context = extract_conversation(chat_request.messages)
        session_id = str(uuid.uuid4())

        logger.info(
            f"Processing request for model {chat_request.model} "
            f"(upstream {upstream_model}), stream={chat_request.stream}, session={session_id}"
        )
        logger.debug("Question: %r", context.question)

        upstream_request = build_upstream_request(
            question=context.question,
            session_id=session_id,
            previous_question=context.previous_question,
            previous_answer=context.previous_answer,
            upstream_model=upstream_model,
            settings=self.settings.upstream,
        )
        stream = await self.client.open_stream(upstream_request)
        logger.debug("Session %s: upstream answered with status %s", session_id, stream.status_code)
        assembler = ResponseAssembler(session_id, chat_request.model)

        if chat_request.stream:
            return self._streaming_response(stream, assembler)
        return await self._aggregate_response(stream, assembler)

    def _streaming_response(
        self, stream: UpstreamStream, assembler: ResponseAssembler
    ) -> StreamingResponse:
        fail_on_truncation = self.settings.upstream.fail_on_truncation
        session_id = assembler.response_id

        async def iterator() -> AsyncIterator[bytes]:
            emitted = 0
            try:
                async for event in translate_lines(
                    stream.iter_lines(), fail_on_truncation=fail_on_truncation
                ):
                    emitted += 1
                    yield assembler.sse_chunk(event)
                logger.info(f"Stream for session {session_id} completed with {emitted} events")
            except StreamTruncatedError as exc:
                logger.warning(f"Stream for session {session_id} truncated after {emitted} events")
                yield format_sse_event(
                    build_error_body(exc.message, "upstream_error", exc.code)
                )
            finally:
                await stream.aclose()

        return StreamingResponse(
            iterator(),
            media_type="text/event-stream",
            headers=dict(STREAM_HEADERS),
        )

    async def _aggregate_response(
        self, stream: UpstreamStream, assembler: ResponseAssembler
    ) -> JSONResponse:
        async with stream:
            answer = await collect_answer(
                translate_lines(
                    stream.iter_lines(),
                    fail_on_truncation=self.settings.upstream.fail_on_truncation,
                )
            )

        logger.info(
            f"Session {assembler.response_id} answered with {len(answer.content)} characters "
            f"(finish_reason={answer.finish_reason})"
        )
        return JSONResponse(assembler.completion(answer.content, answer.finish_reason))
