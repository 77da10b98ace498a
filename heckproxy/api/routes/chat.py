"""OpenAI-compatible chat completions endpoint."""

import json
import logging

from fastapi import HTTPException, Request, Response

from ...core import ChatGateway, InvalidRequestError, UpstreamError
from ...core.assembler import build_error_body
from ...types.chat import parse_chat_request

logger = logging.getLogger("heckproxy")

UPSTREAM_ERROR_MESSAGE = "Upstream service error"


def _invalid_request(message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=build_error_body(message, "invalid_request_error", code),
    )


async def handle_chat_request(request: Request) -> Response:
    """Validate an inbound request and hand it to the gateway.

    Client errors (bad JSON, wrong shape, unsupported model) are answered with
    400 before any upstream call. Upstream failures become 502.
    """
    logger.info(f"Handling {request.method} request to {request.url.path}")
    request.app.state.auth.validate_request(request)

    body = await request.body()
    try:
        payload = json.loads(body or b"{}")
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        logger.error(f"Invalid JSON payload: {exc}")
        raise _invalid_request("Request Format Error: invalid JSON payload", "invalid_json") from exc

    try:
        chat_request = parse_chat_request(payload)
    except InvalidRequestError as exc:
        logger.error(f"Rejected request: {exc.message}")
        raise _invalid_request(exc.message, exc.code) from exc

    gateway: ChatGateway = request.app.state.gateway
    try:
        return await gateway.complete(chat_request)
    except InvalidRequestError as exc:
        raise _invalid_request(exc.message, exc.code) from exc
    except UpstreamError as exc:
        logger.error(f"Upstream failure for model {chat_request.model}: {exc.message}")
        raise HTTPException(
            status_code=502,
            detail=build_error_body(UPSTREAM_ERROR_MESSAGE, "upstream_error", exc.code),
        ) from exc


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions
    """
    logger.info("Received chat completions request")
    return await handle_chat_request(request)
