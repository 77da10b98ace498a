"""Outbound request building and transport for the upstream chat endpoint."""

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Mapping, Optional

import httpx

from .exceptions import UpstreamError
from .upstream_transport import get_upstream_transport

if TYPE_CHECKING:
    from ..settings import UpstreamSettings

logger = logging.getLogger("heckproxy")


@dataclass(frozen=True)
class UpstreamRequest:
    """A fully built call against the upstream chat endpoint."""

    url: str
    headers: Mapping[str, str]
    body: Mapping[str, Any] = field(default_factory=dict)

    def encode_body(self) -> bytes:
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


def build_upstream_request(
    question: str,
    session_id: str,
    previous_question: str,
    previous_answer: str,
    upstream_model: str,
    settings: "UpstreamSettings",
) -> UpstreamRequest:
    """Build the upstream request body and headers.

    Absent context is sent as empty strings, never omitted: the upstream reads
    an empty ``previousQuestion`` as "no prior exchange".
    """
    body = {
        "model": upstream_model,
        "question": question,
        "language": settings.language,
        "sessionId": session_id,
        "previousQuestion": previous_question or "",
        "previousAnswer": previous_answer or "",
    }
    headers = {
        "Content-Type": "application/json",
        "User-Agent": settings.user_agent,
        "Host": settings.host,
    }
    return UpstreamRequest(url=settings.url, headers=headers, body=body)


def format_httpx_error(exc: Exception, url: Optional[str] = None, timeout: Optional[float] = None) -> str:
    """Produce a detailed, log-friendly description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    try:
        request = getattr(exc, "request", None)
    except RuntimeError:
        # httpx raises when .request was never attached
        request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")

    if isinstance(exc, httpx.TimeoutException) and timeout is not None:
        parts.append(f"timeout={timeout}s")

    return "; ".join(parts)


class UpstreamStream:
    """An open upstream response; must be closed on every exit path."""

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def closed(self) -> bool:
        return self._closed

    async def iter_lines(self) -> AsyncIterator[str]:
        """Yield body lines without their terminators.

        A read error ends the iteration like a normal end of stream; the
        translator decides whether that counts as truncation.
        """
        try:
            async for line in self._response.aiter_lines():
                yield line
        except httpx.HTTPError as exc:
            logger.warning(
                "Upstream stream read failed: %s",
                format_httpx_error(exc, url=str(self._response.url)),
            )

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing upstream stream")
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()

    async def __aenter__(self) -> "UpstreamStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class UpstreamClient:
    """Sends upstream requests with bounded timeouts and no retries."""

    def __init__(self, settings: "UpstreamSettings") -> None:
        self.settings = settings

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.settings.timeout,
            read=self.settings.read_timeout,
            write=self.settings.timeout,
            pool=self.settings.timeout,
        )

    async def open_stream(self, upstream_request: UpstreamRequest) -> UpstreamStream:
        """Send the request and return the open streaming response.

        Raises:
            UpstreamError: On transport failure or a non-2xx status. The
                response and client are closed before raising.
        """
        url = upstream_request.url
        transport = get_upstream_transport(url)
        client = httpx.AsyncClient(
            timeout=self._timeout(), transport=transport, follow_redirects=True
        )
        try:
            request = client.build_request(
                "POST",
                url,
                headers=dict(upstream_request.headers),
                content=upstream_request.encode_body(),
            )
            logger.debug("Sending upstream request to %s", url)
            response = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            await client.aclose()
            detail = format_httpx_error(exc, url=url, timeout=self.settings.timeout)
            logger.error("Upstream request to %s failed: %s", url, detail)
            raise UpstreamError(f"Upstream request failed: {detail}") from exc
        except Exception:
            await client.aclose()
            raise

        stream = UpstreamStream(response, client)
        if not response.is_success:
            try:
                preview = (await response.aread()).decode("utf-8", "ignore")[:400]
            except httpx.HTTPError:
                preview = ""
            finally:
                await stream.aclose()
            logger.error(
                "Upstream %s returned status %s; body preview: %s",
                url,
                response.status_code,
                preview,
            )
            raise UpstreamError(
                f"Upstream returned status {response.status_code}",
                status_code=response.status_code,
            )

        logger.info("Upstream stream opened, status %s", response.status_code)
        return stream
