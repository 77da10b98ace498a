"""heckproxy - OpenAI-compatible gateway for a sentinel-framed SSE chat upstream.

Accepts ``/v1/chat/completions`` requests, forwards the latest question plus
one prior exchange to the upstream chat endpoint, and translates its
``[ANSWER_START]`` / ``[ANSWER_DONE]`` framed event stream back into
OpenAI chat completion chunks or a single aggregated completion.

This module provides:
- create_app: FastAPI application factory
- ChatGateway: request orchestration shared by all requests
- SentinelStreamTranslator: the I/O-free translation state machine

Example:
    >>> from heckproxy import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="127.0.0.1", port=8000)
"""

from .app import create_app
from .config_loader import load_config
from .core import ChatGateway, SentinelStreamTranslator, resolve_model
from .logging import logger, setup_logging
from .settings import GatewaySettings, UpstreamSettings

__version__ = "0.1.0"

__all__ = [
    "ChatGateway",
    "GatewaySettings",
    "SentinelStreamTranslator",
    "UpstreamSettings",
    "create_app",
    "load_config",
    "logger",
    "resolve_model",
    "setup_logging",
]
