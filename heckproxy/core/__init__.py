"""Core module initialization."""

from .assembler import ResponseAssembler, build_error_body
from .conversation import ConversationContext, extract_conversation
from .exceptions import (
    ConfigurationError,
    InvalidRequestError,
    ModelNotFoundError,
    ProxyError,
    StreamTruncatedError,
    UpstreamError,
)
from .gateway import ChatGateway
from .models import MODEL_MAPPING, list_model_names, resolve_model
from .translator import (
    EventKind,
    SentinelStreamTranslator,
    TranslationEvent,
    TranslationState,
    collect_answer,
    translate_lines,
)
from .upstream import UpstreamClient, UpstreamRequest, UpstreamStream, build_upstream_request

__all__ = [
    "ChatGateway",
    "ConfigurationError",
    "ConversationContext",
    "EventKind",
    "InvalidRequestError",
    "MODEL_MAPPING",
    "ModelNotFoundError",
    "ProxyError",
    "ResponseAssembler",
    "SentinelStreamTranslator",
    "StreamTruncatedError",
    "TranslationEvent",
    "TranslationState",
    "UpstreamClient",
    "UpstreamError",
    "UpstreamRequest",
    "UpstreamStream",
    "build_error_body",
    "build_upstream_request",
    "collect_answer",
    "extract_conversation",
    "list_model_names",
    "resolve_model",
    "translate_lines",
]
