"""Core exceptions for the gateway."""

from typing import Optional


class ProxyError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """Raised when there's an issue with the configuration."""
    pass


class InvalidRequestError(ProxyError):
    """Raised when an incoming request is invalid."""

    def __init__(self, message: str, code: str = "invalid_request") -> None:
        super().__init__(message)
        self.code = code


class ModelNotFoundError(InvalidRequestError):
    """Raised when a requested model is not in the model table."""

    def __init__(self, model_name: str) -> None:
        super().__init__(f"Unsupported model: '{model_name}'", code="unsupported_model")
        self.model_name = model_name


class UpstreamError(ProxyError):
    """Raised when the upstream chat endpoint fails or cannot be reached."""

    code = "upstream_error"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StreamTruncatedError(UpstreamError):
    """Upstream closed the stream before sending the answer-done marker."""

    code = "upstream_stream_truncated"
