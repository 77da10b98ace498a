"""Typed, read-only settings derived from the loaded configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from .core.exceptions import ConfigurationError

DEFAULT_UPSTREAM_URL = "https://gateway.aiapilab.com/api/ha/v1/chat"
DEFAULT_LANGUAGE = "Chinese"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
DEFAULT_TIMEOUT = 30.0
DEFAULT_READ_TIMEOUT = 120.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_BOOLEAN_TRUE = {"true", "yes", "1", "on"}
_BOOLEAN_FALSE = {"false", "no", "0", "off"}


def _parse_bool(value: Any, *, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _BOOLEAN_TRUE:
            return True
        if normalized in _BOOLEAN_FALSE:
            return False
    raise ConfigurationError(f"{field_name} must be a boolean or boolean-like value")


def _parse_seconds(value: Any, *, field_name: str, default: float) -> float:
    if value is None:
        return default
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{field_name} must be numeric") from exc
    if seconds <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero")
    return seconds


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{name}' section must be a mapping if provided")
    return value


@dataclass(frozen=True)
class UpstreamSettings:
    """Where and how the upstream chat endpoint is called."""

    url: str = DEFAULT_UPSTREAM_URL
    language: str = DEFAULT_LANGUAGE
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    fail_on_truncation: bool = True

    @property
    def host(self) -> str:
        return urlparse(self.url).netloc

    @classmethod
    def from_config(cls, raw: Mapping[str, Any]) -> "UpstreamSettings":
        url = str(raw.get("url") or DEFAULT_UPSTREAM_URL).strip()
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ConfigurationError(f"upstream.url must be an absolute http(s) URL, got {url!r}")
        return cls(
            url=url,
            language=str(raw.get("language") or DEFAULT_LANGUAGE),
            user_agent=str(raw.get("user_agent") or DEFAULT_USER_AGENT),
            timeout=_parse_seconds(
                raw.get("timeout"), field_name="upstream.timeout", default=DEFAULT_TIMEOUT
            ),
            read_timeout=_parse_seconds(
                raw.get("read_timeout"),
                field_name="upstream.read_timeout",
                default=DEFAULT_READ_TIMEOUT,
            ),
            fail_on_truncation=_parse_bool(
                raw.get("fail_on_truncation"),
                field_name="upstream.fail_on_truncation",
                default=True,
            ),
        )


@dataclass(frozen=True)
class GatewaySettings:
    """Process-wide settings, built once at start-up and never mutated."""

    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    auth_token: Optional[str] = None
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "GatewaySettings":
        """Build settings; environment variables take priority over the file.

        Environment variables: HECKPROXY_HOST, HECKPROXY_PORT,
        HECKPROXY_LOG_LEVEL and AUTH_TOKEN.
        """
        env = os.environ if environ is None else environ
        proxy_settings = _section(config, "proxy_settings")
        server_cfg = _section(proxy_settings, "server")
        logging_cfg = _section(proxy_settings, "logging")

        host = env.get("HECKPROXY_HOST") or str(server_cfg.get("host", DEFAULT_HOST))

        raw_port = env.get("HECKPROXY_PORT") or server_cfg.get("port", DEFAULT_PORT)
        try:
            port = int(raw_port)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Server port must be an integer, got {raw_port!r}") from exc

        auth_token = env.get("AUTH_TOKEN") or proxy_settings.get("auth_token") or None
        if auth_token is not None:
            auth_token = str(auth_token).strip() or None

        raw_origins = proxy_settings.get("cors_origins", ["*"])
        if isinstance(raw_origins, str):
            raw_origins = [raw_origins]
        if not isinstance(raw_origins, list):
            raise ConfigurationError("proxy_settings.cors_origins must be a list of origins")

        log_level = str(
            env.get("HECKPROXY_LOG_LEVEL") or logging_cfg.get("level") or "INFO"
        ).upper()

        return cls(
            upstream=UpstreamSettings.from_config(_section(config, "upstream")),
            host=host,
            port=port,
            auth_token=auth_token,
            cors_origins=tuple(str(origin) for origin in raw_origins),
            log_level=log_level,
        )
