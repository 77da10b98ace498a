"""FastAPI application factory for the heckproxy gateway."""

import logging
from typing import Any, Mapping, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import chat_completions, list_models, service_status
from .auth import BearerTokenValidator
from .config_loader import load_config
from .core import ChatGateway, list_model_names
from .logging import setup_logging
from .settings import GatewaySettings

logger = logging.getLogger("heckproxy")


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    *,
    settings: Optional[GatewaySettings] = None,
    gateway: Optional[ChatGateway] = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        config: Raw configuration mapping. Loaded from disk when omitted.
        settings: Pre-built settings; takes precedence over ``config``.
        gateway: Pre-built gateway (tests inject one with a stub client).

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        if config is None:
            config = load_config()
        settings = GatewaySettings.from_config(config)

    setup_logging(settings.log_level)

    app = FastAPI(title="heckproxy")
    app.state.settings = settings
    app.state.gateway = gateway or ChatGateway(settings)
    app.state.auth = BearerTokenValidator(settings.auth_token)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def error_body_handler(request: Request, exc: HTTPException):
        """Send OpenAI-style error bodies at the top level instead of under ``detail``."""
        if isinstance(exc.detail, Mapping):
            return JSONResponse(
                content=dict(exc.detail),
                status_code=exc.status_code,
                headers=getattr(exc, "headers", None),
            )
        return await http_exception_handler(request, exc)

    @app.on_event("startup")
    async def startup_event():
        """Handle application startup."""
        logger.info("heckproxy gateway starting up...")
        logger.info("Configured bind address %s:%s", settings.host, settings.port)
        logger.info("Upstream endpoint: %s", settings.upstream.url)
        logger.info(
            "Upstream timeouts: connect/write=%ss read=%ss",
            settings.upstream.timeout,
            settings.upstream.read_timeout,
        )
        logger.info(f"Available models: {list_model_names()}")
        if app.state.auth.enabled:
            logger.info("Bearer token authentication enabled")
        logger.info("heckproxy gateway ready to handle requests")

    app.get("/")(service_status)
    app.get("/health")(service_status)
    app.get("/v1/models")(list_models)
    app.post("/v1/chat/completions")(chat_completions)
    app.post("/chat/completions")(chat_completions)

    logger.info("FastAPI application created")
    return app
