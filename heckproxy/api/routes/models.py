"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from fastapi import Request

from ...core.models import MODEL_MAPPING

logger = logging.getLogger("heckproxy")

# Reported as the creation time of every model
_STARTED_AT = int(time.time())


async def list_models(request: Request) -> dict:
    """List the caller-facing model names in OpenAI API format.

    GET /v1/models
    """
    logger.info("Received models list request")
    request.app.state.auth.validate_request(request)

    return {
        "object": "list",
        "data": [
            {
                "id": model_name,
                "object": "model",
                "created": _STARTED_AT,
                "owned_by": upstream_model.split("/", 1)[0],
            }
            for model_name, upstream_model in MODEL_MAPPING.items()
        ],
    }
