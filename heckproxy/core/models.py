"""Static mapping between caller-facing and upstream model names."""

import logging
from types import MappingProxyType
from typing import List, Mapping

from .exceptions import ModelNotFoundError

logger = logging.getLogger("heckproxy")

MODEL_MAPPING: Mapping[str, str] = MappingProxyType({
    "deepseek": "deepseek/deepseek-chat",
    "gpt-4o-mini": "openai/gpt-4o-mini",
    "gemini-flash-1.5": "google/gemini-flash-1.5",
    "deepseek-reasoner": "deepseek-reasoner",
    "minimax-01": "minimax/minimax-01",
})


def resolve_model(model_name: str) -> str:
    """Map a caller model name to the upstream model name.

    Lookup is an exact match: no case folding, no prefix stripping.

    Raises:
        ModelNotFoundError: If the name is not in the table.
    """
    if not isinstance(model_name, str):
        raise ModelNotFoundError(str(model_name))
    try:
        upstream_model = MODEL_MAPPING[model_name]
    except KeyError:
        logger.warning("Rejected unsupported model %r", model_name)
        raise ModelNotFoundError(model_name) from None
    logger.debug("Resolved model %s -> %s", model_name, upstream_model)
    return upstream_model


def list_model_names() -> List[str]:
    """Return the caller-facing model names in table order."""
    return list(MODEL_MAPPING.keys())
