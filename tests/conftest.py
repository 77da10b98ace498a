"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from heckproxy import create_app
from heckproxy.core.upstream_transport import clear_upstream_transports
from heckproxy.settings import GatewaySettings, UpstreamSettings
from heckproxy.testing import FakeSentinelUpstream

UPSTREAM_URL = "https://upstream.test/api/ha/v1/chat"


# =============================================================================
# Transport Registry Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_transport_registry() -> Generator[None, None, None]:
    """Make sure no fake transport leaks from one test into the next."""
    clear_upstream_transports()
    yield
    clear_upstream_transports()


@pytest.fixture
def upstream() -> FakeSentinelUpstream:
    """A fake upstream registered for UPSTREAM_URL's host."""
    fake = FakeSentinelUpstream()
    fake.install(UPSTREAM_URL)
    return fake


# =============================================================================
# Settings / App Builders
# =============================================================================


def build_settings(**upstream_overrides: Any) -> GatewaySettings:
    """Build settings pointing at the fake upstream.

    Args:
        upstream_overrides: Fields to override on UpstreamSettings.

    Returns:
        GatewaySettings for create_app
    """
    upstream_settings = UpstreamSettings(url=UPSTREAM_URL, **upstream_overrides)
    return GatewaySettings(upstream=upstream_settings)


@pytest.fixture
def settings() -> GatewaySettings:
    return build_settings()


@pytest.fixture
def client(settings: GatewaySettings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings=settings)) as test_client:
        yield test_client


# =============================================================================
# Helpers
# =============================================================================


def parse_sse_events(text: str) -> list[dict[str, Any]]:
    """Decode every ``data: <json>`` event of a caller-facing SSE body."""
    events = []
    for block in text.split("\n\n"):
        block = block.strip()
        if not block.startswith("data: "):
            continue
        events.append(json.loads(block[len("data: "):]))
    return events


async def aiter_lines(lines: list[str]):
    """Helper to create an async iterator from a list of lines."""
    for line in lines:
        yield line
