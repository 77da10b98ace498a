"""Testing utilities for in-process gateway simulations."""

from .fake_upstream import (
    DEFAULT_ROUTE,
    FakeSentinelUpstream,
    UpstreamResponse,
    sentinel_lines,
)

__all__ = [
    "DEFAULT_ROUTE",
    "FakeSentinelUpstream",
    "UpstreamResponse",
    "sentinel_lines",
]
