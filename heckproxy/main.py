"""Module-level application instance for ASGI servers.

Example:
    uvicorn heckproxy.main:app --host 0.0.0.0 --port 8000
"""

from .app import create_app

app = create_app()

__all__ = ["app"]
