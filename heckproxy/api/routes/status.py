"""Service status endpoint."""


async def service_status() -> dict:
    """GET / and GET /health"""
    return {
        "status": "Service Running",
        "message": "heckproxy is ready to translate chat completions",
    }
