"""
Health check endpoint for the webmeter API.

Provides a simple GET /health endpoint that returns {"status": "ok"} with
HTTP 200. It does not touch the Reading Store; it is intended for
container HEALTHCHECK and load balancer health checks.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Return a simple health status.

    Returns:
        dict: ``{"status": "ok"}`` indicating the service is alive.
    """
    return {"status": "ok"}
