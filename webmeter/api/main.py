"""
FastAPI application factory and process entry point for the webmeter API.

Settings are validated when the app is created and stored on
``app.state.settings`` for route handlers. Error kinds from
:mod:`webmeter.errors` are converted to ``{"success": false, ...}``
envelopes by the exception handlers registered here.

CHANGELOG:
- 2026-10-19: Initialize the database engine from app settings in lifespan
- 2026-10-19: Register dashboard and charge routers
- 2026-10-19: Initial creation
"""

import json
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webmeter import __version__, errors
from webmeter.api.charge import router as charge_router
from webmeter.api.dashboard import router as dashboard_router
from webmeter.api.health import router as health_router
from webmeter.config import Settings
from webmeter.db.session import dispose_engine, init_engine
from webmeter.errors import QueryValidationError, StoreUnavailableError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the API process.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def _query_validation_handler(request: Request, exc: QueryValidationError) -> JSONResponse:
    logger.info("Rejected %s: %s (%s)", request.url.path, exc.message, exc.reason)
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "validation_error",
            "reason": exc.reason,
            "message": exc.message,
        },
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report FastAPI parameter parsing failures with the same envelope."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    logger.info("Rejected %s: %s", request.url.path, details)
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "validation_error",
            "reason": errors.INVALID_PARAMETER,
            "message": details,
        },
    )


async def _store_unavailable_handler(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "error": "store_unavailable",
            "message": str(exc),
        },
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: bind the engine to the app settings, dispose it on shutdown."""
    settings: Settings = app.state.settings
    init_engine(settings.database_url)
    logger.info(
        "Webmeter API ready (cache=%s, store_timeout=%.1fs)",
        "on" if settings.redis_url else "off",
        settings.store_timeout_s,
    )
    yield
    await dispose_engine()
    logger.info("Webmeter API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Pre-built settings; loaded from the environment when omitted.

    Returns:
        FastAPI: The configured application.

    Raises:
        pydantic.ValidationError: If required settings are missing or invalid.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Webmeter API",
        description="Power meter dashboard, time-of-use and tariff charge API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    origins = settings.get_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET"],
            allow_headers=["Authorization"],
        )

    app.add_exception_handler(QueryValidationError, _query_validation_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable_handler)

    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(charge_router)

    @app.get("/")
    async def root() -> dict:
        """Root health check endpoint."""
        return {"status": "ok"}

    return app


def main() -> None:
    """Process entry point: configure logging and serve the API."""
    settings = Settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
