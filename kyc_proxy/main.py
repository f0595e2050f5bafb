"""
FastAPI KYC Proxy Application Factory
=====================================

This is the main entry point for the proxy that sits between KYC data
consumers and the Airtable table holding the KYC records.

Architecture:
    Clients → KYC Proxy (this service) → Airtable API

Routers:
    - /kyc               : Pass-through to the KYC table (Bearer token injected)
    - /kyc/{account_id}  : KYC status of a single NEAR account
    - /health            : Health check endpoint

Environment Variables:
    - AIRTABLE_API_TOKEN: Airtable access token (required; AIRTABLE_API_KEY also accepted)
    - AIRTABLE_BASE_ID / AIRTABLE_TABLE_ID: Location of the KYC table
    - ALLOWED_ORIGINS: Comma-separated CORS origins (default: any)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn kyc_proxy.main:create_app --factory --reload --port 8000

    Production:
        kyc-proxy
"""

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .config import Settings, get_settings, validate_configuration
from .kyc import kyc_router
from .models import ErrorResponse, HealthResponse
from .proxy import proxy_router

SERVICE_NAME = "kyc-proxy"

logger = logging.getLogger("kyc_proxy.main")


# Attributes every LogRecord carries; anything else came in through extra=.
_RESERVED_LOG_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line, including any extra= fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[handler],
        force=True,
    )


class AppState:
    """
    Application state container.

    Holds the resources shared by all requests: the read-only settings and
    the pooled upstream HTTP client.
    """
    def __init__(self, settings: Settings):
        self.settings: Settings = settings
        self.upstream_client: Optional[httpx.AsyncClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Log configuration warnings
        - Create the pooled upstream HTTP client

    Shutdown tasks:
        - Close the upstream HTTP client
    """
    app_state: AppState = app.state.app_state
    settings = app_state.settings

    report = validate_configuration(settings)
    for warning in report["warnings"]:
        logger.warning(warning)

    app_state.upstream_client = httpx.AsyncClient(
        timeout=httpx.Timeout(
            settings.UPSTREAM_TIMEOUT_SECONDS,
            connect=settings.UPSTREAM_CONNECT_TIMEOUT_SECONDS,
        )
    )
    logger.info(
        "KYC proxy started",
        extra={"table_url": report["table_url"], "version": __version__}
    )

    yield

    logger.info("Shutting down KYC proxy")
    await app_state.upstream_client.aclose()
    app_state.upstream_client = None
    logger.info("KYC proxy shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Route handlers
        - Exception handlers

    Args:
        settings: Explicit settings; loaded from the environment when omitted

    Returns:
        FastAPI: Configured application instance

    Raises:
        ValidationError: If required configuration is missing or invalid
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="KYC Proxy",
        description="Credential-injecting proxy for the Airtable KYC table",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.app_state = AppState(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(proxy_router, tags=["KYC Proxy"])
    app.include_router(kyc_router, tags=["KYC Status"])

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", service=SERVICE_NAME, version=__version__)

    @app.get("/", tags=["System"])
    async def root() -> Dict[str, Any]:
        """
        Root endpoint with service information.

        Returns:
            dict: Service metadata and available endpoints
        """
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "description": "Credential-injecting proxy for the Airtable KYC table",
            "endpoints": {
                "health": "/health",
                "docs": "/docs",
                "table": "/kyc",
                "account_status": "/kyc/{account_id}",
            }
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a standardized error response.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred",
            detail=str(exc) if settings.LOG_LEVEL == "DEBUG" else None,
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    return app


def main() -> None:
    """
    Console entry point.

    Loads settings before anything binds a socket, so a missing or invalid
    AIRTABLE_API_TOKEN ends the process with exit status 1.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "settings"
            for error in e.errors()
        )
        logger.critical(f"Invalid configuration, refusing to start: {fields}")
        sys.exit(1)

    setup_logging(settings.LOG_LEVEL)

    uvicorn.run(
        create_app(settings),
        host=settings.PROXY_HOST,
        port=settings.PROXY_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
