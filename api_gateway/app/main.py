"""
FastAPI API Gateway Application Factory
=======================================

Entry point for the gateway that sits between clients and the data service.

Architecture:
    Clients → API Gateway (this service) → Data Service

Routers:
    - /tags/*       : Proxied requests to the data service (guarded)
    - /health       : Health check endpoint

Environment Variables:
    - DATA_SERVICE_URL: Data service base URL (e.g., "http://localhost:8000")
    - SESSION_JWT_SECRET: Secret for verifying session JWTs
    - ENVIRONMENT: "localhost"/"development" for verbose errors (default: production)
    - ALLOWED_ORIGIN: Access-Control-Allow-Origin value (default: *)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn api_gateway.app.main:create_app --factory --reload --port 8080

    Production:
        uvicorn api_gateway.app.main:create_app --factory --host 0.0.0.0 --port 8080 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI
import uvicorn

from .config import Settings, get_settings
from .middleware import CORSHeadersMiddleware
from .models import HealthResponse
from .proxy.client import DataServiceClient, create_http_client
from .proxy.resolver import install_error_handlers
from .tags.routes import tags_router

SERVICE_NAME = "api-gateway"
SERVICE_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the pooled HTTP client for the data service on startup and
    closes it on shutdown.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL)

    http_client = create_http_client(
        settings.data_service_url_str,
        settings.DATA_SERVICE_TIMEOUT_SECONDS,
    )
    app.state.data_service_client = DataServiceClient(http_client)

    logger.info(
        "API gateway started",
        extra={
            "data_service_url": settings.data_service_url_str,
            "environment": settings.environment.value,
        }
    )

    try:
        yield
    finally:
        await http_client.aclose()
        app.state.data_service_client = None
        logger.info("API gateway shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management (data service client)
        - CORS header middleware
        - Error resolver for the configured environment
        - Route handlers

    Args:
        settings: Settings to use; loaded from the environment when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    environment = settings.environment

    app = FastAPI(
        title="API Gateway",
        description="Authenticated proxy in front of the data service",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Last added runs outermost: CORS headers wrap resolved errors
    install_error_handlers(app, environment)
    app.add_middleware(CORSHeadersMiddleware, allowed_origin=settings.ALLOWED_ORIGIN)

    app.include_router(tags_router, prefix="/tags", tags=["Tags"])

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": environment.value,
        }

    return app


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "api_gateway.app.main:create_app",
        factory=True,
        host=settings.GATEWAY_HOST,
        port=settings.GATEWAY_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
