"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from osconnect import __version__
from osconnect.api.deps import set_backend
from osconnect.api.v1.router import router as v1_router
from osconnect.backend.backend import OpenSearchBackend
from osconnect.backend.exceptions import BackendError
from osconnect.config.settings import Settings
from osconnect.connectors import default_registry
from osconnect.connectors.base.exceptions import ConnectionError, InvalidConfigError, UnknownConnectorError
from osconnect.connectors.base.registry import ConnectorRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "osconnect-config.yaml"
CONFIG_FILE_ENV = "OSCONNECT_CONFIG_FILE"


def create_app(settings: Settings | None = None, registry: ConnectorRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        registry: Connector registry. If None, the built-in connectors are used.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path(os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build the backend on startup and close its client on shutdown."""
        logger.info("Starting osconnect v%s", __version__)

        backend = OpenSearchBackend(settings.backend, registry or default_registry())
        set_backend(backend)
        app.state.settings = settings
        app.state.backend = backend

        logger.info("osconnect is ready (connector: %s)", settings.backend.connector)
        yield

        logger.info("Shutting down osconnect...")
        await backend.close()
        set_backend(None)

    app = FastAPI(
        title="osconnect",
        description="Connector selection and cluster status for an OpenSearch search backend.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    app.include_router(v1_router, prefix="/v1")

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Map connector and backend errors to HTTP responses."""

    @app.exception_handler(UnknownConnectorError)
    async def _unknown_connector(request: Request, exc: UnknownConnectorError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc), "available": exc.available})

    @app.exception_handler(InvalidConfigError)
    async def _invalid_config(request: Request, exc: InvalidConfigError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "fields": exc.fields, "errors": exc.errors})

    @app.exception_handler(ConnectionError)
    async def _connection_error(request: Request, exc: ConnectionError) -> JSONResponse:
        logger.warning("Could not connect to OpenSearch: %s", exc)
        return JSONResponse(status_code=503, content={"detail": "Could not connect to the OpenSearch cluster."})

    @app.exception_handler(BackendError)
    async def _backend_error(request: Request, exc: BackendError) -> JSONResponse:
        logger.warning("OpenSearch backend error: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})
