"""FastAPI application factory for the flow definition service."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import create_store, load_config, validate_config_file
from ..core import FlowRegistry
from .routes import router

logger = logging.getLogger(__name__)

# Global state
_start_time: float = time.time()


def get_uptime() -> float:
    """Get server uptime in seconds."""
    return time.time() - _start_time


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    global _start_time

    _start_time = time.time()
    logger.info("Serving flow definitions from %s", app.state.registry.store.describe())

    yield


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _install_error_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"error": "<message>"}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(err.get("msg", "invalid value") for err in exc.errors())
        return _error_response(400, f"Invalid request: {details}")

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error")


def create_app(
    config: Optional[dict] = None,
    *,
    registry: Optional[FlowRegistry] = None,
    title: str = "OAuth Flow Engine",
    version: str = __version__,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if registry is None:
        if config is None:
            for error in validate_config_file():
                logger.warning("Config: %s", error)
            config = load_config()
        registry = FlowRegistry(store=create_store(config))

    app = FastAPI(
        title=title,
        version=version,
        description="HTTP API for OAuth / OIDC flow definitions",
        lifespan=lifespan,
    )
    app.state.registry = registry

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)
    app.include_router(router)

    return app
