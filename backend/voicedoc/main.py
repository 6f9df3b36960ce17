"""ASGI entry-point for the summarization proxy.

This module
1. instantiates the :class:`fastapi.FastAPI` application through
   :func:`create_app`, which takes an explicit :class:`~voicedoc.config.Settings`;
2. wires the API routers located in ``voicedoc.api``;
3. registers global exception handlers and middleware; and
4. serves the static browser client when its directory exists.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from voicedoc import __version__
from voicedoc.api import api_router
from voicedoc.config import Settings, settings as default_settings
from voicedoc.errors import AppBaseException
from voicedoc.logging_config import setup_logging
from voicedoc.services.llm import OllamaClient


# ---------------------------------------------------------------------------
# Logging must be configured as soon as possible so that any errors during
# import/start-up are captured.
# ---------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:  # noqa: D401 – factory nomenclature is fine
    """Wire and return the FastAPI application instance.

    *transport* replaces the network transport of the upstream client; tests
    pass an :class:`httpx.MockTransport` standing in for Ollama.
    """

    settings = settings or default_settings
    ollama = OllamaClient(settings, transport=transport)

    @asynccontextmanager
    async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("Ollama URL: %s", settings.OLLAMA_URL)
        logger.info("Model: %s", settings.MODEL_NAME)
        logger.info("Make sure Ollama is running with: `ollama serve` and `ollama pull %s`", settings.MODEL_NAME)
        yield
        await ollama.aclose()
        logger.info("Upstream connection pool closed.")

    app = FastAPI(
        title="Voicedoc Summarization Proxy",
        version=__version__,
        docs_url="/api/docs",
        lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.ollama = ollama

    # ------------------------------------------------------------------
    # Exception handlers
    # ------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(  # noqa: D401
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.error("Request validation error: %s", exc.errors())
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(  # noqa: D401
        _request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.error("HTTP exception %s: %s", exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(AppBaseException)
    async def _app_error_handler(  # noqa: D401
        _request: Request,
        exc: AppBaseException,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.error("Application exception %s: %s", exc.status_code, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(Exception)
    async def _generic_error_handler(  # noqa: D401
        _request: Request,
        exc: Exception,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def _health() -> dict[str, str]:  # noqa: D401
        return {"status": "OK", "message": "Server is running"}

    # Mounted last so the API routes above take precedence over "/".
    if settings.FRONTEND_DIR.is_dir():
        app.mount("/", StaticFiles(directory=settings.FRONTEND_DIR, html=True), name="frontend")
        logger.info("Serving browser client from %s", settings.FRONTEND_DIR)
    else:
        logger.info("No browser client at %s; serving the API only", settings.FRONTEND_DIR)

    return app


# Instantiate at import time so `uvicorn voicedoc.main:app` works.
app: FastAPI = create_app()
