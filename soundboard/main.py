"""FastAPI app factory: settings, startup initialization, routes, error envelopes."""
from __future__ import annotations

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import router as api_router
from .api.models import fail, from_error
from .bootstrap import initialize
from .domain.auth import RequestAuthenticator
from .domain.credentials import CredentialValidator
from .domain.errors import ErrorCode, SoundboardError
from .domain.session import SessionIssuer
from .logging_conf import get_logger, setup_logging
from .service.upload_service import UploadPipeline
from .settings import Settings, load_settings
from .store.assets import AssetCatalog
from .store.config_store import ConfigStore

logger = get_logger("app")

_HTTP_STATUS_CODES = {
    404: ErrorCode.FILE_NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
}


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the service.

    Settings come from the environment unless given; `SettingsError` aborts
    creation, so a missing signing secret stops the process before it serves.
    """
    setup_logging()
    settings = settings or load_settings()
    initialize(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("startup", extra={"event": "startup"})
        yield
        logger.info("shutdown", extra={"event": "shutdown"})

    app = FastAPI(title="Soundboard Admin", version=__version__, lifespan=lifespan)

    issuer = SessionIssuer(settings.session_secret)
    validator = CredentialValidator(settings.admin_password)
    app.state.settings = settings
    app.state.issuer = issuer
    app.state.validator = validator
    app.state.authenticator = RequestAuthenticator.default(issuer, validator)
    app.state.config_store = ConfigStore(settings.config_path, settings.backup_path)
    app.state.catalog = AssetCatalog(settings.audio_dir)
    app.state.pipeline = UploadPipeline(settings.audio_dir, settings.max_upload_bytes)

    @app.exception_handler(SoundboardError)
    async def _soundboard_error(request: Request, exc: SoundboardError) -> JSONResponse:
        return from_error(exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Bad request") if errors else "Bad request"
        return fail(ErrorCode.BAD_REQUEST, message, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.BAD_REQUEST)
        return fail(code, str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        # Already logged by request_logger.
        return fail(ErrorCode.INTERNAL_SERVER_ERROR, "Internal server error", status_code=500)

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Log start/end of every request under a correlation id.

        An incoming X-Request-ID is reused, otherwise one is minted; it is
        echoed back on the response.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    logger.info(
        "app.created",
        extra={
            "event": "app_created",
            "config_path": str(settings.config_path),
            "audio_dir": str(settings.audio_dir),
            "admin_password_set": validator.configured,
        },
    )
    return app


# ASGI entrypoint: `uvicorn soundboard.main:create_app --factory --port 8000`
