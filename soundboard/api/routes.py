from __future__ import annotations

import asyncio
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from ..domain.auth import SESSION_COOKIE
from ..domain.credentials import CredentialValidator
from ..domain.errors import (
    AuthenticationError,
    BadRequestError,
    ErrorCode,
    MissingPasswordError,
)
from ..domain.filenames import media_type_for
from ..domain.models import SoundboardConfig
from ..domain.session import SessionIssuer
from ..logging_conf import get_logger
from ..service.upload_service import IncomingFile, UploadPipeline
from ..settings import Settings
from ..store.assets import AssetCatalog
from ..store.config_store import ConfigStore
from .deps import (
    get_catalog,
    get_config_store,
    get_issuer,
    get_pipeline,
    get_settings,
    get_validator,
    require_admin,
)
from .models import (
    AuthStatus,
    ConfigWriteResult,
    DeleteFileRequest,
    Envelope,
    LoginRequest,
    Message,
    UploadResult,
    fail,
    ok,
)

router = APIRouter(prefix="/api")
logger = get_logger("api")

# Stored clips are never overwritten, so clients may cache them for a year.
AUDIO_CACHE_CONTROL = "public, max-age=31536000"


# ------------------------
# Session
# ------------------------
@router.post(
    "/auth/login",
    response_model=Envelope[Message],
    summary="Exchange the admin password for a session cookie",
)
async def login(
    req: Optional[LoginRequest] = None,
    validator: CredentialValidator = Depends(get_validator),
    issuer: SessionIssuer = Depends(get_issuer),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    if req is None or not req.password:
        raise MissingPasswordError()
    if not validator.validate(req.password):
        logger.warning("auth.login_failed", extra={"event": "auth_login_failed"})
        raise AuthenticationError()

    token = issuer.issue()
    response = ok(Message(message="Authentication successful").model_dump())
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=issuer.lifetime_s,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    logger.info("auth.login", extra={"event": "auth_login"})
    return response


@router.post("/auth/logout", response_model=Envelope[Message], summary="Clear the session cookie")
async def logout(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Only the client's copy is discarded; the token itself stays valid until expiry."""
    response = ok(Message(message="Logout successful").model_dump())
    response.delete_cookie(
        SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return response


@router.get(
    "/auth/verify",
    response_model=Envelope[AuthStatus],
    summary="Check the current credentials",
    dependencies=[Depends(require_admin)],
)
async def verify() -> JSONResponse:
    return ok(AuthStatus(authenticated=True).model_dump())


# ------------------------
# Configuration document
# ------------------------
# Handlers that touch the disk are plain `def` and run in the threadpool.
@router.get("/config", response_model=Envelope[SoundboardConfig], summary="Read the soundboard configuration")
def read_config(store: ConfigStore = Depends(get_config_store)) -> JSONResponse:
    return ok(store.read().model_dump(mode="json"))


@router.post(
    "/config",
    response_model=Envelope[ConfigWriteResult],
    summary="Replace the soundboard configuration",
    dependencies=[Depends(require_admin)],
)
def write_config(
    document: Any = Body(...),
    store: ConfigStore = Depends(get_config_store),
    catalog: AssetCatalog = Depends(get_catalog),
) -> JSONResponse:
    config = store.write(document)
    known = set(catalog.list())
    missing = sorted(f for f in config.referenced_files() if f not in known)
    if missing:
        logger.info(
            "config.dangling_references",
            extra={"event": "config_dangling_references", "files": missing},
        )
    result = ConfigWriteResult(message="Configuration updated successfully", missing_files=missing)
    return ok(result.model_dump())


@router.get(
    "/config/backup",
    response_model=Envelope[SoundboardConfig],
    summary="Read the previous configuration",
    dependencies=[Depends(require_admin)],
)
def read_config_backup(store: ConfigStore = Depends(get_config_store)) -> JSONResponse:
    return ok(store.read_backup().model_dump(mode="json"))


# ------------------------
# Audio assets
# ------------------------
@router.get(
    "/audio-files",
    response_model=Envelope[list[str]],
    summary="List stored audio files",
    dependencies=[Depends(require_admin)],
)
def list_audio_files(catalog: AssetCatalog = Depends(get_catalog)) -> JSONResponse:
    return ok(catalog.list())


@router.delete(
    "/audio-files",
    response_model=Envelope[Message],
    summary="Delete a stored audio file",
    dependencies=[Depends(require_admin)],
)
def delete_audio_file(
    req: Optional[DeleteFileRequest] = None,
    catalog: AssetCatalog = Depends(get_catalog),
) -> JSONResponse:
    if req is None or not req.filename:
        raise BadRequestError("Filename is required")
    catalog.delete(req.filename)
    return ok(Message(message="File deleted successfully").model_dump())


@router.post(
    "/upload",
    response_model=Envelope[UploadResult],
    summary="Upload one or more audio files",
    dependencies=[Depends(require_admin)],
)
async def upload_files(
    files: Optional[list[UploadFile]] = File(None),
    pipeline: UploadPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Store each file independently and report per-file outcomes.

    Succeeds when at least one file was stored.
    """
    if not files:
        raise BadRequestError("No files provided")

    incoming: list[IncomingFile] = []
    for f in files:
        # One byte past the limit is enough to reject without buffering the rest.
        data = await f.read(pipeline.max_bytes + 1)
        incoming.append(IncomingFile(filename=f.filename or "", content_type=f.content_type, data=data))
        await f.close()

    report = await asyncio.to_thread(pipeline.process, incoming)
    if not report.ok:
        return fail(
            ErrorCode.UPLOAD_FAILED,
            "No files were uploaded",
            status_code=400,
            data=report.as_dict(),
        )
    return ok(report.as_dict())


@router.get("/audio/{filename}", response_class=FileResponse, summary="Stream a stored audio file")
def get_audio(filename: str, catalog: AssetCatalog = Depends(get_catalog)) -> FileResponse:
    path = catalog.resolve(filename)
    return FileResponse(
        path,
        media_type=media_type_for(path.name),
        headers={"Cache-Control": AUDIO_CACHE_CONTROL, "Accept-Ranges": "bytes"},
    )
