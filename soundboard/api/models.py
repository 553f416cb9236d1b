from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..domain.errors import ErrorCode, SoundboardError

T = TypeVar("T")


class ErrorBody(BaseModel):
    """Machine-readable error; `code` groups by family (1001, 1101, ...)."""
    code: int
    message: str


class Envelope(BaseModel, Generic[T]):
    """Uniform response wrapper for every JSON endpoint."""
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorBody] = None


class LoginRequest(BaseModel):
    password: Optional[str] = None


class DeleteFileRequest(BaseModel):
    filename: Optional[str] = None


class Message(BaseModel):
    message: str


class AuthStatus(BaseModel):
    authenticated: bool


class ConfigWriteResult(BaseModel):
    """Result of a config write; `missing_files` lists dangling references."""
    message: str
    missing_files: list[str] = []


class FileResult(BaseModel):
    filename: str
    success: bool
    error: Optional[str] = None
    code: Optional[int] = None


class UploadSummary(BaseModel):
    total: int
    success: int
    failed: int


class UploadResult(BaseModel):
    """Per-file outcomes of one upload batch; also carried by a failed batch."""
    results: list[FileResult]
    summary: UploadSummary
    message: str


def ok(data: Any = None, *, status_code: int = 200) -> JSONResponse:
    body = Envelope[Any](success=True, data=data)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def fail(
    code: ErrorCode, message: str, *, status_code: int, data: Any = None
) -> JSONResponse:
    body = Envelope[Any](success=False, data=data, error=ErrorBody(code=int(code), message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def from_error(err: SoundboardError) -> JSONResponse:
    return fail(err.code, err.message, status_code=err.status_code)
