from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..domain.errors import (
    BadRequestError,
    ErrorCode,
    FileExistsConflictError,
    FileTooLargeError,
    InvalidFileTypeError,
    SoundboardError,
    UploadWriteError,
)
from ..domain.filenames import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MEDIA_TYPES,
    extension,
    normalize_media_type,
    sanitize_filename,
)
from ..logging_conf import get_logger

__all__ = ["IncomingFile", "FileOutcome", "UploadReport", "UploadPipeline"]

logger = get_logger("service.upload")


@dataclass(frozen=True)
class IncomingFile:
    """One submitted file as received from the client."""

    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class FileOutcome:
    filename: str
    success: bool
    error: str | None = None
    code: ErrorCode | None = None

    def as_dict(self) -> dict:
        out: dict = {"filename": self.filename, "success": self.success}
        if not self.success:
            out["error"] = self.error
            out["code"] = int(self.code) if self.code is not None else None
        return out


@dataclass
class UploadReport:
    results: list[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def ok(self) -> bool:
        """Partial success still counts; only an all-failed batch is a failure."""
        return self.succeeded > 0

    @property
    def message(self) -> str:
        if self.failed:
            return f"{self.succeeded}/{self.total} files uploaded successfully"
        return f"All {self.total} files uploaded successfully"

    def summary(self) -> dict[str, int]:
        return {"total": self.total, "success": self.succeeded, "failed": self.failed}

    def as_dict(self) -> dict:
        return {
            "results": [r.as_dict() for r in self.results],
            "summary": self.summary(),
            "message": self.message,
        }


class UploadPipeline:
    """Validates and stores uploaded audio files one at a time.

    Each file is judged on its own; a rejected file never aborts the rest of
    the batch. This is the only writer of the managed audio directory.
    """

    def __init__(self, audio_dir: Path, max_bytes: int) -> None:
        self._dir = Path(audio_dir)
        self._max_bytes = max_bytes

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def process(self, files: Iterable[IncomingFile]) -> UploadReport:
        report = UploadReport()
        for incoming in files:
            try:
                stored = self.store_one(incoming)
            except SoundboardError as e:
                logger.info(
                    "upload.file_rejected",
                    extra={
                        "event": "upload_file_rejected",
                        "file": incoming.filename,
                        "code": int(e.code),
                        "reason": e.message,
                    },
                )
                report.results.append(
                    FileOutcome(filename=incoming.filename, success=False, error=e.message, code=e.code)
                )
                continue
            report.results.append(FileOutcome(filename=stored, success=True))

        logger.info(
            "upload.summary",
            extra={"event": "upload_summary", **report.summary()},
        )
        return report

    def store_one(self, incoming: IncomingFile) -> str:
        """Run every check on one file and persist it, returning the stored name."""
        self.check(incoming)
        name = sanitize_filename(incoming.filename)
        if not name.rpartition(".")[0].strip("."):
            raise BadRequestError("Invalid filename")

        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._dir / name
        if target.exists():
            raise FileExistsConflictError()

        try:
            # "x" refuses to clobber a file created since the check above.
            with target.open("xb") as fh:
                fh.write(incoming.data)
        except FileExistsError:
            raise FileExistsConflictError() from None
        except OSError as e:
            target.unlink(missing_ok=True)
            logger.exception(
                "upload.write_failed",
                extra={"event": "upload_write_failed", "file": name},
            )
            raise UploadWriteError() from e

        logger.info(
            "upload.stored",
            extra={"event": "upload_stored", "file": name, "bytes": len(incoming.data)},
        )
        return name

    def check(self, incoming: IncomingFile) -> None:
        """Size, declared type and extension checks, in that order."""
        if len(incoming.data) > self._max_bytes:
            raise FileTooLargeError(
                f"File size exceeds maximum limit of {self._max_bytes / 1024 / 1024:g}MB"
            )
        if normalize_media_type(incoming.content_type) not in ALLOWED_MEDIA_TYPES:
            raise InvalidFileTypeError()
        if extension(incoming.filename) not in ALLOWED_EXTENSIONS:
            raise InvalidFileTypeError(
                "Invalid file extension. Allowed: " + ", ".join(sorted(ALLOWED_EXTENSIONS))
            )
