from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class UploadOutcome:
    """Per-file result reported by the server for one smoke upload."""

    filename: str
    success: bool
    error: str | None = None
    code: int | None = None


@dataclass
class SmokeReport:
    """Facts gathered during one smoke run; `checks` maps step name to pass/fail."""

    uploaded: list[UploadOutcome] = field(default_factory=list)
    listed: list[str] = field(default_factory=list)
    checks: dict[str, bool] = field(default_factory=dict)
    started_ms: int = 0
    finished_ms: int = 0


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class LoginError(SmokeError):
    """Raised when the admin password is rejected."""


class ApiError(SmokeError):
    """Raised when an endpoint answers with a failure envelope."""

    def __init__(self, path: str, status: int, code: int | None, message: str) -> None:
        super().__init__(f"{path} -> {status} [{code}] {message}")
        self.path = path
        self.status = status
        self.code = code


def now_ms() -> int:
    """Return current time in epoch milliseconds."""
    return int(time.time() * 1000)
