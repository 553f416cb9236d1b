from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx

from soundboard.domain.auth import LEGACY_HEADER, SESSION_COOKIE
from soundboard.domain.filenames import media_type_for
from soundboard.logging_conf import get_logger
from runner.types import ApiError, LoginError, SmokeError, UploadOutcome

logger = get_logger("runner.client")


async def wait_for_health(
    base_url: str,
    timeout_s: float = 20.0,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


def _unwrap(r: httpx.Response) -> Any:
    """Return `data` from a success envelope or raise `ApiError`."""
    try:
        body = r.json()
    except ValueError:
        raise ApiError(r.request.url.path, r.status_code, None, r.text[:200]) from None
    if not body.get("success"):
        err = body.get("error") or {}
        raise ApiError(r.request.url.path, r.status_code, err.get("code"), err.get("message", ""))
    return body.get("data")


class AdminClient:
    """Thin async client for the admin API.

    Holds one httpx client so the session cookie set at login is replayed on
    later calls. With `use_header=True` the legacy header is sent instead.
    """

    def __init__(
        self,
        base_url: str,
        password: str,
        *,
        use_header: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._password = password
        self._use_header = use_header
        headers = {LEGACY_HEADER: password} if use_header else {}
        self._http = httpx.AsyncClient(base_url=base_url, timeout=30.0, headers=headers, transport=transport)

    async def __aenter__(self) -> AdminClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self._http.aclose()

    @property
    def has_session(self) -> bool:
        return self._http.cookies.get(SESSION_COOKIE) is not None

    async def login(self) -> None:
        if self._use_header:
            return
        r = await self._http.post("/api/auth/login", json={"password": self._password})
        if r.status_code == 401:
            raise LoginError("admin password rejected")
        _unwrap(r)
        if not self.has_session:
            # Secure cookies are not replayed over plain http.
            raise LoginError("no session cookie received; run the server with COOKIE_SECURE=0 or use --use-header")
        logger.info("login.ok", extra={"event": "login_ok"})

    async def logout(self) -> None:
        _unwrap(await self._http.post("/api/auth/logout"))
        self._http.cookies.delete(SESSION_COOKIE)

    async def verify(self) -> bool:
        r = await self._http.get("/api/auth/verify")
        return r.status_code == 200 and bool(r.json().get("success"))

    async def upload(self, paths: Iterable[Path]) -> list[UploadOutcome]:
        """Upload all files in one multipart request; partial success is normal."""
        files = [
            ("files", (p.name, p.read_bytes(), media_type_for(p.name))) for p in paths
        ]
        r = await self._http.post("/api/upload", files=files)
        body = r.json()
        data = body.get("data") or {}
        outcomes = [
            UploadOutcome(
                filename=it["filename"],
                success=bool(it["success"]),
                error=it.get("error"),
                code=it.get("code"),
            )
            for it in data.get("results", [])
        ]
        logger.info(
            "upload.summary",
            extra={"event": "upload_summary", **data.get("summary", {})},
        )
        if not outcomes:
            _unwrap(r)
        return outcomes

    async def list_files(self) -> list[str]:
        return list(_unwrap(await self._http.get("/api/audio-files")))

    async def delete_file(self, filename: str) -> None:
        _unwrap(await self._http.request("DELETE", "/api/audio-files", json={"filename": filename}))

    async def read_config(self) -> dict:
        return _unwrap(await self._http.get("/api/config"))

    async def read_config_if_present(self) -> dict | None:
        """Like read_config, but None when the server has no document yet."""
        r = await self._http.get("/api/config")
        if r.status_code == 404:
            return None
        return _unwrap(r)

    async def write_config(self, config: dict) -> dict:
        return _unwrap(await self._http.post("/api/config", json=config))

    async def fetch_audio(self, filename: str) -> bytes:
        r = await self._http.get(f"/api/audio/{filename}")
        if r.status_code != 200:
            _unwrap(r)
        return r.content
