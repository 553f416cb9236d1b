"""Process-wide settings, built once at startup and injected into components.

`load_settings()` is the only place that reads the service's environment
variables. Missing or unsafe values fail here, before any route exists.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "DEFAULT_MAX_UPLOAD_BYTES",
    "INSECURE_SESSION_SECRETS",
    "Settings",
    "SettingsError",
    "load_settings",
]

DEFAULT_MAX_UPLOAD_BYTES = 2 * 1024 * 1024

# Publicly known fallbacks that must never sign production tokens.
INSECURE_SESSION_SECRETS = frozenset({"default-secret-key", "changeme", "secret"})

_FALSE_VALUES = {"0", "false", "no", "off"}


class SettingsError(RuntimeError):
    """Raised when the service cannot start with the given configuration."""


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_secret: str = Field(..., min_length=1)
    admin_password: str | None = None
    max_upload_bytes: int = Field(DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    data_dir: Path = Path("data")
    audio_dir: Path = Path("public/audio")
    legacy_config_path: Path = Path("sounds.yaml")
    cookie_secure: bool = True

    @field_validator("session_secret")
    @classmethod
    def _reject_public_default(cls, v: str) -> str:
        if v in INSECURE_SESSION_SECRETS:
            raise ValueError("session secret is a publicly known default")
        return v

    @property
    def config_path(self) -> Path:
        return self.data_dir / "sounds.yaml"

    @property
    def backup_path(self) -> Path:
        return self.data_dir / "sounds.yaml.bak"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build `Settings` from environment variables.

    Raises:
        SettingsError: if JWT_SECRET is unset or a known default, or if
            MAX_FILE_SIZE is not a positive integer.
    """
    env = os.environ if environ is None else environ

    secret = env.get("JWT_SECRET", "").strip()
    if not secret:
        raise SettingsError("JWT_SECRET must be set; refusing to sign sessions with a default key")

    raw_max = env.get("MAX_FILE_SIZE", str(DEFAULT_MAX_UPLOAD_BYTES))
    try:
        max_upload = int(raw_max, 10)
    except ValueError as e:
        raise SettingsError("MAX_FILE_SIZE must be an integer number of bytes") from e

    values: dict[str, object] = {
        "session_secret": secret,
        "admin_password": env.get("ADMIN_PASSWORD") or None,
        "max_upload_bytes": max_upload,
        "cookie_secure": env.get("COOKIE_SECURE", "1").strip().lower() not in _FALSE_VALUES,
    }
    for key, name in (
        ("data_dir", "SOUNDBOARD_DATA_DIR"),
        ("audio_dir", "SOUNDBOARD_AUDIO_DIR"),
        ("legacy_config_path", "SOUNDBOARD_LEGACY_CONFIG"),
    ):
        if env.get(name):
            values[key] = Path(env[name])

    try:
        return Settings(**values)
    except ValidationError as e:
        raise SettingsError(f"invalid settings: {e}") from e
