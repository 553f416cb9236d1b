from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..domain.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    ConfigWriteError,
)
from ..domain.models import SoundboardConfig
from ..logging_conf import get_logger

__all__ = ["ConfigStore"]

logger = get_logger("store.config")


class ConfigStore:
    """Owns the YAML configuration document and its single backup.

    A write validates first and stages the new document in a temp file beside
    the target. Only then is the current document copied over the backup, and
    finally the staged file is renamed into place. The old backup is parked
    under a temp name until the primary rename succeeds, so a failed write
    leaves both files as they were. Readers never observe a partial document.
    """

    def __init__(self, config_path: Path, backup_path: Path) -> None:
        self._path = Path(config_path)
        self._backup_path = Path(backup_path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backup_path(self) -> Path:
        return self._backup_path

    def read(self) -> SoundboardConfig:
        return self._load(self._path, ConfigNotFoundError())

    def read_backup(self) -> SoundboardConfig:
        return self._load(self._backup_path, ConfigNotFoundError("Configuration backup not found"))

    def write(self, document: Any) -> SoundboardConfig:
        """Validate and persist `document`, returning the stored config.

        Raises:
            ConfigValidationError: shape is wrong; nothing on disk changes.
            ConfigWriteError: an OS error; the previous document stays in place.
        """
        config = self.validate(document)
        text = yaml.safe_dump(
            config.model_dump(mode="json"),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )

        with self._lock:
            staged: list[Path] = []
            aside: Path | None = None
            old_backup_moved = False
            backup_placed = False
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                new_doc = self._stage(self._path, text.encode("utf-8"))
                staged.append(new_doc)
                if self._path.exists():
                    backup = self._stage(self._backup_path, self._path.read_bytes())
                    staged.append(backup)
                    if self._backup_path.exists():
                        aside = self._reserve(self._backup_path)
                        os.replace(self._backup_path, aside)
                        old_backup_moved = True
                    # Backup must land strictly before the primary is replaced.
                    os.replace(backup, self._backup_path)
                    backup_placed = True
                os.replace(new_doc, self._path)
            except OSError as e:
                self._roll_back_backup(aside, old_backup_moved, backup_placed)
                for tmp in staged:
                    tmp.unlink(missing_ok=True)
                logger.exception(
                    "config.write_failed",
                    extra={"event": "config_write_failed", "path": str(self._path)},
                )
                raise ConfigWriteError() from e
            if aside is not None:
                aside.unlink(missing_ok=True)

        logger.info(
            "config.write",
            extra={
                "event": "config_write",
                "categories": len(config.categories),
                "sounds": sum(len(c.sounds) for c in config.categories),
            },
        )
        return config

    @staticmethod
    def validate(document: Any) -> SoundboardConfig:
        if isinstance(document, SoundboardConfig):
            return document
        if not isinstance(document, dict) or not isinstance(document.get("categories"), list):
            raise ConfigValidationError()
        try:
            return SoundboardConfig.model_validate(document)
        except ValidationError as e:
            first = e.errors()[0]
            where = ".".join(str(p) for p in first["loc"])
            raise ConfigValidationError(f"Invalid configuration structure at {where}: {first['msg']}") from e

    @staticmethod
    def _stage(target: Path, data: bytes) -> Path:
        """Write `data` to a synced temp file beside `target` and return its path."""
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        return tmp

    @staticmethod
    def _reserve(target: Path) -> Path:
        """Claim an unused name beside `target` to park the current backup under."""
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".old", dir=target.parent)
        os.close(fd)
        return Path(tmp_name)

    def _roll_back_backup(self, aside: Path | None, moved: bool, placed: bool) -> None:
        """Return the backup slot to what it held before a failed write."""
        try:
            if moved and aside is not None:
                os.replace(aside, self._backup_path)
            elif placed:
                self._backup_path.unlink(missing_ok=True)
            if aside is not None and not moved:
                aside.unlink(missing_ok=True)
        except OSError:
            logger.exception(
                "config.backup_restore_failed",
                extra={"event": "config_backup_restore_failed", "path": str(self._backup_path)},
            )

    def _load(self, path: Path, missing: ConfigNotFoundError) -> SoundboardConfig:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise missing from None
        except OSError as e:
            logger.exception("config.read_failed", extra={"event": "config_read_failed", "path": str(path)})
            raise ConfigReadError() from e

        try:
            data = yaml.safe_load(text)
            return SoundboardConfig.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            logger.warning(
                "config.parse_failed",
                extra={"event": "config_parse_failed", "path": str(path), "error": str(e)},
            )
            raise ConfigParseError() from e
