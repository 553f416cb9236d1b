"""Startup initialization, run once by the app factory.

Idempotent: directories are created only if missing, and the legacy
root-level config is copied into the data directory only while the managed
copy does not exist yet.
"""
from __future__ import annotations

import shutil

from .logging_conf import get_logger
from .settings import Settings

logger = get_logger("bootstrap")


def initialize(settings: Settings) -> bool:
    """Prepare directories and migrate the legacy config.

    Returns True when a legacy config file was migrated on this call.
    """
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.audio_dir.mkdir(parents=True, exist_ok=True)
    return migrate_legacy_config(settings)


def migrate_legacy_config(settings: Settings) -> bool:
    target = settings.config_path
    legacy = settings.legacy_config_path
    if target.exists() or not legacy.is_file():
        return False
    if legacy.resolve() == target.resolve():
        return False
    shutil.copyfile(legacy, target)
    logger.info(
        "config.migrated",
        extra={"event": "config_migrated", "from": str(legacy), "to": str(target)},
    )
    return True
