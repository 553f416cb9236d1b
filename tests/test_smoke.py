import asyncio
from pathlib import Path

import httpx
import pytest

from conftest import ADMIN_PASSWORD, wav_bytes
from runner.smoke import run_smoke
from runner.utils import build_config
from soundboard.main import create_app
from soundboard.settings import Settings
from soundboard.store.config_store import ConfigStore

ORIGINAL = {"categories": [{"name": "Mine", "sounds": [{"name": "Keep", "file": "keep.mp3"}]}]}


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    d = tmp_path / "fixtures"
    d.mkdir()
    (d / "beep.wav").write_bytes(wav_bytes())
    (d / "boop.mp3").write_bytes(b"ID3" + b"\x00" * 16)
    return d


def _run(settings: Settings, fixtures_dir: Path, **kwargs) -> int:
    transport = httpx.ASGITransport(app=create_app(settings))
    return asyncio.run(
        run_smoke(
            base_url="http://testserver",
            password=ADMIN_PASSWORD,
            fixtures_dir=fixtures_dir,
            timeout_s=5.0,
            transport=transport,
            **kwargs,
        )
    )


def _store(settings: Settings) -> ConfigStore:
    return ConfigStore(settings.config_path, settings.backup_path)


def test_smoke_run_restores_existing_config(settings: Settings, fixtures_dir: Path) -> None:
    _store(settings).write(ORIGINAL)

    assert _run(settings, fixtures_dir) == 0

    assert _store(settings).read().model_dump() == ORIGINAL
    assert list(settings.audio_dir.iterdir()) == []


def test_smoke_run_with_header_restores_existing_config(settings: Settings, fixtures_dir: Path) -> None:
    _store(settings).write(ORIGINAL)

    assert _run(settings, fixtures_dir, use_header=True) == 0

    assert _store(settings).read().model_dump() == ORIGINAL


def test_smoke_run_without_prior_config_still_cleans_up_files(settings: Settings, fixtures_dir: Path) -> None:
    assert _run(settings, fixtures_dir) == 0

    assert list(settings.audio_dir.iterdir()) == []


def test_keep_leaves_smoke_config_and_files(settings: Settings, fixtures_dir: Path) -> None:
    _store(settings).write(ORIGINAL)

    assert _run(settings, fixtures_dir, keep=True) == 0

    assert _store(settings).read().model_dump() == build_config(["beep.wav", "boop.mp3"])
    assert sorted(p.name for p in settings.audio_dir.iterdir()) == ["beep.wav", "boop.mp3"]
