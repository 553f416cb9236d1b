import sys
from pathlib import Path

# Ensure `import soundboard...` works without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from soundboard.main import create_app  # noqa: E402
from soundboard.settings import Settings  # noqa: E402

ADMIN_PASSWORD = "correct horse battery staple"
SESSION_SECRET = "test-session-secret-0123456789abcdef-0123456789"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        session_secret=SESSION_SECRET,
        admin_password=ADMIN_PASSWORD,
        max_upload_bytes=1024,
        data_dir=tmp_path / "data",
        audio_dir=tmp_path / "public" / "audio",
        legacy_config_path=tmp_path / "sounds.yaml",
        cookie_secure=False,
    )


@pytest.fixture
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def admin(client: TestClient) -> TestClient:
    resp = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


def wav_bytes(size: int = 64) -> bytes:
    return b"RIFF" + b"\x00" * (size - 4)
