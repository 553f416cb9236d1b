from soundboard.bootstrap import initialize
from soundboard.settings import Settings

LEGACY = "categories:\n- name: Old\n  sounds: []\n"


def test_creates_directories(settings: Settings) -> None:
    assert initialize(settings) is False

    assert settings.data_dir.is_dir()
    assert settings.audio_dir.is_dir()


def test_migrates_legacy_config_once(settings: Settings) -> None:
    settings.legacy_config_path.write_text(LEGACY, encoding="utf-8")

    assert initialize(settings) is True
    assert settings.config_path.read_text(encoding="utf-8") == LEGACY
    assert settings.legacy_config_path.exists()

    settings.legacy_config_path.write_text("categories: []\n", encoding="utf-8")
    assert initialize(settings) is False
    assert settings.config_path.read_text(encoding="utf-8") == LEGACY


def test_existing_managed_config_is_not_replaced(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True)
    settings.config_path.write_text("categories: []\n", encoding="utf-8")
    settings.legacy_config_path.write_text(LEGACY, encoding="utf-8")

    assert initialize(settings) is False
    assert settings.config_path.read_text(encoding="utf-8") == "categories: []\n"
