import json

from models import ApplicationSettings
from settings_manager import SettingsManager


def test_missing_file_gives_defaults(tmp_path) -> None:
    manager = SettingsManager(tmp_path / "settings.json")

    assert manager.load() == ApplicationSettings()


def test_values_are_loaded(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"key_interval_ms": 5, "suppress_empty_popup": True, "keystroke_backend": "pynput"}),
        encoding="utf-8",
    )

    settings = SettingsManager(path).load()

    assert settings.key_interval_ms == 5
    assert settings.line_interval_ms == 100
    assert settings.suppress_empty_popup is True
    assert settings.keystroke_backend == "pynput"


def test_corrupt_file_is_moved_aside(tmp_path, status_logger) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    settings = SettingsManager(path, logger=status_logger).load()

    assert settings == ApplicationSettings()
    assert not path.exists()
    assert (tmp_path / "settings.bak").exists()
    assert len(status_logger.messages("WARNING")) == 1


def test_non_object_file_is_rejected(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert SettingsManager(path).load() == ApplicationSettings()
