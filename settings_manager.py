"""Configuration loading for the keyscript runner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from logger import StatusLogger
from models import ApplicationSettings


class SettingsManager:
    """Loads the optional settings.json that sits next to the modules."""

    def __init__(self, storage_path: Optional[Path] = None, logger: Optional[StatusLogger] = None) -> None:
        package_root = Path(__file__).resolve().parent
        self._storage_path = storage_path or package_root / "settings.json"
        self._logger = logger

    @property
    def storage_path(self) -> Path:
        """Absolute path to the settings file."""
        return self._storage_path

    def load(self) -> ApplicationSettings:
        """Load settings from disk, returning defaults if the file is missing or corrupt."""
        path = self.storage_path
        if not path.exists():
            return ApplicationSettings()

        try:
            content = path.read_text(encoding="utf-8")
            raw_data = json.loads(content)
            if not isinstance(raw_data, dict):
                raise ValueError("Settings file has invalid structure")
            return ApplicationSettings.from_dict(raw_data)
        except Exception as e:
            # Corrupt or unreadable file; fall back to defaults but keep backup for inspection.
            if self._logger:
                self._logger.log_warning(f"Ignoring settings file {path}: {e}")
            backup_path = path.with_suffix(".bak")
            try:
                path.replace(backup_path)
            except OSError:
                # Ignore backup failures; we still return defaults.
                pass
            return ApplicationSettings()
