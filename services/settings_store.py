from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LAST_FOLDER_PATH = 'lastFolderPath'
VOLUME_STATE = 'volumeState'
THEME_PREFERENCE = 'themePreference'
VISUALIZATIONS_HIDDEN = 'visualizationsHidden'

DEFAULT_VOLUME = 100
THEMES = ('light', 'dark')


def default_data_dir() -> Path:
    override = os.environ.get('FOLDERPLAY_DATA_DIR')
    if override:
        return Path(override).expanduser()
    return Path.home() / '.local' / 'share' / 'folderplay'


def detect_system_theme() -> str:
    """Guess the terminal theme from COLORFGBG ("fg;bg"), defaulting to dark."""
    colorfgbg = os.environ.get('COLORFGBG', '')
    background = colorfgbg.split(';')[-1] if colorfgbg else ''
    if background.isdigit() and int(background) in (7, 15):
        return 'light'
    return 'dark'


class SettingsStore:
    """Key-value settings persisted as a JSON file, last write wins."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_data_dir() / 'settings.json'
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file with unexpected content: {self.path}")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2))
        except OSError as e:
            logger.error(f"Failed to save setting {key}: {e}")

    @property
    def last_folder(self) -> str:
        return self.get(LAST_FOLDER_PATH, '') or ''

    @last_folder.setter
    def last_folder(self, folder: str) -> None:
        self.set(LAST_FOLDER_PATH, str(folder))

    @property
    def volume(self) -> int:
        try:
            value = int(self.get(VOLUME_STATE, DEFAULT_VOLUME))
        except (TypeError, ValueError):
            return DEFAULT_VOLUME
        return max(0, min(100, value))

    @volume.setter
    def volume(self, value: int) -> None:
        self.set(VOLUME_STATE, int(value))

    @property
    def theme(self) -> str:
        preference = self.get(THEME_PREFERENCE)
        if preference in THEMES:
            return preference
        return detect_system_theme()

    @theme.setter
    def theme(self, value: str) -> None:
        if value not in THEMES:
            raise ValueError(f"Unknown theme: {value}")
        self.set(THEME_PREFERENCE, value)

    @property
    def visualizations_hidden(self) -> bool:
        return bool(self.get(VISUALIZATIONS_HIDDEN, False))

    @visualizations_hidden.setter
    def visualizations_hidden(self, hidden: bool) -> None:
        self.set(VISUALIZATIONS_HIDDEN, bool(hidden))
