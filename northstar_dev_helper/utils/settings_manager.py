"""
Settings Manager for Northstar Dev Testing Helper
Handles user preferences such as the remembered game install path
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional

from northstar_dev_helper.utils.logger import get_logger
from northstar_dev_helper.utils.paths import get_settings_file, get_work_dir


DEFAULT_REQUEST_TIMEOUT = 30


class SettingsManager:
    """Manages user settings and preferences"""

    def __init__(self, settings_file: Optional[Path] = None):
        self.logger = get_logger(__name__)
        self.settings_file = Path(settings_file) if settings_file else get_settings_file()
        self.settings = self._load_settings()

    def _default_settings(self) -> Dict[str, Any]:
        return {
            "game_install_path": "",
            "request_timeout": DEFAULT_REQUEST_TIMEOUT,
            "work_dir": "",  # Empty = default ~/NorthstarDevHelper/work
        }

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from file, falling back to defaults"""
        settings = self._default_settings()
        if self.settings_file.exists():
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    settings.update(loaded)
                else:
                    self.logger.warning(f"Ignoring malformed settings file: {self.settings_file}")
            except (OSError, ValueError) as e:
                self.logger.warning(f"Failed to load settings: {e}")

        return settings

    def _save_settings(self):
        """Save settings to file"""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            self.logger.error(f"Failed to save settings: {e}")

    def set_game_install_path(self, path: str):
        """Remember the Titanfall 2 install path"""
        self.settings["game_install_path"] = str(path)
        self._save_settings()
        self.logger.info(f"Set game install path: {path}")

    def get_game_install_path(self) -> Optional[str]:
        """Get the remembered game install path (None if unset)"""
        path = self.settings.get("game_install_path", "")
        return path if path else None

    def get_request_timeout(self) -> float:
        """Get the HTTP timeout in seconds applied to every request"""
        timeout = self.settings.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            self.logger.warning(f"Invalid request_timeout {timeout!r}, using {DEFAULT_REQUEST_TIMEOUT}")
            return float(DEFAULT_REQUEST_TIMEOUT)
        if timeout <= 0:
            self.logger.warning(f"Non-positive request_timeout {timeout}, using {DEFAULT_REQUEST_TIMEOUT}")
            return float(DEFAULT_REQUEST_TIMEOUT)
        return timeout

    def set_request_timeout(self, seconds: float):
        self.settings["request_timeout"] = seconds
        self._save_settings()
        self.logger.info(f"Request timeout: {seconds}s")

    def get_work_dir(self) -> Path:
        """Get the root directory for per-apply working directories"""
        return get_work_dir(self.settings.get("work_dir") or None)

    def set_work_dir(self, location: str):
        self.settings["work_dir"] = location
        self._save_settings()
        self.logger.info(f"Set work directory: {location}")

    def get_all_settings(self) -> Dict[str, Any]:
        """Get all settings"""
        return self.settings.copy()

    def reset_to_defaults(self):
        """Reset all settings to defaults"""
        self.settings = self._default_settings()
        self._save_settings()
        self.logger.info("Reset settings to defaults")
