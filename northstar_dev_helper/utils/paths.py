"""
Central Paths Helper
Provides centralized path resolution for the helper's own directories
"""

from pathlib import Path
from typing import Optional


def get_helper_home() -> Path:
    """
    Get the helper home directory path

    All code should use this instead of hardcoding Path.home() / "NorthstarDevHelper"
    so tests can redirect it by patching a single function.

    Returns:
        Path to the helper home directory (may not exist yet)
    """
    return Path.home() / "NorthstarDevHelper"


def get_logs_dir() -> Path:
    """Get logs directory path"""
    return get_helper_home() / "logs"


def get_work_dir(custom_location: Optional[str] = None) -> Path:
    """
    Get the root directory under which per-apply working directories are created

    Args:
        custom_location: Optional override from settings

    Returns:
        Path to the work root
    """
    if custom_location:
        return Path(custom_location).expanduser()
    return get_helper_home() / "work"


def get_settings_file() -> Path:
    """Get settings file path"""
    return Path.home() / ".config" / "northstar-dev-helper" / "settings.json"
