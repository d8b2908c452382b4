"""
Base Installer Class

This module provides the base class shared by the pull request apply
pipeline: logging plus progress and log callbacks for a front end.
"""

from typing import Optional, Callable

from northstar_dev_helper.utils.logger import get_logger


class BaseInstaller:
    """
    Base class for installers

    Provides common functionality for:
    - Logging
    - Progress and log callbacks, so a front end can mirror what happens
    """

    def __init__(self, installer_name: Optional[str] = None):
        """
        Initialize the base installer

        Args:
            installer_name: Name of the installer for logging (optional, uses class name if not provided)
        """
        logger_name = installer_name or self.__class__.__name__
        self.logger = get_logger(logger_name)

        self.progress_callback: Optional[Callable] = None
        self.log_callback: Optional[Callable] = None

        self.logger.debug(f"{logger_name} initialized")

    def set_progress_callback(self, callback: Callable):
        """
        Set a callback function for progress updates

        Args:
            callback: Function to call with progress updates
                     Signature: callback(percent: float, current: int, total: int)
        """
        self.progress_callback = callback

    def set_log_callback(self, callback: Callable):
        """
        Set a callback function for log messages

        Args:
            callback: Function to call with log messages
                     Signature: callback(message: str)
        """
        self.log_callback = callback

    def _log_progress(self, message: str):
        """Log a progress message to both logger and callback"""
        self.logger.info(message)
        if self.log_callback:
            self.log_callback(message)

    def _log_warning(self, message: str):
        """Log a warning to both logger and callback"""
        self.logger.warning(message)
        if self.log_callback:
            self.log_callback(f"Warning: {message}")

    def _send_progress_update(self, percent: float):
        """
        Send a progress percentage update to callback

        Args:
            percent: Progress percentage (0-100)
        """
        if self.progress_callback:
            # Non-download stages report 0, 0 for current/total bytes
            self.progress_callback(percent, 0, 0)
