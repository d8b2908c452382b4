"""
Error types raised by the pull-request apply pipeline

Every failure the pipeline can hit is one of these, so callers can catch
NorthstarHelperError and display the message without crashing.
"""

from typing import Optional


class NorthstarHelperError(Exception):
    """Base class for all helper errors"""


class NetworkError(NorthstarHelperError):
    """Transport failure (DNS, connection refused, timeout, dropped stream)"""


class HttpStatusError(NorthstarHelperError):
    """Server answered with a non-success HTTP status"""

    def __init__(self, code: int, url: str = ""):
        self.code = code
        self.url = url
        message = f"HTTP {code}"
        if url:
            message += f" for {url}"
        super().__init__(message)

    @property
    def status(self) -> int:
        return self.code


class ParseError(NorthstarHelperError):
    """Response body is not valid JSON or does not have the expected shape"""


class NotFoundError(NorthstarHelperError):
    """Pull request, workflow run or artifact could not be resolved"""


class InvalidGamePathError(NorthstarHelperError):
    """Directory is not a Titanfall 2 installation"""

    def __init__(self, path: str, marker: str):
        self.path = path
        self.marker = marker
        super().__init__(f"{marker} not found in {path!r}, not a valid game install path")


class FilesystemError(NorthstarHelperError):
    """A filesystem operation failed

    ``partially_applied`` is set when the game install was already modified
    when the failure happened and could not be restored.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None, partially_applied: bool = False):
        self.operation = operation
        self.cause = cause
        self.partially_applied = partially_applied
        message = f"Failed to {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ArchiveError(NorthstarHelperError):
    """Downloaded archive is unreadable or has an unexpected layout"""
