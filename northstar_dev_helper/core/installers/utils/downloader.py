"""
Downloader

Streams a build archive to disk. The HTTP status is checked before anything
is written, and that status is the only validation performed on the content.
"""

from pathlib import Path
from typing import Optional, Callable, Union

import requests

from northstar_dev_helper.constants import USER_AGENT
from northstar_dev_helper.core.errors import FilesystemError, HttpStatusError, NetworkError
from northstar_dev_helper.utils.logger import get_logger


class Downloader:
    """Downloads a URL into a file with progress tracking"""

    CHUNK_SIZE = 8192

    def __init__(self, timeout: Optional[float] = 60, user_agent: str = USER_AGENT):
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}
        self.logger = get_logger(__name__)

    def fetch(self,
              url: str,
              dest_dir: Union[str, Path],
              filename: str,
              progress_callback: Optional[Callable] = None) -> Path:
        """
        Download a file into a directory

        Args:
            url: URL to download from
            dest_dir: Existing directory to write into
            filename: Name of the file to create inside dest_dir
            progress_callback: Optional callback for progress (percent, current, total)

        Returns:
            Path to the downloaded file

        Raises:
            NetworkError: the transfer failed
            HttpStatusError: non-success status, nothing was written
            FilesystemError: the file could not be written
        """
        file_path = Path(dest_dir) / filename

        self.logger.info(f"Downloading {url}")
        try:
            response = requests.get(url, headers=self.headers, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Download of {url} failed: {e}") from e

        with response:
            if not response.ok:
                self.logger.error(f"Download of {url} returned HTTP {response.status_code}")
                raise HttpStatusError(response.status_code, url)

            total_size = self._content_length(response)
            downloaded = 0

            try:
                with open(file_path, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            downloaded += len(chunk)

                            if progress_callback and total_size > 0:
                                percent = (downloaded / total_size) * 100
                                progress_callback(percent, downloaded, total_size)
            except requests.RequestException as e:
                self._remove_partial(file_path)
                raise NetworkError(f"Download of {url} interrupted: {e}") from e
            except OSError as e:
                self._remove_partial(file_path)
                raise FilesystemError(f"write {file_path}", e) from e

        self.logger.info(f"Download complete: {file_path} ({downloaded} bytes)")
        return file_path

    def _content_length(self, response) -> int:
        """Declared body size, 0 when missing or malformed"""
        value = response.headers.get('content-length')
        if not value:
            return 0
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            self.logger.warning(f"Ignoring malformed Content-Length header: {value!r}")
            return 0

    def _remove_partial(self, file_path: Path):
        try:
            file_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove partial download {file_path}: {e}")
