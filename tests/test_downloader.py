"""
Unit tests for the build archive downloader.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from northstar_dev_helper.constants import USER_AGENT
from northstar_dev_helper.core.errors import HttpStatusError, NetworkError
from northstar_dev_helper.core.installers.utils.downloader import Downloader


def _response(status_code=200, chunks=(), content_length=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = {}
    if content_length is not None:
        response.headers["content-length"] = str(content_length)
    if callable(chunks):
        response.iter_content.side_effect = lambda chunk_size: chunks()
    else:
        response.iter_content.return_value = iter(chunks)
    return response


class TestDownloader:
    """Test suite for Downloader.fetch."""

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_writes_body_to_named_file(self, mock_get, tmp_path):
        mock_get.return_value = _response(chunks=[b"PK", b"\x03\x04", b""])

        path = Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip")

        assert path == tmp_path / "pr.zip"
        assert path.read_bytes() == b"PK\x03\x04"
        _, kwargs = mock_get.call_args
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["stream"] is True

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_http_404_writes_nothing(self, mock_get, tmp_path):
        mock_get.return_value = _response(status_code=404, chunks=[b"Not Found"])
        dest = tmp_path / "downloads"
        dest.mkdir()

        with pytest.raises(HttpStatusError) as exc_info:
            Downloader().fetch("https://example/pr.zip", dest, "pr.zip")

        assert exc_info.value.status == 404
        assert list(dest.iterdir()) == []

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_connection_failure_raises_network_error(self, mock_get, tmp_path):
        mock_get.side_effect = requests.ConnectionError("no route to host")

        with pytest.raises(NetworkError):
            Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip")

        assert not (tmp_path / "pr.zip").exists()

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_interrupted_stream_removes_partial_file(self, mock_get, tmp_path):
        def chunks():
            yield b"partial"
            raise requests.exceptions.ChunkedEncodingError("connection reset")

        mock_get.return_value = _response(chunks=chunks)

        with pytest.raises(NetworkError, match="interrupted"):
            Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip")

        assert not (tmp_path / "pr.zip").exists()

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_reports_progress_when_length_known(self, mock_get, tmp_path):
        mock_get.return_value = _response(chunks=[b"aa", b"bb"], content_length=4)
        progress = MagicMock()

        Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip", progress_callback=progress)

        assert [call.args for call in progress.call_args_list] == [(50.0, 2, 4), (100.0, 4, 4)]

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_no_progress_without_length(self, mock_get, tmp_path):
        mock_get.return_value = _response(chunks=[b"aa"])
        progress = MagicMock()

        Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip", progress_callback=progress)

        progress.assert_not_called()

    @patch('northstar_dev_helper.core.installers.utils.downloader.requests.get')
    def test_malformed_length_is_treated_as_unknown(self, mock_get, tmp_path):
        mock_get.return_value = _response(chunks=[b"PK", b"\x03\x04"], content_length="abc")
        progress = MagicMock()

        path = Downloader().fetch("https://example/pr.zip", tmp_path, "pr.zip", progress_callback=progress)

        assert path.read_bytes() == b"PK\x03\x04"
        progress.assert_not_called()
