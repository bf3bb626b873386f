"""Tests for GitHub snapshot submission."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from depgraph_extractor._upload import GitHubSnapshotUploader, UploadResult, parse_repository
from depgraph_extractor.exceptions import ConfigurationError
from depgraph_extractor.http_client import USER_AGENT, get_default_headers


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "build-job.json"
    path.write_text('{"version": 0}', encoding="utf-8")
    return path


def mock_response(status_code=201, json_data=None, text="", headers=None):
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    response.json.return_value = json_data or {}
    return response


class TestParseRepository:
    def test_valid(self):
        assert parse_repository("octo/repo") == ("octo", "repo")

    @pytest.mark.parametrize("value", ["octo", "octo/", "/repo", "octo/repo/extra", ""])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError, match="owner/repository"):
            parse_repository(value)


class TestGitHubSnapshotUploader:
    """Tests for GitHubSnapshotUploader.upload."""

    def test_request_url(self):
        uploader = GitHubSnapshotUploader("octo/repo", "token", "https://ghe.example.com/api/v3/")
        assert uploader.request_url() == "https://ghe.example.com/api/v3/repos/octo/repo/dependency-graph/snapshots"

    def test_default_api_url(self):
        uploader = GitHubSnapshotUploader("octo/repo", "token")
        assert uploader.request_url() == "https://api.github.com/repos/octo/repo/dependency-graph/snapshots"

    @patch("depgraph_extractor._upload.github.requests.post")
    def test_success(self, mock_post, snapshot_file):
        """Test a successful submission."""
        mock_post.return_value = mock_response(
            201, json_data={"id": 7, "result": "SUCCESS"}, headers={"x-github-request-id": "ABCD:1234"}
        )

        result = GitHubSnapshotUploader("octo/repo", "secret").upload(snapshot_file)

        assert result.success
        assert result.destination_name == "github"
        assert result.request_id == "ABCD:1234"
        assert result.metadata == {"id": 7, "result": "SUCCESS"}

        _, kwargs = mock_post.call_args
        assert kwargs["data"] == b'{"version": 0}'
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["headers"]["Accept"] == "application/vnd.github+json"
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["timeout"] == 60

    @patch("depgraph_extractor._upload.github.requests.post")
    def test_http_error(self, mock_post, snapshot_file):
        """Test that an error response becomes a failed result."""
        mock_post.return_value = mock_response(403, text="Resource not accessible by integration")

        result = GitHubSnapshotUploader("octo/repo", "secret").upload(snapshot_file)

        assert not result.success
        assert "[403]" in result.error_message
        assert "Resource not accessible" in result.error_message

    @patch("depgraph_extractor._upload.github.requests.post")
    def test_connection_error(self, mock_post, snapshot_file):
        mock_post.side_effect = requests.exceptions.ConnectionError()

        result = GitHubSnapshotUploader("octo/repo", "secret").upload(snapshot_file)

        assert not result.success
        assert "Failed to connect" in result.error_message

    @patch("depgraph_extractor._upload.github.requests.post")
    def test_timeout(self, mock_post, snapshot_file):
        mock_post.side_effect = requests.exceptions.Timeout()

        result = GitHubSnapshotUploader("octo/repo", "secret").upload(snapshot_file)

        assert not result.success
        assert "timed out" in result.error_message

    @patch("depgraph_extractor._upload.github.requests.post")
    def test_missing_file(self, mock_post, tmp_path):
        result = GitHubSnapshotUploader("octo/repo", "secret").upload(tmp_path / "missing.json")

        assert not result.success
        assert "not found" in result.error_message
        mock_post.assert_not_called()


class TestUploadResult:
    def test_success_with_error_is_invalid(self):
        with pytest.raises(ValueError):
            UploadResult(success=True, destination_name="github", error_message="boom")

    def test_failure_without_error_is_invalid(self):
        with pytest.raises(ValueError):
            UploadResult(success=False, destination_name="github")


class TestDefaultHeaders:
    def test_headers(self):
        assert get_default_headers() == {"User-Agent": USER_AGENT}
        assert get_default_headers("t", "application/json") == {
            "User-Agent": USER_AGENT,
            "Authorization": "Bearer t",
            "Content-Type": "application/json",
        }
