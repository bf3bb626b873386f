"""GitHub dependency submission for rendered snapshots.

Snapshots written by the github-snapshot renderer are POSTed to
{api}/repos/{owner}/{repo}/dependency-graph/snapshots.

Configuration via environment variables:
    GITHUB_REPOSITORY: owner/repository to submit to (required)
    GITHUB_TOKEN: token with contents:write permission (required)
    GITHUB_API_URL: API base URL (default: https://api.github.com)
"""

from pathlib import Path
from typing import Any, Dict, Optional

import requests

from ..config import DEFAULT_GITHUB_API_URL
from ..exceptions import ConfigurationError
from ..http_client import get_default_headers
from ..logging_config import logger
from .result import UploadResult

# Upload timeout in seconds
UPLOAD_TIMEOUT = 60


def parse_repository(repository: str) -> tuple[str, str]:
    """Split owner/repository.

    Raises:
        ConfigurationError: If the value is not in the format 'owner/repository'.
    """
    parts = repository.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ConfigurationError("GITHUB_REPOSITORY must be in the format 'owner/repository'")
    return parts[0], parts[1]


class GitHubSnapshotUploader:
    """Submits dependency snapshots to the GitHub dependency graph."""

    def __init__(self, repository: str, token: str, api_url: Optional[str] = None) -> None:
        self.owner, self.repository = parse_repository(repository)
        self.token = token
        self.api_url = (api_url or DEFAULT_GITHUB_API_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "github"

    def request_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repository}/dependency-graph/snapshots"

    def upload(self, snapshot_file: Path) -> UploadResult:
        """
        Upload a rendered snapshot file.

        Returns:
            UploadResult with the GitHub request id if successful
        """
        try:
            with Path(snapshot_file).open("rb") as f:
                payload = f.read()
        except FileNotFoundError:
            return UploadResult.failure_result(
                destination_name=self.name,
                error_message=f"Snapshot file not found: {snapshot_file}",
            )
        except OSError as e:
            return UploadResult.failure_result(
                destination_name=self.name,
                error_message=f"Failed to read snapshot file: {e}",
            )

        url = self.request_url()
        headers = get_default_headers(self.token, "application/json")
        headers["Accept"] = "application/vnd.github+json"

        logger.info(f"Uploading dependency snapshot to {url}")
        try:
            response = requests.post(url, headers=headers, data=payload, timeout=UPLOAD_TIMEOUT)
        except requests.exceptions.ConnectionError:
            return UploadResult.failure_result(
                destination_name=self.name,
                error_message=f"Failed to connect to GitHub at {self.api_url}",
            )
        except requests.exceptions.Timeout:
            return UploadResult.failure_result(
                destination_name=self.name,
                error_message="Dependency snapshot upload timed out",
            )

        request_id = response.headers.get("x-github-request-id")

        if not response.ok:
            err_msg = f"Failed to upload dependency snapshot. [{response.status_code}]"
            response_text = response.text[:500] if response.text else ""
            if response_text:
                err_msg += f" - {response_text}"
            return UploadResult.failure_result(destination_name=self.name, error_message=err_msg)

        response_data: Dict[str, Any] = {}
        try:
            response_data = response.json()
        except ValueError:
            logger.debug("Could not decode GitHub response body")

        logger.info(f"Uploaded dependency snapshot (x-github-request-id: {request_id})")
        return UploadResult.success_result(
            destination_name=self.name,
            request_id=request_id,
            metadata=response_data,
        )
