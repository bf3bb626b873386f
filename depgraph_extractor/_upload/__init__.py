"""Submission of rendered dependency graphs to external services."""

from .github import GitHubSnapshotUploader, parse_repository
from .result import UploadResult

__all__ = [
    "GitHubSnapshotUploader",
    "UploadResult",
    "parse_repository",
]
