"""Tracks which repository supplied each resolved module version."""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..logging_config import logger


@dataclass(frozen=True)
class Repository:
    """A repository a module version was fetched from."""

    name: str
    url: Optional[str] = None

    def to_metadata(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.url:
            data["url"] = self.url
        return data


def normalize_repository_url(url: Optional[str]) -> Optional[str]:
    """Drop a trailing slash so the same repository always reads the same."""
    if not url:
        return None
    return url.rstrip("/")


class RepositoryProvenanceTracker:
    """Module-version identity to repository mapping for one build.

    Populated from the host's repository-selection notifications, which may
    arrive from parallel resolutions; read by the aggregator while merging.
    If one module version is reported from two repositories the last report
    wins.

    Example:
        tracker = RepositoryProvenanceTracker()
        tracker.record("org.slf4j:slf4j-api:2.0.9", "MavenRepo", "https://repo.maven.apache.org/maven2/")
        tracker.lookup("org.slf4j:slf4j-api:2.0.9")  # "MavenRepo"
    """

    def __init__(self) -> None:
        self._repositories: Dict[str, Repository] = {}
        self._lock = threading.Lock()

    def record(self, module_version: str, repository: str, url: Optional[str] = None) -> None:
        """Record the repository that supplied a module version.

        Args:
            module_version: group:name:version identity
            repository: Repository name or id
            url: Repository URL, if known
        """
        entry = Repository(name=repository, url=normalize_repository_url(url))
        with self._lock:
            previous = self._repositories.get(module_version)
            self._repositories[module_version] = entry

        if previous is not None and previous != entry:
            logger.debug(
                f"{module_version} reported from repository {entry.name} after {previous.name}; keeping {entry.name}"
            )

    def lookup(self, module_version: str) -> Optional[str]:
        """Return the repository name for a module version, or None if unknown."""
        repository = self.lookup_repository(module_version)
        return repository.name if repository else None

    def lookup_repository(self, module_version: str) -> Optional[Repository]:
        with self._lock:
            return self._repositories.get(module_version)

    def __len__(self) -> int:
        with self._lock:
            return len(self._repositories)
