"""Built-in dependency graph renderers."""

from .cyclonedx import CycloneDxRenderer
from .dependency_list import DependencyListRenderer
from .github_snapshot import GitHubSnapshotRenderer
from .manifest_json import ManifestJsonRenderer

__all__ = [
    "CycloneDxRenderer",
    "DependencyListRenderer",
    "GitHubSnapshotRenderer",
    "ManifestJsonRenderer",
]
