"""Renderer for GitHub dependency-submission snapshots.

The snapshot is the document accepted by the GitHub dependency submission
API (POST /repos/{owner}/{repo}/dependency-graph/snapshots). The whole
build is reported as a single manifest named after the job correlator.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict

from ... import __version__
from ..._extraction.models import Manifest
from ...config import GitHubSnapshotParams
from ...serialization import entry_to_dict
from ..protocol import RenderContext

DETECTOR_NAME = "depgraph-extractor"
DETECTOR_URL = "https://pypi.org/project/depgraph-extractor/"
SNAPSHOT_VERSION = 0


def _get_current_utc_timestamp() -> str:
    """Current UTC time in ISO-8601 format, e.g. 2024-12-19T14:30:00Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubSnapshotRenderer:
    """Writes <job correlator>.json, a GitHub repository snapshot.

    Job parameters come from the render context, or from the GITHUB_*
    environment variables when the context has none.
    """

    name = "github-snapshot"

    def build_snapshot(self, manifest: Manifest, context: RenderContext) -> Dict[str, Any]:
        """Build the snapshot document.

        Raises:
            ConfigurationError: If job parameters are missing.
        """
        params = context.snapshot_params or GitHubSnapshotParams.from_env()

        resolved: Dict[str, Any] = {}
        for key in sorted(manifest, key=lambda k: k.purl):
            entry = entry_to_dict(key, manifest[key])
            resolved[key.coordinates] = {
                "package_url": entry["purl"],
                "relationship": entry["relationship"],
                "dependencies": entry["dependencies"],
            }

        github_manifest: Dict[str, Any] = {"name": params.job_correlator}
        source_location = context.relative_manifest_file()
        if source_location:
            github_manifest["file"] = {"source_location": source_location}
        github_manifest["resolved"] = resolved

        return {
            "version": SNAPSHOT_VERSION,
            "job": {"id": params.job_id, "correlator": params.job_correlator},
            "sha": params.sha,
            "ref": params.ref,
            "detector": {"name": DETECTOR_NAME, "version": __version__, "url": DETECTOR_URL},
            "manifests": {params.job_correlator: github_manifest},
            "scanned": context.scanned or _get_current_utc_timestamp(),
        }

    def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
        snapshot = self.build_snapshot(manifest, context)
        file_name = f"{snapshot['job']['correlator']}.json"
        return {file_name: (json.dumps(snapshot, indent=2) + "\n").encode("utf-8")}
