"""Protocol definition for dependency graph renderers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .._extraction.models import Manifest
from ..config import GitHubSnapshotParams


@dataclass
class RenderContext:
    """Everything a renderer may need besides the manifest itself.

    Attributes:
        output_dir: Directory renderers write into (created on demand)
        workspace: Checkout directory, used to relativize manifest_file
        manifest_file: Build file that declares the dependencies, if known
        snapshot_params: GitHub job identity; loaded from the environment
            by renderers that need it when not given
        scanned: Fixed scan timestamp, mainly for reproducible output
    """

    output_dir: Path
    workspace: Optional[Path] = None
    manifest_file: Optional[Path] = None
    snapshot_params: Optional[GitHubSnapshotParams] = None
    scanned: Optional[str] = None

    def relative_manifest_file(self) -> Optional[str]:
        """Manifest file path relative to the workspace, with forward slashes."""
        if self.manifest_file is None:
            return None
        path = self.manifest_file
        if self.workspace is not None:
            try:
                path = path.relative_to(self.workspace)
            except ValueError:
                pass
        # Clean up path for Windows systems
        return str(path).replace("\\", "/")


class DependencyGraphRenderer(Protocol):
    """Protocol for manifest output plugins.

    Each renderer produces one representation of the finalized manifest as
    file contents keyed by file name. RendererRegistry writes the files
    once every selected renderer has succeeded.

    Example:
        class DependencyListRenderer:
            name = "dependency-list"

            def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
                return {"dependency-list.txt": ...}
    """

    @property
    def name(self) -> str:
        """Name used to select this renderer.

        Examples: "manifest-json", "github-snapshot"
        """
        ...

    def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
        """Render the manifest.

        Args:
            manifest: Finalized, read-only manifest
            context: Output location and build information

        Returns:
            File contents keyed by file name (relative to context.output_dir).

        Raises:
            ConfigurationError: If required parameters are missing.
            InternalConsistencyFault: If the manifest cannot be rendered.
        """
        ...
