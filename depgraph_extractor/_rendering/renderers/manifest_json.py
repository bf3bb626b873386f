"""Renderer for the dependency manifest wire format."""

from ..._extraction.models import Manifest
from ...serialization import serialize_manifest
from ..protocol import RenderContext


class ManifestJsonRenderer:
    """Writes dependency-manifest.json, a purl-sorted list of manifest entries."""

    name = "manifest-json"
    file_name = "dependency-manifest.json"

    def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
        return {self.file_name: serialize_manifest(manifest)}
