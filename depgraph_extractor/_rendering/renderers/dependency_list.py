"""Renderer for a plain list of resolved coordinates."""

from ..._extraction.models import Manifest
from ..protocol import RenderContext


class DependencyListRenderer:
    """Writes dependency-list.txt: one group:name:version per line, sorted and distinct."""

    name = "dependency-list"
    file_name = "dependency-list.txt"

    def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
        coordinates = sorted({identifier.coordinates for identifier in manifest})
        content = "\n".join(coordinates)
        if content:
            content += "\n"
        return {self.file_name: content.encode("utf-8")}
