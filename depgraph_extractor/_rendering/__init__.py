"""Output renderers for aggregated dependency manifests.

Supported outputs:
- manifest-json: the dependency manifest wire format
- github-snapshot: GitHub dependency submission snapshot
- cyclonedx: CycloneDX 1.6 BOM with dependency graph
- dependency-list: sorted group:name:version list

Example usage:
    from depgraph_extractor._rendering import RenderContext, create_default_registry

    registry = create_default_registry()
    registry.render(manifest, RenderContext(output_dir=Path("reports")), ["manifest-json"])
"""

from .protocol import DependencyGraphRenderer, RenderContext
from .registry import RendererRegistry
from .renderers import CycloneDxRenderer, DependencyListRenderer, GitHubSnapshotRenderer, ManifestJsonRenderer


def create_default_registry() -> RendererRegistry:
    """Create registry with the built-in renderers."""
    registry = RendererRegistry()
    registry.register(ManifestJsonRenderer())
    registry.register(GitHubSnapshotRenderer())
    registry.register(CycloneDxRenderer())
    registry.register(DependencyListRenderer())
    return registry


__all__ = [
    "DependencyGraphRenderer",
    "RenderContext",
    "RendererRegistry",
    "create_default_registry",
    "CycloneDxRenderer",
    "DependencyListRenderer",
    "GitHubSnapshotRenderer",
    "ManifestJsonRenderer",
]
