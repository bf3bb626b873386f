"""Registry for dependency graph renderers."""

from pathlib import Path
from typing import Iterable

from .._extraction.models import Manifest
from ..exceptions import ConfigurationError
from ..logging_config import logger
from .protocol import DependencyGraphRenderer, RenderContext


class RendererRegistry:
    """Registry for dependency graph renderers.

    Example:
        registry = RendererRegistry()
        registry.register(ManifestJsonRenderer())

        written = registry.render(manifest, context, ["manifest-json"])
    """

    def __init__(self) -> None:
        self._renderers: dict[str, DependencyGraphRenderer] = {}

    def register(self, renderer: DependencyGraphRenderer) -> None:
        """Register a renderer, replacing any renderer with the same name."""
        self._renderers[renderer.name] = renderer
        logger.debug(f"Registered renderer: {renderer.name}")

    def get(self, name: str) -> DependencyGraphRenderer:
        """Get a renderer by name.

        Raises:
            ConfigurationError: If no renderer has that name.
        """
        renderer = self._renderers.get(name)
        if renderer is None:
            raise ConfigurationError(
                f"Unknown renderer '{name}'. Available renderers: {', '.join(self.registered_renderers)}"
            )
        return renderer

    def render(self, manifest: Manifest, context: RenderContext, names: Iterable[str]) -> dict[str, list[Path]]:
        """Run the named renderers and write their output.

        Nothing is written unless every renderer succeeds, so a failing
        renderer never leaves a partial set of reports behind.

        Returns:
            Paths of the files written, keyed by renderer name.
        """
        renderers = [self.get(name) for name in names]

        outputs: list[tuple[str, str, bytes]] = []
        for renderer in renderers:
            logger.debug(f"Rendering manifest with {renderer.name}")
            for file_name, content in renderer.render(manifest, context).items():
                outputs.append((renderer.name, file_name, content))

        context.output_dir.mkdir(parents=True, exist_ok=True)
        written: dict[str, list[Path]] = {renderer.name: [] for renderer in renderers}
        for renderer_name, file_name, content in outputs:
            path = context.output_dir / file_name
            path.write_bytes(content)
            logger.info(f"Wrote {renderer_name} output to {path}")
            written[renderer_name].append(path)
        return written

    @property
    def registered_renderers(self) -> list[str]:
        """Get names of all registered renderers."""
        return sorted(self._renderers)
