"""Build-scoped listener that turns resolution events into a dependency manifest."""

import threading
from pathlib import Path
from typing import Optional

from ..config import ExtractorConfig
from ..exceptions import ExtractionError
from ..logging_config import logger
from .aggregator import ManifestAggregator
from .filter import ResolvedConfigurationFilter
from .models import Manifest, ResolvedConfiguration
from .provenance import RepositoryProvenanceTracker
from .walker import DependencyGraphWalker


class DependencyExtractor:
    """Receives resolution events from the host build and writes the manifest at build end.

    The host calls configuration_resolved() once per resolved configuration,
    possibly from several threads, and repository_selected() once per
    resolved module version. close() runs once, after all resolution has
    finished.

    Any failure while handling an event is recorded and re-raised to the
    host. If anything failed, close() raises ExtractionError and writes
    nothing: an incomplete dependency graph must never look complete to
    the scanners that consume it.

    Example:
        with DependencyExtractor(config) as extractor:
            extractor.repository_selected("org.example:lib:1.0", "MavenRepo", "https://repo.example.com/")
            extractor.configuration_resolved(configuration)
    """

    def __init__(self, config: Optional[ExtractorConfig] = None, renderers=None, render_context=None) -> None:
        """
        Initialize the extractor.

        Args:
            config: Extraction settings. Defaults to ExtractorConfig().
            renderers: RendererRegistry to write output with. Defaults to the
                built-in renderers.
            render_context: RenderContext to render with. Built from config
                when not given.
        """
        from .._rendering import RenderContext, create_default_registry

        self.config = config or ExtractorConfig()
        self.provenance = RepositoryProvenanceTracker()
        self.aggregator = ManifestAggregator(self.provenance)
        self.walker = DependencyGraphWalker()
        self.configuration_filter = ResolvedConfigurationFilter(
            self.config.include_projects, self.config.include_configurations
        )
        self._renderers = renderers or create_default_registry()
        self._render_context = render_context or RenderContext(
            output_dir=Path(self.config.output_dir),
            workspace=self.config.workspace,
            manifest_file=self.config.manifest_file,
        )

        self._errors: list[BaseException] = []
        self._errors_lock = threading.Lock()
        self._closed = False
        self._manifest: Optional[Manifest] = None
        self.outputs: dict[str, list[Path]] = {}
        self.configurations_extracted = 0

    def repository_selected(self, module_version: str, repository: str, url: Optional[str] = None) -> None:
        """Record the repository a module version was fetched from."""
        try:
            self.provenance.record(module_version, repository, url)
        except Exception as e:
            self._record_error(e)
            raise

    def configuration_resolved(self, configuration: ResolvedConfiguration) -> None:
        """Extract the dependencies of one resolved configuration.

        Raises:
            MalformedIdentifierError: If the configuration holds unusable coordinates.
        """
        try:
            self._extract(configuration)
        except Exception as e:
            self._record_error(e)
            raise

    def _extract(self, configuration: ResolvedConfiguration) -> None:
        if not configuration.roots:
            # No dependencies to extract: can safely ignore
            logger.debug(f"Configuration {configuration.display_name} has no dependencies")
            return

        if not self.configuration_filter.include(configuration.project_path, configuration.name):
            logger.info(f"Ignoring resolved configuration: {configuration.display_name}")
            return

        # Walk fully before merging so a malformed node leaves the manifest untouched
        records = self.walker.walk(configuration.roots)
        self.aggregator.merge(records)

        with self._errors_lock:
            self.configurations_extracted += 1
        logger.debug(f"Extracted {len(records)} packages from {configuration.display_name}")

    def _record_error(self, error: BaseException) -> None:
        with self._errors_lock:
            self._errors.append(error)

    @property
    def errors(self) -> list[BaseException]:
        with self._errors_lock:
            return list(self._errors)

    @property
    def manifest(self) -> Optional[Manifest]:
        """The finalized manifest, once close() has succeeded."""
        return self._manifest

    def close(self) -> list[Path]:
        """Finalize the manifest and write every configured output.

        Returns:
            Paths of the files written.

        Raises:
            ExtractionError: If any resolution event failed, or if the output
                could not be rendered. Nothing is written in either case.
        """
        if self._closed:
            return self.written_files
        self._closed = True

        errors = self.errors
        if errors:
            raise ExtractionError(
                f"Dependency extraction encountered {len(errors)} error(s); no dependency graph was written",
                errors,
            )

        self._manifest = self.aggregator.finalize()
        logger.info(
            f"Extracted {len(self._manifest)} packages from {self.configurations_extracted} resolved configuration(s)"
        )

        try:
            self.outputs = self._renderers.render(self._manifest, self._render_context, self.config.renderers)
        except Exception as e:
            raise ExtractionError("Dependency extraction failed while writing the dependency graph", [e]) from e
        return self.written_files

    @property
    def written_files(self) -> list[Path]:
        """Every file written by close(), in renderer order."""
        return [path for paths in self.outputs.values() for path in paths]

    def __enter__(self) -> "DependencyExtractor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self._closed = True
