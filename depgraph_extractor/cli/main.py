"""Command-line interface for depgraph-extractor.

Configuration is read from environment variables (see config.py); every
CLI option that is given overrides the matching variable.

# Extraction
`extract` replays a resolution dump through the same listener a live build
would drive: repository selections first, then one event per resolved
configuration, then close(). Configurations are handled by a thread pool
when --jobs is greater than one, exactly as parallel resolution would
deliver them.

# Upload
With --upload, the GitHub snapshot written by the github-snapshot renderer
is submitted to the GitHub dependency graph.
"""

import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Sequence

import click

from .. import __version__
from .._extraction import DependencyExtractor, load_resolution_dump
from .._upload import GitHubSnapshotUploader
from ..config import (
    PARAM_RENDERERS,
    ExtractorConfig,
    evaluate_boolean,
    load_config,
    load_optional_parameter,
    parse_renderer_names,
)
from ..console import gha_error, print_extraction_summary, print_manifest_entries, print_upload_summary
from ..exceptions import DepgraphError
from ..logging_config import logger, set_log_level
from ..serialization import deserialize_manifest

DEPGRAPH_VERSION = __version__

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def build_config(
    output_dir: Optional[Path] = None,
    renderers: Sequence[str] = (),
    include_projects: Optional[str] = None,
    include_configurations: Optional[str] = None,
    manifest_file: Optional[Path] = None,
    upload: Optional[bool] = None,
) -> ExtractorConfig:
    """
    Build the configuration from CLI options, falling back to the environment.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    renderer_names: Optional[tuple[str, ...]] = tuple(renderers) if renderers else None
    if upload:
        if renderer_names is None:
            renderer_names = parse_renderer_names(load_optional_parameter(PARAM_RENDERERS))
        if "github-snapshot" not in renderer_names:
            renderer_names = renderer_names + ("github-snapshot",)

    return load_config(
        output_dir=output_dir,
        renderers=renderer_names,
        include_projects=include_projects,
        include_configurations=include_configurations,
        manifest_file=manifest_file,
        upload=upload,
    )


def run_extraction(dump_path: Path, config: ExtractorConfig, jobs: int = 1) -> DependencyExtractor:
    """
    Replay a resolution dump through a DependencyExtractor and close it.

    Returns:
        The closed extractor, holding the manifest and written files

    Raises:
        DepgraphError: If loading, extraction or rendering fails
    """
    dump = load_resolution_dump(dump_path)
    if config.manifest_file is None and dump.manifest_file:
        config.manifest_file = Path(dump.manifest_file)

    extractor = DependencyExtractor(config)

    for module_version, repository, url in dump.repository_selections():
        extractor.repository_selected(module_version, repository, url)

    with ThreadPoolExecutor(max_workers=max(jobs, 1)) as pool:
        futures = [pool.submit(extractor.configuration_resolved, c) for c in dump.configurations]
        for future in as_completed(futures):
            exc = future.exception()
            if exc is not None:
                # Recorded by the extractor and reported together from close()
                logger.debug(f"Configuration extraction failed: {exc}")

    extractor.close()
    return extractor


def upload_snapshot(extractor: DependencyExtractor, config: ExtractorConfig) -> bool:
    """Submit the rendered GitHub snapshot. Returns True on success."""
    snapshots = extractor.outputs.get("github-snapshot", [])
    if not snapshots:
        gha_error("No GitHub snapshot was written", title="Upload skipped")
        return False

    uploader = GitHubSnapshotUploader(config.github_repository, config.github_token, config.github_api_url)
    result = uploader.upload(snapshots[0])
    print_upload_summary(result.destination_name, result.success, result.request_id, result.error_message)
    return result.success


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(DEPGRAPH_VERSION, "--version", prog_name="depgraph-extractor")
def cli() -> None:
    """Extract resolved build dependency graphs into deduplicated dependency manifests."""


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.argument("dump", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write reports to (env: DEPENDENCY_GRAPH_REPORT_DIR).",
)
@click.option(
    "--renderer",
    "-r",
    "renderers",
    multiple=True,
    help="Output to write: manifest-json, github-snapshot, cyclonedx, dependency-list. Repeatable.",
)
@click.option("--include-projects", help="Regex of project paths to include (env: DEPENDENCY_GRAPH_INCLUDE_PROJECTS).")
@click.option(
    "--include-configurations",
    help="Regex of configuration names to include (env: DEPENDENCY_GRAPH_INCLUDE_CONFIGURATIONS).",
)
@click.option(
    "--manifest-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Build file reported as the snapshot manifest source location.",
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=1, show_default=True, help="Parallel extractions.")
@click.option("--upload/--no-upload", default=None, help="Submit the GitHub snapshot (env: UPLOAD).")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (env: LOG_LEVEL).",
)
def extract(
    dump: Path,
    output_dir: Optional[Path],
    renderers: tuple[str, ...],
    include_projects: Optional[str],
    include_configurations: Optional[str],
    manifest_file: Optional[Path],
    jobs: int,
    upload: Optional[bool],
    log_level: Optional[str],
) -> None:
    """Build the dependency manifest for a resolution DUMP."""
    if log_level:
        set_log_level(log_level)

    if upload is None:
        upload = evaluate_boolean(os.getenv("UPLOAD", "False"))

    try:
        config = build_config(
            output_dir=output_dir,
            renderers=renderers,
            include_projects=include_projects,
            include_configurations=include_configurations,
            manifest_file=manifest_file,
            upload=upload,
        )
        extractor = run_extraction(dump, config, jobs)
    except DepgraphError as e:
        gha_error(str(e), title="Dependency extraction failed")
        sys.exit(1)

    print_extraction_summary(extractor.manifest, extractor.configurations_extracted, extractor.written_files)

    if config.upload and not upload_snapshot(extractor, config):
        sys.exit(1)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--direct-only", is_flag=True, help="Only list direct dependencies.")
def show(manifest: Path, direct_only: bool) -> None:
    """Print a dependency MANIFEST written by the manifest-json renderer."""
    try:
        entries = deserialize_manifest(manifest.read_bytes())
    except DepgraphError as e:
        gha_error(str(e), title="Invalid dependency manifest")
        sys.exit(1)

    if direct_only:
        entries = [e for e in entries if e["relationship"] == "direct"]
    print_manifest_entries(entries, title=f"{manifest.name} ({len(entries)} packages)")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
