"""Rich console utilities for depgraph-extractor.

This module provides a shared Rich Console instance and helper functions
for CLI output, optimized for GitHub Actions and CI environments.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from ._extraction.models import Manifest

# Detect CI environments
IS_GITHUB_ACTIONS = os.getenv("GITHUB_ACTIONS") == "true"

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "direct": "bold",
        "indirect": "dim",
    }
)

# Shared console instance
# Force colors ON in GitHub Actions (it supports ANSI colors but Rich may incorrectly disable them)
console = Console(
    theme=custom_theme,
    force_terminal=IS_GITHUB_ACTIONS or None,
    color_system="auto",
)


@contextmanager
def gha_group(title: str) -> Generator[None, None, None]:
    """
    Context manager for GitHub Actions collapsible groups.

    Args:
        title: Group title
    """
    if IS_GITHUB_ACTIONS:
        print(f"::group::{title}")
    try:
        yield
    finally:
        if IS_GITHUB_ACTIONS:
            print("::endgroup::")


def gha_error(message: str, title: Optional[str] = None) -> None:
    """
    Emit an error that appears in GitHub Actions job summary.

    Args:
        message: Error message
        title: Optional title for the error
    """
    if IS_GITHUB_ACTIONS:
        if title:
            print(f"::error title={title}::{message}")
        else:
            print(f"::error::{message}")
    else:
        if title:
            console.print(f"[error]Error ({title}):[/error] {message}")
        else:
            console.print(f"[error]Error:[/error] {message}")


def print_summary_table(
    title: str,
    data: List[Tuple[str, Any]],
    show_if_empty: bool = False,
) -> None:
    """
    Print a summary table.

    Args:
        title: Table title
        data: List of (label, value) tuples
        show_if_empty: Whether to show the table if all values are 0/empty
    """
    if not show_if_empty:
        data = [(label, value) for label, value in data if value]

    if not data:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    for label, value in data:
        table.add_row(label, str(value))

    console.print(table)


def summarize_manifest(manifest: Manifest) -> Dict[str, int]:
    """Count packages, relationships, edges and provenance in a manifest."""
    entries = list(manifest.values())
    return {
        "packages": len(entries),
        "direct": sum(1 for e in entries if e.is_direct),
        "indirect": sum(1 for e in entries if not e.is_direct),
        "edges": sum(len(e.dependencies) for e in entries),
        "with_repository": sum(1 for e in entries if e.metadata),
    }


def print_extraction_summary(manifest: Manifest, configurations: int, written: Iterable[Any] = ()) -> None:
    """
    Print the extraction summary as a Rich table.

    Args:
        manifest: Finalized manifest
        configurations: Number of configurations that contributed
        written: Output files
    """
    counts = summarize_manifest(manifest)
    data = [
        ("Configurations extracted", configurations),
        ("Packages", counts["packages"]),
        ("Direct", counts["direct"]),
        ("Indirect", counts["indirect"]),
        ("Dependency edges", counts["edges"]),
        ("Packages with known repository", counts["with_repository"]),
    ]
    print_summary_table("Dependency Graph Summary", data, show_if_empty=True)

    written = list(written)
    if written:
        with gha_group("Written files"):
            for path in written:
                console.print(f"  {path}")


def print_manifest_entries(entries: List[Dict[str, Any]], title: str = "Dependency Manifest") -> None:
    """
    Print serialized manifest entries as a table.

    Args:
        entries: Entries as read back from the wire format
        title: Table title
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Package URL")
    table.add_column("Relationship")
    table.add_column("Dependencies", justify="right")
    table.add_column("Repository")

    for entry in entries:
        relationship = entry["relationship"]
        repository = ((entry.get("metadata") or {}).get("repository") or {}).get("name", "")
        table.add_row(
            entry["purl"],
            f"[{relationship}]{relationship}[/{relationship}]",
            str(len(entry.get("dependencies", []))),
            repository,
        )

    console.print(table)


def print_upload_summary(
    destination: str,
    success: bool,
    request_id: Optional[str] = None,
    error_message: Optional[str] = None,
) -> None:
    """
    Print upload result summary.

    Args:
        destination: Upload destination name
        success: Whether upload succeeded
        request_id: Optional request id from the response
        error_message: Optional error message if failed
    """
    if success:
        console.print(f"[success]✓ Uploaded to {destination}[/success]")
        if request_id:
            console.print(f"  Request ID: {request_id}")
    else:
        console.print(f"[error]✗ Upload to {destination} failed[/error]")
        if error_message:
            console.print(f"  Error: {error_message}")
