"""Dependency graph extraction and manifest aggregation.

This module walks the resolved dependency trees reported by a build, one
configuration at a time, and merges them into a single deduplicated
manifest keyed by Package URL.

Example usage:
    from depgraph_extractor._extraction import ManifestAggregator, walk

    aggregator = ManifestAggregator()
    for configuration in configurations:
        aggregator.merge(walk(configuration.roots))
    manifest = aggregator.finalize()

Note:
    A package declared directly by any configuration is direct in the
    manifest, even if other configurations only reach it transitively.
"""

from .aggregator import ManifestAggregator
from .classifier import classify
from .extractor import DependencyExtractor
from .filter import ResolvedConfigurationFilter
from .identifiers import build_identifier, build_identifier_for_node, parse_identifier
from .loader import ResolutionDump, load_resolution_dump, parse_resolution_dump
from .models import (
    Manifest,
    ManifestEntry,
    PackageIdentifier,
    RelationshipKind,
    ResolvedConfiguration,
    ResolvedNode,
    WalkRecord,
)
from .provenance import Repository, RepositoryProvenanceTracker
from .walker import DependencyGraphWalker, walk

__all__ = [
    # Main API
    "DependencyExtractor",
    "ManifestAggregator",
    "DependencyGraphWalker",
    "RepositoryProvenanceTracker",
    "ResolvedConfigurationFilter",
    "walk",
    "classify",
    "build_identifier",
    "build_identifier_for_node",
    "parse_identifier",
    # Resolution dumps
    "ResolutionDump",
    "load_resolution_dump",
    "parse_resolution_dump",
    # Models
    "Manifest",
    "ManifestEntry",
    "PackageIdentifier",
    "RelationshipKind",
    "Repository",
    "ResolvedConfiguration",
    "ResolvedNode",
    "WalkRecord",
]
