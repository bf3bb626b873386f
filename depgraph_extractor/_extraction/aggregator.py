"""Merges walk output from every resolved configuration into one manifest."""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Optional

from ..exceptions import InternalConsistencyFault
from ..logging_config import logger
from .models import Manifest, ManifestEntry, PackageIdentifier, RelationshipKind, WalkRecord
from .provenance import RepositoryProvenanceTracker


@dataclass
class _EntryBuilder:
    """Mutable state for one identifier while the build is still resolving."""

    identifier: PackageIdentifier
    relationship: RelationshipKind = RelationshipKind.INDIRECT
    dependencies: set[PackageIdentifier] = field(default_factory=set)
    metadata: Optional[Dict[str, Any]] = None

    def add_relationship(self, relationship: RelationshipKind) -> None:
        # Direct trumps indirect
        self.relationship = RelationshipKind.strongest(self.relationship, relationship)

    def add_dependencies(self, dependencies: Iterable[PackageIdentifier]) -> None:
        self.dependencies.update(d for d in dependencies if d != self.identifier)

    def build(self) -> ManifestEntry:
        return ManifestEntry(
            identifier=self.identifier,
            relationship=self.relationship,
            dependencies=frozenset(self.dependencies),
            metadata=MappingProxyType(dict(self.metadata)) if self.metadata else None,
        )


class ManifestAggregator:
    """Owner of the in-progress manifest for one build.

    Every merge() is serialized by a lock, so resolution events from
    parallel threads can feed the same aggregator. The final relationship
    and edge set of each identifier do not depend on the order or the
    grouping of merged records.

    Example:
        aggregator = ManifestAggregator(provenance=tracker)
        aggregator.merge(walker.walk(compile_roots))
        aggregator.merge(walker.walk(test_roots))
        manifest = aggregator.finalize()
    """

    def __init__(self, provenance: Optional[RepositoryProvenanceTracker] = None) -> None:
        self._provenance = provenance
        self._entries: Dict[PackageIdentifier, _EntryBuilder] = {}
        self._lock = threading.Lock()
        self._finalized = False

    def merge(self, records: Iterable[WalkRecord]) -> None:
        """Merge walk records into the manifest.

        Raises:
            InternalConsistencyFault: If the manifest was already finalized.
        """
        records = list(records)
        added = 0
        with self._lock:
            if self._finalized:
                raise InternalConsistencyFault("Cannot merge into a manifest that has already been finalized")

            for record in records:
                entry = self._entries.get(record.identifier)
                if entry is None:
                    entry = _EntryBuilder(identifier=record.identifier, relationship=record.relationship)
                    self._entries[record.identifier] = entry
                    added += 1
                else:
                    entry.add_relationship(record.relationship)
                entry.add_dependencies(record.child_identifiers)
                self._refresh_metadata(entry)

        logger.debug(f"Merged {len(records)} records ({added} new packages)")

    def _refresh_metadata(self, entry: _EntryBuilder) -> None:
        if self._provenance is None:
            return
        repository = self._provenance.lookup_repository(entry.identifier.coordinates)
        if repository is not None:
            entry.metadata = {"repository": repository.to_metadata()}

    def finalize(self) -> Manifest:
        """Freeze the manifest and return a read-only snapshot of it.

        Metadata is refreshed one last time so that provenance reported
        after a package was merged is not lost.
        """
        with self._lock:
            self._finalized = True
            for entry in self._entries.values():
                self._refresh_metadata(entry)
            snapshot = {identifier: builder.build() for identifier, builder in self._entries.items()}

        direct = sum(1 for e in snapshot.values() if e.is_direct)
        logger.debug(f"Finalized manifest with {len(snapshot)} packages ({direct} direct)")
        return MappingProxyType(snapshot)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._entries
