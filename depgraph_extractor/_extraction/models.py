"""Data models for dependency graph extraction."""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any, Mapping, Optional


@total_ordering
class RelationshipKind(Enum):
    """Relationship of a package to the configuration that resolved it.

    Totally ordered with DIRECT > INDIRECT: a package reachable through at
    least one direct path is a direct dependency.
    """

    INDIRECT = "indirect"
    DIRECT = "direct"

    @property
    def rank(self) -> int:
        return 1 if self is RelationshipKind.DIRECT else 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RelationshipKind):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def strongest(cls, *kinds: "RelationshipKind") -> "RelationshipKind":
        """Return the strongest of the given relationships (INDIRECT if none given)."""
        return max(kinds, default=cls.INDIRECT)


@dataclass(frozen=True, order=True)
class PackageIdentifier:
    """Canonical, versioned package identifier (a Package URL).

    Equality, ordering and hashing use only the canonical purl string, so
    two identifiers built from the same coordinates are interchangeable.
    Build instances with identifiers.build_identifier() rather than
    directly.
    """

    purl: str
    group: str = field(default="", compare=False)
    name: str = field(default="", compare=False)
    version: str = field(default="", compare=False)

    @property
    def coordinates(self) -> str:
        """Maven-style group:name:version coordinates."""
        return f"{self.group}:{self.name}:{self.version}"

    def __str__(self) -> str:
        return self.purl


@dataclass(eq=False)
class ResolvedNode:
    """A resolved module version as reported by the host resolution engine.

    Nodes compare by identity: the same node object may be shared by
    several parents, by several configurations and, with misbehaving
    producers, may even be reachable from itself.

    Attributes:
        group: Module group / namespace
        name: Module name
        version: Selected version
        children: Resolved dependencies of this module, in declaration order
        repository: Id of the repository the module was fetched from, if known
    """

    group: str
    name: str
    version: str
    children: list["ResolvedNode"] = field(default_factory=list, repr=False)
    repository: Optional[str] = None

    @property
    def module_version(self) -> str:
        """Module-version identity used for repository provenance lookups.

        Matches PackageIdentifier.coordinates: a missing group falls back to
        the module name, as identifiers.build_identifier() does.
        """
        return f"{self.group or self.name}:{self.name}:{self.version}"

    def add_child(self, child: "ResolvedNode") -> "ResolvedNode":
        self.children.append(child)
        return child


@dataclass
class ResolvedConfiguration:
    """One resolved configuration: its owner and its first-level dependencies."""

    project_path: str
    name: str
    roots: list[ResolvedNode] = field(default_factory=list, repr=False)

    @property
    def display_name(self) -> str:
        return f"{self.project_path} - {self.name}"


@dataclass(frozen=True)
class WalkRecord:
    """One distinct package reached while walking a single configuration.

    Attributes:
        identifier: Canonical identifier of the package
        relationship: DIRECT for first-level dependencies, INDIRECT otherwise
        child_identifiers: Identifiers of the package's resolved children,
            in source order, without duplicates or self-edges
    """

    identifier: PackageIdentifier
    relationship: RelationshipKind
    child_identifiers: tuple[PackageIdentifier, ...] = ()


@dataclass(frozen=True)
class ManifestEntry:
    """One package in the aggregated manifest."""

    identifier: PackageIdentifier
    relationship: RelationshipKind
    dependencies: frozenset[PackageIdentifier] = frozenset()
    metadata: Optional[Mapping[str, Any]] = field(default=None, hash=False)

    @property
    def is_direct(self) -> bool:
        return self.relationship is RelationshipKind.DIRECT

    def sorted_dependencies(self) -> list[PackageIdentifier]:
        return sorted(self.dependencies)


# Read-only view produced by ManifestAggregator.finalize()
Manifest = Mapping[PackageIdentifier, ManifestEntry]
