"""Depth-first walk of one configuration's resolved dependency tree."""

from typing import Callable, Iterable, Sequence

from ..logging_config import logger
from .classifier import classify
from .identifiers import DEFAULT_ECOSYSTEM, build_identifier_for_node
from .models import PackageIdentifier, ResolvedNode, WalkRecord


class DependencyGraphWalker:
    """Flattens a resolved dependency tree into one WalkRecord per distinct package.

    Each call to walk() owns its own visited set, so a single walker can be
    shared by threads resolving different configurations. Sub-trees shared
    between branches are entered once; a node that is reachable from
    itself stops at its second visit, so producers that break the no-cycle
    guarantee cannot make the walk loop.

    Example:
        walker = DependencyGraphWalker()
        records = walker.walk(configuration.roots)
    """

    def __init__(self, ecosystem: str = DEFAULT_ECOSYSTEM) -> None:
        self.ecosystem = ecosystem

    def walk(self, configuration_roots: Sequence[ResolvedNode]) -> list[WalkRecord]:
        """Walk the tree below the given first-level nodes.

        Args:
            configuration_roots: First-level dependencies of the configuration

        Returns:
            Records in first-visit (pre-order) order.

        Raises:
            MalformedIdentifierError: If any reached node, or any child of a
                reached node, has unusable coordinates.
        """
        identifiers: dict[ResolvedNode, PackageIdentifier] = {}

        def identify(node: ResolvedNode) -> PackageIdentifier:
            identifier = identifiers.get(node)
            if identifier is None:
                identifier = build_identifier_for_node(node, self.ecosystem)
                identifiers[node] = identifier
            return identifier

        root_identifiers = {identify(root) for root in configuration_roots}

        records: list[WalkRecord] = []
        visited: set[PackageIdentifier] = set()
        stack: list[ResolvedNode] = list(reversed(configuration_roots))

        while stack:
            node = stack.pop()
            identifier = identify(node)
            if identifier in visited:
                continue
            visited.add(identifier)

            records.append(
                WalkRecord(
                    identifier=identifier,
                    relationship=classify(node, identifier in root_identifiers),
                    child_identifiers=self._child_identifiers(identifier, node.children, identify),
                )
            )

            # Reversed so that children are entered in source order
            for child in reversed(node.children):
                if identify(child) not in visited:
                    stack.append(child)

        logger.debug(f"Walked {len(records)} distinct packages from {len(root_identifiers)} first-level dependencies")
        return records

    @staticmethod
    def _child_identifiers(
        parent: PackageIdentifier,
        children: Iterable[ResolvedNode],
        identify: Callable[[ResolvedNode], PackageIdentifier],
    ) -> tuple[PackageIdentifier, ...]:
        result: list[PackageIdentifier] = []
        seen: set[PackageIdentifier] = set()
        for child in children:
            child_identifier = identify(child)
            # No self-edges, no duplicate edges
            if child_identifier == parent or child_identifier in seen:
                continue
            seen.add(child_identifier)
            result.append(child_identifier)
        return tuple(result)


def walk(configuration_roots: Sequence[ResolvedNode], ecosystem: str = DEFAULT_ECOSYSTEM) -> list[WalkRecord]:
    """Walk one configuration's resolved tree with a fresh walker."""
    return DependencyGraphWalker(ecosystem).walk(configuration_roots)
