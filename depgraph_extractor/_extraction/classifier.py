"""Direct / indirect classification of resolved nodes."""

from .models import RelationshipKind, ResolvedNode


def classify(node: ResolvedNode, is_root_of_configuration: bool) -> RelationshipKind:
    """Classify a node relative to the configuration being walked.

    A node is direct only when the configuration itself declares it. Nodes
    reached through another node's children are indirect. Escalation
    across configurations is the aggregator's job, not this function's.
    """
    if is_root_of_configuration:
        return RelationshipKind.DIRECT
    return RelationshipKind.INDIRECT
