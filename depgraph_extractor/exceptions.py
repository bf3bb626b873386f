"""Custom exceptions for depgraph-extractor."""

from typing import Iterable, Optional


class DepgraphError(Exception):
    """Base exception for all depgraph-extractor operations."""


class ConfigurationError(DepgraphError):
    """Raised when configuration validation fails."""


class FileProcessingError(DepgraphError):
    """Raised when file operations fail."""


class MalformedIdentifierError(DepgraphError):
    """Raised when coordinates cannot be turned into a canonical package identifier.

    Build-fatal: bad coordinates never become valid by retrying, so no
    manifest entry is produced for them.
    """

    def __init__(self, reason: str, coordinates: Optional[str] = None) -> None:
        self.reason = reason
        self.coordinates = coordinates
        if coordinates is not None:
            super().__init__(f"Malformed package identifier '{coordinates}': {reason}")
        else:
            super().__init__(f"Malformed package identifier: {reason}")


# Short alias
MalformedIdentifier = MalformedIdentifierError


class InternalConsistencyFault(DepgraphError):
    """Raised when manifest state violates an invariant established at construction time."""


class ExtractionError(DepgraphError):
    """Raised at the end of a build when dependency extraction failed.

    Carries every failure recorded while handling resolution events.
    """

    def __init__(self, message: str, causes: Iterable[BaseException] = ()) -> None:
        self.causes = list(causes)
        if self.causes:
            details = "; ".join(f"{type(c).__name__}: {c}" for c in self.causes)
            message = f"{message} ({details})"
        super().__init__(message)
