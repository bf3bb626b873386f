"""Canonical package identifier construction.

Identifiers are Package URLs (https://github.com/package-url/purl-spec)
built with packageurl-python, e.g. pkg:maven/org.slf4j/slf4j-api@2.0.9.
Reserved characters are percent-encoded by PackageURL itself; this module
only decides which coordinates are acceptable in the first place.
"""

import unicodedata
from typing import Optional

from packageurl import PackageURL

from ..exceptions import MalformedIdentifierError
from .models import PackageIdentifier, ResolvedNode

DEFAULT_ECOSYSTEM = "maven"

# Maven coordinate separator; group or name containing it make g:n:v ambiguous
_COORDINATE_SEPARATOR = ":"


def _find_unsupported_character(value: str) -> Optional[str]:
    for char in value:
        if char.isspace() or unicodedata.category(char) in ("Cc", "Cf", "Cs"):
            return char
    return None


def _validate_component(label: str, value: Optional[str], coordinates: str, allow_separator: bool) -> str:
    if value is None:
        raise MalformedIdentifierError(f"{label} is missing", coordinates)
    if not isinstance(value, str):
        raise MalformedIdentifierError(f"{label} must be a string, got {type(value).__name__}", coordinates)
    if not value:
        raise MalformedIdentifierError(f"{label} is empty", coordinates)

    bad = _find_unsupported_character(value)
    if bad is not None:
        raise MalformedIdentifierError(f"{label} contains unsupported character {bad!r}", coordinates)
    if not allow_separator and _COORDINATE_SEPARATOR in value:
        raise MalformedIdentifierError(
            f"{label} contains the coordinate separator {_COORDINATE_SEPARATOR!r}", coordinates
        )
    return value


def build_identifier(
    group: Optional[str],
    name: Optional[str],
    version: Optional[str],
    ecosystem: str = DEFAULT_ECOSYSTEM,
) -> PackageIdentifier:
    """Build the canonical identifier for a module version.

    An empty group falls back to the module name, since Maven purls always
    carry a namespace and flat-directory style modules have no group.

    Args:
        group: Module group / namespace (may be empty)
        name: Module name
        version: Resolved version
        ecosystem: Package URL type

    Returns:
        PackageIdentifier for the coordinates.

    Raises:
        MalformedIdentifierError: If a component is missing, empty or
            contains characters the canonical encoding does not support.
    """
    coordinates = f"{group or ''}:{name or ''}:{version or ''}"

    name = _validate_component("name", name, coordinates, allow_separator=False)
    version = _validate_component("version", version, coordinates, allow_separator=True)
    if group is None or group == "":
        group = name
    group = _validate_component("group", group, coordinates, allow_separator=False)

    try:
        purl = PackageURL(type=ecosystem, namespace=group, name=name, version=version)
    except ValueError as e:
        raise MalformedIdentifierError(str(e), coordinates) from e

    return PackageIdentifier(purl=purl.to_string(), group=group, name=name, version=version)


def build_identifier_for_node(node: ResolvedNode, ecosystem: str = DEFAULT_ECOSYSTEM) -> PackageIdentifier:
    """Build the canonical identifier for a resolved node."""
    return build_identifier(node.group, node.name, node.version, ecosystem)


def parse_identifier(purl: str) -> PackageIdentifier:
    """Parse a canonical purl string back into a PackageIdentifier.

    Raises:
        MalformedIdentifierError: If the string is not a valid Package URL
            with a name and a version.
    """
    try:
        parsed = PackageURL.from_string(purl)
    except ValueError as e:
        raise MalformedIdentifierError(str(e), purl) from e

    if not parsed.version:
        raise MalformedIdentifierError("version is empty", purl)

    return PackageIdentifier(
        purl=parsed.to_string(),
        group=parsed.namespace or "",
        name=parsed.name,
        version=parsed.version,
    )
