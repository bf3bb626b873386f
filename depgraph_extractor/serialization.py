"""
Manifest serialization utilities.

This module renders an aggregated manifest into the dependency manifest
wire format and provides the CycloneDX outputter lookup used by the
CycloneDX renderer.

Wire format: a JSON list of entries sorted by purl,

    [
      {
        "purl": "pkg:maven/org.example/lib@1.0",
        "relationship": "direct",
        "dependencies": ["pkg:maven/org.example/other@2.0"],
        "metadata": {"repository": {"name": "MavenRepo", "url": "..."}}
      }
    ]

"metadata" is present only for entries with known provenance. Output is
byte-identical for manifests with the same entries, whatever order they
were merged in.
"""

import json
from typing import Any, Dict, List, Optional, Type, Union

from cyclonedx.model.bom import Bom
from packageurl import PackageURL

from ._extraction.models import Manifest, ManifestEntry, PackageIdentifier, RelationshipKind
from .exceptions import FileProcessingError, InternalConsistencyFault
from .logging_config import logger

# ============================================================================
# Dependency manifest
# ============================================================================


def _render_identifier(identifier: PackageIdentifier, owner: PackageIdentifier) -> str:
    if not isinstance(identifier, PackageIdentifier):
        raise InternalConsistencyFault(f"Entry {owner} references a non-identifier value: {identifier!r}")
    try:
        PackageURL.from_string(identifier.purl)
    except ValueError as e:
        raise InternalConsistencyFault(f"Entry {owner} holds an unrenderable identifier {identifier.purl!r}: {e}")
    return identifier.purl


def entry_to_dict(key: PackageIdentifier, entry: ManifestEntry) -> Dict[str, Any]:
    """Render one manifest entry, checking its invariants.

    Raises:
        InternalConsistencyFault: If the entry cannot be rendered faithfully.
    """
    if entry.identifier != key:
        raise InternalConsistencyFault(f"Manifest key {key} does not match entry identifier {entry.identifier}")
    if not isinstance(entry.relationship, RelationshipKind):
        raise InternalConsistencyFault(f"Entry {key} has invalid relationship {entry.relationship!r}")
    if key in entry.dependencies:
        raise InternalConsistencyFault(f"Entry {key} depends on itself")

    purl = _render_identifier(entry.identifier, key)
    dependencies = sorted({_render_identifier(d, key) for d in entry.dependencies})

    data: Dict[str, Any] = {
        "purl": purl,
        "relationship": entry.relationship.value,
        "dependencies": dependencies,
    }
    if entry.metadata:
        data["metadata"] = _plain(entry.metadata)
    return data


def _plain(value: Any) -> Any:
    """Convert read-only mappings back to plain JSON-serializable values."""
    if hasattr(value, "items"):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def manifest_to_list(manifest: Manifest) -> List[Dict[str, Any]]:
    """Render a manifest to its list-of-entries form, sorted by purl."""
    return [entry_to_dict(key, manifest[key]) for key in sorted(manifest, key=lambda k: k.purl)]


def serialize_manifest(manifest: Manifest) -> bytes:
    """
    Serialize a manifest to the dependency manifest wire format.

    Args:
        manifest: Finalized manifest

    Returns:
        UTF-8 encoded JSON document, newline terminated

    Raises:
        InternalConsistencyFault: If an entry violates the manifest invariants
    """
    entries = manifest_to_list(manifest)
    logger.debug(f"Serializing dependency manifest with {len(entries)} entries")
    return (json.dumps(entries, indent=2, sort_keys=False, ensure_ascii=False) + "\n").encode("utf-8")


def deserialize_manifest(data: Union[bytes, str]) -> List[Dict[str, Any]]:
    """
    Parse a serialized dependency manifest.

    Raises:
        FileProcessingError: If the document is not a manifest entry list
    """
    try:
        entries = json.loads(data)
    except json.JSONDecodeError as e:
        raise FileProcessingError(f"Dependency manifest is not valid JSON: {e}")

    if not isinstance(entries, list):
        raise FileProcessingError("Dependency manifest must be a JSON list of entries")
    for entry in entries:
        if not isinstance(entry, dict) or "purl" not in entry or "relationship" not in entry:
            raise FileProcessingError(f"Invalid dependency manifest entry: {entry!r}")
        if entry["relationship"] not in ("direct", "indirect"):
            raise FileProcessingError(f"Invalid relationship in manifest entry: {entry['relationship']!r}")
        dependencies = entry.get("dependencies", [])
        if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
            raise FileProcessingError(f"Invalid dependencies in manifest entry: {dependencies!r}")
    return entries


# ============================================================================
# CycloneDX Version Management
# ============================================================================

_CYCLONEDX_OUTPUTTERS: Dict[str, Optional[Type]] = {
    "1.5": None,  # JsonV1Dot5
    "1.6": None,  # JsonV1Dot6
}

DEFAULT_CYCLONEDX_VERSION = "1.6"


def _get_cyclonedx_outputter(spec_version: str) -> Type:
    """
    Get the CycloneDX outputter class for a given spec version.

    Raises:
        ValueError: If version is not supported
    """
    major_minor = ".".join(spec_version.split(".")[:2]) if spec_version else DEFAULT_CYCLONEDX_VERSION

    if major_minor in _CYCLONEDX_OUTPUTTERS and _CYCLONEDX_OUTPUTTERS[major_minor] is None:
        if major_minor == "1.5":
            from cyclonedx.output.json import JsonV1Dot5

            _CYCLONEDX_OUTPUTTERS["1.5"] = JsonV1Dot5
        elif major_minor == "1.6":
            from cyclonedx.output.json import JsonV1Dot6

            _CYCLONEDX_OUTPUTTERS["1.6"] = JsonV1Dot6

    outputter_class = _CYCLONEDX_OUTPUTTERS.get(major_minor)
    if outputter_class is None:
        raise ValueError(
            f"Unsupported CycloneDX version: {spec_version}. "
            f"Supported versions: {', '.join(sorted(_CYCLONEDX_OUTPUTTERS))}"
        )
    return outputter_class


def serialize_cyclonedx_bom(bom: Bom, spec_version: str = DEFAULT_CYCLONEDX_VERSION) -> str:
    """
    Serialize a CycloneDX BOM to a JSON string.

    Raises:
        ValueError: If spec_version is unsupported
    """
    outputter_class = _get_cyclonedx_outputter(spec_version)
    logger.debug(f"Serializing CycloneDX BOM using version {spec_version}")
    return outputter_class(bom).output_as_string(indent=2)


def get_supported_cyclonedx_versions() -> list[str]:
    """Get list of supported CycloneDX versions."""
    return sorted(_CYCLONEDX_OUTPUTTERS.keys())
