"""Tests for the dependency manifest wire format."""

import json
import random
from types import MappingProxyType

import pytest

from depgraph_extractor._extraction import (
    ManifestAggregator,
    ManifestEntry,
    PackageIdentifier,
    RelationshipKind,
    RepositoryProvenanceTracker,
    WalkRecord,
    build_identifier,
)
from depgraph_extractor.exceptions import FileProcessingError, InternalConsistencyFault
from depgraph_extractor.serialization import (
    deserialize_manifest,
    entry_to_dict,
    get_supported_cyclonedx_versions,
    manifest_to_list,
    serialize_manifest,
)

DIRECT = RelationshipKind.DIRECT
INDIRECT = RelationshipKind.INDIRECT


def purl(name, version="1.0"):
    return build_identifier("org.example", name, version)


def manifest_of(*entries):
    return MappingProxyType({entry.identifier: entry for entry in entries})


class TestSerializeManifest:
    """Tests for serialize_manifest."""

    def test_empty_manifest(self):
        """Test that an empty manifest is an empty list."""
        assert serialize_manifest(manifest_of()) == b"[]\n"

    def test_entry_format(self):
        """Test the shape of one serialized entry."""
        manifest = manifest_of(
            ManifestEntry(purl("a"), DIRECT, frozenset({purl("c"), purl("b")})),
            ManifestEntry(purl("b"), INDIRECT),
            ManifestEntry(purl("c"), INDIRECT),
        )

        entries = json.loads(serialize_manifest(manifest))

        assert entries[0] == {
            "purl": "pkg:maven/org.example/a@1.0",
            "relationship": "direct",
            "dependencies": ["pkg:maven/org.example/b@1.0", "pkg:maven/org.example/c@1.0"],
        }
        assert [e["purl"] for e in entries] == sorted(e["purl"] for e in entries)

    def test_metadata_only_when_known(self):
        """Test that metadata appears only for entries with provenance."""
        manifest = manifest_of(
            ManifestEntry(purl("a"), DIRECT, metadata=MappingProxyType({"repository": {"name": "MavenRepo"}})),
            ManifestEntry(purl("b"), INDIRECT),
        )

        entries = json.loads(serialize_manifest(manifest))

        assert entries[0]["metadata"] == {"repository": {"name": "MavenRepo"}}
        assert "metadata" not in entries[1]

    def test_utf8_and_newline(self):
        """Test that output is UTF-8 without ASCII escaping and newline terminated."""
        manifest = manifest_of(ManifestEntry(purl("a"), DIRECT, metadata={"repository": {"name": "dépôt"}}))

        data = serialize_manifest(manifest)

        assert data.endswith(b"\n")
        assert "dépôt".encode("utf-8") in data

    def test_byte_identical_regardless_of_merge_order(self):
        """Test that the same entries merged in different orders serialize identically."""
        records = [
            WalkRecord(purl("a"), DIRECT, (purl("b"), purl("c"))),
            WalkRecord(purl("b"), INDIRECT, (purl("d"),)),
            WalkRecord(purl("c"), INDIRECT, (purl("d"),)),
            WalkRecord(purl("d"), INDIRECT),
            WalkRecord(purl("c"), DIRECT),
        ]
        tracker = RepositoryProvenanceTracker()
        tracker.record("org.example:d:1.0", "MavenRepo", "https://repo.example.com/")

        outputs = set()
        for seed in range(5):
            shuffled = list(records)
            random.Random(seed).shuffle(shuffled)
            aggregator = ManifestAggregator(tracker)
            for single in shuffled:
                aggregator.merge([single])
            outputs.add(serialize_manifest(aggregator.finalize()))

        assert len(outputs) == 1

    def test_manifest_to_list_sorted(self):
        manifest = manifest_of(ManifestEntry(purl("z"), DIRECT), ManifestEntry(purl("a"), DIRECT))
        assert [e["purl"] for e in manifest_to_list(manifest)] == [purl("a").purl, purl("z").purl]


class TestConsistencyFaults:
    """Tests for entries that violate manifest invariants."""

    def test_self_edge(self):
        """Test that a self-referencing entry is refused."""
        entry = ManifestEntry(purl("a"), DIRECT, frozenset({purl("a")}))
        with pytest.raises(InternalConsistencyFault, match="depends on itself"):
            serialize_manifest(manifest_of(entry))

    def test_key_mismatch(self):
        """Test that an entry stored under another identifier is refused."""
        with pytest.raises(InternalConsistencyFault):
            entry_to_dict(purl("b"), ManifestEntry(purl("a"), DIRECT))

    def test_invalid_relationship(self):
        with pytest.raises(InternalConsistencyFault):
            entry_to_dict(purl("a"), ManifestEntry(purl("a"), "direct"))

    def test_unrenderable_identifier(self):
        """Test that an identifier that is not a valid purl is refused."""
        broken = PackageIdentifier(purl="not-a-purl")
        entry = ManifestEntry(purl("a"), DIRECT, frozenset({broken}))
        with pytest.raises(InternalConsistencyFault, match="unrenderable"):
            serialize_manifest(manifest_of(entry))


class TestDeserializeManifest:
    """Tests for deserialize_manifest."""

    def test_reads_serialized_output(self):
        manifest = manifest_of(
            ManifestEntry(purl("a"), DIRECT, frozenset({purl("b")})),
            ManifestEntry(purl("b"), INDIRECT),
        )

        entries = deserialize_manifest(serialize_manifest(manifest))

        assert [e["relationship"] for e in entries] == ["direct", "indirect"]

    @pytest.mark.parametrize(
        "data",
        [
            "not json",
            "{}",
            "[1]",
            '[{"purl": "pkg:maven/a/a@1"}]',
            '[{"purl": "pkg:maven/a/a@1", "relationship": "transitive"}]',
            '[{"purl": "pkg:maven/a/a@1", "relationship": "direct", "dependencies": "pkg:maven/b/b@1"}]',
            '[{"purl": "pkg:maven/a/a@1", "relationship": "direct", "dependencies": [1]}]',
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(FileProcessingError):
            deserialize_manifest(data)


class TestCycloneDxVersions:
    def test_supported_versions(self):
        assert get_supported_cyclonedx_versions() == ["1.5", "1.6"]
