"""Tests for the renderer registry and built-in renderers."""

import json
from pathlib import Path
from types import MappingProxyType

import pytest

from depgraph_extractor import __version__
from depgraph_extractor._extraction import ManifestEntry, RelationshipKind, build_identifier
from depgraph_extractor._rendering import (
    CycloneDxRenderer,
    DependencyListRenderer,
    GitHubSnapshotRenderer,
    ManifestJsonRenderer,
    RenderContext,
    RendererRegistry,
    create_default_registry,
)
from depgraph_extractor._rendering.renderers.cyclonedx import PROPERTY_RELATIONSHIP, PROPERTY_REPOSITORY
from depgraph_extractor.config import GitHubSnapshotParams
from depgraph_extractor.exceptions import ConfigurationError, InternalConsistencyFault

DIRECT = RelationshipKind.DIRECT
INDIRECT = RelationshipKind.INDIRECT

SCANNED = "2024-12-19T14:30:00Z"


def purl(name, version="1.0", group="org.example"):
    return build_identifier(group, name, version)


@pytest.fixture
def manifest():
    """a (direct, from MavenRepo) -> b (indirect)."""
    return MappingProxyType(
        {
            purl("a"): ManifestEntry(
                purl("a"),
                DIRECT,
                frozenset({purl("b", "2.0")}),
                MappingProxyType({"repository": {"name": "MavenRepo", "url": "https://repo.maven.apache.org/maven2"}}),
            ),
            purl("b", "2.0"): ManifestEntry(purl("b", "2.0"), INDIRECT),
        }
    )


@pytest.fixture
def params():
    return GitHubSnapshotParams(job_correlator="build-job", job_id="4242", sha="abc123", ref="refs/heads/main")


class FailingRenderer:
    name = "failing"

    def render(self, manifest, context):
        raise InternalConsistencyFault("cannot render")


class TestRendererRegistry:
    """Tests for RendererRegistry."""

    def test_default_registry(self):
        """Test that all built-in renderers are registered."""
        registry = create_default_registry()
        assert registry.registered_renderers == ["cyclonedx", "dependency-list", "github-snapshot", "manifest-json"]

    def test_unknown_renderer(self):
        """Test that an unknown name is a configuration error listing the available ones."""
        registry = create_default_registry()
        with pytest.raises(ConfigurationError, match="manifest-json"):
            registry.get("spdx")

    def test_register_replaces(self):
        registry = RendererRegistry()
        first = ManifestJsonRenderer()
        second = ManifestJsonRenderer()
        registry.register(first)
        registry.register(second)

        assert registry.get("manifest-json") is second

    def test_render_writes_files(self, manifest, tmp_path):
        """Test that render writes every output and reports the paths."""
        registry = create_default_registry()
        output_dir = tmp_path / "reports" / "nested"

        written = registry.render(manifest, RenderContext(output_dir=output_dir), ["manifest-json", "dependency-list"])

        assert written == {
            "manifest-json": [output_dir / "dependency-manifest.json"],
            "dependency-list": [output_dir / "dependency-list.txt"],
        }
        assert (output_dir / "dependency-manifest.json").exists()

    def test_failing_renderer_writes_nothing(self, manifest, tmp_path):
        """Test that no file is written when any selected renderer fails."""
        registry = create_default_registry()
        registry.register(FailingRenderer())

        with pytest.raises(InternalConsistencyFault):
            registry.render(manifest, RenderContext(output_dir=tmp_path / "out"), ["manifest-json", "failing"])

        assert not (tmp_path / "out").exists()

    def test_unknown_renderer_writes_nothing(self, manifest, tmp_path):
        registry = create_default_registry()

        with pytest.raises(ConfigurationError):
            registry.render(manifest, RenderContext(output_dir=tmp_path / "out"), ["manifest-json", "spdx"])

        assert not (tmp_path / "out").exists()


class TestManifestJsonRenderer:
    def test_render(self, manifest, tmp_path):
        outputs = ManifestJsonRenderer().render(manifest, RenderContext(output_dir=tmp_path))

        entries = json.loads(outputs["dependency-manifest.json"])
        assert [e["purl"] for e in entries] == ["pkg:maven/org.example/a@1.0", "pkg:maven/org.example/b@2.0"]
        assert entries[0]["metadata"]["repository"]["name"] == "MavenRepo"


class TestDependencyListRenderer:
    def test_render(self, manifest, tmp_path):
        outputs = DependencyListRenderer().render(manifest, RenderContext(output_dir=tmp_path))
        assert outputs == {"dependency-list.txt": b"org.example:a:1.0\norg.example:b:2.0\n"}

    def test_empty(self, tmp_path):
        outputs = DependencyListRenderer().render(MappingProxyType({}), RenderContext(output_dir=tmp_path))
        assert outputs == {"dependency-list.txt": b""}


class TestGitHubSnapshotRenderer:
    """Tests for the GitHub dependency submission snapshot."""

    def test_snapshot(self, manifest, params, tmp_path):
        """Test the full snapshot document."""
        context = RenderContext(
            output_dir=tmp_path,
            workspace=Path("/work/repo"),
            manifest_file=Path("/work/repo/app/build.gradle"),
            snapshot_params=params,
            scanned=SCANNED,
        )

        snapshot = GitHubSnapshotRenderer().build_snapshot(manifest, context)

        assert snapshot == {
            "version": 0,
            "job": {"id": "4242", "correlator": "build-job"},
            "sha": "abc123",
            "ref": "refs/heads/main",
            "detector": {
                "name": "depgraph-extractor",
                "version": __version__,
                "url": "https://pypi.org/project/depgraph-extractor/",
            },
            "manifests": {
                "build-job": {
                    "name": "build-job",
                    "file": {"source_location": "app/build.gradle"},
                    "resolved": {
                        "org.example:a:1.0": {
                            "package_url": "pkg:maven/org.example/a@1.0",
                            "relationship": "direct",
                            "dependencies": ["pkg:maven/org.example/b@2.0"],
                        },
                        "org.example:b:2.0": {
                            "package_url": "pkg:maven/org.example/b@2.0",
                            "relationship": "indirect",
                            "dependencies": [],
                        },
                    },
                }
            },
            "scanned": SCANNED,
        }

    def test_file_named_after_correlator(self, manifest, params, tmp_path):
        outputs = GitHubSnapshotRenderer().render(manifest, RenderContext(output_dir=tmp_path, snapshot_params=params))

        assert list(outputs) == ["build-job.json"]
        snapshot = json.loads(outputs["build-job.json"])
        assert snapshot["scanned"].endswith("Z")
        assert "file" not in snapshot["manifests"]["build-job"]

    def test_params_from_environment(self, manifest, snapshot_env, tmp_path):
        """Test that job parameters fall back to GITHUB_* variables."""
        snapshot = GitHubSnapshotRenderer().build_snapshot(manifest, RenderContext(output_dir=tmp_path))

        assert snapshot["job"] == {"id": "4242", "correlator": "build-job"}
        assert snapshot["ref"] == "refs/heads/main"

    def test_missing_params(self, manifest, tmp_path):
        """Test that missing job parameters are a configuration error."""
        with pytest.raises(ConfigurationError, match="GITHUB_JOB_CORRELATOR"):
            GitHubSnapshotRenderer().build_snapshot(manifest, RenderContext(output_dir=tmp_path))

    def test_manifest_file_outside_workspace(self, tmp_path):
        context = RenderContext(output_dir=tmp_path, workspace=Path("/work"), manifest_file=Path("/elsewhere/pom.xml"))
        assert context.relative_manifest_file() == "/elsewhere/pom.xml"


class TestCycloneDxRenderer:
    """Tests for the CycloneDX BOM renderer."""

    def test_bom(self, manifest, tmp_path):
        """Test components, properties and the dependency graph."""
        outputs = CycloneDxRenderer().render(manifest, RenderContext(output_dir=tmp_path))

        bom = json.loads(outputs["bom.cdx.json"])
        assert bom["specVersion"] == "1.6"

        components = {c["purl"]: c for c in bom["components"]}
        a = components["pkg:maven/org.example/a@1.0"]
        assert a["name"] == "a"
        assert a["group"] == "org.example"
        assert a["version"] == "1.0"
        properties = {p["name"]: p["value"] for p in a["properties"]}
        assert properties == {PROPERTY_RELATIONSHIP: "direct", PROPERTY_REPOSITORY: "MavenRepo"}

        b_properties = {p["name"]: p["value"] for p in components["pkg:maven/org.example/b@2.0"]["properties"]}
        assert b_properties == {PROPERTY_RELATIONSHIP: "indirect"}

        dependencies = {d["ref"]: d.get("dependsOn", []) for d in bom["dependencies"]}
        assert dependencies["pkg:maven/org.example/a@1.0"] == ["pkg:maven/org.example/b@2.0"]
        assert dependencies["pkg:maven/org.example/b@2.0"] == []

    def test_spec_version_1_5(self, manifest, tmp_path):
        outputs = CycloneDxRenderer(spec_version="1.5").render(manifest, RenderContext(output_dir=tmp_path))
        assert json.loads(outputs["bom.cdx.json"])["specVersion"] == "1.5"

    def test_unsupported_spec_version(self, manifest, tmp_path):
        with pytest.raises(ValueError, match="Unsupported CycloneDX version"):
            CycloneDxRenderer(spec_version="1.2").render(manifest, RenderContext(output_dir=tmp_path))
