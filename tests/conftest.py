"""Pytest configuration and shared fixtures for all tests."""

import os

import pytest

from depgraph_extractor._extraction import ResolvedConfiguration, ResolvedNode

_ENV_PREFIXES = ("DEPENDENCY_GRAPH_", "GITHUB_")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Clear extractor and GitHub job variables for every test.

    Tests run inside GitHub Actions themselves, where GITHUB_* variables are
    always set. Tests that need them set them explicitly.
    """
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIXES) or name in ("UPLOAD", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def node():
    """Factory for ResolvedNode objects in the org.example group."""

    def make(name, version="1.0", group="org.example", children=()):
        created = ResolvedNode(group=group, name=name, version=version)
        for child in children:
            created.add_child(child)
        return created

    return make


@pytest.fixture
def snapshot_env(monkeypatch):
    """GitHub job parameters needed by the github-snapshot renderer."""
    monkeypatch.setenv("GITHUB_JOB_CORRELATOR", "build-job")
    monkeypatch.setenv("GITHUB_JOB_ID", "4242")
    monkeypatch.setenv("GITHUB_SHA", "0123456789abcdef0123456789abcdef01234567")
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")


@pytest.fixture
def compile_and_test(node):
    """Two configurations sharing b: compile declares a -> b, test declares b directly.

    Returns (compile configuration, test configuration).
    """
    b = node("b", "2.0")
    a = node("a", "1.0", children=[b])
    compile_configuration = ResolvedConfiguration(":app", "compileClasspath", [a])
    test_configuration = ResolvedConfiguration(":app", "testRuntimeClasspath", [b])
    return compile_configuration, test_configuration
