"""Configuration loading for depgraph-extractor.

Parameters are read from environment variables, using the names the
GitHub dependency-graph build integration has always used, so that the
extractor can run unchanged inside a GitHub Actions job. CLI flags take
precedence over the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .logging_config import logger

PARAM_INCLUDE_PROJECTS = "DEPENDENCY_GRAPH_INCLUDE_PROJECTS"
PARAM_INCLUDE_CONFIGURATIONS = "DEPENDENCY_GRAPH_INCLUDE_CONFIGURATIONS"
PARAM_REPORT_DIR = "DEPENDENCY_GRAPH_REPORT_DIR"
PARAM_RENDERERS = "DEPENDENCY_GRAPH_RENDERERS"

PARAM_JOB_ID = "GITHUB_JOB_ID"
PARAM_JOB_CORRELATOR = "GITHUB_JOB_CORRELATOR"
PARAM_GITHUB_REF = "GITHUB_REF"
PARAM_GITHUB_SHA = "GITHUB_SHA"
# Workspace the Git repository is checked out in; used to relativize build file paths
PARAM_GITHUB_WORKSPACE = "GITHUB_WORKSPACE"

PARAM_GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
PARAM_GITHUB_TOKEN = "GITHUB_TOKEN"
PARAM_GITHUB_API_URL = "GITHUB_API_URL"

DEFAULT_REPORT_DIR = "build/reports/dependency-graph-snapshots"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_RENDERERS = ("manifest-json",)


def load_optional_parameter(name: str) -> Optional[str]:
    """Return the value of a parameter, or None when it is unset or blank."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value


def load_parameter(name: str, default: Optional[str] = None) -> str:
    """Return the value of a required parameter.

    Raises:
        ConfigurationError: If the parameter is unset and no default is given.
    """
    value = load_optional_parameter(name)
    if value is not None:
        return value
    if default is not None:
        return default
    raise ConfigurationError(f"The configuration parameter '{name}' must be set as an environment variable.")


def evaluate_boolean(value: str) -> bool:
    """Evaluate string boolean values."""
    return value.lower() in ["true", "yes", "yeah", "1"]


def parse_renderer_names(value: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated renderer list, dropping blanks and duplicates."""
    if not value:
        return DEFAULT_RENDERERS
    names: list[str] = []
    for name in value.split(","):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names) or DEFAULT_RENDERERS


@dataclass
class GitHubSnapshotParams:
    """Job identity for a GitHub dependency-submission snapshot."""

    job_correlator: str
    job_id: str
    sha: str
    ref: str

    @classmethod
    def from_env(cls) -> "GitHubSnapshotParams":
        """Load snapshot parameters.

        Raises:
            ConfigurationError: If any of the GITHUB_* job parameters is missing.
        """
        return cls(
            job_correlator=load_parameter(PARAM_JOB_CORRELATOR),
            job_id=load_parameter(PARAM_JOB_ID),
            sha=load_parameter(PARAM_GITHUB_SHA),
            ref=load_parameter(PARAM_GITHUB_REF),
        )


@dataclass
class ExtractorConfig:
    """Configuration settings for one extraction run."""

    include_projects: Optional[str] = None
    include_configurations: Optional[str] = None
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_REPORT_DIR))
    renderers: tuple[str, ...] = DEFAULT_RENDERERS
    workspace: Optional[Path] = None
    manifest_file: Optional[Path] = None
    upload: bool = False
    github_repository: Optional[str] = None
    github_token: Optional[str] = None
    github_api_url: str = DEFAULT_GITHUB_API_URL

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.renderers:
            raise ConfigurationError("At least one renderer must be configured")

        if self.upload:
            if "github-snapshot" not in self.renderers:
                raise ConfigurationError("Uploading requires the github-snapshot renderer")
            if not self.github_repository:
                raise ConfigurationError(f"{PARAM_GITHUB_REPOSITORY} must be set to upload a snapshot")
            if not self.github_token:
                raise ConfigurationError(f"{PARAM_GITHUB_TOKEN} must be set to upload a snapshot")

        if not self.github_api_url.startswith(("http://", "https://")):
            raise ConfigurationError("GitHub API URL must start with http:// or https://")
        self.github_api_url = self.github_api_url.rstrip("/")


def load_config(**overrides) -> ExtractorConfig:
    """
    Load and validate configuration from environment variables.

    Keyword arguments that are not None override the environment, which is
    how CLI flags take precedence.

    Returns:
        Validated configuration object

    Raises:
        ConfigurationError: If configuration is invalid
    """
    workspace = load_optional_parameter(PARAM_GITHUB_WORKSPACE)
    values = {
        "include_projects": load_optional_parameter(PARAM_INCLUDE_PROJECTS),
        "include_configurations": load_optional_parameter(PARAM_INCLUDE_CONFIGURATIONS),
        "output_dir": Path(load_parameter(PARAM_REPORT_DIR, DEFAULT_REPORT_DIR)),
        "renderers": parse_renderer_names(load_optional_parameter(PARAM_RENDERERS)),
        "workspace": Path(workspace) if workspace else None,
        "github_repository": load_optional_parameter(PARAM_GITHUB_REPOSITORY),
        "github_token": load_optional_parameter(PARAM_GITHUB_TOKEN),
        "github_api_url": load_parameter(PARAM_GITHUB_API_URL, DEFAULT_GITHUB_API_URL),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    config = ExtractorConfig(**values)
    config.validate()

    if config.include_projects or config.include_configurations:
        logger.info(
            f"Filtering configurations: projects={config.include_projects or '*'}, "
            f"configurations={config.include_configurations or '*'}"
        )
    return config
