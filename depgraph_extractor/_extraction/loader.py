"""Loader for resolution dumps.

A resolution dump records what the host build resolved, so extraction can
be replayed outside the build:

    {
      "repositories": {"maven": "https://repo.maven.apache.org/maven2/"},
      "components": {
        "org.example:app-lib:1.0": {
          "group": "org.example", "name": "app-lib", "version": "1.0",
          "repository": "maven",
          "dependencies": ["org.slf4j:slf4j-api:2.0.9"]
        },
        ...
      },
      "configurations": [
        {"project": ":app", "name": "runtimeClasspath", "dependencies": ["org.example:app-lib:1.0"]}
      ]
    }

Components are shared between every configuration and every parent that
references them, exactly like nodes of the host's resolution result.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import FileProcessingError
from ..logging_config import logger
from .models import ResolvedConfiguration, ResolvedNode


@dataclass
class ResolutionDump:
    """Everything the host reported during one build."""

    configurations: List[ResolvedConfiguration] = field(default_factory=list)
    repositories: Dict[str, str] = field(default_factory=dict)
    components: Dict[str, ResolvedNode] = field(default_factory=dict)
    manifest_file: Optional[str] = None

    def repository_selections(self) -> List[tuple[str, str, Optional[str]]]:
        """(module version, repository id, repository url) for every component with a known repository."""
        selections = []
        for node in self.components.values():
            if node.repository:
                selections.append((node.module_version, node.repository, self.repositories.get(node.repository)))
        return selections


def _require_mapping(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise FileProcessingError(f"{what} must be a JSON object")
    return value


def _require_list(value: Any, what: str) -> List[Any]:
    if not isinstance(value, list):
        raise FileProcessingError(f"{what} must be a JSON list")
    return value


def parse_resolution_dump(data: Dict[str, Any]) -> ResolutionDump:
    """Build shared ResolvedNode graphs from a parsed dump document.

    Raises:
        FileProcessingError: If the document is structurally invalid or
            references an unknown component.
    """
    data = _require_mapping(data, "Resolution dump")
    repositories = _require_mapping(data.get("repositories", {}), "'repositories'")
    raw_components = _require_mapping(data.get("components", {}), "'components'")

    components: Dict[str, ResolvedNode] = {}
    for component_id, raw in raw_components.items():
        raw = _require_mapping(raw, f"Component '{component_id}'")
        # Coordinates are validated later by the identifier builder
        components[component_id] = ResolvedNode(
            group=raw.get("group") or "",
            name=raw.get("name"),
            version=raw.get("version"),
            repository=raw.get("repository"),
        )

    def resolve(component_id: Any, referrer: str) -> ResolvedNode:
        node = components.get(component_id) if isinstance(component_id, str) else None
        if node is None:
            raise FileProcessingError(f"{referrer} references unknown component '{component_id}'")
        return node

    # Second pass so that forward references and cycles link to the same node objects
    for component_id, raw in raw_components.items():
        node = components[component_id]
        for dependency_id in _require_list(raw.get("dependencies", []), f"Dependencies of '{component_id}'"):
            node.add_child(resolve(dependency_id, f"Component '{component_id}'"))

    configurations: List[ResolvedConfiguration] = []
    for index, raw in enumerate(_require_list(data.get("configurations", []), "'configurations'")):
        raw = _require_mapping(raw, f"Configuration #{index}")
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise FileProcessingError(f"Configuration #{index} has no name")
        project = raw.get("project", ":")
        roots = [
            resolve(dependency_id, f"Configuration '{project} - {name}'")
            for dependency_id in _require_list(raw.get("dependencies", []), f"Dependencies of '{name}'")
        ]
        configurations.append(ResolvedConfiguration(project_path=project, name=name, roots=roots))

    logger.debug(f"Loaded {len(components)} components and {len(configurations)} configurations")
    return ResolutionDump(
        configurations=configurations,
        repositories={str(k): str(v) for k, v in repositories.items()},
        components=components,
        manifest_file=data.get("manifest_file"),
    )


def load_resolution_dump(path: Union[str, Path]) -> ResolutionDump:
    """Read and parse a resolution dump file.

    Raises:
        FileProcessingError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileProcessingError(f"Resolution dump not found: {path}")
    except json.JSONDecodeError as e:
        raise FileProcessingError(f"Resolution dump {path} is not valid JSON: {e}")
    except OSError as e:
        raise FileProcessingError(f"Failed to read resolution dump {path}: {e}")

    return parse_resolution_dump(data)
