"""Selects which resolved configurations contribute to the manifest."""

import re
from typing import Optional, Pattern

from ..exceptions import ConfigurationError


def _compile(label: str, pattern: Optional[str]) -> Optional[Pattern[str]]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid {label} filter '{pattern}': {e}")


class ResolvedConfigurationFilter:
    """Regex filter over project paths and configuration names.

    Both patterns must match the whole value. An unset pattern matches
    everything.
    """

    def __init__(self, project_filter: Optional[str] = None, configuration_filter: Optional[str] = None) -> None:
        self.project_filter = _compile("project", project_filter)
        self.configuration_filter = _compile("configuration", configuration_filter)

    def include(self, project_path: str, configuration_name: str) -> bool:
        if self.project_filter is not None and not self.project_filter.fullmatch(project_path):
            return False
        if self.configuration_filter is not None and not self.configuration_filter.fullmatch(configuration_name):
            return False
        return True
