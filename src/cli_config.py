"""Configuration loading for wsfocus.

Settings come from ``.wsfocusrc.yml`` files found in the working directory
and its parents (nearer files override farther ones), then from environment
variables. Each file is validated against a JSON schema before use.
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from constants import Constants
from errors import ConfigurationError

logger = logging.getLogger(__name__)

RC_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "cacheFolder": {"type": "string", "minLength": 1},
        "installStatePath": {"type": "string", "minLength": 1},
        "installCommand": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
        },
        "enableTransparentWorkspaces": {"type": "boolean"},
    },
}


@dataclass
class Configuration:
    """Resolved settings for a run."""

    cache_folder: str = Constants.DEFAULT_CACHE_FOLDER
    install_state_path: str = Constants.DEFAULT_INSTALL_STATE_PATH
    install_command: Optional[List[str]] = None
    enable_transparent_workspaces: bool = True
    sources: List[str] = field(default_factory=list)

    @classmethod
    def find(cls, cwd: str) -> "Configuration":
        """Build the configuration applying to ``cwd``.

        Raises:
            ConfigurationError: If an rc file is unreadable or fails validation.
        """
        config = cls()
        rc_files = []
        current = os.path.abspath(cwd)
        while True:
            candidate = os.path.join(current, Constants.RC_FILE)
            if os.path.isfile(candidate):
                rc_files.append(candidate)
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

        # Farthest first so nearer files win.
        for path in reversed(rc_files):
            config.apply(load_rc_file(path))
            config.sources.append(path)

        config.apply_env(os.environ)
        return config

    def apply(self, data: Dict[str, Any]) -> None:
        if "cacheFolder" in data:
            self.cache_folder = data["cacheFolder"]
        if "installStatePath" in data:
            self.install_state_path = data["installStatePath"]
        if "installCommand" in data:
            self.install_command = list(data["installCommand"])
        if "enableTransparentWorkspaces" in data:
            self.enable_transparent_workspaces = bool(data["enableTransparentWorkspaces"])

    def apply_env(self, env: Dict[str, str]) -> None:
        """Apply environment overrides (highest precedence)."""
        cache_folder = env.get(Constants.ENV_CACHE_FOLDER)
        if cache_folder and cache_folder.strip():
            self.cache_folder = cache_folder.strip()
        command = env.get(Constants.ENV_INSTALL_COMMAND)
        if command and command.strip():
            try:
                self.install_command = shlex.split(command)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {Constants.ENV_INSTALL_COMMAND}: {e}") from e

    def resolve_path(self, project_cwd: str, value: str) -> str:
        """Resolve a configured path against the project root."""
        if os.path.isabs(value):
            return value
        return os.path.join(project_cwd, value)


def load_rc_file(path: str) -> Dict[str, Any]:
    """Load and validate a single rc file.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config {path}: {e}") from e

    if data is None:
        return {}

    try:
        jsonschema.validate(instance=data, schema=RC_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigurationError(f"Invalid config {path}: {e.message}") from e

    logger.debug("Loaded config from %s", path)
    return data
