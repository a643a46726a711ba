"""Install-state persistence.

The install state records what the last install actually linked. It is
rewritten after every successful install, focused or not, while the project
manifests are left alone by focused runs.
"""

from __future__ import annotations

import gzip
import json
import logging
import os
import tempfile
from typing import TYPE_CHECKING, Any, Dict, Optional

from constants import Constants

if TYPE_CHECKING:
    from cli_config import Configuration
    from install.base import InstallResult
    from project.project import Project

logger = logging.getLogger(__name__)


class InstallStateStore:
    """Reads and writes the gzip-compressed install state file."""

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def for_project(cls, configuration: "Configuration", project: "Project") -> "InstallStateStore":
        return cls(configuration.resolve_path(project.cwd, configuration.install_state_path))

    def persist(self, project: "Project", result: "InstallResult") -> None:
        """Write the install state for ``project`` after a successful ``result``."""
        document: Dict[str, Any] = {
            "version": Constants.INSTALL_STATE_VERSION,
            "project": project.cwd,
            "workspaces": sorted(w.locator for w in project.workspaces),
            "links": [entry.to_dict() for entry in result.plan],
        }
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".install-state-", dir=directory)
        try:
            with os.fdopen(fd, "wb") as raw, gzip.GzipFile(fileobj=raw, mode="wb") as f:
                f.write(json.dumps(document, sort_keys=True).encode("utf-8"))
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise
        logger.info("Install state written to %s", self.path)

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored install state, or None if missing or unreadable."""
        if not os.path.isfile(self.path):
            return None
        try:
            with gzip.open(self.path, "rt", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, EOFError, json.JSONDecodeError) as e:
            logger.warning("Failed to read install state %s: %s", self.path, e)
            return None
        if not isinstance(data, dict) or data.get("version") != Constants.INSTALL_STATE_VERSION:
            logger.warning("Ignoring install state with unsupported format: %s", self.path)
            return None
        return data
