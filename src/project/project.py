"""Project model: the ordered workspace list and its lookup indexes."""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import UnknownWorkspace
from project.models import Descriptor, Ident, Workspace

if TYPE_CHECKING:
    from cli_config import Configuration

logger = logging.getLogger(__name__)


class Project:
    """All workspaces of a multi-package project.

    ``workspaces`` is the sole owner of the workspace records;
    ``workspaces_by_cwd`` and ``workspaces_by_ident`` are lookup views over
    the same objects and are only ever updated together with the list.
    """

    def __init__(self, cwd: str, enable_transparent_workspaces: bool = True):
        self.cwd = cwd
        self.enable_transparent_workspaces = enable_transparent_workspaces
        self.workspaces: List[Workspace] = []
        self.workspaces_by_cwd: Dict[str, Workspace] = {}
        self.workspaces_by_ident: Dict[str, Workspace] = {}
        self.top_level_workspace: Optional[Workspace] = None

    @classmethod
    def find(cls, configuration: "Configuration", cwd: str) -> Tuple["Project", Optional[Workspace]]:
        """Load the project containing ``cwd`` and the workspace active there."""
        from project.loader import find_project  # pylint: disable=import-outside-toplevel
        return find_project(configuration, cwd)

    def add_workspace(self, workspace: Workspace) -> None:
        """Register a freshly loaded workspace in the list and both indexes."""
        self.workspaces.append(workspace)
        self.workspaces_by_cwd[workspace.cwd] = workspace
        self.workspaces_by_ident[workspace.ident.ident_hash] = workspace
        if self.top_level_workspace is None:
            self.top_level_workspace = workspace

    def remove_workspace(self, workspace: Workspace) -> None:
        """Drop ``workspace`` from the ordered list and both indexes at once.

        Raises:
            ValueError: If ``workspace`` is the root workspace.
        """
        if workspace is self.top_level_workspace:
            raise ValueError("The root workspace cannot be removed from the project")
        self.workspaces_by_cwd.pop(workspace.cwd, None)
        self.workspaces_by_ident.pop(workspace.ident.ident_hash, None)
        if workspace in self.workspaces:
            self.workspaces.remove(workspace)

    def try_workspace_by_ident(self, ident: Ident) -> Optional[Workspace]:
        return self.workspaces_by_ident.get(ident.ident_hash)

    def get_workspace_by_ident(self, ident: Ident) -> Workspace:
        workspace = self.try_workspace_by_ident(ident)
        if workspace is None:
            raise UnknownWorkspace(str(ident))
        return workspace

    def try_workspace_by_cwd(self, cwd: str) -> Optional[Workspace]:
        return self.workspaces_by_cwd.get(os.path.abspath(cwd))

    def try_workspace_by_descriptor(self, descriptor: Descriptor) -> Optional[Workspace]:
        """Resolve ``descriptor`` to a workspace of this project.

        Returns None when the dependency is an external package, either
        because no workspace has that name or because the workspace does not
        satisfy the requested range.
        """
        workspace = self.try_workspace_by_ident(descriptor.ident)
        if workspace is None:
            return None
        if not workspace.accepts(descriptor.range):
            if is_debug_enabled(logger):
                logger.debug(
                    "Descriptor not satisfied by workspace",
                    extra=extra_context(
                        event="decision",
                        component="project",
                        action="try_workspace_by_descriptor",
                        descriptor=str(descriptor),
                        workspace=workspace.locator,
                    ),
                )
            return None
        return workspace

    def persist(self) -> None:
        """Write every workspace manifest back to its package.json."""
        for workspace in self.workspaces:
            path = os.path.join(workspace.cwd, Constants.PACKAGE_JSON_FILE)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(workspace.manifest.export(), f, indent=2)
                f.write("\n")
        logger.info("Persisted %d workspace manifests", len(self.workspaces))
