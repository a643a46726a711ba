"""Project loader: discovers the root package.json and its workspaces on disk."""

from __future__ import annotations

import glob
import json
import logging
import os
from collections import deque
from typing import TYPE_CHECKING, List, Optional, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from errors import DuplicateWorkspace, ManifestError, ProjectNotFound
from project.models import Manifest, Workspace
from project.project import Project

if TYPE_CHECKING:
    from cli_config import Configuration

logger = logging.getLogger(__name__)


def read_manifest(dir_path: str) -> Manifest:
    """Read and parse ``<dir_path>/package.json``.

    Raises:
        ManifestError: If the file cannot be read or is not a valid manifest.
    """
    path = os.path.join(dir_path, Constants.PACKAGE_JSON_FILE)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Manifest.from_dict(data)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        raise ManifestError(path, str(e)) from e


def _ancestors(start: str) -> List[str]:
    """Return ``start`` and each of its parents, nearest first."""
    result = []
    current = os.path.abspath(start)
    while True:
        result.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            return result
        current = parent


def _has_manifest(dir_path: str) -> bool:
    return os.path.isfile(os.path.join(dir_path, Constants.PACKAGE_JSON_FILE))


def find_root(cwd: str) -> str:
    """Locate the project root for ``cwd``.

    The top-most package.json declaring workspaces wins; otherwise the nearest
    package.json is used.

    Raises:
        ProjectNotFound: If no package.json exists in ``cwd`` or above.
    """
    nearest: Optional[str] = None
    root: Optional[str] = None
    for candidate in _ancestors(cwd):
        if not _has_manifest(candidate):
            continue
        if nearest is None:
            nearest = candidate
        try:
            with open(os.path.join(candidate, Constants.PACKAGE_JSON_FILE), "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable manifest in %s: %s", candidate, e)
            continue
        if isinstance(data, dict) and data.get("workspaces"):
            root = candidate

    if root is not None:
        return root
    if nearest is not None:
        return nearest
    raise ProjectNotFound(os.path.abspath(cwd))


def _relative_cwd(root: str, cwd: str) -> str:
    rel = os.path.relpath(cwd, root)
    return rel.replace(os.sep, "/")


def _glob_dirs(base: str, pattern: str) -> List[str]:
    matches = glob.glob(os.path.join(base, pattern), recursive=True)
    return sorted(os.path.abspath(match) for match in matches)


def _expand_definitions(workspace: Workspace) -> List[str]:
    """Expand a workspace's glob patterns into candidate directories.

    ``**`` matches any depth; patterns starting with ``!`` exclude what they
    match from the other patterns.
    """
    definitions = workspace.manifest.workspace_definitions
    excluded = set()
    for pattern in definitions:
        if pattern.startswith("!"):
            excluded.update(_glob_dirs(workspace.cwd, pattern[1:]))

    found = []
    for pattern in definitions:
        if pattern.startswith("!"):
            continue
        for path in _glob_dirs(workspace.cwd, pattern):
            if path in excluded or path in found or path == workspace.cwd:
                continue
            if not os.path.isdir(path):
                continue
            if Constants.NODE_MODULES in path.split(os.sep):
                continue
            if not _has_manifest(path):
                continue
            found.append(path)
    return found


def load_project(root: str, enable_transparent_workspaces: bool = True) -> Project:
    """Load the project rooted at ``root`` with all nested workspaces.

    Raises:
        ManifestError: If any workspace manifest is invalid.
        DuplicateWorkspace: If two workspaces share a name.
    """
    root = os.path.abspath(root)
    project = Project(root, enable_transparent_workspaces=enable_transparent_workspaces)

    with Timer() as t:
        pending = deque([root])
        while pending:
            cwd = pending.popleft()
            if cwd in project.workspaces_by_cwd:
                continue

            workspace = Workspace(project, cwd, _relative_cwd(root, cwd), read_manifest(cwd))
            existing = project.try_workspace_by_ident(workspace.ident)
            if existing is not None:
                raise DuplicateWorkspace(str(workspace.ident), existing.cwd, workspace.cwd)

            project.add_workspace(workspace)
            pending.extend(_expand_definitions(workspace))

    if is_debug_enabled(logger):
        logger.debug(
            "Project loaded",
            extra=extra_context(
                event="project_loaded",
                component="loader",
                action="load_project",
                root=root,
                workspace_count=len(project.workspaces),
                duration_ms=t.duration_ms(),
            ),
        )
    return project


def find_active_workspace(project: Project, cwd: str) -> Optional[Workspace]:
    """Return the workspace owning the nearest package.json above ``cwd``."""
    for candidate in _ancestors(cwd):
        if _has_manifest(candidate):
            return project.try_workspace_by_cwd(candidate)
    return None


def find_project(configuration: "Configuration", cwd: str) -> Tuple[Project, Optional[Workspace]]:
    """Load the project containing ``cwd`` and the workspace active there."""
    root = find_root(cwd)
    project = load_project(root, enable_transparent_workspaces=configuration.enable_transparent_workspaces)
    workspace = find_active_workspace(project, cwd)
    logger.info(
        "Loaded project %s with %d workspaces",
        project.cwd,
        len(project.workspaces),
    )
    return project, workspace
