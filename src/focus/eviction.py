"""Eviction of workspaces outside the required set.

Mutations here are in-memory only. Nothing in this module writes to disk, so
a later run (or a crash) still sees the original manifests.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, List

from constants import ALL_DEPENDENCIES, DependencyScope
from project.models import Workspace
from project.project import Project

logger = logging.getLogger(__name__)


def evict_workspaces(
    project: Project,
    required: AbstractSet[Workspace],
    production: bool = False,
) -> List[Workspace]:
    """Prune the project down to ``required``.

    Required workspaces keep their manifests, minus ``devDependencies`` in
    production mode. Every other workspace loses all dependency scopes and,
    unless it is the root, is removed from the project.

    Args:
        project: Project to mutate in place.
        required: Output of the closure computation.
        production: Drop development dependencies of required workspaces.

    Returns:
        The workspaces removed from the project.
    """
    evictions: List[Workspace] = []
    for workspace in project.workspaces:
        if workspace in required:
            if production:
                workspace.manifest.get_for_scope(DependencyScope.DEV_DEPENDENCIES).clear()
            continue

        for scope in ALL_DEPENDENCIES:
            workspace.manifest.get_for_scope(scope).clear()
        if workspace is not project.top_level_workspace:
            evictions.append(workspace)

    # Removal runs after every manifest is pruned so the walk above never sees
    # a partially shrunk list.
    for workspace in evictions:
        project.remove_workspace(workspace)

    logger.info(
        "Focused on %d workspaces (%d evicted)",
        len(project.workspaces),
        len(evictions),
    )
    return evictions
