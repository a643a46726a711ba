"""Required-workspace closure over hard dependency edges."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Set

from common.logging_utils import extra_context, is_debug_enabled
from constants import HARD_DEPENDENCIES
from project.models import Workspace
from project.project import Project

logger = logging.getLogger(__name__)


def compute_required_workspaces(project: Project, seed: Iterable[Workspace]) -> Set[Workspace]:
    """Return the seed plus every workspace reachable from it via hard dependencies.

    Only ``dependencies`` and ``devDependencies`` are followed; a workspace
    reachable solely through ``peerDependencies`` is not required.
    Descriptors that do not resolve to a workspace are external packages
    and are ignored.

    Args:
        project: Project whose workspace index resolves descriptors.
        seed: Workspaces the closure starts from.

    Returns:
        The required set (unordered).
    """
    required: Set[Workspace] = set()
    pending = deque()
    for workspace in seed:
        if workspace not in required:
            required.add(workspace)
            pending.append(workspace)

    while pending:
        workspace = pending.popleft()
        for scope in HARD_DEPENDENCIES:
            for descriptor in workspace.manifest.get_for_scope(scope).values():
                match = project.try_workspace_by_descriptor(descriptor)
                if match is None or match in required:
                    continue
                required.add(match)
                pending.append(match)
                if is_debug_enabled(logger):
                    logger.debug(
                        "Workspace required",
                        extra=extra_context(
                            event="decision",
                            component="closure",
                            action="require",
                            workspace=match.locator,
                            via=workspace.locator,
                            scope=scope.value,
                        ),
                    )

    return required
