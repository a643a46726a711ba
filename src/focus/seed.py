"""Seed selection for a focused install."""

from __future__ import annotations

from typing import List, Optional, Sequence

from errors import ConfigurationError, NoActiveWorkspace, UnknownWorkspace
from project.models import Ident, Workspace
from project.project import Project


def select_seed(
    project: Project,
    active_workspace: Optional[Workspace],
    names: Sequence[str] = (),
    all_workspaces: bool = False,
    cwd: Optional[str] = None,
) -> List[Workspace]:
    """Pick the workspaces the closure starts from.

    Args:
        project: Loaded project.
        active_workspace: Workspace containing the invocation directory, if any.
        names: Explicit workspace names, in command-line order.
        all_workspaces: Install the whole project.
        cwd: Invocation directory, used in the error when no workspace is active.

    Raises:
        ConfigurationError: If both ``names`` and ``all_workspaces`` are given.
        UnknownWorkspace: If a name does not match any workspace.
        NoActiveWorkspace: If nothing was named and no workspace is active.
    """
    if all_workspaces and names:
        raise ConfigurationError("Cannot specify workspaces when using the --all flag")

    if all_workspaces:
        return list(project.workspaces)

    if names:
        seed = []
        for name in names:
            try:
                ident = Ident.parse(name)
            except ValueError as e:
                raise UnknownWorkspace(name) from e
            workspace = project.get_workspace_by_ident(ident)
            if workspace not in seed:
                seed.append(workspace)
        return seed

    if active_workspace is None:
        raise NoActiveWorkspace(project.cwd, cwd or project.cwd)
    return [active_workspace]
