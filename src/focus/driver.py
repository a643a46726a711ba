"""Scoped install driver.

Runs the install against a pruned in-memory project. Project state is never
persisted from here: the manifests were just stripped in memory, and writing
them would delete the evicted workspaces' dependencies on disk. Install state
is persisted after every successful install because the set of linked
packages may differ from the previous run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from errors import InstallFailure
from install.base import Installer, InstallResult
from project.project import Project

if TYPE_CHECKING:
    from common.report import StreamReport
    from install.cache import Cache
    from install.state import InstallStateStore

logger = logging.getLogger(__name__)


async def run_scoped_install(
    project: Project,
    installer: Installer,
    *,
    cache: "Cache",
    report: "StreamReport",
    state_store: "InstallStateStore",
) -> InstallResult:
    """Install the pruned project and persist only the install state.

    Raises:
        InstallFailure: If the installer returns a failed result. Exceptions
            raised by the installer itself propagate unchanged.
    """
    result = await installer.install(project, cache=cache, report=report, persist_project=False)
    if not result.ok:
        raise InstallFailure(
            result.error or f"Install failed with exit code {result.exit_code}",
            exit_code=result.exit_code,
        )

    state_store.persist(project, result)
    logger.debug("Scoped install complete for %d workspaces", len(project.workspaces))
    return result
