"""Default installer: computes the workspace link plan without touching the network."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Dict

from install.base import Installer, InstallResult, build_link_plan
from project.project import Project

if TYPE_CHECKING:
    from common.report import StreamReport
    from install.cache import Cache

logger = logging.getLogger(__name__)


class LinkPlanInstaller(Installer):
    """Links the remaining workspaces to each other and lists external packages."""

    async def install(
        self,
        project: Project,
        *,
        cache: "Cache",
        report: "StreamReport",
        persist_project: bool = True,
    ) -> InstallResult:
        plan = build_link_plan(project)

        counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for entry in plan:
            counts[entry.workspace][entry.kind] += 1

        for workspace in project.workspaces:
            kinds = counts.get(workspace.locator, {})
            report.report_info(
                "link_step",
                f"{workspace.ident}: {kinds.get('workspace', 0)} workspace links, "
                f"{kinds.get('external', 0)} external packages",
            )

        if persist_project:
            project.persist()

        logger.debug("Link plan has %d entries (cache %s)", len(plan), cache.folder)
        return InstallResult(exit_code=0, plan=plan)
