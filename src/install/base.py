"""Install routine interface, results and link planning."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from constants import ALL_DEPENDENCIES, HARD_DEPENDENCIES
from project.project import Project

if TYPE_CHECKING:
    from common.report import StreamReport
    from install.cache import Cache


@dataclass
class LinkEntry:
    """One dependency edge of a surviving workspace."""

    workspace: str
    scope: str
    name: str
    range: str
    kind: str  # "workspace" | "external" | "peer"
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workspace": self.workspace,
            "scope": self.scope,
            "name": self.name,
            "range": self.range,
            "kind": self.kind,
            "target": self.target,
        }


@dataclass
class InstallResult:
    """Outcome of an install routine."""

    exit_code: int = 0
    error: Optional[str] = None
    plan: List[LinkEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and self.error is None


def build_link_plan(project: Project) -> List[LinkEntry]:
    """List every dependency edge left in the (possibly pruned) project.

    Hard dependencies resolving to a workspace become ``workspace`` links,
    other hard dependencies are ``external``; peer dependencies are recorded
    as ``peer`` and never linked.
    """
    plan = []
    for workspace in project.workspaces:
        for scope in ALL_DEPENDENCIES:
            descriptors = workspace.manifest.get_for_scope(scope).values()
            for descriptor in sorted(descriptors, key=lambda d: str(d.ident)):
                entry = LinkEntry(
                    workspace=workspace.locator,
                    scope=scope.value,
                    name=str(descriptor.ident),
                    range=descriptor.range,
                    kind="peer",
                )
                if scope in HARD_DEPENDENCIES:
                    target = project.try_workspace_by_descriptor(descriptor)
                    if target is not None:
                        entry.kind = "workspace"
                        entry.target = target.locator
                    else:
                        entry.kind = "external"
                plan.append(entry)
    return plan


class Installer(ABC):
    """Installs the workspaces currently present in a project."""

    @abstractmethod
    async def install(
        self,
        project: Project,
        *,
        cache: "Cache",
        report: "StreamReport",
        persist_project: bool = True,
    ) -> InstallResult:
        """Run the install.

        Args:
            project: Project to install; may have been pruned in memory.
            cache: Cache handle.
            report: Report sink for progress messages.
            persist_project: Write project state (manifests) after success.
                Focused installs pass False.
        """
        raise NotImplementedError

