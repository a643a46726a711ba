"""wsfocus - install a subset of a multi-package project.

Selects the target workspaces, expands them to their hard-dependency closure,
prunes every other workspace in memory and installs the reduced project
without rewriting the project's manifests.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import List, Optional, Sequence, Set, TextIO, Tuple

from args import parse_args
from cli_config import Configuration
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from common.report import StreamReport
from constants import Constants
from errors import FocusError
from focus.closure import compute_required_workspaces
from focus.driver import run_scoped_install
from focus.eviction import evict_workspaces
from focus.seed import select_seed
from install.base import Installer
from install.cache import Cache
from install.command import CommandInstaller
from install.link import LinkPlanInstaller
from install.state import InstallStateStore
from project.models import Workspace
from project.project import Project

logger = logging.getLogger(__name__)


def focus_project(
    project: Project,
    active_workspace: Optional[Workspace],
    *,
    names: Sequence[str] = (),
    all_workspaces: bool = False,
    production: bool = False,
    cwd: Optional[str] = None,
) -> Tuple[Set[Workspace], List[Workspace]]:
    """Select, expand and evict; returns (required, evicted).

    Seed selection errors are raised before any manifest is touched.
    """
    seed = select_seed(project, active_workspace, names, all_workspaces, cwd=cwd)
    required = compute_required_workspaces(project, seed)
    if is_debug_enabled(logger):
        logger.debug(
            "Closure computed",
            extra=extra_context(
                event="decision",
                component="cli",
                action="compute_required_workspaces",
                seed=[w.locator for w in seed],
                required=sorted(w.locator for w in required),
            ),
        )
    evicted = evict_workspaces(project, required, production=production)
    return required, evicted


def create_installer(configuration: Configuration, production: bool = False) -> Installer:
    """Pick the install routine: the configured command, or the link planner."""
    if configuration.install_command:
        return CommandInstaller(configuration.install_command, production=production)
    return LinkPlanInstaller()


def run_focus(args, stdout: Optional[TextIO] = None) -> int:
    """Run a focused install for parsed CLI ``args`` and return the exit code.

    Raises:
        FocusError: For configuration, project loading and seed selection
            errors, all raised before the project is pruned.
    """
    cwd = os.path.abspath(args.CWD or os.getcwd())
    configuration = Configuration.find(cwd)
    project, workspace = Project.find(configuration, cwd)
    cache = Cache.find(configuration, project)
    state_store = InstallStateStore.for_project(configuration, project)

    previous = state_store.load()
    if previous is not None:
        logger.debug("Previous install covered %d workspaces", len(previous.get("workspaces", [])))

    _, evicted = focus_project(
        project,
        workspace,
        names=args.workspaces,
        all_workspaces=args.ALL,
        production=args.PRODUCTION,
        cwd=cwd,
    )
    installer = create_installer(configuration, production=args.PRODUCTION)

    async def _install(report: StreamReport) -> None:
        for evicted_workspace in evicted:
            report.report_info("eviction", f"Skipping {evicted_workspace.ident}")
        await run_scoped_install(
            project,
            installer,
            cache=cache,
            report=report,
            state_store=state_store,
        )

    report = asyncio.run(
        StreamReport.start(
            callback=_install,
            json_output=args.JSON,
            stdout=stdout,
            include_logs=True,
        )
    )
    return report.exit_code()


def run(argv: Optional[Sequence[str]] = None, stdout: Optional[TextIO] = None) -> int:
    """Parse ``argv``, configure logging and run; never raises FocusError."""
    args = parse_args(argv)
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    try:
        return run_focus(args, stdout=stdout)
    except FocusError as e:
        report = StreamReport(json_output=args.JSON, stdout=stdout)
        report.report_exception_once(e)
        return report.exit_code()


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
