"""Installer delegating to an external package manager command.

The command runs in the project root with the focused workspace names and
the cache folder exported as environment variables; its output is streamed
into the report line by line.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from errors import InstallFailure
from install.base import Installer, InstallResult, build_link_plan
from project.project import Project

if TYPE_CHECKING:
    from common.report import StreamReport
    from install.cache import Cache

logger = logging.getLogger(__name__)


_CHUNK_SIZE = 64 * 1024


def _forward(raw: bytes, sink: Callable[[str, str], None]) -> Optional[str]:
    line = raw.decode("utf-8", errors="replace").rstrip()
    if not line:
        return None
    sink("install_output", line)
    return line


async def _pump(stream: Optional[asyncio.StreamReader], sink: Callable[[str, str], None]) -> Optional[str]:
    """Forward each line of ``stream`` to ``sink``; return the last non-empty line.

    The stream is read in chunks so lines longer than the reader's buffer
    limit are still delivered whole.
    """
    last = None
    if stream is None:
        return last
    pending = b""
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        pending += chunk
        if b"\n" not in chunk:
            continue
        *lines, pending = pending.split(b"\n")
        for raw in lines:
            last = _forward(raw, sink) or last
    if pending:
        last = _forward(pending, sink) or last
    return last


class CommandInstaller(Installer):
    """Runs ``command`` (an argv list) as the install step."""

    def __init__(self, command: Sequence[str], production: bool = False, env: Optional[Dict[str, str]] = None):
        if not command:
            raise ValueError("install command must not be empty")
        self.command: List[str] = list(command)
        self.production = production
        self._base_env = dict(env) if env is not None else dict(os.environ)

    def build_env(self, project: Project, cache: "Cache") -> Dict[str, str]:
        env = dict(self._base_env)
        env[Constants.ENV_WORKSPACES] = ",".join(str(w.ident) for w in project.workspaces)
        env[Constants.ENV_PRODUCTION] = "1" if self.production else "0"
        env[Constants.ENV_CACHE_FOLDER] = cache.ensure()
        return env

    async def install(
        self,
        project: Project,
        *,
        cache: "Cache",
        report: "StreamReport",
        persist_project: bool = True,
    ) -> InstallResult:
        plan = build_link_plan(project)
        env = self.build_env(project, cache)
        report.report_info("install_command", f"Running {shlex.join(self.command)}")

        with Timer() as t:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *self.command,
                    cwd=project.cwd,
                    env=env,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as e:
                raise InstallFailure(f"Install command not found: {self.command[0]}") from e
            except OSError as e:
                raise InstallFailure(f"Failed to start install command {self.command[0]}: {e}") from e

            try:
                _, last_stderr = await asyncio.gather(
                    _pump(proc.stdout, report.report_info),
                    _pump(proc.stderr, report.report_warning),
                )
                returncode = await proc.wait()
            finally:
                if proc.returncode is None:
                    proc.kill()
                    await proc.wait()

        if is_debug_enabled(logger):
            logger.debug(
                "Install command finished",
                extra=extra_context(
                    event="install_command",
                    component="installer",
                    action="run",
                    outcome="success" if returncode == 0 else "failure",
                    returncode=returncode,
                    duration_ms=t.duration_ms(),
                ),
            )

        if returncode != 0:
            return InstallResult(
                exit_code=returncode,
                error=last_stderr or f"Install command exited with code {returncode}",
            )

        if persist_project:
            project.persist()
        return InstallResult(exit_code=0, plan=plan)
