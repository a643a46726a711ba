"""Exception hierarchy for wsfocus.

Every error the CLI reports to the user derives from :class:`FocusError` and
carries the exit code it should terminate with.
"""

from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class FocusError(Exception):
    """Base class for user-facing errors."""

    exit_code = ExitCodes.FAILURE.value


class ConfigurationError(FocusError):
    """Invalid option combination or configuration file."""

    exit_code = ExitCodes.USAGE_ERROR.value


class UnknownWorkspace(FocusError):
    """A workspace named on the command line does not exist in the project."""

    def __init__(self, name: str):
        super().__init__(f"Workspace not found ({name})")
        self.name = name


class NoActiveWorkspace(FocusError):
    """No workspace was named and the current directory is outside all of them."""

    def __init__(self, project_cwd: str, cwd: str):
        super().__init__(
            f"This command can only be run from within a workspace of your project "
            f"({cwd} isn't a workspace of {project_cwd})."
        )
        self.project_cwd = project_cwd
        self.cwd = cwd


class InstallFailure(FocusError):
    """The install routine reported a failure; ``message`` is surfaced verbatim."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code:
            self.exit_code = exit_code


class ProjectError(FocusError):
    """Base class for project loading failures."""


class ProjectNotFound(ProjectError):
    """No package.json was found in the directory or any of its parents."""

    def __init__(self, cwd: str):
        super().__init__(f"No project found in {cwd}")
        self.cwd = cwd


class ManifestError(ProjectError):
    """A package.json could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = path


class DuplicateWorkspace(ProjectError):
    """Two workspaces declare the same package name."""

    def __init__(self, name: str, first: str, second: str):
        super().__init__(f"Duplicate workspace name {name}: {first} conflicts with {second}")
        self.name = name
