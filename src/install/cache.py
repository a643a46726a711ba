"""Cache handle passed to install routines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cli_config import Configuration
    from project.project import Project


@dataclass
class Cache:
    """Location of the package cache; the folder is created on first use."""

    folder: str

    @classmethod
    def find(cls, configuration: "Configuration", project: "Project") -> "Cache":
        return cls(folder=configuration.resolve_path(project.cwd, configuration.cache_folder))

    def ensure(self) -> str:
        os.makedirs(self.folder, exist_ok=True)
        return self.folder
