"""Install routines and install-state persistence.

An installer receives a (possibly pruned) project and reports progress to a
stream report; the install state records what the last successful install
linked.
"""

from .base import Installer, InstallResult, LinkEntry, build_link_plan
from .cache import Cache
from .command import CommandInstaller
from .link import LinkPlanInstaller
from .state import InstallStateStore

__all__ = [
    "Installer",
    "InstallResult",
    "LinkEntry",
    "build_link_plan",
    "Cache",
    "CommandInstaller",
    "LinkPlanInstaller",
    "InstallStateStore",
]
