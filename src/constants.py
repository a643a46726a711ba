"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2


class DependencyScope(Enum):
    """Dependency scopes carried by a workspace manifest.

    Args:
        Enum (string): Manifest field name of the scope.
    """

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"


# Scopes followed when computing the required closure. Peer dependencies are
# cleared on eviction but never pull in new workspaces.
HARD_DEPENDENCIES = (
    DependencyScope.DEPENDENCIES,
    DependencyScope.DEV_DEPENDENCIES,
)

ALL_DEPENDENCIES = (
    DependencyScope.DEPENDENCIES,
    DependencyScope.DEV_DEPENDENCIES,
    DependencyScope.PEER_DEPENDENCIES,
)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PACKAGE_JSON_FILE = "package.json"
    RC_FILE = ".wsfocusrc.yml"
    NODE_MODULES = "node_modules"
    WORKSPACE_PROTOCOL = "workspace:"
    DEFAULT_VERSION = "0.0.0"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    DEFAULT_LOG_LEVEL = "WARNING"

    DEFAULT_CACHE_FOLDER = ".wsfocus/cache"
    DEFAULT_INSTALL_STATE_PATH = ".wsfocus/install-state.gz"
    INSTALL_STATE_VERSION = 1

    ENV_LOG_LEVEL = "WSFOCUS_LOG_LEVEL"
    ENV_CACHE_FOLDER = "WSFOCUS_CACHE_FOLDER"
    ENV_INSTALL_COMMAND = "WSFOCUS_INSTALL_COMMAND"
    ENV_WORKSPACES = "WSFOCUS_WORKSPACES"
    ENV_PRODUCTION = "WSFOCUS_PRODUCTION"
