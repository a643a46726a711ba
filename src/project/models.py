"""Data models for workspaces, manifests and dependency descriptors."""

from __future__ import annotations

import copy
import hashlib
import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import semantic_version

from constants import ALL_DEPENDENCIES, Constants, DependencyScope

if TYPE_CHECKING:
    from project.project import Project


@dataclass(frozen=True)
class Ident:
    """Package identity: optional scope plus name."""
    scope: Optional[str]
    name: str

    @classmethod
    def parse(cls, raw: str) -> "Ident":
        """Parse ``name`` or ``@scope/name``.

        Raises:
            ValueError: If the string is not a valid package identifier.
        """
        text = (raw or "").strip()
        if text.startswith("@"):
            scope, sep, name = text[1:].partition("/")
            if not sep or not scope or not name or "/" in name:
                raise ValueError(f"Invalid ident ({raw})")
            return cls(scope=scope, name=name)
        if not text or "/" in text or "@" in text:
            raise ValueError(f"Invalid ident ({raw})")
        return cls(scope=None, name=text)

    @property
    def ident_hash(self) -> str:
        """Stable key used by the project's identity index."""
        return hashlib.sha256(str(self).encode("utf-8")).hexdigest()[:20]

    def __str__(self) -> str:
        if self.scope:
            return f"@{self.scope}/{self.name}"
        return self.name


@dataclass(frozen=True)
class Descriptor:
    """A dependency request: which package, and which range of it."""
    ident: Ident
    range: str

    def __str__(self) -> str:
        return f"{self.ident}@{self.range}"


@dataclass
class Manifest:
    """In-memory view of a workspace's package.json.

    Each dependency scope is its own mapping from ident hash to descriptor so
    scopes can be cleared independently.
    """
    name: Optional[Ident] = None
    version: Optional[str] = None
    workspace_definitions: List[str] = field(default_factory=list)
    dependencies: Dict[str, Descriptor] = field(default_factory=dict)
    dev_dependencies: Dict[str, Descriptor] = field(default_factory=dict)
    peer_dependencies: Dict[str, Descriptor] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    def get_for_scope(self, scope: DependencyScope) -> Dict[str, Descriptor]:
        """Return the live mapping backing ``scope``."""
        if scope == DependencyScope.DEPENDENCIES:
            return self.dependencies
        if scope == DependencyScope.DEV_DEPENDENCIES:
            return self.dev_dependencies
        if scope == DependencyScope.PEER_DEPENDENCIES:
            return self.peer_dependencies
        raise ValueError(f"Unsupported dependency scope: {scope}")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Manifest":
        """Build a manifest from a decoded package.json payload.

        Raises:
            ValueError: If a field has an unexpected shape.
        """
        if not isinstance(raw, dict):
            raise ValueError("manifest must be a JSON object")

        name = raw.get("name")
        version = raw.get("version")
        manifest = cls(
            name=Ident.parse(name) if isinstance(name, str) and name else None,
            version=version if isinstance(version, str) else None,
            workspace_definitions=_read_workspace_definitions(raw.get("workspaces")),
            raw=copy.deepcopy(raw),
        )

        for scope in ALL_DEPENDENCIES:
            entries = raw.get(scope.value) or {}
            if not isinstance(entries, dict):
                raise ValueError(f"{scope.value} must be an object")
            target = manifest.get_for_scope(scope)
            for dep_name, dep_range in entries.items():
                ident = Ident.parse(dep_name)
                target[ident.ident_hash] = Descriptor(ident=ident, range=str(dep_range))

        return manifest

    def export(self) -> Dict[str, Any]:
        """Return the package.json payload with current scope contents."""
        data = copy.deepcopy(self.raw)
        for scope in ALL_DEPENDENCIES:
            entries = self.get_for_scope(scope)
            if entries:
                data[scope.value] = {
                    str(d.ident): d.range
                    for d in sorted(entries.values(), key=lambda d: str(d.ident))
                }
            else:
                data.pop(scope.value, None)
        return data


def _read_workspace_definitions(value: Any) -> List[str]:
    """Accept both ``"workspaces": [...]`` and ``{"packages": [...]}``."""
    if value is None:
        return []
    if isinstance(value, dict):
        value = value.get("packages", [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError("workspaces must be a list of glob patterns")
    return list(value)


class Workspace:
    """A project-internal package.

    Equality and hashing are by identity: two workspace objects are the same
    workspace only if they are the same object.
    """

    def __init__(self, project: "Project", cwd: str, relative_cwd: str, manifest: Manifest):
        self.project = project
        self.cwd = cwd
        self.relative_cwd = relative_cwd
        self.manifest = manifest
        self.ident = manifest.name or _anonymous_ident(relative_cwd)

    @property
    def locator(self) -> str:
        return f"{self.ident}@{Constants.WORKSPACE_PROTOCOL}{self.relative_cwd}"

    def accepts(self, range_: str) -> bool:
        """Return True if a dependency on this workspace with ``range_`` resolves to it.

        The protocol is everything up to the first colon; ``workspace:`` paths
        are normalized before being compared with the workspace location.
        """
        protocol, sep, pathname = range_.partition(":")
        if not sep:
            protocol, pathname = "", range_
        is_workspace = f"{protocol}:" == Constants.WORKSPACE_PROTOCOL

        if is_workspace and posixpath.normpath(pathname) == self.relative_cwd:
            return True
        if is_workspace and pathname in ("*", "^", "~"):
            return True

        try:
            spec = semantic_version.NpmSpec(pathname)
        except ValueError:
            return False

        if is_workspace:
            return _matches(spec, self.manifest.version or Constants.DEFAULT_VERSION)
        if not self.project.enable_transparent_workspaces:
            return False
        if self.manifest.version is not None:
            return _matches(spec, self.manifest.version)
        return False

    def __repr__(self) -> str:
        return f"Workspace({self.locator})"


def _matches(spec: semantic_version.NpmSpec, version: str) -> bool:
    try:
        return spec.match(semantic_version.Version(version))
    except ValueError:
        return False


def _anonymous_ident(relative_cwd: str) -> Ident:
    """Ident for a workspace whose manifest has no name."""
    digest = hashlib.sha256(relative_cwd.encode("utf-8")).hexdigest()[:6]
    if relative_cwd == ".":
        return Ident(scope=None, name=f"root-workspace-{digest}")
    slug = relative_cwd.replace("/", "-").strip("-.") or "workspace"
    return Ident(scope=None, name=f"{slug}-{digest}")
