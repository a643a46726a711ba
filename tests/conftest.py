"""Shared fixtures: in-memory projects and on-disk workspace trees."""

import json
import os

import pytest

from project.models import Manifest, Workspace
from project.project import Project


def build_project(manifests, cwd="/repo", enable_transparent_workspaces=True):
    """Build a Project from ``{relative_cwd: package.json dict}``; the first entry is the root."""
    project = Project(cwd, enable_transparent_workspaces=enable_transparent_workspaces)
    for relative_cwd, data in manifests.items():
        ws_cwd = cwd if relative_cwd == "." else f"{cwd}/{relative_cwd}"
        project.add_workspace(Workspace(project, ws_cwd, relative_cwd, Manifest.from_dict(data)))
    return project


def write_tree(root, manifests):
    """Write ``{relative_cwd: package.json dict}`` under ``root``."""
    for relative_cwd, data in manifests.items():
        directory = os.path.join(str(root), relative_cwd)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, "package.json"), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


def scenario_manifests():
    """root, a (dep -> b, peer -> c), b (no workspace deps), c (no deps)."""
    return {
        ".": {
            "name": "root",
            "private": True,
            "workspaces": ["packages/*"],
            "devDependencies": {"typescript": "^5.0.0"},
        },
        "packages/a": {
            "name": "a",
            "version": "1.0.0",
            "dependencies": {"b": "workspace:*", "lodash": "^4.17.21"},
            "devDependencies": {"jest": "^29.0.0"},
            "peerDependencies": {"c": "workspace:*"},
        },
        "packages/b": {
            "name": "b",
            "version": "1.0.0",
            "dependencies": {"left-pad": "^1.3.0"},
            "devDependencies": {"eslint": "^8.0.0"},
            "peerDependencies": {"react": "^18.0.0"},
        },
        "packages/c": {
            "name": "c",
            "version": "1.0.0",
        },
    }


@pytest.fixture
def scenario_project():
    return build_project(scenario_manifests())


def by_name(project, name):
    for workspace in project.workspaces:
        if str(workspace.ident) == name:
            return workspace
    raise KeyError(name)
