"""Tests for workspace eviction."""

import copy

from constants import ALL_DEPENDENCIES, DependencyScope
from focus.closure import compute_required_workspaces
from focus.eviction import evict_workspaces

from conftest import build_project, by_name, scenario_manifests


def _snapshot(workspace):
    return {scope: dict(workspace.manifest.get_for_scope(scope)) for scope in ALL_DEPENDENCIES}


def _is_empty(workspace):
    return all(not workspace.manifest.get_for_scope(scope) for scope in ALL_DEPENDENCIES)


def _assert_consistent(project):
    assert set(project.workspaces_by_cwd.values()) == set(project.workspaces)
    assert set(project.workspaces_by_ident.values()) == set(project.workspaces)
    assert project.top_level_workspace in project.workspaces


class TestEvictWorkspaces:
    """Manifest pruning and structural removal."""

    def test_focus_on_a(self, scenario_project):
        a = by_name(scenario_project, "a")
        b = by_name(scenario_project, "b")
        c = by_name(scenario_project, "c")
        before_a, before_b = _snapshot(a), _snapshot(b)

        required = compute_required_workspaces(scenario_project, [a])
        evicted = evict_workspaces(scenario_project, required)

        assert evicted == [c]
        assert _is_empty(c)
        assert _snapshot(a) == before_a
        assert _snapshot(b) == before_b
        assert c not in scenario_project.workspaces
        assert c.cwd not in scenario_project.workspaces_by_cwd
        assert c.ident.ident_hash not in scenario_project.workspaces_by_ident
        _assert_consistent(scenario_project)

    def test_root_is_pruned_but_kept(self, scenario_project):
        root = scenario_project.top_level_workspace
        required = compute_required_workspaces(scenario_project, [by_name(scenario_project, "a")])
        assert root not in required

        evict_workspaces(scenario_project, required)

        assert root in scenario_project.workspaces
        assert scenario_project.workspaces_by_cwd[root.cwd] is root
        assert scenario_project.workspaces_by_ident[root.ident.ident_hash] is root
        assert _is_empty(root)

    def test_install_everything_evicts_nothing(self, scenario_project):
        snapshots = {w.cwd: _snapshot(w) for w in scenario_project.workspaces}
        required = compute_required_workspaces(scenario_project, scenario_project.workspaces)

        evicted = evict_workspaces(scenario_project, required)

        assert evicted == []
        assert len(scenario_project.workspaces) == 4
        assert {w.cwd: _snapshot(w) for w in scenario_project.workspaces} == snapshots

    def test_production_mode(self, scenario_project):
        a = by_name(scenario_project, "a")
        b = by_name(scenario_project, "b")
        c = by_name(scenario_project, "c")
        before_a, before_b = _snapshot(a), _snapshot(b)

        required = compute_required_workspaces(scenario_project, [a])
        evict_workspaces(scenario_project, required, production=True)

        for workspace, before in ((a, before_a), (b, before_b)):
            assert workspace.manifest.dev_dependencies == {}
            assert workspace.manifest.dependencies == before[DependencyScope.DEPENDENCIES]
            assert workspace.manifest.peer_dependencies == before[DependencyScope.PEER_DEPENDENCIES]
        assert a.manifest.peer_dependencies  # c stays a declared peer of a
        assert _is_empty(c)
        assert c not in scenario_project.workspaces

    def test_production_mode_with_everything(self, scenario_project):
        required = set(scenario_project.workspaces)
        evict_workspaces(scenario_project, required, production=True)
        assert all(not w.manifest.dev_dependencies for w in scenario_project.workspaces)
        assert by_name(scenario_project, "a").manifest.dependencies

    def test_idempotent(self):
        once = build_project(scenario_manifests())
        twice = build_project(scenario_manifests())

        for project, runs in ((once, 1), (twice, 2)):
            required = compute_required_workspaces(project, [by_name(project, "a")])
            for _ in range(runs):
                evict_workspaces(project, required, production=True)

        assert [w.relative_cwd for w in once.workspaces] == [w.relative_cwd for w in twice.workspaces]
        assert sorted(once.workspaces_by_cwd) == sorted(twice.workspaces_by_cwd)
        for left, right in zip(once.workspaces, twice.workspaces):
            assert left.manifest.export() == right.manifest.export()

    def test_does_not_alias_scopes_between_workspaces(self, scenario_project):
        b = by_name(scenario_project, "b")
        before = copy.deepcopy(b.manifest.dependencies)
        required = {by_name(scenario_project, "a"), b}
        evict_workspaces(scenario_project, required)
        assert b.manifest.dependencies == before

    def test_external_descriptors_untouched_on_required(self, scenario_project):
        a = by_name(scenario_project, "a")
        required = compute_required_workspaces(scenario_project, [a])
        evict_workspaces(scenario_project, required)
        assert {str(d.ident) for d in a.manifest.dependencies.values()} == {"b", "lodash"}
