"""Tests for the scoped install driver."""

import asyncio
from unittest.mock import MagicMock

import pytest

from errors import InstallFailure
from focus.driver import run_scoped_install
from install.base import Installer, InstallResult
from install.cache import Cache


class _StubInstaller(Installer):
    """Records calls and returns a canned result or raises."""

    def __init__(self, result=None, exc=None):
        self.result = result if result is not None else InstallResult()
        self.exc = exc
        self.calls = []

    async def install(self, project, *, cache, report, persist_project=True):
        self.calls.append({"project": project, "cache": cache, "report": report, "persist_project": persist_project})
        if self.exc is not None:
            raise self.exc
        return self.result


def _run(project, installer, state_store):
    return asyncio.run(
        run_scoped_install(
            project,
            installer,
            cache=Cache(folder="/tmp/cache"),
            report=MagicMock(),
            state_store=state_store,
        )
    )


class TestRunScopedInstall:
    """Project state vs install state persistence."""

    def test_success_persists_install_state_once(self, scenario_project):
        scenario_project.persist = MagicMock()
        state_store = MagicMock()
        installer = _StubInstaller()

        result = _run(scenario_project, installer, state_store)

        assert result is installer.result
        assert len(installer.calls) == 1
        assert installer.calls[0]["persist_project"] is False
        assert installer.calls[0]["project"] is scenario_project
        state_store.persist.assert_called_once_with(scenario_project, installer.result)
        scenario_project.persist.assert_not_called()

    def test_failed_result_raises_install_failure(self, scenario_project):
        state_store = MagicMock()
        installer = _StubInstaller(result=InstallResult(exit_code=3, error="YN0001: resolution failed"))

        with pytest.raises(InstallFailure) as exc_info:
            _run(scenario_project, installer, state_store)

        assert str(exc_info.value) == "YN0001: resolution failed"
        assert exc_info.value.exit_code == 3
        state_store.persist.assert_not_called()

    def test_failed_result_without_message(self, scenario_project):
        installer = _StubInstaller(result=InstallResult(exit_code=9))
        with pytest.raises(InstallFailure, match="exit code 9"):
            _run(scenario_project, installer, MagicMock())

    def test_installer_exception_propagates_unmodified(self, scenario_project):
        state_store = MagicMock()
        error = OSError("disk full")
        installer = _StubInstaller(exc=error)

        with pytest.raises(OSError) as exc_info:
            _run(scenario_project, installer, state_store)

        assert exc_info.value is error
        state_store.persist.assert_not_called()
