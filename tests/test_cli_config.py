"""Tests for rc-file configuration loading."""

import pytest

from cli_config import Configuration, load_rc_file
from constants import Constants
from errors import ConfigurationError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(Constants.ENV_CACHE_FOLDER, raising=False)
    monkeypatch.delenv(Constants.ENV_INSTALL_COMMAND, raising=False)


class TestConfiguration:
    """Configuration.find precedence."""

    def test_defaults(self, tmp_path):
        config = Configuration.find(str(tmp_path))
        assert config.cache_folder == Constants.DEFAULT_CACHE_FOLDER
        assert config.install_state_path == Constants.DEFAULT_INSTALL_STATE_PATH
        assert config.install_command is None
        assert config.enable_transparent_workspaces is True

    def test_nearer_file_overrides(self, tmp_path):
        (tmp_path / ".wsfocusrc.yml").write_text(
            "cacheFolder: outer-cache\ninstallCommand: [yarn, install]\n"
        )
        inner = tmp_path / "packages" / "a"
        inner.mkdir(parents=True)
        (inner / ".wsfocusrc.yml").write_text("cacheFolder: inner-cache\n")

        config = Configuration.find(str(inner))

        assert config.cache_folder == "inner-cache"
        assert config.install_command == ["yarn", "install"]
        assert config.sources == [str(tmp_path / ".wsfocusrc.yml"), str(inner / ".wsfocusrc.yml")]

    def test_env_overrides(self, tmp_path, monkeypatch):
        (tmp_path / ".wsfocusrc.yml").write_text("cacheFolder: from-file\n")
        monkeypatch.setenv(Constants.ENV_CACHE_FOLDER, "/var/cache/wsfocus")
        monkeypatch.setenv(Constants.ENV_INSTALL_COMMAND, "npm install --no-audit")

        config = Configuration.find(str(tmp_path))

        assert config.cache_folder == "/var/cache/wsfocus"
        assert config.install_command == ["npm", "install", "--no-audit"]

    def test_malformed_env_command(self, tmp_path, monkeypatch):
        monkeypatch.setenv(Constants.ENV_INSTALL_COMMAND, "yarn 'install")
        with pytest.raises(ConfigurationError, match=Constants.ENV_INSTALL_COMMAND):
            Configuration.find(str(tmp_path))

    def test_resolve_path(self):
        config = Configuration()
        assert config.resolve_path("/repo", "cache") == "/repo/cache"
        assert config.resolve_path("/repo", "/abs/cache") == "/abs/cache"


class TestLoadRcFile:
    """Validation of a single rc file."""

    def test_empty_file(self, tmp_path):
        path = tmp_path / ".wsfocusrc.yml"
        path.write_text("")
        assert load_rc_file(str(path)) == {}

    def test_unknown_key(self, tmp_path):
        path = tmp_path / ".wsfocusrc.yml"
        path.write_text("nodeLinker: pnp\n")
        with pytest.raises(ConfigurationError):
            load_rc_file(str(path))

    def test_wrong_type(self, tmp_path):
        path = tmp_path / ".wsfocusrc.yml"
        path.write_text("installCommand: yarn install\n")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_rc_file(str(path))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / ".wsfocusrc.yml"
        path.write_text("cacheFolder: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Failed to load config"):
            load_rc_file(str(path))
