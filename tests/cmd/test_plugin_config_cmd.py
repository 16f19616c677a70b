# pylint: disable=redefined-outer-name
import sys

import pytest
from click.testing import CliRunner
from loguru import logger

from surveyor.__main__ import main
from surveyor.configmanager import ConfigManager
from surveyor.plugin.manager import find_io_plugin, get_plugin_manager


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    monkeypatch.delenv("SURVEYOR_CORE_DISABLE_PLUGINS", raising=False)
    ConfigManager.delete_instance("surveyor")
    config_manager = ConfigManager(config_dir=tmp_path)
    yield config_manager
    ConfigManager.delete_instance("surveyor")
    logger.remove()
    logger.add(sys.stderr)


def test_disable_and_enable(config_manager):
    runner = CliRunner()
    result = runner.invoke(main, ["plugin", "disable", "surveyor.cataloger.rust", "other"])
    assert result.exit_code == 0, result.output
    assert config_manager.get("core", "disable_plugins") == ["surveyor.cataloger.rust", "other"]

    # disabling twice does not duplicate the entry
    runner.invoke(main, ["plugin", "disable", "other"])
    assert config_manager.get("core", "disable_plugins") == ["surveyor.cataloger.rust", "other"]

    result = runner.invoke(main, ["plugin", "enable", "other"])
    assert result.exit_code == 0, result.output
    assert config_manager.get("core", "disable_plugins") == ["surveyor.cataloger.rust"]


def test_plugin_names_required(config_manager):
    # pylint: disable=unused-argument
    assert CliRunner().invoke(main, ["plugin", "disable"]).exit_code != 0
    assert CliRunner().invoke(main, ["plugin", "enable"]).exit_code != 0


def test_disabled_plugin_is_unregistered(config_manager):
    assert get_plugin_manager().get_plugin("surveyor.cataloger.rust") is not None
    config_manager.set("core", "disable_plugins", ["surveyor.cataloger.rust"])
    pm = get_plugin_manager()
    assert pm.get_plugin("surveyor.cataloger.rust") is None
    assert pm.is_blocked("surveyor.cataloger.rust")


def test_plugin_list(config_manager):
    config_manager.set("core", "disable_plugins", ["surveyor.cataloger.rust"])
    result = CliRunner().invoke(main, ["plugin", "list"])
    assert result.exit_code == 0, result.output
    assert "DISABLED PLUGINS" in result.output
    assert "name: surveyor.cataloger.rust" in result.output


def test_find_io_plugin(config_manager):
    # pylint: disable=unused-argument
    pm = get_plugin_manager()
    assert find_io_plugin(pm, "JSON", "write_sbom") is pm.get_plugin("surveyor.output.json_writer")
    with pytest.raises(SystemExit):
        find_io_plugin(pm, "no-such-format", "write_sbom")


def test_config_set_and_get(config_manager):
    runner = CliRunner()
    result = runner.invoke(main, ["config", "catalog.parallelism", "4"])
    assert result.exit_code == 0, result.output
    assert config_manager.get("catalog", "parallelism") == 4

    result = runner.invoke(main, ["config", "catalog.catalogers", "go", "python"])
    assert result.exit_code == 0, result.output
    assert config_manager.get("catalog", "catalogers") == ["go", "python"]

    runner.invoke(main, ["config", "catalog.secrets", "true"])
    assert config_manager.get("catalog", "secrets") is True

    result = runner.invoke(main, ["config", "catalog.parallelism"])
    assert "catalog.parallelism = 4" in result.output
    result = runner.invoke(main, ["config", "catalog.missing"])
    assert "Configuration 'catalog.missing' not found." in result.output


def test_config_bad_key(config_manager):
    # pylint: disable=unused-argument
    assert CliRunner().invoke(main, ["config", "nodot"]).exit_code != 0
