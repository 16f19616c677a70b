import os
import platform
from pathlib import Path

import pytest

from surveyor.configmanager import ConfigManager


@pytest.fixture(name="config_manager")
def fixture_config_manager(tmp_path):
    # Use the tmp_path fixture for the temporary directory
    config_manager = ConfigManager(app_name="testapp", config_dir=tmp_path)
    yield config_manager
    # Cleanup after test
    ConfigManager.delete_instance("testapp")


def test_singleton(config_manager):
    config_manager2 = ConfigManager(app_name="testapp")
    assert config_manager is config_manager2


def test_set_and_get(config_manager):
    config_manager.set("catalog", "output_format", "json")
    assert config_manager.get("catalog", "output_format") == "json"


def test_set_and_get_list(config_manager):
    config_manager.set("catalog", "catalogers", ["go", "python"])
    assert config_manager.get("catalog", "catalogers") == ["go", "python"]


def test_set_and_getitem(config_manager):
    config_manager.set("catalog", "output_format", "json")
    assert config_manager["catalog"]["output_format"] == "json"
    assert config_manager["missing"] is None


def test_get_with_fallback(config_manager):
    assert config_manager.get("catalog", "parallelism", fallback=4) == 4


def test_config_file_creation(config_manager, tmp_path):
    config_manager.set("catalog", "parallelism", 2)
    assert config_manager.config_file_path == tmp_path / "testapp" / "config.toml"
    assert config_manager.config_file_path.exists()


def test_environment_overrides_file(config_manager, monkeypatch):
    config_manager.set("catalog", "parallelism", 2)
    assert config_manager.env_var("catalog", "parallelism") == "TESTAPP_CATALOG_PARALLELISM"

    monkeypatch.setenv("TESTAPP_CATALOG_PARALLELISM", "8")
    assert config_manager.get("catalog", "parallelism") == 8

    monkeypatch.setenv("TESTAPP_CATALOG_CATALOGERS", '["go", "rust"]')
    assert config_manager.get("catalog", "catalogers") == ["go", "rust"]

    # values that are not TOML are taken as plain strings
    monkeypatch.setenv("TESTAPP_CATALOG_OUTPUT_FORMAT", "json")
    assert config_manager.get("catalog", "output_format") == "json"


@pytest.mark.skipif(platform.system() == "Windows", reason="Test specific to Unix-like platforms")
def test_unix_config_path():
    config_manager = ConfigManager(app_name="testapp")
    config_path = config_manager._get_config_file_path()  # pylint: disable=protected-access
    expected_config_dir = Path(os.getenv("XDG_CONFIG_HOME", str(Path("~/.config").expanduser())))
    assert expected_config_dir in config_path.parents
    assert config_path.parts[-2:] == ("testapp", "config.toml")
    # delete instance so other tests don't accidentally use it
    config_manager.delete_instance("testapp")


def test_preserve_comments(tmp_path):
    config_manager = ConfigManager(app_name="testapp", config_dir=tmp_path)
    config_manager.set("catalog", "output_format", "json")
    with open(config_manager.config_file_path, "a") as configfile:
        configfile.write("\n# This is a comment\n")
    ConfigManager.delete_instance("testapp")

    # a fresh instance reads the file again
    config_manager = ConfigManager(app_name="testapp", config_dir=tmp_path)
    assert config_manager.get("catalog", "output_format") == "json"
    config_manager.set("catalog", "parallelism", 2)
    with open(config_manager.config_file_path, "r") as configfile:
        content = configfile.read()
    assert "# This is a comment" in content
    ConfigManager.delete_instance("testapp")


def test_multiple_instances(tmp_path):
    # Make sure two separate config managers can more or less co-exist peacefully
    config_manager1 = ConfigManager(app_name="testapp1", config_dir=tmp_path)
    config_manager2 = ConfigManager(app_name="testapp2", config_dir=tmp_path)
    config_manager1.set("Settings", "theme", "dark")
    config_manager2.set("Settings", "theme", "light")
    assert config_manager1.get("Settings", "theme") == "dark"
    assert config_manager2.get("Settings", "theme") == "light"
    assert config_manager1.config_file_path != config_manager2.config_file_path
    ConfigManager.delete_instance("testapp1")
    ConfigManager.delete_instance("testapp2")
