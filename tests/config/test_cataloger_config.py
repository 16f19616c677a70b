import pytest

from surveyor.config import CatalogerConfig
from surveyor.configmanager import ConfigManager


@pytest.fixture(name="config_manager")
def fixture_config_manager(tmp_path):
    config_manager = ConfigManager(app_name="surveyortest", config_dir=tmp_path)
    yield config_manager
    ConfigManager.delete_instance("surveyortest")


def test_defaults():
    config = CatalogerConfig()
    assert config.catalogers == []
    assert config.parallelism == 1
    assert config.digest_algorithms == ["sha256"]
    assert config.output_format == "json"
    assert not config.python_guess_unpinned_requirements
    assert config.skip_files_above_size == 1024 * 1024


@pytest.mark.parametrize("parallelism", [0, -3])
def test_parallelism_must_be_positive(parallelism):
    with pytest.raises(ValueError):
        CatalogerConfig(parallelism=parallelism)


def test_empty_config_file_gives_defaults(config_manager):
    assert CatalogerConfig.from_config_manager(config_manager) == CatalogerConfig()


def test_from_config_file(config_manager):
    config_manager.set("catalog", "catalogers", "go, python,")
    config_manager.set("catalog", "parallelism", 4)
    config_manager.set("catalog", "exclude", ["**/node_modules/**"])
    config_manager.set("catalog", "file_digests", True)
    config_manager.set("catalog", "digest_algorithms", ["sha1", "sha256"])
    config_manager.set("python", "guess_unpinned_requirements", True)

    config = CatalogerConfig.from_config_manager(config_manager)
    assert config.catalogers == ["go", "python"]
    assert config.parallelism == 4
    assert config.exclude == ["**/node_modules/**"]
    assert config.file_digests
    assert not config.file_metadata
    assert config.digest_algorithms == ["sha1", "sha256"]
    assert config.python_guess_unpinned_requirements


def test_environment_overrides_config_file(config_manager, monkeypatch):
    config_manager.set("catalog", "parallelism", 4)
    monkeypatch.setenv("SURVEYORTEST_CATALOG_PARALLELISM", "2")
    monkeypatch.setenv("SURVEYORTEST_CATALOG_SECRETS", "true")
    config = CatalogerConfig.from_config_manager(config_manager)
    assert config.parallelism == 2
    assert config.secrets


def test_invalid_parallelism_in_config_file(config_manager):
    config_manager.set("catalog", "parallelism", 0)
    with pytest.raises(ValueError):
        CatalogerConfig.from_config_manager(config_manager)
