# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
import platform
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

import tomlkit
from tomlkit.exceptions import TOMLKitError


class ConfigManager:
    """Settings for an application, read from a TOML file and the environment.

    A setting is looked up first in the environment, as ``<APP>_<SECTION>_<OPTION>`` in upper
    case (``SURVEYOR_CORE_PARALLELISM=4``), then in the configuration file. Environment values are
    parsed as TOML values when they parse, and kept as plain strings otherwise. The file is read
    once and cached, so edits made while a program runs are not seen.

    Attributes:
        app_name (str): The name of the application. (Default: 'surveyor')
        config (tomlkit.TOMLDocument): The loaded configuration; formatting and comments are kept on save.
        config_file_path (Path): The path to the configuration file.
    """

    _initialized: bool = False
    _instances: Dict[str, "ConfigManager"] = {}
    _lock = Lock()

    def __new__(
        cls, app_name: str = "surveyor", config_dir: Optional[Union[str, Path]] = None
    ) -> "ConfigManager":
        """One instance per application name; ``config_dir`` only matters on first creation."""
        with cls._lock:
            if app_name not in cls._instances:
                instance = super(ConfigManager, cls).__new__(cls)
                instance._initialized = False
                cls._instances[app_name] = instance
            return cls._instances[app_name]

    def __init__(
        self, app_name: str = "surveyor", config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        if self._initialized:
            return
        self._initialized = True

        self.app_name = app_name
        self.config_file_path = self._get_config_file_path(config_dir)
        self.config = tomlkit.document()
        if self.config_file_path.exists():
            with open(self.config_file_path, "r") as configfile:
                self.config = tomlkit.parse(configfile.read())

    def _get_config_file_path(self, config_dir: Optional[Union[str, Path]] = None) -> Path:
        if config_dir:
            base = Path(config_dir)
        elif platform.system() == "Windows":
            base = Path(os.getenv("APPDATA", str(Path("~\\AppData\\Roaming"))))
        else:
            base = Path(os.getenv("XDG_CONFIG_HOME", str(Path("~/.config"))))
        return (base / self.app_name / "config.toml").expanduser()

    def env_var(self, section: str, option: str) -> str:
        """Name of the environment variable that overrides ``section.option``."""
        return "_".join((self.app_name, section, option)).upper().replace("-", "_")

    def get(self, section: str, option: str, fallback: Optional[Any] = None) -> Any:
        """Gets a configuration value.

        Args:
            section (str): The section within the configuration file.
            option (str): The option within the section.
            fallback (Optional[Any]): The value returned when the option is set nowhere.

        Returns:
            Any: The environment override, the file value, or the fallback value.
        """
        raw = os.environ.get(self.env_var(section, option))
        if raw is not None:
            try:
                return tomlkit.value(raw).unwrap()
            except TOMLKitError:
                return raw
        value = self.config.get(section, {}).get(option, fallback)
        return value.unwrap() if hasattr(value, "unwrap") else value

    def set(self, section: str, option: str, value: Any) -> None:
        """Sets a configuration value and writes the configuration file."""
        if section not in self.config:
            self.config[section] = tomlkit.table()
        self.config[section][option] = value
        self._save_config()

    def _save_config(self) -> None:
        self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file_path, "w") as configfile:
            configfile.write(tomlkit.dumps(self.config))

    def __getitem__(self, key: str) -> Any:
        """Dictionary-like access to a whole section; None when the section does not exist."""
        if key not in self.config:
            return None
        return self.config[key]

    @classmethod
    def delete_instance(cls, app_name: str) -> None:
        with cls._lock:
            cls._instances.pop(app_name, None)
