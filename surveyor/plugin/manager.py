# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import sys
from typing import Any, Optional

import pluggy
from loguru import logger

from surveyor.configmanager import ConfigManager
from surveyor.plugin import hookspecs


def _register_plugins(pm: pluggy.PluginManager) -> None:
    # pylint: disable=import-outside-toplevel
    # the ecosystem modules import most of the package, keep them out of the module scope
    from surveyor.cataloger import alpine, debian, golang, javascript, python, rust
    from surveyor.output import json_writer

    internal_plugins = (
        alpine,
        debian,
        golang,
        javascript,
        python,
        rust,
        json_writer,
    )
    for plugin in internal_plugins:
        pm.register(plugin)


def set_blocked_plugins(pm: pluggy.PluginManager) -> None:
    """Unregisters and blocks every plugin named in the ``core.disable_plugins`` config option."""
    for plugin_name in ConfigManager().get("core", "disable_plugins", []):
        if pm.is_blocked(plugin_name):
            logger.info(f"Plugin '{plugin_name}' is already disabled.")
            continue
        if pm.unregister(name=plugin_name) is None:
            logger.info(f"Disabled plugin '{plugin_name}' not found.")
            continue
        pm.set_blocked(plugin_name)


def get_plugin_manager() -> pluggy.PluginManager:
    pm = pluggy.PluginManager("surveyor")
    pm.add_hookspecs(hookspecs)
    pm.load_setuptools_entrypoints("surveyor")
    _register_plugins(pm)
    set_blocked_plugins(pm)
    pm.check_pending()
    return pm


def is_hook_implemented(pm: pluggy.PluginManager, plugin: object, hook_name: str) -> bool:
    """
    Checks if a specific hook is implemented by a given plugin.

    Args:
        pm (pluggy.PluginManager): The plugin manager instance.
        plugin (object): The plugin object to check.
        hook_name (str): The name of the hook to check for implementation.

    Returns:
        bool: True if the hook is implemented by the plugin, False otherwise.
    """
    return any(caller.name == hook_name for caller in pm.get_hookcallers(plugin) or [])


def plugin_short_name(pm: pluggy.PluginManager, plugin: object) -> Optional[str]:
    if is_hook_implemented(pm, plugin, "short_name"):
        return plugin.short_name()
    return None


def print_plugins(pm: pluggy.PluginManager) -> None:
    print("PLUGINS")
    for plugin in pm.get_plugins():
        print(f"\t> name: {pm.get_name(plugin) or ''}")
        print(f"\t  canonical name: {pm.get_canonical_name(plugin)}")
        print(f"\t  short name: {plugin_short_name(pm, plugin)}\n")


def find_io_plugin(pm: pluggy.PluginManager, io_format: str, function_name: str) -> Optional[Any]:
    """
    Finds the output plugin registered as, or with a short name of, ``io_format`` that
    implements ``function_name``.

    Raises:
        SystemExit: If no such plugin is registered; the problem is logged first.
    """
    found_plugin = pm.get_plugin(io_format)
    if found_plugin is None:
        for plugin in pm.get_plugins():
            short_name = plugin_short_name(pm, plugin)
            if short_name and short_name.lower() == io_format.lower() and hasattr(plugin, function_name):
                found_plugin = plugin
                break

    if found_plugin is None:
        logger.error(f'No "{function_name}" plugin for format "{io_format}" found')
        sys.exit(1)

    return found_plugin
