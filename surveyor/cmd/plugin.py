# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import click

from surveyor.configmanager import ConfigManager
from surveyor.plugin.manager import get_plugin_manager, print_plugins

SECTION = "core"
SECTION_KEY = "disable_plugins"


def _blocked_plugins(config_manager: ConfigManager) -> list:
    current = config_manager.get(SECTION, SECTION_KEY, [])
    if isinstance(current, str):
        current = [current]
    return list(current)


@click.command(name="list")
def plugin_list_cmd():
    """Lists plugins."""
    print_plugins(get_plugin_manager())

    blocked = _blocked_plugins(ConfigManager())
    print("\nDISABLED PLUGINS")
    if not blocked:
        print("\tThere are no disabled plugins.")
    for disabled_plugin in blocked:
        print(f"\tname: {disabled_plugin}")


@click.command(name="enable")
@click.argument("plugin_names", nargs=-1)
def plugin_enable_cmd(plugin_names):
    """Enables one or more plugins."""
    if not plugin_names:
        raise click.UsageError("At least one plugin name must be specified.")
    config_manager = ConfigManager()
    blocked = [p for p in _blocked_plugins(config_manager) if p not in plugin_names]
    config_manager.set(SECTION, SECTION_KEY, blocked)
    click.echo(f"Updated blocked plugins: {blocked}")


@click.command(name="disable")
@click.argument("plugin_names", nargs=-1)
def plugin_disable_cmd(plugin_names):
    """Disables one or more plugins."""
    if not plugin_names:
        raise click.UsageError("At least one plugin name must be specified.")
    config_manager = ConfigManager()
    blocked = _blocked_plugins(config_manager)
    blocked.extend(p for p in plugin_names if p not in blocked)
    config_manager.set(SECTION, SECTION_KEY, blocked)
    click.echo(f"Updated blocked plugins: {blocked}")
