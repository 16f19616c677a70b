# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import Any, List, Optional, Tuple

import click

from surveyor.configmanager import ConfigManager


def _split_key(key: str) -> Tuple[str, str]:
    try:
        section, option = key.split(".", 1)
    except ValueError as err:
        raise SystemExit("Invalid KEY given. Is it in the format 'section.option'?") from err
    return section, option


def _convert(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    return value


@click.command("config")
@click.argument("key", required=True)
@click.argument("values", nargs=-1)
def config(key: str, values: Optional[List[str]]):
    """Get or set a configuration value.

    With only KEY the current value is shown; with VALUES the value is set. KEY is in the format
    'section.option', for example 'catalog.parallelism'. Several VALUES are stored as a list.
    """
    config_manager = ConfigManager()
    section, option = _split_key(key)

    if not values:
        result = config_manager.get(section, option)
        if result is None:
            click.echo(f"Configuration '{key}' not found.")
        else:
            click.echo(f"{key} = {result}")
        return

    converted = [_convert(v) for v in values]
    final_value = converted[0] if len(converted) == 1 else converted
    config_manager.set(section, option, final_value)
    click.echo(f"Configuration '{key}' set to '{final_value}'.")
