# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import sys

import click
from loguru import logger

from surveyor import __version__
from surveyor.cmd.catalogers import catalogers
from surveyor.cmd.config import config
from surveyor.cmd.plugin import plugin_disable_cmd, plugin_enable_cmd, plugin_list_cmd
from surveyor.cmd.scan import scan
from surveyor.cmd.schema import schema


@click.group()
@click.version_option(__version__, "--version", "-v", message="%(version)s")
@click.option(
    "--log-level",
    type=click.Choice(
        ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        case_sensitive=False,
    ),
    default="INFO",
)
def main(log_level="INFO"):
    # Can't change the logging level; need to remove and add a new logger with the desired log level
    logger.remove()
    logger.add(sys.stderr, level=log_level)


@main.group("plugin")
def plugin():
    """Manage plugins."""


main.add_command(scan)
main.add_command(catalogers)
main.add_command(schema)
main.add_command(config)
main.add_command(plugin)

plugin.add_command(plugin_list_cmd)
plugin.add_command(plugin_enable_cmd)
plugin.add_command(plugin_disable_cmd)


if __name__ == "__main__":
    main()
