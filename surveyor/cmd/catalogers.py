# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import Tuple

import click

from surveyor.cataloger import new_registry
from surveyor.config import CatalogerConfig


@click.command("catalogers")
@click.option(
    "--select",
    "-c",
    "patterns",
    multiple=True,
    help="Show only catalogers selected by this pattern (repeatable).",
)
def catalogers(patterns: Tuple[str, ...]):
    """List the catalogers applied to image and to directory sources."""
    registry = new_registry(CatalogerConfig.from_config_manager())
    for title, selected in (
        ("IMAGE CATALOGERS", registry.image_catalogers(patterns)),
        ("DIRECTORY CATALOGERS", registry.directory_catalogers(patterns)),
    ):
        click.echo(title)
        if not selected:
            click.echo("\t(none)")
        for cataloger in selected:
            click.echo(f"\t{cataloger.name()}")
