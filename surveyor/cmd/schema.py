# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import click

from surveyor import schema as json_schema
from surveyor.errors import SchemaConflictError


@click.command("schema")
@click.option(
    "--output_dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory to write schema-<version>.json to.",
)
def schema(output_dir: str):
    """Generate the JSON schema of the surveyor-json output format."""
    try:
        path = json_schema.write(json_schema.encode(json_schema.build()), output_dir)
    except SchemaConflictError as e:
        raise click.ClickException(str(e)) from e
    click.echo(str(path))
