# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import dataclasses
from typing import List, Optional, Sequence, Tuple

import click
from loguru import logger

from surveyor.cataloger import new_registry
from surveyor.config import CatalogerConfig
from surveyor.plugin.manager import find_io_plugin, get_plugin_manager, plugin_short_name
from surveyor.sbom import generate_sbom
from surveyor.source import ImageMetadata, Layer, Source


def print_output_formats(ctx, _, value):
    if not value or ctx.resilient_parsing:
        return
    pm = get_plugin_manager()
    for plugin in pm.get_plugins():
        if hasattr(plugin, "write_sbom"):
            click.echo(plugin_short_name(pm, plugin) or pm.get_canonical_name(plugin))
    ctx.exit()


def parse_layers(values: Sequence[str]) -> List[Layer]:
    """Parse DIGEST=PATH layer arguments, lowest layer first."""
    layers = []
    for value in values:
        digest, sep, path = value.partition("=")
        if not sep or not digest or not path:
            raise click.BadParameter(f"expected DIGEST=PATH, got {value!r}", param_hint="--layer")
        layers.append(Layer(digest=digest, path=path))
    return layers


def make_source(target: str, layers: Sequence[str], exclusions: Sequence[str]) -> Source:
    if layers:
        image = ImageMetadata(user_input=target, layers=parse_layers(layers))
        return Source.from_image(image, exclusions)
    return Source.from_path(target, exclusions)


def _override(config: CatalogerConfig, **options) -> CatalogerConfig:
    """Apply the command line options that were given over the configured values."""
    given = {k: v for k, v in options.items() if v is not None and v != ()}
    for key in ("catalogers", "exclude", "digest_algorithms"):
        if key in given:
            given[key] = list(given[key])
    return dataclasses.replace(config, **given)


@click.command("scan")
@click.argument("target", type=str, required=True)
@click.argument("sbom_outfile", envvar="SBOM_OUTPUT", type=click.File("w"), required=True)
@click.option(
    "--catalogers",
    "-c",
    multiple=True,
    help="Only run catalogers whose names contain this word (repeatable, 'all' selects every cataloger).",
)
@click.option("--exclude", multiple=True, help="Glob of paths to hide from catalogers (repeatable).")
@click.option("--parallelism", type=click.IntRange(min=1), default=None, help="Number of catalogers run at once.")
@click.option(
    "--layer",
    "layers",
    multiple=True,
    help="DIGEST=PATH of an unpacked image layer, lowest first; TARGET then names the image.",
)
@click.option("--file_metadata/--no_file_metadata", default=None, help="Record metadata of every file.")
@click.option("--file_digests/--no_file_digests", default=None, help="Record digests of every file.")
@click.option("--digest_algorithm", "digest_algorithms", multiple=True, help="hashlib algorithm for file digests.")
@click.option("--secrets/--no_secrets", default=None, help="Search files for credentials and keys.")
@click.option("--output_format", default=None, help="Short name of the output plugin to use.")
@click.option(
    "--list_output_formats",
    is_flag=True,
    callback=print_output_formats,
    expose_value=False,
    is_eager=True,
    help="List supported output formats",
)
# pylint: disable-next=too-many-positional-arguments
def scan(
    target: str,
    sbom_outfile,
    catalogers: Tuple[str, ...],
    exclude: Tuple[str, ...],
    parallelism: Optional[int],
    layers: Tuple[str, ...],
    file_metadata: Optional[bool],
    file_digests: Optional[bool],
    digest_algorithms: Tuple[str, ...],
    secrets: Optional[bool],
    output_format: Optional[str],
):
    """Catalog the packages in TARGET and write an SBOM to SBOM_OUTFILE.

    TARGET is a directory or a file. With --layer options it is the name of an image whose
    layers have already been unpacked.
    """
    config = _override(
        CatalogerConfig.from_config_manager(),
        catalogers=catalogers,
        exclude=exclude,
        parallelism=parallelism,
        file_metadata=file_metadata,
        file_digests=file_digests,
        digest_algorithms=digest_algorithms,
        secrets=secrets,
        output_format=output_format,
    )

    pm = get_plugin_manager()
    output_writer = find_io_plugin(pm, config.output_format, "write_sbom")

    try:
        source = make_source(target, layers, config.exclude)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"unable to use {target} as a source: {e}") from e

    sbom, failures = generate_sbom(source, config, registry=new_registry(config, pm))
    for failure in failures:
        logger.warning(str(failure))

    output_writer.write_sbom(sbom=sbom, outfile=sbom_outfile)
    logger.info(f"Cataloged {sbom.artifacts.packages.package_count()} packages from {target}")
