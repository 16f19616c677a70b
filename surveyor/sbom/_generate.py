# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import dataclasses
from typing import List, Optional, Tuple

from loguru import logger

from surveyor.cataloger import CatalogerRegistry, catalog_source
from surveyor.config import CatalogerConfig
from surveyor.errors import CatalogerFailure
from surveyor.file import ContentsCataloger, FileDigestCataloger, FileMetadataCataloger, SecretsCataloger
from surveyor.linux import identify_release
from surveyor.source import Source

from ._sbom import SBOM, Descriptor, assemble_sbom


def generate_sbom(
    source: Source,
    config: Optional[CatalogerConfig] = None,
    registry: Optional[CatalogerRegistry] = None,
    descriptor: Optional[Descriptor] = None,
) -> Tuple[SBOM, List[CatalogerFailure]]:
    """
    Catalog packages and, as configured, file level artifacts of ``source`` and assemble them.

    Cataloger failures do not prevent an SBOM from being produced; they are returned next to it
    so callers can report them.
    """
    config = config or CatalogerConfig()
    result = catalog_source(source, config, registry)
    resolver = source.file_resolver()

    file_metadata = FileMetadataCataloger().catalog(resolver) if config.file_metadata else None
    file_digests = (
        FileDigestCataloger(config.digest_algorithms).catalog(resolver) if config.file_digests else None
    )
    file_contents = None
    if config.file_contents_globs:
        file_contents = ContentsCataloger(config.file_contents_globs, config.skip_files_above_size).catalog(
            resolver
        )
    secrets = None
    if config.secrets:
        secrets = SecretsCataloger(
            reveal_values=config.secrets_reveal_values, skip_files_above_size=config.skip_files_above_size
        ).catalog(resolver)

    release = identify_release(resolver)
    if release is not None:
        logger.info(f"Identified distro: {release.pretty_name or release.distro_qualifier()}")

    if descriptor is None:
        descriptor = Descriptor(configuration=dataclasses.asdict(config))
    sbom = assemble_sbom(
        source.metadata,
        result.catalog,
        result.relationships,
        file_metadata=file_metadata,
        file_digests=file_digests,
        file_contents=file_contents,
        secrets=secrets,
        linux_distribution=release,
        descriptor=descriptor,
    )
    return sbom, result.failures
