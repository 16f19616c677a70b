# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

from typing import List, Optional

from pluggy import HookspecMarker

from surveyor.cataloger._cataloger import Cataloger
from surveyor.config import CatalogerConfig
from surveyor.sbom import SBOM

hookspec = HookspecMarker("surveyor")


@hookspec
def image_catalogers(config: CatalogerConfig) -> Optional[List[Cataloger]]:
    """Contribute catalogers that should run when the source is a container image.

    Catalogers for an image look at what is installed (package databases, installed
    distributions) rather than at what a build would fetch (lock files, manifests).

    Args:
        config (CatalogerConfig): The active cataloging configuration, for catalogers that
            take options.

    Returns:
        Optional[List[Cataloger]]: The catalogers to add to the registry, or None.
    """


@hookspec
def directory_catalogers(config: CatalogerConfig) -> Optional[List[Cataloger]]:
    """Contribute catalogers that should run when the source is a directory or a single file.

    Args:
        config (CatalogerConfig): The active cataloging configuration.

    Returns:
        Optional[List[Cataloger]]: The catalogers to add to the registry, or None.
    """


@hookspec
def write_sbom(sbom: SBOM, outfile) -> None:
    """Writes the contents of the SBOM to the given output file.

    Args:
        sbom (SBOM): The SBOM to write to the output file.
        outfile: The output file handle to write the SBOM to.
    """


@hookspec
def short_name() -> Optional[str]:
    """A short name to register the hook as.

    Returns:
        Optional[str]: The name to register the hook with.
    """
