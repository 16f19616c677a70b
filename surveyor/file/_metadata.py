# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import Dict

from loguru import logger

from surveyor.errors import NotFoundError
from surveyor.source import Coordinates, FileMetadata, FileResolver


class FileMetadataCataloger:
    """Records the metadata of every file a resolver can see."""

    def catalog(self, resolver: FileResolver) -> Dict[Coordinates, FileMetadata]:
        results: Dict[Coordinates, FileMetadata] = {}
        for location in resolver.all_locations():
            try:
                results[location.coordinates] = resolver.file_metadata_by_location(location)
            except NotFoundError as e:
                logger.debug(f"Skipping metadata of {location.real_path}: {e}")
        logger.info(f"Cataloged metadata of {len(results)} files")
        return results
