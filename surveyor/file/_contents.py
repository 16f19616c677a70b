# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import base64
from typing import Dict, Sequence

from loguru import logger

from surveyor.errors import NotFoundError
from surveyor.source import Coordinates, FileResolver

DEFAULT_SKIP_FILES_ABOVE_SIZE = 1024 * 1024


class ContentsCataloger:
    """Captures the base64 encoded content of files matching a set of globs."""

    def __init__(self, globs: Sequence[str], skip_files_above_size: int = DEFAULT_SKIP_FILES_ABOVE_SIZE) -> None:
        self.globs = list(globs)
        self.skip_files_above_size = skip_files_above_size

    def catalog(self, resolver: FileResolver) -> Dict[Coordinates, str]:
        results: Dict[Coordinates, str] = {}
        if not self.globs:
            return results
        for location in resolver.files_by_glob(*self.globs):
            try:
                metadata = resolver.file_metadata_by_location(location)
                if self.skip_files_above_size > 0 and metadata.size > self.skip_files_above_size:
                    logger.debug(f"Skipping contents of {location.real_path}: {metadata.size} bytes")
                    continue
                with resolver.file_contents_by_location(location) as reader:
                    results[location.coordinates] = base64.b64encode(reader.read()).decode("ascii")
            except NotFoundError as e:
                logger.debug(f"Skipping contents of {location.real_path}: {e}")
        return results
