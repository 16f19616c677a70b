# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from dataclasses_json import LetterCase, dataclass_json
from loguru import logger

from surveyor.utils.glob import glob_match
from surveyor.utils.ids import stable_id
from surveyor.utils.paths import root_path

from ._directory_resolver import DirectoryResolver, new_file_resolver
from ._excluding_resolver import ExcludeFn, ExcludingResolver
from ._image_resolver import ImageSquashResolver, Layer
from ._resolver import FileResolver

# exclusion patterns must be explicit about where they are anchored
_EXCLUSION_PREFIXES = ("/", "./", "*/", "**/")


class Scheme(str, Enum):
    IMAGE = "image"
    DIRECTORY = "directory"
    FILE = "file"
    UNKNOWN = "unknown"


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class ImageMetadata:
    user_input: str
    id: str = ""
    manifest_digest: str = ""
    media_type: str = ""
    tags: Optional[List[str]] = None
    size: int = 0
    layers: List[Layer] = field(default_factory=list)
    repo_digests: Optional[List[str]] = None
    architecture: str = ""
    variant: str = ""
    os: str = ""


@dataclass
class SourceMetadata:
    scheme: Scheme
    id: str = ""
    path: str = ""
    image_metadata: Optional[ImageMetadata] = None


def exclusion_function(patterns: Sequence[str]) -> Optional[ExcludeFn]:
    """
    Build a predicate over root anchored real paths from user supplied exclusion globs.

    Patterns must begin with "/", "./", "*/" or "**/"; "./" is anchored at the source root.

    Raises:
        ValueError: If a pattern is not anchored.
    """
    if not patterns:
        return None
    globs = []
    for pattern in patterns:
        if not pattern.startswith(_EXCLUSION_PREFIXES):
            raise ValueError(
                f'invalid exclude pattern {pattern!r}: must begin with "/", "./", "*/" or "**/"'
            )
        if pattern.startswith("./"):
            pattern = "/" + pattern[2:]
        elif pattern.startswith("*/"):
            pattern = "/" + pattern
        globs.append(pattern)

    def excluded(path: str) -> bool:
        path = root_path(path)
        return any(glob_match(g, path) for g in globs)

    return excluded


class Source:
    """
    An input that can be cataloged: a directory tree, a single file, or an image whose layers
    have already been unpacked by the image acquisition layer.
    """

    def __init__(
        self,
        metadata: SourceMetadata,
        *,
        root: Optional[str] = None,
        layers: Sequence[Layer] = (),
        exclusions: Sequence[str] = (),
    ) -> None:
        self.metadata = metadata
        self._root = root
        self._layers = tuple(layers)
        self._exclude_fn = exclusion_function(exclusions)
        self._resolver: Optional[FileResolver] = None

    @staticmethod
    def from_directory(path: str, exclusions: Sequence[str] = ()) -> Source:
        path = os.path.abspath(path)
        if not os.path.isdir(path):
            raise NotADirectoryError(path)
        metadata = SourceMetadata(Scheme.DIRECTORY, stable_id([Scheme.DIRECTORY.value, path]), path)
        return Source(metadata, root=path, exclusions=exclusions)

    @staticmethod
    def from_file(path: str, exclusions: Sequence[str] = ()) -> Source:
        path = os.path.abspath(path)
        if not os.path.isfile(path):
            raise FileNotFoundError(path)
        metadata = SourceMetadata(Scheme.FILE, stable_id([Scheme.FILE.value, path]), path)
        return Source(metadata, root=path, exclusions=exclusions)

    @staticmethod
    def from_image(image: ImageMetadata, exclusions: Sequence[str] = ()) -> Source:
        identity = image.manifest_digest or image.id or [layer.digest for layer in image.layers]
        metadata = SourceMetadata(
            Scheme.IMAGE, stable_id([Scheme.IMAGE.value, identity]), image_metadata=image
        )
        return Source(metadata, layers=image.layers, exclusions=exclusions)

    @staticmethod
    def from_path(path: str, exclusions: Sequence[str] = ()) -> Source:
        """Detect whether ``path`` is a directory or a file."""
        if os.path.isdir(path):
            return Source.from_directory(path, exclusions)
        return Source.from_file(path, exclusions)

    @property
    def scheme(self) -> Scheme:
        return self.metadata.scheme

    def file_resolver(self) -> FileResolver:
        """The (cached) resolver for this source, wrapped by an ExcludingResolver when exclusions were given."""
        if self._resolver is None:
            resolver: FileResolver
            if self.scheme == Scheme.DIRECTORY:
                resolver = DirectoryResolver(self._root)
            elif self.scheme == Scheme.FILE:
                resolver = new_file_resolver(self._root)
            elif self.scheme == Scheme.IMAGE:
                resolver = ImageSquashResolver(self._layers)
            else:
                raise ValueError(f"unable to resolve files for source scheme {self.scheme.value!r}")
            if self._exclude_fn is not None:
                logger.debug(f"Applying path exclusions to {self.scheme.value} source")
                resolver = ExcludingResolver(resolver, self._exclude_fn)
            self._resolver = resolver
        return self._resolver
