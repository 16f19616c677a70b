# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import BinaryIO, Callable, Iterator, List, Optional

from surveyor.errors import NotFoundError

from ._file_metadata import FileMetadata
from ._location import Location
from ._resolver import FileResolver

ExcludeFn = Callable[[str], bool]


class ExcludingResolver(FileResolver):
    """
    Wraps any FileResolver and hides every path for which ``exclude_fn`` returns True.

    Exclusion is indistinguishable from absence: excluded locations are dropped from every query
    and enumeration, and reading content or metadata of one raises NotFoundError even though the
    wrapped resolver could serve it.
    """

    def __init__(self, resolver: FileResolver, exclude_fn: ExcludeFn) -> None:
        self._resolver = resolver
        self._exclude_fn = exclude_fn

    def _visible(self, locations: List[Location]) -> List[Location]:
        return [location for location in locations if not self._excluded(location)]

    def _excluded(self, location: Location) -> bool:
        return self._exclude_fn(location.real_path)

    def files_by_path(self, *paths: str) -> List[Location]:
        return self._visible(self._resolver.files_by_path(*paths))

    def files_by_glob(self, *patterns: str) -> List[Location]:
        return self._visible(self._resolver.files_by_glob(*patterns))

    def files_by_mime_type(self, *types: str) -> List[Location]:
        return self._visible(self._resolver.files_by_mime_type(*types))

    def files_by_extension(self, *extensions: str) -> List[Location]:
        return self._visible(self._resolver.files_by_extension(*extensions))

    def files_by_basename(self, *names: str) -> List[Location]:
        return self._visible(self._resolver.files_by_basename(*names))

    def files_by_basename_glob(self, *patterns: str) -> List[Location]:
        return self._visible(self._resolver.files_by_basename_glob(*patterns))

    def file_contents_by_location(self, location: Location) -> BinaryIO:
        if self._excluded(location):
            raise NotFoundError(location.real_path, "excluded")
        return self._resolver.file_contents_by_location(location)

    def file_metadata_by_location(self, location: Location) -> FileMetadata:
        if self._excluded(location):
            raise NotFoundError(location.real_path, "excluded")
        return self._resolver.file_metadata_by_location(location)

    def has_path(self, path: str) -> bool:
        if self._exclude_fn(path):
            return False
        return self._resolver.has_path(path)

    def relative_file_by_path(self, base: Location, path: str) -> Optional[Location]:
        location = self._resolver.relative_file_by_path(base, path)
        if location is None or self._excluded(location):
            return None
        return location

    def all_locations(self) -> Iterator[Location]:
        locations = self._resolver.all_locations()
        try:
            for location in locations:
                if not self._excluded(location):
                    yield location
        finally:
            # closing the wrapped enumeration stops its producer when the consumer stops early
            close = getattr(locations, "close", None)
            if close is not None:
                close()
