# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

import os
import posixpath
import threading
from collections import deque
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from loguru import logger

from surveyor.errors import NotFoundError
from surveyor.utils.glob import glob_match
from surveyor.utils.paths import basename_posix, root_path

from ._file_metadata import FileMetadata, FileType, sniff_mime_type
from ._location import Location
from ._resolver import FileResolver, stream_locations

# returns True when the path (root anchored) should be left out of the index
PathFilter = Callable[[str, bool], bool]

WHITEOUT_PREFIX = ".wh."
OPAQUE_WHITEOUT = ".wh..wh..opq"
MAX_LINK_HOPS = 40
_MIME_SAMPLE_SIZE = 512


@dataclass(frozen=True)
class IndexEntry:
    path: str
    host_path: str
    file_system_id: str
    type: FileType
    link_target: str = ""


class FileIndex:
    """
    A squashed, root anchored view of one or more directory trees.

    Trees are added bottom-up; entries from a later tree replace entries at the same path and
    OCI whiteout markers in a later tree hide entries of the earlier trees.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, IndexEntry] = {}
        self._sorted_paths: Optional[List[str]] = None
        self._mime_types: Dict[str, Optional[str]] = {}
        self._lock = threading.Lock()

    def add_tree(
        self,
        tree_root: str,
        file_system_id: str = "",
        path_filters: Sequence[PathFilter] = (),
        whiteouts: bool = False,
    ) -> None:
        tree_root = os.path.abspath(tree_root)

        def on_error(err: OSError) -> None:
            logger.warning(f"Unable to index {err.filename}: {err.strerror}")

        for cdir, dirs, files in os.walk(tree_root, topdown=True, onerror=on_error):
            rel_dir = root_path(os.path.relpath(cdir, tree_root).replace(os.sep, "/"))
            if whiteouts and OPAQUE_WHITEOUT in files:
                self._hide_children(rel_dir, keep=file_system_id)

            kept_dirs = []
            for name in dirs:
                path = posixpath.join(rel_dir, name)
                host_path = os.path.join(cdir, name)
                is_link = os.path.islink(host_path)
                if any(skip(path, not is_link) for skip in path_filters):
                    logger.trace(f"Skipping {path} by path filter")
                    continue
                self._add(path, host_path, file_system_id)
                if not is_link:
                    kept_dirs.append(name)
            # pruning in place keeps os.walk from descending into filtered directories
            dirs[:] = kept_dirs

            for name in files:
                path = posixpath.join(rel_dir, name)
                if whiteouts and name == OPAQUE_WHITEOUT:
                    continue
                if whiteouts and name.startswith(WHITEOUT_PREFIX):
                    self._hide(posixpath.join(rel_dir, name[len(WHITEOUT_PREFIX) :]), keep=file_system_id)
                    continue
                if any(skip(path, False) for skip in path_filters):
                    logger.trace(f"Skipping {path} by path filter")
                    continue
                self._add(path, os.path.join(cdir, name), file_system_id)

        with self._lock:
            self._sorted_paths = None
        logger.debug(f"Indexed {tree_root} (layer={file_system_id!r}), {len(self._entries)} paths in view")

    def _add(self, path: str, host_path: str, file_system_id: str) -> None:
        try:
            fstats = os.lstat(host_path)
        except OSError as e:
            logger.warning(f"Unable to stat {host_path}: {e}")
            return
        file_type = FileType.from_mode(fstats.st_mode)
        link_target = os.readlink(host_path) if file_type == FileType.SYMLINK else ""
        previous = self._entries.get(path)
        if previous is not None and previous.type == FileType.DIRECTORY and file_type != FileType.DIRECTORY:
            # a file replacing a directory also replaces everything below it
            self._hide_children(path, keep=file_system_id)
        self._entries[path] = IndexEntry(path, host_path, file_system_id, file_type, link_target)

    def _hide(self, path: str, keep: str) -> None:
        entry = self._entries.get(path)
        if entry is not None and entry.file_system_id != keep:
            del self._entries[path]
        self._hide_children(path, keep)

    def _hide_children(self, path: str, keep: str) -> None:
        prefix = path.rstrip("/") + "/"
        for child in [p for p, e in self._entries.items() if p.startswith(prefix) and e.file_system_id != keep]:
            del self._entries[child]

    def entry(self, path: str) -> Optional[IndexEntry]:
        return self._entries.get(path)

    def paths(self) -> List[str]:
        with self._lock:
            if self._sorted_paths is None:
                self._sorted_paths = sorted(self._entries)
            return self._sorted_paths

    def __contains__(self, path: str) -> bool:
        return path == "/" or path in self._entries

    def resolve(self, path: str) -> Optional[IndexEntry]:
        """
        Follow symlinks (including symlinked parent directories) to the entry a path refers to.

        Absolute link targets are interpreted relative to the root of the view and '..' never
        climbs above it. Returns None for dangling links, cycles, and paths that do not exist.
        """
        pending = deque(root_path(path).split("/"))
        resolved = ""
        hops = 0
        entry: Optional[IndexEntry] = None
        while pending:
            part = pending.popleft()
            if part in ("", "."):
                continue
            if part == "..":
                resolved = posixpath.dirname(resolved) if resolved else ""
                resolved = "" if resolved == "/" else resolved
                entry = self._entries.get(resolved) if resolved else None
                continue
            candidate = f"{resolved}/{part}"
            entry = self._entries.get(candidate)
            if entry is None:
                return None
            if entry.type == FileType.SYMLINK:
                hops += 1
                if hops > MAX_LINK_HOPS:
                    logger.warning(f"Too many levels of symbolic links resolving {path}")
                    return None
                if entry.link_target.startswith("/"):
                    resolved = ""
                pending.extendleft(reversed(entry.link_target.split("/")))
                continue
            if pending and entry.type != FileType.DIRECTORY:
                # a regular file used as a directory
                return None
            resolved = candidate
        return entry

    def mime_type(self, entry: IndexEntry) -> Optional[str]:
        if entry.type != FileType.REGULAR:
            return None
        with self._lock:
            if entry.path in self._mime_types:
                return self._mime_types[entry.path]
        try:
            with open(entry.host_path, "rb") as f:
                mime = sniff_mime_type(f.read(_MIME_SAMPLE_SIZE))
        except OSError as e:
            logger.debug(f"Unable to read {entry.host_path} for MIME detection: {e}")
            mime = None
        with self._lock:
            self._mime_types[entry.path] = mime
        return mime


class IndexedResolver(FileResolver):
    """A FileResolver answering every query from a FileIndex."""

    def __init__(self, index: FileIndex) -> None:
        self._index = index

    def _location_for(self, path: str) -> Optional[Location]:
        entry = self._index.resolve(path)
        if entry is None or entry.type == FileType.DIRECTORY:
            return None
        return Location.new_virtual(entry.path, path, entry.file_system_id, ref=entry)

    def _locations_where(self, predicate: Callable[[str], bool]) -> List[Location]:
        results: Dict[Location, None] = {}
        for path in self._index.paths():
            if not predicate(path):
                continue
            location = self._location_for(path)
            if location is not None:
                results.setdefault(location, None)
        return list(results)

    def files_by_path(self, *paths: str) -> List[Location]:
        results: Dict[Location, None] = {}
        for path in paths:
            location = self._location_for(root_path(path))
            if location is not None:
                results.setdefault(location, None)
        return list(results)

    def files_by_glob(self, *patterns: str) -> List[Location]:
        return self._locations_where(lambda path: any(glob_match(p, path) for p in patterns))

    def files_by_mime_type(self, *types: str) -> List[Location]:
        wanted = set(types)
        results: Dict[Location, None] = {}
        for path in self._index.paths():
            location = self._location_for(path)
            if location is None:
                continue
            entry = self._index.entry(location.real_path)
            if entry is not None and self._index.mime_type(entry) in wanted:
                results.setdefault(location, None)
        return list(results)

    def files_by_extension(self, *extensions: str) -> List[Location]:
        return self._locations_where(lambda path: basename_posix(path).endswith(tuple(extensions)))

    def files_by_basename(self, *names: str) -> List[Location]:
        wanted = set(names)
        return self._locations_where(lambda path: basename_posix(path) in wanted)

    def files_by_basename_glob(self, *patterns: str) -> List[Location]:
        return self._locations_where(
            lambda path: any(glob_match(p, basename_posix(path)) for p in patterns)
        )

    def _entry_for(self, location: Location) -> IndexEntry:
        entry = self._index.entry(location.real_path)
        if entry is None:
            raise NotFoundError(location.real_path, "no such file in source")
        if location.file_system_id and entry.file_system_id != location.file_system_id:
            raise NotFoundError(location.real_path, f"not present in layer {location.file_system_id}")
        return entry

    def file_contents_by_location(self, location: Location) -> BinaryIO:
        entry = self._entry_for(location)
        if entry.type == FileType.SYMLINK:
            resolved = self._index.resolve(entry.path)
            if resolved is None:
                raise NotFoundError(location.real_path, "dangling symbolic link")
            entry = resolved
        if entry.type == FileType.DIRECTORY:
            raise NotFoundError(location.real_path, "is a directory")
        try:
            return open(entry.host_path, "rb")
        except OSError as e:
            raise NotFoundError(location.real_path, str(e)) from e

    def file_metadata_by_location(self, location: Location) -> FileMetadata:
        entry = self._entry_for(location)
        try:
            fstats = os.lstat(entry.host_path)
        except OSError as e:
            raise NotFoundError(location.real_path, str(e)) from e
        return FileMetadata.from_stat(
            fstats, link_destination=entry.link_target, mime_type=self._index.mime_type(entry) or ""
        )

    def has_path(self, path: str) -> bool:
        return root_path(path) in self._index

    def relative_file_by_path(self, base: Location, path: str) -> Optional[Location]:
        if not path.startswith("/"):
            path = posixpath.join(posixpath.dirname(root_path(base.real_path)), path)
        locations = self.files_by_path(path)
        return locations[0] if locations else None

    def _enumerate(self) -> Iterable[Location]:
        for path in self._index.paths():
            entry = self._index.entry(path)
            if entry is None or entry.type == FileType.DIRECTORY:
                continue
            yield Location.new(entry.path, entry.file_system_id, ref=entry)

    def all_locations(self) -> Iterator[Location]:
        return stream_locations(self._enumerate)
