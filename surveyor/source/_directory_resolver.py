# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
from typing import List, Sequence

from loguru import logger

from surveyor.utils.paths import root_path

from ._index import FileIndex, IndexedResolver, PathFilter

# pseudo filesystems that never hold installed software and can be huge or unreadable
_SYSTEM_ROOT_SKIPS = ("/proc", "/sys", "/dev")


def default_path_filters(root: str) -> List[PathFilter]:
    """Path filters applied when indexing ``root``; scanning "/" skips kernel pseudo filesystems."""
    if os.path.abspath(root) != os.path.abspath(os.sep):
        return []

    def skip_system_paths(path: str, _: bool) -> bool:
        return any(path == skip or path.startswith(skip + "/") for skip in _SYSTEM_ROOT_SKIPS)

    return [skip_system_paths]


def only_path_filter(path: str) -> PathFilter:
    """A path filter that admits nothing but ``path`` (and the directories leading to it)."""
    target = root_path(path)

    def skip_all_but(candidate: str, is_dir: bool) -> bool:
        if is_dir:
            return not target.startswith(candidate.rstrip("/") + "/")
        return candidate != target

    return skip_all_but


class DirectoryResolver(IndexedResolver):
    """Resolver over a directory tree on the host. Locations carry an empty file system id."""

    def __init__(self, root: str, path_filters: Sequence[PathFilter] = ()) -> None:
        if not os.path.isdir(root):
            raise NotADirectoryError(root)
        self.root = os.path.abspath(root)
        index = FileIndex()
        logger.info(f"Indexing directory {self.root}")
        index.add_tree(self.root, "", [*default_path_filters(self.root), *path_filters])
        super().__init__(index)


def new_file_resolver(path: str) -> DirectoryResolver:
    """Resolver for a single file: the file's parent directory, filtered down to that one file."""
    path = os.path.abspath(path)
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    parent, name = os.path.split(path)
    return DirectoryResolver(parent, path_filters=[only_path_filter(name)])
