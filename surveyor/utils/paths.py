# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import pathlib
import posixpath
from typing import Union


def normalize_path(*path_parts: Union[str, pathlib.PurePosixPath]) -> str:
    """
    Normalize one or more path parts into a single POSIX-style path string.

    Args:
        *path_parts: One or more path components, strings or PurePath objects.

    Returns:
        str: POSIX-style normalized path (e.g., 'usr/lib/libc.so')
    """
    # Replace backslashes in string parts before joining; a PurePosixPath may legitimately contain them
    cleaned_parts = [p if isinstance(p, pathlib.PurePath) else str(p).replace("\\", "/") for p in path_parts]
    return pathlib.PurePosixPath(*cleaned_parts).as_posix()


def root_path(*path_parts: Union[str, pathlib.PurePosixPath]) -> str:
    """
    Anchor a path at the root of a source, collapsing '.' and '..' segments.

    '..' segments never climb above the root, so the result always names something inside the source.

    Examples:
        root_path("app/go.mod") -> "/app/go.mod"
        root_path("/a/../../b") -> "/b"
    """
    joined = normalize_path(*path_parts) if path_parts else ""
    return posixpath.normpath("/" + joined.lstrip("/")).replace("//", "/")


def basename_posix(path: Union[str, pathlib.PurePath]) -> str:
    """
    Return the POSIX-style basename of a path. Never raises for string inputs.
    - Uses normalize_path for consistent slash handling.
    - Strips trailing slash for non-root paths so 'dir/' -> 'dir'.
    """
    s = normalize_path(path)
    if s and s != "/":
        s = s.rstrip("/")
    return pathlib.PurePosixPath(s).name
