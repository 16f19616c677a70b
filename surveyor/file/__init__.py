# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._contents import ContentsCataloger
from ._digest import FileDigestCataloger, calc_file_digests
from ._metadata import FileMetadataCataloger
from ._secrets import DEFAULT_SECRET_PATTERNS, SearchResult, SecretsCataloger

__all__ = [
    "FileMetadataCataloger",
    "FileDigestCataloger",
    "calc_file_digests",
    "ContentsCataloger",
    "SecretsCataloger",
    "SearchResult",
    "DEFAULT_SECRET_PATTERNS",
]
