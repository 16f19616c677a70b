# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._directory_resolver import DirectoryResolver, new_file_resolver
from ._excluding_resolver import ExcludeFn, ExcludingResolver
from ._file_metadata import FileDigest, FileMetadata, FileType, sniff_mime_type
from ._image_resolver import ImageSquashResolver, Layer
from ._index import FileIndex, IndexedResolver
from ._location import Coordinates, Location, LocationSet
from ._resolver import FileResolver, stream_locations
from ._source import ImageMetadata, Scheme, Source, SourceMetadata, exclusion_function

__all__ = [
    "Coordinates",
    "Location",
    "LocationSet",
    "FileMetadata",
    "FileDigest",
    "FileType",
    "sniff_mime_type",
    "FileResolver",
    "stream_locations",
    "FileIndex",
    "IndexedResolver",
    "DirectoryResolver",
    "new_file_resolver",
    "ImageSquashResolver",
    "Layer",
    "ExcludingResolver",
    "ExcludeFn",
    "Scheme",
    "Source",
    "SourceMetadata",
    "ImageMetadata",
    "exclusion_function",
]
