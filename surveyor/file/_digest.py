# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import hashlib
from typing import BinaryIO, Dict, List, Sequence

from loguru import logger

from surveyor.errors import NotFoundError
from surveyor.source import Coordinates, FileDigest, FileResolver, FileType


def calc_file_digests(reader: BinaryIO, algorithms: Sequence[str]) -> List[FileDigest]:
    """Calculate the digests of a stream for each of the given hashlib algorithm names.

    Args:
        reader (BinaryIO): Stream to read to its end.
        algorithms (Sequence[str]): Algorithm names understood by ``hashlib.new``.

    Returns:
        List[FileDigest]: One digest per algorithm, in the order given.
    """
    hashes = [hashlib.new(name) for name in algorithms]
    b = bytearray(4096)
    mv = memoryview(b)
    while n := reader.readinto(mv):
        for h in hashes:
            h.update(mv[:n])
    return [FileDigest(name, h.hexdigest()) for name, h in zip(algorithms, hashes)]


class FileDigestCataloger:
    """Computes digests of every regular file a resolver can see."""

    def __init__(self, algorithms: Sequence[str] = ("sha256",)) -> None:
        self.algorithms = [name.lower() for name in algorithms]
        for name in self.algorithms:
            if name not in hashlib.algorithms_available:
                raise ValueError(f"unsupported digest algorithm: {name}")

    def catalog(self, resolver: FileResolver) -> Dict[Coordinates, List[FileDigest]]:
        results: Dict[Coordinates, List[FileDigest]] = {}
        for location in resolver.all_locations():
            try:
                # links and special files have no content of their own
                if resolver.file_metadata_by_location(location).type != FileType.REGULAR:
                    continue
                with resolver.file_contents_by_location(location) as reader:
                    results[location.coordinates] = calc_file_digests(reader, self.algorithms)
            except NotFoundError as e:
                logger.debug(f"Skipping digests of {location.real_path}: {e}")
        logger.info(f"Cataloged digests of {len(results)} files")
        return results
