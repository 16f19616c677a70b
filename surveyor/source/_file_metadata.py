# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dataclasses_json import LetterCase, dataclass_json


class FileType(str, Enum):
    REGULAR = "RegularFile"
    HARD_LINK = "HardLink"
    SYMLINK = "SymbolicLink"
    CHARACTER_DEVICE = "CharacterDevice"
    BLOCK_DEVICE = "BlockDevice"
    DIRECTORY = "Directory"
    FIFO = "FIFONode"
    SOCKET = "Socket"
    IRREGULAR = "IrregularFile"
    UNKNOWN = "Unknown"

    @staticmethod
    def from_mode(mode: int) -> "FileType":
        # pylint: disable=too-many-return-statements
        if stat.S_ISREG(mode):
            return FileType.REGULAR
        if stat.S_ISLNK(mode):
            return FileType.SYMLINK
        if stat.S_ISDIR(mode):
            return FileType.DIRECTORY
        if stat.S_ISCHR(mode):
            return FileType.CHARACTER_DEVICE
        if stat.S_ISBLK(mode):
            return FileType.BLOCK_DEVICE
        if stat.S_ISFIFO(mode):
            return FileType.FIFO
        if stat.S_ISSOCK(mode):
            return FileType.SOCKET
        return FileType.UNKNOWN


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class FileMetadata:
    mode: int = 0
    type: FileType = FileType.UNKNOWN
    user_id: int = 0
    group_id: int = 0
    link_destination: str = ""
    size: int = 0
    mime_type: str = ""

    @staticmethod
    def from_stat(fstats: os.stat_result, link_destination: str = "", mime_type: str = "") -> "FileMetadata":
        return FileMetadata(
            mode=stat.S_IMODE(fstats.st_mode),
            type=FileType.from_mode(fstats.st_mode),
            user_id=fstats.st_uid,
            group_id=fstats.st_gid,
            link_destination=link_destination,
            size=fstats.st_size,
            mime_type=mime_type,
        )


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class FileDigest:
    algorithm: str
    value: str


# pylint: disable=too-many-return-statements
def sniff_mime_type(head: bytes) -> Optional[str]:
    """Guess the MIME type of file content from its first bytes.

    Args:
        head (bytes): The first bytes (at least 265 for tar detection) of the file.

    Returns:
        Optional[str]: The MIME type, or None for empty content.
    """
    if not head:
        return None
    if head[:4] == b"\x7fELF":
        return "application/x-executable"
    if head[:2] == b"MZ":
        return "application/vnd.microsoft.portable-executable"
    if head[:4] in (
        b"\xfe\xed\xfa\xce",
        b"\xce\xfa\xed\xfe",
        b"\xfe\xed\xfa\xcf",
        b"\xcf\xfa\xed\xfe",
    ):
        return "application/x-mach-binary"
    if head[:4] == b"\xca\xfe\xba\xbe":
        # shared by Mach-O fat binaries and Java class files
        return "application/x-mach-binary"
    if head[:4] == b"PK\x03\x04":
        return "application/zip"
    if head[:2] == b"\x1f\x8b":
        return "application/gzip"
    if head[257:262] == b"ustar":
        return "application/x-tar"
    if head[:3] == b"BZh":
        return "application/x-bzip2"
    if head[:6] == b"\xfd7zXZ\x00":
        return "application/x-xz"
    if head[:4] == b"\xed\xab\xee\xdb":
        return "application/x-rpm"
    sample = head[:512]
    if b"\x00" not in sample:
        # a multibyte character may be cut at the end of the sample
        for trim in range(4):
            try:
                sample[: len(sample) - trim].decode("utf-8")
            except UnicodeDecodeError:
                continue
            return "text/plain"
    return "application/octet-stream"
