# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Pattern

from dataclasses_json import LetterCase, dataclass_json
from loguru import logger

from surveyor.errors import NotFoundError
from surveyor.source import Coordinates, FileResolver, FileType

from ._contents import DEFAULT_SKIP_FILES_ABOVE_SIZE

# a pattern's "value" group, when present, is the secret itself
DEFAULT_SECRET_PATTERNS: Dict[str, str] = {
    "aws-access-key": r"(?i)aws_access_key_id[\"'=:\s]*?(?P<value>(A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16})",
    "aws-secret-key": r"(?i)aws_secret_access_key[\"'=:\s]*?(?P<value>[0-9a-zA-Z/+]{40})",
    "pem-private-key": r"-----BEGIN (\S+ )?PRIVATE KEY(\sBLOCK)?-----((?P<value>(\n.*?)+)-----END (\S+ )?PRIVATE KEY(\sBLOCK)?-----)?",
    "docker-config-auth": r"\"auths\"((.*\n)*.*?\"auth\"\s*:\s*\"(?P<value>[^\"]+)\")?",
    "generic-api-key": r"(?i)api(-|_)?key[\"'=:\s]*?(?P<value>[A-Z0-9]{20,60})[\"']?(\s|$)",
}


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class SearchResult:
    classification: str
    line_number: int
    line_offset: int
    seek_position: int
    length: int
    value: Optional[str] = None


def _compile(patterns: Mapping[str, str]) -> Dict[str, Pattern[bytes]]:
    return {name: re.compile(pattern.encode()) for name, pattern in patterns.items()}


class SecretsCataloger:
    """Searches file contents for credentials and keys with a set of named regular expressions."""

    def __init__(
        self,
        patterns: Optional[Mapping[str, str]] = None,
        reveal_values: bool = False,
        skip_files_above_size: int = DEFAULT_SKIP_FILES_ABOVE_SIZE,
    ) -> None:
        self.patterns = _compile(DEFAULT_SECRET_PATTERNS if patterns is None else patterns)
        self.reveal_values = reveal_values
        self.skip_files_above_size = skip_files_above_size

    def search(self, content: bytes) -> List[SearchResult]:
        results = []
        for classification, pattern in sorted(self.patterns.items()):
            for match in pattern.finditer(content):
                group = "value" if "value" in pattern.groupindex and match.group("value") else 0
                start, end = match.span(group)
                line_start = content.rfind(b"\n", 0, start) + 1
                value = content[start:end].decode("utf-8", errors="replace") if self.reveal_values else None
                results.append(
                    SearchResult(
                        classification=classification,
                        line_number=content.count(b"\n", 0, start) + 1,
                        line_offset=start - line_start,
                        seek_position=start,
                        length=end - start,
                        value=value,
                    )
                )
        return sorted(results, key=lambda r: (r.seek_position, r.classification))

    def catalog(self, resolver: FileResolver) -> Dict[Coordinates, List[SearchResult]]:
        results: Dict[Coordinates, List[SearchResult]] = {}
        for location in resolver.all_locations():
            try:
                metadata = resolver.file_metadata_by_location(location)
                if metadata.type != FileType.REGULAR or metadata.size == 0 or (
                    self.skip_files_above_size > 0 and metadata.size > self.skip_files_above_size
                ):
                    continue
                with resolver.file_contents_by_location(location) as reader:
                    found = self.search(reader.read())
            except NotFoundError as e:
                logger.debug(f"Skipping secrets search of {location.real_path}: {e}")
                continue
            if found:
                results[location.coordinates] = found
        logger.info(f"Found secrets in {len(results)} files")
        return results
