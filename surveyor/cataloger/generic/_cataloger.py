# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

from typing import BinaryIO, Callable, Dict, List, Tuple

from loguru import logger

from surveyor.artifact import Relationship
from surveyor.cataloger._cataloger import Cataloger, CatalogerResult
from surveyor.pkg import Package
from surveyor.source import FileResolver, Location

# parser(resolver, location, reader) -> (packages, relationships)
Parser = Callable[[FileResolver, Location, BinaryIO], Tuple[List[Package], List[Relationship]]]
_Selector = Callable[[FileResolver], List[Location]]


def read_text(reader: BinaryIO) -> str:
    """Decode file content for text based parsers; undecodable bytes are replaced."""
    return reader.read().decode("utf-8", errors="replace")


class GenericCataloger(Cataloger):
    """
    A cataloger assembled from parsers, each bound to a way of selecting files (globs, exact
    paths, basenames or MIME types). Every selected file is opened and handed to its parser;
    a file that fails to parse is logged and skipped so one malformed file does not hide the
    rest of the ecosystem.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._processors: List[Tuple[_Selector, Parser]] = []

    def name(self) -> str:
        return self._name

    def with_parser_by_globs(self, parser: Parser, *globs: str) -> GenericCataloger:
        self._processors.append((lambda r: r.files_by_glob(*globs), parser))
        return self

    def with_parser_by_path(self, parser: Parser, *paths: str) -> GenericCataloger:
        self._processors.append((lambda r: r.files_by_path(*paths), parser))
        return self

    def with_parser_by_basename(self, parser: Parser, *names: str) -> GenericCataloger:
        self._processors.append((lambda r: r.files_by_basename(*names), parser))
        return self

    def with_parser_by_mime_types(self, parser: Parser, *types: str) -> GenericCataloger:
        self._processors.append((lambda r: r.files_by_mime_type(*types), parser))
        return self

    def _select(self, resolver: FileResolver) -> List[Tuple[Location, Parser]]:
        selected: Dict[Location, Parser] = {}
        for selector, parser in self._processors:
            for location in selector(resolver):
                selected.setdefault(location, parser)
        return sorted(selected.items(), key=lambda item: item[0].sort_key())

    def catalog(self, resolver: FileResolver) -> CatalogerResult:
        packages: List[Package] = []
        relationships: List[Relationship] = []
        for location, parser in self._select(resolver):
            logger.debug(f"[{self._name}] parsing {location.access_path}")
            try:
                with resolver.file_contents_by_location(location) as reader:
                    discovered, rels = parser(resolver, location, reader)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning(f"[{self._name}] unable to parse {location.access_path}: {e}")
                continue
            for p in discovered:
                p.add_found_by(self._name)
                p.set_id()
                packages.append(p)
            relationships.extend(rels)
        logger.debug(f"[{self._name}] discovered {len(packages)} packages")
        return packages, relationships
