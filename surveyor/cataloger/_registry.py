# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
"""
Selection of the catalogers that run against a source.

Catalogers come from plugins: every registered plugin may contribute catalogers for image
sources and for directory (or single file) sources through the ``image_catalogers`` and
``directory_catalogers`` hooks. A run then narrows the applicable set with user supplied name
patterns, where a pattern selects every cataloger whose name contains it as a whole
dash-separated word, ignoring a trailing ``-cataloger`` on both sides.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import pluggy
from loguru import logger

from surveyor.config import CatalogerConfig
from surveyor.errors import UnsupportedSourceError
from surveyor.source import Scheme

from ._cataloger import Cataloger

ALL_CATALOGERS_PATTERN = "all"
CATALOGER_SUFFIX = "-cataloger"


def _trim_suffix(name: str) -> str:
    return name[: -len(CATALOGER_SUFFIX)] if name.endswith(CATALOGER_SUFFIX) else name


def has_full_word(target_phrase: str, candidate: str) -> bool:
    """True when ``target_phrase`` first occurs in ``candidate`` bounded by dashes or the ends."""
    if target_phrase in ("cataloger", ""):
        return False
    start = candidate.find(target_phrase)
    if start == -1:
        return False
    if start > 0 and candidate[start - 1] != "-":
        return False
    end = start + len(target_phrase)
    if end < len(candidate) and candidate[end] != "-":
        return False
    return True


def _contains(patterns: Iterable[str], cataloger_name: str) -> bool:
    name = _trim_suffix(cataloger_name)
    for pattern in patterns:
        pattern = _trim_suffix(pattern)
        if pattern and has_full_word(pattern, name):
            return True
    return False


def _requests_all(patterns: Sequence[str]) -> bool:
    return ALL_CATALOGERS_PATTERN in patterns


def requested_all_catalogers(config: CatalogerConfig) -> bool:
    return _requests_all(config.catalogers)


def filter_catalogers(catalogers: List[Cataloger], patterns: Optional[Sequence[str]]) -> List[Cataloger]:
    """
    Keep the catalogers selected by ``patterns``, preserving order.

    No patterns, or the "all" pattern, keeps everything. Matching nothing is not an error.
    """
    if not patterns or _requests_all(patterns):
        return list(catalogers)
    kept = []
    for cataloger in catalogers:
        if _contains(patterns, cataloger.name()):
            kept.append(cataloger)
            continue
        logger.info(f'skipping cataloger "{cataloger.name()}"')
    return kept


@dataclass
class CatalogerRegistry:
    """The catalogers applicable to image sources and to directory sources."""

    image: List[Cataloger] = field(default_factory=list)
    directory: List[Cataloger] = field(default_factory=list)

    def image_catalogers(self, patterns: Optional[Sequence[str]] = None) -> List[Cataloger]:
        return filter_catalogers(self.image, patterns)

    def directory_catalogers(self, patterns: Optional[Sequence[str]] = None) -> List[Cataloger]:
        return filter_catalogers(self.directory, patterns)

    def all_catalogers(self, patterns: Optional[Sequence[str]] = None) -> List[Cataloger]:
        by_name: Dict[str, Cataloger] = {}
        for cataloger in self.image + self.directory:
            by_name.setdefault(cataloger.name(), cataloger)
        return filter_catalogers(list(by_name.values()), patterns)

    def for_scheme(self, scheme: Scheme, patterns: Optional[Sequence[str]] = None) -> List[Cataloger]:
        """The selected catalogers for a source of the given scheme.

        Raises:
            UnsupportedSourceError: If the scheme is not an image, directory or file scheme.
        """
        if scheme == Scheme.IMAGE:
            return self.image_catalogers(patterns)
        if scheme in (Scheme.DIRECTORY, Scheme.FILE):
            return self.directory_catalogers(patterns)
        raise UnsupportedSourceError(f"unable to determine cataloger set from scheme={scheme}")


def _collect(results: Iterable[Optional[List[Cataloger]]], kind: str) -> List[Cataloger]:
    seen: Dict[str, Cataloger] = {}
    for contributed in results:
        for cataloger in contributed or []:
            if cataloger.name() in seen:
                logger.warning(f"Ignoring duplicate {kind} cataloger {cataloger.name()!r}")
                continue
            seen[cataloger.name()] = cataloger
    return sorted(seen.values(), key=lambda c: c.name())


def new_registry(config: Optional[CatalogerConfig] = None, pm: Optional[pluggy.PluginManager] = None) -> CatalogerRegistry:
    """Collect catalogers from every registered plugin."""
    if config is None:
        config = CatalogerConfig()
    if pm is None:
        # pylint: disable=import-outside-toplevel
        from surveyor.plugin.manager import get_plugin_manager

        pm = get_plugin_manager()
    return CatalogerRegistry(
        image=_collect(pm.hook.image_catalogers(config=config), "image"),
        directory=_collect(pm.hook.directory_catalogers(config=config), "directory"),
    )
