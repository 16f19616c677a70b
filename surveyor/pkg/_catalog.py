# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import threading
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Set

from loguru import logger

from surveyor.utils.paths import root_path

from ._package import Package
from ._type import PackageType


class Catalog:
    """
    The deduplicating accumulator of discovered packages.

    Packages are keyed by their content derived id. Adding a package whose id is already known
    merges the new observation into the existing entry instead of creating a second one. All
    operations are internally synchronized so catalogers running concurrently may add to the
    same catalog.
    """

    def __init__(self, packages: Iterable[Package] = ()) -> None:
        self._lock = threading.RLock()
        self._by_id: Dict[str, Package] = {}
        self._ids_by_type: Dict[PackageType, Set[str]] = defaultdict(set)
        self._ids_by_name: Dict[str, Set[str]] = defaultdict(set)
        self._ids_by_path: Dict[str, Set[str]] = defaultdict(set)
        self.add(*packages)

    def add(self, *packages: Package) -> None:
        with self._lock:
            for p in packages:
                self._add(p)

    def _add(self, p: Package) -> None:
        package_id = p.set_id()
        existing = self._by_id.get(package_id)
        if existing is not None:
            logger.trace(f"Merging duplicate observation of {p} into existing entry")
            existing.merge(p)
            entry = existing
        else:
            self._by_id[package_id] = p
            self._ids_by_type[p.type].add(package_id)
            self._ids_by_name[p.name].add(package_id)
            entry = p
        for location in entry.locations:
            self._ids_by_path[location.real_path].add(package_id)
            if location.virtual_path:
                self._ids_by_path[location.virtual_path].add(package_id)

    def package(self, package_id: str) -> Optional[Package]:
        with self._lock:
            return self._by_id.get(package_id)

    def packages_by_name(self, name: str) -> List[Package]:
        with self._lock:
            return self._sorted(self._by_id[i] for i in self._ids_by_name.get(name, ()))

    def packages_by_path(self, path: str) -> List[Package]:
        """Packages that were found at ``path`` (real or virtual)."""
        with self._lock:
            return self._sorted(self._by_id[i] for i in self._ids_by_path.get(root_path(path), ()))

    def enumerate(self, *types: PackageType) -> Iterator[Package]:
        """Iterate packages (optionally only of the given types) in no particular order."""
        with self._lock:
            if not types:
                snapshot = list(self._by_id.values())
            else:
                snapshot = [self._by_id[i] for t in types for i in self._ids_by_type.get(t, ())]
        return iter(snapshot)

    def sorted(self, *types: PackageType) -> List[Package]:
        """Packages ordered by (name, version, type), ties broken by id."""
        return self._sorted(self.enumerate(*types))

    @staticmethod
    def _sorted(packages: Iterable[Package]) -> List[Package]:
        return sorted(packages, key=Package.sort_key)

    def package_count(self) -> int:
        with self._lock:
            return len(self._by_id)

    def __len__(self) -> int:
        return self.package_count()

    def __iter__(self) -> Iterator[Package]:
        return iter(self.sorted())

    def __contains__(self, package_id: object) -> bool:
        with self._lock:
            return package_id in self._by_id
