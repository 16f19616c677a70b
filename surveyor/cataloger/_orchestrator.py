# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from surveyor.artifact import Relationship, sort_relationships
from surveyor.config import CatalogerConfig
from surveyor.errors import CatalogerFailure
from surveyor.pkg import Catalog, Package, evident_by_relationships, relationships_by_file_ownership
from surveyor.source import FileResolver, Source

from ._cataloger import Cataloger
from ._registry import CatalogerRegistry, new_registry


@dataclass
class CatalogResult:
    catalog: Catalog
    relationships: List[Relationship] = field(default_factory=list)
    failures: List[CatalogerFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _run(cataloger: Cataloger, resolver: FileResolver) -> Tuple[List[Package], List[Relationship]]:
    name = cataloger.name()
    logger.info(f"Running {name}")
    packages, relationships = cataloger.catalog(resolver)
    for p in packages:
        if not p.found_by:
            p.add_found_by(name)
    logger.info(f"{name} discovered {len(packages)} packages")
    return list(packages), list(relationships)


def catalog_packages(
    resolver: FileResolver,
    catalogers: Sequence[Cataloger],
    parallelism: int = 1,
    evident_by: bool = True,
) -> CatalogResult:
    """
    Run ``catalogers`` against ``resolver`` and merge their discoveries into one catalog.

    Up to ``parallelism`` catalogers run at once. An exception raised by a cataloger is recorded
    as a failure and does not stop the others. Discoveries are merged in the order of
    ``catalogers`` once every cataloger has finished, so the first observation of a package
    never depends on which cataloger happened to finish first. File ownership relationships
    between the cataloged packages are then added, and, when ``evident_by`` is set,
    relationships from each package to the files it was found in.
    """
    catalog = Catalog()
    relationships: List[Relationship] = []
    failures: List[CatalogerFailure] = []
    results: Dict[int, Tuple[List[Package], List[Relationship]]] = {}

    with ThreadPoolExecutor(max_workers=max(1, parallelism), thread_name_prefix="cataloger") as executor:
        futures = {executor.submit(_run, c, resolver): i for i, c in enumerate(catalogers)}
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = future.result()
            except Exception as e:  # pylint: disable=broad-exception-caught
                name = catalogers[index].name()
                logger.warning(f"Cataloger {name} failed: {e}")
                failures.append(CatalogerFailure(name, e))

    # nothing reaches the catalog unless the whole cataloger succeeded
    for index in sorted(results):
        packages, found = results[index]
        catalog.add(*packages)
        relationships.extend(found)

    relationships.extend(relationships_by_file_ownership(catalog))
    if evident_by:
        relationships.extend(evident_by_relationships(catalog))

    failures.sort(key=lambda f: f.cataloger)
    # identical edges reported by several catalogers collapse to the first one
    return CatalogResult(catalog, sort_relationships(dict.fromkeys(relationships)), failures)


def catalog_source(
    source: Source,
    config: Optional[CatalogerConfig] = None,
    registry: Optional[CatalogerRegistry] = None,
) -> CatalogResult:
    """Select the catalogers fitting ``source`` and run them over its resolver."""
    config = config or CatalogerConfig()
    registry = registry or new_registry(config)
    catalogers = registry.for_scheme(source.scheme, config.catalogers)
    logger.info(f"Cataloging {source.metadata.path or source.metadata.id} with {len(catalogers)} catalogers")
    return catalog_packages(source.file_resolver(), catalogers, parallelism=config.parallelism)
