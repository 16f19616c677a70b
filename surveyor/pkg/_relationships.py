# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from collections import defaultdict
from typing import Dict, List, Set

from loguru import logger

from surveyor.artifact import Relationship, RelationshipType, relate
from surveyor.utils.paths import root_path

from ._catalog import Catalog


def evident_by_relationships(catalog: Catalog) -> List[Relationship]:
    """One "evident-by" edge from each package to the coordinates of every location it was found at."""
    relationships = []
    for p in catalog.sorted():
        for location in p.locations:
            relationships.append(relate(p, location.coordinates, RelationshipType.EVIDENT_BY))
    return relationships


def relationships_by_file_ownership(catalog: Catalog) -> List[Relationship]:
    """
    Packages whose metadata claims installed files become parents of the other packages that
    were found at those files. The relationship data lists the overlapping files.
    """
    # child id -> parent id -> overlapping files
    edges: Dict[str, Dict[str, Set[str]]] = defaultdict(lambda: defaultdict(set))
    for parent in catalog.sorted():
        if parent.metadata is None:
            continue
        for owned_path in parent.metadata.owned_files():
            for child in catalog.packages_by_path(root_path(owned_path)):
                if child.id == parent.id:
                    continue
                edges[child.id][parent.id].add(root_path(owned_path))

    relationships = []
    for child_id, parents in edges.items():
        for parent_id, files in parents.items():
            relationships.append(
                relate(
                    parent_id,
                    child_id,
                    RelationshipType.OWNERSHIP_BY_FILE_OVERLAP,
                    {"files": sorted(files)},
                )
            )
    logger.debug(f"Found {len(relationships)} ownership-by-file-overlap relationships")
    return relationships
