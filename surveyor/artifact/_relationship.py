# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional


class RelationshipType(str, Enum):
    # the parent package claims ownership of a child package's files
    OWNERSHIP_BY_FILE_OVERLAP = "ownership-by-file-overlap"
    CONTAINS = "contains"
    # the package was discovered by the evidence in the child file
    EVIDENT_BY = "evident-by"
    DEPENDENCY_OF = "dependency-of"


@dataclass(frozen=True)
class Relationship:
    """A directed, typed edge between two artifact ids. ``data`` is an optional payload."""

    from_id: str
    to_id: str
    type: RelationshipType
    data: Optional[Any] = field(default=None, compare=False, hash=False)

    def sort_key(self):
        return (self.from_id, self.to_id, self.type.value)


def artifact_id(artifact: Any) -> str:
    """The id of a package, coordinates, location, or a raw id string."""
    if isinstance(artifact, str):
        return artifact
    ident = getattr(artifact, "id")
    if callable(ident):
        return ident()
    if not ident and hasattr(artifact, "set_id"):
        return artifact.set_id()
    return ident


def relate(
    from_artifact: Any, to_artifact: Any, rel_type: RelationshipType, data: Optional[Any] = None
) -> Relationship:
    return Relationship(artifact_id(from_artifact), artifact_id(to_artifact), rel_type, data)


def sort_relationships(relationships: Iterable[Relationship]) -> List[Relationship]:
    """Total order by (parent, child, type); identical inputs always produce identical output."""
    return sorted(relationships, key=Relationship.sort_key)
