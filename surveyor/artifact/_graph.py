# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import Iterable, List, Optional

import networkx as nx

from ._relationship import Relationship, RelationshipType, sort_relationships


class RelationshipGraph:
    """
    Read-only query view over a flat relationship list.

    Edges are stored in a networkx MultiDiGraph keyed by relationship type, so the same pair of
    artifacts may be connected by several kinds of edges. Cycles are allowed. Referential
    integrity is not checked: an edge may name an id that no package or file carries.
    """

    def __init__(self, relationships: Iterable[Relationship] = ()) -> None:
        self.graph = nx.MultiDiGraph()
        for rel in sort_relationships(relationships):
            self.graph.add_edge(rel.from_id, rel.to_id, key=rel.type, data=rel.data)

    def children_of(self, artifact_id: str, rel_type: Optional[RelationshipType] = None) -> List[str]:
        if artifact_id not in self.graph:
            return []
        return sorted(
            {
                child
                for _, child, key in self.graph.out_edges(artifact_id, keys=True)
                if rel_type is None or key == rel_type
            }
        )

    def parents_of(self, artifact_id: str, rel_type: Optional[RelationshipType] = None) -> List[str]:
        if artifact_id not in self.graph:
            return []
        return sorted(
            {
                parent
                for parent, _, key in self.graph.in_edges(artifact_id, keys=True)
                if rel_type is None or key == rel_type
            }
        )

    def has_relationship(self, from_id: str, to_id: str, rel_type: Optional[RelationshipType] = None) -> bool:
        if rel_type is None:
            return self.graph.has_edge(from_id, to_id)
        return self.graph.has_edge(from_id, to_id, key=rel_type)

    def relationships(self) -> List[Relationship]:
        return sort_relationships(
            Relationship(parent, child, key, attrs.get("data"))
            for parent, child, key, attrs in self.graph.edges(keys=True, data=True)
        )
