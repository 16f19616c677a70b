# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._graph import RelationshipGraph
from ._relationship import Relationship, RelationshipType, artifact_id, relate, sort_relationships

__all__ = [
    "Relationship",
    "RelationshipType",
    "RelationshipGraph",
    "artifact_id",
    "relate",
    "sort_relationships",
]
