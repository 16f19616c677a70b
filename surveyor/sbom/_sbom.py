# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from surveyor import __version__
from surveyor.artifact import Relationship, RelationshipGraph, sort_relationships
from surveyor.file import SearchResult
from surveyor.linux import LinuxRelease
from surveyor.pkg import Catalog
from surveyor.source import Coordinates, FileDigest, FileMetadata, SourceMetadata


@dataclass(frozen=True)
class Descriptor:
    """The tool that produced an SBOM and the configuration it ran with."""

    name: str = "surveyor"
    version: str = __version__
    configuration: Any = None


@dataclass(frozen=True)
class Artifacts:
    packages: Catalog = field(default_factory=Catalog)
    file_metadata: Mapping[Coordinates, FileMetadata] = field(default_factory=dict)
    file_digests: Mapping[Coordinates, List[FileDigest]] = field(default_factory=dict)
    file_contents: Mapping[Coordinates, str] = field(default_factory=dict)
    secrets: Mapping[Coordinates, List[SearchResult]] = field(default_factory=dict)
    linux_distribution: Optional[LinuxRelease] = None


@dataclass(frozen=True)
class SBOM:
    """
    The assembled result of cataloging a source.

    Relationships are held in (parent, child, type) order. Relationships name artifacts by id
    and are not checked against the packages and files present: an edge whose end is unknown is
    kept as is and left to encoders to report.
    """

    artifacts: Artifacts
    relationships: Tuple[Relationship, ...] = ()
    source: Optional[SourceMetadata] = None
    descriptor: Descriptor = field(default_factory=Descriptor)

    def all_coordinates(self) -> List[Coordinates]:
        """Every file coordinate referenced by a package location or a file level artifact, sorted."""
        coordinates = set()
        for p in self.artifacts.packages.enumerate():
            coordinates.update(p.locations.coordinates())
        for file_map in (
            self.artifacts.file_metadata,
            self.artifacts.file_digests,
            self.artifacts.file_contents,
            self.artifacts.secrets,
        ):
            coordinates.update(file_map.keys())
        return sorted(coordinates)

    def coordinates_by_id(self) -> Dict[str, Coordinates]:
        return {c.id(): c for c in self.all_coordinates()}

    def relationship_graph(self) -> RelationshipGraph:
        return RelationshipGraph(self.relationships)

    def relationships_for(self, artifact_id: str) -> List[Relationship]:
        return [r for r in self.relationships if artifact_id in (r.from_id, r.to_id)]


def assemble_sbom(
    source: Optional[SourceMetadata],
    packages: Catalog,
    relationships: Iterable[Relationship] = (),
    *,
    file_metadata: Optional[Mapping[Coordinates, FileMetadata]] = None,
    file_digests: Optional[Mapping[Coordinates, List[FileDigest]]] = None,
    file_contents: Optional[Mapping[Coordinates, str]] = None,
    secrets: Optional[Mapping[Coordinates, List[SearchResult]]] = None,
    linux_distribution: Optional[LinuxRelease] = None,
    descriptor: Optional[Descriptor] = None,
) -> SBOM:
    """Join the catalog, file level artifacts and relationships into an immutable SBOM."""
    artifacts = Artifacts(
        packages=packages,
        file_metadata=MappingProxyType(dict(file_metadata or {})),
        file_digests=MappingProxyType(dict(file_digests or {})),
        file_contents=MappingProxyType(dict(file_contents or {})),
        secrets=MappingProxyType(dict(secrets or {})),
        linux_distribution=linux_distribution,
    )
    return SBOM(
        artifacts=artifacts,
        relationships=tuple(sort_relationships(relationships)),
        source=source,
        descriptor=descriptor or Descriptor(),
    )
