# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
"""
The surveyor-json document model and its translation from an SBOM.

The document is deterministic: packages follow the catalog's sorted order, relationships are
ordered by (parent, child, type), and files and secrets by real path. Collections are always
emitted, empty when there is nothing to report.
"""
import stat
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

from dataclasses_json import LetterCase, config, dataclass_json
from loguru import logger

from surveyor.artifact import Relationship as ArtifactRelationship
from surveyor.errors import UnsupportedSourceError
from surveyor.file import SearchResult
from surveyor.linux import LinuxRelease
from surveyor.pkg import Catalog, MetadataType
from surveyor.pkg import Package as CatalogPackage
from surveyor.sbom import SBOM
from surveyor.sbom import Descriptor as SBOMDescriptor
from surveyor.source import Coordinates, FileDigest, FileMetadata, ImageMetadata, Scheme, SourceMetadata

JSON_SCHEMA_VERSION = "1.0.0"


def schema_url(version: str = JSON_SCHEMA_VERSION) -> str:
    return f"schema-{version}.json"


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Package:
    id: str
    name: str
    version: str
    type: str
    found_by: List[str] = field(default_factory=list)
    locations: List[Coordinates] = field(default_factory=list)
    licenses: List[str] = field(default_factory=list)
    language: str = ""
    cpes: List[str] = field(default_factory=list)
    purl: str = ""
    metadata_type: str = MetadataType.UNKNOWN.value
    metadata: Optional[Any] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Relationship:
    parent: str
    child: str
    type: str
    metadata: Optional[Any] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class FileMetadataEntry:
    mode: int
    type: str
    link_destination: str = ""
    user_id: int = field(default=0, metadata=config(field_name="userID"))
    group_id: int = field(default=0, metadata=config(field_name="groupID"))
    mime_type: str = field(default="", metadata=config(field_name="mimeType"))


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class File:
    id: str
    location: Coordinates
    metadata: Optional[FileMetadataEntry] = None
    contents: str = ""
    digests: List[FileDigest] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Secrets:
    location: Coordinates
    secrets: List[SearchResult] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Source:
    id: str = ""
    type: str = ""
    target: Optional[Any] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Descriptor:
    name: str
    version: str
    configuration: Optional[Any] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Schema:
    version: str
    url: str


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Document:
    artifacts: List[Package] = field(default_factory=list)
    artifact_relationships: List[Relationship] = field(default_factory=list)
    files: List[File] = field(default_factory=list)
    secrets: List[Secrets] = field(default_factory=list)
    source: Source = field(default_factory=Source)
    distro: LinuxRelease = field(default_factory=LinuxRelease)
    descriptor: Descriptor = field(default_factory=lambda: Descriptor("surveyor", ""))
    schema: Schema = field(default_factory=lambda: Schema(JSON_SCHEMA_VERSION, schema_url()))


def to_package_model(p: CatalogPackage) -> Package:
    return Package(
        id=p.id or p.compute_id(),
        name=p.name,
        version=p.version,
        type=p.type.value,
        found_by=list(p.found_by),
        locations=p.locations.coordinates(),
        licenses=list(p.licenses),
        language=p.language.value,
        cpes=list(p.cpes),
        purl=p.purl,
        metadata_type=p.metadata_type.value,
        metadata=p.metadata,
    )


def to_package_models(catalog: Optional[Catalog]) -> List[Package]:
    if catalog is None:
        return []
    return [to_package_model(p) for p in catalog.sorted()]


def to_relationship_models(relationships: List[ArtifactRelationship]) -> List[Relationship]:
    models = [Relationship(r.from_id, r.to_id, r.type.value, r.data) for r in relationships]
    return sorted(models, key=lambda r: (r.parent, r.child, r.type))


def octal_mode(mode: int) -> int:
    """Permission bits written with octal digits, so 0o755 becomes 755."""
    return int(format(stat.S_IMODE(mode), "o"))


def to_file_metadata_entry(metadata: Optional[FileMetadata]) -> Optional[FileMetadataEntry]:
    if metadata is None:
        return None
    return FileMetadataEntry(
        mode=octal_mode(metadata.mode),
        type=metadata.type.value,
        link_destination=metadata.link_destination,
        user_id=metadata.user_id,
        group_id=metadata.group_id,
        mime_type=metadata.mime_type,
    )


def to_file_models(sbom: SBOM) -> List[File]:
    artifacts = sbom.artifacts
    files = [
        File(
            id=coordinates.id(),
            location=coordinates,
            metadata=to_file_metadata_entry(artifacts.file_metadata.get(coordinates)),
            contents=artifacts.file_contents.get(coordinates, ""),
            digests=list(artifacts.file_digests.get(coordinates, [])),
        )
        for coordinates in sbom.all_coordinates()
    ]
    return sorted(files, key=lambda f: f.location.real_path)


def to_secrets_models(sbom: SBOM) -> List[Secrets]:
    results = [Secrets(location=c, secrets=list(found)) for c, found in sbom.artifacts.secrets.items()]
    return sorted(results, key=lambda s: (s.location.real_path, s.location.file_system_id))


def to_source_model(source: Optional[SourceMetadata]) -> Source:
    """
    Raises:
        UnsupportedSourceError: If the source scheme has no representation in the document.
    """
    if source is None:
        raise UnsupportedSourceError("no source")
    if source.scheme == Scheme.IMAGE:
        image = source.image_metadata or ImageMetadata(user_input="")
        target = replace(image, tags=list(image.tags or []), repo_digests=list(image.repo_digests or []))
        return Source(id=source.id, type="image", target=target)
    if source.scheme == Scheme.DIRECTORY:
        return Source(id=source.id, type="directory", target=source.path)
    if source.scheme == Scheme.FILE:
        return Source(id=source.id, type="file", target=source.path)
    raise UnsupportedSourceError(f"unsupported source: {source.scheme.value!r}")


def to_descriptor_model(descriptor: SBOMDescriptor) -> Descriptor:
    return Descriptor(descriptor.name, descriptor.version, descriptor.configuration)


def to_format_model(sbom: SBOM) -> Document:
    """Translate an SBOM into the surveyor-json document."""
    try:
        source = to_source_model(sbom.source)
    except UnsupportedSourceError as e:
        logger.warning(f"unable to create surveyor-json source object: {e}")
        source = Source()

    return Document(
        artifacts=to_package_models(sbom.artifacts.packages),
        artifact_relationships=to_relationship_models(list(sbom.relationships)),
        files=to_file_models(sbom),
        secrets=to_secrets_models(sbom),
        source=source,
        distro=sbom.artifacts.linux_distribution or LinuxRelease(),
        descriptor=to_descriptor_model(sbom.descriptor),
        schema=Schema(JSON_SCHEMA_VERSION, schema_url()),
    )
