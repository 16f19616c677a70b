# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from loguru import logger
from packageurl import PackageURL

from surveyor.source import Location, LocationSet
from surveyor.utils.ids import stable_id

from ._language import Language
from ._metadata import MetadataType, PackageMetadata, metadata_type_of
from ._type import PackageType

# pylint: disable=too-many-instance-attributes


@dataclass(eq=False)
class Package:
    """
    A discovered software unit.

    ``id`` is derived from the identity-relevant fields (name, version, type, the metadata shape
    and the metadata fields that shape declares as identity relevant), so the same package
    observed by different catalogers, or on a different run, always gets the same id. Packages
    described by different metadata shapes never share an id.
    """

    name: str
    version: str = ""
    type: PackageType = PackageType.UNKNOWN
    language: Language = Language.UNKNOWN
    licenses: List[str] = field(default_factory=list)
    cpes: List[str] = field(default_factory=list)
    purl: str = ""
    found_by: Union[str, List[str]] = field(default_factory=list)
    locations: LocationSet = field(default_factory=LocationSet)
    metadata_type: MetadataType = MetadataType.UNKNOWN
    metadata: Optional[PackageMetadata] = None
    id: str = ""

    def __post_init__(self):
        if isinstance(self.found_by, str):
            self.found_by = [self.found_by] if self.found_by else []
        else:
            self.found_by = sorted(set(self.found_by))
        if not isinstance(self.locations, LocationSet):
            self.locations = LocationSet(self.locations)
        # the tag always follows the payload, a foreign payload shape is rejected here
        self.metadata_type = metadata_type_of(self.metadata)

    def compute_id(self) -> str:
        identity = [
            self.name,
            self.version,
            self.type.value,
            metadata_type_of(self.metadata).value,
            self.metadata.identity() if self.metadata is not None else {},
        ]
        return stable_id(identity)

    def set_id(self) -> str:
        self.id = self.compute_id()
        return self.id

    def add_found_by(self, *names: str) -> None:
        self.found_by = sorted(set(self.found_by).union(n for n in names if n))

    def add_locations(self, locations: Iterable[Location]) -> None:
        self.locations.add(*locations)

    def merge(self, other: Package) -> None:
        """
        Fold another observation of the same package into this one.

        Locations, found-by provenance, licenses and CPEs are unioned; licenses and CPEs come
        out sorted. The metadata payload of the first observation is kept.
        """
        if other is self:
            return
        self.locations.add(*other.locations)
        self.add_found_by(*other.found_by)
        # sorted so the union reads the same whichever observation arrived first
        self.licenses = sorted(set(self.licenses).union(other.licenses))
        self.cpes = sorted(set(self.cpes).union(other.cpes))
        if not self.purl:
            self.purl = other.purl
        if other.metadata is not None and self.metadata != other.metadata:
            logger.debug(
                f"Metadata for {self} from {other.found_by} differs from the first observation; keeping the first"
            )
        if self.metadata is None and other.metadata is not None:
            self.metadata = other.metadata
            self.metadata_type = other.metadata_type

    def sort_key(self):
        return (self.name, self.version, self.type.value, self.id or self.compute_id())

    def __str__(self) -> str:
        return f"Pkg(name={self.name!r} version={self.version!r} type={self.type.value!r} id={self.id!r})"


def package_url(
    package_type: PackageType,
    name: str,
    version: str = "",
    namespace: Optional[str] = None,
    qualifiers: Optional[dict] = None,
) -> str:
    """Build a package URL, or return "" when the package type has no PURL type."""
    purl_type = package_type.purl_type()
    if not purl_type or not name:
        return ""
    return PackageURL(
        type=purl_type,
        namespace=namespace,
        name=name,
        version=version or None,
        qualifiers=qualifiers or None,
    ).to_string()
