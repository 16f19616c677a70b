# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
"""
Per-ecosystem package metadata shapes.

The set of shapes is closed: every shape is a dataclass registered in ``METADATA_TYPES`` under
its ``MetadataType`` tag, which is what serialization and schema generation enumerate. Adding an
ecosystem means adding its shape here. Metadata is preserved verbatim and only the fields named
by a shape's ``identity_fields`` contribute to package identity.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

from dataclasses_json import LetterCase, dataclass_json

from surveyor.source import FileDigest

# pylint: disable=too-many-instance-attributes


class MetadataType(str, Enum):
    UNKNOWN = ""
    APK = "ApkMetadata"
    BINARY = "BinaryMetadata"
    DPKG = "DpkgMetadata"
    GEM = "GemMetadata"
    GOLANG_BIN = "GolangBinMetadata"
    GOLANG_MOD = "GolangModMetadata"
    JAVA = "JavaMetadata"
    NPM_PACKAGE_JSON = "NpmPackageJsonMetadata"
    NPM_PACKAGE_LOCK_JSON = "NpmPackageLockJsonMetadata"
    PYTHON_PACKAGE = "PythonPackageMetadata"
    PYTHON_REQUIREMENTS = "PythonRequirementsMetadata"
    RPM = "RpmMetadata"
    RUST_CARGO_PACKAGE = "RustCargoPackageMetadata"


class PackageMetadata:
    metadata_type: ClassVar[MetadataType] = MetadataType.UNKNOWN
    identity_fields: ClassVar[Tuple[str, ...]] = ()

    def identity(self) -> Dict[str, Any]:
        """The identity-relevant part of this metadata, as a JSON-serializable mapping."""
        return {name: getattr(self, name) for name in self.identity_fields}

    def owned_files(self) -> List[str]:
        """Paths of files this package claims to have installed."""
        return []


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class ApkFileRecord:
    path: str
    owner_uid: str = ""
    owner_gid: str = ""
    permissions: str = ""
    digest: Optional[FileDigest] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class ApkMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.APK
    identity_fields: ClassVar[Tuple[str, ...]] = ("architecture",)

    package: str
    origin_package: str = ""
    maintainer: str = ""
    version: str = ""
    license: str = ""
    architecture: str = ""
    url: str = ""
    description: str = ""
    size: int = 0
    installed_size: int = 0
    pull_dependencies: List[str] = field(default_factory=list)
    provides: List[str] = field(default_factory=list)
    pull_checksum: str = ""
    git_commit: str = ""
    files: List[ApkFileRecord] = field(default_factory=list)

    def owned_files(self) -> List[str]:
        return [f.path for f in self.files]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class BinaryClassifierMatch:
    classifier: str
    path: str


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class BinaryMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.BINARY

    matches: List[BinaryClassifierMatch] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class DpkgFileRecord:
    path: str
    digest: Optional[FileDigest] = None
    is_config_file: bool = False


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class DpkgMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.DPKG
    identity_fields: ClassVar[Tuple[str, ...]] = ("architecture",)

    package: str
    source: str = ""
    version: str = ""
    source_version: str = ""
    architecture: str = ""
    maintainer: str = ""
    installed_size: int = 0
    provides: List[str] = field(default_factory=list)
    depends: List[str] = field(default_factory=list)
    pre_depends: List[str] = field(default_factory=list)
    files: List[DpkgFileRecord] = field(default_factory=list)

    def owned_files(self) -> List[str]:
        return [f.path for f in self.files]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GemMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.GEM

    name: str
    version: str = ""
    files: List[str] = field(default_factory=list)
    authors: List[str] = field(default_factory=list)
    homepage: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GolangBinMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.GOLANG_BIN
    identity_fields: ClassVar[Tuple[str, ...]] = ("architecture",)

    go_build_settings: Dict[str, str] = field(default_factory=dict)
    go_compiled_version: str = ""
    architecture: str = ""
    h1_digest: str = ""
    main_module: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GolangModMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.GOLANG_MOD

    h1_digest: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class JavaMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.JAVA
    identity_fields: ClassVar[Tuple[str, ...]] = ("pom_group_id",)

    virtual_path: str = ""
    manifest: Dict[str, str] = field(default_factory=dict)
    pom_group_id: str = ""
    pom_artifact_id: str = ""
    digest: List[FileDigest] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class NpmPackageJsonMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.NPM_PACKAGE_JSON

    name: str
    version: str = ""
    author: str = ""
    homepage: str = ""
    description: str = ""
    url: str = ""
    private: bool = False


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class NpmPackageLockJsonMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.NPM_PACKAGE_LOCK_JSON

    resolved: str = ""
    integrity: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class PythonFileRecord:
    path: str
    digest: Optional[FileDigest] = None
    size: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class PythonPackageMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.PYTHON_PACKAGE

    name: str
    version: str = ""
    author: str = ""
    author_email: str = ""
    platform: str = ""
    files: List[PythonFileRecord] = field(default_factory=list)
    site_packages_root_path: str = ""
    top_level_packages: List[str] = field(default_factory=list)
    requires_dist: List[str] = field(default_factory=list)

    def owned_files(self) -> List[str]:
        root = self.site_packages_root_path.rstrip("/")
        return [f"{root}/{f.path}" if root and not f.path.startswith("/") else f.path for f in self.files]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class PythonRequirementsMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.PYTHON_REQUIREMENTS

    name: str
    extras: List[str] = field(default_factory=list)
    version_constraint: str = ""
    url: str = ""
    markers: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class RpmFileRecord:
    path: str
    mode: int = 0
    size: int = 0
    digest: Optional[FileDigest] = None
    user_name: str = ""
    group_name: str = ""
    flags: str = ""


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class RpmMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.RPM
    identity_fields: ClassVar[Tuple[str, ...]] = ("arch", "epoch")

    name: str
    version: str = ""
    epoch: Optional[int] = None
    arch: str = ""
    release: str = ""
    source_rpm: str = ""
    size: int = 0
    vendor: str = ""
    modularity_label: str = ""
    files: List[RpmFileRecord] = field(default_factory=list)

    def owned_files(self) -> List[str]:
        return [f.path for f in self.files]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class RustCargoPackageMetadata(PackageMetadata):
    metadata_type: ClassVar[MetadataType] = MetadataType.RUST_CARGO_PACKAGE
    identity_fields: ClassVar[Tuple[str, ...]] = ("source",)

    name: str
    version: str = ""
    source: str = ""
    checksum: str = ""
    dependencies: List[str] = field(default_factory=list)


# every metadata shape a Package may carry, keyed by its tag
METADATA_TYPES: Dict[MetadataType, Type[PackageMetadata]] = {
    shape.metadata_type: shape
    for shape in (
        ApkMetadata,
        BinaryMetadata,
        DpkgMetadata,
        GemMetadata,
        GolangBinMetadata,
        GolangModMetadata,
        JavaMetadata,
        NpmPackageJsonMetadata,
        NpmPackageLockJsonMetadata,
        PythonPackageMetadata,
        PythonRequirementsMetadata,
        RpmMetadata,
        RustCargoPackageMetadata,
    )
}


def metadata_type_of(metadata: Optional[PackageMetadata]) -> MetadataType:
    """Returns the tag of a metadata value.

    Raises:
        TypeError: If the value is not one of the registered metadata shapes.
    """
    if metadata is None:
        return MetadataType.UNKNOWN
    metadata_type = getattr(type(metadata), "metadata_type", MetadataType.UNKNOWN)
    if METADATA_TYPES.get(metadata_type) is not type(metadata):
        raise TypeError(f"unsupported package metadata shape: {type(metadata).__name__}")
    return metadata_type


def metadata_from_dict(metadata_type: MetadataType, data: Optional[Dict[str, Any]]) -> Optional[PackageMetadata]:
    """Rebuild a metadata value from its tag and camelCase dictionary form."""
    if data is None or metadata_type == MetadataType.UNKNOWN:
        return None
    return METADATA_TYPES[metadata_type].from_dict(data)  # type: ignore[attr-defined]
