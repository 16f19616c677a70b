# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._catalog import Catalog
from ._language import Language
from ._metadata import (
    METADATA_TYPES,
    ApkFileRecord,
    ApkMetadata,
    BinaryClassifierMatch,
    BinaryMetadata,
    DpkgFileRecord,
    DpkgMetadata,
    GemMetadata,
    GolangBinMetadata,
    GolangModMetadata,
    JavaMetadata,
    MetadataType,
    NpmPackageJsonMetadata,
    NpmPackageLockJsonMetadata,
    PackageMetadata,
    PythonFileRecord,
    PythonPackageMetadata,
    PythonRequirementsMetadata,
    RpmFileRecord,
    RpmMetadata,
    RustCargoPackageMetadata,
    metadata_from_dict,
    metadata_type_of,
)
from ._package import Package, package_url
from ._relationships import evident_by_relationships, relationships_by_file_ownership
from ._type import ALL_PACKAGE_TYPES, PackageType

__all__ = [
    "Catalog",
    "Package",
    "package_url",
    "evident_by_relationships",
    "relationships_by_file_ownership",
    "PackageType",
    "ALL_PACKAGE_TYPES",
    "Language",
    "MetadataType",
    "PackageMetadata",
    "METADATA_TYPES",
    "metadata_type_of",
    "metadata_from_dict",
    "ApkFileRecord",
    "ApkMetadata",
    "BinaryClassifierMatch",
    "BinaryMetadata",
    "DpkgFileRecord",
    "DpkgMetadata",
    "GemMetadata",
    "GolangBinMetadata",
    "GolangModMetadata",
    "JavaMetadata",
    "NpmPackageJsonMetadata",
    "NpmPackageLockJsonMetadata",
    "PythonFileRecord",
    "PythonPackageMetadata",
    "PythonRequirementsMetadata",
    "RpmFileRecord",
    "RpmMetadata",
    "RustCargoPackageMetadata",
]
