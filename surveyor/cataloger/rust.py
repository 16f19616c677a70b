# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import BinaryIO, List

import tomlkit

import surveyor.plugin
from surveyor.pkg import Language, Package, PackageType, RustCargoPackageMetadata, package_url
from surveyor.source import FileResolver, Location

from .generic import GenericCataloger, read_text

CARGO_LOCK_CATALOGER = "rust-cargo-lock-cataloger"


def parse_cargo_lock(resolver: FileResolver, location: Location, reader: BinaryIO):
    # pylint: disable=unused-argument
    document = tomlkit.parse(read_text(reader)).unwrap()
    packages = []
    for entry in document.get("package", []):
        name = entry.get("name")
        if not name:
            continue
        metadata = RustCargoPackageMetadata(
            name=name,
            version=entry.get("version", ""),
            source=entry.get("source", ""),
            checksum=entry.get("checksum", ""),
            dependencies=list(entry.get("dependencies", [])),
        )
        packages.append(
            Package(
                name=name,
                version=metadata.version,
                type=PackageType.RUST,
                language=Language.RUST,
                purl=package_url(PackageType.RUST, name, metadata.version),
                locations=[location],
                metadata=metadata,
            )
        )
    return packages, []


def new_cargo_lock_cataloger() -> GenericCataloger:
    return GenericCataloger(CARGO_LOCK_CATALOGER).with_parser_by_globs(parse_cargo_lock, "**/Cargo.lock")


@surveyor.plugin.hookimpl
def directory_catalogers() -> List[GenericCataloger]:
    return [new_cargo_lock_cataloger()]
