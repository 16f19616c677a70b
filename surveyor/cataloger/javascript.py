# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import json
from typing import Any, BinaryIO, Dict, List

import surveyor.plugin
from surveyor.pkg import (
    Language,
    NpmPackageJsonMetadata,
    NpmPackageLockJsonMetadata,
    Package,
    PackageType,
    package_url,
)
from surveyor.source import FileResolver, Location

from .generic import GenericCataloger

JAVASCRIPT_LOCK_CATALOGER = "javascript-lock-cataloger"
JAVASCRIPT_PACKAGE_CATALOGER = "javascript-package-cataloger"


def npm_purl(name: str, version: str) -> str:
    namespace = None
    if name.startswith("@") and "/" in name:
        namespace, name = name.split("/", 1)
    return package_url(PackageType.NPM, name, version, namespace=namespace)


def _npm_package(name: str, version: str, location: Location, metadata, license_field: Any = None) -> Package:
    package = Package(
        name=name,
        version=version,
        type=PackageType.NPM,
        language=Language.JAVASCRIPT,
        purl=npm_purl(name, version),
        locations=[location],
        metadata=metadata,
    )
    package.licenses.extend(_licenses(license_field))
    return package


def _licenses(value: Any) -> List[str]:
    """package.json licenses come as a string, an object with a type, or a list of either."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [value["type"]] if value.get("type") else []
    if isinstance(value, list):
        return [lic for item in value for lic in _licenses(item)]
    return []


def _person(value: Any) -> str:
    if isinstance(value, dict):
        text = value.get("name", "")
        if value.get("email"):
            text += f" <{value['email']}>"
        if value.get("url"):
            text += f" ({value['url']})"
        return text.strip()
    return value or ""


def _name_from_key(key: str) -> str:
    marker = "node_modules/"
    idx = key.rfind(marker)
    return key[idx + len(marker) :] if idx != -1 else key


def _lock_v1(dependencies: Dict[str, Any], location: Location, packages: List[Package]) -> None:
    for name, entry in dependencies.items():
        if not isinstance(entry, dict):
            continue
        version = entry.get("version", "")
        if version:
            metadata = NpmPackageLockJsonMetadata(
                resolved=entry.get("resolved", ""), integrity=entry.get("integrity", "")
            )
            packages.append(_npm_package(name, version, location, metadata))
        _lock_v1(entry.get("dependencies", {}), location, packages)


def parse_package_lock(resolver: FileResolver, location: Location, reader: BinaryIO):
    # pylint: disable=unused-argument
    document = json.load(reader)
    packages: List[Package] = []
    if document.get("lockfileVersion", 1) >= 2 and "packages" in document:
        for key, entry in document["packages"].items():
            # the empty key is the project itself
            if not key or entry.get("link"):
                continue
            name = entry.get("name") or _name_from_key(key)
            version = entry.get("version", "")
            if not name or not version:
                continue
            metadata = NpmPackageLockJsonMetadata(
                resolved=entry.get("resolved", ""), integrity=entry.get("integrity", "")
            )
            packages.append(_npm_package(name, version, location, metadata, entry.get("license")))
    else:
        _lock_v1(document.get("dependencies", {}), location, packages)
    return packages, []


def parse_package_json(resolver: FileResolver, location: Location, reader: BinaryIO):
    # pylint: disable=unused-argument
    document = json.load(reader)
    if not isinstance(document, dict):
        return [], []
    name, version = document.get("name", ""), document.get("version", "")
    if not name or not version:
        return [], []
    repository = document.get("repository", "")
    metadata = NpmPackageJsonMetadata(
        name=name,
        version=version,
        author=_person(document.get("author")),
        homepage=document.get("homepage", ""),
        description=document.get("description", ""),
        url=repository.get("url", "") if isinstance(repository, dict) else repository,
        private=bool(document.get("private", False)),
    )
    license_field = document.get("license") or document.get("licenses")
    return [_npm_package(name, version, location, metadata, license_field)], []


def new_javascript_lock_cataloger() -> GenericCataloger:
    return GenericCataloger(JAVASCRIPT_LOCK_CATALOGER).with_parser_by_globs(
        parse_package_lock, "**/package-lock.json"
    )


def new_javascript_package_cataloger() -> GenericCataloger:
    return GenericCataloger(JAVASCRIPT_PACKAGE_CATALOGER).with_parser_by_globs(
        parse_package_json, "**/package.json"
    )


@surveyor.plugin.hookimpl
def image_catalogers() -> List[GenericCataloger]:
    return [new_javascript_package_cataloger()]


@surveyor.plugin.hookimpl
def directory_catalogers() -> List[GenericCataloger]:
    return [new_javascript_lock_cataloger()]
