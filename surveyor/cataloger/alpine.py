# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import BinaryIO, Dict, List, Optional

import surveyor.plugin
from surveyor.linux import LinuxRelease, identify_release
from surveyor.pkg import ApkFileRecord, ApkMetadata, Package, PackageType, package_url
from surveyor.source import FileDigest, FileResolver, Location

from .generic import GenericCataloger, read_text

APK_CATALOGER = "apkdb-cataloger"


def _int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _digest(value: str) -> Optional[FileDigest]:
    """apk checksums are "Q1" followed by a base64 sha1."""
    if not value:
        return None
    algorithm = "'Q1'+base64(sha1)" if value.startswith("Q1") else "md5"
    return FileDigest(algorithm, value)


def _record(lines: List[str]) -> Optional[ApkMetadata]:
    """Build the metadata of one installed package from its "K:value" lines."""
    values: Dict[str, str] = {}
    files: List[ApkFileRecord] = []
    directory = ""
    current: Optional[ApkFileRecord] = None
    for line in lines:
        key, _, value = line.partition(":")
        if key == "F":
            directory = value
            current = None
        elif key == "R":
            current = ApkFileRecord(path=f"/{directory}/{value}" if directory else f"/{value}")
            files.append(current)
        elif key == "a" and current is not None:
            uid, gid, perms = (value.split(":") + ["", "", ""])[:3]
            current.owner_uid, current.owner_gid, current.permissions = uid, gid, perms
        elif key == "Z" and current is not None:
            current.digest = _digest(value)
        elif key in ("M", "a", "Z"):
            # attributes of the folder itself
            continue
        else:
            values[key] = value
    if not values.get("P"):
        return None
    return ApkMetadata(
        package=values["P"],
        origin_package=values.get("o", ""),
        maintainer=values.get("m", ""),
        version=values.get("V", ""),
        license=values.get("L", ""),
        architecture=values.get("A", ""),
        url=values.get("U", ""),
        description=values.get("T", ""),
        size=_int(values.get("S", "0")),
        installed_size=_int(values.get("I", "0")),
        pull_dependencies=values.get("D", "").split(),
        provides=values.get("p", "").split(),
        pull_checksum=values.get("C", ""),
        git_commit=values.get("c", ""),
        files=files,
    )


def apk_purl(metadata: ApkMetadata, release: Optional[LinuxRelease]) -> str:
    qualifiers = {}
    if metadata.architecture:
        qualifiers["arch"] = metadata.architecture
    if metadata.origin_package and metadata.origin_package != metadata.package:
        qualifiers["upstream"] = metadata.origin_package
    namespace = "alpine"
    if release is not None and release.id:
        namespace = release.id
        qualifiers["distro"] = release.distro_qualifier()
    return package_url(PackageType.APK, metadata.package, metadata.version, namespace, qualifiers)


def parse_apk_db(resolver: FileResolver, location: Location, reader: BinaryIO):
    release = identify_release(resolver)
    records: List[List[str]] = [[]]
    for line in read_text(reader).splitlines():
        if not line.strip():
            records.append([])
        else:
            records[-1].append(line)

    packages = []
    for lines in records:
        metadata = _record(lines) if lines else None
        if metadata is None:
            continue
        package = Package(
            name=metadata.package,
            version=metadata.version,
            type=PackageType.APK,
            purl=apk_purl(metadata, release),
            locations=[location],
            metadata=metadata,
        )
        if metadata.license:
            package.licenses.append(metadata.license)
        packages.append(package)
    return packages, []


def new_apk_db_cataloger() -> GenericCataloger:
    return GenericCataloger(APK_CATALOGER).with_parser_by_globs(parse_apk_db, "**/lib/apk/db/installed")


@surveyor.plugin.hookimpl
def image_catalogers() -> List[GenericCataloger]:
    return [new_apk_db_cataloger()]


@surveyor.plugin.hookimpl
def directory_catalogers() -> List[GenericCataloger]:
    return [new_apk_db_cataloger()]
