# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import posixpath
import re
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from loguru import logger

import surveyor.plugin
from surveyor.linux import LinuxRelease, identify_release
from surveyor.pkg import DpkgFileRecord, DpkgMetadata, Package, PackageType, package_url
from surveyor.source import FileDigest, FileResolver, Location

from .generic import GenericCataloger, read_text

DPKG_CATALOGER = "dpkgdb-cataloger"

_SOURCE_WITH_VERSION = re.compile(r"^(?P<name>\S+)\s*\((?P<version>[^)]*)\)$")


def paragraphs(text: str) -> Iterator[Dict[str, str]]:
    """Split a deb822 control file into dicts of field to value, folding continuation lines."""
    fields: Dict[str, str] = {}
    key = None
    for line in text.splitlines():
        if not line.strip():
            if fields:
                yield fields
            fields, key = {}, None
            continue
        if line[0] in " \t" and key is not None:
            fields[key] += "\n" + line.strip()
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        fields[key] = value.strip()
    if fields:
        yield fields


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _source(fields: Dict[str, str]) -> Tuple[str, str]:
    source = fields.get("Source", "")
    match = _SOURCE_WITH_VERSION.match(source)
    if match:
        return match.group("name"), match.group("version")
    return source, ""


def _installed(fields: Dict[str, str]) -> bool:
    status = fields.get("Status", "").split()
    return not status or status[-1] == "installed"


def deb_purl(metadata: DpkgMetadata, release: Optional[LinuxRelease]) -> str:
    qualifiers = {}
    if metadata.architecture:
        qualifiers["arch"] = metadata.architecture
    if metadata.source:
        upstream = metadata.source
        if metadata.source_version:
            upstream += f"@{metadata.source_version}"
        qualifiers["upstream"] = upstream
    namespace = "debian"
    if release is not None and release.id:
        namespace = release.id
        qualifiers["distro"] = release.distro_qualifier()
    return package_url(PackageType.DEB, metadata.package, metadata.version, namespace, qualifiers)


def _info_dir(location: Location) -> str:
    # distroless images keep one status file per package in status.d/, a sibling of info/
    if posixpath.basename(posixpath.dirname(location.real_path)) == "status.d":
        return "../info"
    return "info"


def _info_file(resolver: FileResolver, location: Location, metadata: DpkgMetadata, extension: str):
    """Locate and read info/<package>[:<arch>].<extension> of the dpkg database holding ``location``."""
    info_dir = _info_dir(location)
    candidates = [f"{info_dir}/{metadata.package}.{extension}"]
    if metadata.architecture:
        candidates.insert(0, f"{info_dir}/{metadata.package}:{metadata.architecture}.{extension}")
    for candidate in candidates:
        info = resolver.relative_file_by_path(location, candidate)
        if info is None:
            continue
        with resolver.file_contents_by_location(info) as reader:
            return info, read_text(reader)
    return None, ""


def _owned_files(resolver: FileResolver, location: Location, metadata: DpkgMetadata) -> List[Location]:
    evidence = []
    list_location, listing = _info_file(resolver, location, metadata, "list")
    md5_location, md5sums = _info_file(resolver, location, metadata, "md5sums")
    conf_location, conffiles = _info_file(resolver, location, metadata, "conffiles")

    digests: Dict[str, str] = {}
    for line in md5sums.splitlines():
        parts = line.split(None, 1)
        if len(parts) == 2:
            digests["/" + parts[1].strip().lstrip("/")] = parts[0]
    config_files = {line.split()[0] for line in conffiles.splitlines() if line.strip()}

    paths = {p.strip() for p in listing.splitlines() if p.strip() and p.strip() != "/."}
    paths.update(digests)
    paths.update(config_files)
    for path in sorted(paths):
        digest = FileDigest("md5", digests[path]) if path in digests else None
        metadata.files.append(DpkgFileRecord(path=path, digest=digest, is_config_file=path in config_files))

    for info in (list_location, md5_location, conf_location):
        if info is not None:
            evidence.append(info)
    return evidence


def parse_dpkg_status(resolver: FileResolver, location: Location, reader: BinaryIO):
    release = identify_release(resolver)
    packages = []
    for fields in paragraphs(read_text(reader)):
        name = fields.get("Package")
        if not name or not _installed(fields):
            continue
        source, source_version = _source(fields)
        try:
            installed_size = int(fields.get("Installed-Size", "0") or 0)
        except ValueError:
            installed_size = 0
        metadata = DpkgMetadata(
            package=name,
            source=source,
            version=fields.get("Version", ""),
            source_version=source_version,
            architecture=fields.get("Architecture", ""),
            maintainer=fields.get("Maintainer", ""),
            installed_size=installed_size,
            provides=_split_list(fields.get("Provides", "")),
            depends=_split_list(fields.get("Depends", "")),
            pre_depends=_split_list(fields.get("Pre-Depends", "")),
        )
        try:
            evidence = _owned_files(resolver, location, metadata)
        except OSError as e:
            logger.debug(f"Unable to read installed files of {name}: {e}")
            evidence = []
        packages.append(
            Package(
                name=name,
                version=metadata.version,
                type=PackageType.DEB,
                purl=deb_purl(metadata, release),
                locations=[location, *evidence],
                metadata=metadata,
            )
        )
    return packages, []


def new_dpkg_db_cataloger() -> GenericCataloger:
    return (
        GenericCataloger(DPKG_CATALOGER)
        .with_parser_by_globs(parse_dpkg_status, "**/var/lib/dpkg/status")
        .with_parser_by_globs(parse_dpkg_status, "**/var/lib/dpkg/status.d/*")
    )


@surveyor.plugin.hookimpl
def image_catalogers() -> List[GenericCataloger]:
    return [new_dpkg_db_cataloger()]


@surveyor.plugin.hookimpl
def directory_catalogers() -> List[GenericCataloger]:
    return [new_dpkg_db_cataloger()]
