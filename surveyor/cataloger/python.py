# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import csv
import io
import posixpath
from email.parser import HeaderParser
from typing import BinaryIO, Iterable, List, Optional

import tomlkit
from loguru import logger
from packaging.requirements import InvalidRequirement, Requirement
from packaging.version import InvalidVersion, Version

import surveyor.plugin
from surveyor.config import CatalogerConfig
from surveyor.pkg import (
    Language,
    Package,
    PackageType,
    PythonFileRecord,
    PythonPackageMetadata,
    PythonRequirementsMetadata,
    package_url,
)
from surveyor.source import FileDigest, FileResolver, Location

from .generic import GenericCataloger, read_text

PYTHON_INDEX_CATALOGER = "python-index-cataloger"
PYTHON_PACKAGE_CATALOGER = "python-package-cataloger"

_PINNED_OPERATORS = ("==", "===")
_GUESSABLE_OPERATORS = ("==", "===", "~=", ">=")


def _python_package(name: str, version: str, location: Location, metadata=None, extra_locations=()) -> Package:
    return Package(
        name=name,
        version=version,
        type=PackageType.PYTHON,
        language=Language.PYTHON,
        purl=package_url(PackageType.PYTHON, name, version),
        locations=[location, *extra_locations],
        metadata=metadata,
    )


def _logical_lines(text: str) -> Iterable[str]:
    """Requirement lines with comments removed and backslash continuations joined."""
    pending = ""
    for raw in text.splitlines():
        line = raw.split(" #", 1)[0].strip() if not raw.lstrip().startswith("#") else ""
        if line.endswith("\\"):
            pending += line[:-1] + " "
            continue
        line, pending = (pending + line).strip(), ""
        if line:
            yield line
    if pending.strip():
        yield pending.strip()


def _guess_version(requirement: Requirement) -> str:
    candidates = []
    for spec in requirement.specifier:
        if spec.operator not in _GUESSABLE_OPERATORS or "*" in spec.version:
            continue
        try:
            candidates.append(Version(spec.version))
        except InvalidVersion:
            continue
    return str(min(candidates)) if candidates else ""


def _pinned_version(requirement: Requirement) -> Optional[str]:
    specs = list(requirement.specifier)
    if len(specs) == 1 and specs[0].operator in _PINNED_OPERATORS and "*" not in specs[0].version:
        return specs[0].version
    return None


def requirements_parser(guess_unpinned: bool = False):
    """Build a requirements.txt parser; unpinned requirements are skipped unless ``guess_unpinned``."""

    def parse_requirements_txt(resolver: FileResolver, location: Location, reader: BinaryIO):
        # pylint: disable=unused-argument
        packages = []
        for line in _logical_lines(read_text(reader)):
            if line.startswith("-"):
                # pip options (-r, -e, --index-url, ...) are not requirements
                continue
            # per-requirement options such as --hash
            line = line.split(" --", 1)[0].strip()
            try:
                requirement = Requirement(line)
            except InvalidRequirement as e:
                logger.debug(f"Skipping unparseable requirement {line!r} in {location.real_path}: {e}")
                continue
            version = _pinned_version(requirement)
            if version is None:
                if requirement.url is None and not guess_unpinned:
                    logger.debug(f"Skipping unpinned requirement {requirement.name} in {location.real_path}")
                    continue
                version = _guess_version(requirement) if guess_unpinned else ""
            metadata = PythonRequirementsMetadata(
                name=requirement.name,
                extras=sorted(requirement.extras),
                version_constraint=str(requirement.specifier),
                url=requirement.url or "",
                markers=str(requirement.marker) if requirement.marker else "",
            )
            packages.append(_python_package(requirement.name, version, location, metadata))
        return packages, []

    return parse_requirements_txt


def parse_poetry_lock(resolver: FileResolver, location: Location, reader: BinaryIO):
    # pylint: disable=unused-argument
    document = tomlkit.parse(read_text(reader)).unwrap()
    packages = []
    for entry in document.get("package", []):
        name, version = entry.get("name"), entry.get("version", "")
        if not name:
            continue
        packages.append(_python_package(name, version, location))
    return packages, []


def _parse_record(text: str) -> List[PythonFileRecord]:
    records = []
    for row in csv.reader(io.StringIO(text)):
        if not row or not row[0]:
            continue
        path, digest, size = (row + ["", ""])[:3]
        file_digest = None
        if "=" in digest:
            algorithm, value = digest.split("=", 1)
            file_digest = FileDigest(algorithm, value)
        records.append(PythonFileRecord(path=path, digest=file_digest, size=size))
    return records


def _read_sibling(resolver: FileResolver, location: Location, name: str):
    """(location, text) of a file next to ``location``, or (None, "") when it does not exist."""
    sibling = resolver.relative_file_by_path(location, name)
    if sibling is None:
        return None, ""
    with resolver.file_contents_by_location(sibling) as reader:
        return sibling, read_text(reader)


def parse_package_metadata(resolver: FileResolver, location: Location, reader: BinaryIO):
    """Parse an installed distribution's METADATA (dist-info) or PKG-INFO (egg-info) file."""
    headers = HeaderParser().parsestr(read_text(reader))
    name, version = headers.get("Name", ""), headers.get("Version", "")
    if not name:
        return [], []

    dist_dir = posixpath.dirname(location.real_path)
    record_location, record_text = _read_sibling(resolver, location, "RECORD")
    top_level_location, top_level_text = _read_sibling(resolver, location, "top_level.txt")

    license_name = headers.get("License", "")
    metadata = PythonPackageMetadata(
        name=name,
        version=version,
        author=headers.get("Author", ""),
        author_email=headers.get("Author-email", ""),
        platform=headers.get("Platform", ""),
        files=_parse_record(record_text),
        site_packages_root_path=posixpath.dirname(dist_dir),
        top_level_packages=[t.strip() for t in top_level_text.splitlines() if t.strip()],
        requires_dist=headers.get_all("Requires-Dist") or [],
    )
    extra = [loc for loc in (record_location, top_level_location) if loc is not None]
    package = _python_package(name, version, location, metadata, extra)
    if license_name and license_name != "UNKNOWN":
        package.licenses.append(license_name)
    return [package], []


def new_python_index_cataloger(guess_unpinned: bool = False) -> GenericCataloger:
    return (
        GenericCataloger(PYTHON_INDEX_CATALOGER)
        .with_parser_by_globs(requirements_parser(guess_unpinned), "**/*requirements*.txt")
        .with_parser_by_globs(parse_poetry_lock, "**/poetry.lock")
    )


def new_python_package_cataloger() -> GenericCataloger:
    return GenericCataloger(PYTHON_PACKAGE_CATALOGER).with_parser_by_globs(
        parse_package_metadata,
        "**/*.dist-info/METADATA",
        "**/*.egg-info/PKG-INFO",
    )


@surveyor.plugin.hookimpl
def image_catalogers() -> List[GenericCataloger]:
    return [new_python_package_cataloger()]


@surveyor.plugin.hookimpl
def directory_catalogers(config: CatalogerConfig) -> List[GenericCataloger]:
    return [
        new_python_index_cataloger(config.python_guess_unpinned_requirements),
        new_python_package_cataloger(),
    ]
