# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dataclasses_json import LetterCase, dataclass_json
from loguru import logger

from surveyor.source import FileResolver

# checked in order, the first readable file wins
OS_RELEASE_PATHS = ("/etc/os-release", "/usr/lib/os-release")
_ALPINE_RELEASE = "/etc/alpine-release"
_DEBIAN_VERSION = "/etc/debian_version"


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class LinuxRelease:
    """The distribution a source was built from, as described by os-release(5)."""

    id: str = ""
    version_id: str = ""
    name: str = ""
    pretty_name: str = ""
    version: str = ""
    version_codename: str = ""
    id_like: List[str] = field(default_factory=list)
    home_url: str = ""
    support_url: str = ""
    bug_report_url: str = ""
    cpe_name: str = ""

    def distro_qualifier(self) -> str:
        """The "distro" PURL qualifier, e.g. "debian-12"."""
        if not self.id:
            return ""
        return f"{self.id}-{self.version_id}" if self.version_id else self.id


def parse_os_release(text: str) -> Dict[str, str]:
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw = line.split("=", 1)
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        values[key.strip()] = " ".join(parts)
    return values


def _read(resolver: FileResolver, path: str) -> Optional[str]:
    for location in resolver.files_by_path(path):
        try:
            with resolver.file_contents_by_location(location) as reader:
                return reader.read().decode("utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Unable to read {path}: {e}")
    return None


def identify_release(resolver: FileResolver) -> Optional[LinuxRelease]:
    """Identify the Linux distribution of a source, or None when it does not look like one."""
    for path in OS_RELEASE_PATHS:
        text = _read(resolver, path)
        if text is None:
            continue
        values = parse_os_release(text)
        if not values:
            continue
        return LinuxRelease(
            id=values.get("ID", ""),
            version_id=values.get("VERSION_ID", ""),
            name=values.get("NAME", ""),
            pretty_name=values.get("PRETTY_NAME", ""),
            version=values.get("VERSION", ""),
            version_codename=values.get("VERSION_CODENAME", ""),
            id_like=values.get("ID_LIKE", "").split(),
            home_url=values.get("HOME_URL", ""),
            support_url=values.get("SUPPORT_URL", ""),
            bug_report_url=values.get("BUG_REPORT_URL", ""),
            cpe_name=values.get("CPE_NAME", ""),
        )

    # minimal images may ship only a version stamp
    alpine = _read(resolver, _ALPINE_RELEASE)
    if alpine is not None:
        return LinuxRelease(id="alpine", name="Alpine Linux", version_id=alpine.strip())
    debian = _read(resolver, _DEBIAN_VERSION)
    if debian is not None:
        return LinuxRelease(id="debian", name="Debian GNU/Linux", version_id=debian.strip())
    return None
