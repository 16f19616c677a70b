# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from enum import Enum

from packageurl import PackageURL


class PackageType(str, Enum):
    """A package type for or within a language ecosystem (an ecosystem may have several)."""

    UNKNOWN = "UnknownPackage"
    ALPM = "alpm"
    APK = "apk"
    BINARY = "binary"
    COCOAPODS = "pod"
    CONAN = "conan"
    DART_PUB = "dart-pub"
    DEB = "deb"
    DOTNET = "dotnet"
    GEM = "gem"
    GO_MODULE = "go-module"
    GRAALVM_NATIVE_IMAGE = "graalvm-native-image"
    HACKAGE = "hackage"
    HEX = "hex"
    JAVA = "java-archive"
    JENKINS_PLUGIN = "jenkins-plugin"
    KB = "msrc-kb"
    NIX = "nix"
    NPM = "npm"
    PHP_COMPOSER = "php-composer"
    PORTAGE = "portage"
    PYTHON = "python"
    RPM = "rpm"
    RUST = "rust-crate"

    def purl_type(self) -> str:
        """The package URL type for this package type, or "" when there is none."""
        return _PURL_TYPES.get(self, "")

    @staticmethod
    def by_name(name: str) -> "PackageType":
        """Map a package URL type (or common alias) to a PackageType."""
        return _BY_PURL_TYPE.get(name, PackageType.UNKNOWN)

    @staticmethod
    def from_purl(purl: str) -> "PackageType":
        try:
            parsed = PackageURL.from_string(purl)
        except ValueError:
            return PackageType.UNKNOWN
        return PackageType.by_name(parsed.type)


_PURL_TYPES = {
    PackageType.ALPM: "alpm",
    PackageType.APK: "apk",
    PackageType.COCOAPODS: "cocoapods",
    PackageType.CONAN: "conan",
    PackageType.DART_PUB: "pub",
    PackageType.DEB: "deb",
    PackageType.DOTNET: "dotnet",
    PackageType.GEM: "gem",
    PackageType.HEX: "hex",
    PackageType.GO_MODULE: "golang",
    PackageType.HACKAGE: "hackage",
    PackageType.JAVA: "maven",
    PackageType.JENKINS_PLUGIN: "maven",
    PackageType.PHP_COMPOSER: "composer",
    PackageType.PYTHON: "pypi",
    PackageType.PORTAGE: "portage",
    PackageType.NIX: "nix",
    PackageType.NPM: "npm",
    PackageType.RPM: "rpm",
    PackageType.RUST: "cargo",
}

_BY_PURL_TYPE = {
    "deb": PackageType.DEB,
    "rpm": PackageType.RPM,
    "alpm": PackageType.ALPM,
    "apk": PackageType.APK,
    "alpine": PackageType.APK,
    "maven": PackageType.JAVA,
    "composer": PackageType.PHP_COMPOSER,
    "golang": PackageType.GO_MODULE,
    "npm": PackageType.NPM,
    "pypi": PackageType.PYTHON,
    "gem": PackageType.GEM,
    "cargo": PackageType.RUST,
    "crate": PackageType.RUST,
    "pub": PackageType.DART_PUB,
    "dotnet": PackageType.DOTNET,
    "cocoapods": PackageType.COCOAPODS,
    "conan": PackageType.CONAN,
    "hackage": PackageType.HACKAGE,
    "portage": PackageType.PORTAGE,
    "hex": PackageType.HEX,
    "nix": PackageType.NIX,
}

# every supported package type
ALL_PACKAGE_TYPES = [t for t in PackageType if t != PackageType.UNKNOWN]
