# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import re
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from loguru import logger

import surveyor.plugin
from surveyor.pkg import GolangModMetadata, Language, Package, PackageType, package_url
from surveyor.source import FileResolver, Location

from .generic import GenericCataloger, read_text

GO_MOD_CATALOGER = "go-mod-file-cataloger"

_BLOCK_DIRECTIVES = ("require", "replace", "exclude", "retract")
_QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"|`([^`]*)`')


def _strip_comment(line: str) -> str:
    idx = line.find("//")
    return line[:idx] if idx != -1 else line


def _unquote(token: str) -> str:
    match = _QUOTED.fullmatch(token)
    if match:
        return match.group(1) if match.group(1) is not None else match.group(2)
    return token


def _directives(text: str) -> Iterator[Tuple[str, List[str]]]:
    """Yields (directive, arguments) for every statement of a go.mod file, flattening blocks."""
    block: Optional[str] = None
    for raw in text.splitlines():
        line = _strip_comment(raw).strip()
        if not line:
            continue
        if block is not None:
            if line == ")":
                block = None
                continue
            yield block, [_unquote(t) for t in line.split()]
            continue
        tokens = line.split()
        directive = tokens[0]
        if directive in _BLOCK_DIRECTIVES and tokens[1:] == ["("]:
            block = directive
            continue
        yield directive, [_unquote(t) for t in tokens[1:]]


def _is_local_path(path: str) -> bool:
    return path.startswith(("./", "../", "/"))


def parse_go_sum(text: str) -> Dict[Tuple[str, str], str]:
    """Map of (module, version) to the h1 digest of the module's content."""
    digests = {}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) != 3 or fields[1].endswith("/go.mod"):
            continue
        digests[(fields[0], fields[1])] = fields[2]
    return digests


def go_module_purl(name: str, version: str) -> str:
    namespace, _, module = name.rpartition("/")
    return package_url(PackageType.GO_MODULE, module, version, namespace=namespace or None)


def _go_sum_digests(resolver: FileResolver, location: Location) -> Dict[Tuple[str, str], str]:
    go_sum = resolver.relative_file_by_path(location, "go.sum")
    if go_sum is None:
        return {}
    try:
        with resolver.file_contents_by_location(go_sum) as reader:
            return parse_go_sum(read_text(reader))
    except OSError as e:
        logger.debug(f"Unable to read {go_sum.real_path}: {e}")
        return {}


def parse_go_mod(resolver: FileResolver, location: Location, reader: BinaryIO):
    modules: Dict[str, str] = {}
    for directive, args in _directives(read_text(reader)):
        if directive == "require" and len(args) >= 2:
            modules[args[0]] = args[1]
        elif directive == "replace" and "=>" in args:
            arrow = args.index("=>")
            old, new = args[:arrow], args[arrow + 1 :]
            if not old or not new:
                continue
            if old[0] in modules and (len(old) == 1 or modules[old[0]] == old[1]):
                del modules[old[0]]
                if not _is_local_path(new[0]):
                    modules[new[0]] = new[1] if len(new) > 1 else ""
        elif directive == "exclude" and len(args) >= 2:
            if modules.get(args[0]) == args[1]:
                del modules[args[0]]

    digests = _go_sum_digests(resolver, location)
    packages = []
    for name in sorted(modules):
        version = modules[name]
        packages.append(
            Package(
                name=name,
                version=version,
                type=PackageType.GO_MODULE,
                language=Language.GO,
                purl=go_module_purl(name, version),
                locations=[location],
                metadata=GolangModMetadata(h1_digest=digests.get((name, version), "")),
            )
        )
    return packages, []


def new_go_mod_file_cataloger() -> GenericCataloger:
    return GenericCataloger(GO_MOD_CATALOGER).with_parser_by_globs(parse_go_mod, "**/go.mod")


@surveyor.plugin.hookimpl
def directory_catalogers() -> List[GenericCataloger]:
    return [new_go_mod_file_cataloger()]
