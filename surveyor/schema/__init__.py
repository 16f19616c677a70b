# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
"""
JSON schema of the surveyor-json document.

The schema is reflected from the document model and from every package metadata shape, so it
has to be regenerated, under a new schema version, whenever one of them changes. Property names
are the camelCase names the document is encoded with.
"""
import dataclasses
import json
import typing
from pathlib import Path
from typing import Any, Dict, List, Union

from loguru import logger
from pydantic import TypeAdapter

from surveyor.errors import SchemaConflictError
from surveyor.formats.json_model import JSON_SCHEMA_VERSION, Document, schema_url
from surveyor.pkg import METADATA_TYPES

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
REF_TEMPLATE = "#/$defs/{model}"


def _dataclasses_in(root: type) -> List[type]:
    """``root`` and every dataclass reachable through its field annotations."""
    found: List[type] = []
    pending = [root]
    while pending:
        tp = pending.pop()
        if dataclasses.is_dataclass(tp) and isinstance(tp, type):
            if tp in found:
                continue
            found.append(tp)
            pending.extend(typing.get_type_hints(tp).values())
        else:
            pending.extend(typing.get_args(tp))
    return found


def _encoded_names(cls: type) -> Dict[str, str]:
    """Field name to JSON key, as dataclasses-json encodes the class."""
    class_case = getattr(cls, "dataclass_json_config", {}).get("letter_case")
    names = {}
    for f in dataclasses.fields(cls):
        letter_case = f.metadata.get("dataclasses_json", {}).get("letter_case", class_case)
        names[f.name] = letter_case(f.name) if letter_case else f.name
    return names


def _rename_properties(definition: Dict[str, Any], names: Dict[str, str]) -> None:
    if "properties" in definition:
        definition["properties"] = {names.get(k, k): v for k, v in definition["properties"].items()}
    if "required" in definition:
        definition["required"] = [names.get(k, k) for k in definition["required"]]


def build() -> Dict[str, Any]:
    """Reflect the document model and all metadata shapes into one JSON schema."""
    document = TypeAdapter(Document).json_schema(ref_template=REF_TEMPLATE)
    definitions: Dict[str, Any] = document.pop("$defs", {})

    metadata_names = []
    for shape in METADATA_TYPES.values():
        shape_schema = TypeAdapter(shape).json_schema(ref_template=REF_TEMPLATE)
        definitions.update(shape_schema.pop("$defs", {}))
        definitions[shape.__name__] = shape_schema
        metadata_names.append(shape.__name__)

    for cls in _dataclasses_in(Document) + [c for s in METADATA_TYPES.values() for c in _dataclasses_in(s)]:
        target = document if cls is Document else definitions.get(cls.__name__)
        if target is not None:
            _rename_properties(target, _encoded_names(cls))

    # a package carries no metadata or exactly one of the known shapes
    definitions["Package"]["properties"]["metadata"] = {
        "anyOf": [{"type": "null"}] + [{"$ref": REF_TEMPLATE.format(model=n)} for n in sorted(metadata_names)]
    }

    return {
        "$schema": JSON_SCHEMA_DIALECT,
        "$id": schema_url(),
        **document,
        "$defs": dict(sorted(definitions.items())),
    }


def encode(schema: Dict[str, Any]) -> bytes:
    return (json.dumps(schema, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def schema_filename(version: str = JSON_SCHEMA_VERSION) -> str:
    return f"schema-{version}.json"


def write(schema: bytes, directory: Union[str, Path], version: str = JSON_SCHEMA_VERSION) -> Path:
    """
    Write an encoded schema as ``schema-<version>.json`` in ``directory``.

    A published schema version never changes: writing identical content again does nothing.

    Raises:
        SchemaConflictError: If a different schema was already written for this version.
    """
    path = Path(directory) / schema_filename(version)
    if path.exists():
        if path.read_bytes() == schema:
            logger.info(f"No change to the existing schema {path}")
            return path
        raise SchemaConflictError(
            f"refusing to overwrite existing schema {path}; increment the schema version instead"
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(schema)
    logger.info(f"Wrote new schema to {path}")
    return path
