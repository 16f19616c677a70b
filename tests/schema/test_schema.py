# pylint: disable=redefined-outer-name
import json

import pytest

from surveyor import schema
from surveyor.errors import SchemaConflictError
from surveyor.formats.json_model import JSON_SCHEMA_VERSION
from surveyor.pkg import METADATA_TYPES


@pytest.fixture(scope="module")
def generated():
    return schema.build()


def test_schema_header(generated):
    assert generated["$schema"] == schema.JSON_SCHEMA_DIALECT
    assert generated["$id"].endswith(f"schema-{JSON_SCHEMA_VERSION}.json")
    assert generated["type"] == "object"


def test_document_properties_are_camel_case(generated):
    assert "artifactRelationships" in generated["properties"]
    assert "artifact_relationships" not in generated["properties"]
    package = generated["$defs"]["Package"]
    assert "foundBy" in package["properties"]
    assert "metadataType" in package["properties"]
    coordinates = generated["$defs"]["Coordinates"]
    assert sorted(coordinates["properties"]) == ["layerID", "realPath"]
    entry = generated["$defs"]["FileMetadataEntry"]
    assert {"userID", "groupID", "mimeType", "linkDestination"} <= set(entry["properties"])


def test_every_metadata_shape_is_referenced(generated):
    refs = [option.get("$ref") for option in generated["$defs"]["Package"]["properties"]["metadata"]["anyOf"]]
    assert refs[0] is None
    assert sorted(refs[1:]) == sorted(f"#/$defs/{shape.__name__}" for shape in METADATA_TYPES.values())
    for shape in METADATA_TYPES.values():
        assert shape.__name__ in generated["$defs"]
    assert "h1Digest" in generated["$defs"]["GolangModMetadata"]["properties"]
    assert "isConfigFile" in generated["$defs"]["DpkgFileRecord"]["properties"]


def test_build_is_deterministic(generated):
    assert schema.encode(schema.build()) == schema.encode(generated)


def test_write_new_schema(tmp_path, generated):
    encoded = schema.encode(generated)
    path = schema.write(encoded, tmp_path)
    assert path.name == f"schema-{JSON_SCHEMA_VERSION}.json"
    assert json.loads(path.read_text()) == generated


def test_write_identical_schema_is_a_no_op(tmp_path, generated):
    encoded = schema.encode(generated)
    path = schema.write(encoded, tmp_path)
    mtime = path.stat().st_mtime_ns
    assert schema.write(encoded, tmp_path) == path
    assert path.stat().st_mtime_ns == mtime


def test_write_conflicting_schema_is_refused(tmp_path, generated):
    schema.write(schema.encode(generated), tmp_path)
    with pytest.raises(SchemaConflictError):
        schema.write(b'{"changed": true}\n', tmp_path)
    # another version is a new file
    assert schema.write(b'{"changed": true}\n', tmp_path, "9.9.9").name == "schema-9.9.9.json"
