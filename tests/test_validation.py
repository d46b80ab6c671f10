import json

import pytest

from segmenter.criteria import build_document
from segmenter.errors import ConfigError, SchemaValidationError
from segmenter.models import FieldMapping, Row
from segmenter.validation import load_schema, validate_document, validate_json


def _doc():
    mapping = FieldMapping(pref="415", center="414", unsub="418")
    return build_document([Row(id=1, center="Bowlero")], mapping, "Bowlero League").to_dict()


def test_built_documents_are_valid():
    assert validate_document(_doc()) == []
    validate_json(_doc())


def test_bad_leaf_reports_path():
    doc = _doc()
    doc["contactCriteria"]["children"][1]["operator"] = "contains"

    issues = validate_document(doc)

    assert [i.path for i in issues] == ["/contactCriteria/children/1"]


def test_validate_json_raises_with_readable_lines():
    with pytest.raises(SchemaValidationError) as info:
        validate_json({"name": "x"})
    assert "(root) 'contactCriteria' is a required property" in str(info.value)
    assert len(info.value.issues) == 1


def test_custom_schema(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text("type: object\nrequired: [id]\n", encoding="utf-8")
    schema = load_schema(schema_path)

    assert validate_document({"id": 1}, schema) == []
    assert [i.message for i in validate_document({}, schema)] == ["'id' is a required property"]


def test_json_schema_file(tmp_path):
    schema_path = tmp_path / "schema.json"
    schema_path.write_text(json.dumps({"type": "array"}), encoding="utf-8")
    assert validate_document([], load_schema(schema_path)) == []


def test_broken_schema():
    with pytest.raises(ConfigError):
        validate_document({}, {"type": 12})
