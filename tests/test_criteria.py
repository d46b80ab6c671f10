import json

from segmenter.criteria import build_document, segment_name
from segmenter.models import FieldMapping, Row

MAPPING = FieldMapping(pref="413", center="412", unsub="418")


def _rows(*ids, center="Bowlero"):
    return [Row(id=i, center=center) for i in ids]


def test_root_has_three_children_in_fixed_order():
    doc = build_document(_rows(5, 3, 9), MAPPING, "Bowlero Retail")
    root = doc.to_dict()["contactCriteria"]

    assert root["type"] == "and"
    pref, unsub, centers = root["children"]
    assert pref == {"type": "criteria", "field": "413", "operator": "equals", "value": "True"}
    assert unsub == {"type": "criteria", "field": "418", "operator": "empty", "value": ""}
    assert centers["type"] == "or"
    assert len(centers["children"]) == 3


def test_center_leaves_keep_input_order():
    doc = build_document(_rows(5, 3, 9), MAPPING, "Bowlero Retail")
    leaves = doc.to_dict()["contactCriteria"]["children"][2]["children"]

    assert [leaf["value"] for leaf in leaves] == ["5", "3", "9"]
    assert {leaf["field"] for leaf in leaves} == {"412"}
    assert {leaf["operator"] for leaf in leaves} == {"equals"}


def test_build_is_idempotent():
    rows = _rows(1, 2, 3)
    assert build_document(rows, MAPPING, "x") == build_document(rows, MAPPING, "x")
    assert build_document(rows, MAPPING, "x").to_json() == build_document(rows, MAPPING, "x").to_json()


def test_empty_rows_still_build_empty_or():
    doc = build_document([], MAPPING, "AMF League")
    assert doc.to_dict()["contactCriteria"]["children"][2] == {"type": "or", "children": []}


def test_json_uses_platform_keys_and_two_space_indent():
    doc = build_document(_rows(1), MAPPING, segment_name("Lucky Strike", "Group Event"))
    text = doc.to_json()

    assert text.startswith('{\n  "name": "Lucky Strike Group Event",\n  "contactCriteria": {')
    assert list(json.loads(text)) == ["name", "contactCriteria"]


def test_field_mapping_accepts_numeric_codes():
    mapping = FieldMapping.model_validate({"pref": 1064, "center": 1065, "unsub": 1084})
    assert (mapping.pref_field, mapping.center_field, mapping.unsub_field) == ("1064", "1065", "1084")
