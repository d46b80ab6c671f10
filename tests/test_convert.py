import json

import pytest

from segmenter.convert import convert_regular_csv, parse_csv, parse_csv_text
from segmenter.errors import IngestionError


def test_convert_regular_csv_writes_pretty_array(tmp_path):
    src = tmp_path / "contacts.csv"
    src.write_text('email,name\na@x.com,"Smith, Ann"\nb@x.com,Bo\n', encoding="utf-8")
    dest = tmp_path / "json" / "contacts.json"

    rows = convert_regular_csv(src, dest)

    assert rows == [{"email": "a@x.com", "name": "Smith, Ann"}, {"email": "b@x.com", "name": "Bo"}]
    text = dest.read_text(encoding="utf-8")
    assert text.startswith('[\n  {\n    "email"')
    assert json.loads(text) == rows


def test_convert_missing_input(tmp_path):
    with pytest.raises(IngestionError):
        convert_regular_csv(tmp_path / "nope.csv", tmp_path / "out.json")


def test_parse_csv_text_adds_field5():
    rows = parse_csv_text("field,value,note\n 412 , 7 ,\nfoo,\"a \"\"b\"\"\",x\n")

    assert rows[0] == {"field": "412", "value": "7", "note": None, "FIELD5": "412-7"}
    assert rows[1]["value"] == 'a "b"'
    assert rows[1]["FIELD5"] == 'foo-a "b"'


def test_parse_csv_text_missing_cells_are_none():
    rows = parse_csv_text("a,b,c\n1\n")
    assert rows == [{"a": "1", "b": None, "c": None, "FIELD5": "-"}]


def test_parse_csv_text_custom_derivation_and_delimiter():
    rows = parse_csv_text("id;center\n1;AMF\n", delimiter=";", compute_field5=lambda r: r["center"].lower())
    assert rows == [{"id": "1", "center": "AMF", "FIELD5": "amf"}]


def test_parse_csv_text_empty():
    with pytest.raises(IngestionError, match="empty"):
        parse_csv_text("\n \n")


def test_parse_csv_text_requires_headers():
    with pytest.raises(IngestionError, match="headers"):
        parse_csv_text("1,2\n", headers=False)


def test_parse_csv_reads_file(tmp_path):
    path = tmp_path / "rows.csv"
    path.write_text("field,value\r\nx,y\r\n", encoding="utf-8")
    assert parse_csv(path) == [{"field": "x", "value": "y", "FIELD5": "x-y"}]
