import json

from segmenter.cli import main


def test_segment_command(tmp_path, capsys):
    src = tmp_path / "list.csv"
    src.write_text("id,center\n1,AMF\n", encoding="utf-8")
    out = tmp_path / "out"

    code = main(["segment", str(src), "--output-dir", str(out)])

    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert len(report["artifacts"]) == 3
    assert (out / "amf_retail_part_1.json").exists()


def test_segment_unsupported_extension(tmp_path, capsys):
    code = main(["segment", str(tmp_path / "list.txt"), "--output-dir", str(tmp_path)])
    assert code == 2
    assert "UNSUPPORTED_FORMAT" in capsys.readouterr().err


def test_convert_command(tmp_path, capsys):
    src = tmp_path / "a.csv"
    src.write_text("k,v\n1,2\n", encoding="utf-8")
    dest = tmp_path / "a.json"

    assert main(["convert", str(src), str(dest)]) == 0
    assert json.loads(dest.read_text(encoding="utf-8")) == [{"k": "1", "v": "2"}]


def test_validate_command(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text(json.dumps({"name": "x", "contactCriteria": {"type": "and", "children": []}}), encoding="utf-8")
    assert main(["validate", str(doc)]) == 0

    doc.write_text(json.dumps({"name": "x"}), encoding="utf-8")
    assert main(["validate", str(doc)]) == 1


def test_validate_unreadable_input(tmp_path, capsys):
    doc = tmp_path / "doc.json"
    doc.write_text("{not json", encoding="utf-8")

    assert main(["validate", str(doc)]) == 2
    assert main(["validate", str(tmp_path / "missing.json")]) == 2
    assert "cannot load input" in capsys.readouterr().err
