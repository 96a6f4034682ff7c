"""Tests for CLI output helpers."""

import json

from mockbase.cli._output import print_error, print_object, print_records, print_table


def test_print_table_json(capsys):
    print_table(["id", "name"], [["1", "Alice"], ["2", "Bob"]], json_mode=True)
    out = capsys.readouterr().out
    data = json.loads(out)
    assert len(data) == 2
    assert data[0] == {"id": "1", "name": "Alice"}


def test_print_table_text(capsys):
    print_table(["id", "name"], [["1", None]], json_mode=False)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["id", "name"]
    assert "None" not in lines[2]


def test_print_table_empty(capsys):
    print_table(["id"], [], json_mode=False)
    out = capsys.readouterr().out
    assert out == ""


def test_print_records_union_of_keys(capsys):
    print_records([{"id": "a"}, {"id": "b", "status": "open"}])
    header = capsys.readouterr().out.splitlines()[0]
    assert header.split() == ["id", "status"]


def test_print_records_empty(capsys):
    print_records([])
    assert capsys.readouterr().out.strip() == "No results."


def test_print_records_json(capsys):
    print_records([{"id": "a"}], json_mode=True)
    assert json.loads(capsys.readouterr().out) == [{"id": "a"}]


def test_print_object_json(capsys):
    print_object({"key": "val"}, json_mode=True)
    out = capsys.readouterr().out
    assert json.loads(out) == {"key": "val"}


def test_print_object_text(capsys):
    print_object({"key": "val"}, json_mode=False)
    out = capsys.readouterr().out
    assert "key: val" in out


def test_print_error(capsys):
    print_error("something broke")
    err = capsys.readouterr().err
    assert "Error: something broke" in err
