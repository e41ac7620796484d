import csv
from pathlib import Path

import orjson

from dspfkit.parser import parse
from dspfkit.report import (
    append_csv,
    append_jsonl,
    catalog_rows,
    result_to_payload,
    summary_row,
    write_payload,
)
from dspfkit.source.synth import constant_lines, field_line, keyword_lines, record_line


def _result():
    lines = [
        *keyword_lines("DSPSIZ(24 80 *DS3 27 132 *DS4)"),
        *record_line("CUSTREC", "WINDOW(5 10 7 40)"),
        *constant_lines("Customer:", row=2, col=2),
        *field_line("CUSNO", length=6, row=2, col=20, keywords="DSPATR(HI)"),
        *field_line("CUSKEY", length=10, usage="H"),
    ]
    return parse("\n".join(lines))


def test_payload_is_json_serialisable(tmp_path: Path) -> None:
    payload = result_to_payload(_result())
    assert payload["default_size"]["label"] == "*DS3"
    assert payload["alternate_size"]["cols"] == 132
    assert [el["kind"] for el in payload["elements"]] == [
        "file",
        "record",
        "constant",
        "field",
        "field",
    ]

    out = tmp_path / "out" / "catalog.json"
    write_payload(out, payload)
    loaded = orjson.loads(out.read_bytes())
    entry = loaded["catalog"][0]
    assert entry["name"] == "CUSTREC"
    assert entry["size"]["origin"] == [5, 10]
    assert [f["name"] for f in entry["fields"]] == ["CUSNO"]


def test_catalog_rows_flatten_fields_and_constants():
    rows = catalog_rows(_result().catalog)
    assert [(r["kind"], r["name"]) for r in rows] == [
        ("field", "CUSNO"),
        ("constant", "Customer:"),
    ]
    assert rows[0]["attributes"] == "DSPATR(HI)"
    assert rows[0]["length"] == 6


def test_append_csv_writes_header_once(tmp_path: Path) -> None:
    path = tmp_path / "catalog.csv"
    rows = catalog_rows(_result().catalog)
    append_csv(path, rows)
    append_csv(path, rows)
    append_csv(path, [])

    with path.open(newline="") as f:
        read = list(csv.DictReader(f))
    assert len(read) == 4
    assert read[0]["record"] == "CUSTREC"
    assert read[1]["row"] == "2"


def test_append_jsonl(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "parses.jsonl"
    append_jsonl(path, {"file": "a.dspf", "records": 1})
    append_jsonl(path, {"file": "b.dspf", "records": 2})
    lines = path.read_bytes().splitlines()
    assert [orjson.loads(line)["records"] for line in lines] == [1, 2]


def test_summary_row_counts_catalog_members():
    row = summary_row(_result(), source="custinq.dspf", tag="nightly")
    assert row["source"] == "custinq.dspf"
    assert row["tag"] == "nightly"
    assert (row["records"], row["fields"], row["constants"]) == (1, 1, 1)
    assert row["display_size"] == "*DS3"
    assert row["timestamp"]
