"""Serialise parse results for export (JSON payloads, CSV rows, JSONL logs)."""

from __future__ import annotations

import csv
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson

from dspfkit.model import Element, ParseResult, RecordCatalog, RecordCatalogEntry


def element_to_dict(element: Element) -> dict[str, Any]:
    return {"kind": element.kind, **asdict(element)}


def entry_to_dict(entry: RecordCatalogEntry) -> dict[str, Any]:
    return asdict(entry)


def result_to_payload(result: ParseResult) -> dict[str, Any]:
    """JSON-ready view of a parse: elements, catalog and display sizes."""
    alternate = result.alternate_size
    return {
        "default_size": asdict(result.default_size),
        "alternate_size": asdict(alternate) if alternate is not None else None,
        "elements": [element_to_dict(el) for el in result.elements],
        "catalog": [entry_to_dict(entry) for entry in result.catalog],
    }


def summary_row(result: ParseResult, source: str, tag: str | None = None) -> dict[str, Any]:
    """One-line parse summary for trend logs (record, field and constant counts)."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": source,
        "tag": tag or "",
        "records": len(result.catalog),
        "fields": sum(len(entry.fields) for entry in result.catalog),
        "constants": sum(len(entry.constants) for entry in result.catalog),
        "display_size": result.default_size.label,
    }


def catalog_rows(catalog: RecordCatalog) -> list[dict[str, Any]]:
    """One flat row per field or constant, for spreadsheets and diffs."""
    rows: list[dict[str, Any]] = []
    for entry in catalog:
        members = [("field", f) for f in entry.fields] + [("constant", c) for c in entry.constants]
        for kind, member in members:
            rows.append(
                {
                    "record": entry.name,
                    "kind": kind,
                    "name": member.name,
                    "row": member.row if member.row is not None else "",
                    "col": member.col if member.col is not None else "",
                    "length": member.length if member.length is not None else "",
                    "attributes": " ".join(member.attributes),
                    "line": member.line_index,
                }
            )
    return rows


def append_csv(path: Path, rows: list[dict[str, Any]]) -> None:
    """Append rows to a CSV file, writing headers when the file is new."""
    if not rows:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        if is_new:
            writer.writeheader()
        writer.writerows(rows)


def append_jsonl(path: Path, payload: dict[str, Any]) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("ab") as f:
        f.write(orjson.dumps(payload) + b"\n")


def write_payload(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
