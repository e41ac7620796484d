"""Quick viewer for catalog CSV exports (``dspfkit catalog --csv``).

Shows per-record field/constant counts and the most used keywords in Rich tables.
"""

from __future__ import annotations

import argparse
import csv
import re
from collections import Counter, defaultdict
from pathlib import Path
from typing import Dict, Iterable

from rich.console import Console
from rich.table import Table

PARENS_RE = re.compile(r"\([^()]*\)")


def _iter_rows(path: Path) -> Iterable[Dict[str, str]]:
    with path.open(newline="") as f:
        yield from csv.DictReader(f)


def _keywords(attributes: str) -> list[str]:
    return PARENS_RE.sub(" ", attributes.upper()).split()


def main() -> None:
    parser = argparse.ArgumentParser(description="View catalog CSV exports.")
    parser.add_argument("csv", type=Path, help="CSV written by `dspfkit catalog --csv`.")
    parser.add_argument("--top", type=int, default=10, help="Number of keywords to list.")
    args = parser.parse_args()

    console = Console()
    counts: dict[str, Counter[str]] = defaultdict(Counter)
    keywords: Counter[str] = Counter()
    for row in _iter_rows(args.csv):
        counts[row["record"]][row["kind"]] += 1
        keywords.update(_keywords(row.get("attributes", "")))

    record_table = Table(title="Records")
    record_table.add_column("Record")
    record_table.add_column("Fields", justify="right")
    record_table.add_column("Constants", justify="right")
    for record, kinds in sorted(counts.items()):
        record_table.add_row(record, str(kinds["field"]), str(kinds["constant"]))
    console.print(record_table)

    if keywords:
        keyword_table = Table(title="Keywords")
        keyword_table.add_column("Keyword")
        keyword_table.add_column("Uses", justify="right")
        for keyword, count in keywords.most_common(args.top):
            keyword_table.add_row(keyword, str(count))
        console.print(keyword_table)


if __name__ == "__main__":
    main()
