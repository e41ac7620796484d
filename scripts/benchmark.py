"""Micro-benchmarks for the structure parser on synthetic display files."""

from __future__ import annotations

import time

from dspfkit.parser import parse
from dspfkit.source.synth import SynthConfig, synthesize_display_file


def benchmark_parse(records: int = 200, fields: int = 12, runs: int = 3) -> dict[str, float]:
    text, _ = synthesize_display_file(SynthConfig(records=records, fields_per_record=fields))
    total_lines = text.count("\n")
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        parse(text)
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    lines_per_second = total_lines / best if best else 0.0
    return {
        "records": records,
        "lines": total_lines,
        "best_seconds": best or 0.0,
        "lines_per_second": lines_per_second,
    }


if __name__ == "__main__":
    result = benchmark_parse()
    print(result)
