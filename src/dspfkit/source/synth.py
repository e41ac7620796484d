"""Build fixed-column DDS display-file source for fixtures and benchmarks.

The builders place values where an 80-column DDS member keeps them: row in
columns 39-41, column in 42-44, keywords in 45-80 with a trailing ``-``
when the text continues on the next line.
"""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from dspfkit.model import Indicator
from dspfkit.source.columns import SEQUENCE_WIDTH

KEYWORD_OFFSET = 39
CHUNK_WIDTH = 35  # keyword area is 36 wide; the last position holds the marker
IndicatorLike = Indicator | tuple[int, bool] | int


def compose_line(placements: Mapping[int, str], sequence: str = "") -> str:
    """Raw source line with each text placed at its sequence-stripped offset."""
    width = max((offset + len(text) for offset, text in placements.items()), default=1)
    buf = [" "] * max(width, 1)
    buf[0] = "A"
    for offset, text in placements.items():
        buf[offset : offset + len(text)] = list(text)
    return sequence.ljust(SEQUENCE_WIDTH)[:SEQUENCE_WIDTH] + "".join(buf).rstrip()


def indicator_text(indicators: Sequence[IndicatorLike]) -> str:
    """Key up to three indicators into the 9-character conditioning area."""
    slots: list[str] = []
    for item in list(indicators)[:3]:
        if isinstance(item, Indicator):
            number, negated = item.number, item.negated
        elif isinstance(item, tuple):
            number, negated = item
        else:
            number, negated = item, False
        slots.append(f"{'N' if negated else ' '}{number:02d}")
    return "".join(slots).ljust(9)


def split_continued(text: str, width: int = CHUNK_WIDTH) -> list[str]:
    """Chunks that fit the keyword area, each but the last ending in ``-``."""
    if len(text) <= width + 1:
        return [text]
    chunks = [text[i : i + width] for i in range(0, len(text), width)]
    return [chunk + "-" for chunk in chunks[:-1]] + [chunks[-1]]


def keyword_lines(keywords: str, indicators: Sequence[IndicatorLike] = ()) -> list[str]:
    """Bare keyword lines, conditioned on ``indicators``."""
    lines = []
    for position, chunk in enumerate(split_continued(keywords)):
        placements = {KEYWORD_OFFSET: chunk}
        if position == 0 and indicators:
            placements[2] = indicator_text(indicators)
        lines.append(compose_line(placements))
    return lines


def _with_keywords(placements: dict[int, str], keywords: str) -> list[str]:
    if not keywords:
        return [compose_line(placements)]
    chunks = split_continued(keywords)
    first = compose_line({**placements, KEYWORD_OFFSET: chunks[0]})
    return [first] + [compose_line({KEYWORD_OFFSET: chunk}) for chunk in chunks[1:]]


def record_line(name: str, keywords: str = "") -> list[str]:
    return _with_keywords({11: "R", 13: name}, keywords)


def field_line(
    name: str,
    length: int | None = None,
    type_char: str = "A",
    decimals: int | None = None,
    usage: str = "B",
    row: int | None = None,
    col: int | None = None,
    keywords: str = "",
    indicators: Sequence[IndicatorLike] = (),
    referenced: bool = False,
) -> list[str]:
    placements: dict[int, str] = {13: name, 29: type_char, 32: usage}
    if indicators:
        placements[2] = indicator_text(indicators)
    if referenced:
        placements[23] = "R"
    if length is not None:
        placements[24] = f"{length:>5}"
    if decimals is not None:
        placements[30] = f"{decimals:>2}"
    if row is not None:
        placements[33] = f"{row:>3}"
    if col is not None:
        placements[36] = f"{col:>3}"
    return _with_keywords(placements, keywords)


def constant_lines(
    value: str, row: int, col: int, indicators: Sequence[IndicatorLike] = ()
) -> list[str]:
    """A quoted literal at ``row``/``col``, continued over as many lines as needed."""
    chunks = split_continued(f"'{value}'")
    placements: dict[int, str] = {33: f"{row:>3}", 36: f"{col:>3}", KEYWORD_OFFSET: chunks[0]}
    if indicators:
        placements[2] = indicator_text(indicators)
    return [compose_line(placements)] + [
        compose_line({KEYWORD_OFFSET: chunk}) for chunk in chunks[1:]
    ]


def comment_line(text: str = "") -> str:
    return compose_line({1: "*", 2: f" {text}" if text else ""})


@dataclass
class SynthConfig:
    seed: int = 1234
    records: int = 3
    fields_per_record: int = 4
    window_every: int = 3  # every Nth record becomes a window; 0 disables
    dspsiz: str = "DSPSIZ(24 80 *DS3 27 132 *DS4)"


LABELS: Sequence[str] = ("Customer", "Name", "Address", "City", "Balance", "Status", "Region")
COLORS: Sequence[str] = ("BLU", "RED", "WHT", "GRN", "YLW", "PNK", "TRQ")


def synthesize_display_file(config: SynthConfig | None = None) -> tuple[str, list[dict]]:
    """Generate a display file plus metadata describing what was generated."""
    cfg = config or SynthConfig()
    rng = random.Random(cfg.seed)
    lines: list[str] = [comment_line("Generated display file")]
    lines += keyword_lines(cfg.dspsiz)
    lines += keyword_lines("INDARA CA03(03 'Exit')")
    metadata: list[dict] = []

    for r in range(cfg.records):
        name = f"REC{r + 1:03d}"
        is_window = cfg.window_every > 0 and (r + 1) % cfg.window_every == 0
        keywords = "WINDOW(5 10 12 50)" if is_window else "OVERLAY"
        lines += record_line(name, keywords)
        lines += constant_lines(f"Screen {name}", row=1, col=2)
        record_meta: dict = {
            "record": name,
            "window": is_window,
            "fields": [],
            "constants": [f"Screen {name}"],
        }
        for f in range(cfg.fields_per_record):
            row = 3 + f
            label = f"{rng.choice(LABELS)} {f + 1}"
            field_name = f"F{r + 1:02d}{f + 1:03d}"
            numeric = rng.random() < 0.3
            length = rng.randint(1, 9) if numeric else rng.randint(4, 30)
            lines += constant_lines(f"{label}:", row=row, col=2)
            lines += field_line(
                field_name,
                length=length,
                type_char="S" if numeric else "A",
                decimals=rng.randint(0, 2) if numeric else None,
                usage=rng.choice("BIO"),
                row=row,
                col=20,
            )
            if rng.random() < 0.5:
                condition = (rng.randint(1, 99), rng.random() < 0.5)
                lines += keyword_lines(f"COLOR({rng.choice(COLORS)})", [condition])
            record_meta["fields"].append(field_name)
            record_meta["constants"].append(f"{label}:")
        hidden = f"H{r + 1:02d}KEY"
        lines += field_line(hidden, length=10, usage="H")
        record_meta["hidden"] = hidden
        metadata.append(record_meta)

    return "\n".join(lines) + "\n", metadata
