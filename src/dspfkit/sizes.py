"""Display size resolution from DSPSIZ and WINDOW keywords."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import replace

from dspfkit.model import Attribute, Element, FileElement, RecordCatalog, RecordElement, Size

logger = logging.getLogger(__name__)

DSPSIZ_RE = re.compile(r"DSPSIZ\s*\(([^)]*)\)", re.IGNORECASE)
WINDOW_RE = re.compile(r"WINDOW\s*\(([^)]*)\)", re.IGNORECASE)
WINDOW_BOUNDS_RE = re.compile(r"^\s*(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s*$")
WINDOW_DEFAULT_RE = re.compile(r"^\s*\*DFT\s+(\d+)\s+(\d+)\s*$", re.IGNORECASE)
WINDOW_REFERENCE_RE = re.compile(r"^\s*([A-Z@#$][A-Z0-9@#$_]{0,9})\s*$", re.IGNORECASE)

PREDEFINED_SIZES: dict[str, tuple[int, int]] = {
    "*DS3": (24, 80),
    "*DS4": (27, 132),
}


def _keyword_argument(pattern: re.Pattern[str], attributes: Iterable[Attribute]) -> str | None:
    for attr in attributes:
        match = pattern.search(attr.text)
        if match:
            return match.group(1)
    return None


def parse_display_sizes(argument: str) -> list[Size]:
    """Read ``rows cols [label]`` groups and bare ``*DS3``/``*DS4`` names in order."""
    tokens = [token.upper() for token in argument.split()]
    sizes: list[Size] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith("*"):
            predefined = PREDEFINED_SIZES.get(token)
            if predefined:
                rows, cols = predefined
                sizes.append(Size(rows=rows, cols=cols, label=token, source="default"))
            i += 1
        elif token.isdigit() and i + 1 < len(tokens) and tokens[i + 1].isdigit():
            label = tokens[i + 2] if i + 2 < len(tokens) and tokens[i + 2].startswith("*") else ""
            sizes.append(Size(rows=int(token), cols=int(tokens[i + 1]), label=label))
            i += 3 if label else 2
        else:
            i += 1
    return sizes


def resolve_file_sizes(file: FileElement, fallback: Size) -> Size:
    """Set the file's default (and alternate) size from its DSPSIZ keyword."""
    argument = _keyword_argument(DSPSIZ_RE, file.attributes)
    sizes = parse_display_sizes(argument) if argument is not None else []
    if not sizes:
        sizes = [replace(fallback)]
    file.default_size = sizes[0]
    file.alternate_size = sizes[1] if len(sizes) > 1 else None
    return file.default_size


def window_size(argument: str) -> Size | None:
    """Size for ``WINDOW(startRow startCol rows cols)`` or ``WINDOW(*DFT rows cols)``."""
    bounds = WINDOW_BOUNDS_RE.match(argument)
    if bounds:
        start_row, start_col, rows, cols = (int(v) for v in bounds.groups())
        return Size(
            rows=rows,
            cols=cols,
            label=f"WINDOW_{start_row}_{start_col}_{rows}_{cols}",
            origin=(start_row, start_col),
            source="window",
        )
    default = WINDOW_DEFAULT_RE.match(argument)
    if default:
        rows, cols = (int(v) for v in default.groups())
        return Size(rows=rows, cols=cols, label=f"WINDOW_DFT_{rows}_{cols}", source="window")
    return None


def resolve_record_sizes(
    elements: Sequence[Element], catalog: RecordCatalog, default: Size
) -> None:
    """Give every record its window size, or the file default."""
    records = [el for el in elements if isinstance(el, RecordElement)]
    windows: dict[str, Size] = {}
    references: list[tuple[RecordElement, str]] = []

    for record in records:
        argument = _keyword_argument(WINDOW_RE, record.attributes)
        size = window_size(argument) if argument is not None else None
        if size is not None:
            windows.setdefault(record.name.upper(), size)
            record.size = size
            continue
        reference = WINDOW_REFERENCE_RE.match(argument) if argument is not None else None
        if reference:
            references.append((record, reference.group(1).upper()))
        record.size = replace(default)

    for record, target in references:
        size = windows.get(target)
        if size is None:
            logger.debug("WINDOW(%s) on record %s does not name a window", target, record.name)
            continue
        record.size = replace(size)

    for record in records:
        entry = catalog.get(record.name)
        if entry is not None and entry.start_index == record.line_index:
            entry.size = record.size
