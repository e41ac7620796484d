"""Stitch literal and keyword text that spans several physical lines.

Both mergers work on sequence-stripped lines and return the merged text
together with the index of the last physical line they consumed, so the
walker can skip continuation lines.
"""

from __future__ import annotations

from collections.abc import Sequence

from dspfkit.source.columns import (
    CONTINUATION_MARK,
    CONTINUATION_OFFSET,
    KEYWORD_SLICE,
    LITERAL_SLICE,
    SHORT_CONTINUATION_OFFSET,
    char_at,
)


def _literal_piece(line: str) -> tuple[str, bool]:
    """Literal slice of one line, minus its marker, and whether it continues."""
    if char_at(line, CONTINUATION_OFFSET) == CONTINUATION_MARK:
        return line[LITERAL_SLICE], True
    # 80-column members carry the marker in their last column
    if (
        char_at(line, SHORT_CONTINUATION_OFFSET) == CONTINUATION_MARK
        and not line[SHORT_CONTINUATION_OFFSET + 1 : CONTINUATION_OFFSET].strip()
    ):
        return line[LITERAL_SLICE.start : SHORT_CONTINUATION_OFFSET], True
    return line[LITERAL_SLICE], False


def merge_constant_text(lines: Sequence[str], start: int) -> tuple[str, int]:
    """Rebuild a quoted literal that may continue over several lines."""
    text, continued = _literal_piece(lines[start])
    index = start
    while continued and index + 1 < len(lines):
        index += 1
        piece, continued = _literal_piece(lines[index])
        text += piece
    return text.strip(), index


def merge_keyword_text(lines: Sequence[str], start: int) -> tuple[str, int]:
    """Collect keyword-area text while each slice ends with a ``-`` marker."""
    parts: list[str] = []
    index = start
    while True:
        area = lines[index][KEYWORD_SLICE]
        trimmed = area.rstrip()
        if not trimmed.endswith(CONTINUATION_MARK):
            parts.append(area)
            break
        parts.append(trimmed[:-1])
        if index + 1 >= len(lines):
            break
        index += 1
    return "".join(parts).strip(), index
