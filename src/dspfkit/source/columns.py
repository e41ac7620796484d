"""Fixed-column slicing of DDS display-file source lines.

Offsets below are relative to the line after the 5-character sequence area
has been removed (offset 0 is column 6 of the raw line, the form type):

- 0-1   form type + comment mark (``A*``)
- 2-10  three conditioning indicator slots, 3 characters each
- 11    name type (``R`` = record format)
- 13-22 name
- 23    reference flag (``R``)
- 27-28 length, 29 data type, 30-31 decimals, 32 usage
- 34-36 row, 36-38 column (the two windows share offset 36; do not
  shift them)
- 39-74 keyword area, 79 continuation marker (74 in 80-column members)

Slices beyond the end of a short line are empty strings, never errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from dspfkit.model import Indicator

SEQUENCE_WIDTH = 5
CONTINUATION_MARK = "-"

INDICATOR_SLICE = slice(2, 11)
NAME_SLICE = slice(13, 23)
LENGTH_SLICE = slice(27, 29)
DECIMALS_SLICE = slice(30, 32)
ROW_SLICE = slice(34, 37)
COL_SLICE = slice(36, 39)
KEYWORD_SLICE = slice(39, 75)
LITERAL_SLICE = slice(39, 79)

RECORD_OFFSET = 11
REFERENCE_OFFSET = 23
TYPE_OFFSET = 29
USAGE_OFFSET = 32
CONTINUATION_OFFSET = 79
SHORT_CONTINUATION_OFFSET = 74


def strip_sequence(raw: str) -> str:
    """Drop the sequence-number area in front of the form type."""
    return raw[SEQUENCE_WIDTH:]


def char_at(line: str, offset: int) -> str:
    return line[offset : offset + 1]


def to_number(text: str) -> int | None:
    """Digits-only text to int; blank or anything else is absent."""
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def is_comment(line: str) -> bool:
    return char_at(line, 1) == "*" and char_at(line, 0) in ("A", " ")


def decode_indicators(segment: str) -> list[Indicator]:
    """Decode up to three ``[N]nn`` slots from a 9-character segment."""
    indicators: list[Indicator] = []
    for start in range(0, 9, 3):
        slot = segment[start : start + 3]
        number_text = slot[1:3].strip()
        if not number_text:
            continue
        number = to_number(number_text)
        if number is None or not 1 <= number <= 99:
            continue
        indicators.append(Indicator(number=number, negated=slot[:1] == "N"))
    indicators.sort(key=lambda ind: ind.number)
    return indicators


@dataclass
class LineColumns:
    comment: bool
    record: bool
    indicator_text: str
    name: str
    referenced: bool
    length_text: str
    type_char: str
    decimals_text: str
    usage: str
    row_text: str
    col_text: str
    keyword_text: str
    continued: bool

    @property
    def indicators(self) -> list[Indicator]:
        return decode_indicators(self.indicator_text)

    @property
    def length(self) -> int | None:
        return to_number(self.length_text)

    @property
    def decimals(self) -> int | None:
        return to_number(self.decimals_text)

    @property
    def row(self) -> int | None:
        return to_number(self.row_text)

    @property
    def col(self) -> int | None:
        return to_number(self.col_text)

    @property
    def hidden(self) -> bool:
        return self.usage == "H"


def extract_columns(line: str) -> LineColumns:
    """Slice one sequence-stripped line into its raw column values."""
    return LineColumns(
        comment=is_comment(line),
        record=char_at(line, RECORD_OFFSET) == "R",
        indicator_text=line[INDICATOR_SLICE],
        name=line[NAME_SLICE].strip(),
        referenced=char_at(line, REFERENCE_OFFSET) == "R",
        length_text=line[LENGTH_SLICE],
        type_char=char_at(line, TYPE_OFFSET).strip(),
        decimals_text=line[DECIMALS_SLICE],
        usage=char_at(line, USAGE_OFFSET).strip(),
        row_text=line[ROW_SLICE].strip(),
        col_text=line[COL_SLICE].strip(),
        keyword_text=line[KEYWORD_SLICE],
        continued=char_at(line, CONTINUATION_OFFSET) == CONTINUATION_MARK,
    )
