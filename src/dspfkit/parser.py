"""Line classification and model construction for DDS display files.

``parse`` is the entry point: it walks the source once, classifying each
logical line (a physical line plus any continuation lines) as a record,
field, constant or bare keyword line, then hands the flat element list to
the linker and size resolver. Every call starts from nothing and returns a
complete, independent ParseResult.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import cast

from dspfkit.linker import (
    assign_end_indices,
    link_attributes,
    link_members,
    sync_record_attributes,
)
from dspfkit.model import (
    Attribute,
    AttributeElement,
    ConstantElement,
    Element,
    FieldElement,
    FileElement,
    Indicator,
    ParseResult,
    RecordCatalog,
    RecordCatalogEntry,
    RecordElement,
)
from dspfkit.settings import StructureSettings
from dspfkit.sizes import resolve_file_sizes, resolve_record_sizes
from dspfkit.source.columns import LineColumns, extract_columns, strip_sequence
from dspfkit.source.continuation import merge_constant_text, merge_keyword_text

logger = logging.getLogger(__name__)

LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split on line breaks, keeping a trailing empty line like an editor does."""
    return LINE_BREAK_RE.split(text)


def _keyword_attributes(
    lines: Sequence[str], start: int, indicators: list[Indicator]
) -> tuple[list[Attribute], int]:
    text, last = merge_keyword_text(lines, start)
    if not text:
        return [], last
    attribute = Attribute(
        text=text, indicators=list(indicators), line_index=start, last_line_index=last
    )
    return [attribute], last


def _record(lines: Sequence[str], index: int, columns: LineColumns) -> RecordElement:
    attributes, last = _keyword_attributes(lines, index, [])
    return RecordElement(
        name=columns.name,
        line_index=index,
        attributes=attributes,
        last_line_index=last,
    )


def _field(
    lines: Sequence[str], index: int, columns: LineColumns, record_name: str | None
) -> FieldElement:
    indicators = columns.indicators
    attributes, last = _keyword_attributes(lines, index, indicators)
    hidden = columns.hidden
    # SFL records read row and column from the same offsets as any other record
    return FieldElement(
        name=columns.name,
        line_index=index,
        type_char=columns.type_char,
        length=columns.length,
        decimals=columns.decimals,
        usage=columns.usage,
        row=None if hidden else columns.row,
        col=None if hidden else columns.col,
        hidden=hidden,
        referenced=columns.referenced,
        record_name=record_name,
        attributes=attributes,
        indicators=indicators,
        last_line_index=last,
    )


def _constant(
    lines: Sequence[str], index: int, columns: LineColumns, record_name: str | None
) -> ConstantElement:
    text, last = merge_constant_text(lines, index)
    return ConstantElement(
        text=text,
        line_index=index,
        row=columns.row,
        col=columns.col,
        record_name=record_name,
        indicators=columns.indicators,
        last_line_index=last,
    )


def _bare_attribute(
    lines: Sequence[str], index: int, columns: LineColumns
) -> AttributeElement | None:
    indicators = columns.indicators
    attributes, last = _keyword_attributes(lines, index, indicators)
    if not attributes:
        return None
    return AttributeElement(
        line_index=index,
        last_line_index=last,
        attributes=attributes,
        indicators=indicators,
    )


def classify_line(
    lines: Sequence[str], index: int, record_name: str | None = None
) -> tuple[Element | None, int]:
    """Build the element that starts at ``lines[index]``.

    ``lines`` are sequence-stripped. Returns the element (or None for
    comments and filler) and the index of the last physical line consumed.
    """
    columns = extract_columns(lines[index])
    if columns.comment:
        return None, index
    if columns.record:
        record = _record(lines, index, columns)
        return record, record.last_line_index
    if columns.name:
        field = _field(lines, index, columns, record_name)
        return field, field.last_line_index
    if columns.row and columns.col:
        constant = _constant(lines, index, columns, record_name)
        return constant, constant.last_line_index
    attribute = _bare_attribute(lines, index, columns)
    if attribute is None:
        return None, index
    return attribute, attribute.last_line_index


def walk_lines(lines: Sequence[str], catalog: RecordCatalog | None = None) -> list[Element]:
    """Classify every logical line in order, starting with the file root.

    When a catalog is given, each new record name seeds an empty entry.
    """
    elements: list[Element] = [FileElement()]
    record_name: str | None = None
    index = 0
    while index < len(lines):
        element, last = classify_line(lines, index, record_name)
        if element is not None:
            elements.append(element)
            if isinstance(element, RecordElement):
                record_name = element.name
                if catalog is not None:
                    catalog.add(RecordCatalogEntry(name=element.name, start_index=index))
        index = max(last, index) + 1
    return elements


def parse(text: str, settings: StructureSettings | None = None) -> ParseResult:
    """Parse a whole DDS display-file document."""
    settings = settings or StructureSettings()
    raw_lines = split_lines(text)
    lines = [strip_sequence(line) for line in raw_lines]

    catalog = RecordCatalog()
    elements = walk_lines(lines, catalog)

    link_attributes(elements)
    link_members(elements, catalog)

    root = cast(FileElement, elements[0])
    default_size = resolve_file_sizes(root, settings.default_size())
    resolve_record_sizes(elements, catalog, default_size)
    assign_end_indices(elements, catalog, len(lines))
    sync_record_attributes(elements, catalog)

    result = [el for el in elements if el.kind != "attribute"]
    logger.debug(
        "Parsed %d lines into %d elements across %d records",
        len(lines),
        len(result),
        len(catalog),
    )
    return ParseResult(elements=result, catalog=catalog, default_size=default_size)
