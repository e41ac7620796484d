"""Post-walk passes that turn the flat element list into a tree and catalog.

The walker emits elements in strictly increasing line order, so "nearest
preceding owner" is simply the last owner seen while walking forward.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from dspfkit.model import (
    Attribute,
    AttributeElement,
    ConstantElement,
    ConstantInfo,
    Element,
    FieldElement,
    FieldInfo,
    Owner,
    RecordCatalog,
    RecordElement,
)

logger = logging.getLogger(__name__)


def flatten_attributes(attributes: Iterable[Attribute]) -> list[str]:
    return [attr.text for attr in attributes if attr.text]


def link_attributes(elements: Sequence[Element]) -> None:
    """Pass A: fold each bare keyword line into the nearest preceding owner."""
    owner: Owner | None = None
    for element in elements:
        if isinstance(element, AttributeElement):
            if owner is None:
                logger.debug("Dropping keyword line %d with no owner", element.line_index)
                continue
            owner.attributes.extend(element.attributes)
        else:
            owner = element


def field_info(field: FieldElement) -> FieldInfo:
    return FieldInfo(
        name=field.name,
        row=field.row,
        col=field.col,
        length=field.length,
        type_char=field.type_char,
        attributes=flatten_attributes(field.attributes),
        indicators=list(field.indicators),
        line_index=field.line_index,
        last_line_index=field.last_line_index,
    )


def constant_info(constant: ConstantElement) -> ConstantInfo:
    name = constant.value
    return ConstantInfo(
        name=name,
        row=constant.row,
        col=constant.col,
        length=len(name),
        attributes=flatten_attributes(constant.attributes),
        indicators=list(constant.indicators),
        line_index=constant.line_index,
        last_line_index=constant.last_line_index,
    )


def link_members(elements: Sequence[Element], catalog: RecordCatalog) -> None:
    """Pass B: list visible fields and constants under their record's entry."""
    record: RecordElement | None = None
    for element in elements:
        if isinstance(element, RecordElement):
            record = element
            continue
        if record is None:
            continue
        entry = catalog.get(record.name)
        if entry is None:
            continue
        if isinstance(element, FieldElement):
            if element.hidden or entry.field_named(element.name) is not None:
                continue
            entry.fields.append(field_info(element))
        elif isinstance(element, ConstantElement):
            info = constant_info(element)
            if entry.constant_named(info.name) is not None:
                continue
            entry.constants.append(info)


def assign_end_indices(
    elements: Sequence[Element], catalog: RecordCatalog, total_lines: int
) -> None:
    """Each record ends on the line before the next record, the last at EOF."""
    records = sorted(
        (el for el in elements if isinstance(el, RecordElement)), key=lambda r: r.line_index
    )
    for position, record in enumerate(records):
        if position + 1 < len(records):
            record.end_index = records[position + 1].line_index - 1
        else:
            record.end_index = total_lines - 1
        entry = catalog.get(record.name)
        if entry is not None and entry.start_index == record.line_index:
            entry.end_index = record.end_index


def sync_record_attributes(elements: Sequence[Element], catalog: RecordCatalog) -> None:
    for element in elements:
        if not isinstance(element, RecordElement):
            continue
        entry = catalog.get(element.name)
        if entry is not None and entry.start_index == element.line_index:
            entry.attributes = flatten_attributes(element.attributes)
