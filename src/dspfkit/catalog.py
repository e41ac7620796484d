"""Read-only lookups over a RecordCatalog for editing commands."""

from __future__ import annotations

import re
from dataclasses import dataclass

from dspfkit.model import ConstantInfo, FieldInfo, RecordCatalog, RecordCatalogEntry

Member = FieldInfo | ConstantInfo


@dataclass
class Overlap:
    first: Member
    second: Member


def record_exists(catalog: RecordCatalog, name: str) -> bool:
    """Case-insensitive record name check."""
    wanted = name.strip().upper()
    return any(entry.name.upper() == wanted for entry in catalog)


def _span(member: Member) -> tuple[int, int] | None:
    if member.row is None or member.col is None or not member.length:
        return None
    return member.col, member.col + member.length - 1


def find_overlaps_in_record(entry: RecordCatalogEntry) -> list[Overlap]:
    """Pairs of positioned members on the same row whose columns intersect."""
    members: list[Member] = [*entry.fields, *entry.constants]
    overlaps: list[Overlap] = []
    for i, first in enumerate(members):
        first_span = _span(first)
        if first_span is None:
            continue
        for second in members[i + 1 :]:
            second_span = _span(second)
            if second_span is None or first.row != second.row:
                continue
            if first_span[0] <= second_span[1] and second_span[0] <= first_span[1]:
                overlaps.append(Overlap(first=first, second=second))
    return overlaps


def elements_with_keyword(entry: RecordCatalogEntry, keyword: str) -> list[str]:
    """Names of fields and constants carrying ``keyword`` (e.g. COLOR, DSPATR)."""
    pattern = re.compile(rf"(?<![A-Z0-9]){re.escape(keyword.upper())}\b", re.IGNORECASE)
    names: list[str] = []
    for member in [*entry.fields, *entry.constants]:
        if any(pattern.search(text) for text in member.attributes):
            names.append(member.name)
    return names


def element_line_range(entry: RecordCatalogEntry, name: str) -> tuple[int, int] | None:
    """First and last source line of a field or constant (continuations included)."""
    member: Member | None = entry.field_named(name) or entry.constant_named(name)
    if member is None:
        return None
    return member.line_index, member.last_line_index
