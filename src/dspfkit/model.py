"""Structural model of a parsed DDS display file.

Elements form a closed union discriminated by the class-level ``kind``:
file, record, field, constant and attribute (a bare keyword line that the
linker folds into its owner). The catalog is a flattened, per-record mirror
of the tree that editing commands use to look things up by name.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Literal, NamedTuple, cast

ElementKind = Literal["file", "record", "field", "constant", "attribute"]
SizeSource = Literal["default", "window"]


@dataclass(frozen=True)
class Indicator:
    number: int
    negated: bool = False

    @property
    def active(self) -> bool:
        return not self.negated


@dataclass
class Attribute:
    text: str
    indicators: list[Indicator] = field(default_factory=list)
    line_index: int = 0
    last_line_index: int = 0


@dataclass
class Size:
    rows: int
    cols: int
    label: str = ""
    origin: tuple[int, int] | None = None
    source: SizeSource = "default"


@dataclass
class FileElement:
    kind: ClassVar[ElementKind] = "file"
    line_index: int = 0
    attributes: list[Attribute] = field(default_factory=list)
    default_size: Size | None = None
    alternate_size: Size | None = None


@dataclass
class RecordElement:
    kind: ClassVar[ElementKind] = "record"
    name: str
    line_index: int
    attributes: list[Attribute] = field(default_factory=list)
    last_line_index: int = 0
    end_index: int | None = None
    size: Size | None = None

    @property
    def start_index(self) -> int:
        return self.line_index


@dataclass
class FieldElement:
    kind: ClassVar[ElementKind] = "field"
    name: str
    line_index: int
    type_char: str = ""
    length: int | None = None
    decimals: int | None = None
    usage: str = ""
    row: int | None = None
    col: int | None = None
    hidden: bool = False
    referenced: bool = False
    record_name: str | None = None
    attributes: list[Attribute] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    last_line_index: int = 0


@dataclass
class ConstantElement:
    kind: ClassVar[ElementKind] = "constant"
    text: str
    line_index: int
    row: int | None = None
    col: int | None = None
    record_name: str | None = None
    attributes: list[Attribute] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    last_line_index: int = 0

    @property
    def value(self) -> str:
        """Literal text without the surrounding apostrophes."""
        text = self.text
        if text.startswith("'"):
            text = text[1:]
        if text.endswith("'"):
            text = text[:-1]
        return text


@dataclass
class AttributeElement:
    kind: ClassVar[ElementKind] = "attribute"
    line_index: int
    last_line_index: int
    attributes: list[Attribute] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)


Element = FileElement | RecordElement | FieldElement | ConstantElement | AttributeElement
Owner = FileElement | RecordElement | FieldElement | ConstantElement


@dataclass
class FieldInfo:
    name: str
    row: int | None
    col: int | None
    length: int | None
    type_char: str = ""
    attributes: list[str] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    line_index: int = 0
    last_line_index: int = 0


@dataclass
class ConstantInfo:
    name: str
    row: int | None
    col: int | None
    length: int
    attributes: list[str] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    line_index: int = 0
    last_line_index: int = 0


@dataclass
class RecordCatalogEntry:
    name: str
    start_index: int
    end_index: int = 0
    attributes: list[str] = field(default_factory=list)
    fields: list[FieldInfo] = field(default_factory=list)
    constants: list[ConstantInfo] = field(default_factory=list)
    size: Size | None = None

    def field_named(self, name: str) -> FieldInfo | None:
        return next((f for f in self.fields if f.name == name), None)

    def constant_named(self, name: str) -> ConstantInfo | None:
        return next((c for c in self.constants if c.name == name), None)


class RecordCatalog:
    """Ordered, name-unique collection of record catalog entries."""

    def __init__(self) -> None:
        self._entries: dict[str, RecordCatalogEntry] = {}

    def add(self, entry: RecordCatalogEntry) -> bool:
        """Register an entry; the first record with a given name wins."""
        if entry.name in self._entries:
            return False
        self._entries[entry.name] = entry
        return True

    def get(self, name: str) -> RecordCatalogEntry | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[RecordCatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordCatalog):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"RecordCatalog({self.names()!r})"


class ParseResult(NamedTuple):
    elements: list[Element]
    catalog: RecordCatalog
    default_size: Size

    @property
    def file(self) -> FileElement:
        return cast(FileElement, self.elements[0])

    @property
    def alternate_size(self) -> Size | None:
        return self.file.alternate_size

    def records(self) -> list[RecordElement]:
        return [el for el in self.elements if isinstance(el, RecordElement)]
