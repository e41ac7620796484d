from dspfkit.catalog import (
    element_line_range,
    elements_with_keyword,
    find_overlaps_in_record,
    record_exists,
)
from dspfkit.model import RecordCatalog, RecordCatalogEntry
from dspfkit.parser import parse
from dspfkit.source.synth import constant_lines, field_line, keyword_lines, record_line


def _parse(*groups: list[str]):
    return parse("\n".join(line for group in groups for line in group))


def test_catalog_lists_visible_fields_and_constants():
    result = _parse(
        record_line("CUSTREC", "OVERLAY"),
        constant_lines("Customer:", row=2, col=2),
        field_line("CUSNO", length=6, row=2, col=20),
        keyword_lines("DSPATR(HI)"),
        field_line("CUSKEY", length=10, usage="H"),
    )
    entry = result.catalog.get("CUSTREC")
    assert entry.attributes == ["OVERLAY"]
    assert [f.name for f in entry.fields] == ["CUSNO"]
    assert entry.fields[0].attributes == ["DSPATR(HI)"]
    assert [(c.name, c.length) for c in entry.constants] == [("Customer:", 9)]


def test_duplicate_members_are_listed_once_per_kind():
    result = _parse(
        record_line("DUPREC"),
        field_line("NAME", length=10, row=3, col=20),
        field_line("NAME", length=12, row=4, col=20),
        constant_lines("NAME", row=3, col=2),
        constant_lines("NAME", row=5, col=2),
    )
    entry = result.catalog.get("DUPREC")
    assert [(f.name, f.length) for f in entry.fields] == [("NAME", 10)]
    assert [(c.name, c.row) for c in entry.constants] == [("NAME", 3)]


def test_duplicate_record_name_keeps_first_entry():
    result = _parse(
        record_line("SAME"),
        field_line("ONE", length=1, row=1, col=2),
        record_line("SAME", "OVERLAY"),
        field_line("TWO", length=1, row=2, col=2),
    )
    assert result.catalog.names() == ["SAME"]
    entry = result.catalog.get("SAME")
    first, second = result.records()
    assert entry.start_index == first.line_index
    assert entry.end_index == first.end_index
    assert entry.attributes == []
    assert [f.name for f in entry.fields] == ["ONE", "TWO"]


def test_catalog_add_rejects_existing_name():
    catalog = RecordCatalog()
    assert catalog.add(RecordCatalogEntry(name="A", start_index=0))
    assert not catalog.add(RecordCatalogEntry(name="A", start_index=5))
    assert catalog.get("A").start_index == 0
    assert "A" in catalog and len(catalog) == 1


def test_record_exists_ignores_case():
    result = _parse(record_line("CUSTREC"))
    assert record_exists(result.catalog, "custrec")
    assert not record_exists(result.catalog, "OTHER")


def test_find_overlaps_in_record():
    result = _parse(
        record_line("CUSTREC"),
        constant_lines("Customer:", row=2, col=2),
        field_line("CUSNO", length=6, row=2, col=20),
        constant_lines("X", row=2, col=22),
        field_line("OTHER", length=6, row=3, col=20),
    )
    overlaps = find_overlaps_in_record(result.catalog.get("CUSTREC"))
    assert [(o.first.name, o.second.name) for o in overlaps] == [("CUSNO", "X")]


def test_elements_with_keyword_and_line_range():
    keywords = "COLOR(BLU) DSPATR(HI UL) CHECK(LC) EDTCDE(Z)"
    result = _parse(
        record_line("CUSTREC"),
        field_line("CUSNAM", length=30, row=3, col=20, keywords=keywords),
        field_line("CUSNO", length=6, row=2, col=20, keywords="DSPATR(PR)"),
        field_line("CITY", length=20, row=4, col=20),
    )
    entry = result.catalog.get("CUSTREC")
    assert elements_with_keyword(entry, "dspatr") == ["CUSNAM", "CUSNO"]
    assert elements_with_keyword(entry, "ATR") == []
    assert element_line_range(entry, "CUSNAM") == (1, 2)
    assert element_line_range(entry, "CITY") == (4, 4)
    assert element_line_range(entry, "MISSING") is None


def test_members_before_first_record_belong_to_no_entry():
    result = _parse(
        field_line("LOOSE", length=4, row=1, col=2),
        constant_lines("Orphan", row=2, col=2),
        record_line("MAIN"),
        field_line("OPT", length=1, row=3, col=2),
    )
    loose = [el for el in result.elements if el.kind in ("field", "constant")][:2]
    assert [el.record_name for el in loose] == [None, None]
    entry = result.catalog.get("MAIN")
    assert [f.name for f in entry.fields] == ["OPT"]
    assert entry.constants == []
    assert result.catalog.names() == ["MAIN"]
