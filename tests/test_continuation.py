from dspfkit.parser import parse
from dspfkit.source.columns import strip_sequence
from dspfkit.source.continuation import merge_constant_text, merge_keyword_text
from dspfkit.source.synth import (
    compose_line,
    constant_lines,
    field_line,
    keyword_lines,
    record_line,
)


def _stripped(lines):
    return [strip_sequence(line) for line in lines]


def test_constant_marker_in_column_79_merges_two_lines():
    first = "'" + "A" * 39
    lines = _stripped(
        [
            compose_line({33: "  5", 36: " 10", 39: first, 79: "-"}),
            compose_line({39: "BCD'"}),
        ]
    )
    text, last = merge_constant_text(lines, 0)
    assert text == first + "BCD'"
    assert last == 1


def test_long_constant_round_trips_across_lines():
    value = "Enter the customer number and press Enter to continue or F3 to leave this screen"
    raw = constant_lines(value, row=22, col=2)
    assert len(raw) == 3

    text, last = merge_constant_text(_stripped(raw), 0)
    assert text == f"'{value}'"
    assert last == len(raw) - 1


def test_constant_without_marker_is_single_line():
    lines = _stripped(constant_lines("Name:", row=3, col=2) + constant_lines("City:", row=4, col=2))
    assert merge_constant_text(lines, 0) == ("'Name:'", 0)


def test_keyword_continuation_merges_and_drops_marker():
    keywords = "COLOR(BLU) DSPATR(HI UL) CHECK(LC) EDTCDE(Z)"
    raw = field_line("CUSNAM", length=30, row=3, col=20, keywords=keywords)
    assert len(raw) == 2

    text, last = merge_keyword_text(_stripped(raw), 0)
    assert text == keywords
    assert last == 1


def test_keyword_continuation_at_end_of_document_is_clamped():
    lines = _stripped([compose_line({39: "TEXT('Trailing') -"})])
    assert merge_keyword_text(lines, 0) == ("TEXT('Trailing')", 0)


def test_continued_constant_lines_are_not_reclassified():
    value = "A literal long enough that it has to be continued onto a second source line"
    doc = [*keyword_lines("DSPSIZ(24 80 *DS3)"), *constant_lines(value, row=1, col=2)]
    result = parse("\n".join(doc))

    constants = [el for el in result.elements if el.kind == "constant"]
    assert len(constants) == 1
    assert constants[0].value == value
    assert constants[0].last_line_index == len(doc) - 1


def test_inner_dash_does_not_continue_constant():
    literal = "'F3=Exit -" + " " * 26 + "End'"
    doc = [
        *record_line("MAIN"),
        compose_line({33: "  2", 36: "  2", 39: literal}),
        *field_line("OPT", length=1, usage="I", row=3, col=2),
    ]
    lines = _stripped(doc)
    assert merge_constant_text(lines, 1) == (literal, 1)

    result = parse("\n".join(doc))
    assert [el.kind for el in result.elements] == ["file", "record", "constant", "field"]
    assert [f.name for f in result.catalog.get("MAIN").fields] == ["OPT"]
