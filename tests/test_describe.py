import logging

from rich.logging import RichHandler

from dspfkit.describe import (
    describe_constant,
    describe_field,
    describe_size,
    format_attributes,
    format_indicators,
)
from dspfkit.logging_config import setup_logging
from dspfkit.model import Attribute, ConstantElement, FieldElement, Indicator, Size


def test_format_indicators_and_attributes():
    indicators = [Indicator(1), Indicator(2, negated=True)]
    assert format_indicators(indicators) == "[ 01N02]"
    assert format_indicators([]) == ""
    attrs = [Attribute("DSPATR(HI)", indicators), Attribute("COLOR(RED)")]
    assert format_attributes(attrs) == "[ 01N02] DSPATR(HI), COLOR(RED)"


def test_describe_field_variants():
    numeric = FieldElement(
        name="AMT", line_index=3, type_char="S", length=5, decimals=2, row=3, col=20
    )
    assert describe_field(numeric) == "(5:2)S [03,20]"

    hidden = FieldElement(name="KEY", line_index=4, type_char="A", length=10, hidden=True)
    assert describe_field(hidden) == "(10)A (Hidden)"

    referenced = FieldElement(name="CUSNAM", line_index=5, referenced=True, row=4, col=2)
    assert describe_field(referenced) == "(Referenced) [04,02]"


def test_describe_constant_and_size():
    placed = ConstantElement(text="'Name'", line_index=1, row=1, col=2)
    assert describe_constant(placed) == "[01,02]"
    assert describe_constant(ConstantElement(text="'Name'", line_index=1)) == "[--,--]"
    window = Size(rows=7, cols=40, label="WINDOW_5_10_7_40", origin=(5, 10), source="window")
    assert describe_size(window) == "7x40 at 5,10 WINDOW_5_10_7_40"
    assert describe_size(Size(rows=24, cols=80, label="*DS3")) == "24x80 *DS3"
    assert describe_size(None) == ""


def test_setup_logging_replaces_rich_handler():
    setup_logging("DEBUG")
    setup_logging("info")
    root = logging.getLogger()
    handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
    assert root.level == logging.INFO
    setup_logging("WARNING")
