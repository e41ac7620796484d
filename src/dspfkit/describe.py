"""Short human-readable labels for structure views."""

from __future__ import annotations

from collections.abc import Sequence

from dspfkit.model import Attribute, ConstantElement, FieldElement, Indicator, Size


def _position(value: int | None) -> str:
    return f"{value:02d}" if value is not None else "--"


def format_indicators(indicators: Sequence[Indicator] | None) -> str:
    """Render indicators the way they are keyed in source, e.g. ``[ 01N02]``."""
    if not indicators:
        return ""
    slots = "".join(f"{'N' if ind.negated else ' '}{ind.number:02d}" for ind in indicators)
    return f"[{slots}]"


def format_attributes(attributes: Sequence[Attribute] | None) -> str:
    if not attributes:
        return ""
    parts = []
    for attr in attributes:
        prefix = format_indicators(attr.indicators)
        parts.append(f"{prefix} {attr.text}" if prefix else attr.text)
    return ", ".join(parts)


def describe_field(field: FieldElement) -> str:
    if field.length is None:
        size_text = ""
    elif field.decimals:
        size_text = f"({field.length}:{field.decimals})"
    else:
        size_text = f"({field.length})"
    if field.hidden:
        return f"{size_text}{field.type_char} (Hidden)"
    position = f"[{_position(field.row)},{_position(field.col)}]"
    if field.referenced:
        return f"(Referenced) {position}"
    return f"{size_text}{field.type_char} {position}"


def describe_constant(constant: ConstantElement) -> str:
    return f"[{_position(constant.row)},{_position(constant.col)}]"


def describe_size(size: Size | None) -> str:
    if size is None:
        return ""
    text = f"{size.rows}x{size.cols}"
    if size.origin is not None:
        text += f" at {size.origin[0]},{size.origin[1]}"
    if size.label:
        text += f" {size.label}"
    return text
