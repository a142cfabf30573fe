from __future__ import annotations

from dataclasses import dataclass

from .errors import CellValueError
from .strings import SharedStringTable, entry_text
from .xml_node import XmlNode

"""Cell value resolution.

A ``<c>`` element is classified into one of two variants:

- ``InlineValue``: the text stored on the cell itself (numbers, booleans,
  dates, formula results and inline strings are all kept as raw text)
- ``SharedStringRef``: an index into the shared-string table (``t="s"``)

``resolve_cell`` turns either into the final string. A cell with no stored
value resolves to ``""``.
"""

__all__ = [
    "InlineValue",
    "SharedStringRef",
    "CellValue",
    "classify_cell",
    "resolve_cell",
]

SHARED_STRING_TYPE = "s"
INLINE_STRING_TYPE = "inlineStr"


@dataclass(frozen=True)
class InlineValue:
    text: str


@dataclass(frozen=True)
class SharedStringRef:
    index: int


CellValue = InlineValue | SharedStringRef


def _stored_value(cell: XmlNode) -> str:
    values = cell.children_named("v")
    return values[0].text() if values else ""


def classify_cell(cell: XmlNode) -> CellValue:
    cell_type = cell.attribute("t")
    if cell_type == INLINE_STRING_TYPE:
        return InlineValue("".join(entry_text(node) for node in cell.children_named("is")))

    raw = _stored_value(cell)
    if cell_type == SHARED_STRING_TYPE:
        if raw.strip() == "":
            return InlineValue("")
        try:
            return SharedStringRef(int(raw))
        except ValueError as e:
            ref = cell.attribute("r") or "?"
            raise CellValueError(f"cell {ref}: shared string index is not an integer: {raw!r}") from e
    return InlineValue(raw)


def resolve_cell(cell: XmlNode, strings: SharedStringTable | None) -> str:
    """Return the effective text of a cell, dereferencing shared strings."""
    value = classify_cell(cell)
    if isinstance(value, SharedStringRef):
        if strings is None:
            raise CellValueError(f"cell {cell.attribute('r') or '?'} references a shared string table that was not loaded")
        return strings.resolve(value.index)
    return value.text
