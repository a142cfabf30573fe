from __future__ import annotations

from .errors import SharedStringIndexError
from .xml_node import XmlNode

"""Shared-string table lookup.

An ``<si>`` entry holds either a single ``<t>`` or a list of rich-text runs
(``<r><rPr/><t>..</t></r>``). The logical string is every piece of text in
document order with nothing in between. Phonetic hints (``<rPh>``) are not
part of the value.
"""

__all__ = [
    "SharedStringTable",
    "entry_text",
]


def entry_text(entry: XmlNode) -> str:
    """Concatenate the plain text and run text of one ``<si>`` (or ``<is>``) node."""
    parts = [t.text() for t in entry.children_named("t")]
    for run in entry.children_named("r"):
        parts.extend(t.text() for t in run.children_named("t"))
    return "".join(parts)


class SharedStringTable:
    """Bounds-checked view over the ``<sst>`` root of ``sharedStrings.xml``."""

    def __init__(self, root: XmlNode) -> None:
        self._entries = list(root.children_named("si"))

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, index: int) -> str:
        if index < 0 or index >= len(self._entries):
            raise SharedStringIndexError(
                f"shared string index {index} out of range (table has {len(self._entries)} entries)"
            )
        return entry_text(self._entries[index])
