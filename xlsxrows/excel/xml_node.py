from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from .errors import MissingPartError

"""Minimal XML capability used by the resolvers and the row composer.

SpreadsheetML parts are namespaced; ``ElementNode`` matches children by
local name so callers never deal with ``{namespace}tag`` strings. Tests can
hand in any object satisfying ``XmlNode`` instead of a parsed document.
"""

__all__ = [
    "XmlNode",
    "ElementNode",
    "load_xml",
]


class XmlNode(Protocol):
    def children_named(self, tag: str) -> Sequence[XmlNode]: ...

    def attribute(self, name: str) -> str | None: ...

    def text(self) -> str: ...


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class ElementNode:
    """``XmlNode`` over an ``xml.etree.ElementTree.Element``."""

    __slots__ = ("element",)

    def __init__(self, element: ET.Element) -> None:
        self.element = element

    def children_named(self, tag: str) -> list[ElementNode]:
        return [ElementNode(child) for child in self.element if _local_name(child.tag) == tag]

    def attribute(self, name: str) -> str | None:
        return self.element.get(name)

    def text(self) -> str:
        return self.element.text or ""

    def __repr__(self) -> str:  # pragma: no cover (debug aid)
        return f"ElementNode({_local_name(self.element.tag)!r})"


def load_xml(path: Path) -> ElementNode:
    """Parse an XML part from disk and return its root node."""
    if not path.exists():
        raise MissingPartError(f"XML part not found: {path}")
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise MissingPartError(f"cannot parse XML part {path.name}: {e}") from e
    except OSError as e:
        raise MissingPartError(f"cannot read XML part {path.name}: {e}") from e
    return ElementNode(tree.getroot())
