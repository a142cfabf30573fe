from __future__ import annotations

import re

from .errors import CoordinateError, InvalidColumnError

"""Column codec and cell coordinate helpers.

Columns are zero-based integers. Their letter labels use bijective base-26
(``a``..``z`` with no zero digit), so index 26 is ``aa`` and 702 is ``aaa``.
Labels are produced lower-case and decoded case-insensitively.
"""

__all__ = [
    "encode",
    "decode",
    "resolve_column_identifier",
    "split_coordinate",
    "column_index",
    "row_index",
    "row_number",
]

_LABEL_RE = re.compile(r"^[A-Za-z]+$")
_COORDINATE_RE = re.compile(r"^([A-Za-z]+)(\d+)$")
_TRAILING_DIGITS_RE = re.compile(r"\d+$")


def encode(index: int) -> str:
    """Return the letter label for a zero-based column index (0 -> ``a``)."""
    if index < 0:
        raise InvalidColumnError(f"column index must be non-negative: {index}")
    label = ""
    while index >= 0:
        label = chr(index % 26 + ord("a")) + label
        index = index // 26 - 1
    return label


def decode(label: str) -> int:
    """Return the zero-based column index for a letter label (``AA`` -> 26)."""
    if not isinstance(label, str) or not _LABEL_RE.match(label):
        raise InvalidColumnError(f"invalid column label: {label!r}")
    value = 0
    for ch in label.lower():
        value = value * 26 + (ord(ch) - ord("a") + 1)
    return value - 1


def resolve_column_identifier(identifier: int | str) -> int:
    """Resolve a numeric or alphabetic column reference to a column index.

    Integers and numeric strings are taken as zero-based indexes already;
    anything else is decoded as a letter label.
    """
    if isinstance(identifier, bool):
        raise InvalidColumnError(f"invalid column identifier: {identifier!r}")
    if isinstance(identifier, int):
        if identifier < 0:
            raise InvalidColumnError(f"column index must be non-negative: {identifier}")
        return identifier
    if isinstance(identifier, str):
        stripped = identifier.strip()
        if stripped.isdigit():
            return int(stripped)
        return decode(stripped)
    raise InvalidColumnError(f"invalid column identifier: {identifier!r}")


def split_coordinate(reference: str) -> tuple[str, str]:
    """Split ``"C12"`` into ``("C", "12")``."""
    match = _COORDINATE_RE.match(reference or "")
    if match is None:
        raise CoordinateError(f"malformed cell reference: {reference!r}")
    return match.group(1), match.group(2)


def column_index(reference: str) -> int:
    """Zero-based column index of a coordinate reference (``"C12"`` -> 2)."""
    letters, _ = split_coordinate(reference)
    return decode(letters)


def row_number(reference: str) -> int:
    """1-based row number of a coordinate reference (``"C12"`` -> 12)."""
    _, digits = split_coordinate(reference)
    return int(digits)


def row_index(reference: str) -> int:
    """Ordering key for a cell within a worksheet row.

    NOTE: this strips the trailing digits and decodes what is left, so the
    value is the column ordinal rather than the row. Existing callers only
    rely on it being non-decreasing along a row; use ``row_number`` for the
    actual row.
    """
    letters = _TRAILING_DIGITS_RE.sub("", reference or "")
    try:
        return decode(letters)
    except InvalidColumnError as e:
        raise CoordinateError(f"malformed cell reference: {reference!r}") from e
