from __future__ import annotations

import logging
from typing import Any

from .cells import resolve_cell
from .columns import column_index, row_index, row_number
from .headers import HeaderManager
from .strings import SharedStringTable
from .xml_node import XmlNode

"""Worksheet driver: turns ``<sheetData>`` rows into named rows."""

__all__ = [
    "ROW_NUMBER_KEY",
    "RowComposer",
]

logger = logging.getLogger(__name__)

# Header names equal to this key are renamed by HeaderManager.
ROW_NUMBER_KEY = "__row_number"


class RowComposer:
    """Builds output rows from a worksheet tree.

    Rows are visited strictly in document order. The first row feeds the
    header manager when it is still awaiting headers; every other row goes
    through ``HeaderManager.apply``.
    """

    def __init__(
        self,
        strings: SharedStringTable | None,
        headers: HeaderManager,
        row_numbers: bool = False,
    ) -> None:
        self.strings = strings
        self.headers = headers
        self.row_numbers = row_numbers
        self.rows: list[dict[str, Any]] = []

    def compose(self, worksheet: XmlNode) -> list[dict[str, Any]]:
        previous_row_number = 0
        for sheet_data in worksheet.children_named("sheetData"):
            for xlrow in sheet_data.children_named("row"):
                raw, source_row = self._read_row(xlrow, previous_row_number)
                previous_row_number = source_row

                if self.headers.needs_headers:
                    self.headers.set_headers(raw)
                    continue

                composed = self.headers.apply(raw)
                if self.row_numbers:
                    composed = {ROW_NUMBER_KEY: source_row, **composed}
                self.rows.append(composed)
        logger.debug(f"composed {len(self.rows)} rows")
        return self.rows

    def _read_row(self, xlrow: XmlNode, previous_row_number: int) -> tuple[dict[int, str], int]:
        """Return (column index -> value, 1-based source row number) for one ``<row>``."""
        raw: dict[int, str] = {}
        source_row: int | None = None
        last_key = -1
        next_col = 0

        for cell in xlrow.children_named("c"):
            ref = cell.attribute("r")
            if ref:
                col = column_index(ref)
                key = row_index(ref)
                if key < last_key:
                    logger.warning(f"cell {ref} is out of order within its row")
                last_key = key
                if source_row is None:
                    source_row = row_number(ref)
            else:
                # No reference: the cell directly follows the previous one.
                col = next_col
            raw[col] = resolve_cell(cell, self.strings)
            next_col = col + 1

        if source_row is None:
            declared = xlrow.attribute("r")
            source_row = int(declared) if declared and declared.isdigit() else previous_row_number + 1
        return raw, source_row
