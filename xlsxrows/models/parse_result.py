from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from .error_record import ErrorRecord

"""ParseResult model: the outcome of a single ``Parser.parse()`` call.

A fresh ParseResult is built per call and is never mutated afterwards.
``errors`` holds every recorded failure message in order, independently
of ``success``.
"""

__all__ = [
    "ParseResult",
]


@dataclass(frozen=True)
class ParseResult:
    """Parsed rows plus error state for one worksheet."""
    file: str  # Workbook path as given by the caller
    sheet: int  # 1-based worksheet number
    success: bool  # True when every stage up to process completed
    rows: tuple[dict[str, Any], ...] = ()  # Header name -> cell text, in document order
    errors: tuple[str, ...] = ()  # Human-readable error messages
    failures: tuple[ErrorRecord, ...] = field(default=(), repr=False)  # Structured form of errors

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the rows as a DataFrame, columns in first-seen header order.

        Values are left as stored text; no dtype inference is applied.
        """
        if not self.rows:
            return pd.DataFrame()
        return pd.DataFrame.from_records(list(self.rows)).astype(object)
