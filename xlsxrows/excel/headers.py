from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from ..models.parse_state import HeaderState
from .columns import encode, resolve_column_identifier

"""Header derivation and row projection.

Two modes per parse:

1. Header row expected: the first worksheet row is consumed, each value is
   normalized (trim, lower-case, whitespace runs -> ``_``) and becomes the
   name of its column. Overrides then replace names by column index.
2. No header row: every column is named by its letter label (``a``, ``b``,
   ...), again with overrides applied on top.
"""

__all__ = [
    "HeaderManager",
    "normalize_header",
]

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_header(text: str) -> str:
    """``"  Due  Date "`` -> ``"due_date"``."""
    return _WHITESPACE_RE.sub("_", text.strip().lower())


class HeaderManager:
    """Derives the header table once per parse and applies it to each row.

    Names in ``reserved`` never reach the output: a header or override that
    equals one is renamed to ``<name>_<column letter>``.
    """

    def __init__(
        self,
        has_header_row: bool = True,
        overrides: Mapping[int | str, str] | None = None,
        reserved: Iterable[str] = (),
    ) -> None:
        self.reserved = frozenset(reserved)
        self.overrides: dict[int, str] = {}
        for ident, name in (overrides or {}).items():
            idx = resolve_column_identifier(ident)
            self.overrides[idx] = self._unreserved(idx, str(name))
        self.headers: dict[int, str] = {}
        self.state = HeaderState.AWAITING_HEADERS if has_header_row else HeaderState.DEFAULT

    @property
    def needs_headers(self) -> bool:
        return self.state is HeaderState.AWAITING_HEADERS

    @property
    def using_default_headers(self) -> bool:
        return self.state is HeaderState.DEFAULT

    def _unreserved(self, idx: int, name: str) -> str:
        if name not in self.reserved:
            return name
        renamed = f"{name}_{encode(idx)}"
        logger.warning(f"header '{name}' in column {encode(idx)} is reserved; renamed to '{renamed}'")
        return renamed

    def set_headers(self, row: Mapping[int, str]) -> None:
        """Consume the header row and move to HEADERS_SET.

        A row that yields no header at all (an empty ``<row/>``) is skipped
        and the manager keeps awaiting headers.
        """
        if not self.needs_headers:
            raise RuntimeError(f"headers cannot be set in state {self.state.value}")

        headers = {idx: self._unreserved(idx, normalize_header(value)) for idx, value in row.items()}
        # Full replacement per column; a column missing from the header row is added.
        headers.update(self.overrides)
        if not headers:
            logger.debug("empty header row skipped")
            return

        self.headers = headers
        self.state = HeaderState.HEADERS_SET
        logger.debug(f"headers set: {list(headers.values())}")

    def apply(self, row: Mapping[int, str]) -> dict[str, str]:
        """Map a raw row (column index -> value) to header name -> value."""
        if self.needs_headers:
            raise RuntimeError("headers have not been set yet")

        if self.using_default_headers:
            return {self.overrides.get(idx, encode(idx)): value for idx, value in row.items()}
        return {name: row.get(idx, "") for idx, name in self.headers.items()}
