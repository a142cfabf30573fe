from __future__ import annotations

import logging
import re
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from ..config.loader import ParserConfig
from ..models.error_record import ErrorRecord
from ..models.parse_result import ParseResult
from ..models.parse_state import ParseStage
from .archive import delete_tree, extract_archive
from .composer import ROW_NUMBER_KEY, RowComposer
from .errors import ConfigurationError, MissingPartError, ParseError
from .headers import HeaderManager
from .strings import SharedStringTable
from .xml_node import ElementNode, load_xml

"""Worksheet parser: extraction lifecycle around the row composer.

``parse()`` runs check -> extract -> load -> process, each stage only after
the previous one succeeded, and always finishes with cleanup of the working
directory. Stage failures are recorded (``errors`` / ``result.failures``)
and never raised to the caller.

Usage::

    parser = Parser("book.xlsx").row_numbers(True)
    if parser.parse():
        for row in parser.parsed:
            ...
    else:
        print(parser.errors)
"""

__all__ = [
    "Parser",
    "parse_workbook",
]

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _error_type(exc: Exception) -> str:
    return _CAMEL_BOUNDARY_RE.sub("_", type(exc).__name__).upper()


class Parser:
    """Parses one worksheet of an XLSX file into rows of header -> text."""

    def __init__(
        self,
        file: str | Path | None = "",
        sheet: int | None = None,
        *,
        config: ParserConfig | None = None,
    ) -> None:
        cfg = config or ParserConfig()
        self._file = ""
        self._sheet = 1
        self._has_header = cfg.has_header_row
        self._header_overrides: dict[int | str, str] = dict(cfg.header_overrides)
        self._row_numbers = cfg.row_numbers
        self._base_tmp_dir = Path(tempfile.gettempdir())

        # Per-parse state
        self._strings: SharedStringTable | None = None
        self._sheet_tree: ElementNode | None = None
        self._rows: list[dict[str, Any]] = []
        self._failures: list[ErrorRecord] = []
        self._result: ParseResult | None = None

        if cfg.tmp_dir:
            self.set_tmp_dir(cfg.tmp_dir)
        self.set_file(file)
        self.use_sheet(cfg.sheet if sheet is None else sheet)

    def set_file(self, filename: str | Path | None) -> Parser:
        self._file = str(filename) if filename else ""
        return self

    def use_sheet(self, number: int = 1) -> Parser:
        """Select the 1-based worksheet to parse."""
        self._sheet = int(number)
        return self

    def has_header_row(self, value: bool = True) -> Parser:
        """Whether the first row holds column names (otherwise ``a``, ``b``, ...)."""
        self._has_header = bool(value)
        return self

    def header_names(self, overrides: Mapping[int | str, str] | None) -> Parser:
        """Replace header names by column (index or letters)."""
        self._header_overrides = dict(overrides or {})
        return self

    def row_numbers(self, value: bool = True) -> Parser:
        """Tag each row with its 1-based source row under ``__row_number``."""
        self._row_numbers = bool(value)
        return self

    def set_tmp_dir(self, directory: str | Path) -> Parser:
        """Set the base directory for extraction. It must already exist."""
        path = Path(directory)
        if path.is_dir():
            self._base_tmp_dir = path
        else:
            logger.warning(f"tmp dir does not exist, keeping {self._base_tmp_dir}: {path}")
        return self

    @property
    def file(self) -> str:
        return self._file

    @property
    def sheet(self) -> int:
        return self._sheet

    @property
    def tmp_dir(self) -> Path | None:
        """Working directory this file is extracted into (None without a file)."""
        if not self._file:
            return None
        return self._base_tmp_dir / f"xlsxrows-{Path(self._file).stem}"

    @property
    def shared_strings_file(self) -> Path | None:
        work = self.tmp_dir
        return work / "xl" / "sharedStrings.xml" if work else None

    @property
    def sheet_file(self) -> Path | None:
        work = self.tmp_dir
        return work / "xl" / "worksheets" / f"sheet{self._sheet}.xml" if work else None

    @property
    def parsed(self) -> list[dict[str, Any]]:
        return [dict(row) for row in self._result.rows] if self._result else []

    @property
    def errors(self) -> list[str]:
        return list(self._result.errors) if self._result else []

    @property
    def result(self) -> ParseResult | None:
        """Result of the most recent ``parse()`` call."""
        return self._result

    def parse(self) -> bool:
        """Parse the selected worksheet. Returns True when every stage succeeded."""
        self._rows = []
        self._failures = []
        logger.debug(f"parse start file={self._file!r} sheet={self._sheet}")

        success = False
        try:
            success = (
                self._run(ParseStage.CHECK, self._check)
                and self._run(ParseStage.EXTRACT, self._extract)
                and self._run(ParseStage.LOAD, self._load_files)
                and self._run(ParseStage.PROCESS, self._process)
            )
        finally:
            self._cleanup()
            self._result = ParseResult(
                file=self._file,
                sheet=self._sheet,
                success=success,
                rows=tuple(self._rows),
                errors=tuple(r.message for r in self._failures),
                failures=tuple(self._failures),
            )
        logger.debug(f"parse end success={success} rows={len(self._rows)} errors={len(self._failures)}")
        return success

    def _run(self, stage: ParseStage, step: Callable[[], None]) -> bool:
        logger.debug(f"stage {stage.value}")
        try:
            step()
        except ParseError as e:
            self._record(stage, e)
            return False
        return True

    def _record(self, stage: ParseStage, exc: ParseError) -> None:
        message = str(exc)
        logger.error(f"{stage.value}: {message}")
        self._failures.append(
            ErrorRecord.create(
                file=self._file,
                sheet=self._sheet,
                stage=stage.value,
                error_type=_error_type(exc),
                message=message,
            )
        )

    def _check(self) -> None:
        if not self._file:
            raise ConfigurationError("Missing filename")
        path = Path(self._file)
        if not path.exists():
            raise ConfigurationError(f'Cannot find file: "{self._file}"')
        if not path.is_file():
            raise ConfigurationError(f'Not a file: "{self._file}"')

    def _extract(self) -> None:
        assert self.tmp_dir is not None
        extract_archive(Path(self._file), self.tmp_dir)

    def _load_files(self) -> None:
        sheet_file = self.sheet_file
        strings_file = self.shared_strings_file
        assert sheet_file is not None and strings_file is not None

        if not sheet_file.exists():
            raise MissingPartError(f"Cannot find worksheet: {self._sheet}")
        if not strings_file.exists():
            raise MissingPartError(f"Cannot find shared strings: {strings_file}")
        self._sheet_tree = load_xml(sheet_file)
        self._strings = SharedStringTable(load_xml(strings_file))
        logger.debug(f"loaded worksheet {self._sheet} ({len(self._strings)} shared strings)")

    def _process(self) -> None:
        assert self._sheet_tree is not None
        headers = HeaderManager(
            has_header_row=self._has_header,
            overrides=self._header_overrides,
            reserved={ROW_NUMBER_KEY} if self._row_numbers else (),
        )
        composer = RowComposer(self._strings, headers, row_numbers=self._row_numbers)
        # Rows composed before a failure are kept.
        self._rows = composer.rows
        composer.compose(self._sheet_tree)

    def _cleanup(self) -> None:
        self._sheet_tree = None
        self._strings = None
        work = self.tmp_dir
        if work is None:
            return
        try:
            if not delete_tree(work):
                logger.warning(f"{ParseStage.CLEANUP.value}: could not fully remove {work}")
        except OSError as e:
            logger.warning(f"{ParseStage.CLEANUP.value}: {work}: {e}")


def parse_workbook(
    file: str | Path,
    sheet: int | None = None,
    config: ParserConfig | None = None,
) -> ParseResult:
    """Parse one worksheet and return its ParseResult."""
    parser = Parser(file, sheet, config=config)
    parser.parse()
    assert parser.result is not None
    return parser.result
