from __future__ import annotations

from enum import Enum

"""State enums for the parse lifecycle and header derivation."""

__all__ = [
    "ParseStage",
    "HeaderState",
]


class ParseStage(Enum):
    """Stages of ``Parser.parse()``.

    Stage order: check -> extract -> load -> process -> cleanup

    - CHECK: input file is present
    - EXTRACT: archive unpacked into the working directory
    - LOAD: worksheet and shared-string parts parsed
    - PROCESS: rows composed
    - CLEANUP: working directory removed (always runs; problems are logged
      under this stage name, never recorded as failures)
    """
    CHECK = "check"
    EXTRACT = "extract"
    LOAD = "load"
    PROCESS = "process"
    CLEANUP = "cleanup"


class HeaderState(Enum):
    """Header derivation state.

    AWAITING_HEADERS -> HEADERS_SET on the first worksheet row. DEFAULT is
    used when no header row is expected and never changes.
    """
    AWAITING_HEADERS = "awaiting_headers"
    HEADERS_SET = "headers_set"
    DEFAULT = "default"
