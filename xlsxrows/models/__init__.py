"""Domain models for the XLSX row extractor.

This package contains the result, error and state types shared by the
parser, the CLI and the logging layer.
"""

from .error_record import ErrorRecord
from .parse_result import ParseResult
from .parse_state import HeaderState, ParseStage

__all__ = [
    # Result models
    "ErrorRecord",
    "ParseResult",
    # State enums
    "HeaderState",
    "ParseStage",
]
