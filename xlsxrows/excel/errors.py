from __future__ import annotations

"""Error taxonomy for the worksheet parsing pipeline.

Every stage failure inside ``Parser.parse()`` is raised as one of these,
caught at the stage boundary and recorded as an error message. None of them
escape ``parse()``; the low-level helpers (codec, resolvers) raise them
directly so they can be used on their own.
"""

__all__ = [
    "ParseError",
    "ConfigurationError",
    "ExtractionError",
    "MissingPartError",
    "CoordinateError",
    "SharedStringIndexError",
    "CellValueError",
    "InvalidColumnError",
]


class ParseError(Exception):
    """Base exception for parse pipeline errors."""


class ConfigurationError(ParseError):
    """Raised when the input file is missing or unreadable."""


class ExtractionError(ParseError):
    """Raised when the archive cannot be opened or unpacked."""


class MissingPartError(ParseError):
    """Raised when an expected XML part is absent (or unparsable) after extraction."""


class CoordinateError(ParseError, LookupError):
    """Raised for a malformed cell coordinate reference such as ``"12C"``."""


class SharedStringIndexError(ParseError, LookupError):
    """Raised when a cell points outside the shared-string table."""


class CellValueError(ParseError, LookupError):
    """Raised when a shared-string cell does not hold an integer index."""


class InvalidColumnError(ParseError, ValueError):
    """Raised for a column identifier that is neither an index nor a letter label."""
