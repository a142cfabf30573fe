from __future__ import annotations

from ..models.parse_result import ParseResult

"""SUMMARY line bodies for the CLI.

The CLI logs these with ``log_summary``; the ``SUMMARY`` label is added by
the log formatter.

Per file:
    file=<name> sheet=<n> success=<true|false> rows=<n> errors=<n>
Run total:
    files=<total> success=<n> failed=<n> rows=<n> elapsed_sec=<s>
"""

__all__ = [
    "render_file_summary",
    "render_run_summary",
]


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_file_summary(result: ParseResult) -> str:
    """Render the summary body for one parsed file.

    Examples:
        >>> r = ParseResult(file="data/book.xlsx", sheet=1, success=True, rows=({"id": "1"},))
        >>> render_file_summary(r)
        'file=book.xlsx sheet=1 success=true rows=1 errors=0'
    """
    name = result.file.replace("\\", "/").rsplit("/", 1)[-1] or "-"
    return (
        f"file={name} "
        f"sheet={result.sheet} "
        f"success={'true' if result.success else 'false'} "
        f"rows={result.row_count} "
        f"errors={len(result.errors)}"
    )


def render_run_summary(results: list[ParseResult], elapsed_seconds: float) -> str:
    """Render the summary body totalling a CLI run."""
    success = sum(1 for r in results if r.success)
    failed = len(results) - success
    rows = sum(r.row_count for r in results)
    return (
        f"files={len(results)} "
        f"success={success} "
        f"failed={failed} "
        f"rows={rows} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )
