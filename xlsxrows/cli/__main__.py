from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from xlsxrows.config.loader import ConfigError, ParserConfig, apply_env_overrides, load_config
from xlsxrows.excel.columns import resolve_column_identifier
from xlsxrows.excel.errors import InvalidColumnError
from xlsxrows.excel.parser import parse_workbook
from xlsxrows.logging.error_log import ErrorLogBuffer
from xlsxrows.logging.init import enable_debug, log_summary, setup_logging
from xlsxrows.models.parse_result import ParseResult
from xlsxrows.services.progress import ProgressTracker
from xlsxrows.services.summary import render_file_summary, render_run_summary

"""CLI entrypoint.

Flow:
- Load .env, then the optional YAML config, then apply command-line flags
- Parse each given workbook (one worksheet per file)
- Write rows as JSON Lines or CSV to stdout or ``--output-dir``
- Print a SUMMARY line per file and one for the whole run
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

FORMATS = ("csv", "jsonl")


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv (existing environment wins unless override)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="xlsxrows", description="Extract worksheet rows from XLSX files")
    p.add_argument("files", nargs="+", type=Path, help="XLSX files to parse")
    p.add_argument("--config", type=Path, help="YAML parser config")
    p.add_argument("--sheet", type=int, help="1-based worksheet number (default 1)")
    p.add_argument("--no-header", action="store_true", help="Sheet has no header row; name columns a, b, c...")
    p.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="COL=NAME",
        help="Override a column name; COL is a zero-based index or letters (repeatable)",
    )
    p.add_argument("--row-numbers", action="store_true", help="Add __row_number to each row")
    p.add_argument("--tmp-dir", help="Existing directory to extract into")
    p.add_argument("--format", choices=FORMATS, default="jsonl", help="Row output format")
    p.add_argument("--output-dir", type=Path, help="Write <stem>.<format> per file instead of stdout")
    p.add_argument("--error-log", type=Path, help="Directory for the JSON Lines error log")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _parse_header_flags(values: list[str]) -> dict[int, str]:
    overrides: dict[int, str] = {}
    for raw in values:
        col, sep, name = raw.partition("=")
        if not sep or not name:
            raise ConfigError(f"invalid --header value (expected COL=NAME): {raw!r}")
        try:
            overrides[resolve_column_identifier(col)] = name
        except InvalidColumnError as e:
            raise ConfigError(f"invalid --header column: {e}") from e
    return overrides


def _build_config(args: argparse.Namespace) -> ParserConfig:
    """Config file < environment < command-line flags."""
    cfg = load_config(args.config) if args.config else ParserConfig()
    cfg = apply_env_overrides(cfg)

    try:
        overrides = {resolve_column_identifier(k): v for k, v in cfg.header_overrides.items()}
    except InvalidColumnError as e:
        raise ConfigError(f"invalid header_overrides column: {e}") from e
    overrides.update(_parse_header_flags(args.header))

    return replace(
        cfg,
        sheet=args.sheet if args.sheet is not None else cfg.sheet,
        has_header_row=False if args.no_header else cfg.has_header_row,
        header_overrides=overrides,
        row_numbers=True if args.row_numbers else cfg.row_numbers,
        tmp_dir=args.tmp_dir or cfg.tmp_dir,
    )


def _write_rows(result: ParseResult, fmt: str, out: TextIO) -> None:
    if fmt == "csv":
        if result.rows:
            result.to_dataframe().to_csv(out, index=False)
        return
    for row in result.rows:
        out.write(json.dumps(row, ensure_ascii=False) + "\n")


def _emit(result: ParseResult, fmt: str, output_dir: Path | None) -> None:
    if output_dir is None:
        _write_rows(result, fmt, sys.stdout)
        return
    target = output_dir / f"{Path(result.file).stem}.{fmt}"
    with target.open("w", encoding="utf-8", newline="") as f:
        _write_rows(result, fmt, f)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read the process arguments when argv is None; [] is a valid test input.
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = _build_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.output_dir is not None:
        args.output_dir.mkdir(parents=True, exist_ok=True)
    error_buffer = ErrorLogBuffer(args.error_log) if args.error_log is not None else None

    start = time.perf_counter()
    results: list[ParseResult] = []
    write_failures = 0
    with ProgressTracker(len(args.files)) as progress:
        for path in args.files:
            progress.start_file(path)
            result = parse_workbook(path, config=cfg)
            results.append(result)
            if result.success:
                try:
                    _emit(result, args.format, args.output_dir)
                except OSError as e:
                    write_failures += 1
                    logger.error(f"output: {path}: {e}")
            if error_buffer is not None:
                error_buffer.extend(result.failures)
            log_summary(render_file_summary(result))
            progress.finish_file(rows=result.row_count)

    if error_buffer is not None:
        log_path = error_buffer.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    log_summary(render_run_summary(results, time.perf_counter() - start))

    if write_failures or any(not r.success for r in results):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
