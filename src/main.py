# src/main.py — v2
"""CLI entry point — scan, batch, serve commands.

Usage:
    passportscan scan <file>
    passportscan batch <paths...> [-o DIR] [--format xlsx|csv|raw] [options]
    passportscan serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from passportscan.config.settings import ConfigurationError, Settings, load_settings
from passportscan.logging.logger import setup_logging
from passportscan.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        result = args.func(args, settings)
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
        return result
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="passportscan",
        description=f"passportscan v{__version__} — Passport OCR batch scanner",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- scan ---
    p_scan = subparsers.add_parser("scan", help="Scan a single passport file")
    p_scan.add_argument("file", type=Path, help="Path to image or PDF")
    p_scan.set_defaults(func=_cmd_scan)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Scan files and directories, then export the results",
    )
    p_batch.add_argument("paths", type=Path, nargs="+", help="Files or directories")
    p_batch.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: OUTPUT_DIR setting)",
    )
    p_batch.add_argument(
        "--format", dest="export_format", choices=("xlsx", "csv", "raw"),
        default="xlsx", help="Export format (default: xlsx)",
    )
    p_batch.add_argument(
        "--concurrency", type=int, default=None,
        help="Max scans in flight (default: BATCH_CONCURRENCY setting)",
    )
    p_batch.add_argument(
        "--no-dedup", action="store_true",
        help="Disable duplicate detection by document ID",
    )
    p_batch.add_argument(
        "--enhance", choices=("none", "per_record", "bulk"), default=None,
        help="AI enhancement mode for the export",
    )
    p_batch.add_argument(
        "--no-recursive", action="store_true",
        help="Do not descend into subdirectories",
    )
    p_batch.set_defaults(func=_cmd_batch)

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the web application")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=5000)
    p_serve.set_defaults(func=_cmd_serve)

    return parser


async def _cmd_scan(args: argparse.Namespace, settings: Settings) -> int:
    """Scan one file and print the raw fields and normalized record."""
    from passportscan.api.facade import scan_file

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    outcome = await scan_file(file_path.name, file_path.read_bytes(), settings=settings)
    print(json.dumps(
        {
            "filename": outcome.filename,
            "processingTime": outcome.processing_time_ms,
            "data": outcome.data,
            "record": outcome.record.model_dump(by_alias=True),
        },
        ensure_ascii=False,
        indent=2,
    ))
    return 0


async def _cmd_batch(args: argparse.Namespace, settings: Settings) -> int:
    """Run a batch over the given paths and write the export file."""
    from passportscan.api.facade import (
        apply_overrides,
        build_session,
        export_batch,
        process_batch,
    )
    from passportscan.batch.intake import expand_inputs

    settings = apply_overrides(
        settings,
        batch_concurrency=args.concurrency,
        duplicate_detection_enabled=False if args.no_dedup else None,
        enhancement_mode=args.enhance,
    )

    missing = [p for p in args.paths if not p.exists()]
    if missing:
        logger.error("Not found: %s", ", ".join(str(p) for p in missing))
        return 1

    files = expand_inputs(args.paths, recursive=not args.no_recursive)
    if not files:
        logger.error("No supported files found")
        return 1

    session = build_session(settings)
    uploads = [(path.name, path.read_bytes(), None) for path in files]
    outcome = await process_batch(uploads, session=session, settings=settings)
    summary = outcome.summary

    for rejected in outcome.rejected:
        print(f"  rejected  {rejected.filename}: {rejected.reason}")
    for item in summary.items:
        if item.error:
            print(f"  {item.status.value:<9} {item.filename}: {item.error}")

    print("\nBatch complete:")
    print(f"  Files:        {summary.total + len(outcome.rejected)}")
    print(f"  Completed:    {summary.completed}")
    print(f"  Duplicates:   {summary.duplicates}")
    print(f"  Errors:       {summary.errors}")
    print(f"  Rejected:     {len(outcome.rejected)}")
    print(f"  Duration:     {summary.duration_seconds:.1f}s")

    export = await export_batch(session, args.export_format, settings=settings)
    output_dir: Path = args.output or settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / export.filename
    target.write_bytes(export.content)
    print(f"  Export:       {target} ({export.row_count} rows)")
    return 0


def _cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    """Run the Flask development server."""
    from passportscan.web.app import create_app

    app = create_app(settings)
    logger.info("Serving on http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, threaded=True)
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
