"""Import a keyword file into content_keywords from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from keyword_import.config import get_settings
from keyword_import.core.database import close_db
from keyword_import.core.exceptions import KeywordImportError
from keyword_import.core.logging import setup_logging
from keyword_import.repositories.keyword_repository import (
    AdminKeywordRepository,
    KeywordRepository,
)
from keyword_import.schemas.keyword_import import BulkImportRequest, ImportResponse
from keyword_import.services.keyword_import.pipeline import KeywordImportPipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ROW_ERRORS = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "file",
        type=Path,
        help="Keyword file: delimited text, or a JSON array of keyword records (*.json)",
    )
    parser.add_argument("--locale", help="Locale for rows without an explicit language")
    parser.add_argument("--category", help="Default category for rows without one")
    parser.add_argument("--delimiter", help="Override the detected delimiter")
    parser.add_argument(
        "--update-existing",
        action="store_true",
        help="Update keywords that already exist instead of skipping them",
    )
    parser.add_argument(
        "--no-skip-duplicates",
        dest="skip_duplicates",
        action="store_false",
        help="Report existing keywords as errors instead of skipping them",
    )
    parser.add_argument(
        "--no-header",
        dest="skip_header",
        action="store_false",
        help="Parse the first line as data even when it looks like a header",
    )
    parser.add_argument(
        "--no-auto-detect",
        dest="auto_detect_language",
        action="store_false",
        help="Disable script-based language detection",
    )
    return parser


def build_request(args: argparse.Namespace) -> BulkImportRequest:
    """Read the input file into a bulk import request."""
    content = args.file.read_text(encoding="utf-8")
    payload: dict[str, object] = {
        "locale": args.locale,
        "category": args.category,
        "delimiter": args.delimiter,
        "skip_header": args.skip_header,
        "skip_duplicates": args.skip_duplicates,
        "update_existing": args.update_existing,
        "auto_detect_language": args.auto_detect_language,
    }
    if args.file.suffix.lower() == ".json":
        payload["keywords"] = json.loads(content)
    else:
        payload["csv_content"] = content
    return BulkImportRequest.model_validate(payload)


def exit_code_for(response: ImportResponse) -> int:
    return EXIT_OK if response.data.errors == 0 else EXIT_ROW_ERRORS


def print_report(response: ImportResponse) -> None:
    print(response.message)
    for detail in response.data.error_details:
        location = f"Row {detail.row}: " if detail.row else ""
        print(f"{location}{detail.keyword}: {detail.error}")
    for warning in response.data.warnings:
        print(f"Warning row {warning.row}: {warning.message}")


async def run_import(args: argparse.Namespace, repository: KeywordRepository | None = None) -> int:
    settings = get_settings()
    repository = repository or AdminKeywordRepository(
        lookup_attempts=settings.keyword_import_lookup_attempts,
    )
    pipeline = KeywordImportPipeline(repository, settings)

    try:
        request = build_request(args)
    except ValueError as exc:
        print(f"Invalid input file {args.file}: {exc}", file=sys.stderr)
        return EXIT_FATAL

    try:
        response = await pipeline.run(request)
    except KeywordImportError as exc:
        logger.error("Keyword import failed", extra={"code": exc.code, "error": exc.message})
        print(f"Import failed ({exc.code}): {exc.message}", file=sys.stderr)
        return EXIT_FATAL

    print_report(response)
    return exit_code_for(response)


async def _main(args: argparse.Namespace) -> int:
    try:
        return await run_import(args)
    finally:
        await close_db()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    setup_logging()
    args = build_parser().parse_args(argv)
    if not args.file.is_file():
        print(f"File not found: {args.file}", file=sys.stderr)
        return EXIT_FATAL
    return asyncio.run(_main(args))


if __name__ == "__main__":
    raise SystemExit(main())
