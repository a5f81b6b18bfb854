"""Bulk keyword import orchestration."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict

from keyword_import.config import Settings, get_settings
from keyword_import.core.exceptions import (
    BatchSizeExceededError,
    EmptyImportError,
    NoValidKeywordsError,
    UnsupportedCategoryError,
    UnsupportedLocaleError,
)
from keyword_import.repositories.keyword_repository import KeywordRepository
from keyword_import.schemas.keyword_import import (
    BulkImportRequest,
    ImportResponse,
    ImportResultData,
)
from keyword_import.services.keyword_import.duplicates import DuplicateResolver
from keyword_import.services.keyword_import.locales import SUPPORTED_LOCALES, LocaleTag
from keyword_import.services.keyword_import.mutator import BatchMutator
from keyword_import.services.keyword_import.results import ImportResult, ImportResultAggregator
from keyword_import.services.keyword_import.row_parser import (
    ParseOptions,
    ParseResult,
    canonical_locale,
    normalize_keyword_records,
    parse_keyword_text,
)

logger = logging.getLogger(__name__)

SUPPORTED_CATEGORIES = (
    "plastic-surgery",
    "dermatology",
    "dental",
    "health-checkup",
    "general",
    "ophthalmology",
    "orthopedics",
    "fertility",
    "hair-transplant",
)


def to_result_data(result: ImportResult) -> ImportResultData:
    return ImportResultData.model_validate(result, from_attributes=True)


class KeywordImportPipeline:
    """Runs one bulk import call end to end.

    parse -> resolve against the store -> mutate -> aggregate. Every fatal
    condition is raised before the first write; after that, failures are
    recorded per row or per record and the call always returns a report.
    """

    def __init__(self, repository: KeywordRepository, settings: Settings | None = None) -> None:
        self.repository = repository
        self.settings = settings or get_settings()
        self.resolver = DuplicateResolver(repository)
        self.mutator = BatchMutator(
            repository,
            fallback_concurrency=self.settings.keyword_import_fallback_concurrency,
        )

    def _validate_options(self, request: BulkImportRequest) -> tuple[LocaleTag | None, str]:
        locale = None
        if request.locale:
            locale = canonical_locale(request.locale)
            if locale is None:
                raise UnsupportedLocaleError(request.locale, list(SUPPORTED_LOCALES))

        category = request.category or self.settings.keyword_import_default_category
        if request.category and request.category not in SUPPORTED_CATEGORIES:
            raise UnsupportedCategoryError(request.category, list(SUPPORTED_CATEGORIES))
        return locale, category

    def parse(self, request: BulkImportRequest) -> ParseResult:
        """Parse and validate the payload without touching the store."""
        locale, category = self._validate_options(request)
        options = ParseOptions(
            locale=locale,
            default_category=category,
            delimiter=request.delimiter,
            skip_header=request.skip_header,
            auto_detect_language=request.auto_detect_language,
            validate_search_volume=request.validate_search_volume,
        )

        if request.csv_content and request.csv_content.strip():
            parsed = parse_keyword_text(request.csv_content, options)
        elif request.keywords:
            parsed = normalize_keyword_records(request.keywords, options)
        else:
            raise EmptyImportError()

        if parsed.stats.total_rows == 0:
            raise EmptyImportError("No keyword rows found in csv_content")
        if not parsed.data:
            raise NoValidKeywordsError(
                {
                    "errors": [asdict(error) for error in parsed.errors],
                    "stats": asdict(parsed.stats),
                }
            )

        maximum = self.settings.keyword_import_max_batch_size
        if len(parsed.data) > maximum:
            raise BatchSizeExceededError(len(parsed.data), maximum)
        return parsed

    async def run(self, request: BulkImportRequest) -> ImportResponse:
        started = time.perf_counter()
        parsed = self.parse(request)
        logger.info(
            "Starting bulk keyword import",
            extra={
                "format": parsed.format_detected,
                "keyword_count": len(parsed.data),
                "row_errors": len(parsed.errors),
                "locale": request.locale,
                "category": request.category,
            },
        )

        aggregator = ImportResultAggregator(format_detected=parsed.format_detected)
        aggregator.row_errors(parsed.errors)
        aggregator.warnings(parsed.warnings)

        resolutions = await self.resolver.resolve(parsed.data)
        await self.mutator.apply(
            resolutions,
            aggregator=aggregator,
            skip_duplicates=request.skip_duplicates,
            update_existing=request.update_existing,
        )

        result = aggregator.result
        message = aggregator.render_summary()
        logger.info(
            "Bulk keyword import completed",
            extra={
                "total": result.total,
                "inserted": result.inserted,
                "updated": result.updated,
                "skipped": result.skipped,
                "errors": result.errors,
                "duration_ms": round((time.perf_counter() - started) * 1000),
            },
        )
        return ImportResponse(
            success=result.errors == 0,
            data=to_result_data(result),
            message=message,
        )
