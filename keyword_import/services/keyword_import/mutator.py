"""Apply duplicate-resolution verdicts to the keyword store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from keyword_import.repositories.keyword_repository import (
    KeywordInsert,
    KeywordPatch,
    KeywordRepository,
)
from keyword_import.services.keyword_import.duplicates import Resolution
from keyword_import.services.keyword_import.results import ImportResultAggregator
from keyword_import.services.keyword_import.row_parser import ParsedKeyword

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_CONCURRENCY = 5
ALREADY_EXISTS_ERROR = "Keyword already exists"


@dataclass(frozen=True, slots=True)
class InsertOutcome:
    """Result of one fallback insert, folded into the aggregator afterwards."""

    keyword: ParsedKeyword
    error: str | None = None


def to_insert(keyword: ParsedKeyword) -> KeywordInsert:
    return KeywordInsert(
        keyword=keyword.keyword,
        locale=keyword.locale,
        category=keyword.category,
        priority=keyword.priority,
        keyword_native=keyword.keyword_native,
        keyword_localized=keyword.keyword_localized,
        search_volume=keyword.search_volume,
        competition=keyword.competition_score,
        competition_level=keyword.competition_bucket,
    )


def to_patch(keyword: ParsedKeyword, *, updated_at: datetime | None = None) -> KeywordPatch:
    return KeywordPatch(
        keyword_localized=keyword.keyword_localized,
        search_volume=keyword.search_volume,
        competition=keyword.competition_score,
        competition_level=keyword.competition_bucket,
        priority=keyword.priority,
        category=keyword.category,
        updated_at=updated_at or datetime.now(timezone.utc),
    )


class BatchMutator:
    """Routes resolved keywords to insert, update, skip or error.

    New keywords are written with one batch insert. When the batch fails the
    mutator retries each record on its own with bounded concurrency, so a
    single bad record cannot sink the others. Updates run one at a time.
    """

    def __init__(
        self,
        repository: KeywordRepository,
        *,
        fallback_concurrency: int = DEFAULT_FALLBACK_CONCURRENCY,
    ) -> None:
        if fallback_concurrency < 1:
            raise ValueError("fallback_concurrency must be at least 1")
        self.repository = repository
        self.fallback_concurrency = fallback_concurrency

    async def apply(
        self,
        resolutions: Sequence[Resolution],
        *,
        aggregator: ImportResultAggregator,
        skip_duplicates: bool = True,
        update_existing: bool = False,
    ) -> None:
        to_insert_queue: list[ParsedKeyword] = []
        to_update_queue: list[tuple[str, ParsedKeyword]] = []

        for resolution in resolutions:
            keyword = resolution.keyword
            if resolution.existing_id is None:
                to_insert_queue.append(keyword)
            elif update_existing:
                to_update_queue.append((resolution.existing_id, keyword))
            elif skip_duplicates:
                aggregator.skipped(keyword.keyword, keyword.locale)
            else:
                aggregator.failed(keyword.keyword, ALREADY_EXISTS_ERROR, keyword.locale, keyword.row)

        await self._insert(to_insert_queue, aggregator)
        await self._update(to_update_queue, aggregator)

    async def _insert(self, keywords: list[ParsedKeyword], aggregator: ImportResultAggregator) -> None:
        if not keywords:
            return

        try:
            await self.repository.insert_many([to_insert(keyword) for keyword in keywords])
        except Exception as exc:
            logger.warning(
                "Batch keyword insert failed, falling back to single inserts",
                extra={"count": len(keywords), "error": str(exc)},
            )
        else:
            for keyword in keywords:
                aggregator.inserted(keyword.locale)
            logger.info("Batch keyword insert succeeded", extra={"count": len(keywords)})
            return

        outcomes = await self._insert_individually(keywords)
        for outcome in outcomes:
            if outcome.error is None:
                aggregator.inserted(outcome.keyword.locale)
            else:
                aggregator.failed(
                    outcome.keyword.keyword,
                    outcome.error,
                    outcome.keyword.locale,
                    outcome.keyword.row,
                )

    async def _insert_individually(self, keywords: list[ParsedKeyword]) -> list[InsertOutcome]:
        semaphore = asyncio.Semaphore(self.fallback_concurrency)

        async def _insert_one(keyword: ParsedKeyword) -> InsertOutcome:
            async with semaphore:
                try:
                    await self.repository.insert_one(to_insert(keyword))
                except Exception as exc:
                    logger.warning(
                        "Single keyword insert failed",
                        extra={"keyword": keyword.keyword, "locale": keyword.locale, "error": str(exc)},
                    )
                    return InsertOutcome(keyword=keyword, error=str(exc) or type(exc).__name__)
            return InsertOutcome(keyword=keyword)

        return list(await asyncio.gather(*(_insert_one(keyword) for keyword in keywords)))

    async def _update(
        self,
        updates: list[tuple[str, ParsedKeyword]],
        aggregator: ImportResultAggregator,
    ) -> None:
        for keyword_id, keyword in updates:
            try:
                await self.repository.update_one(keyword_id, to_patch(keyword))
            except Exception as exc:
                logger.warning(
                    "Keyword update failed",
                    extra={"keyword_id": keyword_id, "keyword": keyword.keyword, "error": str(exc)},
                )
                aggregator.failed(keyword.keyword, str(exc) or type(exc).__name__, keyword.locale, keyword.row)
                continue
            aggregator.updated(keyword.locale)
