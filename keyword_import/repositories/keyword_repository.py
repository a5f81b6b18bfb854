"""Keyword repository boundary and its SQLAlchemy implementation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from keyword_import.core.db_kernel import db_read, db_write
from keyword_import.core.exceptions import KeywordNotFoundError
from keyword_import.models.content_keyword import ContentKeyword
from keyword_import.models.dtos import ContentKeywordCreateDTO, ContentKeywordPatchDTO
from keyword_import.persistence.writes import KeywordWritePort, keyword_writes

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExistingKeyword:
    """Stored keyword identity used for duplicate resolution."""

    id: str
    locale: str
    keyword: str
    keyword_native: str | None = None


@dataclass(frozen=True, slots=True)
class KeywordInsert:
    """Fields written for a new keyword."""

    keyword: str
    locale: str
    category: str
    priority: int
    keyword_native: str | None = None
    keyword_localized: str | None = None
    search_volume: int | None = None
    competition: int | None = None
    competition_level: str | None = None
    status: str = "pending"

    def to_create_dto(self) -> ContentKeywordCreateDTO:
        return ContentKeywordCreateDTO(
            keyword=self.keyword,
            keyword_normalized=self.keyword.strip().lower(),
            keyword_native=self.keyword_native or self.keyword,
            keyword_ko=self.keyword_localized,
            locale=self.locale,
            target_locale=self.locale,
            category=self.category,
            search_volume=self.search_volume,
            competition=self.competition,
            competition_level=self.competition_level,
            priority=self.priority,
            status=self.status,
        )


@dataclass(frozen=True, slots=True)
class KeywordPatch:
    """Mutable fields an import may overwrite on an existing keyword."""

    keyword_localized: str | None
    search_volume: int | None
    competition: int | None
    competition_level: str | None
    priority: int
    category: str
    updated_at: datetime

    def to_patch_dto(self) -> ContentKeywordPatchDTO:
        payload = {
            "search_volume": self.search_volume,
            "competition": self.competition,
            "competition_level": self.competition_level,
            "priority": self.priority,
            "category": self.category,
            "updated_at": self.updated_at,
        }
        # Keep the stored localized alias when the import has none.
        if self.keyword_localized is not None:
            payload["keyword_ko"] = self.keyword_localized
        return ContentKeywordPatchDTO.from_partial(payload)


class KeywordRepository(Protocol):
    """Store operations the import pipeline depends on.

    Implementations raise on failure; the pipeline decides whether a failure
    is fatal (lookup) or isolated to one record (writes).
    """

    async def find_existing(
        self,
        locales: Sequence[str],
        texts: Sequence[str],
    ) -> list[ExistingKeyword]:
        """Return stored keywords in `locales` whose primary or native text matches `texts`."""

    async def insert_many(self, records: Sequence[KeywordInsert]) -> list[str]:
        """Insert all records atomically and return their ids."""

    async def insert_one(self, record: KeywordInsert) -> str:
        """Insert a single record and return its id."""

    async def update_one(self, keyword_id: str, patch: KeywordPatch) -> None:
        """Apply `patch` to the stored keyword `keyword_id`."""


class AdminKeywordRepository:
    """SQLAlchemy keyword repository with unscoped write access.

    Reads and writes run in short-lived sessions through the DB kernel. Only
    trusted import entry points construct this repository; it is handed to
    the pipeline explicitly.
    """

    def __init__(
        self,
        *,
        writes: KeywordWritePort = keyword_writes,
        lookup_attempts: int = 3,
    ) -> None:
        self.writes = writes
        self.lookup_attempts = lookup_attempts

    async def find_existing(
        self,
        locales: Sequence[str],
        texts: Sequence[str],
    ) -> list[ExistingKeyword]:
        if not locales or not texts:
            return []
        normalized = sorted({text.strip().lower() for text in texts})

        async def _query(session: AsyncSession) -> list[ExistingKeyword]:
            stmt = select(
                ContentKeyword.id,
                ContentKeyword.locale,
                ContentKeyword.keyword,
                ContentKeyword.keyword_native,
            ).where(
                ContentKeyword.locale.in_(list(locales)),
                or_(
                    ContentKeyword.keyword_normalized.in_(normalized),
                    func.lower(ContentKeyword.keyword_native).in_(normalized),
                ),
            )
            result = await session.execute(stmt)
            return [
                ExistingKeyword(
                    id=row.id,
                    locale=row.locale,
                    keyword=row.keyword,
                    keyword_native=row.keyword_native,
                )
                for row in result.all()
            ]

        return await db_read(
            _query,
            operation_name="content_keywords_find_existing",
            attempts=self.lookup_attempts,
        )

    async def insert_many(self, records: Sequence[KeywordInsert]) -> list[str]:
        if not records:
            return []
        logger.debug("Inserting keyword batch", extra={"count": len(records)})

        async def _insert(session: AsyncSession) -> list[str]:
            instances = [self.writes.create(session, record.to_create_dto()) for record in records]
            await session.flush()
            return [instance.id for instance in instances]

        return await db_write(_insert, operation_name="content_keywords_insert_many")

    async def insert_one(self, record: KeywordInsert) -> str:
        async def _insert(session: AsyncSession) -> str:
            instance = self.writes.create(session, record.to_create_dto())
            await session.flush()
            return instance.id

        return await db_write(_insert, operation_name="content_keywords_insert_one")

    async def update_one(self, keyword_id: str, patch: KeywordPatch) -> None:
        async def _update(session: AsyncSession) -> None:
            instance = await session.get(ContentKeyword, keyword_id)
            if instance is None:
                raise KeywordNotFoundError(keyword_id)
            self.writes.patch(session, instance, patch.to_patch_dto())
            await session.flush()

        await db_write(_update, operation_name="content_keywords_update_one")
