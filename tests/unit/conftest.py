"""Shared fakes for keyword import unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from keyword_import.core.db_kernel import ConflictError, PermanentDbError
from keyword_import.repositories.keyword_repository import (
    ExistingKeyword,
    KeywordInsert,
    KeywordPatch,
)


class FakeKeywordRepository:
    """In-memory keyword store with switchable failure modes."""

    def __init__(
        self,
        existing: Sequence[ExistingKeyword] = (),
        *,
        lookup_error: Exception | None = None,
        batch_error: Exception | None = None,
        failing_keywords: Sequence[str] = (),
        failing_updates: Sequence[str] = (),
    ) -> None:
        self.existing = list(existing)
        self.lookup_error = lookup_error
        self.batch_error = batch_error
        self.failing_keywords = set(failing_keywords)
        self.failing_updates = set(failing_updates)

        self.lookup_calls: list[tuple[list[str], list[str]]] = []
        self.batch_calls = 0
        self.single_calls = 0
        self.inserted: list[KeywordInsert] = []
        self.updates: list[tuple[str, KeywordPatch]] = []
        self.active_writes = 0
        self.max_active_writes = 0

    async def find_existing(
        self,
        locales: Sequence[str],
        texts: Sequence[str],
    ) -> list[ExistingKeyword]:
        self.lookup_calls.append((list(locales), list(texts)))
        if self.lookup_error is not None:
            raise self.lookup_error
        wanted = {text.lower() for text in texts}
        return [
            record
            for record in self.existing
            if record.locale in locales
            and (
                record.keyword.lower() in wanted
                or (record.keyword_native or "").lower() in wanted
            )
        ]

    async def insert_many(self, records: Sequence[KeywordInsert]) -> list[str]:
        self.batch_calls += 1
        if self.batch_error is not None:
            raise self.batch_error
        self.inserted.extend(records)
        return [f"kw-{index}" for index, _ in enumerate(records)]

    async def insert_one(self, record: KeywordInsert) -> str:
        self.single_calls += 1
        self.active_writes += 1
        self.max_active_writes = max(self.max_active_writes, self.active_writes)
        try:
            await asyncio.sleep(0)
            if record.keyword in self.failing_keywords:
                raise ConflictError(f"duplicate key value violates unique constraint ({record.keyword})")
            self.inserted.append(record)
            return f"kw-{len(self.inserted)}"
        finally:
            self.active_writes -= 1

    async def update_one(self, keyword_id: str, patch: KeywordPatch) -> None:
        if keyword_id in self.failing_updates:
            raise PermanentDbError(f"update rejected for {keyword_id}")
        self.updates.append((keyword_id, patch))


@pytest.fixture
def fake_repository() -> FakeKeywordRepository:
    return FakeKeywordRepository()


@pytest.fixture
def make_repository() -> type[FakeKeywordRepository]:
    return FakeKeywordRepository
