"""Reconcile parsed keywords against keywords already in the store."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from keyword_import.core.exceptions import DuplicateLookupError
from keyword_import.repositories.keyword_repository import ExistingKeyword, KeywordRepository
from keyword_import.services.keyword_import.row_parser import (
    ParsedKeyword,
    normalize_keyword_text,
)

logger = logging.getLogger(__name__)

DuplicateKey = tuple[str, str]


@dataclass(frozen=True, slots=True)
class Resolution:
    """Verdict for one keyword: NEW when `existing_id` is None, else EXISTS."""

    keyword: ParsedKeyword
    existing_id: str | None = None

    @property
    def exists(self) -> bool:
        return self.existing_id is not None


def build_existing_index(existing: Iterable[ExistingKeyword]) -> dict[DuplicateKey, str]:
    """Index stored keywords by (locale, normalized text).

    Both the stored primary text and the native alias point at the same id so
    an incoming row matches on either.
    """
    index: dict[DuplicateKey, str] = {}
    for record in existing:
        for text in (record.keyword, record.keyword_native):
            if text:
                index[(record.locale, normalize_keyword_text(text))] = record.id
    return index


class DuplicateResolver:
    """Looks up all candidate keywords in a single store round trip."""

    def __init__(self, repository: KeywordRepository) -> None:
        self.repository = repository

    async def resolve(self, keywords: Sequence[ParsedKeyword]) -> list[Resolution]:
        if not keywords:
            return []

        locales = sorted({keyword.locale for keyword in keywords})
        texts = sorted({text for keyword in keywords for text in keyword.lookup_texts()})

        try:
            existing = await self.repository.find_existing(locales, texts)
        except Exception as exc:
            logger.error(
                "Existing keyword lookup failed",
                extra={"locales": locales, "text_count": len(texts), "error": str(exc)},
            )
            raise DuplicateLookupError(str(exc)) from exc

        index = build_existing_index(existing)
        resolutions = [
            Resolution(keyword=keyword, existing_id=self._match(index, keyword))
            for keyword in keywords
        ]
        logger.info(
            "Resolved keyword duplicates",
            extra={
                "candidates": len(keywords),
                "existing_matches": sum(1 for resolution in resolutions if resolution.exists),
            },
        )
        return resolutions

    @staticmethod
    def _match(index: dict[DuplicateKey, str], keyword: ParsedKeyword) -> str | None:
        for text in keyword.lookup_texts():
            existing_id = index.get((keyword.locale, text))
            if existing_id is not None:
                return existing_id
        return None
