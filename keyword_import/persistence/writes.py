"""Typed write adapter for `ContentKeyword` rows."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from keyword_import.models.content_keyword import ContentKeyword
from keyword_import.models.dtos import ContentKeywordCreateDTO, ContentKeywordPatchDTO

# Fields an import may overwrite on an existing keyword. Identity columns
# (keyword text, locale) are immutable once stored.
KEYWORD_PATCH_ALLOWLIST = frozenset(
    {
        "keyword_ko",
        "search_volume",
        "competition",
        "competition_level",
        "priority",
        "category",
        "status",
        "updated_at",
    }
)


class InvalidPatchFieldError(RuntimeError):
    """Raised when a patch payload contains disallowed fields."""

    def __init__(self, model_name: str, fields: list[str]) -> None:
        super().__init__(f"Invalid patch fields for {model_name}: {', '.join(sorted(fields))}")


@runtime_checkable
class KeywordWritePort(Protocol):
    """Port for typed keyword creation and patching."""

    def create(self, session: AsyncSession, dto: ContentKeywordCreateDTO) -> ContentKeyword:
        """Create and add a keyword to the session."""

    def patch(
        self,
        session: AsyncSession,
        instance: ContentKeyword,
        dto: ContentKeywordPatchDTO,
    ) -> ContentKeyword:
        """Patch an existing keyword."""


class KeywordWriteAdapter:
    """Default keyword write adapter with strict patch-field validation."""

    def __init__(self, patch_allowlist: frozenset[str] = KEYWORD_PATCH_ALLOWLIST) -> None:
        self.patch_allowlist = patch_allowlist

    def create(self, session: AsyncSession, dto: ContentKeywordCreateDTO) -> ContentKeyword:
        """Create a keyword from the DTO and add it to the session."""
        instance = ContentKeyword(**dto.to_orm_kwargs())
        session.add(instance)
        return instance

    def patch(
        self,
        session: AsyncSession,
        instance: ContentKeyword,
        dto: ContentKeywordPatchDTO,
    ) -> ContentKeyword:
        """Apply a sparse patch, rejecting fields outside the allowlist."""
        payload = dto.to_patch_dict()
        invalid_fields = sorted(set(payload) - self.patch_allowlist)
        if invalid_fields:
            raise InvalidPatchFieldError(ContentKeyword.__name__, invalid_fields)

        for key, value in payload.items():
            setattr(instance, key, value)
        return instance


keyword_writes = KeywordWriteAdapter()
