"""Dependencies wiring the bulk import pipeline to the admin repository."""

from typing import Annotated

from fastapi import Depends

from keyword_import.config import Settings, get_settings
from keyword_import.repositories.keyword_repository import (
    AdminKeywordRepository,
    KeywordRepository,
)
from keyword_import.services.keyword_import.pipeline import KeywordImportPipeline


def get_keyword_repository() -> KeywordRepository:
    """Return the repository with unscoped write access used for imports."""
    settings = get_settings()
    return AdminKeywordRepository(lookup_attempts=settings.keyword_import_lookup_attempts)


def get_keyword_import_pipeline(
    repository: Annotated[KeywordRepository, Depends(get_keyword_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> KeywordImportPipeline:
    return KeywordImportPipeline(repository, settings)


KeywordImportService = Annotated[KeywordImportPipeline, Depends(get_keyword_import_pipeline)]
