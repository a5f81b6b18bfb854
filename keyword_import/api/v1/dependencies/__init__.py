"""Reusable API dependencies shared across v1 routes."""

from keyword_import.api.v1.dependencies.keyword_import import (
    KeywordImportService,
    get_keyword_import_pipeline,
    get_keyword_repository,
)

__all__ = ["KeywordImportService", "get_keyword_import_pipeline", "get_keyword_repository"]
