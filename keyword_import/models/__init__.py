"""SQLAlchemy database models."""

from keyword_import.models.base import Base
from keyword_import.models.content_keyword import ContentKeyword

__all__ = [
    "Base",
    "ContentKeyword",
]
