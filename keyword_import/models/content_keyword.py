"""Content keyword model."""

from __future__ import annotations

from typing import Literal

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from keyword_import.models.base import Base, TimestampMixin, UUIDMixin

KeywordStatus = Literal["pending", "generating", "generated", "published", "failed"]
CompetitionBucket = Literal["low", "medium", "high"]


class ContentKeyword(Base, UUIDMixin, TimestampMixin):
    """A marketing search phrase queued for localized content generation."""

    __tablename__ = "content_keywords"
    __table_args__ = (
        UniqueConstraint("locale", "keyword_normalized", name="uq_content_keywords_locale_keyword"),
        Index("idx_content_keywords_target_locale", "target_locale"),
    )

    # Core data
    keyword: Mapped[str] = mapped_column(String(200), nullable=False)
    keyword_normalized: Mapped[str] = mapped_column(String(200), nullable=False)
    keyword_native: Mapped[str | None] = mapped_column(Text, nullable=True)
    keyword_ko: Mapped[str | None] = mapped_column(Text, nullable=True)
    locale: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    target_locale: Mapped[str | None] = mapped_column(String(10), nullable=True)
    category: Mapped[str] = mapped_column(String(50), default="general", nullable=False)

    # Metrics (caller supplied)
    search_volume: Mapped[int | None] = mapped_column(Integer, nullable=True)
    competition: Mapped[int | None] = mapped_column(Integer, nullable=True)
    competition_level: Mapped[str | None] = mapped_column(String(10), nullable=True)

    # Queueing
    priority: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)

    def __repr__(self) -> str:
        return f"<ContentKeyword {self.locale}:{self.keyword}>"
