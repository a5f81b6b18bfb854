"""Declarative base and column mixins shared by keyword models."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from keyword_import.core.ids import generate_cuid


class Base(DeclarativeBase):
    pass


class UUIDMixin:
    """Cuid string primary key assigned client-side at flush."""

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Server-managed `created_at` / `updated_at` columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
