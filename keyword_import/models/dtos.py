"""Typed create/patch DTOs for `ContentKeyword`."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, ClassVar


@dataclass(slots=True)
class ContentKeywordCreateDTO:
    """Create DTO for `ContentKeyword`."""

    keyword: str
    keyword_normalized: str
    locale: str
    keyword_native: str | None = None
    keyword_ko: str | None = None
    target_locale: str | None = None
    category: str | None = None
    search_volume: int | None = None
    competition: int | None = None
    competition_level: str | None = None
    priority: int | None = None
    status: str | None = None

    _DROP_NONE_FIELDS: ClassVar[set[str]] = {
        "category",
        "priority",
        "status",
    }

    def to_orm_kwargs(self) -> dict[str, Any]:
        payload = asdict(self)
        for key in self._DROP_NONE_FIELDS:
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


@dataclass(slots=True)
class ContentKeywordPatchDTO:
    """Sparse patch DTO for `ContentKeyword`."""

    keyword_ko: str | None = None
    search_volume: int | None = None
    competition: int | None = None
    competition_level: str | None = None
    priority: int | None = None
    category: str | None = None
    status: str | None = None
    updated_at: datetime | None = None
    _provided_fields: set[str] = field(
        default_factory=set,
        repr=False,
        compare=False,
    )

    @classmethod
    def from_partial(cls, payload: dict[str, Any]) -> ContentKeywordPatchDTO:
        obj = cls(**payload)
        obj._provided_fields = set(payload.keys())
        return obj

    def to_patch_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload.pop("_provided_fields", None)
        return {key: value for key, value in payload.items() if key in self._provided_fields}
