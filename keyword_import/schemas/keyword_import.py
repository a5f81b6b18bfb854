"""Bulk keyword import schemas."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class KeywordRecordIn(BaseModel):
    """Pre-parsed keyword record supplied instead of delimited text.

    Field types are deliberately loose so that one malformed record becomes a
    row error instead of rejecting the whole request.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    keyword: str | None = None
    keyword_native: str | None = None
    keyword_ko: str | None = Field(default=None, alias="keyword_localized")
    locale: str | None = Field(default=None, alias="language")
    search_volume: int | float | str | None = None
    competition: int | float | str | None = None
    priority: int | float | str | None = None
    category: str | None = None


class BulkImportRequest(BaseModel):
    """Bulk keyword import payload: delimited text or pre-parsed records."""

    csv_content: str | None = Field(
        default=None,
        description="Legacy pipe-delimited or header-driven comma-delimited keyword text.",
    )
    keywords: list[KeywordRecordIn] | None = Field(
        default=None,
        description="Pre-parsed keyword records, used when csv_content is absent.",
    )
    locale: str | None = Field(
        default=None,
        description="Locale applied to rows without an explicit language. Overrides auto-detection.",
    )
    category: str | None = Field(default=None, description="Default category for rows without one.")
    delimiter: str | None = Field(
        default=None,
        min_length=1,
        max_length=1,
        description="Delimiter override; the format itself is still detected.",
    )
    skip_header: bool = Field(default=True, description="Skip the first line when it is a header.")
    skip_duplicates: bool = Field(default=True, description="Skip keywords that already exist.")
    update_existing: bool = Field(default=False, description="Update keywords that already exist.")
    auto_detect_language: bool = Field(default=True)
    validate_search_volume: bool = Field(
        default=False,
        description="Treat missing or non-numeric search volume as a row error.",
    )


class ImportErrorDetail(BaseModel):
    """One row- or record-level failure."""

    model_config = ConfigDict(from_attributes=True)

    keyword: str
    error: str
    row: int | None = None


class ImportWarning(BaseModel):
    """Non-fatal format consistency warning."""

    model_config = ConfigDict(from_attributes=True)

    row: int
    message: str


class LocaleCounts(BaseModel):
    """Outcome counters for one locale."""

    model_config = ConfigDict(from_attributes=True)

    total: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0


class ImportResultData(LocaleCounts):
    """Complete report of what happened to every row of one import."""

    duplicates: list[str] = Field(default_factory=list)
    error_details: list[ImportErrorDetail] = Field(default_factory=list)
    by_locale: dict[str, LocaleCounts] = Field(default_factory=dict)
    warnings: list[ImportWarning] = Field(default_factory=list)
    format_detected: Literal["legacy", "enhanced", "records"]
    duplicates_in_file: int = 0


class ImportResponse(BaseModel):
    """Bulk import response envelope."""

    success: bool
    data: ImportResultData
    message: str


class ErrorBody(BaseModel):
    """Structured call-level error."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error envelope returned for fatal import failures."""

    success: Literal[False] = False
    error: ErrorBody
