"""Custom exception classes for the application."""

from typing import Any


class KeywordImportError(Exception):
    """Base exception for call-level import failures.

    Raised before any write happens; the caller receives a single structured
    error instead of a partial result.
    """

    code = "IMPORT_ERROR"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


# Validation Errors
class ValidationError(KeywordImportError):
    """Request validation failed."""

    code = "VALIDATION_ERROR"


class EmptyImportError(ValidationError):
    """No content or keyword records were supplied."""

    def __init__(self, message: str = "csv_content or keywords is required") -> None:
        super().__init__(message)


class NoValidKeywordsError(ValidationError):
    """Every row of the payload failed validation."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("No valid keywords to import", details)


class BatchSizeExceededError(ValidationError):
    """Payload holds more keywords than one call may import."""

    def __init__(self, current: int, maximum: int) -> None:
        super().__init__(
            f"At most {maximum} keywords can be imported per call (received {current})",
            {"max": maximum, "current": current},
        )


class UnsupportedLocaleError(ValidationError):
    """Explicit locale option is not one of the supported tags."""

    def __init__(self, locale: str, supported: list[str]) -> None:
        super().__init__(
            f"Unsupported locale: {locale}. Supported locales: {', '.join(supported)}",
            {"field": "locale", "value": locale},
        )


class UnsupportedCategoryError(ValidationError):
    """Explicit category option is not one of the supported categories."""

    def __init__(self, category: str, supported: list[str]) -> None:
        super().__init__(
            f"Unsupported category: {category}. Supported categories: {', '.join(supported)}",
            {"field": "category", "value": category},
        )


# Store Errors
class DuplicateLookupError(KeywordImportError):
    """Existing-keyword lookup failed, so deduplication cannot be trusted."""

    code = "DUPLICATE_LOOKUP_FAILED"
    status_code = 503

    def __init__(self, reason: str) -> None:
        super().__init__(f"Existing keyword lookup failed: {reason}")


class KeywordNotFoundError(Exception):
    """Stored keyword not found."""

    def __init__(self, keyword_id: str) -> None:
        super().__init__(f"Keyword not found: {keyword_id}")
