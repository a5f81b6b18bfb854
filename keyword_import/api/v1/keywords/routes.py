"""Bulk keyword import API endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response, status

from keyword_import.api.v1.dependencies import KeywordImportService
from keyword_import.api.v1.keywords.constants import (
    CSV_MEDIA_TYPE,
    DEFAULT_TEMPLATE_LOCALE,
    TEMPLATE_FILENAME,
)
from keyword_import.schemas.keyword_import import (
    BulkImportRequest,
    ErrorResponse,
    ImportResponse,
)
from keyword_import.services.keyword_import.locales import SUPPORTED_LOCALES
from keyword_import.services.keyword_import.templates import (
    generate_enhanced_template,
    generate_legacy_template,
)

router = APIRouter()


@router.post(
    "/bulk",
    response_model=ImportResponse,
    summary="Bulk import keywords",
    description=(
        "Import keywords from legacy pipe-delimited text, header-driven comma-delimited text, "
        "or pre-parsed records. Rows are validated individually; the response reports what "
        "happened to every row."
    ),
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def bulk_import_keywords(
    request: BulkImportRequest,
    pipeline: KeywordImportService,
) -> ImportResponse:
    """Run a bulk keyword import."""
    return await pipeline.run(request)


@router.get(
    "/bulk/template",
    summary="Download import template",
    description="Return a CSV template in the enhanced or legacy import format.",
    response_class=Response,
)
async def download_import_template(
    locale: str = Query(DEFAULT_TEMPLATE_LOCALE),
    template_format: Literal["enhanced", "legacy"] = Query("legacy", alias="format"),
    examples: bool = Query(True),
) -> Response:
    """Download a keyword import template."""
    if template_format == "enhanced":
        content = generate_enhanced_template(include_examples=examples)
        suffix = "enhanced"
    else:
        content = generate_legacy_template(locale)
        suffix = locale if locale in SUPPORTED_LOCALES else DEFAULT_TEMPLATE_LOCALE

    filename = TEMPLATE_FILENAME.format(suffix=suffix)
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
