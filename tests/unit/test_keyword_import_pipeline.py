"""Unit tests for bulk keyword import orchestration."""

from __future__ import annotations

from typing import Any

import pytest

from keyword_import.config import Settings
from keyword_import.core.exceptions import (
    BatchSizeExceededError,
    DuplicateLookupError,
    EmptyImportError,
    NoValidKeywordsError,
    UnsupportedCategoryError,
    UnsupportedLocaleError,
)
from keyword_import.repositories.keyword_repository import ExistingKeyword
from keyword_import.schemas.keyword_import import BulkImportRequest
from keyword_import.services.keyword_import.pipeline import KeywordImportPipeline

LEGACY_SAMPLE = "rhinoplasty korea cost|코성형 한국 비용|2400\n강남 성형외과 추천|강남 성형외과 추천|2000"


def _settings(**overrides: Any) -> Settings:
    return Settings(**overrides)


@pytest.mark.asyncio
async def test_legacy_import_inserts_all_rows(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings())

    response = await pipeline.run(BulkImportRequest(csv_content=LEGACY_SAMPLE))

    assert response.success is True
    data = response.data
    assert (data.total, data.inserted, data.errors) == (2, 2, 0)
    assert data.format_detected == "legacy"
    assert set(data.by_locale) == {"en", "ko"}
    assert [record.locale for record in fake_repository.inserted] == ["en", "ko"]
    assert [record.priority for record in fake_repository.inserted] == [6, 6]
    assert response.message.startswith("2 keywords processed: 2 inserted")


@pytest.mark.asyncio
async def test_import_reports_row_errors_and_existing_keywords(make_repository: Any) -> None:
    repository = make_repository(existing=[ExistingKeyword(id="kw-1", locale="en", keyword="lasik korea")])
    pipeline = KeywordImportPipeline(repository, _settings())
    content = "\n".join(
        [
            "keyword,language,search_volume,competition",
            "lasik korea,en,900,low",
            "smile lasik,en,400,high",
            "smile lasik,en,400,high",
            "---,en,1,1",
        ]
    )

    response = await pipeline.run(BulkImportRequest(csv_content=content))

    data = response.data
    assert response.success is False
    assert (data.total, data.inserted, data.updated, data.skipped, data.errors) == (4, 1, 0, 1, 2)
    assert data.total == data.inserted + data.updated + data.skipped + data.errors
    assert data.duplicates == ["lasik korea"]
    assert data.duplicates_in_file == 1
    assert {detail.row for detail in data.error_details} == {4, 5}
    assert data.by_locale["en"].total == 3


@pytest.mark.asyncio
async def test_batch_failure_still_inserts_every_valid_keyword(make_repository: Any) -> None:
    repository = make_repository(batch_error=RuntimeError("statement timeout"))
    pipeline = KeywordImportPipeline(repository, _settings(keyword_import_fallback_concurrency=2))
    records = [{"keyword": f"keyword {index}", "language": "en"} for index in range(7)]

    response = await pipeline.run(BulkImportRequest.model_validate({"keywords": records}))

    assert response.data.inserted == 7
    assert response.data.format_detected == "records"
    assert repository.single_calls == 7
    assert repository.max_active_writes <= 2


@pytest.mark.asyncio
async def test_update_existing_routes_matches_to_updates(make_repository: Any) -> None:
    repository = make_repository(existing=[ExistingKeyword(id="kw-1", locale="ko", keyword="코성형")])
    pipeline = KeywordImportPipeline(repository, _settings())

    response = await pipeline.run(
        BulkImportRequest(csv_content="코성형|코성형 비용|3000", update_existing=True, category="dental")
    )

    assert response.data.updated == 1
    keyword_id, patch = repository.updates[0]
    assert keyword_id == "kw-1"
    assert patch.category == "dental"
    assert patch.keyword_localized == "코성형 비용"


@pytest.mark.asyncio
async def test_missing_payload_is_fatal(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings())

    with pytest.raises(EmptyImportError):
        await pipeline.run(BulkImportRequest())
    with pytest.raises(EmptyImportError):
        await pipeline.run(BulkImportRequest(csv_content="   \n"))
    with pytest.raises(EmptyImportError, match="No keyword rows"):
        await pipeline.run(BulkImportRequest(csv_content="# comment only"))

    assert fake_repository.lookup_calls == []


@pytest.mark.asyncio
async def test_all_rows_invalid_is_fatal_with_details(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings())

    with pytest.raises(NoValidKeywordsError) as exc_info:
        await pipeline.run(BulkImportRequest(csv_content="keyword,language\n---,en\n,en"))

    details = exc_info.value.details
    assert [error["row"] for error in details["errors"]] == [2, 3]
    assert details["stats"]["invalid_rows"] == 2
    assert fake_repository.lookup_calls == []


@pytest.mark.asyncio
async def test_batch_ceiling_is_enforced_before_any_write(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings(keyword_import_max_batch_size=3))
    content = "\n".join(f"keyword {index}|localized|100" for index in range(4))

    with pytest.raises(BatchSizeExceededError) as exc_info:
        await pipeline.run(BulkImportRequest(csv_content=content))

    assert exc_info.value.details == {"max": 3, "current": 4}
    assert fake_repository.batch_calls == 0


@pytest.mark.asyncio
async def test_unsupported_options_are_rejected(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings())

    with pytest.raises(UnsupportedLocaleError):
        await pipeline.run(BulkImportRequest(csv_content="a|b|1", locale="fr"))
    with pytest.raises(UnsupportedCategoryError):
        await pipeline.run(BulkImportRequest(csv_content="a|b|1", category="cardiology"))


@pytest.mark.asyncio
async def test_locale_option_is_case_insensitive(fake_repository: Any) -> None:
    pipeline = KeywordImportPipeline(fake_repository, _settings())

    response = await pipeline.run(BulkImportRequest(csv_content="a|b|1", locale="ZH-tw"))

    assert list(response.data.by_locale) == ["zh-TW"]


@pytest.mark.asyncio
async def test_lookup_failure_aborts_before_writes(make_repository: Any) -> None:
    repository = make_repository(lookup_error=RuntimeError("db down"))
    pipeline = KeywordImportPipeline(repository, _settings())

    with pytest.raises(DuplicateLookupError):
        await pipeline.run(BulkImportRequest(csv_content=LEGACY_SAMPLE))

    assert repository.batch_calls == 0
    assert repository.inserted == []
