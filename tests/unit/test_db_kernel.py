"""Unit tests for DB kernel helpers."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from keyword_import.core.db_kernel import (
    ConflictError,
    PermanentDbError,
    TransientDbError,
    db_read,
    db_write,
    is_transient_connection_error,
)
from keyword_import.core.exceptions import KeywordNotFoundError


class _FakeSession:
    def __init__(self) -> None:
        self.commit_calls = 0

    async def commit(self) -> None:
        self.commit_calls += 1


def _patch_session(monkeypatch: pytest.MonkeyPatch, session: _FakeSession) -> None:
    @asynccontextmanager
    async def _fake_context(*, commit_on_exit: bool = True):
        assert commit_on_exit is False
        yield session

    monkeypatch.setattr("keyword_import.core.db_kernel.get_session_context", _fake_context)


@pytest.mark.asyncio
async def test_db_read_uses_short_lived_session(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    _patch_session(monkeypatch, session)

    result = await db_read(lambda s: _echo("ok", s), operation_name="unit_read")

    assert result == "ok"
    assert session.commit_calls == 0


@pytest.mark.asyncio
async def test_db_read_retries_transient_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    _patch_session(monkeypatch, session)
    calls = {"count": 0}

    async def _operation(_session: _FakeSession) -> list[str]:
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("connection is closed")
        return ["kw-1"]

    result = await db_read(_operation, operation_name="unit_read_retry", attempts=2, base_delay_seconds=0.0)

    assert result == ["kw-1"]
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_db_read_exhausted_transient_retry_raises_transient(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_session(monkeypatch, _FakeSession())

    async def _operation(_session: _FakeSession) -> None:
        raise RuntimeError("server closed the connection unexpectedly")

    with pytest.raises(TransientDbError):
        await db_read(_operation, operation_name="unit_read_transient", attempts=2, base_delay_seconds=0.0)


@pytest.mark.asyncio
async def test_db_write_commits_once(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    _patch_session(monkeypatch, session)

    result = await db_write(lambda s: _echo("kw-1", s), operation_name="unit_write")

    assert result == "kw-1"
    assert session.commit_calls == 1


@pytest.mark.asyncio
async def test_db_write_does_not_retry_transient_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    _patch_session(monkeypatch, session)
    calls = {"count": 0}

    async def _operation(_session: _FakeSession) -> None:
        calls["count"] += 1
        raise RuntimeError("connection is closed")

    with pytest.raises(TransientDbError):
        await db_write(_operation, operation_name="unit_write_transient")

    assert calls["count"] == 1
    assert session.commit_calls == 0


@pytest.mark.asyncio
async def test_db_write_translates_integrity_conflict(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_session(monkeypatch, _FakeSession())

    async def _operation(_session: _FakeSession) -> None:
        raise IntegrityError("INSERT ...", {}, Exception("duplicate key value"))

    with pytest.raises(ConflictError, match="duplicate key value"):
        await db_write(_operation, operation_name="unit_write_conflict")


@pytest.mark.asyncio
async def test_db_write_raises_permanent_on_non_transient_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_session(monkeypatch, _FakeSession())

    async def _operation(_session: _FakeSession) -> None:
        raise KeywordNotFoundError("kw-404")

    with pytest.raises(PermanentDbError, match="kw-404"):
        await db_write(_operation, operation_name="unit_write_perm")


def test_is_transient_connection_error() -> None:
    assert is_transient_connection_error(OperationalError("SELECT 1", {}, Exception("timeout")))
    assert is_transient_connection_error(RuntimeError("Underlying connection is closed"))
    assert not is_transient_connection_error(ValueError("bad payload"))


async def _echo(value: str, _session: Any) -> str:
    return value
