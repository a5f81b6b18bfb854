"""Database kernel utilities for short-lived read/write operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from time import monotonic
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from keyword_import.core.database import get_session_context

logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")

_CONNECTION_ERROR_MARKERS = (
    "connection is closed",
    "underlying connection is closed",
    "server closed the connection unexpectedly",
    "connection was closed",
)


class DbKernelError(RuntimeError):
    """Base error for DB kernel operations."""


class TransientDbError(DbKernelError):
    """Transient DB failure that can usually be retried."""


class ConflictError(DbKernelError):
    """Write conflict (usually integrity/unique constraint)."""


class PermanentDbError(DbKernelError):
    """Non-transient DB failure."""


def is_transient_connection_error(exc: Exception) -> bool:
    """Return True when an exception likely came from a dropped DB connection."""
    if isinstance(exc, (InterfaceError, OperationalError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True

    lowered = str(exc).lower()
    return any(marker in lowered for marker in _CONNECTION_ERROR_MARKERS)


def _translate_error(exc: Exception) -> DbKernelError:
    if isinstance(exc, DbKernelError):
        return exc
    if isinstance(exc, IntegrityError):
        return ConflictError(str(exc.orig) if exc.orig is not None else str(exc))
    if is_transient_connection_error(exc):
        return TransientDbError(str(exc))
    return PermanentDbError(str(exc))


def _elapsed_ms(started: float) -> float:
    return round((monotonic() - started) * 1000, 2)


async def db_read(
    fn: Callable[[AsyncSession], Awaitable[_ResultT]],
    *,
    operation_name: str,
    attempts: int = 3,
    base_delay_seconds: float = 0.2,
) -> _ResultT:
    """Execute a read in a short-lived session, retrying transient failures."""
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    started = monotonic()
    for attempt in range(1, attempts + 1):
        try:
            async with get_session_context(commit_on_exit=False) as session:
                result = await fn(session)
            logger.debug(
                "DB read operation completed",
                extra={
                    "operation": operation_name,
                    "duration_ms": _elapsed_ms(started),
                    "attempt": attempt,
                },
            )
            return result
        except Exception as exc:
            translated = _translate_error(exc)
            will_retry = isinstance(translated, TransientDbError) and attempt < attempts
            logger.warning(
                "DB read operation failed",
                extra={
                    "operation": operation_name,
                    "duration_ms": _elapsed_ms(started),
                    "failure_class": type(translated).__name__,
                    "attempt": attempt,
                    "max_attempts": attempts,
                    "will_retry": will_retry,
                },
            )
            if not will_retry:
                raise translated from exc
            await asyncio.sleep(base_delay_seconds * attempt)

    raise RuntimeError(f"DB read retry loop exhausted unexpectedly: {operation_name}")


async def db_write(
    fn: Callable[[AsyncSession], Awaitable[_ResultT]],
    *,
    operation_name: str,
) -> _ResultT:
    """Execute a write in a short-lived session and commit it, without retries."""
    started = monotonic()
    try:
        async with get_session_context(commit_on_exit=False) as session:
            result = await fn(session)
            await session.commit()
        logger.debug(
            "DB write operation completed",
            extra={"operation": operation_name, "duration_ms": _elapsed_ms(started)},
        )
        return result
    except Exception as exc:
        translated = _translate_error(exc)
        logger.warning(
            "DB write operation failed",
            extra={
                "operation": operation_name,
                "duration_ms": _elapsed_ms(started),
                "failure_class": type(translated).__name__,
            },
        )
        raise translated from exc
