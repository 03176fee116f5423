"""
agency_core.services.transactions

Transaction boundary shared by all services.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.errors import AgencyCoreError, StorageError
from agency_core.observability.logging import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Commit on success; roll back on any failure.

    Core errors propagate unchanged. Storage failures are logged and re-raised
    as `StorageError` so callers never see driver-specific exceptions.
    """
    try:
        yield session
        await session.commit()
    except AgencyCoreError:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        log.error("storage_failure", error=str(e), exc_info=True)
        raise StorageError() from e
    except BaseException:
        await session.rollback()
        raise
