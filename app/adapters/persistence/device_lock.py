"""AdvisoryDeviceLock — PostgreSQL transaction-scoped advisory lock per device."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.ports.device_lock import DeviceLock

logger = logging.getLogger(__name__)


class AdvisoryDeviceLock(DeviceLock):
    """Serializes writers for one device across every worker sharing the database.

    ``pg_advisory_xact_lock`` is released by PostgreSQL at commit or rollback,
    so the lock lives exactly as long as the scheduler's unit of work.
    """

    def __init__(self, session: AsyncSession):
        self._s = session

    @asynccontextmanager
    async def lock(self, device_id: str) -> AsyncIterator[None]:
        await self._s.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:device_id))"),
            {"device_id": device_id},
        )
        logger.debug("Acquired advisory lock for device %s", device_id)
        yield
