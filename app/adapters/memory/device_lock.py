"""InProcessDeviceLock — one asyncio.Lock per device id, for a single worker process."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from app.application.ports.device_lock import DeviceLock


class InProcessDeviceLock(DeviceLock):
    """Locks are created on first use and dropped once no task holds or awaits them."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def lock(self, device_id: str) -> AsyncIterator[None]:
        device_lock = self._locks.setdefault(device_id, asyncio.Lock())
        self._holders[device_id] = self._holders.get(device_id, 0) + 1
        try:
            async with device_lock:
                yield
        finally:
            self._holders[device_id] -= 1
            if not self._holders[device_id]:
                del self._holders[device_id]
                del self._locks[device_id]
