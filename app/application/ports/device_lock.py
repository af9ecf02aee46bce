"""Port interface for per-device mutual exclusion."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class DeviceLock(ABC):
    @abstractmethod
    def lock(self, device_id: str) -> AbstractAsyncContextManager[None]:
        """Hold exclusive access to *device_id* for one check-and-write sequence.

        Implementations must be bounded: the lock is released no later than
        the end of the surrounding unit of work.
        """
        ...
