"""InMemoryUnitOfWork — writes to the in-memory store are visible immediately."""

from app.application.ports.unit_of_work import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass
