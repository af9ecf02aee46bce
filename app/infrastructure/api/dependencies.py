"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.memory.device_lock import InProcessDeviceLock
from app.adapters.memory.repository import InMemoryAssignmentRepository
from app.adapters.memory.unit_of_work import InMemoryUnitOfWork
from app.adapters.persistence.database import get_session
from app.adapters.persistence.device_lock import AdvisoryDeviceLock
from app.adapters.persistence.repositories import SqlAssignmentRepository
from app.adapters.persistence.unit_of_work import SqlUnitOfWork
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.device_lock import DeviceLock
from app.application.ports.unit_of_work import UnitOfWork
from app.application.use_cases.query_assignments import AssignmentQueries
from app.application.use_cases.schedule_assignment import AssignmentScheduler
from app.config import settings

logger = logging.getLogger(__name__)

# Process-wide singletons for the in-memory backend
_memory_repo = InMemoryAssignmentRepository()
_memory_lock = InProcessDeviceLock()
_memory_uow = InMemoryUnitOfWork()

if settings.storage_backend == "memory":
    logger.info("Using in-memory assignment store (single process only)")


def get_assignment_repo(session: AsyncSession = Depends(get_session)) -> AssignmentRepository:
    if settings.storage_backend == "memory":
        return _memory_repo
    return SqlAssignmentRepository(session)


def get_device_lock(session: AsyncSession = Depends(get_session)) -> DeviceLock:
    if settings.storage_backend == "memory":
        return _memory_lock
    return AdvisoryDeviceLock(session)


def get_unit_of_work(session: AsyncSession = Depends(get_session)) -> UnitOfWork:
    if settings.storage_backend == "memory":
        return _memory_uow
    return SqlUnitOfWork(session)


def get_scheduler(
    assignment_repo: AssignmentRepository = Depends(get_assignment_repo),
    device_lock: DeviceLock = Depends(get_device_lock),
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
) -> AssignmentScheduler:
    return AssignmentScheduler(
        assignment_repo=assignment_repo,
        device_lock=device_lock,
        unit_of_work=unit_of_work,
    )


def get_queries(
    assignment_repo: AssignmentRepository = Depends(get_assignment_repo),
    scheduler: AssignmentScheduler = Depends(get_scheduler),
) -> AssignmentQueries:
    return AssignmentQueries(
        assignment_repo=assignment_repo,
        scheduler=scheduler,
        max_page_size=settings.max_page_size,
    )
