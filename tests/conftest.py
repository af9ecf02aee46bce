"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from app.adapters.memory.device_lock import InProcessDeviceLock
from app.adapters.memory.repository import InMemoryAssignmentRepository
from app.adapters.memory.unit_of_work import InMemoryUnitOfWork
from app.application.use_cases.query_assignments import AssignmentQueries
from app.application.use_cases.schedule_assignment import AssignmentScheduler

TODAY = date(2024, 2, 15)


@pytest.fixture
def repo():
    return InMemoryAssignmentRepository()


@pytest.fixture
def scheduler(repo):
    return AssignmentScheduler(
        assignment_repo=repo,
        device_lock=InProcessDeviceLock(),
        unit_of_work=InMemoryUnitOfWork(),
        today=lambda: TODAY,
    )


@pytest.fixture
def queries(repo, scheduler):
    return AssignmentQueries(assignment_repo=repo, scheduler=scheduler, max_page_size=50)
