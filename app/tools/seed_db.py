"""Seed the database with sample device assignments.

Records go through the scheduler, so seeded data obeys the same overlap
rules as API traffic. Re-running without --drop skips samples that are
already stored or that would conflict with what is.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import async_session_factory
from app.adapters.persistence.device_lock import AdvisoryDeviceLock
from app.adapters.persistence.models import DeviceAssignmentModel
from app.adapters.persistence.repositories import SqlAssignmentRepository
from app.adapters.persistence.unit_of_work import SqlUnitOfWork
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.use_cases.schedule_assignment import AssignmentScheduler
from app.domain.errors import ConflictError
from app.domain.value_objects.assignment_filter import AssignmentFilter
from app.domain.value_objects.enums import AssignmentStatus

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

SAMPLE_ASSIGNMENTS: list[dict] = [
    {
        "device_id": "TRIMBLE_001",
        "device_name": "Trimble SPS986 Unit 001",
        "survey_id": "SUR_001",
        "survey_name": "Mumbai Gas Main Line Survey",
        "from_date": date(2024, 1, 15),
        "to_date": date(2024, 6, 30),
        "notes": "Primary device for gas pipeline survey",
    },
    {
        "device_id": "TRIMBLE_002",
        "device_name": "Trimble SPS986 Unit 002",
        "survey_id": "SUR_002",
        "survey_name": "Fiber Network Expansion",
        "from_date": date(2024, 1, 16),
        "to_date": date(2024, 6, 30),
        "notes": "Fiber optics survey device",
    },
    {
        "device_id": "TRIMBLE_003",
        "device_name": "Trimble SPS986 Unit 003",
        "survey_id": "SUR_003",
        "survey_name": "Water Distribution Assessment",
        "from_date": date(2023, 11, 1),
        "to_date": date(2023, 12, 31),
        "notes": "Completed water survey project",
        "outcome": AssignmentStatus.COMPLETED,
    },
]


async def _drop_data(session: AsyncSession) -> None:
    await session.execute(delete(DeviceAssignmentModel))
    await session.commit()
    logger.info("Existing device assignments dropped")


async def _already_seeded(repo: AssignmentRepository, sample: dict) -> bool:
    existing = await repo.list(
        AssignmentFilter(device_id=sample["device_id"], survey_id=sample["survey_id"])
    )
    return any(a.from_date == sample["from_date"] for a in existing)


async def load_samples(
    repo: AssignmentRepository,
    scheduler: AssignmentScheduler,
    assigned_by: str = "Admin User",
    samples: list[dict] = SAMPLE_ASSIGNMENTS,
) -> dict[str, int]:
    """Propose each sample through the scheduler.

    A sample already stored under the same device, survey and start date is
    skipped, as is one that conflicts with an ACTIVE assignment.
    """
    counts = {"created": 0, "skipped": 0}
    for sample in samples:
        sample = dict(sample)
        outcome = sample.pop("outcome", None)
        if await _already_seeded(repo, sample):
            logger.info("Skipping %s/%s: already seeded", sample["device_id"], sample["survey_id"])
            counts["skipped"] += 1
            continue
        try:
            created = await scheduler.propose_assignment(assigned_by=assigned_by, **sample)
        except ConflictError as e:
            logger.info("Skipping %s/%s: %s", sample["device_id"], sample["survey_id"], e.message)
            counts["skipped"] += 1
            continue
        if outcome is not None:
            await scheduler.revoke_assignment(created.id, outcome)
        counts["created"] += 1
    return counts


async def seed(drop: bool = False, assigned_by: str = "Admin User") -> dict[str, int]:
    """Load SAMPLE_ASSIGNMENTS into the database; return created/skipped counts."""
    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        repo = SqlAssignmentRepository(session)
        scheduler = AssignmentScheduler(
            assignment_repo=repo,
            device_lock=AdvisoryDeviceLock(session),
            unit_of_work=SqlUnitOfWork(session),
        )
        counts = await load_samples(repo, scheduler, assigned_by=assigned_by)

    logger.info("Seed complete: %(created)d created, %(skipped)d skipped", counts)
    return counts


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed sample device assignments")
    parser.add_argument("--drop", action="store_true", help="delete existing assignments first")
    parser.add_argument("--assigned-by", default="Admin User")
    args = parser.parse_args(argv)

    asyncio.run(seed(drop=args.drop, assigned_by=args.assigned_by))
    return 0


if __name__ == "__main__":
    sys.exit(main())
