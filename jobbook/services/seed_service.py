"""Seed Service — writes a seed profile through the Job and Client repositories.

Invariants:
    - Destructive: replace_all on BOTH jobs and clients (two independent writes)
    - Running the same profile twice leaves identical collections
    - Never reachable from the HTTP layer without an explicit confirmation flag
"""

import logging
from datetime import date

from jobbook.core.domain_types import SeedProfile
from jobbook.core.seed_data import SEED_BUILDERS, SeedResult
from jobbook.services.client_repository import ClientRepository
from jobbook.services.job_repository import JobRepository

logger = logging.getLogger(__name__)


async def seed(
    profile: SeedProfile,
    jobs: JobRepository,
    clients: ClientRepository,
    anchor: date,
) -> SeedResult:
    data = SEED_BUILDERS[profile](anchor)
    await jobs.replace_all(data.jobs)
    await clients.replace_all(data.clients)
    logger.warning(
        f"Loaded '{profile.value}' seed data",
        extra={"count": len(data.jobs)},
    )
    return data
