"""Admin Routes — destructive seeding and full data reset.

Invariants:
    - Both endpoints refuse to run without ?confirm=true (400)
    - clear wipes every storage key, then empties both in-memory caches
    - seed replaces jobs AND clients, then refreshes both caches from storage
"""

import logging

from fastapi import APIRouter, Depends, Query

from jobbook.api.dependencies import AppContainer, get_container
from jobbook.core.domain_types import SeedProfile
from jobbook.core.errors import DomainValidationError
from jobbook.services.seed_service import seed

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


def _require_confirmation(confirm: bool, operation: str) -> None:
    if not confirm:
        raise DomainValidationError(
            f"{operation} is destructive; repeat with confirm=true", "confirm",
        )


@router.post("/seed/{profile}")
async def seed_profile(
    profile: SeedProfile,
    confirm: bool = Query(False),
    app: AppContainer = Depends(get_container),
):
    _require_confirmation(confirm, "Seeding")
    data = await seed(
        profile,
        app.jobs.repository,
        app.clients.repository,
        app.settings.seed_anchor_date,
    )
    await app.jobs.persisted.fetch()
    await app.clients.persisted.fetch()
    return {
        "profile": profile.value,
        "jobs": len(data.jobs),
        "clients": len(data.clients),
    }


@router.post("/clear")
async def clear_all_data(
    confirm: bool = Query(False), app: AppContainer = Depends(get_container),
):
    _require_confirmation(confirm, "Clearing all data")
    await app.jobs.repository.clear_all()
    app.jobs.cache_only.set_all([])
    app.clients.cache_only.set_all([])
    logger.warning("All data cleared via admin endpoint")
    return {"status": "cleared"}
