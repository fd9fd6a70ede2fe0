"""Seed Service & Settings Repository — verifies destructive seeding and preferences."""

from datetime import date

from jobbook.core.domain_types import SeedProfile
from jobbook.schemas.settings import AppSettings
from jobbook.services.seed_service import seed
from jobbook.services.settings_repository import SettingsRepository
from tests.services.factories import make_job

ANCHOR = date(2024, 6, 1)


# --- seed ---

async def test_seed_replaces_existing_jobs(job_repo, client_repo):
    await job_repo.create(make_job("mine"))

    await seed(SeedProfile.MINIMAL, job_repo, client_repo, ANCHOR)

    assert [j.id for j in await job_repo.list_all()] == ["job_1"]
    assert [c.id for c in await client_repo.list_all()] == ["client_1"]


async def test_seeding_twice_is_idempotent(job_repo, client_repo):
    await seed(SeedProfile.FULL_WORKFLOW, job_repo, client_repo, ANCHOR)
    first = await job_repo.list_all()

    await seed(SeedProfile.FULL_WORKFLOW, job_repo, client_repo, ANCHOR)

    assert await job_repo.list_all() == first
    assert len(first) == 50


# --- settings ---

async def test_settings_default_when_missing(store):
    repo = SettingsRepository.for_store(store)
    assert await repo.load() == AppSettings()


async def test_settings_round_trip_in_camel_case(store):
    repo = SettingsRepository.for_store(store)
    await repo.save(AppSettings(user_email="me@example.com", sms_only=True))

    assert (await store.read("settings")).value == {
        "userEmail": "me@example.com", "smsOnly": True,
    }
    assert (await repo.load()).sms_only is True


async def test_invalid_settings_fall_back_to_defaults(store):
    await store.write("settings", {"smsOnly": "not-a-bool"})
    assert await SettingsRepository.for_store(store).load() == AppSettings()


async def test_reset_restores_defaults(store):
    repo = SettingsRepository.for_store(store)
    await repo.save(AppSettings(sms_only=True))
    assert await repo.reset() == AppSettings()
    assert (await repo.load()).sms_only is False
