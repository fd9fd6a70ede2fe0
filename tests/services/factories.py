"""Test factories — deterministic entities and settings for service tests."""

from jobbook.config import Settings
from jobbook.schemas.client import Client
from jobbook.schemas.job import Job


async def no_sleep(_seconds):
    return None


def gateway_settings(success_rate: float) -> Settings:
    return Settings(
        paypal_success_rate=success_rate, gcash_success_rate=success_rate,
        card_success_rate=success_rate, venmo_success_rate=success_rate,
        paypal_latency_ms=0, gcash_latency_ms=0, card_latency_ms=0,
        venmo_latency_ms=0, refund_latency_ms=0, receipt_upload_latency_ms=0,
    )


def make_job(job_id: str = "job_1", quote: float = 500, **overrides) -> Job:
    fields = dict(
        id=job_id, job_name="Fence repair", client_id="client_1",
        client_name="Client 1", quote=quote, quote_date="2024-01-01",
        start_date="2024-01-05", end_date="2024-01-10",
    )
    fields.update(overrides)
    return Job(**fields)


def make_client(client_id: str = "client_1", **overrides) -> Client:
    fields = dict(
        id=client_id, full_name="Client 1",
        created_date="2024-01-01T00:00:00+00:00",
    )
    fields.update(overrides)
    return Client(**fields)
