"""Payment Schemas — ledger record plus the request/result wire contract.

Invariants:
    - PaymentRequest/PaymentResult are the only payment contract exposed to callers
    - PaymentResult.success=False always carries an error message
    - A declined gateway payment still yields a Payment record (status=failed)
"""

from pydantic import Field, field_validator

from jobbook.core.domain_types import PaymentMethod, PaymentStatus
from jobbook.schemas.base import CamelModel, require_iso_date


class Payment(CamelModel):
    id: str
    job_id: str
    amount: float = Field(gt=0)
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: str | None = None
    payment_date: str
    notes: str | None = None

    @field_validator("payment_date")
    @classmethod
    def payment_date_is_iso(cls, v: str) -> str:
        return require_iso_date(v)


class PaymentRequest(CamelModel):
    job_id: str
    amount: float = Field(gt=0)
    method: PaymentMethod
    description: str = ""
    payment_date: str | None = None  # YYYY-MM-DD or ISO timestamp

    @field_validator("payment_date")
    @classmethod
    def payment_date_is_iso(cls, v: str | None) -> str | None:
        return v if v is None else require_iso_date(v)


class PaymentResult(CamelModel):
    success: bool
    payment: Payment | None = None
    error: str | None = None


class PaymentMethodInfo(CamelModel):
    name: str
    description: str
    fees: str
    processing_time: str


class PaymentIntent(CamelModel):
    """HTTP body for recording a payment; the job id comes from the path."""
    amount: float = Field(gt=0)
    method: PaymentMethod
    description: str = ""
    payment_date: str | None = None
    keep_failed: bool = True

    @field_validator("payment_date")
    @classmethod
    def payment_date_is_iso(cls, v: str | None) -> str | None:
        return v if v is None else require_iso_date(v)

    def to_request(self, job_id: str) -> PaymentRequest:
        return PaymentRequest(
            job_id=job_id,
            amount=self.amount,
            method=self.method,
            description=self.description,
            payment_date=self.payment_date,
        )
