"""Payment Processor — per-method simulated settlement returning a PaymentResult.

Invariants:
    - process_payment() NEVER raises: every outcome is a PaymentResult
    - cash always succeeds immediately with status=completed
    - Gateway methods await simulated latency, then succeed or decline
    - A decline still yields a Payment record with status=failed; the caller decides
      whether it goes into the job's ledger

Design Decisions:
    - Gateway table (method -> GatewayProfile) instead of one method per provider
    - Random source and sleep injected: tests pin outcomes without real latency
    - PaymentDeclinedError is raised inside the gateway path and converted here
"""

import asyncio
import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

from jobbook.config import Settings
from jobbook.core.domain_types import PaymentMethod, PaymentStatus, new_id
from jobbook.core.errors import PaymentDeclinedError
from jobbook.schemas.payment import (
    Payment, PaymentMethodInfo, PaymentRequest, PaymentResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayProfile:
    label: str
    transaction_prefix: str
    success_rate: float
    latency_ms: int
    decline_message: str


METHOD_INFO: dict[PaymentMethod, PaymentMethodInfo] = {
    PaymentMethod.PAYPAL: PaymentMethodInfo(
        name="PayPal",
        description="Pay securely with your PayPal account",
        fees="2.9% + $0.30 per transaction",
        processing_time="Instant",
    ),
    PaymentMethod.GCASH: PaymentMethodInfo(
        name="GCash",
        description="Pay using your GCash mobile wallet",
        fees="No fees for verified accounts",
        processing_time="Instant",
    ),
    PaymentMethod.CASH: PaymentMethodInfo(
        name="Cash Payment",
        description="Pay with cash in person",
        fees="No fees",
        processing_time="Immediate",
    ),
    PaymentMethod.CARD: PaymentMethodInfo(
        name="Credit/Debit Card",
        description="Pay with a credit or debit card",
        fees="2.9% + $0.30 per transaction",
        processing_time="Instant",
    ),
    PaymentMethod.VENMO: PaymentMethodInfo(
        name="Venmo",
        description="Pay from your Venmo balance or linked bank",
        fees="1.9% + $0.10 per transaction",
        processing_time="Instant",
    ),
}


def gateways_from_settings(settings: Settings) -> dict[PaymentMethod, GatewayProfile]:
    return {
        PaymentMethod.PAYPAL: GatewayProfile(
            "PayPal", "PP", settings.paypal_success_rate,
            settings.paypal_latency_ms, "PayPal payment was declined",
        ),
        PaymentMethod.GCASH: GatewayProfile(
            "GCash", "GC", settings.gcash_success_rate,
            settings.gcash_latency_ms, "GCash payment was declined or timed out",
        ),
        PaymentMethod.CARD: GatewayProfile(
            "Card", "CD", settings.card_success_rate,
            settings.card_latency_ms, "Card payment was declined",
        ),
        PaymentMethod.VENMO: GatewayProfile(
            "Venmo", "VM", settings.venmo_success_rate,
            settings.venmo_latency_ms, "Venmo payment was declined",
        ),
    }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PaymentProcessor:
    """Settles payment requests against simulated providers."""

    def __init__(
        self,
        gateways: dict[PaymentMethod, GatewayProfile],
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        refund_latency_ms: int = 0,
    ):
        self.gateways = gateways
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.refund_latency_ms = refund_latency_ms

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PaymentProcessor":
        return cls(
            gateways_from_settings(settings),
            refund_latency_ms=settings.refund_latency_ms,
            **kwargs,
        )

    async def process_payment(self, request: PaymentRequest) -> PaymentResult:
        payment_id = new_id("payment")
        try:
            if request.method == PaymentMethod.CASH:
                return self._process_cash(payment_id, request)
            gateway = self.gateways.get(request.method)
            if gateway is None:
                raise ValueError(f"Unsupported payment method: {request.method.value}")
            return await self._process_gateway(payment_id, request, gateway)
        except Exception as e:
            logger.error(
                f"Payment processing failed: {e}",
                extra={"entity_id": request.job_id, "payment_method": request.method.value},
                exc_info=True,
            )
            return PaymentResult(success=False, error=str(e) or "Payment processing failed")

    def _process_cash(self, payment_id: str, request: PaymentRequest) -> PaymentResult:
        payment = Payment(
            id=payment_id,
            job_id=request.job_id,
            amount=request.amount,
            method=PaymentMethod.CASH,
            status=PaymentStatus.COMPLETED,
            payment_date=request.payment_date or _now_iso(),
            transaction_id=f"CASH_{payment_id}",
            notes="Cash payment received",
        )
        logger.info(
            "Cash payment processed",
            extra={"entity_id": request.job_id, "payment_method": "cash"},
        )
        return PaymentResult(success=True, payment=payment)

    async def _process_gateway(
        self, payment_id: str, request: PaymentRequest, gateway: GatewayProfile,
    ) -> PaymentResult:
        payment_date = request.payment_date or _now_iso()
        try:
            await self._sleep(gateway.latency_ms / 1000)
            if self._rng.random() >= gateway.success_rate:
                raise PaymentDeclinedError(gateway.decline_message, request.method.value)
        except PaymentDeclinedError as e:
            logger.warning(
                e.message,
                extra={
                    "entity_id": request.job_id,
                    "payment_method": request.method.value,
                    "error_code": e.code,
                },
            )
            failed = Payment(
                id=payment_id,
                job_id=request.job_id,
                amount=request.amount,
                method=request.method,
                status=PaymentStatus.FAILED,
                payment_date=payment_date,
                notes=e.message,
            )
            return PaymentResult(success=False, payment=failed, error=e.message)

        payment = Payment(
            id=payment_id,
            job_id=request.job_id,
            amount=request.amount,
            method=request.method,
            status=PaymentStatus.COMPLETED,
            payment_date=payment_date,
            transaction_id=f"{gateway.transaction_prefix}_{self._transaction_code()}",
            notes=f"{gateway.label} payment completed",
        )
        logger.info(
            f"{gateway.label} payment processed",
            extra={"entity_id": request.job_id, "payment_method": request.method.value},
        )
        return PaymentResult(success=True, payment=payment)

    def _transaction_code(self) -> str:
        alphabet = string.ascii_uppercase + string.digits
        return "".join(self._rng.choice(alphabet) for _ in range(9))

    def method_info(self, method: PaymentMethod) -> PaymentMethodInfo:
        return METHOD_INFO[method]

    async def refund_payment(self, payment_id: str, reason: str | None = None) -> bool:
        """Simulated refund. A refund nothing can be matched to returns False."""
        if not payment_id.strip():
            logger.error("Refund failed: no payment id given")
            return False
        await self._sleep(self.refund_latency_ms / 1000)
        logger.info(
            f"Payment refund processed: {reason or 'No reason provided'}",
            extra={"entity_id": payment_id},
        )
        return True
