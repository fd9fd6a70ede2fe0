"""Expense Service — turns an ExpenseDraft into a stored Expense, uploading its receipt.

Invariants:
    - A failed receipt upload never blocks the expense: it is kept with its
      local URI only and the outcome carries a warning
    - Expense ids are generated here, before the upload, so the receipt file name
      matches the expense
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from jobbook.core.domain_types import new_id
from jobbook.infrastructure.receipt_storage import ReceiptStorage
from jobbook.schemas.job import Expense, ExpenseDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseOutcome:
    expense: Expense
    warning: str | None = None


class ExpenseService:

    def __init__(self, receipts: ReceiptStorage):
        self.receipts = receipts

    async def build_expense(self, draft: ExpenseDraft) -> ExpenseOutcome:
        expense_id = new_id("expense")
        remote_url = None
        warning = None

        if draft.receipt_image_local_uri:
            upload = await self.receipts.upload(
                draft.receipt_image_local_uri, expense_id,
            )
            if upload.success:
                remote_url = upload.url
            else:
                warning = (
                    "Failed to upload receipt image, but expense will be saved. "
                    f"({upload.error})"
                )

        expense = Expense(
            id=expense_id,
            description=draft.description.strip(),
            amount=draft.amount,
            is_reimbursable=draft.is_reimbursable,
            date=datetime.now(timezone.utc).isoformat(),
            receipt_image_url=remote_url,
            receipt_image_local_uri=draft.receipt_image_local_uri,
        )
        logger.info(
            "Built expense",
            extra={"entity_id": expense_id},
        )
        return ExpenseOutcome(expense, warning)
