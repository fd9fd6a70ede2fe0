"""Client Schemas — the business's customers.

Invariants:
    - created_date is set once at creation and never changed by updates
"""

from datetime import datetime, timezone

from pydantic import Field

from jobbook.core.domain_types import new_id
from jobbook.schemas.base import CamelModel


class Client(CamelModel):
    id: str = Field(default_factory=lambda: new_id("client"))
    full_name: str = Field(min_length=1)
    address: str = ""
    phone_number: str = ""
    email_address: str = ""
    created_date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
