"""Schema Base — camelCase serialization shared by every entity and contract model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def require_iso_date(value: str) -> str:
    """Accept ISO dates and timestamps unchanged; reject anything else."""
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"'{value}' is not an ISO date or timestamp")
    return value


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input, dumps camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """JSON-safe dict in the persisted layout (camelCase, no nulls)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
