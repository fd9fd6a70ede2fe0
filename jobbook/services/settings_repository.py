"""Settings Repository — user preferences stored as one JSON object."""

import logging

from pydantic import ValidationError

from jobbook.core.domain_types import CollectionKey
from jobbook.core.repository_protocols import KeyValueStore
from jobbook.infrastructure.durable_store import JsonDocument
from jobbook.schemas.settings import AppSettings

logger = logging.getLogger(__name__)


class SettingsRepository:

    def __init__(self, document: JsonDocument):
        self.document = document

    @classmethod
    def for_store(cls, store: KeyValueStore) -> "SettingsRepository":
        return cls(JsonDocument(store, CollectionKey.SETTINGS.value))

    async def load(self) -> AppSettings:
        raw = await self.document.read_object()
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Invalid settings payload, using defaults: {e}",
                extra={"collection": self.document.key},
            )
            return AppSettings()

    async def save(self, settings: AppSettings) -> None:
        await self.document.write_object(settings.to_json_dict())

    async def reset(self) -> AppSettings:
        defaults = AppSettings()
        await self.save(defaults)
        return defaults
