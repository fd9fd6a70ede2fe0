"""Receipt Storage — simulated cloud bucket for expense receipt images.

Invariants:
    - upload() never raises: failures come back as UploadResult(success=False)
    - A missing local file is an upload failure, not an exception for the caller

Design Decisions:
    - Latency and base URL come from Settings; sleep is injectable for tests
    - UploadFailureError is raised internally and converted at this boundary
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Awaitable, Callable

from jobbook.core.errors import UploadFailureError
from jobbook.schemas.base import CamelModel

logger = logging.getLogger(__name__)


class UploadResult(CamelModel):
    success: bool
    url: str | None = None
    error: str | None = None


def _local_path(local_uri: str) -> Path:
    return Path(local_uri.removeprefix("file://"))


class ReceiptStorage:
    """Uploads receipt images and hands back their remote URL."""

    def __init__(
        self,
        base_url: str,
        latency_ms: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.latency_ms = latency_ms
        self._sleep = sleep

    async def upload(self, local_uri: str, receipt_id: str) -> UploadResult:
        try:
            if not _local_path(local_uri).exists():
                raise UploadFailureError("Local file does not exist")
            file_name = f"receipt_{receipt_id}_{int(time.time() * 1000)}.jpg"
            await self._sleep(self.latency_ms / 1000)
            url = f"{self.base_url}/receipts/{file_name}"
            logger.info(
                "Receipt image uploaded", extra={"entity_id": receipt_id},
            )
            return UploadResult(success=True, url=url)
        except UploadFailureError as e:
            logger.warning(
                f"Receipt upload failed: {e.message}",
                extra={"entity_id": receipt_id, "error_code": e.code},
            )
            return UploadResult(success=False, error=e.message)
        except OSError as e:
            logger.error(
                f"Receipt upload I/O error: {e}", extra={"entity_id": receipt_id},
            )
            return UploadResult(success=False, error=str(e))

    async def delete(self, url: str) -> bool:
        await self._sleep(self.latency_ms / 2000)
        logger.info(f"Receipt image deleted: {url}")
        return True
