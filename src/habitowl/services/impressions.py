"""Impression tracking - a bounded, persisted log of shown ads."""

import logging
import time
from collections import Counter
from typing import Callable

from ..models.ads import ImpressionRecord, ImpressionStats
from ..models.core import ImpressionType, Platform
from ..storage.base import StorageBackend

logger = logging.getLogger(__name__)

MAX_STORED_IMPRESSIONS = 100
RECENT_IMPRESSIONS = 10


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class ImpressionTracker:
    """Appends impressions to the preference store and summarises them.

    Storage failures are logged and swallowed: a lost impression never
    interrupts ad serving.
    """

    def __init__(
        self,
        storage: StorageBackend,
        platform: Platform,
        clock_ms: Callable[[], int] = _epoch_millis,
        max_records: int = MAX_STORED_IMPRESSIONS,
    ) -> None:
        self._storage = storage
        self._platform = platform
        self._clock_ms = clock_ms
        self._max_records = max_records

    async def track(self, impression_type: ImpressionType, context: str = "general") -> None:
        """Append one impression, dropping the oldest beyond the cap."""
        try:
            impression_type = ImpressionType(impression_type)
        except ValueError:
            logger.error("Unknown impression type: %r", impression_type)
            return

        record = ImpressionRecord(
            type=impression_type,
            context=context,
            timestamp=self._clock_ms(),
            platform=self._platform,
        )
        try:
            impressions = await self._storage.get_ad_impressions()
            impressions.append(record.model_dump(mode="json"))
            await self._storage.set_ad_impressions(impressions[-self._max_records:])
        except Exception as e:
            logger.error("Error tracking %s impression: %s", impression_type.value, e)
            return

        logger.debug("Tracked %s impression (%s)", impression_type.value, context)

    async def get_stats(self) -> ImpressionStats:
        """Counts by type plus the most recent records."""
        try:
            raw = await self._storage.get_ad_impressions()
            records = [ImpressionRecord.model_validate(item) for item in raw]
        except Exception as e:
            logger.error("Error reading impression stats: %s", e)
            return ImpressionStats()

        by_type = Counter(record.type.value for record in records)
        return ImpressionStats(
            total=len(records),
            by_type=dict(by_type),
            recent=records[-RECENT_IMPRESSIONS:],
        )
