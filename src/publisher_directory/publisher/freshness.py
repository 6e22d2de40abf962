"""Cache lifetime policy for fetched publisher records."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from publisher_directory.config.models import PUBLISHER_LIST_REFRESH_INTERVAL
from publisher_directory.publisher.models import ServerPublisherInfo
from publisher_directory.publisher.ports import OptionStore

logger = structlog.get_logger()


class FreshnessPolicy:
    """Decides whether a publisher record must be fetched again.

    The TTL is the prefix list refresh interval option, read on every
    check so that option changes apply immediately.
    """

    def __init__(
        self,
        options: OptionStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._options = options
        self._clock = clock

    def ttl_seconds(self) -> int:
        return self._options.get_option(PUBLISHER_LIST_REFRESH_INTERVAL)

    def is_expired(self, record: ServerPublisherInfo | int | float | None) -> bool:
        """Return True if *record* (or an ``updated_at`` timestamp) is stale.

        A missing record is always expired.
        """
        if record is None:
            return True
        updated_at = (
            record.updated_at if isinstance(record, ServerPublisherInfo) else record
        )
        age = int(self._clock() - updated_at)
        if age < 0:
            # Corrupted data or a bad clock.  The comparison below still
            # applies, so the record reads as fresh.
            logger.warning(
                "publisher_freshness.future_timestamp",
                updated_at=updated_at,
                age_seconds=age,
            )
        return age > self.ttl_seconds()
