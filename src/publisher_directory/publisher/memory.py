"""In-memory collaborators for local runs and tests."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from publisher_directory.publisher.models import ServerPublisherInfo

logger = structlog.get_logger()


class InMemoryPublisherStore:
    """Keeps the latest ``ServerPublisherInfo`` per publisher key."""

    def __init__(self) -> None:
        self._records: dict[str, ServerPublisherInfo] = {}

    async def insert_server_publisher_info(self, info: ServerPublisherInfo) -> None:
        self._records[info.publisher_key] = info
        logger.debug("publisher_store.inserted", publisher_key=info.publisher_key)

    async def get_server_publisher_info(
        self, publisher_key: str
    ) -> ServerPublisherInfo | None:
        return self._records.get(publisher_key)

    def __len__(self) -> int:
        return len(self._records)


class StaticPublisherIndex:
    """Existence index over a fixed set of publisher keys."""

    def __init__(self, publisher_keys: Iterable[str] = ()) -> None:
        self._keys = set(publisher_keys)

    async def search(self, publisher_key: str) -> bool:
        return publisher_key in self._keys
