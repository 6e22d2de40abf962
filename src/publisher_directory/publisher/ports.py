"""Collaborator protocols consumed by the fetcher and the batch refresher.

The surrounding system supplies the transport, storage, options and the
hashed-prefix existence index.  Every I/O capability is a coroutine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from publisher_directory.publisher.models import PublisherStatus, ServerPublisherInfo


@dataclass(frozen=True, slots=True)
class UrlResponse:
    """Status code and raw body of a completed GET."""

    status_code: int
    body: bytes = b""


@runtime_checkable
class Transport(Protocol):
    """Issues constant-shape GET requests to the publisher server."""

    async def load_url(self, url: str) -> UrlResponse:
        """Fetch *url*; raise ``TransportError`` if no response was obtained."""
        ...


@runtime_checkable
class PublisherStore(Protocol):
    """Persists fetched publisher records."""

    async def insert_server_publisher_info(self, info: ServerPublisherInfo) -> None:
        """Insert or replace the record for ``info.publisher_key``."""
        ...


@runtime_checkable
class OptionStore(Protocol):
    """Integer option lookup."""

    def get_option(self, key: str) -> int:
        ...


@runtime_checkable
class PublisherIndex(Protocol):
    """Existence check against the hashed-prefix publisher index."""

    async def search(self, publisher_key: str) -> bool:
        ...


@runtime_checkable
class PublisherRefresher(Protocol):
    """Refreshes the status of a single publisher."""

    async def refresh_publisher(self, publisher_key: str) -> PublisherStatus:
        ...
