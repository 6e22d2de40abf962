"""Coalescing fetcher for server publisher records.

Concurrent lookups for the same publisher key share a single request.
Every caller waiting on a key gets its own copy of the decoded record
(or ``None`` when the response was unusable) once that request finishes.
"""

from __future__ import annotations

import asyncio
import copy

import structlog

from publisher_directory.config.models import DirectoryConfig
from publisher_directory.publisher.decoder import PublisherResponseDecoder
from publisher_directory.publisher.endpoints import (
    HashPrefixFn,
    hash_prefix_hex,
    publisher_info_url,
)
from publisher_directory.publisher.errors import TransportError
from publisher_directory.publisher.models import ServerPublisherInfo
from publisher_directory.publisher.ports import PublisherStore, Transport

logger = structlog.get_logger()

_Waiter = asyncio.Future  # resolves to ServerPublisherInfo | None


class ServerPublisherFetcher:
    """Fetches, decodes and stores server publisher records.

    At most one request per publisher key is outstanding.  The waiting
    list for a key is removed in one step right before results are
    delivered, so a later ``fetch`` for that key starts a new request.
    """

    def __init__(
        self,
        transport: Transport,
        store: PublisherStore,
        config: DirectoryConfig | None = None,
        *,
        decoder: PublisherResponseDecoder | None = None,
        hash_prefix: HashPrefixFn = hash_prefix_hex,
    ) -> None:
        self._config = config or DirectoryConfig()
        self._transport = transport
        self._store = store
        self._decoder = decoder or PublisherResponseDecoder(
            image_url_prefix=self._config.image_url_prefix,
            buffer_size=self._config.decompress_buffer_size,
        )
        self._hash_prefix = hash_prefix
        self._waiters: dict[str, list[_Waiter]] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def in_flight(self, publisher_key: str) -> bool:
        return publisher_key in self._waiters

    async def fetch(self, publisher_key: str) -> ServerPublisherInfo | None:
        """Return the current server record for *publisher_key*."""
        waiter: _Waiter = asyncio.get_running_loop().create_future()
        waiters = self._waiters.get(publisher_key)
        if waiters is not None:
            waiters.append(waiter)
            logger.debug("publisher_fetcher.in_flight", publisher_key=publisher_key)
            return await waiter

        self._waiters[publisher_key] = [waiter]
        logger.debug("publisher_fetcher.fetching", publisher_key=publisher_key)
        task = asyncio.create_task(self._run(publisher_key))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await waiter

    def request_url(self, publisher_key: str) -> str:
        """URL for *publisher_key*; identical in length for every key."""
        prefix = self._hash_prefix(publisher_key, self._config.query_prefix_bytes)
        return publisher_info_url(self._config.server_url, prefix)

    async def _run(self, publisher_key: str) -> None:
        try:
            info = await self._fetch_and_store(publisher_key)
        except asyncio.CancelledError:
            logger.warning("publisher_fetcher.cancelled", publisher_key=publisher_key)
            for waiter in self._take_waiters(publisher_key):
                waiter.cancel()
            raise
        except Exception as exc:
            logger.exception(
                "publisher_fetcher.failed", publisher_key=publisher_key
            )
            self._fail_waiters(publisher_key, exc)
            return
        except BaseException as exc:
            self._fail_waiters(publisher_key, exc)
            raise
        self._deliver(publisher_key, info)

    async def _fetch_and_store(self, publisher_key: str) -> ServerPublisherInfo | None:
        try:
            response = await self._transport.load_url(self.request_url(publisher_key))
        except TransportError as exc:
            logger.warning(
                "publisher_fetcher.transport_error",
                publisher_key=publisher_key,
                error=str(exc),
            )
            return None

        info = self._decoder.decode(
            response.status_code, response.body, publisher_key
        )
        if info is None:
            return None

        try:
            await self._store.insert_server_publisher_info(info)
        except Exception:
            logger.exception(
                "publisher_fetcher.store_failed", publisher_key=publisher_key
            )
        return info

    def _take_waiters(self, publisher_key: str) -> list[_Waiter]:
        return self._waiters.pop(publisher_key, [])

    def _deliver(self, publisher_key: str, info: ServerPublisherInfo | None) -> None:
        waiters = self._take_waiters(publisher_key)
        logger.debug(
            "publisher_fetcher.delivered",
            publisher_key=publisher_key,
            waiters=len(waiters),
            found=info is not None,
        )
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(copy.deepcopy(info))

    def _fail_waiters(self, publisher_key: str, exc: BaseException) -> None:
        for waiter in self._take_waiters(publisher_key):
            if not waiter.done():
                waiter.set_exception(exc)

    async def close(self) -> None:
        """Wait for outstanding requests to finish delivering."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
