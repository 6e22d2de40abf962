"""Batch refresh of previously known publisher statuses.

Entries are visited one at a time in key order.  An expired entry is
refreshed only when the publisher is present in the existence index;
refreshes never overlap.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import StrEnum

import structlog

from publisher_directory.publisher.fetcher import ServerPublisherFetcher
from publisher_directory.publisher.freshness import FreshnessPolicy
from publisher_directory.publisher.models import (
    PendingContributionInfo,
    PublisherInfo,
    PublisherStatus,
    RefreshEntry,
)
from publisher_directory.publisher.ports import PublisherIndex, PublisherRefresher

logger = structlog.get_logger()

PublisherStatusMap = dict[str, RefreshEntry]


class WalkState(StrEnum):
    SCANNING = "scanning"
    CHECKING = "checking"
    REFRESHING = "refreshing"
    DONE = "done"


@dataclass
class _StatusWalk:
    """Cursor over a status map plus the step currently pending on it."""

    entries: PublisherStatusMap
    cursor: Iterator[str]
    current: str | None = None
    state: WalkState = WalkState.SCANNING
    refreshed: int = 0
    skipped: int = 0


class PublisherStatusRefresher:
    """Brings a collection of publisher statuses up to date."""

    def __init__(
        self,
        freshness: FreshnessPolicy,
        index: PublisherIndex,
        refresher: PublisherRefresher,
    ) -> None:
        self._freshness = freshness
        self._index = index
        self._refresher = refresher

    async def refresh_all(self, status_map: PublisherStatusMap) -> PublisherStatusMap:
        """Refresh every expired entry of *status_map* and return the map.

        The map is updated in place.  All keys remain present; entries that
        were fresh or missing from the index keep their status.
        """
        entries = dict(sorted(status_map.items()))
        walk = _StatusWalk(entries=entries, cursor=iter(list(entries)))
        while walk.state is not WalkState.DONE:
            await self._step(walk)

        status_map.clear()
        status_map.update(walk.entries)
        logger.info(
            "publisher_status.refreshed",
            entries=len(status_map),
            refreshed=walk.refreshed,
            skipped=walk.skipped,
        )
        return status_map

    async def _step(self, walk: _StatusWalk) -> None:
        if walk.state is WalkState.SCANNING:
            walk.current = next(
                (key for key in walk.cursor if self._is_expired(walk, key)), None
            )
            walk.state = WalkState.DONE if walk.current is None else WalkState.CHECKING

        elif walk.state is WalkState.CHECKING:
            assert walk.current is not None
            if await self._index.search(walk.current):
                walk.state = WalkState.REFRESHING
            else:
                logger.debug(
                    "publisher_status.not_indexed", publisher_key=walk.current
                )
                walk.skipped += 1
                walk.state = WalkState.SCANNING

        elif walk.state is WalkState.REFRESHING:
            assert walk.current is not None
            status = await self._refresher.refresh_publisher(walk.current)
            walk.entries[walk.current] = replace(
                walk.entries[walk.current], status=status
            )
            walk.refreshed += 1
            walk.state = WalkState.SCANNING

    def _is_expired(self, walk: _StatusWalk, key: str) -> bool:
        return self._freshness.is_expired(walk.entries[key].updated_at)

    async def refresh_publisher_list(
        self,
        status_map: PublisherStatusMap,
        publishers: list[PublisherInfo],
    ) -> list[PublisherInfo]:
        """Refresh *status_map* and copy the results onto *publishers* by id."""
        result = await self.refresh_all(status_map)
        for info in publishers:
            entry = result.get(info.id)
            if entry is not None:
                info.status = entry.status
        return publishers

    async def refresh_pending_contributions(
        self,
        status_map: PublisherStatusMap,
        pending: list[PendingContributionInfo],
    ) -> list[PendingContributionInfo]:
        """Refresh *status_map* and copy the results onto *pending* by key."""
        result = await self.refresh_all(status_map)
        for info in pending:
            entry = result.get(info.publisher_key)
            if entry is not None:
                info.status = entry.status
        return pending


class FetchingPublisherRefresher:
    """``PublisherRefresher`` that resolves a status through the fetcher."""

    def __init__(self, fetcher: ServerPublisherFetcher) -> None:
        self._fetcher = fetcher

    async def refresh_publisher(self, publisher_key: str) -> PublisherStatus:
        info = await self._fetcher.fetch(publisher_key)
        if info is None:
            return PublisherStatus.NOT_VERIFIED
        return info.status
