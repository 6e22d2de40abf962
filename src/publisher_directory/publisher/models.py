"""Publisher records exchanged between the fetcher, the walker and callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class PublisherStatus(StrEnum):
    """Verification status of a publisher."""

    NOT_VERIFIED = "not_verified"
    CONNECTED = "connected"
    VERIFIED = "verified"


@dataclass(frozen=True)
class PublisherBanner:
    """Banner details shown for a publisher.

    ``background`` and ``logo`` already carry the internal image prefix.
    ``links`` holds (network, handle) pairs in youtube, twitter, twitch
    order, only for networks with a non-empty handle.
    """

    title: str = ""
    description: str = ""
    background: str | None = None
    logo: str | None = None
    amounts: tuple[float, ...] = ()
    links: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class ServerPublisherInfo:
    """Publisher record as observed from the publisher server.

    ``updated_at`` is the epoch second at which the record was observed,
    not a server-supplied time.
    """

    publisher_key: str
    status: PublisherStatus = PublisherStatus.NOT_VERIFIED
    address: str = ""
    updated_at: int = 0
    banner: PublisherBanner | None = None


@dataclass(slots=True)
class RefreshEntry:
    """Last known status of a publisher, as fed to the batch refresher."""

    publisher_key: str
    status: PublisherStatus
    updated_at: int


@dataclass(slots=True)
class PublisherInfo:
    """A publisher row as listed by the content layer."""

    id: str
    name: str = ""
    url: str = ""
    status: PublisherStatus = PublisherStatus.NOT_VERIFIED


@dataclass(slots=True)
class PendingContributionInfo:
    """A contribution queued for a publisher that is not yet payable."""

    publisher_key: str
    amount: float = 0.0
    added_date: int = 0
    status: PublisherStatus = PublisherStatus.NOT_VERIFIED
