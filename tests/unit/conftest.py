"""Shared fixtures for publisher directory unit tests."""

from __future__ import annotations

import struct
from collections.abc import Callable
from typing import Any

import brotli
import pytest

from publisher_directory.config.models import (
    PUBLISHER_LIST_REFRESH_INTERVAL,
    DirectoryConfig,
)
from publisher_directory.config.options import ConfigOptionStore
from publisher_directory.publisher.channel_response import ChannelResponseList

NOW = 1_700_000_000
TTL = 3600


class FakeClock:
    """Settable replacement for ``time.time``."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def build_message(entries: list[dict[str, Any]]) -> bytes:
    """Serialize a ChannelResponseList from plain dicts."""
    message = ChannelResponseList()
    for item in entries:
        entry = message.channel_responses.add(
            channel_identifier=item["key"],
            wallet_connected_state=item.get("state", 0),
            wallet_address=item.get("address", ""),
        )
        banner = item.get("banner")
        if banner is not None:
            details = entry.site_banner_details
            details.title = banner.get("title", "")
            details.description = banner.get("description", "")
            details.background_url = banner.get("background", "")
            details.logo_url = banner.get("logo", "")
            details.donation_amounts.extend(banner.get("amounts", []))
            links = banner.get("links")
            if links is not None:
                details.social_links.SetInParent()
                for network, handle in links.items():
                    setattr(details.social_links, network, handle)
    return message.SerializeToString()


def pad(payload: bytes, padding: bytes = b"\x00" * 64) -> bytes:
    """Wrap *payload* in the length-prefixed padding envelope."""
    return struct.pack("!I", len(payload)) + payload + padding


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> DirectoryConfig:
    return DirectoryConfig(
        publisher_server_url="http://publishers.test",
        options={PUBLISHER_LIST_REFRESH_INTERVAL: TTL},
    )


@pytest.fixture
def options(config: DirectoryConfig) -> ConfigOptionStore:
    return ConfigOptionStore(config)


@pytest.fixture
def encode_body() -> Callable[..., bytes]:
    def _encode(
        entries: list[dict[str, Any]],
        *,
        compress: bool = True,
        padding: bytes = b"\x00" * 64,
    ) -> bytes:
        message = build_message(entries)
        payload = brotli.compress(message) if compress else message
        return pad(payload, padding)

    return _encode
