"""Publisher server response decoder.

A successful response body is laid out as::

    [u32 big-endian payload length][payload][padding]

The padding hides the size of the record being returned.  The payload is
a Brotli-compressed ``ChannelResponseList`` message; payloads that fail to
decompress are parsed as an uncompressed message instead.

Decoding yields one of three outcomes:

- a ``ServerPublisherInfo`` for the matching channel entry
- a synthesized NOT_VERIFIED record when the server has no entry for the
  key (404, or no matching entry in the payload); this is cacheable
- ``None`` when the response is malformed
"""

from __future__ import annotations

import struct
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

import brotli
import structlog
from google.protobuf.message import DecodeError

from publisher_directory.publisher.channel_response import (
    ChannelResponseList,
    WalletConnectedState,
)
from publisher_directory.publisher.errors import PaddingError, ParseError
from publisher_directory.publisher.models import (
    PublisherBanner,
    PublisherStatus,
    ServerPublisherInfo,
)

logger = structlog.get_logger()

_LENGTH_HEADER = struct.Struct("!I")
_SOCIAL_NETWORKS = ("youtube", "twitter", "twitch")

DEFAULT_IMAGE_URL_PREFIX = "chrome://rewards-image/"
DEFAULT_BUFFER_SIZE = 32 * 1024


def remove_padding(body: bytes) -> bytes:
    """Strip the length header and trailing padding from *body*."""
    if len(body) < _LENGTH_HEADER.size:
        msg = f"Body of {len(body)} bytes has no length header"
        raise PaddingError(msg)
    (data_length,) = _LENGTH_HEADER.unpack_from(body, 0)
    payload = body[_LENGTH_HEADER.size :]
    if len(payload) < data_length:
        msg = f"Declared payload length {data_length} exceeds {len(payload)} bytes"
        raise PaddingError(msg)
    return payload[:data_length]


def decompress_message(
    payload: bytes, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> bytes | None:
    """Brotli-decode *payload* in *buffer_size* chunks.

    Returns ``None`` when the stream is invalid or incomplete.
    """
    decompressor = brotli.Decompressor()
    output = bytearray()
    try:
        for start in range(0, len(payload), buffer_size):
            output += decompressor.process(payload[start : start + buffer_size])
    except brotli.error:
        return None
    if not decompressor.is_finished():
        return None
    return bytes(output)


def parse_channel_responses(data: bytes) -> Any:
    """Parse *data* as a ``ChannelResponseList`` message."""
    message = ChannelResponseList()
    try:
        message.ParseFromString(data)
    except DecodeError as exc:
        msg = f"Invalid channel response list: {exc}"
        raise ParseError(msg) from exc
    return message


def status_from_state(state: int) -> PublisherStatus:
    """Map a wallet connection state onto a publisher status."""
    if state == WalletConnectedState.UPHOLD_ACCOUNT_KYC:
        return PublisherStatus.VERIFIED
    if state == WalletConnectedState.UPHOLD_ACCOUNT_NO_KYC:
        return PublisherStatus.CONNECTED
    return PublisherStatus.NOT_VERIFIED


class PublisherResponseDecoder:
    """Turns publisher server responses into ``ServerPublisherInfo`` records."""

    def __init__(
        self,
        image_url_prefix: str = DEFAULT_IMAGE_URL_PREFIX,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._image_url_prefix = image_url_prefix
        self._buffer_size = buffer_size
        self._clock = clock

    def decode(
        self, status_code: int, body: bytes, expected_key: str
    ) -> ServerPublisherInfo | None:
        """Decode a response for *expected_key*; ``None`` means malformed."""
        if status_code == HTTPStatus.NOT_FOUND:
            return self.not_found(expected_key)

        if status_code != HTTPStatus.OK or not body:
            logger.warning(
                "publisher_decoder.invalid_response",
                status_code=status_code,
                body_size=len(body),
            )
            return None

        try:
            payload = remove_padding(body)
        except PaddingError as exc:
            logger.warning("publisher_decoder.invalid_padding", error=str(exc))
            return None

        message_bytes = decompress_message(payload, self._buffer_size)
        if message_bytes is None:
            logger.debug(
                "publisher_decoder.decompress_fallback",
                payload_size=len(payload),
            )
            message_bytes = payload

        try:
            message = parse_channel_responses(message_bytes)
        except ParseError as exc:
            logger.warning("publisher_decoder.parse_failed", error=str(exc))
            return None

        info = self._info_from_message(message, expected_key)
        if info is None:
            return self.not_found(expected_key)
        return info

    def not_found(self, publisher_key: str) -> ServerPublisherInfo:
        """Synthesize the cacheable record for a key the server does not know.

        A miss is usually a false positive in the prefix index.  Caching it
        stops repeated lookups for the same publisher.
        """
        logger.info("publisher_decoder.no_entry", publisher_key=publisher_key)
        return ServerPublisherInfo(
            publisher_key=publisher_key,
            status=PublisherStatus.NOT_VERIFIED,
            updated_at=self._now(),
        )

    def _info_from_message(
        self, message: Any, expected_key: str
    ) -> ServerPublisherInfo | None:
        # First matching entry in payload order wins.
        for entry in message.channel_responses:
            if entry.channel_identifier != expected_key:
                continue
            banner = None
            if entry.HasField("site_banner_details"):
                banner = self._banner_from_message(entry.site_banner_details)
            return ServerPublisherInfo(
                publisher_key=entry.channel_identifier,
                status=status_from_state(entry.wallet_connected_state),
                address=entry.wallet_address,
                updated_at=self._now(),
                banner=banner,
            )
        return None

    def _banner_from_message(self, details: Any) -> PublisherBanner:
        links: tuple[tuple[str, str], ...] = ()
        if details.HasField("social_links"):
            links = tuple(
                (network, getattr(details.social_links, network))
                for network in _SOCIAL_NETWORKS
                if getattr(details.social_links, network)
            )
        return PublisherBanner(
            title=details.title,
            description=details.description,
            background=self._image_url(details.background_url),
            logo=self._image_url(details.logo_url),
            amounts=tuple(details.donation_amounts),
            links=links,
        )

    def _image_url(self, reference: str) -> str | None:
        if not reference:
            return None
        return self._image_url_prefix + reference

    def _now(self) -> int:
        return int(self._clock())
