"""httpx transport for publisher server requests."""

from __future__ import annotations

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from publisher_directory.config.models import TransportConfig
from publisher_directory.publisher.errors import TransportError
from publisher_directory.publisher.ports import UrlResponse

logger = structlog.get_logger()


class HttpxTransport:
    """Plain GET transport.

    Sends no headers beyond httpx's fixed defaults, so requests carry
    nothing that varies with the publisher being looked up.  Every HTTP
    status is returned to the caller; only connection-level failures are
    retried.
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout_seconds),
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def load_url(self, url: str) -> UrlResponse:
        retry_cfg = self._config.retry
        retrying = AsyncRetrying(
            stop=stop_after_attempt(retry_cfg.max_attempts),
            wait=wait_exponential_jitter(
                initial=retry_cfg.initial_wait_seconds,
                max=retry_cfg.max_wait_seconds,
                exp_base=retry_cfg.multiplier,
                jitter=retry_cfg.initial_wait_seconds if retry_cfg.jitter else 0,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.get(url)
        except RetryError as exc:
            cause = exc.last_attempt.exception()
            msg = f"GET {url} failed after {retry_cfg.max_attempts} attempts: {cause}"
            raise TransportError(msg) from cause
        except httpx.HTTPError as exc:
            msg = f"GET {url} failed: {exc}"
            raise TransportError(msg) from exc

        logger.debug(
            "publisher_transport.response",
            url=url,
            status_code=response.status_code,
            body_size=len(response.content),
        )
        return UrlResponse(status_code=response.status_code, body=response.content)
