"""Published spreadsheet (CSV export) data source implementation."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

import httpx

from wagerboard.exceptions import FetchErrorKind, FetchFailure
from wagerboard.models import FetchState
from .base import SheetSource

logger = logging.getLogger(__name__)

# Source constants
EXPECTED_CONTENT_TYPE = "text/csv"
MIN_REQUEST_INTERVAL_MS = 5000
REQUEST_TIMEOUT = 30.0


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class PublishedSheetSource(SheetSource):
    """
    Data source reading a published spreadsheet export.

    Behavior:
    - Requests are spaced at least `min_request_interval_ms` apart
    - The direct export is tried first; a transport error, an unsuccessful
      status or a non-CSV content type falls back to the proxied URL
    - Only the final response decides success; failures are raised as
      FetchFailure with a kind discriminant
    """

    def __init__(
        self,
        sheet_url: str,
        proxy_url: str,
        state: FetchState,
        min_request_interval_ms: int = MIN_REQUEST_INTERVAL_MS,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = _monotonic_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the spreadsheet data source.

        Args:
            sheet_url: Direct CSV export URL
            proxy_url: Proxied URL of the same export
            state: Shared fetch state of the owning widget
            min_request_interval_ms: Minimum spacing between requests
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
            clock: Millisecond clock used for request spacing
            sleep: Coroutine used to wait out the spacing, in seconds
        """
        self.sheet_url = sheet_url
        self.proxy_url = proxy_url
        self.state = state
        self.min_request_interval_ms = min_request_interval_ms
        self.timeout = timeout
        self._transport = transport
        self._clock = clock
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def _respect_spacing(self) -> None:
        """Wait until the minimum spacing since the last request has elapsed."""
        last = self.state.last_request_at_ms
        if last is None:
            return
        elapsed = self._clock() - last
        if elapsed < self.min_request_interval_ms:
            wait_ms = self.min_request_interval_ms - elapsed
            logger.debug(f"Delaying request by {wait_ms:.0f}ms to respect spacing")
            await self._sleep(wait_ms / 1000)

    @staticmethod
    def _is_usable(response: httpx.Response) -> bool:
        content_type = response.headers.get("content-type", "")
        return response.is_success and EXPECTED_CONTENT_TYPE in content_type

    async def _fetch_primary(self) -> Optional[httpx.Response]:
        """Fetch the direct export, returning None when it should be skipped."""
        client = await self._get_client()
        try:
            response = await client.get(self.sheet_url)
        except httpx.TransportError as e:
            logger.info(f"Direct fetch failed, trying with proxy... ({e!r})")
            return None

        if not self._is_usable(response):
            logger.info(
                f"Direct fetch unusable (status {response.status_code}, "
                f"content-type {response.headers.get('content-type', 'n/a')!r}), "
                f"trying with proxy..."
            )
            return None
        return response

    async def _fetch_proxy(self) -> httpx.Response:
        """Fetch the proxied export, converting transport errors to FetchFailure."""
        client = await self._get_client()
        try:
            return await client.get(self.proxy_url)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            logger.error(f"Proxy fetch could not connect: {e!r}")
            raise FetchFailure(
                str(e) or "Failed to fetch",
                kind=FetchErrorKind.NETWORK,
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Proxy fetch transport error: {e!r}")
            raise FetchFailure(
                str(e) or "Connection error",
                kind=FetchErrorKind.CONNECTION,
            ) from e

    async def fetch_text(self) -> str:
        """
        Retrieve the export text.

        The request timestamp is taken before the request goes out, so a
        failed attempt still counts toward the spacing of the next one.
        """
        await self._respect_spacing()
        self.state.last_request_at_ms = self._clock()

        response = await self._fetch_primary()
        if response is None:
            response = await self._fetch_proxy()

        if not response.is_success:
            logger.error(
                f"Export request failed: {response.status_code} {response.reason_phrase}"
            )
            raise FetchFailure.from_status(response.status_code, response.reason_phrase)

        self.state.last_request_at_ms = self._clock()
        return response.content.decode("utf-8", errors="replace")

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
