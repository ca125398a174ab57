# ABOUTME: Shared async HTTP fetch client with bounded redirects and a total fetch deadline
# ABOUTME: Maps httpx transport failures onto the fetch error hierarchy

import asyncio
from urllib.parse import urljoin

import httpx

from poudre_flies.config import Config, get_config
from poudre_flies.core.models import RawPage
from poudre_flies.utils.logging import get_logger, log_api_call
from poudre_flies.utils.retry import (
    FetchTimeoutError,
    HttpError,
    NetworkError,
    RedirectLoopError,
    call_with_retry,
)


class FetchClient:
    """GET-only client used by every pipeline stage that touches the network.

    Redirects are followed manually so the hop count can be capped, and
    relative ``Location`` headers are resolved against the URL that issued them.
    """

    def __init__(
        self,
        config: Config | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the fetch client.

        Args:
            config: Settings for identity header, timeout, redirect cap and retries
            client: Pre-built httpx client (optional, mainly for tests)
        """
        self.config = config or get_config()
        self.max_redirects = self.config.max_redirects
        self.retry_attempts = self.config.retry_attempts
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent},
            timeout=httpx.Timeout(self.config.request_timeout),
            follow_redirects=False,
        )
        self.logger = get_logger(__name__)

    async def __aenter__(self) -> "FetchClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> RawPage:
        """Fetch ``url`` and return the final status and body, whatever the status.

        Raises:
            NetworkError: If the connection fails
            FetchTimeoutError: If the request times out
            RedirectLoopError: If more than ``max_redirects`` hops are needed
        """
        return await call_with_retry(lambda: self._fetch_once(url), max_attempts=self.retry_attempts)

    async def fetch_ok(self, url: str) -> RawPage:
        """Fetch ``url`` and require a 2xx status.

        Raises:
            HttpError: If the final response is not successful
        """
        page = await self.fetch(url)
        if not page.ok:
            raise HttpError(f"GET {page.url} returned {page.status_code}", url=page.url, status_code=page.status_code)
        return page

    @log_api_call("upstream")
    async def _fetch_once(self, url: str) -> RawPage:
        # request_timeout bounds the whole fetch, redirects and body included
        try:
            async with asyncio.timeout(self.config.request_timeout):
                return await self._follow(url)
        except FetchTimeoutError:
            raise
        except TimeoutError as e:
            raise FetchTimeoutError(
                f"Timed out fetching {url} after {self.config.request_timeout}s", url=url, cause=e
            ) from e

    async def _follow(self, url: str) -> RawPage:
        current = url
        hops = 0

        while True:
            response = await self._get(current)

            location = response.headers.get("Location")
            if response.is_redirect and location:
                if hops >= self.max_redirects:
                    raise RedirectLoopError(
                        f"Exceeded {self.max_redirects} redirects fetching {url}", url=url, hops=hops + 1
                    )
                hops += 1
                current = urljoin(current, location)
                self.logger.debug("Following redirect", url=url, location=current, hop=hops)
                continue

            self.logger.debug("Fetched page", url=current, status=response.status_code, redirects=hops)
            return RawPage(url=current, status_code=response.status_code, body=response.text)

    async def _get(self, url: str) -> httpx.Response:
        try:
            return await self.http_client.get(url, headers={"User-Agent": self.config.user_agent})
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f"Timed out fetching {url}: {e}", url=url, cause=e) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Network failure fetching {url}: {e}", url=url, cause=e) from e

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
