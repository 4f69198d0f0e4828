"""HTML fetcher for the tournament site.

The site serves server-rendered HTML with no API and no bot challenge, so a
plain aiohttp session is enough. One ``fetch()`` is exactly one GET: there
is no retry, no cache and no partial delivery. Any failure surfaces as
TransportError (or ParseError for an undecodable body) with the URL, and
the status code when there is one, attached.
"""

import asyncio
import logging

import aiohttp

from padelcat.config import SyncConfig
from padelcat.exceptions import ParseError, TransportError
from padelcat.user_agents import UserAgentRotator

logger = logging.getLogger(__name__)


class HtmlFetcher:
    """Fetches raw page markup over a shared aiohttp session.

    Usage:
        async with HtmlFetcher(config) as fetcher:
            html = await fetcher.fetch(config.roster_url)

    A pre-built ``session`` may be injected (tests, or a caller that owns
    its own session). An injected session is not closed by ``close()``.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        if config is None:
            config = SyncConfig()

        self._config = config
        self._session = session
        self._owns_session = session is None

        self._request_count = 0
        self._success_count = 0
        self._failure_count = 0

    async def start(self) -> None:
        """Open the HTTP session. No-op when a session was injected."""
        if self._session is not None:
            return
        rotator = UserAgentRotator(self._config.user_agent_browser)
        self._session = aiohttp.ClientSession(
            headers=rotator.get_headers(),
            timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
        )
        self._owns_session = True
        logger.debug(
            "HTTP session opened (%s UA, timeout %.1fs)",
            rotator.browser_family,
            self._config.request_timeout,
        )

    async def close(self) -> None:
        """Close the HTTP session if this fetcher opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "HtmlFetcher":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @property
    def stats(self) -> dict:
        """Return request counters for this fetcher."""
        return {
            "requests": self._request_count,
            "successes": self._success_count,
            "failures": self._failure_count,
        }

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return the response body as text.

        Raises:
            TransportError: On connection failure, timeout, or a status
                outside 2xx.
            ParseError: If the body does not decode in its charset.
            RuntimeError: If called before ``start()``.
        """
        if self._session is None:
            raise RuntimeError("HtmlFetcher not started. Call start() first.")

        self._request_count += 1
        logger.debug("GET %s", url)
        try:
            async with self._session.get(url) as response:
                status = response.status
                if not 200 <= status < 300:
                    self._failure_count += 1
                    raise TransportError(
                        f"HTTP {status} for {url}",
                        url=url,
                        status_code=status,
                    )
                try:
                    html = await response.text()
                except UnicodeDecodeError as exc:
                    self._failure_count += 1
                    raise ParseError(
                        f"Body of {url} does not decode as {exc.encoding}: {exc}",
                        url=url,
                        status_code=status,
                    ) from exc
        except aiohttp.ClientError as exc:
            self._failure_count += 1
            logger.error("Fetch failed for %s: %s", url, exc)
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc
        except asyncio.TimeoutError as exc:
            self._failure_count += 1
            logger.error("Fetch timed out for %s", url)
            raise TransportError(f"Request to {url} timed out", url=url) from exc

        self._success_count += 1
        logger.debug("Fetched %s (%d chars)", url, len(html))
        return html
