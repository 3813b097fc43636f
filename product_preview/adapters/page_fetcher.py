"""
Page Fetcher adapter for the product preview engine.
Retrieves raw HTML for a product URL with a browser-like identity.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from product_preview.config import config
from product_preview.utils.errors import FetchFailedError
from product_preview.utils.logger import LayerLogger


@dataclass
class FetchedPage:
    """HTML of a fetched page and the URL it was served from."""
    html: str
    final_url: str
    status_code: int


class PageFetcher:
    """
    Single-request HTML fetcher.

    Follows a bounded number of redirects, accepts any status in [200, 400)
    and reports every failure as FetchFailedError. No retries, no shared
    client between calls.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        headers: Optional[dict] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT
        self.max_redirects = max_redirects if max_redirects is not None else config.FETCH_MAX_REDIRECTS
        self.headers = headers or config.fetch_headers()
        self.transport = transport
        self.logger = LayerLogger("page_fetcher")

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page.

        Args:
            url: Absolute http/https URL, already vetted by the caller

        Returns:
            FetchedPage with the post-redirect URL

        Raises:
            FetchFailedError: on any transport error or unacceptable status
        """
        self.logger.log_action("fetch_html", "started", url=url)

        try:
            # httpx applies the timeout per phase; this bounds the whole request
            response = await asyncio.wait_for(self._get(url), timeout=self.timeout)
            html = response.text
        except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError) as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type=type(e).__name__,
                url=url
            )
            raise FetchFailedError("Could not fetch product data") from e

        if not 200 <= response.status_code < 400:
            self.logger.log_error(
                f"Unexpected status {response.status_code}",
                error_type="http_status",
                url=url,
                status_code=response.status_code
            )
            raise FetchFailedError("Could not fetch product data")

        final_url = str(response.url) or url

        self.logger.log_action(
            "fetch_html",
            "completed",
            url=url,
            final_url=final_url,
            status_code=response.status_code,
            content_length=len(html)
        )

        return FetchedPage(html=html, final_url=final_url, status_code=response.status_code)

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers=self.headers,
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            return response
