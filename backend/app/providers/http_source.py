"""HTTP data source for CSV files served as static assets.

Wraps an httpx.AsyncClient, handling URL construction, retries with
exponential backoff, and error translation.
"""
import asyncio
import logging

import httpx

from app.core.exceptions import DataSourceError
from app.providers.base import CSVDataset, DataSourceInterface

logger = logging.getLogger(__name__)


class HttpDataSource(DataSourceInterface):
    """
    Fetches CSV datasets over HTTP.

    Transport errors and 5xx responses are retried; 4xx responses fail
    immediately since retrying cannot fix a missing file.
    """

    def __init__(
        self,
        base_url: str,
        filenames: dict[CSVDataset, str],
        timeout: float = 5.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.filenames = filenames
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @property
    def source_name(self) -> str:
        return "http"

    def url_for(self, dataset: CSVDataset) -> str:
        return f"{self.base_url}/{self.filenames[dataset]}"

    async def fetch_text(self, dataset: CSVDataset) -> str:
        """Download a dataset with retry logic and exponential backoff."""
        url = self.url_for(dataset)
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(url)
                response.raise_for_status()
                logger.info(f"Fetched {url} ({len(response.content)} bytes)")
                return response.text

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code < 500:
                    logger.error(f"Failed to fetch {url}: HTTP {e.response.status_code}")
                    raise DataSourceError(
                        f"Failed to fetch {url}: {e.response.status_code} {e.response.reason_phrase}"
                    ) from e
            except httpx.HTTPError as e:
                last_error = e

            if attempt < self.max_retries - 1:
                wait_time = self.retry_delay * (2**attempt)
                logger.warning(
                    f"Attempt {attempt + 1} failed for {url}, "
                    f"retrying in {wait_time}s: {last_error}"
                )
                await asyncio.sleep(wait_time)
            else:
                logger.error(f"All {self.max_retries} attempts failed for {url}: {last_error}")

        raise DataSourceError(
            f"Failed to fetch {url} after {self.max_retries} attempts: {last_error}"
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
