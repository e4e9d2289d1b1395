"""Base fetcher class with common functionality"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import aiohttp

from config import MAX_RETRIES, RETRY_DELAY, REQUEST_TIMEOUT, DATASF_APP_TOKEN

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """Abstract base class for remote data sources (DataSF, geocoder)"""

    def __init__(self):
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()

    async def fetch_with_retry(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """Fetch URL and decode JSON, retrying client errors with exponential backoff"""
        if self.session is None:
            raise RuntimeError(f"{self.get_source_name()} used outside 'async with'")

        last_error = None

        for attempt in range(MAX_RETRIES):
            try:
                async with self.session.get(url, params=params, headers=headers) as response:
                    response.raise_for_status()
                    return await response.json()
            except aiohttp.ClientError as e:
                last_error = e
                if attempt + 1 == MAX_RETRIES:
                    break
                wait_time = RETRY_DELAY * (2 ** attempt)
                logger.warning(
                    f"Request failed (attempt {attempt + 1}/{MAX_RETRIES}): {e}. "
                    f"Retrying in {wait_time}s..."
                )
                await asyncio.sleep(wait_time)
            except Exception as e:
                logger.error(f"Unexpected error fetching {url}: {e}")
                raise

        logger.error(f"Giving up on {url} after {MAX_RETRIES} attempts")
        raise last_error or Exception(f"Failed to fetch {url} after {MAX_RETRIES} attempts")

    def datasf_headers(self) -> Dict[str, str]:
        headers = {}
        if DATASF_APP_TOKEN:
            headers["X-App-Token"] = DATASF_APP_TOKEN
        return headers

    async def fetch_paginated(
        self,
        url: str,
        page_size: int,
        extra_params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Page through a SoQL endpoint with $limit/$offset until a short page"""
        all_records: List[Dict[str, Any]] = []
        offset = 0
        headers = self.datasf_headers()

        while True:
            params = {
                "$limit": page_size,
                "$offset": offset,
                "$order": ":id",  # Consistent ordering for pagination
            }
            if extra_params:
                params.update(extra_params)

            logger.info(f"Fetching records {offset} to {offset + page_size}...")
            records = await self.fetch_with_retry(url, params=params, headers=headers)

            if not records:
                break

            all_records.extend(records)
            logger.info(f"Fetched {len(records)} records (total: {len(all_records)})")

            if len(records) < page_size:
                break

            offset += page_size

        return all_records

    @abstractmethod
    def get_source_name(self) -> str:
        """Return the name of this data source"""
        pass
