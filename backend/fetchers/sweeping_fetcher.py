"""Fetcher for the DataSF Street Sweeping Schedule"""
import logging
from typing import Any, Dict, List

from config import (
    DATASF_BASE_URL,
    STREET_SWEEPING_DATASET_ID,
    DATASF_PAGE_SIZE
)
from .base_fetcher import BaseFetcher

logger = logging.getLogger(__name__)


class SweepingFetcher(BaseFetcher):
    """
    Fetches street sweeping rules from DataSF.

    Dataset: Street Sweeping Schedule
    ID: yhqp-riqs

    One row per block side and weekday:
    - cnn, corridor, limits, blockside
    - weekday (Mon, Tues, ...), fromhour, tohour
    - week1..week5 and holidays flags
    - line (GeoJSON LineString of the block)

    API: https://data.sfgov.org/City-Infrastructure/Street-Sweeping-Schedule/yhqp-riqs
    """

    def __init__(self):
        super().__init__()
        self.base_url = f"{DATASF_BASE_URL}/{STREET_SWEEPING_DATASET_ID}.json"

    def get_source_name(self) -> str:
        return "DataSF Street Sweeping Schedule"

    async def fetch(self) -> List[Dict[str, Any]]:
        """Fetch every schedule row"""
        logger.info(f"Starting fetch from {self.get_source_name()}")
        records = await self.fetch_paginated(self.base_url, DATASF_PAGE_SIZE)
        logger.info(f"Completed fetch: {len(records)} total records")
        return records

    async def fetch_sample(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Fetch a sample of records for testing/inspection"""
        params = {"$limit": limit}
        return await self.fetch_with_retry(self.base_url, params=params, headers=self.datasf_headers())
