"""Address geocoding through OpenStreetMap Nominatim"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from config import NOMINATIM_URL, GEOCODER_USER_AGENT, GEOCODE_SUFFIX
from .base_fetcher import BaseFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeResult:
    lng: float
    lat: float
    display_name: str

    @property
    def coordinates(self):
        return (self.lng, self.lat)


def parse_geocode_results(results: Optional[List[Any]]) -> Optional[GeocodeResult]:
    """First usable hit from a Nominatim JSON response, or None"""
    for result in results or []:
        try:
            return GeocodeResult(
                lng=float(result["lon"]),
                lat=float(result["lat"]),
                display_name=result.get("display_name", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed geocoder result: {e}")
    return None


class NominatimGeocoder(BaseFetcher):
    """Resolves free-text San Francisco addresses to (lng, lat)"""

    def get_source_name(self) -> str:
        return "OpenStreetMap Nominatim"

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        query = address.strip()
        if not query:
            return None

        params = {"format": "json", "q": f"{query}{GEOCODE_SUFFIX}", "limit": 1}
        headers = {"User-Agent": GEOCODER_USER_AGENT}
        results = await self.fetch_with_retry(NOMINATIM_URL, params=params, headers=headers)

        result = parse_geocode_results(results)
        if result is None:
            logger.info(f"Address not found in San Francisco: {address}")
        else:
            logger.info(f"Geocoded '{address}' to {result.lat:.5f}, {result.lng:.5f}")
        return result
