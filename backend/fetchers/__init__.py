"""Remote data sources: DataSF schedule and address geocoding"""
from .sweeping_fetcher import SweepingFetcher
from .geocoder import NominatimGeocoder, GeocodeResult, parse_geocode_results

__all__ = ["SweepingFetcher", "NominatimGeocoder", "GeocodeResult", "parse_geocode_results"]
