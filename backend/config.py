"""Configuration for SF Street Cleaning lookup"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
OUTPUT_DIR = BASE_DIR / "output"
LOGS_DIR = BASE_DIR / "logs"

# Create directories if they don't exist
DATA_DIR.mkdir(exist_ok=True)
OUTPUT_DIR.mkdir(exist_ok=True)
LOGS_DIR.mkdir(exist_ok=True)

# Local CSV export of the schedule (DataSF "Export" -> CSV)
LOCAL_SCHEDULE_CSV = DATA_DIR / os.getenv(
    "LOCAL_SCHEDULE_CSV", "Street_Sweeping_Schedule_20250810.csv"
)

# DataSF API endpoints
DATASF_BASE_URL = "https://data.sfgov.org/resource"
STREET_SWEEPING_DATASET_ID = "yhqp-riqs"  # Street Sweeping Schedule

# Geocoding (OpenStreetMap Nominatim, no API key required)
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "sf-street-cleaning-lookup/1.0")
GEOCODE_SUFFIX = ", San Francisco, CA"

# API settings
DATASF_APP_TOKEN = os.getenv("DATASF_APP_TOKEN", "")  # Optional but recommended
REQUEST_TIMEOUT = 60
MAX_RETRIES = 3
RETRY_DELAY = 5

# Data limits (DataSF paginates at 1000 by default)
DATASF_PAGE_SIZE = 50000  # Max allowed with SoQL

# "What's swept today near here": ~100 m, closest 10
TODAY_RADIUS_DEGREES = 0.001
TODAY_NEARBY_LIMIT = 10
TODAY_MAX_CANDIDATES = 20  # applied before grouping

# "Can I park here at date/hour": ~880 m, a driver planning ahead will walk further
SEARCH_RADIUS_DEGREES = 0.008
SEARCH_NEARBY_LIMIT = int(os.getenv("SEARCH_NEARBY_LIMIT", "0")) or None  # None = uncapped

# Output settings
COMPRESS_OUTPUT = True
SNAPSHOT_PREFIX = "street_sweeping"

# Schedule settings (cron-like)
UPDATE_SCHEDULE = "weekly"  # daily, weekly, monthly
UPDATE_DAY = "sunday"
UPDATE_HOUR = 3  # 3 AM
