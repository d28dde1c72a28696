"""Central configuration for the GeoDrink water-source finder.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Every setting can be overridden through an environment
variable (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Overpass settings
# ---------------------------------------------------------------------------
# Public Overpass interpreter endpoint. Point this at a private instance when
# running many searches.
OVERPASS_URL = os.getenv(
    "GEODRINK_OVERPASS_URL", "https://overpass-api.de/api/interpreter"
)

# Server-side query timeout (seconds) embedded in the Overpass QL header.
OVERPASS_QUERY_TIMEOUT = _env_int("GEODRINK_OVERPASS_QUERY_TIMEOUT", 30)

# Client-side request timeout in seconds.
REQUEST_TIMEOUT = _env_float("GEODRINK_REQUEST_TIMEOUT", 30.0)

# Transport-level retries for the Overpass POST. A search cycle never retries
# on its own, so this stays at zero unless explicitly requested.
OVERPASS_MAX_RETRIES = _env_int("GEODRINK_OVERPASS_MAX_RETRIES", 0)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = _env_int("GEODRINK_HTTP_POOL_CONNECTIONS", 4)
HTTP_POOL_MAXSIZE = _env_int("GEODRINK_HTTP_POOL_MAXSIZE", 4)

# Identifies the tool to the Overpass operators.
USER_AGENT = os.getenv("GEODRINK_USER_AGENT", "geodrink/1.0")


# ---------------------------------------------------------------------------
# Search defaults
# ---------------------------------------------------------------------------
# Maximum distance (metres) between a water source and the closest point on
# the route (any segment) for the source to be listed.
DEFAULT_BUFFER_M = _env_float("GEODRINK_DEFAULT_BUFFER_M", 15.0)

# Filter preset used when none is requested.
DEFAULT_FILTER_PRESET = os.getenv("GEODRINK_DEFAULT_FILTER", "potable-only")

# Rough metres-per-degree factor used to pad the query bounding box.
METERS_PER_DEGREE = 111_000.0

# Quiet period (seconds) before a burst of parameter changes triggers a fetch.
DEBOUNCE_SECONDS = _env_float("GEODRINK_DEBOUNCE_SECONDS", 0.5)


# ---------------------------------------------------------------------------
# Cache settings
# ---------------------------------------------------------------------------
# Namespace prefix isolating GeoDrink entries from other persisted state.
CACHE_PREFIX = os.getenv("GEODRINK_CACHE_PREFIX", "geodrink_cache_")

# Entries older than this many seconds are treated as absent.
CACHE_TTL_SECONDS = _env_int("GEODRINK_CACHE_TTL_SECONDS", 60 * 60)

# Directory (absolute or relative) used by the file-backed cache storage.
CACHE_DIR = os.getenv("GEODRINK_CACHE_DIR", ".geodrink_cache")

# Disable the persistent cache entirely (an in-memory store is used instead).
CACHE_PERSISTENT = _env_bool("GEODRINK_CACHE_PERSISTENT", True)

# Number of routes whose cumulative segment lengths are memoised in-process.
ROUTE_CACHE_SIZE = _env_int("GEODRINK_ROUTE_CACHE_SIZE", 32)


# ---------------------------------------------------------------------------
# Export formatting
# ---------------------------------------------------------------------------
EXPORT_COLUMN_ORDER = [
    "Distance (km)",
    "Type",
    "Name",
    "Latitude",
    "Longitude",
    "Access",
    "Potable",
    "Fee",
]

# Automatically size columns when writing Excel exports (openpyxl only).
EXCEL_AUTOSIZE_COLUMNS = True
EXCEL_AUTOSIZE_MAX_WIDTH = 50  # characters
EXCEL_AUTOSIZE_MIN_WIDTH = 6  # characters
EXCEL_AUTOSIZE_PADDING = 2  # extra characters added to the detected max
