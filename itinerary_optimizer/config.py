"""
config.py
---------
Central configuration for the itinerary route optimizer.
Every value is read from an environment variable with a default; secrets are
never hard-coded.

The heuristic weights and thresholds below have no documented derivation in the
planning model. They are tunable policy, grouped into BeamSearchParameters /
SelectionPolicy by the planner and overridable per RoutePlanner instance.
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the package directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=True)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Route provider ────────────────────────────────────────────────────────────
# "kakao" enables the Kakao Mobility multi-waypoint directions API; anything
# else keeps every leg on the local Haversine estimate.
ROUTE_PROVIDER: str = os.getenv("ROUTE_PROVIDER", "none").lower()

# Obtain at: https://developers.kakao.com/ (REST API key)
KAKAO_REST_API_KEY: str       = os.getenv("KAKAO_REST_API_KEY", "")
KAKAO_MOBILITY_BASE_URL: str  = os.getenv("KAKAO_MOBILITY_BASE_URL", "https://apis-navi.kakaomobility.com")
# Timeout in seconds for every provider HTTP call
ROUTE_PROVIDER_TIMEOUT: float = float(os.getenv("ROUTE_PROVIDER_TIMEOUT", "10"))

# ── Haversine fallback (km/h per transport mode) ─────────────────────────────
SPEED_KMH_CAR: float              = float(os.getenv("SPEED_KMH_CAR", "40"))
SPEED_KMH_PUBLIC_TRANSPORT: float = float(os.getenv("SPEED_KMH_PUBLIC_TRANSPORT", "25"))
SPEED_KMH_WALKING: float          = float(os.getenv("SPEED_KMH_WALKING", "4"))
SPEED_KMH_DEFAULT: float          = float(os.getenv("SPEED_KMH_DEFAULT", "30"))

# Leg length assumed when one endpoint has no coordinates (confirmed bookings
# extracted from documents often carry only an address).
UNKNOWN_LEG_DISTANCE_KM: float = float(os.getenv("UNKNOWN_LEG_DISTANCE_KM", "5.0"))

# ── Geographic clustering ─────────────────────────────────────────────────────
KMEANS_MAX_ITERATIONS: int = int(os.getenv("KMEANS_MAX_ITERATIONS", "100"))

# Minimum places per category per day, e.g. '{"food": 2, "sightseeing": 2}'.
# Requests may override it; empty means no balancing.
DEFAULT_CATEGORY_QUOTAS: dict[str, int] = json.loads(os.getenv("DEFAULT_CATEGORY_QUOTAS", "{}"))

# ── Beam search (tunable defaults) ─────────────────────────────────────────
BEAM_WIDTH: int                = int(os.getenv("BEAM_WIDTH", "3"))
BEAM_DISTANCE_WEIGHT: float    = float(os.getenv("BEAM_DISTANCE_WEIGHT", "0.4"))
BEAM_TIME_WEIGHT: float        = float(os.getenv("BEAM_TIME_WEIGHT", "0.3"))
BEAM_RATING_WEIGHT: float      = float(os.getenv("BEAM_RATING_WEIGHT", "0.3"))
BEAM_DISTANCE_NORM_KM: float   = float(os.getenv("BEAM_DISTANCE_NORM_KM", "10.0"))
BEAM_TIME_NORM_MINUTES: float  = float(os.getenv("BEAM_TIME_NORM_MINUTES", "30.0"))

# ── Multi-path vs. greedy selection policy ────────────────────────────────────
# Beam search runs when total candidates > MIN and confirmed entries < MAX.
MULTI_PATH_MIN_CANDIDATES: int = int(os.getenv("MULTI_PATH_MIN_CANDIDATES", "20"))
MULTI_PATH_MAX_CONFIRMED: int  = int(os.getenv("MULTI_PATH_MAX_CONFIRMED", "3"))

# ── Day composition ───────────────────────────────────────────────────────────
GREEDY_ACTIVITY_SLOTS: int     = int(os.getenv("GREEDY_ACTIVITY_SLOTS", "6"))
MAX_PLACES_PER_DAY: int        = int(os.getenv("MAX_PLACES_PER_DAY", "8"))
HOTEL_CHECKIN_INSERT_INDEX: int = int(os.getenv("HOTEL_CHECKIN_INSERT_INDEX", "3"))
HOTEL_CHECK_MINUTES: int       = int(os.getenv("HOTEL_CHECK_MINUTES", "30"))

# ── Visit order ───────────────────────────────────────────────────────────────
TWO_OPT_MAX_PASSES: int = int(os.getenv("TWO_OPT_MAX_PASSES", "100"))

# Edge cost weights for the BALANCED strategy (visit_order.balanced_metric)
BALANCED_DISTANCE_WEIGHT: float = float(os.getenv("BALANCED_DISTANCE_WEIGHT", "0.4"))
BALANCED_TIME_WEIGHT: float     = float(os.getenv("BALANCED_TIME_WEIGHT", "0.3"))
BALANCED_RATING_WEIGHT: float   = float(os.getenv("BALANCED_RATING_WEIGHT", "0.3"))

# ── Execution ─────────────────────────────────────────────────────────────────
# Worker threads used to run independent days concurrently.
MAX_DAY_WORKERS: int = int(os.getenv("MAX_DAY_WORKERS", "4"))

# ── Observability ─────────────────────────────────────────────────────────────
# JSONL performance records, one file per session id (StructuredLogger).
PERF_LOGGING_ENABLED: bool = _flag("PERF_LOGGING_ENABLED", "true")
PERF_LOG_DIR: str          = os.getenv("PERF_LOG_DIR", "")   # empty → ./logs
