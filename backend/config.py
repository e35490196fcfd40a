"""Safe Stride Backend — Configuration & Constants"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level up from backend/)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)

# ── API Keys ──
MAPBOX_API_KEY = os.environ.get("MAPBOX_API_KEY", "")
MAPBOX_GEOCODE_BASE = "https://api.mapbox.com/geocoding/v5/mapbox.places"

# ── Data source ──
# Optional JSON file with {"cities": [...], "incidents": [...]}; empty = built-in sample
CRIME_DATA_PATH = os.environ.get("CRIME_DATA_PATH", "")

# ── Server behaviour ──
SIMULATED_LATENCY_SECONDS = float(os.environ.get("SIMULATED_LATENCY_SECONDS", "0"))
RATE_LIMIT = int(os.environ.get("RATE_LIMIT", "30"))  # requests per minute per IP
RATE_WINDOW = 60  # seconds
CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()]
MAX_FEEDBACK_REPORTS = 1000

# ── Lookup ──
NEARBY_RADIUS_DEG = 0.15  # raw lat/lng degrees, not a real distance
FALLBACK_SAMPLE_SIZE = 5
ITEMS_PER_PAGE = 5
# Shortest query allowed to match as a substring *of* a city name ("a" would hit most cities)
CITY_MATCH_MIN_CHARS = int(os.environ.get("CITY_MATCH_MIN_CHARS", "3"))

# ── Route synthesis ──
ROUTE_SEGMENTS = 8
PRIMARY_SCORE_RANGE = (60, 100)
# (deviation in degrees, score range) per alternative, in display order
ALTERNATIVE_ROUTES = [
    (0.01, (50, 80)),
    (0.015, (40, 60)),
]

# Route safety badge thresholds (score >= threshold)
SAFE_THRESHOLD = 70
CAUTION_THRESHOLD = 50

# Heat-map weight per severity
SEVERITY_WEIGHTS = {
    "low": 0.3,
    "medium": 0.6,
    "high": 1.0,
}

# Crime type → icon mapping
ICON_MAP = {
    "theft": "🔓", "larceny": "🔓", "pickpocket": "🔓", "shoplifting": "🔓",
    "burglary": "🏠", "break-in": "🏠", "trespass": "🏠",
    "robbery": "💰", "mugging": "💰", "snatching": "💰",
    "assault": "⚠️", "battery": "⚠️", "harassment": "⚠️",
    "vehicle": "🚗", "car": "🚗",
    "vandalism": "🏚️", "graffiti": "🏚️",
    "arson": "🔥",
    "homicide": "☠️", "murder": "☠️",
    "drugs": "💊", "narcotic": "💊",
    "fraud": "📋", "forgery": "📋", "scam": "📋",
    "weapon": "🔫",
}
