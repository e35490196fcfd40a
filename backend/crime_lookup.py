"""Safe Stride Backend — Crime Lookup

Location and text queries over a ``CrimeDataStore``. Distances are plain
Euclidean distances in lat/lng degree space, which is good enough to compare
city centres but is not a real distance unit.

None of these functions raise for "nothing found": they fall back to a wider
result and report the fallback through ``notify``.
"""

import logging
import math
from typing import Callable, Optional, Sequence, TypeVar

from config import CITY_MATCH_MIN_CHARS, FALLBACK_SAMPLE_SIZE, ITEMS_PER_PAGE, NEARBY_RADIUS_DEG
from models import CityCoordinate, CrimeIncident
from sample_data import CrimeDataStore

logger = logging.getLogger("safestride.lookup")

Notifier = Callable[[str], None]
T = TypeVar("T")


def _log_notice(message: str) -> None:
    logger.warning(message)


def _degree_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    return math.sqrt((lat1 - lat2) ** 2 + (lng1 - lng2) ** 2)


def normalize_city_name(name: str) -> str:
    """Canonical city key: lowercase, hyphens/underscores as spaces, single-spaced."""
    return " ".join(name.replace("-", " ").replace("_", " ").lower().split())


# ─────────────────────────── Cities ─────────────────────────────

def nearest_city(lat: float, lng: float, store: CrimeDataStore) -> str:
    """Name of the city centre closest to (lat, lng); first in table order wins ties."""
    best = store.cities[0]
    best_dist = _degree_distance(lat, lng, best.lat, best.lng)
    for city in store.cities[1:]:
        dist = _degree_distance(lat, lng, city.lat, city.lng)
        if dist < best_dist:
            best, best_dist = city, dist
    return best.name


def lookup_city_coordinate(name: str, store: CrimeDataStore) -> Optional[CityCoordinate]:
    return store.city(normalize_city_name(name))


def _city_matches(incident_city: Optional[str], city_name: str) -> bool:
    if not incident_city:
        return False
    a = incident_city.lower()
    b = city_name.lower()
    return a == b or a in b or b in a


def match_city_name(query: str, store: CrimeDataStore) -> Optional[str]:
    """Resolve a free-text query to a known city name.

    An exact name wins. Otherwise a city matches when the query contains its
    name ("new york city" → "new york") or, for queries of at least
    ``CITY_MATCH_MIN_CHARS`` characters, when its name contains the query
    ("york" → "new york"). The first match in table order is returned.
    """
    q = normalize_city_name(query)
    if not q:
        return None
    if store.city(q) is not None:
        return q
    for city in store.cities:
        if city.name in q:
            return city.name
        if len(q) >= CITY_MATCH_MIN_CHARS and q in city.name:
            return city.name
    return None


# ─────────────────────────── Incidents ──────────────────────────

def incidents_for_city(city_name: str, store: CrimeDataStore) -> list[CrimeIncident]:
    return [inc for inc in store.incidents if _city_matches(inc.city, city_name)]


def resolve_crime_data(lat: float, lng: float, store: CrimeDataStore) -> list[CrimeIncident]:
    """Incidents within ``NEARBY_RADIUS_DEG`` of (lat, lng).

    With nothing in range, falls back to every incident of the nearest city,
    which is empty only when that city has no incidents at all.
    """
    nearby = [
        inc for inc in store.incidents
        if _degree_distance(inc.lat, inc.lng, lat, lng) < NEARBY_RADIUS_DEG
    ]
    if nearby:
        return nearby

    city = nearest_city(lat, lng, store)
    fallback = incidents_for_city(city, store)
    logger.info(f"No incidents within {NEARBY_RADIUS_DEG}° of ({lat:.4f}, {lng:.4f}); "
                f"using {len(fallback)} from {city}")
    return fallback


def search_crimes_by_text(
    query: str,
    store: CrimeDataStore,
    notify: Optional[Notifier] = None,
) -> list[CrimeIncident]:
    """Search incidents by a location name.

    Tries a city match first, then a substring match on address, city and
    country. When both come up empty, ``notify`` is told and the first
    ``FALLBACK_SAMPLE_SIZE`` incidents are returned instead.
    """
    notify = notify or _log_notice
    q = query.strip().lower()

    results: list[CrimeIncident] = []
    city = match_city_name(q, store) if q else None
    if city:
        results = [
            inc for inc in store.incidents
            if (inc.city and inc.city.lower() == city)
            or (inc.address and city in inc.address.lower())
        ]
    elif q:
        results = [
            inc for inc in store.incidents
            if any(field and q in field.lower() for field in (inc.address, inc.city, inc.country))
        ]

    if results:
        return results

    notify(f'No crime data found for "{query.strip()}". Showing sample data instead.')
    return list(store.incidents[:FALLBACK_SAMPLE_SIZE])


# ─────────────────────────── Pagination ─────────────────────────

def paginate(items: Sequence[T], page: int = 1, per_page: int = ITEMS_PER_PAGE) -> dict:
    """Slice one page out of ``items``; out-of-range pages are clamped."""
    per_page = max(1, per_page)
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "page": page,
        "perPage": per_page,
        "total": total,
        "totalPages": total_pages,
    }
