"""Safe Stride Backend — External Data Fetchers (Mapbox geocoding)"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from cache import geocode_cache
from config import MAPBOX_API_KEY, MAPBOX_GEOCODE_BASE
from crime_lookup import lookup_city_coordinate, match_city_name
from models import CityCoordinate
from sample_data import CrimeDataStore

logger = logging.getLogger("safestride.fetchers")

# Shared async HTTP client
client = httpx.AsyncClient(timeout=15.0)


# ─────────────────────────── Geocoding ──────────────────────────

def _local_result(city: CityCoordinate) -> dict:
    return {"lat": city.lat, "lng": city.lng, "name": city.name.title(), "source": "local"}


def geocode_local(query: str, store: CrimeDataStore, fuzzy: bool = False) -> Optional[dict]:
    """Resolve a place name against the store's city table.

    Only an exact city name matches unless ``fuzzy`` is set, in which case a
    query that merely mentions a city ("Times Square, New York") resolves to
    that city's centre.
    """
    city = lookup_city_coordinate(query, store)
    if city is None and fuzzy:
        name = match_city_name(query, store)
        city = store.city(name) if name else None
    if city is None:
        return None
    return _local_result(city)


async def fetch_mapbox_geocode(query: str) -> Optional[dict]:
    """Forward-geocode with Mapbox; ``None`` without a key or on any failure."""
    if not MAPBOX_API_KEY:
        return None

    cache_key = f"mapbox:{query.strip().lower()}"
    cached = geocode_cache.get(cache_key)
    if cached is not None:
        logger.info(f"Geocode cache hit for {query!r}")
        return cached

    # "/" inside an address must not start a new path segment
    place = quote(query, safe="")
    try:
        r = await client.get(
            f"{MAPBOX_GEOCODE_BASE}/{place}.json",
            params={"access_token": MAPBOX_API_KEY, "limit": 1},
        )
        if r.status_code == 200:
            data = r.json()
            features = data.get("features") or []
            if features:
                lng, lat = features[0]["center"]
                result = {
                    "lat": float(lat),
                    "lng": float(lng),
                    "name": features[0].get("place_name", query),
                    "source": "mapbox",
                }
                geocode_cache.set(cache_key, result)
                return result
        else:
            logger.warning(f"Mapbox geocode returned {r.status_code} for {query!r}")
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning(f"Mapbox geocode error: {e}")
    return None


async def geocode_place(query: str, store: CrimeDataStore) -> Optional[dict]:
    """Exact city names first, then Mapbox, then any city the query mentions."""
    local = geocode_local(query, store)
    if local is not None:
        return local
    remote = await fetch_mapbox_geocode(query)
    if remote is not None:
        return remote
    return geocode_local(query, store, fuzzy=True)
