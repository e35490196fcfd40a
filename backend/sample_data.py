"""Safe Stride Backend — Sample Crime Data Store

Hard-coded city centres and crime incidents used in place of a real crime
data provider. Coordinates are approximate city-centre positions; incidents
are illustrative records clustered within a few hundred metres of them.

The tables are wrapped in an immutable ``CrimeDataStore`` that is built once
(``get_store``) and passed explicitly to every lookup function, so a real data
source can replace it without touching the query logic. Set
``CRIME_DATA_PATH`` to a JSON file with ``cities`` and ``incidents`` arrays to
load a different store at startup.
"""

import json
import logging
import os
from functools import lru_cache
from typing import Iterable, Optional

from config import CRIME_DATA_PATH
from models import CityCoordinate, CrimeIncident

logger = logging.getLogger("safestride.data")

# ═══════════════════════════════════════════════════════════════
# City centres — lowercase canonical name → (lat, lng)
# Table order is significant: it breaks distance ties and decides
# which city wins an ambiguous text match.
# ═══════════════════════════════════════════════════════════════

CITY_COORDINATES: dict[str, tuple[float, float]] = {
    "new york": (40.7128, -74.0060),
    "los angeles": (34.0522, -118.2437),
    "chicago": (41.8781, -87.6298),
    "houston": (29.7604, -95.3698),
    "san francisco": (37.7749, -122.4194),
    "miami": (25.7617, -80.1918),
    "toronto": (43.6532, -79.3832),
    "london": (51.5074, -0.1278),
    "paris": (48.8566, 2.3522),
    "berlin": (52.5200, 13.4050),
    "mumbai": (19.0760, 72.8777),
    "delhi": (28.6139, 77.2090),
    "bangalore": (12.9716, 77.5946),
    "tokyo": (35.6762, 139.6503),
    "sydney": (-33.8688, 151.2093),
}

# ═══════════════════════════════════════════════════════════════
# Crime incidents
# ═══════════════════════════════════════════════════════════════

CRIME_INCIDENTS: list[dict] = [
    # New York
    {"id": 1, "lat": 40.7128, "lng": -74.0060, "type": "Theft", "severity": "medium", "date": "2025-04-02",
     "description": "Personal items stolen from vehicle", "address": "123 Broadway, New York",
     "city": "New York", "country": "USA"},
    {"id": 2, "lat": 40.7138, "lng": -74.0080, "type": "Assault", "severity": "high", "date": "2025-04-01",
     "description": "Physical altercation between individuals", "address": "456 5th Ave, New York",
     "city": "New York", "country": "USA"},
    {"id": 3, "lat": 40.7118, "lng": -74.0040, "type": "Robbery", "severity": "high", "date": "2025-04-03",
     "description": "Armed robbery at convenience store", "address": "789 Park Ave, New York",
     "city": "New York", "country": "USA"},
    {"id": 4, "lat": 40.7148, "lng": -74.0030, "type": "Vandalism", "severity": "low", "date": "2025-04-02",
     "description": "Graffiti on public property", "address": "321 Madison Ave, New York",
     "city": "New York", "country": "USA"},
    {"id": 5, "lat": 40.7178, "lng": -74.0050, "type": "Burglary", "severity": "high", "date": "2025-04-02",
     "description": "Residential break-in", "address": "159 East 32nd St, New York",
     "city": "New York", "country": "USA"},

    # Los Angeles
    {"id": 6, "lat": 34.0522, "lng": -118.2437, "type": "Theft", "severity": "medium", "date": "2025-04-02",
     "description": "Personal items stolen from vehicle", "address": "123 Sunset Blvd, Los Angeles",
     "city": "Los Angeles", "country": "USA"},
    {"id": 7, "lat": 34.0532, "lng": -118.2447, "type": "Assault", "severity": "high", "date": "2025-04-01",
     "description": "Physical altercation between individuals", "address": "456 Hollywood Blvd, Los Angeles",
     "city": "Los Angeles", "country": "USA"},
    {"id": 8, "lat": 34.0542, "lng": -118.2457, "type": "Robbery", "severity": "high", "date": "2025-04-03",
     "description": "Armed robbery at convenience store", "address": "789 Wilshire Blvd, Los Angeles",
     "city": "Los Angeles", "country": "USA"},

    # Chicago
    {"id": 9, "lat": 41.8781, "lng": -87.6298, "type": "Vandalism", "severity": "low", "date": "2025-04-02",
     "description": "Graffiti on public property", "address": "321 Michigan Ave, Chicago",
     "city": "Chicago", "country": "USA"},
    {"id": 10, "lat": 41.8791, "lng": -87.6308, "type": "Theft", "severity": "medium", "date": "2025-04-03",
     "description": "Bicycle stolen from rack", "address": "654 State St, Chicago",
     "city": "Chicago", "country": "USA"},
    {"id": 11, "lat": 41.8801, "lng": -87.6318, "type": "Harassment", "severity": "low", "date": "2025-04-01",
     "description": "Verbal harassment reported", "address": "987 Wacker Dr, Chicago",
     "city": "Chicago", "country": "USA"},

    # London
    {"id": 12, "lat": 51.5154, "lng": -0.1410, "type": "Pickpocketing", "severity": "low", "date": "2025-04-04",
     "description": "Wallet taken on crowded pavement", "address": "Oxford Street, London",
     "city": "London", "country": "United Kingdom"},
    {"id": 13, "lat": 51.5101, "lng": -0.1340, "type": "Robbery", "severity": "high", "date": "2025-04-02",
     "description": "Phone snatched by moped rider", "address": "Piccadilly Circus, London",
     "city": "London", "country": "United Kingdom"},
    {"id": 14, "lat": 51.5033, "lng": -0.1195, "type": "Fraud", "severity": "medium", "date": "2025-04-05",
     "description": "Card skimmer found on cash machine", "address": "Southbank, London",
     "city": "London", "country": "United Kingdom"},

    # Mumbai
    {"id": 15, "lat": 18.9220, "lng": 72.8347, "type": "Theft", "severity": "medium", "date": "2025-04-03",
     "description": "Bag snatched near market stalls", "address": "Colaba Causeway, Mumbai",
     "city": "Mumbai", "country": "India"},
    {"id": 16, "lat": 19.0176, "lng": 72.8562, "type": "Harassment", "severity": "medium", "date": "2025-04-01",
     "description": "Harassment reported on local train platform", "address": "Dadar Station, Mumbai",
     "city": "Mumbai", "country": "India"},
    {"id": 17, "lat": 19.0596, "lng": 72.8295, "type": "Burglary", "severity": "high", "date": "2025-04-04",
     "description": "Apartment broken into overnight", "address": "Bandra West, Mumbai",
     "city": "Mumbai", "country": "India"},

    # Delhi
    {"id": 18, "lat": 28.6315, "lng": 77.2167, "type": "Pickpocketing", "severity": "low", "date": "2025-04-02",
     "description": "Phone lifted from back pocket", "address": "Connaught Place, New Delhi",
     "city": "Delhi", "country": "India"},
    {"id": 19, "lat": 28.6562, "lng": 77.2410, "type": "Assault", "severity": "high", "date": "2025-04-05",
     "description": "Fight broke out in crowded bazaar", "address": "Chandni Chowk, Delhi",
     "city": "Delhi", "country": "India"},

    # Paris
    {"id": 20, "lat": 48.8584, "lng": 2.2945, "type": "Pickpocketing", "severity": "medium", "date": "2025-04-03",
     "description": "Tourist targeted by pickpocket team", "address": "Champ de Mars, Paris",
     "city": "Paris", "country": "France"},
    {"id": 21, "lat": 48.8867, "lng": 2.3431, "type": "Scam", "severity": "low", "date": "2025-04-01",
     "description": "Bracelet scam reported near steps", "address": "Montmartre, Paris",
     "city": "Paris", "country": "France"},

    # Tokyo
    {"id": 22, "lat": 35.6938, "lng": 139.7034, "type": "Fraud", "severity": "medium", "date": "2025-04-04",
     "description": "Overcharging at bar reported", "address": "Kabukicho, Shinjuku, Tokyo",
     "city": "Tokyo", "country": "Japan"},

    # Sydney
    {"id": 23, "lat": -33.8731, "lng": 151.2065, "type": "Assault", "severity": "high",
     "description": "Late-night assault outside venue", "address": "George Street, Sydney",
     "city": "Sydney", "country": "Australia"},

    # Toronto
    {"id": 24, "lat": 43.6561, "lng": -79.3802, "type": "Vehicle Theft", "severity": "medium", "date": "2025-04-02",
     "address": "Yonge-Dundas Square, Toronto", "city": "Toronto", "country": "Canada"},
]


# ─────────────────────────── Store ──────────────────────────────

class CrimeDataStore:
    """Immutable bundle of city centres and incidents.

    Cities keep their table order; incidents keep theirs, so "first N" and
    tie-breaking behave the same on every call.
    """

    def __init__(self, cities: Iterable[CityCoordinate], incidents: Iterable[CrimeIncident]):
        self._cities = tuple(cities)
        self._incidents = tuple(incidents)
        if not self._cities:
            raise ValueError("CrimeDataStore needs at least one city")

        self._by_name: dict[str, CityCoordinate] = {}
        for city in self._cities:
            if city.name in self._by_name:
                raise ValueError(f"Duplicate city name: {city.name!r}")
            self._by_name[city.name] = city

        seen: set[int] = set()
        for inc in self._incidents:
            if inc.id in seen:
                raise ValueError(f"Duplicate incident id: {inc.id}")
            seen.add(inc.id)

    @property
    def cities(self) -> tuple[CityCoordinate, ...]:
        return self._cities

    @property
    def incidents(self) -> tuple[CrimeIncident, ...]:
        return self._incidents

    def city(self, name: str) -> Optional[CityCoordinate]:
        """Exact lookup by canonical (lowercase) name."""
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._incidents)

    def __repr__(self) -> str:
        return f"<CrimeDataStore cities={len(self._cities)} incidents={len(self._incidents)}>"


def build_store(cities: dict[str, tuple[float, float]], incidents: list[dict]) -> CrimeDataStore:
    """Validate raw tables into a ``CrimeDataStore``."""
    return CrimeDataStore(
        cities=[
            CityCoordinate(name=name.strip().lower(), lat=lat, lng=lng)
            for name, (lat, lng) in cities.items()
        ],
        incidents=[CrimeIncident(**rec) for rec in incidents],
    )


def load_store_from_json(path: str) -> CrimeDataStore:
    """Load a store from ``{"cities": [{name, lat, lng}], "incidents": [...]}``."""
    with open(path, "r") as f:
        data = json.load(f)
    cities = {c["name"]: (float(c["lat"]), float(c["lng"])) for c in data.get("cities", [])}
    return build_store(cities, data.get("incidents", []))


@lru_cache(maxsize=1)
def get_store() -> CrimeDataStore:
    """Build the process-wide store once.

    A configured ``CRIME_DATA_PATH`` that cannot be read falls back to the
    built-in sample tables.
    """
    if CRIME_DATA_PATH:
        try:
            store = load_store_from_json(CRIME_DATA_PATH)
            logger.info(f"Loaded crime data from {os.path.basename(CRIME_DATA_PATH)}: {store!r}")
            return store
        except FileNotFoundError:
            logger.warning(f"Crime data file not found: {CRIME_DATA_PATH}, using sample data")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load crime data from {CRIME_DATA_PATH}: {e}, using sample data")

    store = build_store(CITY_COORDINATES, CRIME_INCIDENTS)
    logger.info(f"Loaded sample crime data: {store!r}")
    return store
