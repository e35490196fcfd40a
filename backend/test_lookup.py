#!/usr/bin/env python3
"""
Crime lookup tests: data store, city resolution, location lookup, text search,
pagination and presentation scoring.

Tests:
  1. Store integrity — table sizes, unique ids, validation errors
  2. Nearest city — every registered centre resolves to itself, ties go first
  3. City lookup — case/hyphen-insensitive, unknown names → None
  4. Location lookup — radius hits, nearest-city fallback, empty cities
  5. Text search — city match, field match, sample fallback with notice
  6. Pagination — page slicing and clamping
  7. Scoring — severity weights, badges, icons, heat-map points, summaries

Run:  python backend/test_lookup.py   (or: pytest backend/)
"""

import os, sys, time, json, tempfile, traceback
from dataclasses import dataclass

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from crime_lookup import (
    lookup_city_coordinate,
    match_city_name,
    nearest_city,
    paginate,
    resolve_crime_data,
    search_crimes_by_text,
)
from models import CityCoordinate, CrimeIncident
from sample_data import (
    CITY_COORDINATES,
    CrimeDataStore,
    build_store,
    get_store,
    load_store_from_json,
)
from scoring import (
    classify_route_safety,
    compute_heatmap_points,
    get_icon,
    severity_badge,
    severity_weight,
    summarize_incidents,
)

STORE = get_store()


def _ids(incidents) -> list[int]:
    return [inc.id for inc in incidents]


# ─────────────────────────────────────────────────────────────────
# 1. Store integrity
# ─────────────────────────────────────────────────────────────────

def test_store_sizes():
    assert len(STORE.cities) == 15
    assert len(STORE.incidents) == 24
    assert len({inc.id for inc in STORE.incidents}) == 24
    assert all(c.name == c.name.lower() for c in STORE.cities)


def test_store_rejects_duplicate_ids():
    inc = CrimeIncident(id=1, lat=0.0, lng=0.0, type="Theft", severity="low")
    city = CityCoordinate(name="x", lat=0.0, lng=0.0)
    try:
        CrimeDataStore([city], [inc, inc])
    except ValueError:
        pass
    else:
        raise AssertionError("duplicate incident ids were accepted")


def test_store_rejects_empty_city_table():
    try:
        CrimeDataStore([], [])
    except ValueError:
        pass
    else:
        raise AssertionError("empty city table was accepted")


def test_incident_records_are_frozen():
    inc = STORE.incidents[0]
    try:
        inc.lat = 0.0
    except Exception:
        pass
    else:
        raise AssertionError("incident coordinates were mutated")
    assert STORE.incidents[0].lat == 40.7128


def test_optional_fields_are_explicit_none():
    sydney = next(inc for inc in STORE.incidents if inc.id == 23)
    toronto = next(inc for inc in STORE.incidents if inc.id == 24)
    assert sydney.date is None
    assert toronto.description is None
    assert toronto.address is not None


def test_load_store_from_json():
    payload = {
        "cities": [{"name": "Springfield", "lat": 39.78, "lng": -89.65}],
        "incidents": [
            {"id": 7, "lat": 39.78, "lng": -89.65, "type": "Theft", "severity": "low", "city": "Springfield"},
        ],
    }
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "crimes.json")
        with open(path, "w") as f:
            json.dump(payload, f)
        store = load_store_from_json(path)
    assert [c.name for c in store.cities] == ["springfield"]
    assert _ids(resolve_crime_data(39.78, -89.65, store)) == [7]


# ─────────────────────────────────────────────────────────────────
# 2. Nearest city
# ─────────────────────────────────────────────────────────────────

def test_nearest_city_on_registered_centres():
    for name, (lat, lng) in CITY_COORDINATES.items():
        assert nearest_city(lat, lng, STORE) == name, name


def test_nearest_city_near_centre():
    assert nearest_city(40.80, -73.95, STORE) == "new york"
    assert nearest_city(-33.5, 151.0, STORE) == "sydney"


def test_nearest_city_tie_goes_to_first():
    store = build_store({"east": (0.0, 1.0), "west": (0.0, -1.0)}, [])
    assert nearest_city(0.0, 0.0, store) == "east"


# ─────────────────────────────────────────────────────────────────
# 3. City lookup
# ─────────────────────────────────────────────────────────────────

def test_lookup_city_coordinate_variants():
    for name in ("new york", "New York", "new-york", "new_york", "  NEW   YORK "):
        city = lookup_city_coordinate(name, STORE)
        assert city is not None, name
        assert (city.lat, city.lng) == (40.7128, -74.0060)


def test_lookup_city_coordinate_unknown():
    assert lookup_city_coordinate("Atlantis", STORE) is None
    assert lookup_city_coordinate("", STORE) is None


def test_match_city_name():
    assert match_city_name("mumbai", STORE) == "mumbai"
    assert match_city_name("new york city", STORE) == "new york"
    assert match_city_name("york", STORE) == "new york"
    # too short to match as a fragment of a city name
    assert match_city_name("yo", STORE) is None
    assert match_city_name("atlantis", STORE) is None


# ─────────────────────────────────────────────────────────────────
# 4. Location lookup
# ─────────────────────────────────────────────────────────────────

def test_resolve_within_radius():
    assert _ids(resolve_crime_data(40.7128, -74.0060, STORE)) == [1, 2, 3, 4, 5]


def test_resolve_falls_back_to_nearest_city():
    # > 0.15° from every Chicago incident, still closest to Chicago
    result = resolve_crime_data(42.10, -87.90, STORE)
    assert result
    assert _ids(result) == [9, 10, 11]
    assert all(inc.city == "Chicago" for inc in result)


def test_resolve_city_without_incidents_is_empty():
    lat, lng = CITY_COORDINATES["berlin"]
    assert resolve_crime_data(lat, lng, STORE) == []


def test_resolve_fallback_skips_incidents_without_city():
    store = build_store(
        {"harbour": (10.0, 10.0)},
        [
            {"id": 1, "lat": 11.0, "lng": 11.0, "type": "Theft", "severity": "low", "city": "Harbour"},
            {"id": 2, "lat": 11.0, "lng": 11.0, "type": "Theft", "severity": "low"},
        ],
    )
    assert _ids(resolve_crime_data(10.0, 10.0, store)) == [1]


def test_resolve_fallback_matches_longer_incident_city():
    store = build_store(
        {"delhi": (28.6139, 77.2090), "mumbai": (19.0760, 72.8777)},
        [
            {"id": 1, "lat": 28.9, "lng": 77.5, "type": "Theft", "severity": "low", "city": "New Delhi"},
            {"id": 2, "lat": 19.4, "lng": 73.2, "type": "Theft", "severity": "low", "city": "Mumbai"},
        ],
    )
    assert _ids(resolve_crime_data(28.62, 77.21, store)) == [1]


def test_resolve_fallback_matches_shorter_incident_city():
    store = build_store(
        {"new delhi": (28.6139, 77.2090), "mumbai": (19.0760, 72.8777)},
        [
            {"id": 1, "lat": 28.9, "lng": 77.5, "type": "Theft", "severity": "low", "city": "Delhi"},
            {"id": 2, "lat": 19.4, "lng": 73.2, "type": "Theft", "severity": "low", "city": "Mumbai"},
        ],
    )
    assert _ids(resolve_crime_data(28.62, 77.21, store)) == [1]


# ─────────────────────────────────────────────────────────────────
# 5. Text search
# ─────────────────────────────────────────────────────────────────

def test_search_mumbai_only_mumbai():
    notices = []
    result = search_crimes_by_text("Mumbai", STORE, notify=notices.append)
    assert _ids(result) == [15, 16, 17]
    assert all(inc.city == "Mumbai" for inc in result)
    assert notices == []


def test_search_unknown_returns_sample_with_notice():
    notices = []
    result = search_crimes_by_text("Atlantis", STORE, notify=notices.append)
    assert result == list(STORE.incidents[:5])
    assert len(notices) == 1
    assert "Atlantis" in notices[0]


def test_search_query_containing_city():
    assert _ids(search_crimes_by_text("new york city", STORE)) == [1, 2, 3, 4, 5]


def test_search_matches_address_of_city():
    # incident 18 is filed under "Delhi" with a "New Delhi" address
    assert _ids(search_crimes_by_text("delhi", STORE)) == [18, 19]


def test_search_field_fallback_country():
    assert _ids(search_crimes_by_text("India", STORE)) == [15, 16, 17, 18, 19]


def test_search_field_fallback_address():
    assert _ids(search_crimes_by_text("Broadway", STORE)) == [1]


def test_search_short_query_skips_city_fragment_match():
    notices = []
    result = search_crimes_by_text("a", STORE, notify=notices.append)
    assert notices == []
    assert result
    assert len(result) > 5


def test_search_blank_query_falls_back():
    notices = []
    result = search_crimes_by_text("   ", STORE, notify=notices.append)
    assert result == list(STORE.incidents[:5])
    assert len(notices) == 1


# ─────────────────────────────────────────────────────────────────
# 6. Pagination
# ─────────────────────────────────────────────────────────────────

def test_paginate_pages():
    items = list(range(24))
    first = paginate(items, 1, 5)
    assert first["items"] == [0, 1, 2, 3, 4]
    assert first["totalPages"] == 5
    last = paginate(items, 5, 5)
    assert last["items"] == [20, 21, 22, 23]


def test_paginate_clamps():
    items = list(range(7))
    assert paginate(items, 99, 5)["page"] == 2
    assert paginate(items, 0, 5)["page"] == 1
    empty = paginate([], 3, 5)
    assert empty["items"] == []
    assert empty["totalPages"] == 1
    assert empty["page"] == 1


# ─────────────────────────────────────────────────────────────────
# 7. Scoring
# ─────────────────────────────────────────────────────────────────

def test_severity_weights():
    assert severity_weight("low") == 0.3
    assert severity_weight("medium") == 0.6
    assert severity_weight("high") == 1.0
    assert severity_weight("extreme") == 0.3


def test_route_safety_badges():
    assert classify_route_safety(99).label == "Safe"
    assert classify_route_safety(70).label == "Safe"
    assert classify_route_safety(69).label == "Use Caution"
    assert classify_route_safety(50).color == "caution"
    assert classify_route_safety(49).label == "Avoid"
    assert classify_route_safety(49).color == "danger"


def test_severity_badges():
    assert severity_badge("high").label == "High"
    assert severity_badge("high").color == "danger"
    assert severity_badge("medium").color == "caution"
    assert severity_badge("low").color == "safe"
    assert severity_badge("odd").color == "muted"


def test_icons():
    assert get_icon("Armed Robbery") == "💰"
    assert get_icon("Vandalism") == "🏚️"
    assert get_icon("Something else") == "📌"


def test_heatmap_points_and_summary():
    ny = resolve_crime_data(40.7128, -74.0060, STORE)
    points = compute_heatmap_points(ny)
    assert len(points) == 5
    assert [p.weight for p in points] == [0.6, 1.0, 1.0, 0.3, 1.0]
    assert points[0].type == "Theft"

    summary = summarize_incidents(ny)
    assert summary.total == 5
    assert summary.bySeverity == {"low": 1, "medium": 1, "high": 3}
    assert sum(summary.byType.values()) == 5


# ─────────────────────────────────────────────────────────────────
# Script runner
# ─────────────────────────────────────────────────────────────────

@dataclass
class CaseResult:
    name: str
    passed: bool
    details: str
    duration_ms: float


def run_test(name: str, func) -> CaseResult:
    """Run a test function and print the result."""
    t0 = time.perf_counter()
    try:
        func()
        result = CaseResult(name, True, "", (time.perf_counter() - t0) * 1000)
        print(f"  ✅ PASS  {name} ({result.duration_ms:.0f}ms)")
    except Exception as e:
        result = CaseResult(name, False, traceback.format_exc(), (time.perf_counter() - t0) * 1000)
        print(f"  ❌ FAIL  {name}: {e!r}")
    return result


def main() -> int:
    tests = [(n, f) for n, f in globals().items() if n.startswith("test_") and callable(f)]
    results = [run_test(n, f) for n, f in tests]
    failed = [r for r in results if not r.passed]
    print(f"\n{len(results) - len(failed)}/{len(results)} passed")
    for r in failed:
        print(f"\n── {r.name} ──\n{r.details}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
