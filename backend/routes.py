"""Safe Stride Backend — FastAPI Routes"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cache import geocode_cache
from config import (
    CORS_ORIGINS, ITEMS_PER_PAGE, MAX_FEEDBACK_REPORTS,
    RATE_LIMIT, RATE_WINDOW, SIMULATED_LATENCY_SECONDS,
)
from crime_lookup import (
    lookup_city_coordinate, nearest_city, paginate,
    resolve_crime_data, search_crimes_by_text,
)
from data_fetchers import geocode_place
from models import (
    CityCoordinate, CrimeListResponse, CrimeSearchResponse,
    FeedbackReport, FeedbackResponse, LocationRequest,
    RouteOption, RouteOptionResponse, RoutePoint,
    RouteRequest, RouteResponse,
)
from route_synth import synthesize_route
from sample_data import CrimeDataStore, get_store
from scoring import classify_route_safety, compute_heatmap_points, summarize_incidents

logger = logging.getLogger("safestride")


async def _simulate_latency():
    """Optional artificial delay so the UI can show its loading states."""
    if SIMULATED_LATENCY_SECONDS > 0:
        await asyncio.sleep(SIMULATED_LATENCY_SECONDS)


# ─────────────────────────── App Setup ──────────────────────────

app = FastAPI(title="Safe Stride API", version="1.0.0")

_allowed_origins = CORS_ORIGINS or [
    f"http://localhost:{p}" for p in range(5173, 5180)
] + [
    f"http://localhost:{p}" for p in range(8080, 8090)
] + [
    f"http://127.0.0.1:{p}" for p in range(5173, 5180)
] + [
    f"http://127.0.0.1:{p}" for p in range(8080, 8090)
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─────────────────────────── Startup Event ──────────────────────

@app.on_event("startup")
async def startup_event():
    """Build the crime data store before the first request."""
    store = get_store()
    logger.info(f"Crime data ready: {len(store.cities)} cities, {len(store.incidents)} incidents")


# ─────────────────────────── Rate Limiting ──────────────────────

_rate_store: dict[str, list[float]] = {}
_RATE_EVICT_INTERVAL = 300  # evict stale IPs every 5 minutes
_last_rate_evict = 0.0


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    client_ip = request.client.host if request.client else "unknown"
    now = time.time()

    global _last_rate_evict
    if now - _last_rate_evict > _RATE_EVICT_INTERVAL:
        stale_ips = [ip for ip, timestamps in _rate_store.items()
                     if not timestamps or now - timestamps[-1] > RATE_WINDOW * 2]
        for ip in stale_ips:
            del _rate_store[ip]
        _last_rate_evict = now

    timestamps = [t for t in _rate_store.get(client_ip, []) if now - t < RATE_WINDOW]
    _rate_store[client_ip] = timestamps

    if len(timestamps) >= RATE_LIMIT:
        logger.warning(f"Rate limit hit for {client_ip}")
        return JSONResponse(
            status_code=429,
            content={"detail": "Rate limit exceeded. Try again in a minute."},
        )

    timestamps.append(now)
    return await call_next(request)


# ─────────────────────────── Crimes ─────────────────────────────

@app.post("/api/crimes/nearby", response_model=CrimeListResponse)
async def get_nearby_crimes(req: LocationRequest, store: CrimeDataStore = Depends(get_store)):
    """Incidents around a coordinate, with heat-map points for the map layer."""
    await _simulate_latency()
    incidents = resolve_crime_data(req.lat, req.lng, store)
    city = nearest_city(req.lat, req.lng, store)
    logger.info(f"Nearby request ({req.lat:.4f}, {req.lng:.4f}) → {len(incidents)} incidents, city {city}")

    notices = []
    if not incidents:
        notices.append(f"No crime data found near {city.title()}.")

    return CrimeListResponse(
        incidents=incidents,
        heatmapPoints=compute_heatmap_points(incidents),
        summary=summarize_incidents(incidents),
        nearestCity=city,
        notices=notices,
    )


@app.get("/api/crimes/search", response_model=CrimeSearchResponse)
async def search_crimes(
    query: str = Query(..., min_length=1, max_length=200),
    page: int = Query(1, ge=1),
    perPage: int = Query(ITEMS_PER_PAGE, ge=1, le=100),
    store: CrimeDataStore = Depends(get_store),
):
    if not query.strip():
        raise HTTPException(status_code=400, detail="Please enter a location to search")

    await _simulate_latency()
    notices: list[str] = []
    incidents = search_crimes_by_text(query, store, notify=notices.append)
    for notice in notices:
        logger.warning(notice)

    paged = paginate(incidents, page, perPage)
    return CrimeSearchResponse(
        query=query.strip(),
        incidents=paged["items"],
        page=paged["page"],
        perPage=paged["perPage"],
        total=paged["total"],
        totalPages=paged["totalPages"],
        notices=notices,
    )


@app.get("/api/heatmap")
async def get_heatmap(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    store: CrimeDataStore = Depends(get_store),
):
    incidents = resolve_crime_data(lat, lng, store)
    points = compute_heatmap_points(incidents)
    return {"points": points, "count": len(points)}


# ─────────────────────────── Cities ─────────────────────────────

@app.get("/api/cities", response_model=list[CityCoordinate])
async def list_cities(store: CrimeDataStore = Depends(get_store)):
    return list(store.cities)


@app.get("/api/cities/{name}", response_model=CityCoordinate)
async def get_city(name: str, store: CrimeDataStore = Depends(get_store)):
    city = lookup_city_coordinate(name, store)
    if city is None:
        raise HTTPException(status_code=404, detail=f"Unknown city: {name}")
    return city


# ─────────────────────────── Safe Route ─────────────────────────

async def _resolve_endpoint(
    point: Optional[LocationRequest], name: str, label: str, store: CrimeDataStore,
) -> RoutePoint:
    if point is not None:
        return RoutePoint(lat=point.lat, lng=point.lng)
    if not name.strip():
        raise HTTPException(status_code=400, detail="Please enter both start and end locations")
    place = await geocode_place(name, store)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Could not find {label} location: {name}")
    return RoutePoint(lat=place["lat"], lng=place["lng"])


def _labelled(option: RouteOption, label: str) -> RouteOptionResponse:
    return RouteOptionResponse(
        route=option.route,
        safetyScore=option.safetyScore,
        label=label,
        badge=classify_route_safety(option.safetyScore),
    )


@app.post("/api/route", response_model=RouteResponse)
async def get_safe_route(req: RouteRequest, store: CrimeDataStore = Depends(get_store)):
    """Recommended route plus alternatives between two points or place names."""
    start = await _resolve_endpoint(req.start, req.startName, "start", store)
    end = await _resolve_endpoint(req.end, req.endName, "end", store)

    await _simulate_latency()
    rng = np.random.default_rng(req.seed)
    result = synthesize_route(start, end, rng)

    recommended = RouteOption(route=result.route, safetyScore=result.safetyScore)
    return RouteResponse(
        start=start,
        end=end,
        recommended=_labelled(recommended, "Recommended Route"),
        alternatives=[
            _labelled(alt, f"Alternative {i + 1}")
            for i, alt in enumerate(result.alternativeRoutes)
        ],
    )


# ─────────────────────────── Feedback ───────────────────────────

feedback_reports: list[dict] = []


@app.post("/api/feedback", response_model=FeedbackResponse)
async def submit_feedback(report: FeedbackReport):
    """Accept a location safety report; kept in memory only."""
    report_id = str(uuid.uuid4())[:8]
    feedback_reports.append({
        "id": report_id,
        **report.model_dump(),
        "submittedAt": datetime.now(timezone.utc).isoformat(),
    })
    if len(feedback_reports) > MAX_FEEDBACK_REPORTS:
        feedback_reports.pop(0)

    logger.info(f"Feedback submitted: {report.safetyRating} at {report.location!r}")
    return FeedbackResponse(id=report_id, status="submitted")


# ─────────────────────────── Utility Endpoints ──────────────────

@app.get("/api/health")
async def health(store: CrimeDataStore = Depends(get_store)):
    return {
        "status": "ok",
        "version": app.version,
        "cities": len(store.cities),
        "incidents": len(store.incidents),
        "geocodeCacheSize": len(geocode_cache),
    }
