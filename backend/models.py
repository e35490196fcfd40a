"""Safe Stride Backend — Pydantic Models"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["low", "medium", "high"]


# ─────────────────────────── Data store records ─────────────────

class CityCoordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str  # lowercase canonical key, e.g. "new york"
    lat: float
    lng: float


class CrimeIncident(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    lat: float
    lng: float
    type: str
    severity: Severity
    date: Optional[str] = None  # ISO date, e.g. "2025-04-02"
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


# ─────────────────────────── Routes ─────────────────────────────

class RoutePoint(BaseModel):
    lat: float
    lng: float


class RouteOption(BaseModel):
    route: list[RoutePoint]
    safetyScore: int


class RouteResult(BaseModel):
    route: list[RoutePoint]
    safetyScore: int
    alternativeRoutes: list[RouteOption] = []


# ─────────────────────────── Requests ───────────────────────────

class LocationRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RouteRequest(BaseModel):
    """Either coordinates or place names for each end; coordinates win."""
    start: Optional[LocationRequest] = None
    end: Optional[LocationRequest] = None
    startName: str = ""
    endName: str = ""
    seed: Optional[int] = None  # fixes the random safety scores


class FeedbackReport(BaseModel):
    location: str = Field(..., min_length=5)
    safetyRating: Literal["safe", "unsafe", "dangerous"] = "safe"
    incidentType: Optional[str] = None
    description: str = Field(..., min_length=10, max_length=500)
    date: Optional[str] = None
    time: Optional[str] = None


# ─────────────────────────── Responses ──────────────────────────

class SafetyBadge(BaseModel):
    label: str
    color: str  # safe, caution, danger, muted


class HeatmapPoint(BaseModel):
    lat: float
    lng: float
    weight: float
    type: str = "Unknown"
    severity: Severity = "low"
    icon: str = "📌"
    date: Optional[str] = None
    description: str = ""


class IncidentSummary(BaseModel):
    total: int
    bySeverity: dict[str, int]
    byType: dict[str, int]


class CrimeListResponse(BaseModel):
    incidents: list[CrimeIncident]
    heatmapPoints: list[HeatmapPoint] = []
    summary: IncidentSummary
    nearestCity: str = ""
    notices: list[str] = []


class CrimeSearchResponse(BaseModel):
    query: str
    incidents: list[CrimeIncident]
    page: int
    perPage: int
    total: int
    totalPages: int
    notices: list[str] = []


class RouteOptionResponse(RouteOption):
    label: str
    badge: SafetyBadge


class RouteResponse(BaseModel):
    start: RoutePoint
    end: RoutePoint
    recommended: RouteOptionResponse
    alternatives: list[RouteOptionResponse]


class FeedbackResponse(BaseModel):
    id: str
    status: str
