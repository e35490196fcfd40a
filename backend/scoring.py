"""Safe Stride Backend — Presentation Scoring

Turns incidents and route scores into what the map and tables display:
heat-map weights, severity and safety badges, icons and summary counts.
"""

import logging
from collections import Counter
from typing import Iterable

from config import CAUTION_THRESHOLD, ICON_MAP, SAFE_THRESHOLD, SEVERITY_WEIGHTS
from models import CrimeIncident, HeatmapPoint, IncidentSummary, SafetyBadge

logger = logging.getLogger("safestride.scoring")

_SEVERITY_COLORS = {
    "high": "danger",
    "medium": "caution",
    "low": "safe",
}


def get_icon(crime_type: str) -> str:
    crime_lower = crime_type.lower()
    for keyword, icon in ICON_MAP.items():
        if keyword in crime_lower:
            return icon
    return "📌"


def severity_weight(severity: str) -> float:
    """Heat-map weight for a severity; unknown severities count as the lowest."""
    return SEVERITY_WEIGHTS.get(severity, min(SEVERITY_WEIGHTS.values()))


def severity_badge(severity: str) -> SafetyBadge:
    color = _SEVERITY_COLORS.get(severity, "muted")
    label = severity[:1].upper() + severity[1:] if severity else "Unknown"
    return SafetyBadge(label=label, color=color)


def classify_route_safety(score: int) -> SafetyBadge:
    """Badge for a 0-100 route safety score.

    Mapping:
      >= 70  → Safe
      50-69  → Use Caution
      < 50   → Avoid
    """
    if score >= SAFE_THRESHOLD:
        return SafetyBadge(label="Safe", color="safe")
    elif score >= CAUTION_THRESHOLD:
        return SafetyBadge(label="Use Caution", color="caution")
    else:
        return SafetyBadge(label="Avoid", color="danger")


def _display_type(raw_type: str) -> str:
    crime_type = (raw_type or "").strip()
    if not crime_type or crime_type in ("0", "None", "Null", "N/A"):
        return "Unknown"
    return crime_type.title()


def compute_heatmap_points(incidents: Iterable[CrimeIncident]) -> list[HeatmapPoint]:
    """One heat-map point per incident, weighted by severity.

    The front end's heat layer does the density math; this only supplies
    positions and weights.
    """
    return [
        HeatmapPoint(
            lat=inc.lat,
            lng=inc.lng,
            weight=severity_weight(inc.severity),
            type=_display_type(inc.type),
            severity=inc.severity,
            icon=get_icon(inc.type),
            date=inc.date,
            description=inc.description or "",
        )
        for inc in incidents
    ]


def summarize_incidents(incidents: Iterable[CrimeIncident]) -> IncidentSummary:
    incidents = list(incidents)
    by_severity = {level: 0 for level in SEVERITY_WEIGHTS}
    by_severity.update(Counter(inc.severity for inc in incidents))
    by_type = Counter(_display_type(inc.type) for inc in incidents)
    return IncidentSummary(
        total=len(incidents),
        bySeverity=by_severity,
        byType=dict(by_type.most_common()),
    )
