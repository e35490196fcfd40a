"""Safe Stride Backend — Route Synthesis

Builds a straight-line "recommended" route between two points and two
alternatives bowed out to one side of it. The alternatives follow

    point(i) + perp * sin(i/N * pi) * deviation

where ``perp`` is the unit vector of (end - start) rotated 90°, so they meet
the primary route at both ends and bulge furthest at the midpoint. This is a
visual stand-in for real alternate roads; no road network is involved.

Safety scores are random integers. Alternatives draw from lower ranges than
the primary route so the recommendation always looks like the safer choice.
"""

import logging
import math
from typing import Optional

import numpy as np

from config import ALTERNATIVE_ROUTES, PRIMARY_SCORE_RANGE, ROUTE_SEGMENTS
from models import RouteOption, RoutePoint, RouteResult

logger = logging.getLogger("safestride.route")


def interpolate_route(start: RoutePoint, end: RoutePoint, segments: int = ROUTE_SEGMENTS) -> list[RoutePoint]:
    """``segments + 1`` evenly spaced points; the ends are exactly ``start`` and ``end``."""
    d_lat = end.lat - start.lat
    d_lng = end.lng - start.lng
    points = []
    for i in range(segments + 1):
        if i == segments:
            points.append(RoutePoint(lat=end.lat, lng=end.lng))
            continue
        ratio = i / segments
        points.append(RoutePoint(lat=start.lat + d_lat * ratio, lng=start.lng + d_lng * ratio))
    return points


def _perpendicular(start: RoutePoint, end: RoutePoint) -> tuple[float, float]:
    d_lat = end.lat - start.lat
    d_lng = end.lng - start.lng
    length = math.hypot(d_lat, d_lng)
    if length == 0:
        return 0.0, 0.0
    return -d_lng / length, d_lat / length


def deviate_route(
    route: list[RoutePoint], start: RoutePoint, end: RoutePoint, deviation: float,
) -> list[RoutePoint]:
    """Displace the interior of ``route`` sideways by a half sine wave."""
    perp_lat, perp_lng = _perpendicular(start, end)
    n = len(route) - 1
    out = []
    for i, point in enumerate(route):
        if i == 0 or i == n:
            out.append(RoutePoint(lat=point.lat, lng=point.lng))
            continue
        offset = math.sin(i / n * math.pi) * deviation
        out.append(RoutePoint(lat=point.lat + perp_lat * offset, lng=point.lng + perp_lng * offset))
    return out


def _score(rng: np.random.Generator, score_range: tuple[int, int]) -> int:
    low, high = score_range
    return int(rng.integers(low, high))


def synthesize_route(
    start: RoutePoint,
    end: RoutePoint,
    rng: Optional[np.random.Generator] = None,
) -> RouteResult:
    """Primary route plus two deviated alternatives, each with a safety score.

    Pass a seeded ``rng`` for reproducible scores; the geometry is fully
    determined by ``start`` and ``end``.
    """
    rng = rng or np.random.default_rng()

    route = interpolate_route(start, end)
    safety_score = _score(rng, PRIMARY_SCORE_RANGE)

    alternatives = [
        RouteOption(
            route=deviate_route(route, start, end, deviation),
            safetyScore=_score(rng, score_range),
        )
        for deviation, score_range in ALTERNATIVE_ROUTES
    ]

    logger.info(
        f"Synthesized route ({start.lat:.4f}, {start.lng:.4f}) → ({end.lat:.4f}, {end.lng:.4f}): "
        f"score {safety_score}, alternatives {[a.safetyScore for a in alternatives]}"
    )
    return RouteResult(route=route, safetyScore=safety_score, alternativeRoutes=alternatives)
