"""
modules/tool_usage/distance_tool.py
-------------------------------------
Distance / travel-time estimates using the Haversine formula and a per-mode
speed table. No external HTTP calls are made; this is the local fallback for
every RouteProvider and the cost source for beam search and 2-opt.

Config knobs (config.py):
  SPEED_KMH_CAR / SPEED_KMH_PUBLIC_TRANSPORT / SPEED_KMH_WALKING / SPEED_KMH_DEFAULT
  UNKNOWN_LEG_DISTANCE_KM -- leg length when an endpoint has no coordinates
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from itinerary_optimizer import config
from itinerary_optimizer.schemas.places import PlaceCandidate, TransportMode

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

_EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    # float rounding can push a above 1 for antipodal points
    return 2 * r * math.asin(math.sqrt(min(a, 1.0)))


def speed_kmh(mode: Optional[TransportMode]) -> float:
    """Average door-to-door speed for a transport mode."""
    if mode is TransportMode.CAR:
        return config.SPEED_KMH_CAR
    if mode is TransportMode.PUBLIC_TRANSPORT:
        return config.SPEED_KMH_PUBLIC_TRANSPORT
    if mode is TransportMode.WALKING:
        return config.SPEED_KMH_WALKING
    return config.SPEED_KMH_DEFAULT


def _km_to_minutes(km: float, speed: float) -> float:
    """Straight-line km to minutes at a given speed."""
    return (km / speed) * 60.0


def place_distance_km(a: PlaceCandidate, b: PlaceCandidate) -> float:
    """Haversine km between two places; a fixed estimate when coordinates are missing."""
    if not (a.has_coordinates and b.has_coordinates):
        return config.UNKNOWN_LEG_DISTANCE_KM
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


# ---------------------------------------------------------------------------
# RouteLeg
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RouteLeg:
    """Derived distance/duration edge between two consecutive stops."""
    distance_km: float
    duration_minutes: float
    source: str = "haversine"   # "haversine" | "provider"


# ---------------------------------------------------------------------------
# DistanceTool
# ---------------------------------------------------------------------------


class DistanceTool:
    """
    Computes distance and travel time between places using the Haversine
    formula plus the per-mode speed table.
    """

    def leg(
        self,
        origin: PlaceCandidate,
        destination: PlaceCandidate,
        mode: Optional[TransportMode] = None,
    ) -> RouteLeg:
        """Return the estimated leg between two places."""
        km = place_distance_km(origin, destination)
        if km == 0.0:
            return RouteLeg(0.0, 0.0)
        return RouteLeg(km, _km_to_minutes(km, speed_kmh(mode)))

    def travel_time_minutes(
        self,
        origin: PlaceCandidate,
        destination: PlaceCandidate,
        mode: Optional[TransportMode] = None,
    ) -> float:
        return self.leg(origin, destination, mode).duration_minutes

    def route(
        self,
        places: list[PlaceCandidate],
        mode: Optional[TransportMode] = None,
    ) -> list[RouteLeg]:
        """Legs between consecutive places (len(places) - 1 items)."""
        return [self.leg(a, b, mode) for a, b in zip(places, places[1:])]

    def distance_matrix(self, places: list[PlaceCandidate]) -> list[list[float]]:
        """Full n x n Haversine matrix [km]."""
        return [
            [0.0 if i == j else place_distance_km(a, b) for j, b in enumerate(places)]
            for i, a in enumerate(places)
        ]
