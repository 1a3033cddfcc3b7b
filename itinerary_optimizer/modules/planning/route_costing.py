"""
modules/planning/route_costing.py
-----------------------------------
Annotates an ordered day route with per-leg and running distance/duration.

A configured RouteProvider is tried first (one call per day). Any failure of
that call is logged and replaced by the Haversine/speed-table estimate for
that call only; other days and the request as a whole are unaffected.
"""

from __future__ import annotations

import logging
from typing import Optional

from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool, RouteLeg
from itinerary_optimizer.modules.tool_usage.route_provider import RouteProvider
from itinerary_optimizer.schemas.itinerary import DayPlan
from itinerary_optimizer.schemas.places import PlaceCandidate, TransportMode

logger = logging.getLogger(__name__)


class RouteCostCalculator:

    def __init__(
        self,
        provider: Optional[RouteProvider] = None,
        distance_tool: DistanceTool | None = None,
    ) -> None:
        self.provider = provider
        self.distance_tool = distance_tool or DistanceTool()

    def legs(
        self,
        places: list[PlaceCandidate],
        mode: TransportMode,
        day_number: int = 0,
    ) -> tuple[list[RouteLeg], str]:
        """Return (legs, source) for consecutive places; source is "provider" or "haversine"."""
        if len(places) < 2:
            return [], "haversine"

        if self.provider is not None:
            try:
                legs = self.provider.route(places, mode)
                if len(legs) != len(places) - 1:
                    raise ValueError(
                        f"provider returned {len(legs)} legs for {len(places)} stops"
                    )
                return legs, legs[0].source
            except Exception as exc:  # any provider failure falls back
                logger.warning(
                    "Day %s: route provider %s failed (%s: %s); using Haversine estimate",
                    day_number, getattr(self.provider, "name", "?"), type(exc).__name__, exc,
                )

        return self.distance_tool.route(places, mode), "haversine"

    def annotate(self, day: DayPlan, mode: TransportMode) -> DayPlan:
        """Fill leg / cumulative distance and duration on every entry of `day` in place."""
        legs, source = self.legs(day.places, mode, day_number=day.day_number)

        total_km = 0.0
        total_min = 0.0
        for idx, entry in enumerate(day.entries):
            entry.sequence = idx
            if idx == 0:
                entry.leg_distance_km = 0.0
                entry.leg_duration_minutes = 0.0
            else:
                leg = legs[idx - 1]
                entry.leg_distance_km = leg.distance_km
                entry.leg_duration_minutes = leg.duration_minutes
                total_km += leg.distance_km
                total_min += leg.duration_minutes
            entry.cumulative_distance_km = total_km
            entry.cumulative_duration_minutes = total_min

        day.total_distance_km = total_km
        day.total_duration_minutes = total_min
        day.route_source = source
        return day
