"""
schemas/itinerary.py
--------------------
Dataclass definitions for the optimizer's output structures.

Each DayPlan is an ordered list of RouteEntry items carrying the running
distance/duration from the first stop of the day. The TripItinerary wraps the
day map together with a success flag and per-day failures, so a failing day
never discards the days that were computed successfully.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from itinerary_optimizer.schemas.places import PlaceCandidate, TimeBlock


class EntryOrigin(str, Enum):
    CONFIRMED = "CONFIRMED"   # booking from document extraction, immovable
    SELECTED  = "SELECTED"    # chosen by the optimizer (or assigned by clustering)
    ANCHOR    = "ANCHOR"      # synthetic lodging check-in/out/departure/return


@dataclass
class RouteEntry:
    """A single stop in a day's route."""
    sequence: int
    time_block: TimeBlock
    place: PlaceCandidate
    origin: EntryOrigin = EntryOrigin.SELECTED
    leg_distance_km: float = 0.0           # from the previous entry
    leg_duration_minutes: float = 0.0
    cumulative_distance_km: float = 0.0    # running total since the first entry
    cumulative_duration_minutes: float = 0.0

    @property
    def is_fixed(self) -> bool:
        return self.origin is EntryOrigin.CONFIRMED

    @property
    def is_anchor(self) -> bool:
        return self.origin is EntryOrigin.ANCHOR


@dataclass
class DayPlan:
    """One day's ordered route."""
    day_number: int
    date: Optional[date] = None
    entries: list[RouteEntry] = field(default_factory=list)
    total_distance_km: float = 0.0
    total_duration_minutes: float = 0.0
    selection_method: str = ""        # "beam_search" | "greedy"
    route_source: str = "haversine"   # "provider" | "haversine"

    @property
    def places(self) -> list[PlaceCandidate]:
        return [e.place for e in self.entries]

    @property
    def visit_count(self) -> int:
        """Non-anchor stops only."""
        return sum(1 for e in self.entries if not e.is_anchor)


@dataclass
class DayFailure:
    day_number: int
    error_type: str
    message: str


@dataclass
class TravelStatistics:
    total_days: int = 0
    recommended_places: int = 0
    candidate_places: int = 0
    total_distance_km: float = 0.0
    total_duration_minutes: float = 0.0
    average_places_per_day: float = 0.0
    optimization_rate: float = 0.0    # recommended / candidates, percent

    @classmethod
    def calculate(cls, days: dict[int, DayPlan], candidate_count: int) -> "TravelStatistics":
        recommended = sum(d.visit_count for d in days.values())
        n_days = len(days)
        return cls(
            total_days=n_days,
            recommended_places=recommended,
            candidate_places=candidate_count,
            total_distance_km=sum(d.total_distance_km for d in days.values()),
            total_duration_minutes=sum(d.total_duration_minutes for d in days.values()),
            average_places_per_day=recommended / n_days if n_days else 0.0,
            optimization_rate=recommended / candidate_count * 100 if candidate_count else 0.0,
        )


@dataclass
class TripItinerary:
    """
    Top-level result of one optimization run.

    success is False when the request was invalid or when at least one day
    failed; `days` still holds every day that completed.
    """
    success: bool = True
    message: str = ""
    days: dict[int, DayPlan] = field(default_factory=dict)
    failures: dict[int, DayFailure] = field(default_factory=dict)
    selection_method: str = ""
    statistics: TravelStatistics = field(default_factory=TravelStatistics)

    @classmethod
    def error(cls, message: str) -> "TripItinerary":
        return cls(success=False, message=message)

    @property
    def failed_days(self) -> list[int]:
        return sorted(self.failures)
