"""
schemas/request.py
------------------
TripOptimizationRequest: constructed per call, consumed entirely within one
optimization run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from itinerary_optimizer.schemas.places import (
    ConfirmedScheduleEntry,
    OptimizationStrategy,
    PlaceCandidate,
    TransportMode,
)


@dataclass
class TripOptimizationRequest:
    """
    Attributes:
        trip_days:          Number of days (day 1 = start_date).
        start_date:         First day of the trip; confirmed entries map relative to it.
        daily_candidates:   Ranked per-day pools from the recommendation stage.
        candidate_pool:     Candidates not yet assigned to a day. Required ones
                            (priority 1) are clustered into days, optional ones
                            top up per-category quotas.
        confirmed_entries:  Immovable bookings.
        accommodation:      Lodging anchor; detected from the candidates when None.
        category_quotas:    Minimum places per category per day; None → config default.
        respect_time_blocks: Keep canonical block order when reordering visits.
        random_seed:        Seed for the clustering's first centroid.
    """
    trip_days: int
    start_date: date
    transport_mode: TransportMode = TransportMode.CAR
    daily_candidates: dict[int, list[PlaceCandidate]] = field(default_factory=dict)
    candidate_pool: list[PlaceCandidate] = field(default_factory=list)
    confirmed_entries: list[ConfirmedScheduleEntry] = field(default_factory=list)
    accommodation: Optional[PlaceCandidate] = None
    strategy: OptimizationStrategy = OptimizationStrategy.BALANCED
    category_quotas: Optional[dict[str, int]] = None
    respect_time_blocks: bool = True
    random_seed: Optional[int] = None

    @property
    def total_candidates(self) -> int:
        return sum(len(pool) for pool in self.daily_candidates.values()) + len(self.candidate_pool)

    def all_candidates(self) -> list[PlaceCandidate]:
        places: list[PlaceCandidate] = []
        for day in sorted(self.daily_candidates):
            places.extend(self.daily_candidates[day])
        places.extend(self.candidate_pool)
        return places
