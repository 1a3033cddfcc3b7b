"""
schemas/payload.py
------------------
Pydantic request models for the JSON boundary (CLI input, upstream services).

They accept collaborator payloads as plain JSON and convert into the engine's
immutable dataclasses via `to_request()`. Field constraints reject obviously
malformed input before it reaches the optimizer.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from itinerary_optimizer.schemas.places import (
    ConfirmedScheduleEntry,
    OptimizationStrategy,
    PlaceCandidate,
    TimeBlock,
    TransportMode,
)
from itinerary_optimizer.schemas.request import TripOptimizationRequest


class PlaceCandidateIn(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = ""
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    time_block: TimeBlock = TimeBlock.AFTERNOON_ACTIVITY
    priority: int = Field(2, ge=1)
    rating: float = Field(0.0, ge=0, le=5)
    visit_duration_minutes: int = Field(60, ge=0)

    def to_candidate(self) -> PlaceCandidate:
        return PlaceCandidate(**self.model_dump())


class ConfirmedEntryIn(BaseModel):
    title: str = Field(..., min_length=1)
    start: datetime
    end: Optional[datetime] = None
    category: str = ""
    location: str = ""
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    document_type: str = ""
    source: str = "ocr"

    def to_entry(self) -> ConfirmedScheduleEntry:
        return ConfirmedScheduleEntry(**self.model_dump())


class TripOptimizationPayload(BaseModel):
    trip_days: int = Field(..., ge=1, description="Number of trip days")
    start_date: date
    transport_mode: TransportMode = TransportMode.CAR
    strategy: OptimizationStrategy = OptimizationStrategy.BALANCED
    # JSON object keys are strings; pydantic coerces "1" → 1
    daily_candidates: Dict[int, List[PlaceCandidateIn]] = Field(default_factory=dict)
    candidate_pool: List[PlaceCandidateIn] = Field(default_factory=list)
    confirmed_entries: List[ConfirmedEntryIn] = Field(default_factory=list)
    accommodation: Optional[PlaceCandidateIn] = None
    category_quotas: Optional[Dict[str, int]] = None
    respect_time_blocks: bool = True
    random_seed: Optional[int] = None

    def to_request(self) -> TripOptimizationRequest:
        return TripOptimizationRequest(
            trip_days=self.trip_days,
            start_date=self.start_date,
            transport_mode=self.transport_mode,
            strategy=self.strategy,
            daily_candidates={
                day: [c.to_candidate() for c in pool]
                for day, pool in self.daily_candidates.items()
            },
            candidate_pool=[c.to_candidate() for c in self.candidate_pool],
            confirmed_entries=[e.to_entry() for e in self.confirmed_entries],
            accommodation=self.accommodation.to_candidate() if self.accommodation else None,
            category_quotas=self.category_quotas,
            respect_time_blocks=self.respect_time_blocks,
            random_seed=self.random_seed,
        )
