"""
schemas/places.py
-----------------
Immutable input value objects consumed by the optimizer.

PlaceCandidate and ConfirmedScheduleEntry are frozen dataclasses. Candidates
compare and hash by (name, id) only, so pool membership tests (`in`, `remove`)
during balancing and exclusion are value-based, never identity-based.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional


class TimeBlock(str, Enum):
    BREAKFAST          = "BREAKFAST"
    MORNING_ACTIVITY   = "MORNING_ACTIVITY"
    LUNCH              = "LUNCH"
    AFTERNOON_ACTIVITY = "AFTERNOON_ACTIVITY"
    CAFE               = "CAFE"
    DINNER             = "DINNER"
    EVENING_ACTIVITY   = "EVENING_ACTIVITY"
    LATE_ACTIVITY      = "LATE_ACTIVITY"      # confirmed entries outside 06:00–23:00
    # Lodging anchors
    HOTEL_START        = "HOTEL_START"
    HOTEL_CHECKIN      = "HOTEL_CHECKIN"
    HOTEL_CHECKOUT     = "HOTEL_CHECKOUT"
    HOTEL_RETURN       = "HOTEL_RETURN"

    @property
    def is_anchor(self) -> bool:
        return self.value.startswith("HOTEL_")


ANCHOR_BLOCKS: frozenset[TimeBlock] = frozenset(b for b in TimeBlock if b.is_anchor)

MEAL_BLOCKS: tuple[TimeBlock, ...] = (TimeBlock.BREAKFAST, TimeBlock.LUNCH, TimeBlock.DINNER)
ACTIVITY_BLOCKS: tuple[TimeBlock, ...] = (
    TimeBlock.MORNING_ACTIVITY,
    TimeBlock.AFTERNOON_ACTIVITY,
    TimeBlock.EVENING_ACTIVITY,
)


class TransportMode(str, Enum):
    CAR              = "CAR"
    PUBLIC_TRANSPORT = "PUBLIC_TRANSPORT"
    WALKING          = "WALKING"


class OptimizationStrategy(str, Enum):
    DISTANCE = "DISTANCE"
    TIME     = "TIME"
    BALANCED = "BALANCED"


@dataclass(frozen=True)
class PlaceCandidate:
    """
    A ranked place recommendation tagged with the time-block it suits.

    priority 1 = required, >1 = optional. lat/lng are only None for places
    converted from confirmed bookings that carried an address but no coordinates.
    """
    id: str
    name: str
    category: str = field(default="", compare=False)
    lat: Optional[float] = field(default=None, compare=False)
    lng: Optional[float] = field(default=None, compare=False)
    time_block: TimeBlock = field(default=TimeBlock.AFTERNOON_ACTIVITY, compare=False)
    priority: int = field(default=2, compare=False)
    rating: float = field(default=0.0, compare=False)
    visit_duration_minutes: int = field(default=60, compare=False)
    is_confirmed: bool = field(default=False, compare=False)

    @property
    def is_required(self) -> bool:
        return self.priority == 1

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    def with_block(self, block: TimeBlock) -> "PlaceCandidate":
        return replace(self, time_block=block)


# Document types produced by the OCR extraction stage → place category
_DOCUMENT_TYPE_CATEGORIES: dict[str, str] = {
    "FLIGHT_RESERVATION":     "transport",
    "TRAIN_TICKET":           "transport",
    "CAR_RENTAL":             "transport",
    "HOTEL_RESERVATION":      "lodging",
    "RESTAURANT_RESERVATION": "food",
    "ATTRACTION_TICKET":      "sightseeing",
    "EVENT_TICKET":           "event",
}


@dataclass(frozen=True)
class ConfirmedScheduleEntry:
    """An immovable booking extracted from a traveller's documents."""
    title: str
    start: datetime
    end: Optional[datetime] = None
    category: str = ""
    location: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    document_type: str = ""
    source: str = "ocr"

    @property
    def resolved_category(self) -> str:
        if self.category:
            return self.category
        return _DOCUMENT_TYPE_CATEGORIES.get(self.document_type.upper(), "etc")

    def day_number(self, trip_start: date) -> int:
        """1-indexed trip day; the start date itself is day 1."""
        return (self.start.date() - trip_start).days + 1

    def to_candidate(self, block: TimeBlock) -> PlaceCandidate:
        """Confirmed bookings carry maximum priority and rating."""
        digest = hashlib.sha1(f"{self.title}|{self.start.isoformat()}".encode("utf-8")).hexdigest()
        duration = 60
        if self.end is not None and self.end > self.start:
            duration = int((self.end - self.start).total_seconds() // 60)
        return PlaceCandidate(
            id=f"confirmed_{digest[:12]}",
            name=self.title,
            category=self.resolved_category,
            lat=self.lat,
            lng=self.lng,
            time_block=block,
            priority=1,
            rating=5.0,
            visit_duration_minutes=duration,
            is_confirmed=True,
        )
