"""
schemas package: immutable inputs, the per-call request and itinerary outputs.
"""
from itinerary_optimizer.schemas.places import (
    ANCHOR_BLOCKS,
    ConfirmedScheduleEntry,
    OptimizationStrategy,
    PlaceCandidate,
    TimeBlock,
    TransportMode,
)
from itinerary_optimizer.schemas.itinerary import (
    DayFailure,
    DayPlan,
    EntryOrigin,
    RouteEntry,
    TravelStatistics,
    TripItinerary,
)
from itinerary_optimizer.schemas.request import TripOptimizationRequest
from itinerary_optimizer.schemas.payload import (
    ConfirmedEntryIn,
    PlaceCandidateIn,
    TripOptimizationPayload,
)

__all__ = [
    "ANCHOR_BLOCKS",
    "ConfirmedScheduleEntry",
    "OptimizationStrategy",
    "PlaceCandidate",
    "TimeBlock",
    "TransportMode",
    "DayFailure",
    "DayPlan",
    "EntryOrigin",
    "RouteEntry",
    "TravelStatistics",
    "TripItinerary",
    "TripOptimizationRequest",
    "ConfirmedEntryIn",
    "PlaceCandidateIn",
    "TripOptimizationPayload",
]
