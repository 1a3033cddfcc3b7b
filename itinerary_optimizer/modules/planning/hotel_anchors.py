"""
modules/planning/hotel_anchors.py
-----------------------------------
Lodging anchors and the canonical in-day ordering of time-blocks.

Anchors are synthetic entries at the hotel's coordinates:
  day 1             check-in (inserted at HOTEL_CHECKIN_INSERT_INDEX) + return
  interior days     departure at the start + return at the end
  last day (> 1)    check-out at the start

After insertion every day is stably sorted by _CANONICAL_ORDER, so entries
sharing a block keep their relative order.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from itinerary_optimizer import config
from itinerary_optimizer.schemas.itinerary import EntryOrigin, RouteEntry
from itinerary_optimizer.schemas.places import PlaceCandidate, TimeBlock

logger = logging.getLogger(__name__)

_LODGING_CATEGORIES: frozenset[str] = frozenset({
    "hotel", "lodging", "accommodation", "hostel", "resort",
    "숙소", "호텔", "숙박",
})
_LODGING_NAME_TERMS: tuple[str, ...] = ("hotel", "호텔")

# BREAKFAST, CAFE and LATE_ACTIVITY get named ranks at their natural position
# instead of the unknown-block rank
_CANONICAL_ORDER: tuple[TimeBlock, ...] = (
    TimeBlock.HOTEL_START,
    TimeBlock.HOTEL_CHECKOUT,
    TimeBlock.BREAKFAST,
    TimeBlock.MORNING_ACTIVITY,
    TimeBlock.LUNCH,
    TimeBlock.AFTERNOON_ACTIVITY,
    TimeBlock.CAFE,
    TimeBlock.HOTEL_CHECKIN,
    TimeBlock.DINNER,
    TimeBlock.EVENING_ACTIVITY,
    TimeBlock.LATE_ACTIVITY,
    TimeBlock.HOTEL_RETURN,
)
_RANK: dict[str, int] = {b.value: i for i, b in enumerate(_CANONICAL_ORDER)}
_UNKNOWN_RANK: int = _RANK[TimeBlock.HOTEL_CHECKIN.value]

_ANCHOR_LABELS: dict[TimeBlock, str] = {
    TimeBlock.HOTEL_START:    "departure",
    TimeBlock.HOTEL_CHECKIN:  "check-in",
    TimeBlock.HOTEL_CHECKOUT: "check-out",
    TimeBlock.HOTEL_RETURN:   "return",
}


def is_lodging(place: PlaceCandidate) -> bool:
    if place.category.strip().lower() in _LODGING_CATEGORIES:
        return True
    name = place.name.lower()
    return any(term in name for term in _LODGING_NAME_TERMS)


def find_accommodation(
    candidates: list[PlaceCandidate],
    explicit: Optional[PlaceCandidate] = None,
) -> Optional[PlaceCandidate]:
    """The explicit accommodation, else the first lodging-like candidate."""
    if explicit is not None:
        return explicit
    for cand in candidates:
        if is_lodging(cand):
            return cand
    return None


def block_rank(block) -> int:
    """Position in the canonical day order; unknown blocks share the check-in rank."""
    value = block.value if isinstance(block, TimeBlock) else str(block)
    return _RANK.get(value, _UNKNOWN_RANK)


def canonical_sort(entries: list[RouteEntry]) -> list[RouteEntry]:
    return sorted(entries, key=lambda e: block_rank(e.time_block))


def make_anchor(hotel: PlaceCandidate, block: TimeBlock) -> RouteEntry:
    duration = config.HOTEL_CHECK_MINUTES if block in (
        TimeBlock.HOTEL_CHECKIN, TimeBlock.HOTEL_CHECKOUT,
    ) else 0
    place = replace(
        hotel,
        id=f"{hotel.id}_{block.value.lower()}",
        name=f"{hotel.name} ({_ANCHOR_LABELS[block]})",
        time_block=block,
        visit_duration_minutes=duration,
        is_confirmed=False,
    )
    return RouteEntry(sequence=0, time_block=block, place=place, origin=EntryOrigin.ANCHOR)


def schedule_anchors(
    day_entries: dict[int, list[RouteEntry]],
    trip_days: int,
    hotel: Optional[PlaceCandidate],
) -> dict[int, list[RouteEntry]]:
    """
    Insert lodging anchors into each day, then canonical-sort every day.

    Without a hotel the days are only sorted.
    """
    result: dict[int, list[RouteEntry]] = {}
    for day, entries in day_entries.items():
        entries = list(entries)
        if hotel is not None:
            if day == 1:
                index = min(config.HOTEL_CHECKIN_INSERT_INDEX, len(entries))
                entries.insert(index, make_anchor(hotel, TimeBlock.HOTEL_CHECKIN))
                entries.append(make_anchor(hotel, TimeBlock.HOTEL_RETURN))
            elif day == trip_days:
                entries.insert(0, make_anchor(hotel, TimeBlock.HOTEL_CHECKOUT))
            else:
                entries.insert(0, make_anchor(hotel, TimeBlock.HOTEL_START))
                entries.append(make_anchor(hotel, TimeBlock.HOTEL_RETURN))
        result[day] = canonical_sort(entries)

    if hotel is None:
        logger.debug("No accommodation found; days sorted without anchors")
    return result
