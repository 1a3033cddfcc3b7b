"""
modules/planning/fixed_schedule.py
------------------------------------
Places confirmed bookings on their trip day / time-block and fills the rest
of the day greedily from the ranked candidate pool.

Block from the booking's start hour:
  [6, 10)  BREAKFAST          [14, 17) AFTERNOON_ACTIVITY
  [10, 12) MORNING_ACTIVITY   [17, 20) DINNER
  [12, 14) LUNCH              [20, 23) EVENING_ACTIVITY
  otherwise LATE_ACTIVITY

Greedy fill per day:
  1. drop candidates whose block is already occupied
  2. best-rated BREAKFAST, LUNCH, DINNER when free
  3. top-N activities (morning/afternoon/evening pooled, rating desc),
     N = max(0, GREEDY_ACTIVITY_SLOTS − selected so far)
  4. one CAFE while the day holds fewer than MAX_PLACES_PER_DAY places
"""

from __future__ import annotations

import logging
from datetime import date

from itinerary_optimizer import config
from itinerary_optimizer.schemas.places import (
    ACTIVITY_BLOCKS,
    MEAL_BLOCKS,
    ConfirmedScheduleEntry,
    PlaceCandidate,
    TimeBlock,
)

logger = logging.getLogger(__name__)

_HOUR_BLOCKS: tuple[tuple[int, int, TimeBlock], ...] = (
    (6, 10, TimeBlock.BREAKFAST),
    (10, 12, TimeBlock.MORNING_ACTIVITY),
    (12, 14, TimeBlock.LUNCH),
    (14, 17, TimeBlock.AFTERNOON_ACTIVITY),
    (17, 20, TimeBlock.DINNER),
    (20, 23, TimeBlock.EVENING_ACTIVITY),
)


def time_block_for_hour(hour: int) -> TimeBlock:
    for lo, hi, block in _HOUR_BLOCKS:
        if lo <= hour < hi:
            return block
    return TimeBlock.LATE_ACTIVITY


def map_confirmed_entries(
    entries: list[ConfirmedScheduleEntry],
    start_date: date,
    trip_days: int,
) -> dict[int, list[PlaceCandidate]]:
    """Day number → confirmed places (in input order), each tagged with its block."""
    by_day: dict[int, list[PlaceCandidate]] = {}
    for entry in entries:
        day = entry.day_number(start_date)
        if day < 1:
            continue
        if day > trip_days:
            logger.debug(
                "Confirmed entry %r on day %d is outside a %d-day trip; dropped",
                entry.title, day, trip_days,
            )
            continue
        block = time_block_for_hour(entry.start.hour)
        by_day.setdefault(day, []).append(entry.to_candidate(block))
    return by_day


def _best_rated(pool: list[PlaceCandidate]) -> PlaceCandidate:
    # max() keeps the first of equal ratings
    return max(pool, key=lambda c: c.rating)


def greedy_fill(
    pool: list[PlaceCandidate],
    fixed: list[PlaceCandidate],
) -> list[PlaceCandidate]:
    """
    Return the places chosen from `pool` for one day.

    `fixed` holds the day's confirmed and assigned places; their blocks count
    as occupied and they count towards the slot limits.
    """
    occupied = {p.time_block for p in fixed}
    taken = set(fixed)
    available = [c for c in pool if c.time_block not in occupied and c not in taken]

    selected: list[PlaceCandidate] = []

    for block in MEAL_BLOCKS:
        meals = [c for c in available if c.time_block == block]
        if meals:
            selected.append(_best_rated(meals))

    activities = [c for c in available if c.time_block in ACTIVITY_BLOCKS]
    activities.sort(key=lambda c: c.rating, reverse=True)
    slots = max(0, config.GREEDY_ACTIVITY_SLOTS - len(fixed) - len(selected))
    selected.extend(activities[:slots])

    cafes = [c for c in available if c.time_block == TimeBlock.CAFE]
    if cafes and len(fixed) + len(selected) < config.MAX_PLACES_PER_DAY:
        selected.append(_best_rated(cafes))

    return selected
