"""
modules/planning/category_balancer.py
---------------------------------------
Tops up each clustered day so it meets a minimum count per category.

Quotas come from the request (or config.DEFAULT_CATEGORY_QUOTAS), e.g.
{"food": 2, "sightseeing": 2}. Missing places are pulled from the optional
pool in input order; a pulled candidate is removed from the pool so it is
never placed on two days. An exhausted pool is not an error: the day simply
ends up below quota.
"""

from __future__ import annotations

import logging
from collections import Counter

from itinerary_optimizer.schemas.places import PlaceCandidate

logger = logging.getLogger(__name__)


def balance_categories(
    day_places: dict[int, list[PlaceCandidate]],
    quotas: dict[str, int],
    optional_pool: list[PlaceCandidate],
) -> dict[int, list[PlaceCandidate]]:
    """
    Return new per-day lists with quota shortfalls filled from `optional_pool`.

    Neither input is mutated. Days are processed in ascending order, so earlier
    days get first pick of a scarce category.
    """
    pool = list(optional_pool)
    balanced: dict[int, list[PlaceCandidate]] = {d: list(p) for d, p in day_places.items()}

    if not quotas:
        return balanced

    for day in sorted(balanced):
        places = balanced[day]
        counts = Counter(p.category for p in places)
        for category, minimum in quotas.items():
            missing = minimum - counts[category]
            if missing <= 0:
                continue
            picked = [p for p in pool if p.category == category][:missing]
            for cand in picked:
                places.append(cand)
                pool.remove(cand)
            if len(picked) < missing:
                logger.debug(
                    "Day %d: category %r below quota (%d/%d), pool exhausted",
                    day, category, counts[category] + len(picked), minimum,
                )
    return balanced
