"""
modules/planning/clustering.py
--------------------------------
Assigns required candidates to trip days by location so no single day's route
zig-zags across the city.

Algorithm: K-means on (lat, lng) with K = trip days.
  - Seeding: first centroid is a uniformly random candidate; every following
    centroid is the unchosen candidate with the greatest minimum Haversine
    distance to the chosen ones (maximin spread).
  - Assignment: nearest centroid, ties go to the first one encountered.
  - Update: mean lat/lng of members; an empty cluster keeps its centroid.
  - Stop when no centroid moves or after KMEANS_MAX_ITERATIONS.

Cluster i becomes day i + 1. When there are fewer distinct points than days,
fewer centroids are seeded and the remaining days stay empty.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from itinerary_optimizer import config
from itinerary_optimizer.modules.tool_usage.distance_tool import haversine_km
from itinerary_optimizer.schemas.places import PlaceCandidate

logger = logging.getLogger(__name__)

Centroid = tuple[float, float]


def _dist(place: PlaceCandidate, centroid: Centroid) -> float:
    return haversine_km(place.lat, place.lng, centroid[0], centroid[1])


def select_initial_centroids(
    places: list[PlaceCandidate],
    k: int,
    rng: random.Random,
) -> list[Centroid]:
    """k-means++ style seeding with the deterministic maximin rule."""
    first = places[rng.randrange(len(places))]
    chosen: list[PlaceCandidate] = [first]
    centroids: list[Centroid] = [(first.lat, first.lng)]

    while len(centroids) < k:
        best: Optional[PlaceCandidate] = None
        best_min = 0.0
        for cand in places:
            if cand in chosen:
                continue
            min_d = min(_dist(cand, c) for c in centroids)
            if min_d > best_min:
                best_min = min_d
                best = cand
        if best is None:
            # every remaining point coincides with an existing centroid
            break
        chosen.append(best)
        centroids.append((best.lat, best.lng))
    return centroids


def _nearest(place: PlaceCandidate, centroids: list[Centroid]) -> int:
    nearest = 0
    min_d = float("inf")
    for i, c in enumerate(centroids):
        d = _dist(place, c)
        if d < min_d:
            min_d = d
            nearest = i
    return nearest


def cluster_by_day(
    places: list[PlaceCandidate],
    num_days: int,
    seed: Optional[int] = None,
    max_iterations: int = config.KMEANS_MAX_ITERATIONS,
) -> dict[int, list[PlaceCandidate]]:
    """
    Partition `places` into days 1..num_days.

    Every place lands in exactly one day; days may be empty. Places must have
    coordinates (the planner validates them before clustering).
    """
    days: dict[int, list[PlaceCandidate]] = {d: [] for d in range(1, num_days + 1)}
    if not places or num_days < 1:
        return days

    rng = random.Random(seed)
    centroids = select_initial_centroids(places, num_days, rng)

    assignment: list[int] = []
    iteration = 0
    while iteration < max_iterations:
        iteration += 1
        assignment = [_nearest(p, centroids) for p in places]

        new_centroids: list[Centroid] = []
        for i, old in enumerate(centroids):
            members = [p for p, a in zip(places, assignment) if a == i]
            if members:
                new_centroids.append((
                    sum(p.lat for p in members) / len(members),
                    sum(p.lng for p in members) / len(members),
                ))
            else:
                new_centroids.append(old)

        if new_centroids == centroids:
            break
        centroids = new_centroids

    logger.debug(
        "K-means: %d place(s) into %d day(s), %d centroid(s), %d iteration(s)",
        len(places), num_days, len(centroids), iteration,
    )

    for place, cluster in zip(places, assignment):
        days[cluster + 1].append(place)
    return days
