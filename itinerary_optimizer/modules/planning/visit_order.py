"""
modules/planning/visit_order.py
---------------------------------
Orders a set of stops to shorten the route: nearest-neighbour construction
followed by 2-opt improvement.

Construction starts at the northernmost place and always moves to the nearest
unvisited one. Every tie is broken by (id, name), so the tour depends only on
the set of points and re-running the optimizer on its own output is a no-op.

2-opt reverses the segment i..j whenever that strictly lowers the route cost,
until a full pass makes no change or TWO_OPT_MAX_PASSES passes have run.

Route metrics:
  distance_metric     great-circle km (DISTANCE)
  congestion_metric   minutes × destination block congestion factor (TIME)
  balanced_metric     weighted km + congested minutes + (5 − rating) (BALANCED)
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from itinerary_optimizer import config
from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool, place_distance_km
from itinerary_optimizer.schemas.itinerary import RouteEntry
from itinerary_optimizer.schemas.places import (
    OptimizationStrategy,
    PlaceCandidate,
    TimeBlock,
    TransportMode,
)

logger = logging.getLogger(__name__)

# Edge cost between two consecutive stops
Metric = Callable[[PlaceCandidate, PlaceCandidate], float]

_MAX_RATING = 5.0

# Peak-hour multipliers applied to the travel time into a block
CONGESTION_FACTORS: dict[TimeBlock, float] = {
    TimeBlock.BREAKFAST:          1.5,
    TimeBlock.LUNCH:              1.3,
    TimeBlock.AFTERNOON_ACTIVITY: 1.2,
    TimeBlock.DINNER:             1.8,
}


def distance_metric(a: PlaceCandidate, b: PlaceCandidate) -> float:
    return place_distance_km(a, b)


def congestion_metric(mode: TransportMode, distance_tool: DistanceTool | None = None) -> Metric:
    tool = distance_tool or DistanceTool()

    def metric(a: PlaceCandidate, b: PlaceCandidate) -> float:
        factor = CONGESTION_FACTORS.get(b.time_block, 1.0)
        return tool.travel_time_minutes(a, b, mode) * factor

    return metric


def balanced_metric(
    mode: TransportMode,
    distance_tool: DistanceTool | None = None,
    distance_weight: float = config.BALANCED_DISTANCE_WEIGHT,
    time_weight: float = config.BALANCED_TIME_WEIGHT,
    rating_weight: float = config.BALANCED_RATING_WEIGHT,
) -> Metric:
    """
    Multi-criteria edge cost. The rating term charges the destination's
    shortfall from a perfect score, so a better-rated stop can win over a
    slightly nearer one.
    """
    tool = distance_tool or DistanceTool()
    congested = congestion_metric(mode, tool)

    def metric(a: PlaceCandidate, b: PlaceCandidate) -> float:
        return (
            distance_weight * place_distance_km(a, b)
            + time_weight * congested(a, b)
            + rating_weight * (_MAX_RATING - b.rating)
        )

    return metric


def metric_for(strategy: OptimizationStrategy, mode: TransportMode) -> Metric:
    if strategy is OptimizationStrategy.TIME:
        return congestion_metric(mode)
    if strategy is OptimizationStrategy.BALANCED:
        return balanced_metric(mode)
    return distance_metric


def route_cost(places: Sequence[PlaceCandidate], metric: Metric = distance_metric) -> float:
    return sum(metric(a, b) for a, b in zip(places, places[1:]))


def _tie_key(place: PlaceCandidate) -> tuple[str, str]:
    return (place.id, place.name)


# ── Construction ─────────────────────────────────────────────────────────────

def nearest_neighbor(
    places: Sequence[PlaceCandidate],
    metric: Metric = distance_metric,
) -> list[PlaceCandidate]:
    if len(places) <= 1:
        return list(places)

    remaining = list(places)
    # northernmost first; places without coordinates sort last
    start = min(
        remaining,
        key=lambda p: (-(p.lat if p.lat is not None else float("-inf")), _tie_key(p)),
    )
    tour = [start]
    remaining.remove(start)

    while remaining:
        current = tour[-1]
        nxt = min(remaining, key=lambda p: (metric(current, p), _tie_key(p)))
        tour.append(nxt)
        remaining.remove(nxt)
    return tour


# ── Improvement ──────────────────────────────────────────────────────────────

def two_opt(
    tour: Sequence[PlaceCandidate],
    metric: Metric = distance_metric,
    max_passes: int = config.TWO_OPT_MAX_PASSES,
) -> list[PlaceCandidate]:
    order = list(range(len(tour)))
    if len(order) < 3:
        return list(tour)

    def cost(idx: list[int]) -> float:
        return sum(metric(tour[a], tour[b]) for a, b in zip(idx, idx[1:]))

    best = cost(order)
    passes = 0
    improved = True
    while improved and passes < max_passes:
        improved = False
        passes += 1
        for i in range(len(order) - 1):
            for j in range(i + 1, len(order)):
                candidate = order[:i] + order[i:j + 1][::-1] + order[j + 1:]
                c = cost(candidate)
                if c < best - 1e-9:
                    order, best = candidate, c
                    improved = True

    logger.debug("2-opt: %d stop(s), %d pass(es), cost=%.3f", len(order), passes, best)
    return [tour[i] for i in order]


def optimize_visit_order(
    places: Sequence[PlaceCandidate],
    metric: Metric = distance_metric,
) -> list[PlaceCandidate]:
    """Nearest-neighbour tour improved by 2-opt."""
    return two_opt(nearest_neighbor(places, metric), metric)


# ── Entry-level helpers used by the planner ──────────────────────────────────

def optimize_pinned(
    entries: list[RouteEntry],
    metric: Metric = distance_metric,
) -> list[RouteEntry]:
    """
    Reorder the free entries of a day; anchors and confirmed entries stay at
    their positions and the optimized free entries fill the remaining slots.
    """
    free_positions = [i for i, e in enumerate(entries) if not (e.is_anchor or e.is_fixed)]
    if len(free_positions) < 2:
        return list(entries)

    by_place = {entries[i].place: entries[i] for i in free_positions}
    ordered = optimize_visit_order([entries[i].place for i in free_positions], metric)

    result = list(entries)
    for pos, place in zip(free_positions, ordered):
        result[pos] = by_place[place]
    return result


def optimize_within_blocks(
    entries: list[RouteEntry],
    metric: Metric = distance_metric,
) -> list[RouteEntry]:
    """Apply optimize_pinned to each run of consecutive same-block entries."""
    result: list[RouteEntry] = []
    run: list[RouteEntry] = []
    for entry in entries:
        if run and entry.time_block != run[-1].time_block:
            result.extend(optimize_pinned(run, metric))
            run = []
        run.append(entry)
    if run:
        result.extend(optimize_pinned(run, metric))
    return result
