"""
modules/planning/beam_search.py
---------------------------------
Bounded beam search that picks one candidate per time-block for a day.

State:   tuple of indices into the per-block candidate lists, plus its cost.
Step:    every state × every candidate of the next block; keep the `width`
         cheapest (stable sort, so ties keep enumeration order).
Cost of moving a → b:

    w_d · (km / D_norm) + w_t · (min / T_norm) + w_r · ((5 − b.rating) / 5)

Travel terms use the local Haversine/speed estimate. Besides the beam, the
width-1 path and the best-rated-per-block path are scored and the cheapest of
the three is returned (the beam wins ties), so the result is never costlier
than plain greedy selection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from itinerary_optimizer import config
from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool
from itinerary_optimizer.schemas.places import PlaceCandidate, TimeBlock, TransportMode

logger = logging.getLogger(__name__)

BEAM_BLOCK_ORDER: tuple[TimeBlock, ...] = (
    TimeBlock.BREAKFAST,
    TimeBlock.MORNING_ACTIVITY,
    TimeBlock.LUNCH,
    TimeBlock.AFTERNOON_ACTIVITY,
    TimeBlock.DINNER,
    TimeBlock.EVENING_ACTIVITY,
)

_MAX_RATING = 5.0


@dataclass(frozen=True)
class BeamSearchParameters:
    width: int = config.BEAM_WIDTH
    distance_weight: float = config.BEAM_DISTANCE_WEIGHT
    time_weight: float = config.BEAM_TIME_WEIGHT
    rating_weight: float = config.BEAM_RATING_WEIGHT
    distance_norm_km: float = config.BEAM_DISTANCE_NORM_KM
    time_norm_minutes: float = config.BEAM_TIME_NORM_MINUTES


@dataclass
class BeamResult:
    places: list[PlaceCandidate]
    cost: float
    strategy: str   # "beam" | "greedy" | "best_rated"


class BeamSearchSelector:

    def __init__(
        self,
        params: BeamSearchParameters | None = None,
        distance_tool: DistanceTool | None = None,
    ) -> None:
        self.params = params or BeamSearchParameters()
        self.distance_tool = distance_tool or DistanceTool()

    # ── cost model ────────────────────────────────────────────────────────

    def transition_cost(
        self,
        origin: PlaceCandidate,
        destination: PlaceCandidate,
        mode: Optional[TransportMode] = None,
    ) -> float:
        p = self.params
        leg = self.distance_tool.leg(origin, destination, mode)
        return (
            p.distance_weight * (leg.distance_km / p.distance_norm_km)
            + p.time_weight * (leg.duration_minutes / p.time_norm_minutes)
            + p.rating_weight * ((_MAX_RATING - destination.rating) / _MAX_RATING)
        )

    def path_cost(self, path: list[PlaceCandidate], mode: Optional[TransportMode] = None) -> float:
        return sum(self.transition_cost(a, b, mode) for a, b in zip(path, path[1:]))

    # ── search ────────────────────────────────────────────────────────────

    @staticmethod
    def group_by_block(candidates: list[PlaceCandidate]) -> list[list[PlaceCandidate]]:
        """Candidates per beam block in BEAM_BLOCK_ORDER; blocks without candidates are skipped."""
        groups = []
        for block in BEAM_BLOCK_ORDER:
            members = [c for c in candidates if c.time_block == block]
            if members:
                groups.append(members)
        return groups

    def _beam(
        self,
        groups: list[list[PlaceCandidate]],
        width: int,
        mode: Optional[TransportMode],
    ) -> tuple[tuple[int, ...], float]:
        # one zero-cost state per candidate of the first block
        beam: list[tuple[tuple[int, ...], float]] = [((i,), 0.0) for i in range(len(groups[0]))]

        for level in range(1, len(groups)):
            prev_group = groups[level - 1]
            group = groups[level]
            expanded: list[tuple[tuple[int, ...], float]] = []
            for indices, cost in beam:
                last = prev_group[indices[-1]]
                for j, cand in enumerate(group):
                    expanded.append((indices + (j,), cost + self.transition_cost(last, cand, mode)))
            expanded.sort(key=lambda s: s[1])
            beam = expanded[:width]

        return min(beam, key=lambda s: s[1])

    def _resolve(self, groups, indices) -> list[PlaceCandidate]:
        return [groups[level][i] for level, i in enumerate(indices)]

    def select(
        self,
        candidates: list[PlaceCandidate],
        mode: Optional[TransportMode] = None,
    ) -> BeamResult:
        groups = self.group_by_block(candidates)
        if not groups:
            return BeamResult(places=[], cost=0.0, strategy="beam")

        width = max(1, self.params.width)
        beam_idx, beam_cost = self._beam(groups, width, mode)
        greedy_idx, greedy_cost = self._beam(groups, 1, mode)

        best_rated = [max(g, key=lambda c: c.rating) for g in groups]
        rated_cost = self.path_cost(best_rated, mode)

        best = BeamResult(self._resolve(groups, beam_idx), beam_cost, "beam")
        if greedy_cost < best.cost:
            best = BeamResult(self._resolve(groups, greedy_idx), greedy_cost, "greedy")
        if rated_cost < best.cost:
            best = BeamResult(best_rated, rated_cost, "best_rated")

        logger.debug(
            "Beam search over %d block(s): beam=%.4f greedy=%.4f best_rated=%.4f → %s",
            len(groups), beam_cost, greedy_cost, rated_cost, best.strategy,
        )
        return best
