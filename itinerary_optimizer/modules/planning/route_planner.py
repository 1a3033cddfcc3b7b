"""
modules/planning/route_planner.py
-----------------------------------
Multi-day itinerary route optimizer.

Pipeline for one request:
  1. Validate the request; invalid → unsuccessful TripItinerary (no exception).
  2. Drop malformed candidates / bookings (modules/validation).
  3. Undistributed pool: required candidates clustered into days (K-means),
     optional ones top up per-category quotas. These become each day's
     *assigned* places.
  4. Confirmed bookings mapped to (day, time-block).
  5. Selection method for the whole trip (SelectionPolicy):
       beam search  when total candidates > MIN and confirmed < MAX
       greedy       otherwise

Each day d ∈ 1..trip_days (one thread-pool task per day):
  a. select places for the blocks not occupied by confirmed/assigned places
  b. merge confirmed + assigned + selected, cap at MAX_PLACES_PER_DAY
  c. insert lodging anchors, canonical block sort
  d. reorder visits (NN + 2-opt) within blocks, or over the whole day with
     anchors/confirmed pinned when respect_time_blocks is False
  e. annotate legs via the route provider, Haversine fallback per day

An exception inside one day's task is logged and recorded as a DayFailure;
every other day is still returned.
"""

from __future__ import annotations

import logging
import time as _time_mod
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from itinerary_optimizer import config
from itinerary_optimizer.modules.observability.logger import StructuredLogger
from itinerary_optimizer.modules.planning.beam_search import (
    BeamSearchParameters,
    BeamSearchSelector,
)
from itinerary_optimizer.modules.planning.category_balancer import balance_categories
from itinerary_optimizer.modules.planning.clustering import cluster_by_day
from itinerary_optimizer.modules.planning.fixed_schedule import greedy_fill, map_confirmed_entries
from itinerary_optimizer.modules.planning.hotel_anchors import find_accommodation, schedule_anchors
from itinerary_optimizer.modules.planning.route_costing import RouteCostCalculator
from itinerary_optimizer.modules.planning.visit_order import (
    metric_for,
    optimize_pinned,
    optimize_within_blocks,
)
from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool
from itinerary_optimizer.modules.tool_usage.route_provider import (
    RouteProvider,
    build_route_provider,
)
from itinerary_optimizer.modules.validation import (
    filter_valid,
    validate_candidate,
    validate_confirmed_entry,
    validate_trip_request,
)
from itinerary_optimizer.schemas.itinerary import (
    DayFailure,
    DayPlan,
    EntryOrigin,
    RouteEntry,
    TravelStatistics,
    TripItinerary,
)
from itinerary_optimizer.schemas.places import (
    ConfirmedScheduleEntry,
    PlaceCandidate,
    TransportMode,
    OptimizationStrategy,
)
from itinerary_optimizer.schemas.request import TripOptimizationRequest

logger = logging.getLogger(__name__)

METHOD_BEAM_SEARCH = "beam_search"
METHOD_GREEDY = "greedy"


@dataclass(frozen=True)
class SelectionPolicy:
    """When to pay for multi-path search instead of the greedy merger."""
    min_candidates: int = config.MULTI_PATH_MIN_CANDIDATES
    max_confirmed: int = config.MULTI_PATH_MAX_CONFIRMED

    def use_beam_search(self, total_candidates: int, confirmed_count: int) -> bool:
        return total_candidates > self.min_candidates and confirmed_count < self.max_confirmed


@dataclass(frozen=True)
class _TripContext:
    """Everything a day task reads; built once per request, never mutated."""
    trip_days: int
    start_date: date
    mode: TransportMode
    strategy: OptimizationStrategy
    respect_time_blocks: bool
    method: str
    hotel: Optional[PlaceCandidate]
    daily_pools: dict[int, list[PlaceCandidate]] = field(default_factory=dict)
    assigned: dict[int, list[PlaceCandidate]] = field(default_factory=dict)
    confirmed: dict[int, list[PlaceCandidate]] = field(default_factory=dict)
    excluded: frozenset[PlaceCandidate] = frozenset()


class RoutePlanner:
    """
    Stateless multi-day optimizer: holds only parameters and collaborators,
    so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        provider: RouteProvider | None = None,
        beam_params: BeamSearchParameters | None = None,
        policy: SelectionPolicy | None = None,
        perf_logger: StructuredLogger | None = None,
        distance_tool: DistanceTool | None = None,
        max_workers: int = config.MAX_DAY_WORKERS,
    ):
        self.distance_tool = distance_tool or DistanceTool()
        self.provider      = provider if provider is not None else build_route_provider()
        self.policy        = policy or SelectionPolicy()
        self.selector      = BeamSearchSelector(beam_params, self.distance_tool)
        self.costing       = RouteCostCalculator(self.provider, self.distance_tool)
        self.perf_logger   = perf_logger or StructuredLogger()
        self.max_workers   = max(1, max_workers)

    # ── Public entry point ────────────────────────────────────────────────────

    def optimize(self, request: TripOptimizationRequest) -> TripItinerary:
        """
        Produce one ordered, distance-annotated route per trip day.

        Never raises for bad input or a failing day: the returned itinerary
        carries success=False and the reason instead.
        """
        _t0 = _time_mod.perf_counter()
        session_id = f"opt_{uuid.uuid4().hex[:12]}"

        check = validate_trip_request(request.__dict__)
        if not check:
            logger.warning("Invalid trip request: %s", "; ".join(check.errors))
            return TripItinerary.error("ERROR_INVALID_REQUEST: " + "; ".join(check.errors))

        ctx, total_candidates = self._build_context(request)
        logger.info(
            "Optimizing %d-day trip: %d candidate(s), %d confirmed, method=%s",
            ctx.trip_days, total_candidates,
            sum(len(v) for v in ctx.confirmed.values()), ctx.method,
        )

        days, failures = self._run_days(ctx)

        if failures:
            message = (
                f"ERROR_DAY_FAILED: day(s) {sorted(failures)} failed; "
                f"{len(days)} of {ctx.trip_days} day(s) completed"
            )
        else:
            message = f"Optimized {len(days)} day(s) using {ctx.method}"

        itinerary = TripItinerary(
            success=not failures,
            message=message,
            days=days,
            failures=failures,
            selection_method=ctx.method,
            statistics=TravelStatistics.calculate(days, total_candidates),
        )

        _dur_ms = (_time_mod.perf_counter() - _t0) * 1000
        try:
            for failure in failures.values():
                self._log_perf(session_id, "DAY_FAILURE", failure.__dict__)
            self._log_perf(session_id, "PERFORMANCE", {
                "component": "RoutePlanner.optimize",
                "duration_ms": round(_dur_ms, 2),
                "days": ctx.trip_days,
                "failed_days": sorted(failures),
                "method": ctx.method,
                "candidates": total_candidates,
            })
        finally:
            self.perf_logger.close(session_id)
        return itinerary

    def _log_perf(self, session_id: str, event_type: str, payload: dict) -> None:
        # best-effort: a failed write never discards computed days
        try:
            self.perf_logger.log(session_id, event_type, payload)
        except OSError as exc:
            logger.warning("Perf log write failed for %s (%s): %s", session_id, event_type, exc)

    # ── Request preparation ───────────────────────────────────────────────────

    def _build_context(self, request: TripOptimizationRequest) -> tuple[_TripContext, int]:
        daily_pools = {
            day: filter_valid(pool, validate_candidate)
            for day, pool in request.daily_candidates.items()
        }
        candidate_pool = filter_valid(request.candidate_pool, validate_candidate)
        confirmed_entries: list[ConfirmedScheduleEntry] = filter_valid(
            request.confirmed_entries, validate_confirmed_entry,
        )

        assigned: dict[int, list[PlaceCandidate]] = {}
        if candidate_pool:
            required = [c for c in candidate_pool if c.is_required]
            optional = [c for c in candidate_pool if not c.is_required]
            clusters = cluster_by_day(required, request.trip_days, seed=request.random_seed)
            quotas = (
                request.category_quotas
                if request.category_quotas is not None
                else config.DEFAULT_CATEGORY_QUOTAS
            )
            assigned = balance_categories(clusters, quotas, optional)

        confirmed = map_confirmed_entries(confirmed_entries, request.start_date, request.trip_days)

        total_candidates = sum(len(p) for p in daily_pools.values()) + len(candidate_pool)
        use_beam = self.policy.use_beam_search(total_candidates, len(confirmed_entries))

        everything = [c for day in sorted(daily_pools) for c in daily_pools[day]] + candidate_pool
        hotel = find_accommodation(everything, request.accommodation)

        excluded: set[PlaceCandidate] = {p for places in assigned.values() for p in places}
        if hotel is not None:
            excluded.add(hotel)

        ctx = _TripContext(
            trip_days=request.trip_days,
            start_date=request.start_date,
            mode=request.transport_mode,
            strategy=request.strategy,
            respect_time_blocks=request.respect_time_blocks,
            method=METHOD_BEAM_SEARCH if use_beam else METHOD_GREEDY,
            hotel=hotel,
            daily_pools=daily_pools,
            assigned=assigned,
            confirmed=confirmed,
            excluded=frozenset(excluded),
        )
        return ctx, total_candidates

    # ── Concurrent day execution ──────────────────────────────────────────────

    def _run_days(self, ctx: _TripContext) -> tuple[dict[int, DayPlan], dict[int, DayFailure]]:
        days: dict[int, DayPlan] = {}
        failures: dict[int, DayFailure] = {}

        workers = min(self.max_workers, ctx.trip_days)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="day") as pool:
            futures = {pool.submit(self._plan_day, day, ctx): day for day in range(1, ctx.trip_days + 1)}
            for future in as_completed(futures):
                day = futures[future]
                try:
                    days[day] = future.result()
                except Exception as exc:  # recorded per day
                    logger.exception("Day %d failed", day)
                    failures[day] = DayFailure(day, type(exc).__name__, str(exc))

        return dict(sorted(days.items())), dict(sorted(failures.items()))

    def _plan_day(self, day: int, ctx: _TripContext) -> DayPlan:
        entries = self._compose_day(day, ctx)
        entries = schedule_anchors({day: entries}, ctx.trip_days, ctx.hotel)[day]
        entries = self._order_visits(entries, ctx)

        plan = DayPlan(
            day_number=day,
            date=ctx.start_date + timedelta(days=day - 1),
            entries=entries,
            selection_method=ctx.method,
        )
        self.costing.annotate(plan, ctx.mode)
        logger.debug(
            "Day %d: %d stop(s), %.2f km, %.1f min (%s)",
            day, len(plan.entries), plan.total_distance_km,
            plan.total_duration_minutes, plan.route_source,
        )
        return plan

    # ── Day steps ─────────────────────────────────────────────────────────────

    def _select(self, day: int, ctx: _TripContext, fixed: list[PlaceCandidate]) -> list[PlaceCandidate]:
        pool = [c for c in ctx.daily_pools.get(day, []) if c not in ctx.excluded]
        if ctx.method == METHOD_GREEDY:
            return greedy_fill(pool, fixed)

        occupied = {p.time_block for p in fixed}
        eligible = [c for c in pool if c.time_block not in occupied and c not in fixed]
        return self.selector.select(eligible, ctx.mode).places

    def _compose_day(self, day: int, ctx: _TripContext) -> list[RouteEntry]:
        confirmed = ctx.confirmed.get(day, [])
        assigned = ctx.assigned.get(day, [])
        selected = self._select(day, ctx, confirmed + assigned)

        entries: list[RouteEntry] = []
        seen: set[PlaceCandidate] = set()
        for places, origin in (
            (confirmed, EntryOrigin.CONFIRMED),
            (assigned, EntryOrigin.SELECTED),
            (selected, EntryOrigin.SELECTED),
        ):
            for place in places:
                if place in seen:
                    continue
                seen.add(place)
                entries.append(RouteEntry(sequence=0, time_block=place.time_block, place=place, origin=origin))

        return cap_entries(entries, config.MAX_PLACES_PER_DAY)

    def _order_visits(self, entries: list[RouteEntry], ctx: _TripContext) -> list[RouteEntry]:
        metric = metric_for(ctx.strategy, ctx.mode)
        if ctx.respect_time_blocks:
            return optimize_within_blocks(entries, metric)
        return optimize_pinned(entries, metric)


def cap_entries(entries: list[RouteEntry], limit: int) -> list[RouteEntry]:
    """
    Keep at most `limit` entries by dropping the lowest-rated SELECTED ones
    (later entries go first among equal ratings). Confirmed entries are never
    dropped, so a day may stay above the limit when bookings alone exceed it.
    """
    excess = len(entries) - limit
    if excess <= 0:
        return entries

    droppable = [i for i, e in enumerate(entries) if e.origin is EntryOrigin.SELECTED]
    droppable.sort(key=lambda i: (entries[i].place.rating, -i))
    dropped = set(droppable[:excess])
    if dropped:
        logger.debug("Capping day at %d place(s): dropped %d", limit, len(dropped))
    return [e for i, e in enumerate(entries) if i not in dropped]
