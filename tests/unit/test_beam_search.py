"""Tests for the bounded beam search path selector."""

import random

import pytest

from itinerary_optimizer.modules.planning.beam_search import (
    BEAM_BLOCK_ORDER,
    BeamSearchParameters,
    BeamSearchSelector,
)
from itinerary_optimizer.schemas.places import TimeBlock, TransportMode
from tests.factories import BASE_LAT, BASE_LNG, make_place


def _random_candidates(seed: int, per_block: int = 4):
    rng = random.Random(seed)
    places = []
    for block in BEAM_BLOCK_ORDER:
        for i in range(per_block):
            places.append(
                make_place(
                    f"{block.value}-{i}",
                    BASE_LAT + rng.uniform(-0.1, 0.1),
                    BASE_LNG + rng.uniform(-0.1, 0.1),
                    block=block,
                    rating=round(rng.uniform(2.0, 5.0), 1),
                )
            )
    return places


def test_empty_candidates_give_empty_path() -> None:
    result = BeamSearchSelector().select([])
    assert result.places == []
    assert result.cost == 0.0


def test_non_beam_blocks_are_ignored() -> None:
    cafe = make_place("cafe", block=TimeBlock.CAFE)
    assert BeamSearchSelector().select([cafe]).places == []


def test_one_place_per_present_block_in_block_order() -> None:
    places = [
        make_place("dinner", block=TimeBlock.DINNER),
        make_place("breakfast", block=TimeBlock.BREAKFAST),
        make_place("lunch", block=TimeBlock.LUNCH),
    ]
    result = BeamSearchSelector().select(places)
    assert [p.time_block for p in result.places] == [
        TimeBlock.BREAKFAST,
        TimeBlock.LUNCH,
        TimeBlock.DINNER,
    ]


def test_transition_cost_formula() -> None:
    selector = BeamSearchSelector()
    a = make_place("a", rating=5.0)
    perfect = make_place("b", rating=5.0)
    unrated = make_place("c", rating=0.0)

    assert selector.transition_cost(a, perfect) == 0.0
    assert selector.transition_cost(a, unrated) == pytest.approx(0.3)


def test_transition_cost_distance_and_time_terms() -> None:
    params = BeamSearchParameters(rating_weight=0.0)
    selector = BeamSearchSelector(params)
    a = make_place("a", rating=5.0)
    b = make_place("b", BASE_LAT + 0.09, BASE_LNG, rating=5.0)   # about 10 km north

    leg = selector.distance_tool.leg(a, b, TransportMode.CAR)
    expected = 0.4 * leg.distance_km / 10.0 + 0.3 * leg.duration_minutes / 30.0
    assert selector.transition_cost(a, b, TransportMode.CAR) == pytest.approx(expected)


def test_prefers_close_high_rated_candidate() -> None:
    breakfast = make_place("b", block=TimeBlock.BREAKFAST, rating=4.0)
    near_good = make_place("near", BASE_LAT + 0.001, BASE_LNG, block=TimeBlock.LUNCH, rating=4.8)
    far_good = make_place("far", BASE_LAT + 0.5, BASE_LNG, block=TimeBlock.LUNCH, rating=5.0)
    near_bad = make_place("bad", BASE_LAT + 0.001, BASE_LNG, block=TimeBlock.LUNCH, rating=1.0)

    result = BeamSearchSelector().select([breakfast, far_good, near_bad, near_good])
    assert [p.id for p in result.places] == ["b", "near"]


@pytest.mark.parametrize("seed", [1, 7, 23, 99, 2024])
def test_beam_never_worse_than_width_one(seed: int) -> None:
    """Wide beam result costs no more than the width-1 (greedy) selection."""
    places = _random_candidates(seed)
    wide = BeamSearchSelector(BeamSearchParameters(width=3)).select(places, TransportMode.CAR)
    narrow = BeamSearchSelector(BeamSearchParameters(width=1)).select(places, TransportMode.CAR)

    assert wide.cost <= narrow.cost + 1e-12
    assert len(wide.places) == len(BEAM_BLOCK_ORDER)


@pytest.mark.parametrize("seed", [3, 5, 8])
def test_reported_cost_matches_path(seed: int) -> None:
    selector = BeamSearchSelector()
    result = selector.select(_random_candidates(seed), TransportMode.WALKING)
    assert result.cost == pytest.approx(selector.path_cost(result.places, TransportMode.WALKING))


def test_never_worse_than_best_rated_path() -> None:
    selector = BeamSearchSelector()
    places = _random_candidates(42)
    best_rated = [
        max((p for p in places if p.time_block == block), key=lambda p: p.rating)
        for block in BEAM_BLOCK_ORDER
    ]
    result = selector.select(places)
    assert result.cost <= selector.path_cost(best_rated) + 1e-12
