"""Tests for per-day category quotas."""

from itinerary_optimizer.modules.planning.category_balancer import balance_categories
from tests.factories import make_place


def test_shortfall_filled_from_pool_in_order() -> None:
    days = {
        1: [make_place("s1"), make_place("f1", category="food")],
        2: [make_place("s2")],
    }
    pool = [
        make_place("f2", category="food"),
        make_place("c1", category="cafe"),
        make_place("f3", category="food"),
        make_place("f4", category="food"),
    ]

    result = balance_categories(days, {"food": 2}, pool)

    assert [p.id for p in result[1]] == ["s1", "f1", "f2"]
    assert [p.id for p in result[2]] == ["s2", "f3", "f4"]


def test_no_candidate_used_twice() -> None:
    days = {1: [], 2: [], 3: []}
    pool = [make_place(f"f{i}", category="food") for i in range(4)]

    result = balance_categories(days, {"food": 2}, pool)

    placed = [p for ps in result.values() for p in ps]
    assert len(placed) == len(set(placed)) == 4
    assert result[3] == []


def test_pool_exhaustion_is_not_an_error() -> None:
    result = balance_categories({1: []}, {"museum": 3}, [make_place("m1", category="museum")])
    assert [p.id for p in result[1]] == ["m1"]


def test_inputs_not_mutated() -> None:
    days = {1: [make_place("s1")]}
    pool = [make_place("f1", category="food")]

    balance_categories(days, {"food": 1}, pool)

    assert [p.id for p in days[1]] == ["s1"]
    assert [p.id for p in pool] == ["f1"]


def test_empty_quotas_return_copies() -> None:
    days = {1: [make_place("s1")]}
    result = balance_categories(days, {}, [make_place("f1", category="food")])
    assert result == days
    assert result[1] is not days[1]
