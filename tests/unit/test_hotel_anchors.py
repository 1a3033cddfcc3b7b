"""Tests for lodging anchors and canonical block ordering."""

from itinerary_optimizer.modules.planning.hotel_anchors import (
    block_rank,
    canonical_sort,
    find_accommodation,
    schedule_anchors,
)
from itinerary_optimizer.schemas.itinerary import EntryOrigin, RouteEntry
from itinerary_optimizer.schemas.places import TimeBlock
from tests.factories import make_place

HOTEL = make_place("hotel", 37.5651, 126.9810, category="lodging", name="Lotte Hotel")


def _entry(pid: str, block: TimeBlock) -> RouteEntry:
    return RouteEntry(sequence=0, time_block=block, place=make_place(pid, block=block))


def _blocks(entries):
    return [e.time_block for e in entries]


def test_find_accommodation_prefers_explicit() -> None:
    other = make_place("h2", category="hotel")
    assert find_accommodation([other], explicit=HOTEL) is HOTEL


def test_find_accommodation_by_category_or_name() -> None:
    museum = make_place("m")
    korean = make_place("k", category="숙소")
    assert find_accommodation([museum, korean]) == korean

    by_name = make_place("n", category="", name="Grand Hyatt Hotel Seoul")
    assert find_accommodation([museum, by_name]) == by_name
    assert find_accommodation([museum]) is None


def test_unknown_block_gets_checkin_rank() -> None:
    assert block_rank("SOMETHING_NEW") == block_rank(TimeBlock.HOTEL_CHECKIN)
    assert block_rank(TimeBlock.HOTEL_START) < block_rank(TimeBlock.BREAKFAST)
    assert block_rank(TimeBlock.CAFE) < block_rank(TimeBlock.HOTEL_CHECKIN) < block_rank(TimeBlock.DINNER)


def test_extra_blocks_sort_at_their_day_position() -> None:
    entries = [
        _entry("late", TimeBlock.LATE_ACTIVITY),
        _entry("cafe", TimeBlock.CAFE),
        _entry("morning", TimeBlock.MORNING_ACTIVITY),
        _entry("evening", TimeBlock.EVENING_ACTIVITY),
        _entry("breakfast", TimeBlock.BREAKFAST),
        _entry("return", TimeBlock.HOTEL_RETURN),
    ]
    ordered = canonical_sort(entries)
    assert [e.place.id for e in ordered] == ["breakfast", "morning", "cafe", "evening", "late", "return"]


def test_canonical_sort_is_stable() -> None:
    entries = [
        _entry("dinner", TimeBlock.DINNER),
        _entry("a1", TimeBlock.AFTERNOON_ACTIVITY),
        _entry("breakfast", TimeBlock.BREAKFAST),
        _entry("a2", TimeBlock.AFTERNOON_ACTIVITY),
    ]
    ordered = canonical_sort(entries)
    assert [e.place.id for e in ordered] == ["breakfast", "a1", "a2", "dinner"]


def test_first_day_gets_checkin_and_return() -> None:
    day = [
        _entry("b", TimeBlock.BREAKFAST),
        _entry("l", TimeBlock.LUNCH),
        _entry("d", TimeBlock.DINNER),
    ]
    result = schedule_anchors({1: day}, 3, HOTEL)[1]

    assert _blocks(result) == [
        TimeBlock.BREAKFAST,
        TimeBlock.LUNCH,
        TimeBlock.HOTEL_CHECKIN,
        TimeBlock.DINNER,
        TimeBlock.HOTEL_RETURN,
    ]
    checkin = result[2]
    assert checkin.origin is EntryOrigin.ANCHOR
    assert checkin.place.visit_duration_minutes == 30
    assert (checkin.place.lat, checkin.place.lng) == (HOTEL.lat, HOTEL.lng)


def test_interior_and_last_days() -> None:
    days = {
        2: [_entry("m", TimeBlock.MORNING_ACTIVITY)],
        3: [_entry("l", TimeBlock.LUNCH)],
    }
    result = schedule_anchors(days, 3, HOTEL)

    assert _blocks(result[2]) == [
        TimeBlock.HOTEL_START,
        TimeBlock.MORNING_ACTIVITY,
        TimeBlock.HOTEL_RETURN,
    ]
    assert _blocks(result[3]) == [TimeBlock.HOTEL_CHECKOUT, TimeBlock.LUNCH]


def test_single_day_trip_is_treated_as_first_day() -> None:
    result = schedule_anchors({1: [_entry("l", TimeBlock.LUNCH)]}, 1, HOTEL)[1]
    assert _blocks(result) == [TimeBlock.LUNCH, TimeBlock.HOTEL_CHECKIN, TimeBlock.HOTEL_RETURN]


def test_without_hotel_only_sorts() -> None:
    day = [_entry("d", TimeBlock.DINNER), _entry("b", TimeBlock.BREAKFAST)]
    result = schedule_anchors({2: day}, 3, None)[2]
    assert _blocks(result) == [TimeBlock.BREAKFAST, TimeBlock.DINNER]
    assert all(not e.is_anchor for e in result)
