"""Shared pytest fixtures for all test suites."""

from datetime import date, datetime

import pytest

from itinerary_optimizer.schemas.places import ConfirmedScheduleEntry


@pytest.fixture
def trip_start() -> date:
    return date(2025, 5, 1)


@pytest.fixture
def hotel_checkin(trip_start: date) -> ConfirmedScheduleEntry:
    """Hotel check-in at 15:00 on the first day."""
    return ConfirmedScheduleEntry(
        title="Lotte Hotel check-in",
        start=datetime(trip_start.year, trip_start.month, trip_start.day, 15, 0),
        end=datetime(trip_start.year, trip_start.month, trip_start.day, 15, 30),
        location="30 Eulji-ro, Jung-gu, Seoul",
        lat=37.5651,
        lng=126.9810,
        document_type="HOTEL_RESERVATION",
    )
