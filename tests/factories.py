"""Test data builders."""

from itinerary_optimizer.schemas.places import PlaceCandidate, TimeBlock

# Seoul city hall
BASE_LAT = 37.5665
BASE_LNG = 126.9780


def make_place(
    pid: str,
    lat: float = BASE_LAT,
    lng: float = BASE_LNG,
    block: TimeBlock = TimeBlock.AFTERNOON_ACTIVITY,
    rating: float = 4.0,
    category: str = "sightseeing",
    priority: int = 2,
    name: str | None = None,
) -> PlaceCandidate:
    """Build a candidate with sensible defaults."""
    return PlaceCandidate(
        id=pid,
        name=name or f"Place {pid}",
        category=category,
        lat=lat,
        lng=lng,
        time_block=block,
        priority=priority,
        rating=rating,
    )
