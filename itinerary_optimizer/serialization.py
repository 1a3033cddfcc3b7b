"""
serialization.py
----------------
TripItinerary → JSON-ready dict (enums as values, dates as ISO strings,
distances rounded for display).
"""

from __future__ import annotations

from itinerary_optimizer.schemas.itinerary import DayPlan, RouteEntry, TripItinerary


def _entry(entry: RouteEntry) -> dict:
    place = entry.place
    return {
        "sequence": entry.sequence,
        "time_block": entry.time_block.value,
        "origin": entry.origin.value,
        "is_fixed": entry.is_fixed,
        "place": {
            "id": place.id,
            "name": place.name,
            "category": place.category,
            "lat": place.lat,
            "lng": place.lng,
            "rating": place.rating,
            "visit_duration_minutes": place.visit_duration_minutes,
        },
        "leg_distance_km": round(entry.leg_distance_km, 3),
        "leg_duration_minutes": round(entry.leg_duration_minutes, 1),
        "cumulative_distance_km": round(entry.cumulative_distance_km, 3),
        "cumulative_duration_minutes": round(entry.cumulative_duration_minutes, 1),
    }


def _day(plan: DayPlan) -> dict:
    return {
        "day_number": plan.day_number,
        "date": plan.date.isoformat() if plan.date else None,
        "selection_method": plan.selection_method,
        "route_source": plan.route_source,
        "total_distance_km": round(plan.total_distance_km, 3),
        "total_duration_minutes": round(plan.total_duration_minutes, 1),
        "entries": [_entry(e) for e in plan.entries],
    }


def serialize_itinerary(itinerary: TripItinerary) -> dict:
    stats = itinerary.statistics
    return {
        "success": itinerary.success,
        "message": itinerary.message,
        "selection_method": itinerary.selection_method,
        "days": {str(n): _day(plan) for n, plan in itinerary.days.items()},
        "failures": {
            str(n): {"error_type": f.error_type, "message": f.message}
            for n, f in itinerary.failures.items()
        },
        "statistics": {
            "total_days": stats.total_days,
            "recommended_places": stats.recommended_places,
            "candidate_places": stats.candidate_places,
            "total_distance_km": round(stats.total_distance_km, 3),
            "total_duration_minutes": round(stats.total_duration_minutes, 1),
            "average_places_per_day": round(stats.average_places_per_day, 2),
            "optimization_rate": round(stats.optimization_rate, 1),
        },
    }
