"""
modules/validation/input_validator.py
---------------------------------------
Data-quality guards applied to a request before the optimizer touches it.

  Candidate:
    ✓ Non-empty id and name
    ✓ Non-null coordinates, latitude in [-90, 90], longitude in [-180, 180]
    ✓ Coordinates are not both exactly 0.0 (likely missing)
    ✓ Rating in [0, 5]
    ✓ priority >= 1, visit duration >= 0

  Confirmed entry:
    ✓ Non-empty title, start present
    ✓ end (if present) not before start
    ✓ Coordinates (if present) in range; an address-only booking is valid

  Trip request:
    ✓ trip_days >= 1
    ✓ start_date present

Usage:
    from itinerary_optimizer.modules.validation import validate_candidate, filter_valid

    clean = filter_valid(request.candidate_pool, validate_candidate)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _check_coordinates(lat: Any, lng: Any, errors: list[str]) -> None:
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        errors.append(f"lat/lng must be numeric (got lat={lat!r}, lng={lng!r})")
        return
    if not (-90.0 <= lat_f <= 90.0):
        errors.append(f"lat={lat_f} is outside valid range [-90, 90]")
    if not (-180.0 <= lng_f <= 180.0):
        errors.append(f"lng={lng_f} is outside valid range [-180, 180]")
    if lat_f == 0.0 and lng_f == 0.0:
        errors.append("lat=0.0 and lng=0.0: likely a missing/default value")


# ── Candidate validation ───────────────────────────────────────────────────────

def validate_candidate(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    for key in ("id", "name"):
        value = record.get(key)
        if not value or not str(value).strip():
            errors.append(f"{key} must not be empty")

    lat = record.get("lat")
    lng = record.get("lng")
    if lat is None or lng is None:
        errors.append(f"lat/lng must not be None (got lat={lat!r}, lng={lng!r})")
    else:
        _check_coordinates(lat, lng, errors)

    rating = record.get("rating", 0.0)
    try:
        if not (0.0 <= float(rating) <= 5.0):
            errors.append(f"rating={rating} is outside valid range [0, 5]")
    except (TypeError, ValueError):
        errors.append(f"rating={rating!r} must be numeric")

    if int(record.get("priority", 1)) < 1:
        errors.append(f"priority={record.get('priority')} must be >= 1")
    if int(record.get("visit_duration_minutes", 0)) < 0:
        errors.append("visit_duration_minutes must be >= 0")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Confirmed entry validation ─────────────────────────────────────────────────

def validate_confirmed_entry(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    title = record.get("title")
    if not title or not str(title).strip():
        errors.append("title must not be empty")

    start = record.get("start")
    end = record.get("end")
    if not isinstance(start, datetime):
        errors.append(f"start={start!r} must be a datetime")
    elif end is not None:
        if not isinstance(end, datetime):
            errors.append(f"end={end!r} must be a datetime")
        elif end < start:
            errors.append(f"end={end.isoformat()} is before start={start.isoformat()}")

    lat = record.get("lat")
    lng = record.get("lng")
    if (lat is None) != (lng is None):
        errors.append("lat and lng must be given together")
    elif lat is not None:
        _check_coordinates(lat, lng, errors)

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Trip request validation ────────────────────────────────────────────────────

def validate_trip_request(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    days = record.get("trip_days")
    try:
        if int(days) < 1:
            errors.append(f"trip_days={days} must be >= 1")
    except (TypeError, ValueError):
        errors.append(f"trip_days={days!r} must be a positive integer")

    if not isinstance(record.get("start_date"), date):
        errors.append(f"start_date={record.get('start_date')!r} must be a date")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Batch filter helper ────────────────────────────────────────────────────────

def filter_valid(
    items: list[T],
    validator: Callable[[dict], ValidationResult],
    to_dict: Callable[[T], dict] | None = None,
    log: bool = True,
) -> list[T]:
    """
    Apply a validator to every item in a list, return only the valid ones.

    Args:
        items:     Dataclass instances or dicts.
        validator: validate_candidate / validate_confirmed_entry / ...
        to_dict:   Optional converter; by default dicts pass through and
                   other items use their __dict__.
        log:       Emit a warning for every rejected record.
    """
    valid_items: list[T] = []
    rejected = 0

    for item in items:
        record_dict = (
            to_dict(item)
            if to_dict is not None
            else (item if isinstance(item, dict) else item.__dict__)
        )
        result = validator(record_dict)
        if result.valid:
            valid_items.append(item)
        else:
            rejected += 1
            if log:
                name = record_dict.get("name", record_dict.get("title", "?"))
                logger.warning("Rejected %r: %s", name, "; ".join(result.errors))

    if log and rejected:
        logger.warning("%d/%d records rejected; %d passed", rejected, len(items), len(valid_items))

    return valid_items
