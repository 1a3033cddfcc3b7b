"""
modules/validation package: data-quality guards applied before optimization.
"""
from itinerary_optimizer.modules.validation.input_validator import (
    ValidationResult,
    validate_candidate,
    validate_confirmed_entry,
    validate_trip_request,
    filter_valid,
)

__all__ = [
    "ValidationResult",
    "validate_candidate",
    "validate_confirmed_entry",
    "validate_trip_request",
    "filter_valid",
]
