"""
itinerary_optimizer: multi-day itinerary route optimization engine.

    from itinerary_optimizer import RoutePlanner, TripOptimizationRequest

    itinerary = RoutePlanner().optimize(request)
"""
from itinerary_optimizer.modules.planning.route_planner import RoutePlanner, SelectionPolicy
from itinerary_optimizer.schemas import TripItinerary, TripOptimizationRequest

__version__ = "0.1.0"

__all__ = ["RoutePlanner", "SelectionPolicy", "TripItinerary", "TripOptimizationRequest"]
