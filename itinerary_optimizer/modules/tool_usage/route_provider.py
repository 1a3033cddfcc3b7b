"""
modules/tool_usage/route_provider.py
-------------------------------------
Real-route distance/duration providers.

Endpoint (Kakao Mobility multi-waypoint directions):
    POST {KAKAO_MOBILITY_BASE_URL}/v1/waypoints/directions
    Headers:
        Authorization: KakaoAK {KAKAO_REST_API_KEY}
        Content-Type:  application/json
    Body:
        {
          "origin":      {"x": lng, "y": lat},
          "destination": {"x": lng, "y": lat},
          "waypoints":   [{"x": lng, "y": lat}, ...],
          "priority":    "RECOMMEND"
        }

Response fields:
    routes[0].result_code          → 0 on success
    routes[0].sections[k].distance → metres for leg k
    routes[0].sections[k].duration → seconds for leg k

A provider is synchronously callable and always substitutable with the
HaversineProvider. Providers raise RouteProviderError on any failure; the
caller (route_costing) decides on the fallback.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from itinerary_optimizer import config
from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool, RouteLeg
from itinerary_optimizer.schemas.places import PlaceCandidate, TransportMode

logger = logging.getLogger(__name__)

_DIRECTIONS_PATH = "/v1/waypoints/directions"
_MAX_WAYPOINTS = 30   # Kakao accepts up to 30 via-points per request


class RouteProviderError(RuntimeError):
    """Raised when a provider cannot produce a route for a request."""


class RouteProvider:
    """Interface: `leg()` for one pair, `route()` for an ordered list of stops."""

    name = "provider"

    def leg(
        self,
        origin: PlaceCandidate,
        destination: PlaceCandidate,
        mode: TransportMode,
    ) -> RouteLeg:
        legs = self.route([origin, destination], mode)
        return legs[0]

    def route(self, places: list[PlaceCandidate], mode: TransportMode) -> list[RouteLeg]:
        raise NotImplementedError


class HaversineProvider(RouteProvider):
    """Local estimate that makes no network calls."""

    name = "haversine"

    def __init__(self, distance_tool: DistanceTool | None = None) -> None:
        self.distance_tool = distance_tool or DistanceTool()

    def leg(self, origin, destination, mode):
        return self.distance_tool.leg(origin, destination, mode)

    def route(self, places, mode):
        return self.distance_tool.route(places, mode)


class KakaoMobilityProvider(RouteProvider):
    """Kakao Mobility directions API over `requests`."""

    name = "kakao"

    def __init__(
        self,
        api_key: str,
        base_url: str = config.KAKAO_MOBILITY_BASE_URL,
        timeout: float = config.ROUTE_PROVIDER_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("KakaoMobilityProvider requires a REST API key")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # day threads call route() concurrently; without an injected session
        # every call goes through requests.post
        self.session = session

    def route(self, places: list[PlaceCandidate], mode: TransportMode) -> list[RouteLeg]:
        if len(places) < 2:
            return []
        missing = [p.name for p in places if not p.has_coordinates]
        if missing:
            raise RouteProviderError(
                f"ERROR_MISSING_COORDINATES: cannot route through {missing!r}"
            )
        if len(places) - 2 > _MAX_WAYPOINTS:
            raise RouteProviderError(
                f"ERROR_TOO_MANY_WAYPOINTS: {len(places) - 2} via-points > {_MAX_WAYPOINTS}"
            )

        url = self.base_url + _DIRECTIONS_PATH
        try:
            post = self.session.post if self.session is not None else requests.post
            resp = post(
                url,
                json=self._build_body(places),
                headers={
                    "Authorization": f"KakaoAK {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise RouteProviderError(f"ERROR_PROVIDER_REQUEST: {url}: {exc}") from exc

        return self._parse_sections(payload, expected_legs=len(places) - 1)

    # ── internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _point(place: PlaceCandidate) -> dict:
        return {"x": place.lng, "y": place.lat, "name": place.name}

    def _build_body(self, places: list[PlaceCandidate]) -> dict:
        body: dict = {
            "origin":      self._point(places[0]),
            "destination": self._point(places[-1]),
            "priority":    "RECOMMEND",
        }
        if len(places) > 2:
            body["waypoints"] = [self._point(p) for p in places[1:-1]]
        return body

    @staticmethod
    def _parse_sections(payload: dict, expected_legs: int) -> list[RouteLeg]:
        routes = payload.get("routes") or []
        if not routes:
            raise RouteProviderError("ERROR_PROVIDER_RESPONSE: no routes in response")
        route = routes[0]
        code = route.get("result_code", 0)
        if code != 0:
            raise RouteProviderError(
                f"ERROR_PROVIDER_RESPONSE: result_code={code} ({route.get('result_msg', '')})"
            )
        sections = route.get("sections") or []
        if len(sections) != expected_legs:
            raise RouteProviderError(
                f"ERROR_PROVIDER_RESPONSE: expected {expected_legs} sections, got {len(sections)}"
            )
        try:
            return [
                RouteLeg(
                    distance_km=float(s["distance"]) / 1000.0,
                    duration_minutes=float(s["duration"]) / 60.0,
                    source="provider",
                )
                for s in sections
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise RouteProviderError(f"ERROR_PROVIDER_RESPONSE: malformed section: {exc}") from exc


def build_route_provider() -> Optional[RouteProvider]:
    """Provider configured via env, or None when only the local estimate is used."""
    if config.ROUTE_PROVIDER == "kakao":
        if not config.KAKAO_REST_API_KEY:
            logger.warning("ROUTE_PROVIDER=kakao but KAKAO_REST_API_KEY is empty; using Haversine only")
            return None
        return KakaoMobilityProvider(config.KAKAO_REST_API_KEY)
    return None
