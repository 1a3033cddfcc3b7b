"""Tests for the Kakao Mobility route provider and the costing fallback."""

from unittest.mock import MagicMock

import pytest
import requests

from itinerary_optimizer import config
from itinerary_optimizer.modules.planning.route_costing import RouteCostCalculator
from itinerary_optimizer.modules.tool_usage import route_provider as rp
from itinerary_optimizer.modules.tool_usage.distance_tool import DistanceTool, RouteLeg
from itinerary_optimizer.modules.tool_usage.route_provider import (
    HaversineProvider,
    KakaoMobilityProvider,
    RouteProvider,
    RouteProviderError,
)
from itinerary_optimizer.schemas.itinerary import DayPlan, RouteEntry
from itinerary_optimizer.schemas.places import PlaceCandidate, TransportMode
from tests.factories import make_place

STOPS = [
    make_place("a", 37.5665, 126.9780),
    make_place("b", 37.5796, 126.9770),
    make_place("c", 37.5512, 126.9882),
]


def _session(payload=None, exc=None) -> MagicMock:
    session = MagicMock()
    if exc is not None:
        session.post.side_effect = exc
        return session
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    session.post.return_value = response
    return session


def _ok_payload(sections):
    return {"routes": [{"result_code": 0, "result_msg": "OK", "sections": sections}]}


def test_kakao_parses_sections_and_builds_request() -> None:
    session = _session(_ok_payload([
        {"distance": 2500, "duration": 600},
        {"distance": 3100, "duration": 780},
    ]))
    provider = KakaoMobilityProvider("test-key", base_url="https://navi.example/", session=session)

    legs = provider.route(STOPS, TransportMode.CAR)

    assert legs == [
        RouteLeg(2.5, 10.0, "provider"),
        RouteLeg(3.1, 13.0, "provider"),
    ]
    args, kwargs = session.post.call_args
    assert args[0] == "https://navi.example/v1/waypoints/directions"
    assert kwargs["headers"]["Authorization"] == "KakaoAK test-key"
    body = kwargs["json"]
    assert body["origin"]["x"] == STOPS[0].lng
    assert body["origin"]["y"] == STOPS[0].lat
    assert body["destination"]["x"] == STOPS[2].lng
    assert [w["x"] for w in body["waypoints"]] == [STOPS[1].lng]
    assert body["priority"] == "RECOMMEND"
    assert kwargs["timeout"] == config.ROUTE_PROVIDER_TIMEOUT


def test_kakao_leg_uses_single_section() -> None:
    session = _session(_ok_payload([{"distance": 1000, "duration": 120}]))
    provider = KakaoMobilityProvider("k", session=session)

    leg = provider.leg(STOPS[0], STOPS[1], TransportMode.CAR)

    assert leg == RouteLeg(1.0, 2.0, "provider")
    assert "waypoints" not in session.post.call_args.kwargs["json"]


def test_kakao_without_session_posts_per_call(monkeypatch) -> None:
    session = _session(_ok_payload([{"distance": 1000, "duration": 120}]))
    monkeypatch.setattr(rp.requests, "post", session.post)
    provider = KakaoMobilityProvider("k")

    assert provider.session is None
    provider.leg(STOPS[0], STOPS[1], TransportMode.CAR)
    provider.leg(STOPS[1], STOPS[2], TransportMode.CAR)

    assert session.post.call_count == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"routes": []},
        {"routes": [{"result_code": 104, "result_msg": "too close"}]},
        _ok_payload([{"distance": 1000, "duration": 60}]),       # 1 section for 2 legs
        _ok_payload([{"distance": 1000}, {"distance": 5}]),      # missing duration
    ],
)
def test_kakao_bad_responses_raise(payload) -> None:
    provider = KakaoMobilityProvider("k", session=_session(payload))
    with pytest.raises(RouteProviderError):
        provider.route(STOPS, TransportMode.CAR)


def test_kakao_transport_error_raises() -> None:
    session = _session(exc=requests.ConnectionError("unreachable"))
    provider = KakaoMobilityProvider("k", session=session)
    with pytest.raises(RouteProviderError, match="ERROR_PROVIDER_REQUEST"):
        provider.route(STOPS, TransportMode.CAR)


def test_kakao_rejects_missing_coordinates() -> None:
    provider = KakaoMobilityProvider("k", session=_session())
    no_coords = PlaceCandidate(id="x", name="Address only")
    with pytest.raises(RouteProviderError, match="ERROR_MISSING_COORDINATES"):
        provider.route([STOPS[0], no_coords], TransportMode.CAR)


def test_kakao_requires_key() -> None:
    with pytest.raises(ValueError):
        KakaoMobilityProvider("")


def test_build_route_provider(monkeypatch) -> None:
    monkeypatch.setattr(config, "ROUTE_PROVIDER", "none")
    assert rp.build_route_provider() is None

    monkeypatch.setattr(config, "ROUTE_PROVIDER", "kakao")
    monkeypatch.setattr(config, "KAKAO_REST_API_KEY", "")
    assert rp.build_route_provider() is None

    monkeypatch.setattr(config, "KAKAO_REST_API_KEY", "secret")
    assert isinstance(rp.build_route_provider(), KakaoMobilityProvider)


# ── Route cost calculator ─────────────────────────────────────────────────────


class _FailingProvider(RouteProvider):
    name = "failing"

    def route(self, places, mode):
        raise RouteProviderError("ERROR_PROVIDER_REQUEST: boom")


class _ShortProvider(RouteProvider):
    def route(self, places, mode):
        return [RouteLeg(1.0, 1.0, "provider")]


def test_costing_falls_back_on_provider_failure() -> None:
    calc = RouteCostCalculator(provider=_FailingProvider())
    legs, source = calc.legs(STOPS, TransportMode.WALKING)

    assert source == "haversine"
    assert legs == DistanceTool().route(STOPS, TransportMode.WALKING)


def test_costing_falls_back_on_leg_count_mismatch() -> None:
    legs, source = RouteCostCalculator(provider=_ShortProvider()).legs(STOPS, TransportMode.CAR)
    assert source == "haversine"
    assert len(legs) == 2


class _FixedProvider(RouteProvider):
    def route(self, places, mode):
        return [RouteLeg(2.0, 7.0, "provider") for _ in places[1:]]


def test_costing_uses_provider_when_it_succeeds() -> None:
    legs, source = RouteCostCalculator(provider=_FixedProvider()).legs(STOPS, TransportMode.CAR)
    assert source == "provider"
    assert legs == [RouteLeg(2.0, 7.0, "provider")] * 2


def test_haversine_provider_reports_haversine_source() -> None:
    legs, source = RouteCostCalculator(provider=HaversineProvider()).legs(STOPS, TransportMode.CAR)
    assert source == "haversine"
    assert len(legs) == 2


def test_annotate_fills_running_totals() -> None:
    day = DayPlan(
        day_number=1,
        entries=[RouteEntry(sequence=9, time_block=p.time_block, place=p) for p in STOPS],
    )
    RouteCostCalculator().annotate(day, TransportMode.CAR)

    legs = DistanceTool().route(STOPS, TransportMode.CAR)
    assert [e.sequence for e in day.entries] == [0, 1, 2]
    assert day.entries[0].leg_distance_km == 0.0
    assert day.entries[1].leg_distance_km == pytest.approx(legs[0].distance_km)
    assert day.entries[2].cumulative_distance_km == pytest.approx(
        legs[0].distance_km + legs[1].distance_km
    )
    assert day.total_distance_km == pytest.approx(day.entries[-1].cumulative_distance_km)
    assert day.total_duration_minutes == pytest.approx(day.entries[-1].cumulative_duration_minutes)
    assert day.route_source == "haversine"


def test_annotate_empty_day() -> None:
    day = RouteCostCalculator().annotate(DayPlan(day_number=2), TransportMode.CAR)
    assert day.total_distance_km == 0.0
    assert day.entries == []
