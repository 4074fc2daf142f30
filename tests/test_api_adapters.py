from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs

import pytest

from pysmartnav._api.nominatim import NominatimGeocoder, _parse_search
from pysmartnav._api.osrm import OsrmRouting, _parse_routes, build_route_url
from pysmartnav._api.overpass import OverpassPoi, _parse_elements, build_hospital_query
from pysmartnav._api.tomtom import TomTomTelemetry, _parse_flow_segment
from pysmartnav.config import ProviderConfig
from pysmartnav.exceptions import CollaboratorUnavailable, NavTransportError
from pysmartnav.models import Coordinate, RouteProfile


class _FakeTransport:
    def __init__(self, response: Any) -> None:
        self._response = response
        self.calls: list[tuple[str, str, Any]] = []

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        self.calls.append(("GET", url, dict(params or {})))
        return self._response

    async def post_json(self, url: str, data: str, *, content_type: str) -> Any:
        self.calls.append(("POST", url, (data, content_type)))
        return self._response


SF = Coordinate.of(37.7749, -122.4194)
OAKLAND = Coordinate.of(37.8044, -122.2712)

_OSRM_PAYLOAD = {
    "code": "Ok",
    "routes": [
        {
            "distance": 15230.4,
            "duration": 1102.0,
            "geometry": {"type": "LineString", "coordinates": [[-122.4194, 37.7749], [-122.35, 37.79], [-122.2712, 37.8044]]},
        },
        {
            "distance": 14100.0,
            "duration": 1300.0,
            "geometry": {"type": "LineString", "coordinates": [[-122.4194, 37.7749], [-122.2712, 37.8044]]},
        },
    ],
}


# ------------------------------------------------------------------
# TomTom
# ------------------------------------------------------------------


def test_parse_flow_segment() -> None:
    observation = _parse_flow_segment(
        {"flowSegmentData": {"frc": "FRC0", "currentSpeed": 41, "freeFlowSpeed": 67, "confidence": 0.97}}
    )
    assert observation is not None
    assert observation.current_speed == 41.0
    assert observation.free_flow_speed == 67.0
    assert observation.raw["flowSegmentData"]["frc"] == "FRC0"


@pytest.mark.parametrize("payload", [None, [], {"error": "bad"}, {"flowSegmentData": "x"}])
def test_parse_flow_segment_rejects_unusable_payloads(payload: Any) -> None:
    assert _parse_flow_segment(payload) is None


@pytest.mark.asyncio
async def test_tomtom_without_api_key_makes_no_request() -> None:
    transport = _FakeTransport({"flowSegmentData": {"currentSpeed": 1, "freeFlowSpeed": 2}})
    telemetry = TomTomTelemetry(transport, ProviderConfig())

    assert await telemetry.get_telemetry(SF) is None
    assert transport.calls == []


@pytest.mark.asyncio
async def test_tomtom_request_parameters() -> None:
    transport = _FakeTransport({"flowSegmentData": {"currentSpeed": 20, "freeFlowSpeed": 40}})
    telemetry = TomTomTelemetry(transport, ProviderConfig(tomtom_api_key="k-123"))

    observation = await telemetry.get_telemetry(SF)

    assert observation is not None and observation.current_speed == 20.0
    method, _url, params = transport.calls[0]
    assert method == "GET"
    assert params == {"point": "37.7749,-122.4194", "key": "k-123"}


# ------------------------------------------------------------------
# Overpass
# ------------------------------------------------------------------


def test_hospital_query_uses_radius_and_center() -> None:
    query = build_hospital_query(SF, 5000)
    assert "node[amenity=hospital](around:5000,37.7749,-122.4194);" in query
    assert query.startswith("[out:json];")


def test_parse_elements_skips_nodes_without_coordinates() -> None:
    payload = {
        "elements": [
            {"type": "node", "id": 1, "lat": 37.76, "lon": -122.41, "tags": {"name": "General"}},
            {"type": "node", "id": 2, "tags": {}},
            "garbage",
            {"type": "node", "id": 3, "lat": "37.78", "lon": "-122.45"},
        ]
    }
    assert _parse_elements(payload) == [Coordinate.of(37.76, -122.41), Coordinate.of(37.78, -122.45)]
    assert _parse_elements({"remark": "timeout"}) == []


@pytest.mark.asyncio
async def test_overpass_posts_form_encoded_query() -> None:
    transport = _FakeTransport({"elements": [{"lat": 37.76, "lon": -122.41}]})
    poi = OverpassPoi(transport, ProviderConfig())

    points = await poi.get_nearby_points_of_interest(SF, 2500)

    assert points == [Coordinate.of(37.76, -122.41)]
    method, url, (data, content_type) = transport.calls[0]
    assert method == "POST"
    assert url == ProviderConfig().overpass_url
    assert content_type == "application/x-www-form-urlencoded"
    assert "around:2500" in parse_qs(data)["data"][0]


# ------------------------------------------------------------------
# OSRM
# ------------------------------------------------------------------


def test_route_url_uses_lon_lat_order_and_travel_mode() -> None:
    url = build_route_url("https://osrm.example/route/v1/", SF, OAKLAND, RouteProfile.CYCLING)
    assert url == "https://osrm.example/route/v1/cycling/-122.4194,37.7749;-122.2712,37.8044"
    assert "/driving/" in build_route_url("https://osrm.example", SF, OAKLAND, RouteProfile.ECO_FRIENDLY)


def test_parse_routes_converts_geojson() -> None:
    routes = _parse_routes(_OSRM_PAYLOAD)
    assert len(routes) == 2
    assert routes[0].start == SF
    assert routes[0].end == OAKLAND
    assert routes[0].distance_m == pytest.approx(15230.4)
    assert len(routes[1].geometry) == 2


def test_parse_routes_raises_on_error_code() -> None:
    with pytest.raises(NavTransportError) as exc_info:
        _parse_routes({"code": "NoRoute", "message": "Impossible route"}, endpoint="/route")
    assert exc_info.value.collaborator == "routing"
    assert exc_info.value.endpoint == "/route"
    assert isinstance(exc_info.value, CollaboratorUnavailable)


@pytest.mark.asyncio
async def test_osrm_requests_alternatives_only_when_asked() -> None:
    transport = _FakeTransport(_OSRM_PAYLOAD)
    routing = OsrmRouting(transport, ProviderConfig(osrm_url="https://osrm.example/route/v1"))

    await routing.get_route(SF, OAKLAND, RouteProfile.ECO_FRIENDLY, True)
    await routing.get_route(SF, OAKLAND, RouteProfile.FASTEST, False)

    assert transport.calls[0][2] == {"overview": "full", "geometries": "geojson", "alternatives": "true"}
    assert transport.calls[1][2]["alternatives"] == "false"


# ------------------------------------------------------------------
# Nominatim
# ------------------------------------------------------------------


def test_parse_search_takes_first_hit() -> None:
    payload = [
        {"lat": "52.3730796", "lon": "4.8924534", "display_name": "Amsterdam"},
        {"lat": "0", "lon": "0"},
    ]
    assert _parse_search(payload) == Coordinate.of(52.3730796, 4.8924534)


@pytest.mark.parametrize("payload", [[], None, {"lat": 1}, [{"display_name": "nowhere"}]])
def test_parse_search_without_usable_hit(payload: Any) -> None:
    assert _parse_search(payload) is None


@pytest.mark.asyncio
async def test_nominatim_query_parameters() -> None:
    transport = _FakeTransport([{"lat": "37.7955", "lon": "-122.3937"}])
    geocoder = NominatimGeocoder(transport, ProviderConfig())

    assert await geocoder.geocode("Ferry Building") == Coordinate.of(37.7955, -122.3937)
    assert transport.calls[0][2] == {"format": "json", "q": "Ferry Building", "limit": "1"}
