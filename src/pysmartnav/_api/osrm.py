"""OSRM route service adapter.

Geometries are requested as GeoJSON so no polyline decoding is needed.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pysmartnav._transport import Transport
from pysmartnav.config import ProviderConfig
from pysmartnav.exceptions import NavTransportError
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.route import RouteCandidate, RouteProfile

_logger = logging.getLogger(__name__)


def build_route_url(base_url: str, start: Coordinate, end: Coordinate, profile: RouteProfile) -> str:
    # OSRM expects lon,lat order.
    return (
        f"{base_url.rstrip('/')}/{profile.travel_mode}/"
        f"{start.longitude},{start.latitude};{end.longitude},{end.latitude}"
    )


def _parse_routes(payload: Any, *, endpoint: str = "osrm") -> list[RouteCandidate]:
    if not isinstance(payload, dict):
        raise NavTransportError("Unexpected OSRM payload", endpoint=endpoint, collaborator="routing")
    code = payload.get("code")
    if code is not None and code != "Ok":
        raise NavTransportError(
            f"OSRM returned code={code} message={payload.get('message', '')}",
            endpoint=endpoint,
            collaborator="routing",
        )
    routes = payload.get("routes")
    if not isinstance(routes, list):
        return []
    candidates: list[RouteCandidate] = []
    for route in routes:
        if not isinstance(route, dict):
            continue
        try:
            candidates.append(RouteCandidate.model_validate(route))
        except ValidationError:
            _logger.debug("Skipping malformed OSRM route", exc_info=True)
    return candidates


class OsrmRouting:
    """:class:`~pysmartnav.collaborators.RoutingProvider` backed by OSRM."""

    def __init__(self, transport: Transport, config: ProviderConfig) -> None:
        self._transport = transport
        self._config = config

    async def get_route(
        self,
        start: Coordinate,
        end: Coordinate,
        profile: RouteProfile,
        alternatives: bool,
    ) -> list[RouteCandidate]:
        url = build_route_url(self._config.osrm_url, start, end, profile)
        payload = await self._transport.get_json(
            url,
            params={
                "overview": "full",
                "geometries": "geojson",
                "alternatives": "true" if alternatives else "false",
            },
        )
        return _parse_routes(payload, endpoint=url)
