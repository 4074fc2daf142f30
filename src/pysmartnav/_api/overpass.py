"""Overpass hospital lookup adapter."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError

from pysmartnav._transport import Transport
from pysmartnav.config import ProviderConfig
from pysmartnav.models.coordinate import Coordinate

_logger = logging.getLogger(__name__)


def build_hospital_query(center: Coordinate, radius_m: float) -> str:
    return (
        "[out:json];"
        f"node[amenity=hospital](around:{int(radius_m)},{center.latitude},{center.longitude});"
        "out body;"
    )


def _parse_elements(payload: Any) -> list[Coordinate]:
    """Extract node coordinates, skipping elements without a usable position."""
    if not isinstance(payload, dict):
        return []
    elements = payload.get("elements")
    if not isinstance(elements, list):
        return []
    points: list[Coordinate] = []
    for element in elements:
        if not isinstance(element, dict):
            continue
        try:
            points.append(Coordinate.model_validate(element))
        except ValidationError:
            _logger.debug("Skipping Overpass element without coordinates: %s", element.get("id"))
    return points


class OverpassPoi:
    """:class:`~pysmartnav.collaborators.PoiProvider` returning nearby hospitals."""

    def __init__(self, transport: Transport, config: ProviderConfig) -> None:
        self._transport = transport
        self._config = config

    async def get_nearby_points_of_interest(self, center: Coordinate, radius_m: float) -> list[Coordinate]:
        payload = await self._transport.post_json(
            self._config.overpass_url,
            urlencode({"data": build_hospital_query(center, radius_m)}),
            content_type="application/x-www-form-urlencoded",
        )
        return _parse_elements(payload)
