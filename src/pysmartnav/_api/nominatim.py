"""Nominatim address geocoding adapter."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pysmartnav._transport import Transport
from pysmartnav.config import ProviderConfig
from pysmartnav.models.coordinate import Coordinate

_logger = logging.getLogger(__name__)


def _parse_search(payload: Any) -> Coordinate | None:
    """First search hit as a coordinate; ``None`` when nothing matched."""
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    try:
        return Coordinate.model_validate(first)
    except ValidationError:
        _logger.debug("Unparseable Nominatim hit", exc_info=True)
        return None


class NominatimGeocoder:
    """:class:`~pysmartnav.collaborators.Geocoder` backed by Nominatim search."""

    def __init__(self, transport: Transport, config: ProviderConfig) -> None:
        self._transport = transport
        self._config = config

    async def geocode(self, address: str) -> Coordinate | None:
        payload = await self._transport.get_json(
            self._config.nominatim_url,
            params={"format": "json", "q": address, "limit": "1"},
        )
        return _parse_search(payload)
