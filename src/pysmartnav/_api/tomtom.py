"""TomTom flow-segment telemetry adapter.

Endpoint: ``flowSegmentData/absolute/10/json?point=<lat>,<lon>&key=<key>``
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pysmartnav._transport import Transport
from pysmartnav.config import ProviderConfig
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.telemetry import TelemetryObservation

_logger = logging.getLogger(__name__)


def _parse_flow_segment(payload: Any) -> TelemetryObservation | None:
    """Parse a flow-segment response; ``None`` when the shape is unusable."""
    if not isinstance(payload, dict) or not isinstance(payload.get("flowSegmentData"), dict):
        return None
    try:
        return TelemetryObservation.model_validate(payload)
    except ValidationError:
        _logger.debug("Unparseable flow segment payload", exc_info=True)
        return None


class TomTomTelemetry:
    """:class:`~pysmartnav.collaborators.TelemetryProvider` backed by TomTom."""

    def __init__(self, transport: Transport, config: ProviderConfig) -> None:
        self._transport = transport
        self._config = config

    async def get_telemetry(self, center: Coordinate) -> TelemetryObservation | None:
        if not self._config.tomtom_api_key:
            return None
        payload = await self._transport.get_json(
            self._config.tomtom_url,
            params={
                "point": f"{center.latitude},{center.longitude}",
                "key": self._config.tomtom_api_key,
            },
        )
        return _parse_flow_segment(payload)
