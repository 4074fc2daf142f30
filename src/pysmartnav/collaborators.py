"""Structural interfaces of the external collaborators.

The core never performs I/O itself. Everything it needs from the outside
world (position, telemetry, points of interest, routes, geocoding,
persistence) goes through these protocols, which makes it easy to pass test
doubles while the bundled HTTP adapters stay concrete.

Implementations signal failure by raising
:class:`~pysmartnav.exceptions.CollaboratorUnavailable` (or any other
exception; the scheduler treats both the same way).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from typing import Any, Protocol, TypeVar

from pysmartnav.exceptions import CollaboratorUnavailable
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.preferences import PreferenceFlags
from pysmartnav.models.route import RouteCandidate, RouteProfile
from pysmartnav.models.telemetry import TelemetryObservation

T = TypeVar("T")


class LocationProvider(Protocol):
    async def get_current_position(self) -> Coordinate:
        """Raise :class:`~pysmartnav.exceptions.LocationUnavailable` when no fix is available."""
        ...


class TelemetryProvider(Protocol):
    async def get_telemetry(self, center: Coordinate) -> TelemetryObservation | dict[str, Any] | None:
        """Absent or malformed payloads are a defined, non-fatal condition."""
        ...


class PoiProvider(Protocol):
    async def get_nearby_points_of_interest(self, center: Coordinate, radius_m: float) -> Sequence[Coordinate]: ...


class RoutingProvider(Protocol):
    async def get_route(
        self,
        start: Coordinate,
        end: Coordinate,
        profile: RouteProfile,
        alternatives: bool,
    ) -> Sequence[RouteCandidate]: ...


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Coordinate | None: ...


class PreferenceStore(Protocol):
    async def persist(self, flags: PreferenceFlags) -> None: ...

    async def load_flags(self) -> PreferenceFlags: ...


async def call_collaborator(awaitable: Awaitable[T], *, timeout: float, collaborator: str) -> T:
    """Await a collaborator call with a bounded wait.

    Timeouts and unexpected errors are converted into
    :class:`CollaboratorUnavailable` so callers only handle one failure type.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except CollaboratorUnavailable:
        raise
    except TimeoutError as exc:
        raise CollaboratorUnavailable(
            f"{collaborator} timed out after {timeout:.1f}s",
            collaborator=collaborator,
        ) from exc
    except Exception as exc:
        raise CollaboratorUnavailable(f"{collaborator} failed: {exc}", collaborator=collaborator) from exc
