"""Route planning on top of the routing and geocoding collaborators."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pysmartnav._constants import CURRENT_LOCATION
from pysmartnav.collaborators import Geocoder, RoutingProvider, call_collaborator
from pysmartnav.exceptions import CollaboratorUnavailable
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.route import RouteCandidate, RouteProfile

_logger = logging.getLogger(__name__)


def select_route(candidates: Sequence[RouteCandidate], profile: RouteProfile) -> RouteCandidate | None:
    """Pick the route to follow among the provider's candidates.

    The eco-friendly profile takes the minimum-distance alternative; every
    other profile follows the provider's first (preferred) route.
    """
    usable = [candidate for candidate in candidates if candidate.geometry]
    if not usable:
        return None
    if profile is RouteProfile.ECO_FRIENDLY:
        return min(usable, key=lambda candidate: candidate.distance_m)
    return usable[0]


class RoutePlanner:
    """Resolve addresses and compute routes with bounded collaborator calls."""

    def __init__(
        self,
        routing: RoutingProvider,
        geocoder: Geocoder | None = None,
        *,
        routing_timeout: float = 10.0,
        geocode_timeout: float = 10.0,
    ) -> None:
        self._routing = routing
        self._geocoder = geocoder
        self._routing_timeout = routing_timeout
        self._geocode_timeout = geocode_timeout

    async def resolve(self, address: str, current: Coordinate | None) -> Coordinate | None:
        """Geocode *address*; ``"Current Location"`` resolves to *current*."""
        text = address.strip()
        if not text:
            raise ValueError("address must be non-empty")
        if text == CURRENT_LOCATION:
            return current
        if self._geocoder is None:
            raise CollaboratorUnavailable("no geocoder configured", collaborator="geocoding")
        return await call_collaborator(
            self._geocoder.geocode(text),
            timeout=self._geocode_timeout,
            collaborator="geocoding",
        )

    async def compute(self, start: Coordinate, end: Coordinate, profile: RouteProfile) -> RouteCandidate:
        """Request candidates from the routing provider and select one.

        Raises :class:`CollaboratorUnavailable` when the provider fails,
        times out or returns nothing usable.
        """
        candidates = await call_collaborator(
            self._routing.get_route(start, end, profile, profile.wants_alternatives),
            timeout=self._routing_timeout,
            collaborator="routing",
        )
        chosen = select_route(candidates, profile)
        if chosen is None:
            raise CollaboratorUnavailable("routing returned no usable route", collaborator="routing")
        _logger.debug(
            "Route %s -> %s profile=%s candidates=%d distance=%.0fm",
            start,
            end,
            profile,
            len(candidates),
            chosen.distance_m,
        )
        return chosen
