from __future__ import annotations

import pytest

from pysmartnav.exceptions import CollaboratorUnavailable
from pysmartnav.models import Coordinate, RouteCandidate, RouteProfile
from pysmartnav.routing import RoutePlanner, select_route

A = Coordinate.of(0.0, 0.0)
B = Coordinate.of(0.0, 0.1)


def _candidate(distance: float, *, points: int = 2) -> RouteCandidate:
    geometry = (A, B) if points else ()
    return RouteCandidate(geometry=geometry, distance_m=distance, duration_s=distance / 10)


class _FakeRouting:
    def __init__(self, candidates: list[RouteCandidate]) -> None:
        self._candidates = candidates
        self.calls: list[tuple[RouteProfile, bool]] = []

    async def get_route(
        self, start: Coordinate, end: Coordinate, profile: RouteProfile, alternatives: bool
    ) -> list[RouteCandidate]:
        self.calls.append((profile, alternatives))
        return self._candidates


class _FakeGeocoder:
    def __init__(self, known: dict[str, Coordinate]) -> None:
        self._known = known

    async def geocode(self, address: str) -> Coordinate | None:
        return self._known.get(address)


def test_eco_profile_takes_shortest_alternative() -> None:
    candidates = [_candidate(2000), _candidate(1500), _candidate(1800)]
    assert select_route(candidates, RouteProfile.ECO_FRIENDLY).distance_m == 1500  # type: ignore[union-attr]
    assert select_route(candidates, RouteProfile.FASTEST).distance_m == 2000  # type: ignore[union-attr]


def test_select_route_ignores_empty_geometries() -> None:
    assert select_route([_candidate(10, points=0)], RouteProfile.FASTEST) is None
    assert select_route([], RouteProfile.ECO_FRIENDLY) is None


@pytest.mark.asyncio
async def test_resolve_current_location_and_addresses() -> None:
    planner = RoutePlanner(_FakeRouting([]), _FakeGeocoder({"Harbor": B}))

    assert await planner.resolve("Current Location", A) == A
    assert await planner.resolve("  Harbor ", A) == B
    assert await planner.resolve("Nowhere", A) is None
    with pytest.raises(ValueError):
        await planner.resolve("   ", A)


@pytest.mark.asyncio
async def test_resolve_without_geocoder_fails() -> None:
    planner = RoutePlanner(_FakeRouting([]))
    with pytest.raises(CollaboratorUnavailable):
        await planner.resolve("Harbor", A)


@pytest.mark.asyncio
async def test_compute_requests_alternatives_for_eco_only() -> None:
    routing = _FakeRouting([_candidate(2000), _candidate(1500)])
    planner = RoutePlanner(routing)

    eco = await planner.compute(A, B, RouteProfile.ECO_FRIENDLY)
    fastest = await planner.compute(A, B, RouteProfile.FASTEST)

    assert eco.distance_m == 1500
    assert fastest.distance_m == 2000
    assert routing.calls == [(RouteProfile.ECO_FRIENDLY, True), (RouteProfile.FASTEST, False)]


@pytest.mark.asyncio
async def test_compute_without_usable_route_fails() -> None:
    planner = RoutePlanner(_FakeRouting([_candidate(10, points=0)]))
    with pytest.raises(CollaboratorUnavailable) as exc_info:
        await planner.compute(A, B, RouteProfile.FASTEST)
    assert exc_info.value.collaborator == "routing"
