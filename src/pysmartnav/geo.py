"""Geodesic distance helpers.

Distances use an equirectangular approximation: one degree of latitude is
``METERS_PER_DEGREE`` meters and the longitude term is scaled by the cosine
of the pair's mean latitude, which keeps the function symmetric. This is
accurate for short hops (below roughly 10 km). There is no antimeridian or
polar correction.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from pysmartnav._constants import METERS_PER_DEGREE
from pysmartnav.models.coordinate import Coordinate


def distance(p1: Coordinate, p2: Coordinate) -> float:
    """Approximate distance in meters between two coordinates.

    Symmetric variant of the textbook equirectangular formula, which scales
    the longitude term by ``cos(lat1)``. Using the mean latitude instead makes
    ``distance(p1, p2) == distance(p2, p1)`` hold exactly; over the intended
    range (below 10 km) the two differ by a small fraction of a percent
    outside polar latitudes.
    """
    d_lat = abs(p2.latitude - p1.latitude) * METERS_PER_DEGREE
    mean_lat = (p1.latitude + p2.latitude) / 2.0
    d_lon = abs(p2.longitude - p1.longitude) * METERS_PER_DEGREE * math.cos(math.radians(mean_lat))
    return math.sqrt(d_lat**2 + d_lon**2)


def nearest(point: Coordinate, candidates: Iterable[Coordinate]) -> tuple[Coordinate | None, float]:
    """Return the closest candidate and its distance (``(None, inf)`` if empty)."""
    best: Coordinate | None = None
    best_distance = math.inf
    for candidate in candidates:
        d = distance(point, candidate)
        if d < best_distance:
            best, best_distance = candidate, d
    return best, best_distance


def min_distance(point: Coordinate, path: Iterable[Coordinate]) -> float:
    """Minimum distance in meters from *point* to any point of *path*."""
    return nearest(point, path)[1]
