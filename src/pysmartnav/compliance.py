"""Route compliance checks.

:class:`ComplianceMonitor` is a pure function of its inputs: it compares the
current position against the active route and reports a
:class:`~pysmartnav.models.compliance.Deviation`. :class:`ComplianceTracker`
owns the per-session deviation bookkeeping.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pysmartnav import geo
from pysmartnav._constants import COMPLIANCE_RATE_DIVISOR, COMPLIANCE_THRESHOLD_M, clamp
from pysmartnav.exceptions import NoActiveRoute
from pysmartnav.models.compliance import ComplianceState, Deviation
from pysmartnav.models.coordinate import Coordinate

_logger = logging.getLogger(__name__)


def require_route(route: Sequence[Coordinate]) -> Sequence[Coordinate]:
    """Return *route* or raise :class:`NoActiveRoute` when it is empty."""
    if not route:
        raise NoActiveRoute("no active route")
    return route


class ComplianceMonitor:
    """Detect when the agent has left the active route."""

    def __init__(self, threshold_m: float = COMPLIANCE_THRESHOLD_M) -> None:
        self.threshold_m = threshold_m

    def check_compliance(
        self,
        current: Coordinate | Sequence[Coordinate] | None,
        route: Sequence[Coordinate],
    ) -> Deviation | None:
        """Return a deviation when *current* is beyond the threshold from every route point.

        *current* is either a position or a position trace, in which case its
        last element is the current position. An empty route or trace means
        there is nothing to compare against.
        """
        position = current if isinstance(current, Coordinate) else (current[-1] if current else None)
        if position is None:
            return None
        try:
            require_route(route)
        except NoActiveRoute:
            return None

        nearest, min_distance = geo.nearest(position, route)
        assert nearest is not None  # noqa: S101
        if min_distance > self.threshold_m:
            _logger.info("Route deviation: %.1f m from %s", min_distance, nearest)
            return Deviation(position=position, nearest=nearest, distance_m=min_distance)
        return None


class ComplianceTracker:
    """Track how often the agent ignores suggested points.

    Parameters
    ----------
    threshold_m : float
        A location is on-route when strictly closer than this.
    clamp_rate : bool
        Clamp ``compliance_rate`` to ``[0, 1]``. The unclamped value is
        always available as ``raw_compliance_rate``.
    """

    def __init__(
        self,
        threshold_m: float = COMPLIANCE_THRESHOLD_M,
        *,
        clamp_rate: bool = True,
        state: ComplianceState | None = None,
    ) -> None:
        self.threshold_m = threshold_m
        self._clamp_rate = clamp_rate
        self.state = state if state is not None else ComplianceState()

    @property
    def compliance_rate(self) -> float:
        return self.state.compliance_rate

    def is_on_route(self, current_location: Coordinate, suggested_point: Coordinate) -> bool:
        return geo.distance(current_location, suggested_point) < self.threshold_m

    def record_deviation(self, location: Coordinate) -> None:
        counts = self.state.deviation_counts
        counts[location] = counts.get(location, 0) + 1
        raw = 1.0 - len(counts) / COMPLIANCE_RATE_DIVISOR
        self.state.raw_compliance_rate = raw
        self.state.compliance_rate = clamp(raw) if self._clamp_rate else raw

    def update_compliance(self, current_location: Coordinate, suggested_point: Coordinate) -> bool:
        """Record a deviation if *current_location* is off the suggested point.

        Returns ``True`` when a deviation was recorded.
        """
        if self.is_on_route(current_location, suggested_point):
            return False
        self.record_deviation(current_location)
        _logger.debug(
            "Deviation at %s (distinct=%d rate=%.2f)",
            current_location,
            len(self.state.deviation_counts),
            self.state.compliance_rate,
        )
        return True
