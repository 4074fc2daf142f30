"""Owned per-session state."""

from __future__ import annotations

from dataclasses import dataclass, field

from pysmartnav.models.compliance import ComplianceState
from pysmartnav.models.congestion import CongestionState
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.heatmap import HeatmapSample
from pysmartnav.models.route import RoutePath, RouteSummary
from pysmartnav.models.telemetry import TrafficSample


@dataclass
class SessionState:
    """Everything a running session mutates.

    Only the scheduler writes to it, and only while holding its lock.
    """

    congestion: CongestionState = field(default_factory=CongestionState)
    compliance: ComplianceState = field(default_factory=ComplianceState)
    route: RoutePath = ()
    route_summary: RouteSummary | None = None
    trace: list[Coordinate] = field(default_factory=list)
    points_of_interest: tuple[Coordinate, ...] = ()
    traffic: TrafficSample | None = None
    heatmap: tuple[HeatmapSample, ...] = ()
    emergency_mode: bool = False
    eco_friendly_mode: bool = False
    start_point: Coordinate | None = None
    end_point: Coordinate | None = None
    ticks: int = 0

    @property
    def current_position(self) -> Coordinate | None:
        return self.trace[-1] if self.trace else None

    @property
    def has_route(self) -> bool:
        return bool(self.route)

    def record_position(self, position: Coordinate) -> None:
        self.trace.append(position)

    def replace_route(self, route: RoutePath, summary: RouteSummary | None = None) -> None:
        self.route = tuple(route)
        self.route_summary = summary

    def clear_route(self) -> None:
        self.route = ()
        self.route_summary = None
        self.start_point = None
        self.end_point = None
