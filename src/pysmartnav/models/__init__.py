"""Data models for pysmartnav."""

from pysmartnav.models.compliance import ComplianceState, Deviation
from pysmartnav.models.congestion import CongestionState
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.heatmap import HIGH_CONGESTION_COLOR, LOW_CONGESTION_COLOR, HeatmapSample, Rgba
from pysmartnav.models.preferences import PreferenceFlags
from pysmartnav.models.route import RouteCandidate, RoutePath, RouteProfile, RouteSummary
from pysmartnav.models.telemetry import TelemetryObservation, TrafficSample, TrafficSource

__all__ = [
    "ComplianceState",
    "CongestionState",
    "Coordinate",
    "Deviation",
    "HIGH_CONGESTION_COLOR",
    "HeatmapSample",
    "LOW_CONGESTION_COLOR",
    "PreferenceFlags",
    "Rgba",
    "RouteCandidate",
    "RoutePath",
    "RouteProfile",
    "RouteSummary",
    "TelemetryObservation",
    "TrafficSample",
    "TrafficSource",
]
