"""pysmartnav - Real-time congestion estimation and route-compliance monitoring."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysmartnav")
except PackageNotFoundError:
    __version__ = "0+local"
from pysmartnav.client import NavigationClient
from pysmartnav.compliance import ComplianceMonitor, ComplianceTracker
from pysmartnav.config import ModelConfig, NavConfig, ProviderConfig
from pysmartnav.congestion import CongestionModel
from pysmartnav.exceptions import (
    CollaboratorUnavailable,
    InvalidObservation,
    LocationUnavailable,
    NavConfigError,
    NavError,
    NavTransportError,
    NoActiveRoute,
)
from pysmartnav.geo import distance
from pysmartnav.heatmap import HeatmapSampler
from pysmartnav.ledger import CongestionLedger
from pysmartnav.models import (
    ComplianceState,
    CongestionState,
    Coordinate,
    Deviation,
    HeatmapSample,
    PreferenceFlags,
    RouteCandidate,
    RouteProfile,
    RouteSummary,
    TelemetryObservation,
    TrafficSample,
)
from pysmartnav.preferences import JsonPreferenceStore
from pysmartnav.scheduler import Scheduler, TickReport
from pysmartnav.state import (
    CollaboratorFailed,
    CriticalCongestion,
    DeviationDetected,
    EventQueue,
    NavEvent,
    RouteComputed,
    SessionState,
)
from pysmartnav.telemetry import TelemetrySampler

__all__ = [
    "__version__",
    "CollaboratorFailed",
    "CollaboratorUnavailable",
    "ComplianceMonitor",
    "ComplianceState",
    "ComplianceTracker",
    "CongestionLedger",
    "CongestionModel",
    "CongestionState",
    "Coordinate",
    "CriticalCongestion",
    "Deviation",
    "DeviationDetected",
    "EventQueue",
    "HeatmapSample",
    "HeatmapSampler",
    "InvalidObservation",
    "JsonPreferenceStore",
    "LocationUnavailable",
    "ModelConfig",
    "NavConfig",
    "NavConfigError",
    "NavError",
    "NavEvent",
    "NavTransportError",
    "NavigationClient",
    "NoActiveRoute",
    "PreferenceFlags",
    "ProviderConfig",
    "RouteCandidate",
    "RouteComputed",
    "RouteProfile",
    "RouteSummary",
    "Scheduler",
    "SessionState",
    "TelemetryObservation",
    "TelemetrySampler",
    "TickReport",
    "TrafficSample",
    "distance",
]
