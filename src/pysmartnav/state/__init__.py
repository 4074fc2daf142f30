"""Session state and event layer.

The scheduler owns one :class:`SessionState` per running session and is the
only component that mutates it. Components report what happened through
typed events; rendering or speaking them is left to an external dispatcher.
"""

from pysmartnav.state.events import (
    CollaboratorFailed,
    CriticalCongestion,
    DeviationDetected,
    EventKind,
    EventQueue,
    EventSink,
    NavEvent,
    RouteComputed,
)
from pysmartnav.state.session import SessionState

__all__ = [
    "CollaboratorFailed",
    "CriticalCongestion",
    "DeviationDetected",
    "EventKind",
    "EventQueue",
    "EventSink",
    "NavEvent",
    "RouteComputed",
    "SessionState",
]
