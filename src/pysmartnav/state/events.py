"""Typed notification events.

Components never talk to a UI or a voice engine directly. They emit these
events into an :class:`EventSink`; an external dispatcher renders them.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

from pysmartnav import _constants as c
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.route import RouteSummary

_logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    DEVIATION_DETECTED = "deviation_detected"
    CRITICAL_CONGESTION = "critical_congestion"
    ROUTE_COMPUTED = "route_computed"
    COLLABORATOR_FAILED = "collaborator_failed"


class NavEvent(BaseModel):
    """Base of every event emitted by the core."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    message: str
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class DeviationDetected(NavEvent):
    kind: Literal[EventKind.DEVIATION_DETECTED] = EventKind.DEVIATION_DETECTED
    message: str = c.MSG_DEVIATION
    position: Coordinate
    distance_m: float


class CriticalCongestion(NavEvent):
    kind: Literal[EventKind.CRITICAL_CONGESTION] = EventKind.CRITICAL_CONGESTION
    message: str = c.MSG_CRITICAL
    infected: float = Field(description="Congestion index that crossed the threshold, before reset")


class RouteComputed(NavEvent):
    kind: Literal[EventKind.ROUTE_COMPUTED] = EventKind.ROUTE_COMPUTED
    message: str = c.MSG_OPTIMIZED_ROUTE
    points: int = Field(ge=0, description="Number of points in the new geometry")
    summary: RouteSummary | None = None


class CollaboratorFailed(NavEvent):
    """Informational only: a collaborator failed and the tick degraded."""

    kind: Literal[EventKind.COLLABORATOR_FAILED] = EventKind.COLLABORATOR_FAILED
    collaborator: str
    error: str = ""


class EventSink(Protocol):
    """Notifier collaborator. Fire-and-forget from the core's perspective."""

    def emit(self, event: NavEvent) -> None: ...


class EventQueue:
    """In-memory :class:`EventSink` backed by an :class:`asyncio.Queue`.

    When the queue is full the oldest event is dropped so emitting never
    blocks a tick.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: asyncio.Queue[NavEvent] = asyncio.Queue(maxsize=maxsize)

    def emit(self, event: NavEvent) -> None:
        if self._queue.full():
            dropped = self._queue.get_nowait()
            _logger.debug("Event queue full; dropping %s", dropped.kind)
        self._queue.put_nowait(event)

    async def get(self) -> NavEvent:
        return await self._queue.get()

    def drain(self) -> list[NavEvent]:
        """Return and remove every queued event."""
        events: list[NavEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def __len__(self) -> int:
        return self._queue.qsize()
