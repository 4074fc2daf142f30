"""Periodic estimation and compliance loop.

One tick runs, in order:

a. acquire the current position (skip the rest of the tick on failure),
b. check route compliance, recalculating on deviation,
c. sample telemetry (synthetic fallback on failure) and refresh points of interest,
d. advance the congestion model,
e. regenerate the heatmap,
f. recalculate proactively in emergency mode,
g. persist the preference flags.

Ticks never overlap. Every mutation of the session state, including manual
route planning, happens while holding the scheduler's lock. Once
:meth:`Scheduler.stop` begins, the in-flight tick is cancelled and no further
collaborator call is started.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from typing import Any

from pydantic import BaseModel, ConfigDict

from pysmartnav import geo
from pysmartnav._constants import MSG_ECO_ROUTE_OK, MSG_OPTIMIZED_ROUTE, MSG_ROUTE_OK
from pysmartnav.collaborators import (
    Geocoder,
    LocationProvider,
    PoiProvider,
    PreferenceStore,
    RoutingProvider,
    TelemetryProvider,
    call_collaborator,
)
from pysmartnav.compliance import ComplianceMonitor, ComplianceTracker
from pysmartnav.config import NavConfig
from pysmartnav.congestion import CongestionModel
from pysmartnav.exceptions import CollaboratorUnavailable
from pysmartnav.heatmap import HeatmapSampler
from pysmartnav.ledger import CongestionLedger
from pysmartnav.models.compliance import Deviation
from pysmartnav.models.congestion import CongestionState
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.heatmap import HeatmapSample
from pysmartnav.models.preferences import PreferenceFlags
from pysmartnav.models.route import RouteCandidate, RouteProfile
from pysmartnav.models.telemetry import TrafficSample
from pysmartnav.routing import RoutePlanner
from pysmartnav.state.events import (
    CollaboratorFailed,
    DeviationDetected,
    EventQueue,
    EventSink,
    RouteComputed,
)
from pysmartnav.state.session import SessionState
from pysmartnav.telemetry import TelemetrySampler

_logger = logging.getLogger(__name__)


class TickReport(BaseModel):
    """What happened during one tick."""

    model_config = ConfigDict(frozen=True)

    tick: int
    skipped: str | None = None
    position: Coordinate | None = None
    deviation: Deviation | None = None
    traffic: TrafficSample | None = None
    congestion: CongestionState | None = None
    r0: float | None = None
    heatmap: tuple[HeatmapSample, ...] = ()
    recalculated: bool = False


class Scheduler:
    """Drive the tick loop of one navigation session.

    Usage::

        scheduler = Scheduler(config, location=gps, telemetry=traffic, routing=osrm)
        await scheduler.load_preferences()
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        config: NavConfig | None = None,
        *,
        location: LocationProvider,
        telemetry: TelemetryProvider | None = None,
        poi: PoiProvider | None = None,
        routing: RoutingProvider | None = None,
        geocoder: Geocoder | None = None,
        preferences: PreferenceStore | None = None,
        sink: EventSink | None = None,
        state: SessionState | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or NavConfig()
        model_cfg = self._config.model
        self._location = location
        self._telemetry = telemetry
        self._poi = poi
        self._preferences = preferences
        self.events: EventSink = sink if sink is not None else EventQueue()
        if state is None:
            state = SessionState(
                congestion=CongestionState(
                    infected=model_cfg.initial_infected,
                    beta=model_cfg.base_beta,
                    gamma=model_cfg.base_gamma,
                )
            )
        self.state = state

        rng = rng or random.Random(self._config.seed)
        self.sampler = TelemetrySampler(model_cfg, rng=rng)
        self.heatmap = HeatmapSampler(model_cfg, rng=rng)
        self.model = CongestionModel(model_cfg, state=self.state.congestion, sink=self.events)
        self.monitor = ComplianceMonitor(model_cfg.compliance_threshold_m)
        self.tracker = ComplianceTracker(
            model_cfg.compliance_threshold_m,
            clamp_rate=model_cfg.clamp_compliance_rate,
            state=self.state.compliance,
        )
        self.ledger = CongestionLedger()
        self.planner = (
            RoutePlanner(
                routing,
                geocoder,
                routing_timeout=self._config.routing_timeout,
                geocode_timeout=self._config.geocode_timeout,
            )
            if routing is not None
            else None
        )

        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[TickReport] | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the periodic tick. Must be called from a running event loop."""
        if self._closed:
            raise RuntimeError("Scheduler has been stopped")
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pysmartnav-scheduler")

    async def stop(self) -> None:
        """Stop ticking and cancel any in-flight tick. No tick runs afterwards.

        A tick started by a direct :meth:`tick` call is cancelled too; that
        call returns a ``skipped="stopped"`` report.
        """
        self._closed = True
        loop_task = self._task
        self._task = None
        if loop_task is not None and not loop_task.done():
            loop_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await loop_task
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            inflight.cancel()
            await asyncio.wait([inflight])

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        period = self._config.tick_period
        while not self._closed:
            started = loop.time()
            try:
                await self.tick()
            except Exception:
                _logger.warning("Tick failed unexpectedly", exc_info=True)
            await asyncio.sleep(max(0.0, period - (loop.time() - started)))

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    @property
    def flags(self) -> PreferenceFlags:
        return PreferenceFlags(
            emergency_mode=self.state.emergency_mode,
            eco_friendly_mode=self.state.eco_friendly_mode,
        )

    async def load_preferences(self) -> PreferenceFlags:
        """Load persisted flags into the session. Failures keep the current flags."""
        if self._preferences is None:
            return self.flags
        try:
            flags = await call_collaborator(
                self._preferences.load_flags(),
                timeout=self._config.persist_timeout,
                collaborator="persistence",
            )
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)
            return self.flags
        async with self._lock:
            self.state.emergency_mode = flags.emergency_mode
            self.state.eco_friendly_mode = flags.eco_friendly_mode
        return flags

    async def set_emergency_mode(self, enabled: bool) -> None:
        async with self._lock:
            self.state.emergency_mode = enabled

    async def set_eco_friendly_mode(self, enabled: bool) -> None:
        async with self._lock:
            self.state.eco_friendly_mode = enabled

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def tick(self) -> TickReport:
        """Run one tick. Returns immediately when another tick is in progress."""
        if self._closed:
            return TickReport(tick=self.state.ticks, skipped="stopped")
        if self._lock.locked() and self._task is not asyncio.current_task():
            _logger.debug("Tick requested while busy; skipping")
            return TickReport(tick=self.state.ticks, skipped="busy")
        async with self._lock:
            if self._closed:
                return TickReport(tick=self.state.ticks, skipped="stopped")
            # Run the body as its own task so stop() can cancel it from outside.
            inflight = asyncio.get_running_loop().create_task(self._tick_locked(), name="pysmartnav-tick")
            self._inflight = inflight
            try:
                return await inflight
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
                _logger.debug("In-flight tick cancelled by stop()")
                return TickReport(tick=self.state.ticks, skipped="stopped")
            finally:
                self._inflight = None

    async def _tick_locked(self) -> TickReport:
        state = self.state
        state.ticks += 1
        tick_no = state.ticks

        # (a) position
        try:
            position = await call_collaborator(
                self._location.get_current_position(),
                timeout=self._config.location_timeout,
                collaborator="location",
            )
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)
            return TickReport(tick=tick_no, skipped="location")
        if self._closed:
            return TickReport(tick=tick_no, skipped="stopped")
        state.record_position(position)

        # (b) compliance
        recalculated = False
        deviation = self.monitor.check_compliance(state.trace, state.route)
        if deviation is not None:
            self.tracker.update_compliance(deviation.position, deviation.nearest)
            self.events.emit(DeviationDetected(position=deviation.position, distance_m=deviation.distance_m))
            recalculated = await self._recalculate_locked()
            if self._closed:
                return TickReport(tick=tick_no, skipped="stopped", position=position, deviation=deviation)

        # (c) telemetry + points of interest
        traffic = await self._sample_traffic(position)
        state.traffic = traffic
        self.ledger.update_congestion(position, traffic.index)
        if not self._closed:
            await self._refresh_points_of_interest(position)
        if self._closed:
            return TickReport(tick=tick_no, skipped="stopped", position=position, traffic=traffic)

        # (d) congestion model
        self.model.update_parameters(traffic.index)
        self.model.step(traffic.index)

        # (e) heatmap
        state.heatmap = self.heatmap.generate(position, traffic.index)

        # (f) emergency mode
        if state.emergency_mode and not self._closed:
            recalculated = await self._recalculate_locked() or recalculated

        # (g) persistence
        if not self._closed:
            await self._persist()

        _logger.debug(
            "Tick %d: pos=%s traffic=%.3f (%s) I=%.3f R=%.3f",
            tick_no,
            position,
            traffic.index,
            traffic.source,
            state.congestion.infected,
            state.congestion.recovered,
        )
        return TickReport(
            tick=tick_no,
            position=position,
            deviation=deviation,
            traffic=traffic,
            congestion=self.model.snapshot(),
            r0=self.model.r0(),
            heatmap=state.heatmap,
            recalculated=recalculated,
        )

    async def _sample_traffic(self, position: Coordinate) -> TrafficSample:
        if self._telemetry is None:
            return self.sampler.synthetic()
        observation: Any = None
        try:
            observation = await call_collaborator(
                self._telemetry.get_telemetry(position),
                timeout=self._config.telemetry_timeout,
                collaborator="telemetry",
            )
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)
        return self.sampler.sample(observation)

    async def _refresh_points_of_interest(self, position: Coordinate) -> None:
        if self._poi is None:
            return
        try:
            points = await call_collaborator(
                self._poi.get_nearby_points_of_interest(position, self._config.poi_radius_m),
                timeout=self._config.poi_timeout,
                collaborator="poi",
            )
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)
            return
        self.state.points_of_interest = tuple(points)

    async def _persist(self) -> None:
        if self._preferences is None:
            return
        try:
            await call_collaborator(
                self._preferences.persist(self.flags),
                timeout=self._config.persist_timeout,
                collaborator="persistence",
            )
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)

    def _report_failure(self, exc: CollaboratorUnavailable) -> None:
        _logger.warning("%s collaborator failed: %s", exc.collaborator or "unknown", exc)
        self.events.emit(
            CollaboratorFailed(
                message=f"{exc.collaborator or 'collaborator'} unavailable",
                collaborator=exc.collaborator,
                error=str(exc),
            )
        )

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def recalculate_route(self) -> bool:
        """Route from the current position to the nearest point of interest."""
        async with self._lock:
            return await self._recalculate_locked()

    async def _recalculate_locked(self) -> bool:
        position = self.state.current_position
        if self.planner is None or position is None:
            return False
        target, _ = geo.nearest(position, self.state.points_of_interest)
        if target is None:
            _logger.debug("No point of interest to route to")
            return False
        try:
            route = await self.planner.compute(position, target, RouteProfile.FASTEST)
        except CollaboratorUnavailable as exc:
            self._report_failure(exc)
            return False
        self.state.replace_route(route.geometry, route.summary(RouteProfile.FASTEST))
        self.events.emit(RouteComputed(message=MSG_OPTIMIZED_ROUTE, points=len(route.geometry)))
        return True

    async def plan_route(
        self,
        start_address: str,
        end_address: str,
        profile: RouteProfile | str = RouteProfile.FASTEST,
    ) -> RouteCandidate | None:
        """Plan a custom route between two addresses.

        ``"Current Location"`` resolves to the latest position (or the
        configured default before the first fix). Eco-friendly mode
        overrides *profile*. Returns ``None`` and emits a
        :class:`CollaboratorFailed` event when an address cannot be resolved
        or routing fails; the previous route is kept in that case.
        """
        if not start_address.strip() or not end_address.strip():
            raise ValueError("Please enter both start and end points.")
        if self.planner is None:
            raise CollaboratorUnavailable("no routing provider configured", collaborator="routing")
        profile = RouteProfile(profile)

        async with self._lock:
            if self.state.eco_friendly_mode:
                profile = RouteProfile.ECO_FRIENDLY
            current = self.state.current_position or Coordinate(
                latitude=self._config.default_latitude,
                longitude=self._config.default_longitude,
            )
            try:
                start = await self.planner.resolve(start_address, current)
                end = await self.planner.resolve(end_address, current)
            except CollaboratorUnavailable as exc:
                self._report_failure(exc)
                return None
            if start is None or end is None:
                self._report_failure(
                    CollaboratorUnavailable("Could not find one or both locations.", collaborator="geocoding")
                )
                return None

            try:
                route = await self.planner.compute(start, end, profile)
            except CollaboratorUnavailable as exc:
                self._report_failure(exc)
                return None

            summary = route.summary(profile)
            self.state.start_point = start
            self.state.end_point = end
            self.state.replace_route(route.geometry, summary)
            message = MSG_ECO_ROUTE_OK if profile is RouteProfile.ECO_FRIENDLY else MSG_ROUTE_OK
            self.events.emit(RouteComputed(message=message, points=len(route.geometry), summary=summary))
            return route

    async def clear_route(self) -> None:
        async with self._lock:
            self.state.clear_route()
