"""High-level async entry point wiring the bundled HTTP adapters."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pysmartnav._api.nominatim import NominatimGeocoder
from pysmartnav._api.osrm import OsrmRouting
from pysmartnav._api.overpass import OverpassPoi
from pysmartnav._api.tomtom import TomTomTelemetry
from pysmartnav._transport import JsonTransport
from pysmartnav.collaborators import LocationProvider, PreferenceStore
from pysmartnav.config import NavConfig
from pysmartnav.exceptions import NavError
from pysmartnav.preferences import JsonPreferenceStore
from pysmartnav.scheduler import Scheduler
from pysmartnav.state.events import EventQueue, EventSink

_logger = logging.getLogger(__name__)


class NavigationClient:
    """Run a navigation session against the public providers.

    The location collaborator is device-specific and must be supplied.
    Telemetry comes from TomTom, hospitals from Overpass, routes from OSRM
    and addresses from Nominatim.

    Usage::

        async with NavigationClient(config, location=gps) as nav:
            await nav.scheduler.plan_route("Current Location", "Ferry Building, San Francisco")
            while True:
                event = await nav.events.get()
                ...
    """

    def __init__(
        self,
        config: NavConfig,
        *,
        location: LocationProvider,
        session: aiohttp.ClientSession | None = None,
        preferences: PreferenceStore | None = None,
        sink: EventSink | None = None,
        autostart: bool = True,
    ) -> None:
        self._config = config
        self._location = location
        self._external_session = session is not None
        self._http_session = session
        self._preferences = preferences
        self._sink = sink
        self._autostart = autostart
        self._scheduler: Scheduler | None = None
        self.events: EventQueue | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NavigationClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        providers = self._config.providers

        def _transport(collaborator: str, timeout: float) -> JsonTransport:
            assert self._http_session is not None  # noqa: S101
            return JsonTransport(
                self._http_session,
                collaborator=collaborator,
                user_agent=providers.user_agent,
                timeout=timeout,
            )

        sink = self._sink
        if sink is None:
            self.events = EventQueue()
            sink = self.events

        self._scheduler = Scheduler(
            self._config,
            location=self._location,
            telemetry=TomTomTelemetry(_transport("telemetry", self._config.telemetry_timeout), providers),
            poi=OverpassPoi(_transport("poi", self._config.poi_timeout), providers),
            routing=OsrmRouting(_transport("routing", self._config.routing_timeout), providers),
            geocoder=NominatimGeocoder(_transport("geocoding", self._config.geocode_timeout), providers),
            preferences=self._preferences or JsonPreferenceStore(self._config.preferences_path),
            sink=sink,
        )
        await self._scheduler.load_preferences()
        if self._autostart:
            self._scheduler.start()
        _logger.debug("Navigation session started (autostart=%s)", self._autostart)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._scheduler is not None:
            await self._scheduler.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is None:
            raise NavError("Client not initialized. Use 'async with NavigationClient(...) as nav:'")
        return self._scheduler
