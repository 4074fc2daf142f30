#!/usr/bin/env python3
"""Run a live navigation session from a fixed or simulated position.

Uses the public providers (TomTom, Overpass, OSRM, Nominatim) and prints
every event and tick summary until interrupted or ``--duration`` elapses.

Usage
-----
::

    export SMARTNAV_TOMTOM_API_KEY="..."      # optional; synthetic traffic without it
    python scripts/run_session.py --lat 37.7749 --lon -122.4194 --to "Ferry Building, San Francisco"

Options::

    --lat/--lon DEG      Starting position (default: configured default location)
    --drift DEG          Random walk per tick, in degrees (default: 0)
    --to ADDRESS         Plan a route from "Current Location" to ADDRESS
    --profile NAME       Routing profile (fastest, shortest, eco-friendly, walking, cycling)
    --emergency          Enable emergency mode (route to the nearest hospital)
    --eco                Enable eco-friendly mode
    --duration SECONDS   Stop after this many seconds (default: run until Ctrl-C)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysmartnav import Coordinate, NavConfig, NavError, NavEvent, NavigationClient, RouteProfile  # noqa: E402


class DriftingLocation:
    """Location provider that random-walks around a starting point."""

    def __init__(self, start: Coordinate, drift_deg: float) -> None:
        self._position = start
        self._drift = drift_deg
        self._rng = random.Random()

    async def get_current_position(self) -> Coordinate:
        if self._drift:
            self._position = self._position.offset(
                self._rng.uniform(-self._drift, self._drift),
                self._rng.uniform(-self._drift, self._drift),
            )
        return self._position


def _print_event(event: NavEvent) -> None:
    print(f"[{event.observed_at:%H:%M:%S}] {event.kind}: {event.message}")
    summary = getattr(event, "summary", None)
    if summary is not None:
        for line in str(summary).splitlines():
            print(f"    {line}")


async def _watch(nav: NavigationClient) -> None:
    assert nav.events is not None  # noqa: S101
    while True:
        _print_event(await nav.events.get())


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run a live pysmartnav session")
    parser.add_argument("--lat", type=float, help="Starting latitude")
    parser.add_argument("--lon", type=float, help="Starting longitude")
    parser.add_argument("--drift", type=float, default=0.0, help="Random walk per tick, in degrees")
    parser.add_argument("--to", dest="destination", help="Destination address")
    parser.add_argument(
        "--profile",
        default=RouteProfile.FASTEST.value,
        choices=[p.value for p in RouteProfile],
        help="Routing profile",
    )
    parser.add_argument("--emergency", action="store_true", help="Enable emergency mode")
    parser.add_argument("--eco", action="store_true", help="Enable eco-friendly mode")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = NavConfig.from_env()
    except NavError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    start = Coordinate(
        latitude=args.lat if args.lat is not None else config.default_latitude,
        longitude=args.lon if args.lon is not None else config.default_longitude,
    )
    location = DriftingLocation(start, args.drift)

    async with NavigationClient(config, location=location) as nav:
        scheduler = nav.scheduler
        if args.emergency:
            await scheduler.set_emergency_mode(True)
        if args.eco:
            await scheduler.set_eco_friendly_mode(True)

        watcher = asyncio.create_task(_watch(nav))
        try:
            if args.destination:
                await scheduler.plan_route("Current Location", args.destination, args.profile)
            if args.duration is not None:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            watcher.cancel()
            state = scheduler.state
            print(
                f"\nticks={state.ticks} congestion={state.congestion.infected:.3f} "
                f"compliance={state.compliance.compliance_rate:.2f} "
                f"system_wide={scheduler.ledger.system_wide_congestion()}"
            )


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
