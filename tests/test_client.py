from __future__ import annotations

from pathlib import Path

import aiohttp
import pytest

from pysmartnav.client import NavigationClient
from pysmartnav.config import NavConfig
from pysmartnav.exceptions import NavError
from pysmartnav.models import Coordinate


class _StaticLocation:
    async def get_current_position(self) -> Coordinate:
        return Coordinate.of(37.7749, -122.4194)


def test_scheduler_requires_context_manager() -> None:
    client = NavigationClient(NavConfig(), location=_StaticLocation())
    with pytest.raises(NavError):
        _ = client.scheduler


@pytest.mark.asyncio
async def test_client_loads_preferences_without_starting(tmp_path: Path) -> None:
    prefs = tmp_path / "prefs.json"
    prefs.write_text('{"ecoFriendlyMode": true}', encoding="utf-8")
    config = NavConfig(preferences_path=prefs)

    async with NavigationClient(config, location=_StaticLocation(), autostart=False) as nav:
        assert not nav.scheduler.is_running
        assert nav.scheduler.state.eco_friendly_mode is True
        assert nav.scheduler.planner is not None
        assert nav.events is not None

    assert (await nav.scheduler.tick()).skipped == "stopped"


@pytest.mark.asyncio
async def test_client_leaves_external_session_open(tmp_path: Path) -> None:
    config = NavConfig(preferences_path=tmp_path / "prefs.json")
    async with aiohttp.ClientSession() as session:
        async with NavigationClient(config, location=_StaticLocation(), session=session, autostart=False):
            pass
        assert not session.closed
