from __future__ import annotations

import json
from pathlib import Path

import pytest

from pysmartnav.models import PreferenceFlags
from pysmartnav.preferences import JsonPreferenceStore


@pytest.mark.asyncio
async def test_round_trip(tmp_path: Path) -> None:
    store = JsonPreferenceStore(tmp_path / "nested" / "prefs.json")

    await store.persist(PreferenceFlags(emergency_mode=True, eco_friendly_mode=False))

    assert json.loads(store.path.read_text(encoding="utf-8")) == {"emergencyMode": True, "ecoFriendlyMode": False}
    loaded = await store.load_flags()
    assert loaded.emergency_mode is True
    assert loaded.eco_friendly_mode is False


@pytest.mark.asyncio
async def test_missing_file_loads_defaults(tmp_path: Path) -> None:
    loaded = await JsonPreferenceStore(tmp_path / "absent.json").load_flags()
    assert loaded == PreferenceFlags()


@pytest.mark.asyncio
async def test_corrupt_file_loads_defaults(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    assert await JsonPreferenceStore(path).load_flags() == PreferenceFlags()


@pytest.mark.asyncio
async def test_persist_overwrites_previous_flags(tmp_path: Path) -> None:
    store = JsonPreferenceStore(tmp_path / "prefs.json")
    await store.persist(PreferenceFlags(eco_friendly_mode=True))
    await store.persist(PreferenceFlags(emergency_mode=True))

    loaded = await store.load_flags()
    assert loaded.emergency_mode is True
    assert loaded.eco_friendly_mode is False
    assert not (tmp_path / "prefs.json.tmp").exists()
