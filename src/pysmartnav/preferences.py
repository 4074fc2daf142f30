"""JSON-file backed preference store."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from pysmartnav.models.preferences import PreferenceFlags

_logger = logging.getLogger(__name__)


class JsonPreferenceStore:
    """Persist :class:`PreferenceFlags` as a small JSON document.

    A missing or unreadable file loads as the default flags. Writes go to a
    temporary sibling first and are then renamed into place.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def persist(self, flags: PreferenceFlags) -> None:
        await asyncio.to_thread(self._write, flags)

    async def load_flags(self) -> PreferenceFlags:
        return await asyncio.to_thread(self._read)

    def _write(self, flags: PreferenceFlags) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(flags.model_dump(by_alias=True), indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def _read(self) -> PreferenceFlags:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return PreferenceFlags()
        try:
            return PreferenceFlags.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError):
            _logger.warning("Ignoring unreadable preferences file %s", self._path, exc_info=True)
            return PreferenceFlags()
