"""Per-location record of observed traffic indices."""

from __future__ import annotations

from pysmartnav._constants import LEDGER_MAX_ENTRIES, LEDGER_PRECISION, clamp
from pysmartnav.models.coordinate import Coordinate


class CongestionLedger:
    """Latest traffic index seen at each visited location.

    Bookkeeping only: locations do not influence each other. Coordinates are
    rounded to *precision* decimal places (4 is roughly 11 m) so nearby
    fixes share one entry, and once *max_entries* locations are recorded the
    least recently updated one is dropped.
    """

    def __init__(self, *, precision: int = LEDGER_PRECISION, max_entries: int = LEDGER_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._precision = precision
        self._max_entries = max_entries
        self._levels: dict[Coordinate, float] = {}

    def _key(self, location: Coordinate) -> Coordinate:
        return Coordinate(
            latitude=round(location.latitude, self._precision),
            longitude=round(location.longitude, self._precision),
        )

    def update_congestion(self, location: Coordinate, traffic_index: float) -> None:
        key = self._key(location)
        # Re-insert so dict order tracks recency.
        self._levels.pop(key, None)
        self._levels[key] = clamp(traffic_index)
        while len(self._levels) > self._max_entries:
            del self._levels[next(iter(self._levels))]

    def system_wide_congestion(self) -> float | None:
        """Average of the recorded levels, ``None`` before the first record."""
        if not self._levels:
            return None
        return sum(self._levels.values()) / len(self._levels)

    def get(self, location: Coordinate) -> float | None:
        return self._levels.get(self._key(location))

    def __len__(self) -> int:
        return len(self._levels)
