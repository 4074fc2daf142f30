"""Route models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pysmartnav._normalize import safe_float
from pysmartnav.models.coordinate import Coordinate

RoutePath = tuple[Coordinate, ...]
"""Ordered geometry of the active route. An empty tuple means no active route."""


class RouteProfile(StrEnum):
    FASTEST = "fastest"
    SHORTEST = "shortest"
    ECO_FRIENDLY = "eco-friendly"
    WALKING = "walking"
    CYCLING = "cycling"

    @property
    def travel_mode(self) -> str:
        """OSRM profile segment for this routing profile."""
        if self is RouteProfile.WALKING:
            return "walking"
        if self is RouteProfile.CYCLING:
            return "cycling"
        return "driving"

    @property
    def wants_alternatives(self) -> bool:
        return self is RouteProfile.ECO_FRIENDLY


class RouteCandidate(BaseModel):
    """One route returned by the routing provider.

    Parameters
    ----------
    geometry : tuple of Coordinate
        Route polyline, start to end.
    distance_m : float
        Route length in meters.
    duration_s : float
        Expected travel time in seconds.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    geometry: RoutePath = Field(default=())
    distance_m: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("distance", "distance_m"))
    duration_s: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("duration", "duration_s"))

    @model_validator(mode="before")
    @classmethod
    def _geojson_geometry(cls, values: Any) -> Any:
        """Accept an OSRM GeoJSON ``LineString`` (``[lon, lat]`` pairs)."""
        if not isinstance(values, dict):
            return values
        geometry = values.get("geometry")
        if isinstance(geometry, dict) and isinstance(geometry.get("coordinates"), list):
            merged = dict(values)
            merged["geometry"] = tuple(
                Coordinate(latitude=pair[1], longitude=pair[0])
                for pair in geometry["coordinates"]
                if isinstance(pair, (list, tuple)) and len(pair) >= 2
            )
            return merged
        return values

    @field_validator("distance_m", "duration_s", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @property
    def start(self) -> Coordinate | None:
        return self.geometry[0] if self.geometry else None

    @property
    def end(self) -> Coordinate | None:
        return self.geometry[-1] if self.geometry else None

    def summary(self, profile: RouteProfile | str) -> RouteSummary:
        label = profile.value if isinstance(profile, RouteProfile) else str(profile)
        return RouteSummary(distance_km=self.distance_m / 1000.0, duration_min=self.duration_s / 60.0, profile=label)


class RouteSummary(BaseModel):
    """Human-oriented summary of a computed route."""

    model_config = ConfigDict(frozen=True)

    distance_km: float
    duration_min: float
    profile: str

    def __str__(self) -> str:
        return (
            f"Distance: {self.distance_km:.1f} km\n"
            f"Duration: {self.duration_min:.1f} mins\n"
            f"Profile: {self.profile}"
        )
