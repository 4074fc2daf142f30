"""Coordinate value type."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pysmartnav._normalize import safe_float


class Coordinate(BaseModel):
    """A (latitude, longitude) pair in degrees.

    Immutable and hashable, so it can key the deviation counts of a
    compliance tracker. Accepts the ``lat``/``lon``/``lng`` spellings used
    by the providers.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lon", "lng"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> Any:
        parsed = safe_float(value)
        # Let pydantic report the original value when it cannot be parsed.
        return value if parsed is None else parsed

    @classmethod
    def of(cls, latitude: float, longitude: float) -> Coordinate:
        return cls(latitude=latitude, longitude=longitude)

    def offset(self, d_lat: float, d_lon: float) -> Coordinate:
        """Return a new coordinate shifted by the given degrees."""
        return Coordinate(latitude=self.latitude + d_lat, longitude=self.longitude + d_lon)

    def __str__(self) -> str:
        return f"({self.latitude:.6f}, {self.longitude:.6f})"
