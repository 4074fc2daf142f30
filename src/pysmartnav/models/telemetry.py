"""Traffic telemetry models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pysmartnav._normalize import safe_float, unwrap


class TrafficSource(StrEnum):
    PROVIDER = "provider"
    SYNTHETIC = "synthetic"


class TelemetryObservation(BaseModel):
    """Live-speed observation for the road segment nearest a point.

    Numeric fields are ``None`` when the value is absent or unparseable.
    The TomTom ``flowSegmentData`` wrapper is unwrapped automatically.

    Parameters
    ----------
    current_speed : float or None
        Currently measured speed on the segment.
    free_flow_speed : float or None
        Speed expected under free-flow conditions.
    raw : dict
        Full provider payload.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    current_speed: float | None = Field(
        default=None,
        validation_alias=AliasChoices("currentSpeed", "current_speed"),
    )
    free_flow_speed: float | None = Field(
        default=None,
        validation_alias=AliasChoices("freeFlowSpeed", "free_flow_speed"),
    )
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_flow_segment(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(unwrap(values, "flowSegmentData"))
        merged.setdefault("raw", values)
        return merged

    @field_validator("current_speed", "free_flow_speed", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class TrafficSample(BaseModel):
    """Real-time traffic index for one tick."""

    model_config = ConfigDict(frozen=True)

    index: float = Field(ge=0.0, le=1.0)
    source: TrafficSource

    @property
    def is_synthetic(self) -> bool:
        return self.source == TrafficSource.SYNTHETIC
