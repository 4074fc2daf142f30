"""Heatmap sample model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pysmartnav.models.coordinate import Coordinate


class Rgba(BaseModel):
    model_config = ConfigDict(frozen=True)

    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    alpha: float = Field(ge=0.0, le=1.0)

    def to_hex(self) -> str:
        """``#AARRGGBB`` with the alpha channel scaled to 0-255."""
        return f"#{round(self.alpha * 255):02X}{self.red:02X}{self.green:02X}{self.blue:02X}"


#: Colour anchors of the congestion gradient (low = free flow, high = jammed).
LOW_CONGESTION_COLOR = Rgba(red=0x4C, green=0xAF, blue=0x50, alpha=1.0)
HIGH_CONGESTION_COLOR = Rgba(red=0xF4, green=0x43, blue=0x36, alpha=1.0)


class HeatmapSample(BaseModel):
    """A single weighted circle of the congestion heatmap."""

    model_config = ConfigDict(frozen=True)

    center: Coordinate
    radius: float = Field(gt=0.0)
    intensity: float = Field(ge=0.0, le=1.0)
    color: Rgba
