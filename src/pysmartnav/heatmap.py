"""Spatial heatmap samples derived from the scalar traffic index."""

from __future__ import annotations

import logging
import random

from pysmartnav._constants import clamp
from pysmartnav.config import ModelConfig
from pysmartnav.models.coordinate import Coordinate
from pysmartnav.models.heatmap import HIGH_CONGESTION_COLOR, LOW_CONGESTION_COLOR, HeatmapSample, Rgba

_logger = logging.getLogger(__name__)


def lerp_color(low: Rgba, high: Rgba, t: float, *, alpha: float) -> Rgba:
    """Linear interpolation between two colours, with a fixed output alpha."""
    t = clamp(t)
    return Rgba(
        red=round(low.red + (high.red - low.red) * t),
        green=round(low.green + (high.green - low.green) * t),
        blue=round(low.blue + (high.blue - low.blue) * t),
        alpha=alpha,
    )


class HeatmapSampler:
    """Regenerate the heatmap around a center point.

    Every call returns a fresh tuple; nothing carries over between ticks.
    """

    def __init__(self, config: ModelConfig | None = None, *, rng: random.Random | None = None) -> None:
        self._config = config or ModelConfig()
        self._rng = rng or random.Random()

    def radius_for(self, traffic_index: float) -> float:
        return self._config.heatmap_base_radius + self._config.heatmap_radius_scale * clamp(traffic_index)

    def generate(self, center: Coordinate, traffic_index: float) -> tuple[HeatmapSample, ...]:
        cfg = self._config
        idx = clamp(traffic_index)
        radius = self.radius_for(idx)
        color = lerp_color(LOW_CONGESTION_COLOR, HIGH_CONGESTION_COLOR, idx, alpha=cfg.heatmap_opacity)
        jitter = cfg.heatmap_jitter_deg

        samples = tuple(
            HeatmapSample(
                center=Coordinate(
                    latitude=clamp(center.latitude + self._rng.uniform(-jitter, jitter), -90.0, 90.0),
                    longitude=clamp(center.longitude + self._rng.uniform(-jitter, jitter), -180.0, 180.0),
                ),
                radius=radius,
                intensity=idx,
                color=color,
            )
            for _ in range(cfg.heatmap_samples)
        )
        _logger.debug("Heatmap regenerated: %d samples radius=%.1f color=%s", len(samples), radius, color.to_hex())
        return samples
