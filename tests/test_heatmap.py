from __future__ import annotations

import random

import pytest

from pysmartnav.config import ModelConfig
from pysmartnav.heatmap import HeatmapSampler, lerp_color
from pysmartnav.models import Coordinate
from pysmartnav.models.heatmap import HIGH_CONGESTION_COLOR, LOW_CONGESTION_COLOR


def _sampler() -> HeatmapSampler:
    return HeatmapSampler(rng=random.Random(5))


def test_generates_twenty_samples_around_center() -> None:
    center = Coordinate.of(37.7749, -122.4194)
    samples = _sampler().generate(center, 0.4)

    assert len(samples) == 20
    for sample in samples:
        assert abs(sample.center.latitude - center.latitude) <= 0.01 + 1e-12
        assert abs(sample.center.longitude - center.longitude) <= 0.01 + 1e-12
        assert sample.radius == pytest.approx(40.0)
        assert sample.intensity == pytest.approx(0.4)
        assert sample.color.alpha == pytest.approx(0.5)


@pytest.mark.parametrize(("idx", "radius"), [(0.0, 20.0), (0.5, 45.0), (1.0, 70.0), (3.0, 70.0), (-1.0, 20.0)])
def test_radius_grows_with_traffic(idx: float, radius: float) -> None:
    assert _sampler().radius_for(idx) == pytest.approx(radius)


def test_color_endpoints() -> None:
    sampler = _sampler()
    free = sampler.generate(Coordinate.of(0.0, 0.0), 0.0)[0].color
    jammed = sampler.generate(Coordinate.of(0.0, 0.0), 1.0)[0].color

    assert (free.red, free.green, free.blue) == (LOW_CONGESTION_COLOR.red, LOW_CONGESTION_COLOR.green, LOW_CONGESTION_COLOR.blue)
    assert (jammed.red, jammed.green, jammed.blue) == (
        HIGH_CONGESTION_COLOR.red,
        HIGH_CONGESTION_COLOR.green,
        HIGH_CONGESTION_COLOR.blue,
    )


def test_lerp_midpoint_and_hex() -> None:
    color = lerp_color(LOW_CONGESTION_COLOR, HIGH_CONGESTION_COLOR, 0.5, alpha=0.5)
    assert color.red == round((0x4C + 0xF4) / 2)
    assert color.to_hex().startswith("#80")


def test_each_call_is_a_fresh_sample_set() -> None:
    sampler = _sampler()
    center = Coordinate.of(10.0, 10.0)
    assert sampler.generate(center, 0.2) != sampler.generate(center, 0.2)


def test_samples_near_the_pole_stay_valid() -> None:
    samples = _sampler().generate(Coordinate.of(90.0, 180.0), 0.5)
    assert all(-90.0 <= s.center.latitude <= 90.0 for s in samples)
    assert all(-180.0 <= s.center.longitude <= 180.0 for s in samples)


def test_sample_count_is_configurable() -> None:
    sampler = HeatmapSampler(ModelConfig(heatmap_samples=5), rng=random.Random(1))
    assert len(sampler.generate(Coordinate.of(0.0, 0.0), 0.1)) == 5
