"""Conversion of live-speed telemetry into a real-time traffic index."""

from __future__ import annotations

import logging
import random
from typing import Any

from pydantic import ValidationError

from pysmartnav._constants import clamp
from pysmartnav.config import ModelConfig
from pysmartnav.exceptions import InvalidObservation
from pysmartnav.models.telemetry import TelemetryObservation, TrafficSample, TrafficSource

_logger = logging.getLogger(__name__)


def validate_observation(observation: Any) -> TelemetryObservation:
    """Return a usable observation or raise :class:`InvalidObservation`.

    Usable means both speeds are present and strictly positive.
    """
    if observation is None:
        raise InvalidObservation("no telemetry observation")
    if not isinstance(observation, TelemetryObservation):
        try:
            observation = TelemetryObservation.model_validate(observation)
        except ValidationError as exc:
            raise InvalidObservation(f"malformed telemetry payload: {exc}") from exc
    free_flow = observation.free_flow_speed
    current = observation.current_speed
    if free_flow is None or free_flow <= 0:
        raise InvalidObservation(f"invalid free-flow speed: {free_flow!r}")
    if current is None or current <= 0:
        raise InvalidObservation(f"invalid current speed: {current!r}")
    return observation


class TelemetrySampler:
    """Turn an optional provider observation into a traffic index in ``[0, 1]``.

    Observations that are absent or invalid fall back to a synthetic index
    drawn uniformly from the configured low-congestion band.
    """

    def __init__(self, config: ModelConfig | None = None, *, rng: random.Random | None = None) -> None:
        self._config = config or ModelConfig()
        self._rng = rng or random.Random()

    def sample(self, observation: Any) -> TrafficSample:
        try:
            valid = validate_observation(observation)
        except InvalidObservation as exc:
            _logger.debug("Falling back to synthetic traffic: %s", exc)
            return self.synthetic()

        assert valid.current_speed is not None and valid.free_flow_speed is not None  # noqa: S101
        index = clamp(1.0 - valid.current_speed / valid.free_flow_speed)
        _logger.debug(
            "Traffic index %.3f from current=%s free_flow=%s",
            index,
            valid.current_speed,
            valid.free_flow_speed,
        )
        return TrafficSample(index=index, source=TrafficSource.PROVIDER)

    def synthetic(self) -> TrafficSample:
        low = self._config.synthetic_low
        high = self._config.synthetic_high
        index = clamp(self._rng.uniform(low, high), low, high)
        _logger.debug("Simulated traffic index %.3f", index)
        return TrafficSample(index=index, source=TrafficSource.SYNTHETIC)
