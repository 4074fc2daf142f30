"""Session configuration for pysmartnav."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pysmartnav import _constants as c
from pysmartnav.exceptions import NavConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise NavConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class ModelConfig:
    """Tuning constants of the congestion, heatmap and compliance components.

    The critical threshold and reset baseline have no derivation beyond
    observed behaviour, so they are configuration rather than law.
    """

    base_beta: float = c.BASE_BETA
    base_gamma: float = c.BASE_GAMMA
    decay: float = c.DECAY
    critical_threshold: float = c.CRITICAL_THRESHOLD
    reset_baseline: float = c.RESET_BASELINE
    initial_infected: float = c.INITIAL_INFECTED
    synthetic_low: float = c.SYNTHETIC_LOW
    synthetic_high: float = c.SYNTHETIC_HIGH
    heatmap_samples: int = c.HEATMAP_SAMPLES
    heatmap_jitter_deg: float = c.HEATMAP_JITTER_DEG
    heatmap_base_radius: float = c.HEATMAP_BASE_RADIUS
    heatmap_radius_scale: float = c.HEATMAP_RADIUS_SCALE
    heatmap_opacity: float = c.HEATMAP_OPACITY
    compliance_threshold_m: float = c.COMPLIANCE_THRESHOLD_M
    clamp_compliance_rate: bool = True

    def __post_init__(self) -> None:
        if self.base_beta <= 0 or self.base_gamma <= 0:
            raise NavConfigError("base_beta and base_gamma must be > 0")
        if not 0.0 < self.reset_baseline < self.critical_threshold <= 1.0:
            raise NavConfigError("expected 0 < reset_baseline < critical_threshold <= 1")
        if not 0.0 <= self.synthetic_low <= self.synthetic_high <= 1.0:
            raise NavConfigError("expected 0 <= synthetic_low <= synthetic_high <= 1")
        if self.heatmap_samples < 1:
            raise NavConfigError("heatmap_samples must be >= 1")
        if self.heatmap_base_radius <= 0:
            raise NavConfigError("heatmap_base_radius must be > 0")
        if self.compliance_threshold_m <= 0:
            raise NavConfigError("compliance_threshold_m must be > 0")


@dataclasses.dataclass(frozen=True)
class ProviderConfig:
    """Endpoints and credentials of the bundled HTTP provider adapters.

    Parameters
    ----------
    tomtom_api_key : str or None
        TomTom traffic API key. Without it the telemetry adapter reports
        no observation and the sampler falls back to synthetic traffic.
    tomtom_url : str
        Flow-segment endpoint (``absolute/10/json`` zoom level).
    osrm_url : str
        OSRM route service base, profile is appended.
    overpass_url : str
        Overpass interpreter endpoint used for hospital lookups.
    nominatim_url : str
        Nominatim search endpoint.
    user_agent : str
        Sent on every request (Nominatim rejects anonymous clients).
    """

    tomtom_api_key: str | None = None
    tomtom_url: str = "https://api.tomtom.com/traffic/services/4/flowSegmentData/absolute/10/json"
    osrm_url: str = "https://router.project-osrm.org/route/v1"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = c.USER_AGENT


@dataclasses.dataclass(frozen=True)
class NavConfig:
    """Session configuration.

    Parameters
    ----------
    tick_period : float
        Seconds between scheduler ticks.
    location_timeout, telemetry_timeout, poi_timeout, routing_timeout, geocode_timeout, persist_timeout : float
        Upper bound in seconds for each collaborator call. A timeout is a
        normal collaborator failure.
    poi_radius_m : float
        Search radius for nearby points of interest.
    default_latitude, default_longitude : float
        Position used for routing from ``"Current Location"`` before the
        first successful fix.
    preferences_path : Path
        JSON file backing the bundled preference store.
    seed : int or None
        Seed of the session random source (synthetic traffic, heatmap
        jitter). ``None`` seeds from the OS.
    model : ModelConfig
        Tuning constants.
    providers : ProviderConfig
        Provider endpoints.
    """

    tick_period: float = 10.0
    location_timeout: float = 10.0
    telemetry_timeout: float = 5.0
    poi_timeout: float = 10.0
    routing_timeout: float = 10.0
    geocode_timeout: float = 10.0
    persist_timeout: float = 5.0
    poi_radius_m: float = 5000.0
    default_latitude: float = 37.7749
    default_longitude: float = -122.4194
    preferences_path: Path = dataclasses.field(default_factory=lambda: Path("smartnav_preferences.json"))
    seed: int | None = None
    model: ModelConfig = dataclasses.field(default_factory=ModelConfig)
    providers: ProviderConfig = dataclasses.field(default_factory=ProviderConfig)

    def __post_init__(self) -> None:
        if self.tick_period <= 0:
            raise NavConfigError("tick_period must be > 0")
        for name in (
            "location_timeout",
            "telemetry_timeout",
            "poi_timeout",
            "routing_timeout",
            "geocode_timeout",
            "persist_timeout",
        ):
            if getattr(self, name) <= 0:
                raise NavConfigError(f"{name} must be > 0")
        if self.poi_radius_m <= 0:
            raise NavConfigError("poi_radius_m must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> NavConfig:
        """Create configuration from ``SMARTNAV_*`` environment variables.

        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        NavConfig
            Populated configuration.
        """
        env = os.environ

        provider_kwargs: dict[str, Any] = {}
        _ENV_PROVIDER_MAP = {
            "SMARTNAV_TOMTOM_API_KEY": "tomtom_api_key",
            "SMARTNAV_TOMTOM_URL": "tomtom_url",
            "SMARTNAV_OSRM_URL": "osrm_url",
            "SMARTNAV_OVERPASS_URL": "overpass_url",
            "SMARTNAV_NOMINATIM_URL": "nominatim_url",
            "SMARTNAV_USER_AGENT": "user_agent",
        }
        for env_key, field_name in _ENV_PROVIDER_MAP.items():
            val = env.get(env_key)
            if val is not None:
                provider_kwargs[field_name] = val

        provider_overrides = overrides.pop("providers", None)
        if isinstance(provider_overrides, dict):
            provider_kwargs.update(provider_overrides)
        elif isinstance(provider_overrides, ProviderConfig):
            provider_kwargs = dataclasses.asdict(provider_overrides)

        model_kwargs: dict[str, Any] = {}
        _ENV_MODEL_MAP = {
            "SMARTNAV_CRITICAL_THRESHOLD": "critical_threshold",
            "SMARTNAV_RESET_BASELINE": "reset_baseline",
            "SMARTNAV_COMPLIANCE_THRESHOLD_M": "compliance_threshold_m",
        }
        for env_key, field_name in _ENV_MODEL_MAP.items():
            val = _env_float(env, env_key)
            if val is not None:
                model_kwargs[field_name] = val
        if (clamp_env := env.get("SMARTNAV_CLAMP_COMPLIANCE_RATE")) is not None:
            model_kwargs["clamp_compliance_rate"] = _env_bool(clamp_env, True)

        model_overrides = overrides.pop("model", None)
        if isinstance(model_overrides, dict):
            model_kwargs.update(model_overrides)
        elif isinstance(model_overrides, ModelConfig):
            model_kwargs = dataclasses.asdict(model_overrides)

        config_kwargs: dict[str, Any] = {
            "providers": ProviderConfig(**provider_kwargs),
            "model": ModelConfig(**model_kwargs),
        }

        _ENV_FLOAT_MAP = {
            "SMARTNAV_TICK_PERIOD": "tick_period",
            "SMARTNAV_LOCATION_TIMEOUT": "location_timeout",
            "SMARTNAV_TELEMETRY_TIMEOUT": "telemetry_timeout",
            "SMARTNAV_POI_TIMEOUT": "poi_timeout",
            "SMARTNAV_ROUTING_TIMEOUT": "routing_timeout",
            "SMARTNAV_GEOCODE_TIMEOUT": "geocode_timeout",
            "SMARTNAV_PERSIST_TIMEOUT": "persist_timeout",
            "SMARTNAV_POI_RADIUS_M": "poi_radius_m",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            if field_name in overrides:
                continue
            val = _env_float(env, env_key)
            if val is not None:
                config_kwargs[field_name] = val

        prefs_env = env.get("SMARTNAV_PREFERENCES_PATH")
        if prefs_env is not None and "preferences_path" not in overrides:
            config_kwargs["preferences_path"] = Path(prefs_env)

        seed_env = env.get("SMARTNAV_SEED")
        if seed_env is not None and "seed" not in overrides:
            try:
                config_kwargs["seed"] = int(seed_env)
            except ValueError as exc:
                raise NavConfigError(f"SMARTNAV_SEED must be an integer, got {seed_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
