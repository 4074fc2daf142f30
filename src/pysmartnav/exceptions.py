"""Custom exception hierarchy for pysmartnav."""

from __future__ import annotations


class NavError(Exception):
    """Base exception for all pysmartnav errors."""


class NavConfigError(NavError):
    """Invalid or missing configuration."""


class CollaboratorUnavailable(NavError):
    """An external collaborator (location, telemetry, routing, POI, geocoding) failed.

    Always non-fatal to the tick: callers degrade via a fallback value or
    skip the step.
    """

    def __init__(self, message: str, *, collaborator: str = "") -> None:
        self.collaborator = collaborator
        super().__init__(message)


class LocationUnavailable(CollaboratorUnavailable):
    """The location collaborator could not produce a position."""

    def __init__(self, message: str = "Location unavailable") -> None:
        super().__init__(message, collaborator="location")


class NavTransportError(CollaboratorUnavailable):
    """HTTP-level failure (network, non-200, invalid JSON) talking to a provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        collaborator: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message, collaborator=collaborator)


class InvalidObservation(NavError):
    """Telemetry payload is malformed or physically meaningless.

    Raised while validating an observation and converted into the synthetic
    fallback by :class:`pysmartnav.telemetry.TelemetrySampler`; it never
    leaves the sampler.
    """


class NoActiveRoute(NavError):
    """An operation required an active route but the route is empty."""
