"""Congestion state of the SIR analogy."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pysmartnav import _constants as c


class CongestionState(BaseModel):
    """Compartments and rates of the congestion model.

    ``infected`` (I) is the congestion index, ``recovered`` (R) the share of
    roads back at free flow. The susceptible share is derived, never stored.
    """

    model_config = ConfigDict(extra="forbid")

    infected: float = Field(default=c.INITIAL_INFECTED, ge=0.0, le=1.0)
    recovered: float = Field(default=0.0, ge=0.0, le=1.0)
    beta: float = Field(default=c.BASE_BETA, ge=0.0)
    gamma: float = Field(default=c.BASE_GAMMA, ge=0.0)

    @property
    def susceptible(self) -> float:
        """``S = 1 - I - R``; may be negative transiently and is never clamped."""
        return 1.0 - self.infected - self.recovered
