"""Route-compliance models."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from pysmartnav.models.coordinate import Coordinate


class Deviation(BaseModel):
    """The current position is farther than the threshold from every route point."""

    model_config = ConfigDict(frozen=True)

    position: Coordinate
    nearest: Coordinate
    distance_m: float = Field(ge=0.0)


@dataclass
class ComplianceState:
    """Deviation bookkeeping for one session.

    ``deviation_counts`` only grows; ``compliance_rate`` is recomputed from
    it on every deviation.
    """

    deviation_counts: dict[Coordinate, int] = field(default_factory=dict)
    compliance_rate: float = 1.0
    raw_compliance_rate: float = 1.0

    @property
    def total_deviations(self) -> int:
        return sum(self.deviation_counts.values())
