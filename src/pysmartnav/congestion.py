"""SIR-style congestion model.

The real-time congestion index is treated as the "infected" compartment of
an epidemic model:

* ``S = 1 - I - R`` roads are free but may jam,
* ``I`` roads are congested,
* ``R`` roads have dissipated their congestion.

One discrete step per tick::

    dI = beta * S * I - gamma * I - decay
    I  = clamp(I + dI)
    dR = gamma * I          # uses the updated I
    R  = clamp(R + dR)

``I`` and ``R`` are clamped independently to ``[0, 1]``. When ``I`` reaches
the critical threshold the state is reset to the baseline and a
:class:`~pysmartnav.state.events.CriticalCongestion` event is emitted.
"""

from __future__ import annotations

import logging
import math

from pysmartnav._constants import clamp
from pysmartnav.config import ModelConfig
from pysmartnav.models.congestion import CongestionState
from pysmartnav.state.events import CriticalCongestion, EventSink

_logger = logging.getLogger(__name__)


class CongestionModel:
    """Advance a :class:`CongestionState` using the traffic index as forcing input."""

    def __init__(
        self,
        config: ModelConfig | None = None,
        *,
        state: CongestionState | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self._config = config or ModelConfig()
        if state is None:
            state = CongestionState(
                infected=self._config.initial_infected,
                beta=self._config.base_beta,
                gamma=self._config.base_gamma,
            )
        self.state = state
        self._sink = sink
        self.last_index: float | None = None

    def update_parameters(self, traffic_index: float) -> None:
        """Retune the rates: heavy traffic propagates faster and dissipates slower."""
        idx = clamp(traffic_index)
        self.state.beta = self._config.base_beta * idx
        self.state.gamma = self._config.base_gamma * (1.0 - idx)

    def step(self, current_index: float | None = None) -> CongestionState:
        """Advance one tick with the current rates.

        *current_index* is the traffic index of the tick. It is recorded as
        the forcing input; rates change only through :meth:`update_parameters`.
        """
        if current_index is not None:
            self.last_index = clamp(current_index)
        state = self.state
        susceptible = state.susceptible
        delta_i = state.beta * susceptible * state.infected - state.gamma * state.infected - self._config.decay
        state.infected = clamp(state.infected + delta_i)

        delta_r = state.gamma * state.infected
        state.recovered = clamp(state.recovered + delta_r)

        _logger.debug(
            "SIR step S=%.4f I=%.4f R=%.4f beta=%.4f gamma=%.4f",
            susceptible,
            state.infected,
            state.recovered,
            state.beta,
            state.gamma,
        )

        if state.infected >= self._config.critical_threshold:
            peak = state.infected
            self.reset()
            _logger.info("Critical congestion (I=%.3f); reset to baseline", peak)
            if self._sink is not None:
                self._sink.emit(CriticalCongestion(infected=peak))
        return state

    def reset(self) -> None:
        self.state.infected = self._config.reset_baseline
        self.state.recovered = 0.0

    def r0(self) -> float:
        """Basic reproduction number ``beta / gamma``; ``inf`` when ``gamma`` is 0."""
        if self.state.gamma <= 0.0:
            return math.inf
        return self.state.beta / self.state.gamma

    def snapshot(self) -> CongestionState:
        return self.state.model_copy()
