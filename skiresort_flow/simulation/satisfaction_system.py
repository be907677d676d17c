"""SatisfactionSystem - Resort-wide satisfaction and visitor multiplier.

Blends the live mean of active skiers' satisfaction with its own history,
applies an end-of-day penalty proportional to the unserved visitor rate and
exposes the result as the economy's visitor-rate multiplier.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from skiresort_flow.config import ResortSatisfactionSettings
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.model.skier import Skier

if TYPE_CHECKING:
    from skiresort_flow.simulation.day_simulation import DayStats

logger = logging.getLogger(__name__)


class SatisfactionSystem:
    """Resort satisfaction in [min_satisfaction, max_satisfaction].

    Attributes:
        satisfaction: Blended resort satisfaction (visitor multiplier)
        realtime_satisfaction: Mean satisfaction of the last active-skier update
    """

    def __init__(self, settings: Optional[ResortSatisfactionSettings] = None) -> None:
        self.settings = settings or ResortSatisfactionSettings()
        self.satisfaction = self.settings.initial
        self.realtime_satisfaction = self.settings.initial

    def _clamp(self, value: float) -> float:
        return max(self.settings.min_satisfaction, min(self.settings.max_satisfaction, value))

    def update_from_active_skiers(self, skiers: Iterable[Skier]) -> None:
        """Blend the mean satisfaction of active skiers into the resort value.

        An empty population keeps the previous value.
        """
        scores = [s.get_satisfaction() for s in skiers]
        if not scores:
            return
        self.realtime_satisfaction = sum(scores) / len(scores)
        blend = self.settings.realtime_blend
        self.satisfaction = self._clamp(blend * self.realtime_satisfaction + (1.0 - blend) * self.satisfaction)

    def end_of_day(self, stats: "DayStats") -> None:
        """Penalize the unserved visitor rate of the finished day."""
        if stats.total_visitors == 0:
            return
        self.satisfaction = self._clamp(self.satisfaction - self.settings.unserved_penalty * stats.unserved_rate)
        logger.info(
            f"End of day: unserved rate {stats.unserved_rate:.1%}, resort satisfaction {self.satisfaction:.2f}"
        )

    def get_visitor_multiplier(self) -> float:
        return self.satisfaction

    def apply_to(self, state: SimulationState) -> None:
        """Write satisfaction and visitor multiplier back to the economy state."""
        state.satisfaction = self.satisfaction
        state.visitor_multiplier = self.get_visitor_multiplier()

    def reset(self) -> None:
        self.satisfaction = self.settings.initial
        self.realtime_satisfaction = self.settings.initial
