"""SimulationState - Economy/day-cycle collaborator.

The flow simulation reads the visitor count target from this object and
writes back the satisfaction-derived visitor multiplier.
"""

from dataclasses import dataclass


@dataclass
class SimulationState:
    """Day-cycle bookkeeping shared with the economy.

    Attributes:
        day: Current day index (1-based)
        visitors_today: Visitor count target for the batch day simulation
        visitor_multiplier: Satisfaction-driven multiplier applied to tomorrow's visitors
        satisfaction: Resort-wide satisfaction last written by the simulation
    """

    day: int = 1
    visitors_today: int = 100
    visitor_multiplier: float = 1.0
    satisfaction: float = 1.0

    def advance_day(self, base_visitors: int) -> None:
        """Move to the next day, scaling the visitor target by the multiplier."""
        self.day += 1
        self.visitors_today = max(0, round(base_visitors * self.visitor_multiplier))
