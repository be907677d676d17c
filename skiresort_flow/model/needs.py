"""SkierNeeds - Physiological needs and session accumulators of one skier.

Needs accrue linearly with simulated minutes:
- hunger and bladder only increase until fulfilled at a lodge
- fatigue rises by a fixed amount per completed run and recovers while resting

Session accumulators (walking distance, wait time, unfulfilled attempts,
urgent-need time, lodge price penalty, lodge visits) only grow during a
session and feed the satisfaction factors.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from skiresort_flow.constants import NeedsConfig

if TYPE_CHECKING:
    from skiresort_flow.config import NeedsSettings


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass
class SkierNeeds:
    """Needs snapshot plus session accumulators.

    Attributes:
        hunger: 0 = fed, 1 = starving
        bladder: 0 = empty, 1 = urgent
        fatigue: 0 = fresh, 1 = exhausted
        satisfaction: Legacy scalar adjusted by run outcomes (initial 0.8)
        walking_distance: Cumulative distance walked (world units)
        wait_time_sec: Cumulative lift wait in seconds
        unfulfilled_need_attempts: Times a need could not be met at a lodge
        urgent_need_minutes: Minutes spent with any need above threshold
        cumulative_price_penalty: Sum of per-visit lodge price impacts
        lodge_visit_count: Number of lodge visits
    """

    hunger: float = 0.0
    bladder: float = 0.0
    fatigue: float = 0.0
    satisfaction: float = NeedsConfig.INITIAL_SATISFACTION

    walking_distance: float = 0.0
    wait_time_sec: float = 0.0
    unfulfilled_need_attempts: int = 0
    urgent_need_minutes: float = 0.0
    cumulative_price_penalty: float = 0.0
    lodge_visit_count: int = 0

    hunger_threshold: float = NeedsConfig.HUNGER_THRESHOLD
    bladder_threshold: float = NeedsConfig.BLADDER_THRESHOLD
    fatigue_threshold: float = NeedsConfig.FATIGUE_THRESHOLD
    hunger_rate: float = NeedsConfig.HUNGER_RATE
    bladder_rate: float = NeedsConfig.BLADDER_RATE
    fatigue_per_run: float = NeedsConfig.FATIGUE_PER_RUN
    fatigue_recovery_rate: float = NeedsConfig.FATIGUE_RECOVERY_RATE

    @classmethod
    def from_settings(cls, settings: "NeedsSettings") -> "SkierNeeds":
        """Create fresh needs using session-specific thresholds and rates."""
        return cls(
            satisfaction=settings.initial_satisfaction,
            hunger_threshold=settings.hunger_threshold,
            bladder_threshold=settings.bladder_threshold,
            fatigue_threshold=settings.fatigue_threshold,
            hunger_rate=settings.hunger_rate,
            bladder_rate=settings.bladder_rate,
            fatigue_per_run=settings.fatigue_per_run,
            fatigue_recovery_rate=settings.fatigue_recovery_rate,
        )

    # =========================================================================
    # Accrual
    # =========================================================================

    def update_needs(self, minutes: float) -> None:
        """Advance hunger and bladder by elapsed minutes and track urgent time."""
        if minutes <= 0:
            return
        if self.has_urgent_need():
            self.urgent_need_minutes += minutes
        self.hunger = _clamp01(self.hunger + self.hunger_rate * minutes)
        self.bladder = _clamp01(self.bladder + self.bladder_rate * minutes)

    def on_run_completed(self) -> None:
        self.fatigue = _clamp01(self.fatigue + self.fatigue_per_run)

    def recover(self, minutes: float) -> None:
        """Recover fatigue while riding a lift or resting."""
        if minutes > 0:
            self.fatigue = _clamp01(self.fatigue - self.fatigue_recovery_rate * minutes)

    # =========================================================================
    # Fulfillment
    # =========================================================================

    def eat(self) -> None:
        self.hunger = 0.0

    def use_bathroom(self) -> None:
        self.bladder = 0.0

    def rest(self, minutes: float) -> None:
        self.recover(minutes=minutes)

    # =========================================================================
    # Queries
    # =========================================================================

    def has_urgent_need(self) -> bool:
        return (
            self.hunger >= self.hunger_threshold
            or self.bladder >= self.bladder_threshold
            or self.fatigue >= self.fatigue_threshold
        )

    def has_lodge_need(self) -> bool:
        """True when hunger or bladder is above threshold (needs a lodge)."""
        return self.hunger >= self.hunger_threshold or self.bladder >= self.bladder_threshold

    def get_most_urgent_need(self) -> Optional[str]:
        """Name of the need furthest above its threshold, or None."""
        excess = {
            "hunger": self.hunger - self.hunger_threshold,
            "bladder": self.bladder - self.bladder_threshold,
            "fatigue": self.fatigue - self.fatigue_threshold,
        }
        name, value = max(excess.items(), key=lambda item: item[1])
        return name if value >= 0 else None

    def excess_ratios(self) -> list[float]:
        """Normalized excess in [0, 1] for each need at or above its threshold.

        0 means exactly at threshold, 1 means the need is maxed out.
        """
        ratios = []
        for value, threshold in (
            (self.hunger, self.hunger_threshold),
            (self.bladder, self.bladder_threshold),
            (self.fatigue, self.fatigue_threshold),
        ):
            if value >= threshold:
                ratios.append((value - threshold) / (1.0 - threshold) if threshold < 1.0 else 0.0)
        return ratios

    # =========================================================================
    # Session accumulators
    # =========================================================================

    def adjust_satisfaction(self, delta: float) -> None:
        self.satisfaction = _clamp01(self.satisfaction + delta)

    def add_walking_distance(self, distance: float) -> None:
        self.walking_distance += max(0.0, distance)

    def add_wait_time(self, seconds: float) -> None:
        self.wait_time_sec += max(0.0, seconds)

    def record_unfulfilled_need(self) -> None:
        self.unfulfilled_need_attempts += 1

    def add_price_penalty(self, penalty: float) -> None:
        """Record one lodge visit and its price impact."""
        self.cumulative_price_penalty += penalty
        self.lodge_visit_count += 1

    @property
    def average_price_penalty(self) -> float:
        if self.lodge_visit_count == 0:
            return 0.0
        return self.cumulative_price_penalty / self.lodge_visit_count

    def reset_session(self) -> None:
        """Reset needs and accumulators for a new session (thresholds kept)."""
        self.hunger = 0.0
        self.bladder = 0.0
        self.fatigue = 0.0
        self.walking_distance = 0.0
        self.wait_time_sec = 0.0
        self.unfulfilled_need_attempts = 0
        self.urgent_need_minutes = 0.0
        self.cumulative_price_penalty = 0.0
        self.lodge_visit_count = 0
