"""Satisfaction - Pluggable weighted-factor satisfaction aggregation.

Each factor exposes a name, a fixed weight and an evaluation over a needs
snapshot returning a score in [0, 1]. The aggregator computes the
weight-normalized mean and knows nothing about concrete factor types.

Default factors:
- NeedsFulfillmentFactor: needs above threshold, failed lodge attempts, urgent time
- TraversalFrictionFactor: cumulative walking distance and lift wait
- LodgePricingFactor: average lodge price impact
- ReturnToBaseFactor: walking while tired, failed lodge attempts
- RunExperienceFactor: legacy satisfaction scalar driven by run outcomes
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from skiresort_flow.constants import FactorConfig
from skiresort_flow.model.needs import SkierNeeds

logger = logging.getLogger(__name__)

# Returned by get_factor_score for unknown factor names
MISSING_FACTOR_SCORE = -1.0


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class SatisfactionFactor(ABC):
    """Abstract base class for satisfaction factors.

    Subclasses carry their name and weight as fields so a factor can be
    registered with a custom weight. Evaluate must return a value in [0, 1].
    """

    name: str
    weight: float

    @abstractmethod
    def evaluate(self, needs: SkierNeeds) -> float:
        """Score in [0, 1] for this aspect of the skier's experience."""


@dataclass(frozen=True)
class NeedsFulfillmentFactor(SatisfactionFactor):
    """Penalizes unmet needs.

    Each need at/above threshold costs NEED_OVER_THRESHOLD_PENALTY plus
    NEED_EXCESS_SCALE times its normalized excess. Every failed lodge attempt
    and prolonged urgent-need time cost extra; the score is clamped to [0, 1].
    """

    name: str = "NeedsFulfillment"
    weight: float = FactorConfig.NEEDS_FULFILLMENT_WEIGHT

    def evaluate(self, needs: SkierNeeds) -> float:
        score = 1.0
        for excess_ratio in needs.excess_ratios():
            score -= FactorConfig.NEED_OVER_THRESHOLD_PENALTY + excess_ratio * FactorConfig.NEED_EXCESS_SCALE
        score -= needs.unfulfilled_need_attempts * FactorConfig.UNFULFILLED_ATTEMPT_PENALTY
        score -= min(
            FactorConfig.MAX_URGENT_TIME_PENALTY,
            needs.urgent_need_minutes / FactorConfig.URGENT_TIME_SCALE_MIN,
        )
        return _clamp01(score)


@dataclass(frozen=True)
class TraversalFrictionFactor(SatisfactionFactor):
    """Penalizes walking and waiting, each capped."""

    name: str = "TraversalFriction"
    weight: float = FactorConfig.TRAVERSAL_FRICTION_WEIGHT

    def evaluate(self, needs: SkierNeeds) -> float:
        walk_penalty = min(
            FactorConfig.MAX_WALK_PENALTY,
            (needs.walking_distance / FactorConfig.WALK_DISTANCE_SCALE) * FactorConfig.MAX_WALK_PENALTY,
        )
        wait_penalty = min(FactorConfig.MAX_WAIT_PENALTY, needs.wait_time_sec / FactorConfig.WAIT_TIME_SCALE_SEC)
        return _clamp01(1.0 - walk_penalty - wait_penalty)


@dataclass(frozen=True)
class LodgePricingFactor(SatisfactionFactor):
    """Scores the average price impact of lodge visits (1.0 without visits)."""

    name: str = "LodgePricing"
    weight: float = FactorConfig.LODGE_PRICING_WEIGHT

    def evaluate(self, needs: SkierNeeds) -> float:
        if needs.lodge_visit_count == 0:
            return 1.0
        return _clamp01(1.0 + needs.average_price_penalty * FactorConfig.PRICE_PENALTY_SCALE)


@dataclass(frozen=True)
class ReturnToBaseFactor(SatisfactionFactor):
    """Penalizes long walks while tired and failed lodge attempts."""

    name: str = "ReturnToBase"
    weight: float = FactorConfig.RETURN_TO_BASE_WEIGHT

    def evaluate(self, needs: SkierNeeds) -> float:
        score = 1.0
        if needs.fatigue > FactorConfig.RETURN_FATIGUE_THRESHOLD:
            score -= min(
                FactorConfig.MAX_RETURN_PENALTY,
                (needs.walking_distance / FactorConfig.RETURN_WALK_SCALE) * needs.fatigue,
            )
        score -= needs.unfulfilled_need_attempts * FactorConfig.RETURN_UNFULFILLED_PENALTY
        return _clamp01(score)


@dataclass(frozen=True)
class RunExperienceFactor(SatisfactionFactor):
    """Reports the legacy satisfaction scalar moved by run outcomes and waits."""

    name: str = "RunExperience"
    weight: float = FactorConfig.RUN_EXPERIENCE_WEIGHT

    def evaluate(self, needs: SkierNeeds) -> float:
        return _clamp01(needs.satisfaction)


@dataclass
class SkierSatisfaction:
    """Weighted aggregation over an ordered list of factors.

    Attributes:
        factors: Registered factors in registration order

    Example:
        satisfaction = SkierSatisfaction.create_default()
        score = satisfaction.calculate(needs=skier.needs)
    """

    factors: list[SatisfactionFactor] = field(default_factory=list)

    @classmethod
    def create_default(cls) -> "SkierSatisfaction":
        return cls(
            factors=[
                NeedsFulfillmentFactor(),
                TraversalFrictionFactor(),
                LodgePricingFactor(),
                ReturnToBaseFactor(),
                RunExperienceFactor(),
            ]
        )

    def add_factor(self, factor: SatisfactionFactor) -> None:
        """Register a factor, replacing any existing factor with the same name."""
        self.remove_factor(name=factor.name)
        self.factors.append(factor)

    def remove_factor(self, name: str) -> bool:
        """Remove a factor by name. Returns True if one was removed."""
        remaining = [f for f in self.factors if f.name != name]
        removed = len(remaining) != len(self.factors)
        self.factors = remaining
        return removed

    def get_factor(self, name: str) -> Optional[SatisfactionFactor]:
        return next((f for f in self.factors if f.name == name), None)

    def get_factor_score(self, name: str, needs: SkierNeeds) -> float:
        """Score of a single factor, or MISSING_FACTOR_SCORE if not registered."""
        factor = self.get_factor(name=name)
        if factor is None:
            return MISSING_FACTOR_SCORE
        return factor.evaluate(needs=needs)

    def calculate(self, needs: SkierNeeds) -> float:
        """Weight-normalized mean of all factor scores.

        Falls back to the legacy satisfaction scalar when no factors are
        registered, and to FactorConfig.NEUTRAL_SCORE when weights sum to zero.
        """
        if not self.factors:
            return needs.satisfaction

        total_weight = sum(f.weight for f in self.factors)
        if total_weight <= 0:
            return FactorConfig.NEUTRAL_SCORE

        weighted = sum(f.weight * f.evaluate(needs=needs) for f in self.factors)
        return weighted / total_weight

    def breakdown(self, needs: SkierNeeds) -> dict[str, float]:
        """Per-factor scores keyed by name (for reporting)."""
        return {f.name: f.evaluate(needs=needs) for f in self.factors}
