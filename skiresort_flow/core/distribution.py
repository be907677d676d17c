"""SkierDistribution - Skill mix, preferences, hard caps and effective weights.

The preference table (skill x difficulty -> weight in [0, 1]) and the hard-cap
sets (skill -> allowed difficulties) are independent: a weight of zero does
not make a difficulty disallowed, and caps are always checked separately.

Effective weight of a trail for a skier:
1. Desperate-only pairs (e.g. beginner on black) get a near-zero constant.
2. Transit floor: trails at/below the skier's level are tolerable connectors
   (floor grows the further below skill); one level above gets a stretch floor.
3. weight = max(preference, transit floor)
4. Optional downstream value: a good continuation adds a bonus, a dead end
   collapses the weight to a small constant. The sentinel
   DOWNSTREAM_NOT_COMPUTED skips this step.
"""

import logging
import random
from typing import Optional

from skiresort_flow.config import DistributionSettings, VisitorSettings
from skiresort_flow.constants import DistributionConfig
from skiresort_flow.model.enums import SkillLevel, TrailDifficulty

logger = logging.getLogger(__name__)

DOWNSTREAM_NOT_COMPUTED = DistributionConfig.DOWNSTREAM_NOT_COMPUTED


class SkierDistribution:
    """Tunable preference/distribution model for one simulation session.

    Example:
        distribution = SkierDistribution(settings=config.distribution)
        weight = distribution.get_effective_weight(skill=SkillLevel.BEGINNER, difficulty=TrailDifficulty.GREEN)
    """

    def __init__(
        self,
        settings: Optional[DistributionSettings] = None,
        visitor_settings: Optional[VisitorSettings] = None,
    ) -> None:
        self.settings = settings or DistributionSettings()
        self.visitor_settings = visitor_settings or VisitorSettings()
        self._validate_distribution(self.settings.skill_distribution)

    @staticmethod
    def _validate_distribution(distribution: dict[SkillLevel, float]) -> None:
        if any(v < 0 for v in distribution.values()):
            raise ValueError(f"Skill distribution cannot contain negative shares: {distribution}")
        total = sum(distribution.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Skill distribution must sum to 1.0, got {total:.4f}")

    # =========================================================================
    # Skill mix
    # =========================================================================

    def set_skill_distribution(self, distribution: dict[SkillLevel, float]) -> None:
        self._validate_distribution(distribution)
        self.settings.skill_distribution = dict(distribution)

    def get_random_skill_level(self, rng: random.Random) -> SkillLevel:
        """Roll a skill level using the configured percentages."""
        roll = rng.random()
        cumulative = 0.0
        for skill in SkillLevel:
            cumulative += self.settings.skill_distribution.get(skill, 0.0)
            if roll < cumulative:
                return skill
        # Floating point rounding: fall back to the last tier with a share
        return next(s for s in reversed(list(SkillLevel)) if self.settings.skill_distribution.get(s, 0.0) > 0)

    def roll_desired_runs(self, skill: SkillLevel, rng: random.Random) -> int:
        """Desired runs: runs per visitor + skill bonus, +/- variance (at least the minimum)."""
        visitors = self.visitor_settings
        base = visitors.runs_per_visitor + visitors.desired_runs_skill_bonus.get(skill, 0)
        variance = rng.randint(-visitors.desired_runs_variance, visitors.desired_runs_variance)
        return max(visitors.min_desired_runs, base + variance)

    # =========================================================================
    # Preferences and caps
    # =========================================================================

    def get_preference(self, skill: SkillLevel, difficulty: TrailDifficulty) -> float:
        return self.settings.preferences.get(skill, {}).get(difficulty, 0.0)

    def set_preference(self, skill: SkillLevel, difficulty: TrailDifficulty, weight: float) -> None:
        self.settings.preferences.setdefault(skill, {})[difficulty] = max(0.0, min(1.0, weight))

    def is_allowed(self, skill: SkillLevel, difficulty: TrailDifficulty) -> bool:
        return difficulty in self.settings.allowed_difficulties.get(skill, set())

    def get_allowed_difficulties(self, skill: SkillLevel) -> set[TrailDifficulty]:
        return set(self.settings.allowed_difficulties.get(skill, set()))

    def set_allowed_difficulties(self, skill: SkillLevel, difficulties: set[TrailDifficulty]) -> None:
        self.settings.allowed_difficulties[skill] = set(difficulties)
        logger.info(f"Hard cap for {skill.value}: {sorted(d.value for d in difficulties)}")

    def is_desperate_only(self, skill: SkillLevel, difficulty: TrailDifficulty) -> bool:
        return (skill, difficulty) in self.settings.desperate_pairs

    def get_preferred_difficulty(self, skill: SkillLevel) -> TrailDifficulty:
        """Difficulty with the highest preference weight for a skill."""
        row = self.settings.preferences.get(skill, {})
        return max(TrailDifficulty, key=lambda d: row.get(d, 0.0))

    # =========================================================================
    # Effective weight
    # =========================================================================

    def get_transit_floor(self, skill: SkillLevel, difficulty: TrailDifficulty) -> float:
        """Minimum tolerable weight for skiing a trail purely as a connector."""
        gap = skill.rank - difficulty.rank
        if gap >= 0:
            return self.settings.transit_floor_base + gap * self.settings.transit_floor_gap_bonus
        if gap == -1:
            return self.settings.transit_floor_stretch
        return 0.0

    def get_effective_weight(
        self,
        skill: SkillLevel,
        difficulty: TrailDifficulty,
        downstream_best_preference: float = DOWNSTREAM_NOT_COMPUTED,
    ) -> float:
        """Selection weight of a trail for a skier.

        Args:
            skill: Skier skill level
            difficulty: Trail difficulty
            downstream_best_preference: Best preference reachable beyond the trail,
                or DOWNSTREAM_NOT_COMPUTED to skip the downstream adjustment

        Returns:
            Non-negative weight.
        """
        s = self.settings
        if self.is_desperate_only(skill, difficulty):
            return s.desperate_weight

        weight = max(self.get_preference(skill, difficulty), self.get_transit_floor(skill, difficulty))

        if downstream_best_preference < 0:
            return weight
        if downstream_best_preference > s.downstream_epsilon:
            return weight + downstream_best_preference * s.downstream_bonus_multiplier
        return s.dead_end_weight
