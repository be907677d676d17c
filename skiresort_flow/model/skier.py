"""Skier - A visitor agent moving through the resort.

A skier is created at spawn with a rolled skill level and desired run count,
mutated every step by the decision engine and the stepping mechanism, and
removed once it departs (desired runs reached, exhaustion, or satisfaction
collapse).
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from skiresort_flow.constants import DecisionConfig
from skiresort_flow.model.enums import SkierState, SkillLevel
from skiresort_flow.model.goal import SkierGoal
from skiresort_flow.model.needs import SkierNeeds
from skiresort_flow.model.satisfaction import SkierSatisfaction


@dataclass(frozen=True)
class SkierPersonality:
    """Per-skier offsets added to the decision strengths.

    Two skiers facing the same trails and traffic still weigh them a little
    differently. Offsets are derived from the skier id alone, so a skier keeps
    its personality across runs, days and sessions.

    Attributes:
        deficit: Offset on the deficit bias strength
        herding: Offset on the herding penalty strength
        crowding: Offset on the crowding penalty strength
        novelty: Offset on the novelty bonus strength
    """

    deficit: float = 0.0
    herding: float = 0.0
    crowding: float = 0.0
    novelty: float = 0.0

    @classmethod
    def generate(cls, skier_id: int, magnitude: float) -> "SkierPersonality":
        """Offsets uniformly drawn from [-magnitude, +magnitude], seeded by the skier id."""
        rng = random.Random(skier_id * 7919 + 104729)
        return cls(
            deficit=rng.uniform(-magnitude, magnitude),
            herding=rng.uniform(-magnitude, magnitude),
            crowding=rng.uniform(-magnitude, magnitude),
            novelty=rng.uniform(-magnitude, magnitude),
        )


@dataclass
class Skier:
    """A visitor agent.

    Attributes:
        id: Unique skier identifier
        skill_level: Ability tier
        desired_runs: Runs the skier wants before leaving
        current_state: Discrete activity (driven by SkierStateMachine in real-time mode)
        current_lift_id: Lift the skier is heading to / riding (None if none)
        current_trail_id: Trail the skier is skiing / just finished (None if none)
        runs_completed: Completed runs this session
        preferred_runs_completed: Runs completed on a preferred difficulty
        needs: Physiological needs and session accumulators
        satisfaction: Weighted factor aggregator
        current_goal: Current objective and plan (None before first decision)
        exit_fatigue: Fatigue at/above which the skier leaves
        exit_satisfaction: Satisfaction at/below which the skier leaves
        trails_skied: Ids of trails completed this session (novelty bonus)
        personality: Offsets on the decision strengths (zero = textbook skier)
    """

    id: int
    skill_level: SkillLevel
    desired_runs: int
    current_state: SkierState = SkierState.AT_BASE
    current_lift_id: Optional[int] = None
    current_trail_id: Optional[int] = None
    runs_completed: int = 0
    preferred_runs_completed: int = 0
    needs: SkierNeeds = field(default_factory=SkierNeeds)
    satisfaction: SkierSatisfaction = field(default_factory=SkierSatisfaction.create_default)
    current_goal: Optional[SkierGoal] = None
    exit_fatigue: float = DecisionConfig.EXIT_FATIGUE
    exit_satisfaction: float = DecisionConfig.EXIT_SATISFACTION
    trails_skied: set[int] = field(default_factory=set)
    personality: SkierPersonality = field(default_factory=SkierPersonality)

    @property
    def was_served(self) -> bool:
        """A visitor counts as served once at least one run was completed."""
        return self.runs_completed > 0

    def get_satisfaction(self) -> float:
        return self.satisfaction.calculate(needs=self.needs)

    def wants_to_keep_skiing(self) -> bool:
        """False once desired runs are met, the skier is exhausted or unhappy."""
        if self.runs_completed >= self.desired_runs:
            return False
        if self.needs.fatigue >= self.exit_fatigue:
            return False
        return self.get_satisfaction() > self.exit_satisfaction

    def get_current_step_description(self) -> str:
        """Short description of what the skier is doing (for UI panels)."""
        goal = self.current_goal
        step = goal.get_current_step() if goal is not None else None
        if step is None:
            return self.current_state.value
        return f"{step.step_type.value} {step.name or step.entity_id}"

    def __repr__(self) -> str:
        return (
            f"Skier(id={self.id}, {self.skill_level.value}, state={self.current_state.value}, "
            f"runs={self.runs_completed}/{self.desired_runs})"
        )
