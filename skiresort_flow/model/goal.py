"""SkierGoal - A skier's current objective and its ordered plan.

A plan is a list of PathStep actions (ride a lift, ski a trail) produced by
routing. Goals are created fresh whenever a skier needs a new objective,
consumed step by step and discarded on completion or invalidation.
"""

from dataclasses import dataclass, field
from typing import Optional

from skiresort_flow.model.enums import GoalType, PathStepType


@dataclass(frozen=True)
class PathStep:
    """One action of a plan.

    Attributes:
        step_type: RIDE_LIFT or SKI_TRAIL
        entity_id: ID of the lift or trail
        name: Display name of the entity
    """

    step_type: PathStepType
    entity_id: int
    name: str = ""


@dataclass
class SkierGoal:
    """Current objective of a skier.

    Attributes:
        goal_type: Kind of objective
        target_id: Entity targeted by the current step (None if no step)
        destination_trail_id: Trail the plan leads to (None for non-ski goals)
        planned_steps: Ordered actions to reach the destination
        current_step_index: Index of the next step to execute
        priority: Goal urgency (used by return-to-base goals)
        is_complete: True once all steps are done or the goal was cleared
    """

    goal_type: GoalType = GoalType.NONE
    target_id: Optional[int] = None
    destination_trail_id: Optional[int] = None
    planned_steps: list[PathStep] = field(default_factory=list)
    current_step_index: int = 0
    priority: float = 0.0
    is_complete: bool = False

    @classmethod
    def create_ski_goal(cls, destination_trail_id: int, steps: list[PathStep]) -> "SkierGoal":
        """Create a goal that follows a routed plan.

        The goal type follows the first step: RIDE_LIFT when the plan starts
        with a lift, SKI_SPECIFIC_TRAIL when it starts on a trail.
        """
        goal = cls(destination_trail_id=destination_trail_id, planned_steps=list(steps))
        first = goal.get_current_step()
        if first is None:
            goal.is_complete = True
            return goal
        goal.goal_type = GoalType.RIDE_LIFT if first.step_type == PathStepType.RIDE_LIFT else GoalType.SKI_SPECIFIC_TRAIL
        goal.target_id = first.entity_id
        return goal

    @classmethod
    def create_return_to_base(cls, priority: float) -> "SkierGoal":
        return cls(goal_type=GoalType.RETURN_TO_BASE, priority=priority)

    @property
    def is_return_to_base(self) -> bool:
        return self.goal_type == GoalType.RETURN_TO_BASE

    def get_current_step(self) -> Optional[PathStep]:
        if 0 <= self.current_step_index < len(self.planned_steps):
            return self.planned_steps[self.current_step_index]
        return None

    def advance_to_next_step(self) -> Optional[PathStep]:
        """Move to the next step. Marks the goal complete past the last step.

        Returns:
            The new current step, or None when the plan is finished.
        """
        self.current_step_index += 1
        step = self.get_current_step()
        if step is None:
            self.is_complete = True
            self.target_id = None
            return None
        self.target_id = step.entity_id
        return step

    def clear(self) -> None:
        self.goal_type = GoalType.NONE
        self.target_id = None
        self.destination_trail_id = None
        self.planned_steps = []
        self.current_step_index = 0
        self.priority = 0.0
        self.is_complete = True
