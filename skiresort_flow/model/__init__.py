"""Data model classes for the resort flow simulation.

Follows the separation of Geometry (where things are) vs Topology (how things connect):
- Position: Geometry atom (x, y up, z)
- SnapPoint: Typed connection point owned by an entity, identified by SnapKey
- Lift, Trail, Lodge: Validated infrastructure consumed by the simulation
- SkierNeeds: Needs and session accumulators
- SatisfactionFactor, SkierSatisfaction: Pluggable satisfaction aggregation
- SkierGoal, PathStep: Objective and routed plan
- Skier: Visitor agent
- SimulationState: Economy/day-cycle collaborator
"""

from skiresort_flow.model.enums import (
    GoalType,
    PathStepType,
    SkierState,
    SkillLevel,
    SnapPointType,
    TrailDifficulty,
)
from skiresort_flow.model.goal import PathStep, SkierGoal
from skiresort_flow.model.lift import Lift
from skiresort_flow.model.lodge import Lodge, LodgePricing
from skiresort_flow.model.needs import SkierNeeds
from skiresort_flow.model.position import Position
from skiresort_flow.model.satisfaction import (
    LodgePricingFactor,
    NeedsFulfillmentFactor,
    ReturnToBaseFactor,
    RunExperienceFactor,
    SatisfactionFactor,
    SkierSatisfaction,
    TraversalFrictionFactor,
)
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.model.skier import Skier, SkierPersonality
from skiresort_flow.model.snap_point import BASE_OWNER_ID, SnapKey, SnapPoint
from skiresort_flow.model.trail import Trail

__all__ = [
    # Enums
    "GoalType",
    "PathStepType",
    "SkierState",
    "SkillLevel",
    "SnapPointType",
    "TrailDifficulty",
    # Geometry and snapping
    "Position",
    "SnapPoint",
    "SnapKey",
    "BASE_OWNER_ID",
    # Infrastructure
    "Lift",
    "Trail",
    "Lodge",
    "LodgePricing",
    # Agents
    "SkierNeeds",
    "SatisfactionFactor",
    "NeedsFulfillmentFactor",
    "TraversalFrictionFactor",
    "LodgePricingFactor",
    "ReturnToBaseFactor",
    "RunExperienceFactor",
    "SkierSatisfaction",
    "PathStep",
    "SkierGoal",
    "Skier",
    "SkierPersonality",
    "SimulationState",
]
