"""Enumerations shared across the flow simulation.

Skill levels and trail difficulties are ordered (rank) so transit floors can
compare them. String values match the keys used in constants.py tables.
"""

from enum import Enum


class SkillLevel(str, Enum):
    """Skier ability tier, ordered from least to most skilled."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return list(SkillLevel).index(self)


class TrailDifficulty(str, Enum):
    """Trail rating, ordered from easiest to hardest."""

    GREEN = "green"
    BLUE = "blue"
    BLACK = "black"
    DOUBLE_BLACK = "double_black"

    @property
    def rank(self) -> int:
        return list(TrailDifficulty).index(self)


class SnapPointType(str, Enum):
    """Kind of connection point registered by infrastructure."""

    LIFT_BOTTOM = "lift_bottom"
    LIFT_TOP = "lift_top"
    TRAIL_START = "trail_start"
    TRAIL_END = "trail_end"
    BUILDING_ENTRANCE = "building_entrance"
    BASE_SPAWN = "base_spawn"


class SkierState(str, Enum):
    """Discrete position/activity of a skier on the mountain."""

    AT_BASE = "at_base"
    WALKING_TO_LIFT = "walking_to_lift"
    IN_QUEUE = "in_queue"
    RIDING_LIFT = "riding_lift"
    SKIING_TRAIL = "skiing_trail"
    AT_AMENITY = "at_amenity"
    DEPARTED = "departed"


class GoalType(str, Enum):
    """Objective a skier is currently pursuing."""

    NONE = "none"
    SKI_PREFERRED_TRAIL = "ski_preferred_trail"
    SKI_SPECIFIC_TRAIL = "ski_specific_trail"
    RIDE_LIFT = "ride_lift"
    WAIT_IN_QUEUE = "wait_in_queue"
    RETURN_TO_BASE = "return_to_base"
    LEAVE_RESORT = "leave_resort"


class PathStepType(str, Enum):
    """Action emitted for a planned step."""

    RIDE_LIFT = "ride_lift"
    SKI_TRAIL = "ski_trail"
