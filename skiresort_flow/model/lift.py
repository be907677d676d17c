"""Lift - Uphill transport between a bottom and a top station.

Lifts are consumed as validated entities: placement rules have already run
by the time the flow simulation sees them. Multiple lift types are supported:
surface_lift, chairlift, gondola, aerial_tram.
"""

import random
from dataclasses import dataclass

from skiresort_flow.constants import LiftConfig, NameConfig
from skiresort_flow.model.enums import SnapPointType
from skiresort_flow.model.position import Position
from skiresort_flow.model.snap_point import SnapPoint


@dataclass
class Lift:
    """A ski lift connecting two stations.

    Attributes:
        id: Unique entity identifier (shared id space with trails and lodges)
        name: Display name
        lift_type: Type of lift (surface_lift, chairlift, gondola, aerial_tram)
        bottom: Bottom station position
        top: Top station position
        capacity: Throughput in riders per hour
        is_valid: Whether placement validation accepted this lift

    Example:
        lift = Lift(
            id=1,
            name="1 (Alpine Express)",
            lift_type="chairlift",
            bottom=Position(x=0, y=0, z=0),
            top=Position(x=0, y=300, z=800),
            capacity=1000,
        )
    """

    id: int
    name: str
    lift_type: str
    bottom: Position
    top: Position
    capacity: float = LiftConfig.DEFAULT_CAPACITY
    is_valid: bool = True

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError(f"Lift {self.id} cannot have negative capacity {self.capacity}")

    @property
    def length_m(self) -> float:
        """Straight-line length between stations."""
        return self.bottom.distance_to(other=self.top)

    @property
    def vertical_rise_m(self) -> float:
        return self.top.y - self.bottom.y

    def snap_points(self) -> list[SnapPoint]:
        """Bottom and top station snap points."""
        return [
            SnapPoint(
                point_type=SnapPointType.LIFT_BOTTOM,
                owner_id=self.id,
                position=self.bottom,
                name=f"{self.name} (bottom)",
            ),
            SnapPoint(
                point_type=SnapPointType.LIFT_TOP,
                owner_id=self.id,
                position=self.top,
                name=f"{self.name} (top)",
            ),
        ]

    @staticmethod
    def default_capacity(lift_type: str) -> float:
        """Default riders per hour for a lift type."""
        return LiftConfig.CAPACITY_BY_TYPE.get(lift_type, LiftConfig.DEFAULT_CAPACITY)

    @staticmethod
    def generate_name(lift_id: int, rng: random.Random) -> str:
        """Generate a display name like "3 (Summit Flyer)"."""
        return f"{lift_id} ({rng.choice(NameConfig.LIFT_NAMES)})"

    def __repr__(self) -> str:
        return f"Lift(id={self.id}, name={self.name!r}, type={self.lift_type}, length={self.length_m:.0f}m)"
