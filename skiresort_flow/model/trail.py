"""Trail - Downhill run with pre-computed difficulty.

A Trail is a polyline of positions from its start (top) to its end (bottom).
Its difficulty rating comes from the trail validator and is treated as a fixed
attribute here. Computed metrics:
- Length along the polyline
- Total drop and average slope
"""

import random
from dataclasses import dataclass, field

import numpy as np

from skiresort_flow.constants import NameConfig
from skiresort_flow.model.enums import SnapPointType, TrailDifficulty
from skiresort_flow.model.position import Position
from skiresort_flow.model.snap_point import SnapPoint


@dataclass
class Trail:
    """A ski trail.

    Attributes:
        id: Unique entity identifier (shared id space with lifts and lodges)
        name: Display name
        points: Polyline from start (top) to end (bottom), at least 2 points
        difficulty: Rating assigned by the trail validator
        is_valid: Whether placement validation accepted this trail

    Computed Properties:
        start: First point
        end: Last point
        length_m: Sum of segment lengths
        total_drop_m: Height difference between start and end
        avg_slope_pct: (total_drop / length) * 100
    """

    id: int
    name: str
    points: list[Position] = field(default_factory=list)
    difficulty: TrailDifficulty = TrailDifficulty.GREEN
    is_valid: bool = True

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError(f"Trail {self.id} needs at least 2 points, got {len(self.points)}")

    @property
    def start(self) -> Position:
        return self.points[0]

    @property
    def end(self) -> Position:
        return self.points[-1]

    @property
    def length_m(self) -> float:
        """Total polyline length."""
        coords = np.array([p.as_array() for p in self.points])
        return float(np.linalg.norm(np.diff(coords, axis=0), axis=1).sum())

    @property
    def total_drop_m(self) -> float:
        return self.start.y - self.end.y

    @property
    def avg_slope_pct(self) -> float:
        if self.length_m <= 0:
            return 0.0
        return (self.total_drop_m / self.length_m) * 100

    def snap_points(self) -> list[SnapPoint]:
        """Start and end snap points."""
        return [
            SnapPoint(
                point_type=SnapPointType.TRAIL_START,
                owner_id=self.id,
                position=self.start,
                name=f"{self.name} (start)",
            ),
            SnapPoint(
                point_type=SnapPointType.TRAIL_END,
                owner_id=self.id,
                position=self.end,
                name=f"{self.name} (end)",
            ),
        ]

    @staticmethod
    def generate_name(difficulty: TrailDifficulty, trail_id: int, rng: random.Random) -> str:
        """Generate a creative name like "7 (Eagle Descent)"."""
        prefix = rng.choice(NameConfig.TRAIL_PREFIXES[difficulty.value])
        suffix = rng.choice(NameConfig.TRAIL_SUFFIXES)
        return f"{trail_id} ({prefix} {suffix})"

    def __repr__(self) -> str:
        return f"Trail(id={self.id}, name={self.name!r}, {self.difficulty.value}, length={self.length_m:.0f}m)"
