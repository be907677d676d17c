"""Position - The geometry atom of the flow simulation.

A Position is a point in resort world space with Y pointing up.
It is the single source of truth for location throughout the system.

Used by:
- SnapPoint (connection location)
- Lift (bottom/top stations)
- Trail (polyline of points)
- Lodge (entrance)

Two distance metrics are supported:
- 3D Euclidean distance (current)
- 2D Manhattan distance on the legacy tile grid (X/Z plane)
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Position:
    """A point in world space.

    Attributes:
        x: East-west coordinate
        y: Height (up axis)
        z: North-south coordinate

    Example:
        pos = Position(x=120.0, y=35.0, z=40.0)
    """

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.x) or np.isnan(self.y) or np.isnan(self.z):
            raise ValueError(f"Position cannot contain NaN coordinates ({self.x}, {self.y}, {self.z})")

    @classmethod
    def from_tile(cls, x: int, y: int, height: float = 0.0) -> "Position":
        """Build a position from a legacy tile coordinate (tile y maps to world z)."""
        return cls(x=float(x), y=height, z=float(y))

    @property
    def tile(self) -> tuple[int, int]:
        """Legacy 2D tile coordinate (x, z) truncated to integers."""
        return (int(np.floor(self.x)), int(np.floor(self.z)))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def distance_to(self, other: "Position") -> float:
        """3D Euclidean distance to another position.

        Args:
            other: Position to measure distance to

        Returns:
            Straight-line distance in world units.
        """
        return float(np.linalg.norm(self.as_array() - other.as_array()))

    def manhattan_tiles_to(self, other: "Position") -> int:
        """Legacy 2D Manhattan distance between tile coordinates."""
        (x1, z1), (x2, z2) = self.tile, other.tile
        return abs(x1 - x2) + abs(z1 - z2)

    def __repr__(self) -> str:
        return f"Position(x={self.x:.1f}, y={self.y:.1f}, z={self.z:.1f})"
