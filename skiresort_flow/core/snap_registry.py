"""SnapRegistry - Store of typed connection points.

Snap points are registered when infrastructure is finalized and removed
when their owner is removed. The registry answers queries by type, owner
and proximity, and is the single input of the traversal graph builder.

Registration is deduplicated by SnapKey. Owner removal builds the filtered
collection first and then swaps it in, so all points of an owner disappear
together.
"""

import logging
import math
from typing import Iterator, Optional

from skiresort_flow.model.enums import SnapPointType
from skiresort_flow.model.position import Position
from skiresort_flow.model.snap_point import SnapKey, SnapPoint

logger = logging.getLogger(__name__)


class SnapRegistry:
    """Registry of snap points keyed by their composite key.

    Insertion order is preserved, so queries and graph builds are deterministic.

    Example:
        registry = SnapRegistry()
        for point in lift.snap_points():
            registry.register(point=point)
        bottoms = registry.get_by_type(point_type=SnapPointType.LIFT_BOTTOM)
    """

    def __init__(self) -> None:
        self._points: dict[SnapKey, SnapPoint] = {}

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[SnapPoint]:
        return iter(list(self._points.values()))

    def __contains__(self, point: SnapPoint) -> bool:
        return point.key in self._points

    # =========================================================================
    # Mutation
    # =========================================================================

    def register(self, point: SnapPoint) -> bool:
        """Register a snap point.

        Returns:
            False if a point with the same key was already registered.
        """
        if point.key in self._points:
            return False
        self._points[point.key] = point
        return True

    def unregister(self, point: SnapPoint) -> bool:
        """Remove a single snap point. Returns True if it was registered."""
        return self._points.pop(point.key, None) is not None

    def unregister_by_owner(self, owner_id: int) -> int:
        """Remove every point owned by owner_id in one swap.

        Returns:
            Number of points removed.
        """
        remaining = {key: point for key, point in self._points.items() if point.owner_id != owner_id}
        removed = len(self._points) - len(remaining)
        self._points = remaining
        if removed:
            logger.debug(f"Unregistered {removed} snap points of owner {owner_id}")
        return removed

    def clear(self) -> None:
        self._points = {}

    # =========================================================================
    # Queries
    # =========================================================================

    def get_all(self) -> list[SnapPoint]:
        return list(self._points.values())

    def get_by_type(self, point_type: SnapPointType) -> list[SnapPoint]:
        return [p for p in self._points.values() if p.point_type == point_type]

    def get_by_owner(self, owner_id: int) -> list[SnapPoint]:
        return [p for p in self._points.values() if p.owner_id == owner_id]

    def get_point(self, point_type: SnapPointType, owner_id: int) -> Optional[SnapPoint]:
        """First point of the given type owned by owner_id, or None."""
        return next(
            (p for p in self._points.values() if p.point_type == point_type and p.owner_id == owner_id),
            None,
        )

    def find_nearby(
        self,
        position: Position,
        max_distance: float,
        point_type: Optional[SnapPointType] = None,
    ) -> list[SnapPoint]:
        """Points within max_distance (3D), nearest first.

        Args:
            position: Query position
            max_distance: Inclusive search radius
            point_type: Restrict to this type (None = any type)

        Returns:
            Matching points sorted by distance.
        """
        candidates = self._points.values() if point_type is None else self.get_by_type(point_type=point_type)
        with_distance = [(p.position.distance_to(other=position), p) for p in candidates]
        nearby = [(d, p) for d, p in with_distance if d <= max_distance]
        nearby.sort(key=lambda item: item[0])
        return [p for _, p in nearby]

    def get_closest(
        self,
        position: Position,
        point_type: Optional[SnapPointType] = None,
        max_distance: float = math.inf,
    ) -> Optional[SnapPoint]:
        """Nearest point (optionally of one type) within max_distance, or None."""
        nearby = self.find_nearby(position=position, max_distance=max_distance, point_type=point_type)
        return nearby[0] if nearby else None

    def get_count(self, point_type: SnapPointType) -> int:
        return len(self.get_by_type(point_type=point_type))

    def get_total_count(self) -> int:
        return len(self._points)
