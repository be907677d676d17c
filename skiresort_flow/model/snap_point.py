"""SnapPoint - Typed connection point owned by an infrastructure entity.

Snap points stitch lifts, trails, lodges and base areas together. A snap point
is an immutable value; its identity is the composite SnapKey derived from
(type, owner_id, tile coordinate), so graph edges can be stored and compared
by value.
"""

from dataclasses import dataclass
from typing import NamedTuple

from skiresort_flow.model.enums import SnapPointType
from skiresort_flow.model.position import Position

# Owner id used for base spawn points (not owned by a lift, trail or lodge)
BASE_OWNER_ID = 0


class SnapKey(NamedTuple):
    """Deterministic identity of a snap point."""

    point_type: SnapPointType
    owner_id: int
    coord: tuple[int, int]


@dataclass(frozen=True)
class SnapPoint:
    """A typed, owned connection location.

    Attributes:
        point_type: Kind of connection (lift bottom, trail start, ...)
        owner_id: ID of the owning lift/trail/lodge (BASE_OWNER_ID for base spawns)
        position: World position of the point
        name: Display name (e.g. "Eagle Chair (bottom)")
    """

    point_type: SnapPointType
    owner_id: int
    position: Position
    name: str = ""

    @property
    def key(self) -> SnapKey:
        return SnapKey(point_type=self.point_type, owner_id=self.owner_id, coord=self.position.tile)

    def distance_to(self, other: "SnapPoint") -> float:
        return self.position.distance_to(other=other.position)

    def __repr__(self) -> str:
        return f"SnapPoint({self.point_type.value}, owner={self.owner_id}, {self.position!r})"
