"""Resort - Central manager for the infrastructure the flow simulation runs on.

Owns all lifts, trails, lodges and base spawn points together with the
SnapRegistry, TraversalGraph, ResortTrafficState and SkierDistribution of
one simulation session. Provides operations for:
- Adding/removing validated infrastructure (snap points registered/unregistered)
- Rebuilding the traversal graph and traffic registrations
- Read-only traffic and stats reports for presentation collaborators

Entity ids share one counter across lifts, trails and lodges, so removing
snap points by owner never touches another entity.
"""

import logging
import random
from typing import Optional

from skiresort_flow.config import FlowConfig
from skiresort_flow.core.distribution import SkierDistribution
from skiresort_flow.core.snap_registry import SnapRegistry
from skiresort_flow.core.traffic_state import ResortTrafficState
from skiresort_flow.core.traversal_graph import TraversalGraph
from skiresort_flow.model.enums import SnapPointType, TrailDifficulty
from skiresort_flow.model.lift import Lift
from skiresort_flow.model.lodge import Lodge, LodgePricing
from skiresort_flow.model.position import Position
from skiresort_flow.model.snap_point import BASE_OWNER_ID, SnapPoint
from skiresort_flow.model.trail import Trail

logger = logging.getLogger(__name__)


class Resort:
    """Resort infrastructure and its derived movement network.

    Every mutating operation rebuilds the traversal graph (wholesale) unless
    called with rebuild=False, in which case call rebuild() once at the end.

    Example:
        resort = Resort(config=FlowConfig(seed=7))
        resort.add_base(position=Position(x=0, y=0, z=0))
        lift = resort.add_lift(bottom=Position(x=10, y=0, z=0), top=Position(x=10, y=300, z=800))
        trail = resort.add_trail(points=[lift.top, Position(x=20, y=0, z=5)], difficulty=TrailDifficulty.BLUE)
    """

    def __init__(self, config: Optional[FlowConfig] = None) -> None:
        self.config = config or FlowConfig()
        self.rng = random.Random(self.config.seed)

        self.lifts: dict[int, Lift] = {}
        self.trails: dict[int, Trail] = {}
        self.lodges: dict[int, Lodge] = {}
        self.bases: list[SnapPoint] = []

        self.registry = SnapRegistry()
        self.graph = TraversalGraph(settings=self.config.snap)
        self.traffic = ResortTrafficState(settings=self.config.traffic)
        self.distribution = SkierDistribution(settings=self.config.distribution, visitor_settings=self.config.visitors)

        self._entity_counter = 0

    def _next_entity_id(self) -> int:
        self._entity_counter += 1
        return self._entity_counter

    # =========================================================================
    # Infrastructure Operations
    # =========================================================================

    def add_base(self, position: Position, name: str = "Base Area", rebuild: bool = True) -> SnapPoint:
        """Register a base spawn point (where skiers arrive and leave)."""
        point = SnapPoint(point_type=SnapPointType.BASE_SPAWN, owner_id=BASE_OWNER_ID, position=position, name=name)
        if self.registry.register(point=point):
            self.bases.append(point)
            logger.info(f"Added base spawn '{name}' at {position!r}")
        if rebuild:
            self.rebuild()
        return point

    def remove_base(self, point: SnapPoint, rebuild: bool = True) -> None:
        if point not in self.bases:
            raise ValueError(f"Base spawn {point!r} is not registered")
        self.registry.unregister(point=point)
        self.bases = [b for b in self.bases if b.key != point.key]
        if rebuild:
            self.rebuild()

    def add_lift(
        self,
        bottom: Position,
        top: Position,
        lift_type: str = "chairlift",
        capacity: Optional[float] = None,
        name: Optional[str] = None,
        is_valid: bool = True,
        rebuild: bool = True,
    ) -> Lift:
        """Add a validated lift and register its station snap points.

        Args:
            bottom: Bottom station
            top: Top station
            lift_type: One of LiftConfig.TYPES
            capacity: Riders per hour (default depends on lift type)
            name: Display name (generated if None)
            is_valid: Invalid lifts are stored but not connected
            rebuild: Rebuild graph and traffic immediately

        Returns:
            The created Lift.
        """
        lift_id = self._next_entity_id()
        lift = Lift(
            id=lift_id,
            name=name or Lift.generate_name(lift_id=lift_id, rng=self.rng),
            lift_type=lift_type,
            bottom=bottom,
            top=top,
            capacity=capacity if capacity is not None else Lift.default_capacity(lift_type=lift_type),
            is_valid=is_valid,
        )
        self.lifts[lift_id] = lift
        if is_valid:
            for point in lift.snap_points():
                self.registry.register(point=point)
        logger.info(f"Added lift {lift!r}")
        if rebuild:
            self.rebuild()
        return lift

    def add_trail(
        self,
        points: list[Position],
        difficulty: TrailDifficulty,
        name: Optional[str] = None,
        is_valid: bool = True,
        rebuild: bool = True,
    ) -> Trail:
        """Add a validated trail and register its start/end snap points."""
        trail_id = self._next_entity_id()
        trail = Trail(
            id=trail_id,
            name=name or Trail.generate_name(difficulty=difficulty, trail_id=trail_id, rng=self.rng),
            points=list(points),
            difficulty=difficulty,
            is_valid=is_valid,
        )
        self.trails[trail_id] = trail
        if is_valid:
            for point in trail.snap_points():
                self.registry.register(point=point)
        logger.info(f"Added trail {trail!r}")
        if rebuild:
            self.rebuild()
        return trail

    def add_lodge(
        self,
        entrance: Position,
        pricing: Optional[LodgePricing] = None,
        capacity: Optional[int] = None,
        name: Optional[str] = None,
        rebuild: bool = True,
    ) -> Lodge:
        """Add a lodge and register its entrance snap point."""
        lodge_id = self._next_entity_id()
        lodge = Lodge(id=lodge_id, name=name or f"Lodge {lodge_id}", entrance=entrance, pricing=pricing or LodgePricing())
        if capacity is not None:
            lodge.capacity = capacity
        self.lodges[lodge_id] = lodge
        for point in lodge.snap_points():
            self.registry.register(point=point)
        logger.info(f"Added lodge {lodge.name} at {entrance!r}")
        if rebuild:
            self.rebuild()
        return lodge

    def remove_lift(self, lift_id: int, rebuild: bool = True) -> Lift:
        if lift_id not in self.lifts:
            raise ValueError(f"Lift {lift_id} not found")
        lift = self.lifts.pop(lift_id)
        self.registry.unregister_by_owner(owner_id=lift_id)
        logger.info(f"Removed lift {lift!r}")
        if rebuild:
            self.rebuild()
        return lift

    def remove_trail(self, trail_id: int, rebuild: bool = True) -> Trail:
        if trail_id not in self.trails:
            raise ValueError(f"Trail {trail_id} not found")
        trail = self.trails.pop(trail_id)
        self.registry.unregister_by_owner(owner_id=trail_id)
        logger.info(f"Removed trail {trail!r}")
        if rebuild:
            self.rebuild()
        return trail

    def remove_lodge(self, lodge_id: int, rebuild: bool = True) -> Lodge:
        if lodge_id not in self.lodges:
            raise ValueError(f"Lodge {lodge_id} not found")
        lodge = self.lodges.pop(lodge_id)
        self.registry.unregister_by_owner(owner_id=lodge_id)
        if rebuild:
            self.rebuild()
        return lodge

    def rebuild(self) -> None:
        """Rebuild the traversal graph and sync traffic registrations.

        Capacities of existing entities are refreshed with their counters kept;
        removed or invalid entities are unregistered.
        """
        self.graph.build(registry=self.registry)

        valid_trails = {t.id: t for t in self.valid_trails()}
        valid_lifts = {lift.id: lift for lift in self.lifts.values() if lift.is_valid}

        for trail_id in set(self.traffic.get_all_trail_traffic()) - set(valid_trails):
            self.traffic.unregister_trail(trail_id=trail_id)
        for lift_id in set(self.traffic.get_all_lift_traffic()) - set(valid_lifts):
            self.traffic.unregister_lift(lift_id=lift_id)

        for trail in valid_trails.values():
            self.traffic.register_trail(
                trail_id=trail.id, capacity=self.traffic.trail_capacity_from_length(length_m=trail.length_m)
            )
        for lift in valid_lifts.values():
            self.traffic.register_lift(
                lift_id=lift.id, capacity=self.traffic.lift_capacity_from_throughput(riders_per_hour=lift.capacity)
            )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_trail(self, trail_id: Optional[int]) -> Optional[Trail]:
        return self.trails.get(trail_id) if trail_id is not None else None

    def get_lift(self, lift_id: Optional[int]) -> Optional[Lift]:
        return self.lifts.get(lift_id) if lift_id is not None else None

    def get_lodge(self, lodge_id: Optional[int]) -> Optional[Lodge]:
        return self.lodges.get(lodge_id) if lodge_id is not None else None

    def valid_trails(self) -> list[Trail]:
        return [t for t in self.trails.values() if t.is_valid]

    def trail_difficulties(self) -> dict[int, TrailDifficulty]:
        """Trail id -> difficulty lookup for skill-aware routing."""
        return {t.id: t.difficulty for t in self.valid_trails()}

    def get_base_spawn(self) -> Optional[SnapPoint]:
        return self.bases[0] if self.bases else None

    def find_lodge_near(self, position: Position, max_distance: float) -> Optional[Lodge]:
        """Closest lodge with free capacity whose entrance is within max_distance."""
        for point in self.registry.find_nearby(
            position=position, max_distance=max_distance, point_type=SnapPointType.BUILDING_ENTRANCE
        ):
            lodge = self.lodges.get(point.owner_id)
            if lodge is not None and not lodge.is_full:
                return lodge
        return None

    def get_traffic_report(self) -> dict:
        """Per-entity deficit, crowding and recent popularity (read-only snapshot)."""
        trails = {
            trail_id: {
                "name": self.trails[trail_id].name if trail_id in self.trails else "",
                "occupancy": info.occupancy,
                "pending_intent": info.pending_intent,
                "capacity": info.capacity,
                "deficit": info.deficit,
                "crowding": info.crowding,
                "recent_popularity": self.traffic.get_trail_recent_popularity(trail_id=trail_id),
            }
            for trail_id, info in self.traffic.get_all_trail_traffic().items()
        }
        lifts = {
            lift_id: {
                "name": self.lifts[lift_id].name if lift_id in self.lifts else "",
                "occupancy": info.occupancy,
                "pending_intent": info.pending_intent,
                "capacity": info.capacity,
                "deficit": info.deficit,
                "crowding": info.crowding,
                "recent_popularity": self.traffic.get_lift_recent_popularity(lift_id=lift_id),
            }
            for lift_id, info in self.traffic.get_all_lift_traffic().items()
        }
        return {"trails": trails, "lifts": lifts, "skiers_on_mountain": self.traffic.total_skiers_on_mountain()}

    def get_stats(self) -> dict:
        """Get resort statistics."""
        by_difficulty = {d.value: 0 for d in TrailDifficulty}
        for trail in self.valid_trails():
            by_difficulty[trail.difficulty.value] += 1
        return {
            "lifts": len(self.lifts),
            "trails": len(self.trails),
            "lodges": len(self.lodges),
            "bases": len(self.bases),
            "trails_by_difficulty": by_difficulty,
            "total_trail_length_m": sum(t.length_m for t in self.valid_trails()),
            "snap_points": self.registry.get_total_count(),
            "graph_nodes": self.graph.node_count,
            "graph_edges": self.graph.edge_count,
        }
