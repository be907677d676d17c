"""TraversalGraph - Directed movement graph over snap points.

Built wholesale from a SnapRegistry whenever infrastructure changes. Edge classes:
1. BaseSpawn -> LiftBottom   within snap radius * base multiplier (generous entry)
2. LiftBottom -> LiftTop     same owner (riding the lift), regardless of geometry
3. LiftTop -> TrailStart     within snap radius
4. TrailStart -> TrailEnd    same owner (skiing the trail body)
5. TrailEnd -> LiftBottom    within snap radius
6. TrailEnd -> TrailStart    within snap radius, different trail (branch skiing)

The new adjacency is built completely and then swapped in, so readers never
see a partially built graph.

Routing is an unweighted breadth-first search (fewest hops) with one skill
rule: the TrailStart -> TrailEnd edge of a trail is only traversed when the
skier's skill allows that trail's difficulty.
"""

import logging
from collections import deque
from typing import Mapping, Optional

from skiresort_flow.config import DistanceMetric, SnapSettings
from skiresort_flow.core.snap_registry import SnapRegistry
from skiresort_flow.model.enums import SnapPointType, TrailDifficulty
from skiresort_flow.model.snap_point import SnapKey, SnapPoint

logger = logging.getLogger(__name__)

Adjacency = dict[SnapKey, list[SnapPoint]]


class TraversalGraph:
    """Directed adjacency over snap points.

    Example:
        graph = TraversalGraph(settings=config.snap)
        graph.build(registry=registry)
        path = graph.find_path(start=base, target=trail_start, allowed_difficulties={TrailDifficulty.GREEN},
                               trail_difficulties={7: TrailDifficulty.GREEN})
    """

    def __init__(self, settings: Optional[SnapSettings] = None) -> None:
        self.settings = settings or SnapSettings()
        self._adjacency: Adjacency = {}
        self._nodes: dict[SnapKey, SnapPoint] = {}

    # =========================================================================
    # Building
    # =========================================================================

    def _within(self, a: SnapPoint, b: SnapPoint, multiplier: float = 1.0) -> bool:
        """Distance gate using the configured metric."""
        if self.settings.metric == DistanceMetric.MANHATTAN_2D:
            return a.position.manhattan_tiles_to(other=b.position) <= self.settings.snap_radius_tiles * multiplier
        return a.distance_to(other=b) <= self.settings.snap_radius_3d * multiplier

    def _neighbors_of(self, source: SnapPoint, by_type: dict[SnapPointType, list[SnapPoint]]) -> list[SnapPoint]:
        kind = source.point_type

        if kind == SnapPointType.BASE_SPAWN:
            multiplier = self.settings.base_radius_multiplier
            return [p for p in by_type[SnapPointType.LIFT_BOTTOM] if self._within(source, p, multiplier=multiplier)]

        if kind == SnapPointType.LIFT_BOTTOM:
            return [p for p in by_type[SnapPointType.LIFT_TOP] if p.owner_id == source.owner_id]

        if kind == SnapPointType.LIFT_TOP:
            return [p for p in by_type[SnapPointType.TRAIL_START] if self._within(source, p)]

        if kind == SnapPointType.TRAIL_START:
            return [p for p in by_type[SnapPointType.TRAIL_END] if p.owner_id == source.owner_id]

        if kind == SnapPointType.TRAIL_END:
            to_lifts = [p for p in by_type[SnapPointType.LIFT_BOTTOM] if self._within(source, p)]
            to_trails = [
                p
                for p in by_type[SnapPointType.TRAIL_START]
                if p.owner_id != source.owner_id and self._within(source, p)
            ]
            return to_lifts + to_trails

        # Building entrances are not part of the movement network
        return []

    def build(self, registry: SnapRegistry) -> Adjacency:
        """Rebuild the adjacency from the registry and swap it in.

        Idempotent: the same registry always yields the same adjacency.

        Args:
            registry: Source of snap points

        Returns:
            The new adjacency mapping (a copy; mutating it does not affect the graph).
        """
        points = registry.get_all()
        by_type: dict[SnapPointType, list[SnapPoint]] = {t: [] for t in SnapPointType}
        for point in points:
            by_type[point.point_type].append(point)

        adjacency: Adjacency = {}
        nodes: dict[SnapKey, SnapPoint] = {}
        for point in points:
            nodes[point.key] = point
            adjacency[point.key] = self._neighbors_of(source=point, by_type=by_type)

        # Swap in the fully built state
        self._adjacency, self._nodes = adjacency, nodes

        edge_count = sum(len(v) for v in adjacency.values())
        logger.info(f"Traversal graph rebuilt: {len(nodes)} nodes, {edge_count} edges ({self.settings.metric})")
        return {key: list(neighbors) for key, neighbors in adjacency.items()}

    # =========================================================================
    # Queries
    # =========================================================================

    def get_neighbors(self, point: SnapPoint) -> list[SnapPoint]:
        return list(self._adjacency.get(point.key, []))

    def has_edge(self, source: SnapPoint, target: SnapPoint) -> bool:
        return any(n.key == target.key for n in self._adjacency.get(source.key, []))

    def edges(self) -> list[tuple[SnapPoint, SnapPoint]]:
        return [(self._nodes[key], n) for key, neighbors in self._adjacency.items() for n in neighbors]

    def edge_keys(self) -> set[tuple[SnapKey, SnapKey]]:
        """Edges as key pairs (order-independent comparison of graphs)."""
        return {(key, n.key) for key, neighbors in self._adjacency.items() for n in neighbors}

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(v) for v in self._adjacency.values())

    def get_stats(self) -> dict:
        """Edge counts per source point type (for reporting)."""
        per_type: dict[str, int] = {}
        for key, neighbors in self._adjacency.items():
            per_type[key.point_type.value] = per_type.get(key.point_type.value, 0) + len(neighbors)
        return {
            "nodes": self.node_count,
            "edges": self.edge_count,
            "edges_by_source_type": per_type,
        }

    # =========================================================================
    # Routing
    # =========================================================================

    @staticmethod
    def is_trail_body(source: SnapPoint, target: SnapPoint) -> bool:
        """True for the TrailStart -> TrailEnd edge of the same trail."""
        return (
            source.point_type == SnapPointType.TRAIL_START
            and target.point_type == SnapPointType.TRAIL_END
            and source.owner_id == target.owner_id
        )

    @staticmethod
    def _trail_allowed(
        trail_id: int,
        allowed_difficulties: Optional[set[TrailDifficulty]],
        trail_difficulties: Optional[Mapping[int, TrailDifficulty]],
    ) -> bool:
        if allowed_difficulties is None:
            return True
        difficulty = (trail_difficulties or {}).get(trail_id)
        return difficulty is not None and difficulty in allowed_difficulties

    def find_path(
        self,
        start: SnapPoint,
        target: SnapPoint,
        allowed_difficulties: Optional[set[TrailDifficulty]] = None,
        trail_difficulties: Optional[Mapping[int, TrailDifficulty]] = None,
    ) -> Optional[list[SnapPoint]]:
        """Breadth-first search from start to target (fewest hops).

        Args:
            start: Start snap point
            target: Target snap point
            allowed_difficulties: Skier's allowed difficulties (None = no skill filter)
            trail_difficulties: Trail id -> difficulty lookup for the skill filter

        Returns:
            Path including both endpoints, or None if unreachable.
        """
        if start.key == target.key:
            return [start]
        if start.key not in self._adjacency:
            return None

        visited = {start.key}
        predecessor: dict[SnapKey, SnapPoint] = {}
        queue: deque[SnapPoint] = deque([start])

        while queue:
            current = queue.popleft()
            for neighbor in self._adjacency.get(current.key, []):
                if neighbor.key in visited:
                    continue
                if self.is_trail_body(current, neighbor) and not self._trail_allowed(
                    current.owner_id, allowed_difficulties, trail_difficulties
                ):
                    continue
                visited.add(neighbor.key)
                predecessor[neighbor.key] = current
                if neighbor.key == target.key:
                    return self._reconstruct(predecessor=predecessor, start=start, target=neighbor)
                queue.append(neighbor)

        return None

    @staticmethod
    def _reconstruct(predecessor: dict[SnapKey, SnapPoint], start: SnapPoint, target: SnapPoint) -> list[SnapPoint]:
        path = [target]
        while path[-1].key != start.key:
            path.append(predecessor[path[-1].key])
        path.reverse()
        return path

    def reachable_trail_starts(
        self,
        start: SnapPoint,
        max_trail_hops: int,
        allowed_difficulties: Optional[set[TrailDifficulty]] = None,
        trail_difficulties: Optional[Mapping[int, TrailDifficulty]] = None,
    ) -> dict[int, int]:
        """Trails whose start is reachable, with the fewest trails skied on the way.

        0-1 BFS: trail body edges cost one hop, all other edges are free.

        Args:
            start: Start snap point
            max_trail_hops: Trails reached after more than this many trail bodies are ignored
            allowed_difficulties: Skill filter as in find_path
            trail_difficulties: Trail id -> difficulty lookup

        Returns:
            Mapping trail id -> number of trail bodies skied before reaching its start.
        """
        best: dict[SnapKey, int] = {start.key: 0}
        queue: deque[tuple[SnapPoint, int]] = deque([(start, 0)])
        reachable: dict[int, int] = {}

        while queue:
            current, hops = queue.popleft()
            if hops > best.get(current.key, hops):
                continue
            if current.point_type == SnapPointType.TRAIL_START:
                reachable[current.owner_id] = min(hops, reachable.get(current.owner_id, hops))

            for neighbor in self._adjacency.get(current.key, []):
                cost = 0
                if self.is_trail_body(current, neighbor):
                    if not self._trail_allowed(current.owner_id, allowed_difficulties, trail_difficulties):
                        continue
                    cost = 1
                new_hops = hops + cost
                if new_hops > max_trail_hops or new_hops >= best.get(neighbor.key, new_hops + 1):
                    continue
                best[neighbor.key] = new_hops
                if cost == 0:
                    queue.appendleft((neighbor, new_hops))
                else:
                    queue.append((neighbor, new_hops))

        return reachable
