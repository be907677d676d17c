"""ResortTrafficState - Live occupancy and self-balancing deficit per trail/lift.

For each category (trails, lifts), after every mutating event:
    target_share(e)  = capacity(e) / total_capacity
    current_share(e) = effective_load(e) / total_effective_load
    deficit(e)       = target_share(e) - current_share(e)
where effective_load = occupancy + pending_intent.

Empty resort (zero load): deficit = capacity share. Zero total capacity: deficit = 0.
Positive deficit = under-used, negative = over-used.

Event contract per entity:
- intended: pending_intent += 1 and the id is pushed on the recent-choice ring buffer
- entered:  one pending intent becomes occupancy (effective load unchanged)
- exited/completed: occupancy -= 1
All counters are clamped at zero. Mutations are serialized by a lock so the
deficit recomputation never reads a half-updated counter set.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Optional

from skiresort_flow.config import TrafficSettings

logger = logging.getLogger(__name__)


@dataclass
class TrafficInfo:
    """Traffic counters for one trail or lift.

    Attributes:
        entity_id: Trail or lift id
        capacity: Comfortable simultaneous skiers (derived from length/throughput)
        occupancy: Skiers physically on the entity
        pending_intent: Skiers committed but not yet arrived
        deficit: target_share - current_share (recomputed after every event)
        target_share: Capacity share within the category
        current_share: Effective load share within the category
    """

    entity_id: int
    capacity: float
    occupancy: int = 0
    pending_intent: int = 0
    deficit: float = 0.0
    target_share: float = 0.0
    current_share: float = 0.0

    @property
    def effective_load(self) -> int:
        return self.occupancy + self.pending_intent

    @property
    def crowding(self) -> float:
        """Effective load relative to capacity (1.0 = at capacity)."""
        if self.capacity <= 0:
            return 0.0
        return self.effective_load / self.capacity


class _Category:
    """Counters, deficits and recent choices of one entity category."""

    def __init__(self, name: str, memory_size: int) -> None:
        self.name = name
        self.infos: dict[int, TrafficInfo] = {}
        self.recent: deque[int] = deque(maxlen=memory_size)

    def register(self, entity_id: int, capacity: float) -> None:
        if capacity < 0:
            raise ValueError(f"{self.name} {entity_id} cannot have negative capacity {capacity}")
        info = self.infos.get(entity_id)
        if info is None:
            self.infos[entity_id] = TrafficInfo(entity_id=entity_id, capacity=capacity)
        else:
            info.capacity = capacity
        self.recompute()

    def unregister(self, entity_id: int) -> bool:
        removed = self.infos.pop(entity_id, None) is not None
        if removed:
            self.recompute()
        return removed

    def intended(self, entity_id: int) -> None:
        info = self.infos.get(entity_id)
        if info is None:
            logger.debug(f"Intent for unregistered {self.name} {entity_id} ignored")
            return
        info.pending_intent += 1
        self.recent.append(entity_id)
        self.recompute()

    def entered(self, entity_id: int) -> None:
        info = self.infos.get(entity_id)
        if info is None:
            return
        info.pending_intent = max(0, info.pending_intent - 1)
        info.occupancy += 1
        self.recompute()

    def exited(self, entity_id: int) -> None:
        info = self.infos.get(entity_id)
        if info is None:
            return
        info.occupancy = max(0, info.occupancy - 1)
        self.recompute()

    def recompute(self) -> None:
        total_capacity = sum(i.capacity for i in self.infos.values())
        total_load = sum(i.effective_load for i in self.infos.values())
        for info in self.infos.values():
            info.target_share = info.capacity / total_capacity if total_capacity > 0 else 0.0
            info.current_share = info.effective_load / total_load if total_load > 0 else 0.0
            if total_capacity <= 0:
                info.deficit = 0.0
            elif total_load <= 0:
                info.deficit = info.target_share
            else:
                info.deficit = info.target_share - info.current_share

    def recent_popularity(self, entity_id: int) -> float:
        if not self.recent:
            return 0.0
        return sum(1 for e in self.recent if e == entity_id) / len(self.recent)

    def clear(self) -> None:
        self.infos = {}
        self.recent.clear()


class ResortTrafficState:
    """Deficit tracker for all trails and lifts of a resort.

    Example:
        traffic = ResortTrafficState()
        traffic.register_trail(trail_id=1, capacity=10)
        traffic.on_trail_intended(trail_id=1)
        traffic.get_trail_deficit(trail_id=1)
    """

    def __init__(self, settings: Optional[TrafficSettings] = None) -> None:
        self.settings = settings or TrafficSettings()
        self._trails = _Category(name="trail", memory_size=self.settings.recent_memory_size)
        self._lifts = _Category(name="lift", memory_size=self.settings.recent_memory_size)
        self._lock = threading.RLock()

    # =========================================================================
    # Capacity derivation
    # =========================================================================

    def trail_capacity_from_length(self, length_m: float) -> float:
        return max(length_m / self.settings.trail_length_per_skier_m, self.settings.min_trail_capacity)

    def lift_capacity_from_throughput(self, riders_per_hour: float) -> float:
        return max(riders_per_hour / self.settings.lift_riders_per_capacity_unit, self.settings.min_lift_capacity)

    # =========================================================================
    # Registration
    # =========================================================================

    def register_trail(self, trail_id: int, capacity: float) -> None:
        """Register a trail or update its capacity (counters are kept)."""
        with self._lock:
            self._trails.register(entity_id=trail_id, capacity=capacity)

    def register_lift(self, lift_id: int, capacity: float) -> None:
        """Register a lift or update its capacity (counters are kept)."""
        with self._lock:
            self._lifts.register(entity_id=lift_id, capacity=capacity)

    def unregister_trail(self, trail_id: int) -> bool:
        with self._lock:
            return self._trails.unregister(entity_id=trail_id)

    def unregister_lift(self, lift_id: int) -> bool:
        with self._lock:
            return self._lifts.unregister(entity_id=lift_id)

    def clear(self) -> None:
        with self._lock:
            self._trails.clear()
            self._lifts.clear()

    # =========================================================================
    # Events
    # =========================================================================

    def on_trail_intended(self, trail_id: int) -> None:
        with self._lock:
            self._trails.intended(entity_id=trail_id)

    def on_trail_entered(self, trail_id: int) -> None:
        with self._lock:
            self._trails.entered(entity_id=trail_id)

    def on_trail_completed(self, trail_id: int) -> None:
        with self._lock:
            self._trails.exited(entity_id=trail_id)

    def on_lift_intended(self, lift_id: int) -> None:
        with self._lock:
            self._lifts.intended(entity_id=lift_id)

    def on_lift_entered(self, lift_id: int) -> None:
        with self._lock:
            self._lifts.entered(entity_id=lift_id)

    def on_lift_exited(self, lift_id: int) -> None:
        with self._lock:
            self._lifts.exited(entity_id=lift_id)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_trail_deficit(self, trail_id: int) -> float:
        info = self._trails.infos.get(trail_id)
        return info.deficit if info is not None else 0.0

    def get_lift_deficit(self, lift_id: int) -> float:
        info = self._lifts.infos.get(lift_id)
        return info.deficit if info is not None else 0.0

    def get_trail_recent_popularity(self, trail_id: int) -> float:
        """Fraction of recent trail choices that picked this trail."""
        return self._trails.recent_popularity(entity_id=trail_id)

    def get_lift_recent_popularity(self, lift_id: int) -> float:
        return self._lifts.recent_popularity(entity_id=lift_id)

    def get_trail_crowding(self, trail_id: int) -> float:
        info = self._trails.infos.get(trail_id)
        return info.crowding if info is not None else 0.0

    def get_lift_crowding(self, lift_id: int) -> float:
        info = self._lifts.infos.get(lift_id)
        return info.crowding if info is not None else 0.0

    def get_trail_info(self, trail_id: int) -> Optional[TrafficInfo]:
        return self._trails.infos.get(trail_id)

    def get_lift_info(self, lift_id: int) -> Optional[TrafficInfo]:
        return self._lifts.infos.get(lift_id)

    def get_all_trail_traffic(self) -> dict[int, TrafficInfo]:
        return dict(self._trails.infos)

    def get_all_lift_traffic(self) -> dict[int, TrafficInfo]:
        return dict(self._lifts.infos)

    def total_skiers_on_mountain(self) -> int:
        """Skiers physically on a trail or lift."""
        return sum(i.occupancy for i in self._trails.infos.values()) + sum(
            i.occupancy for i in self._lifts.infos.values()
        )
