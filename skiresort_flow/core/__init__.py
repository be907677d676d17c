"""Core foundation classes of the flow simulation.

- SnapRegistry: Typed connection points queryable by type/owner/proximity
- TraversalGraph: Directed movement graph and skill-aware routing
- SkierDistribution: Skill mix, preferences, hard caps, effective weights
- ResortTrafficState: Occupancy, pending intent and self-balancing deficits
"""

from skiresort_flow.core.distribution import DOWNSTREAM_NOT_COMPUTED, SkierDistribution
from skiresort_flow.core.snap_registry import SnapRegistry
from skiresort_flow.core.traffic_state import ResortTrafficState, TrafficInfo
from skiresort_flow.core.traversal_graph import TraversalGraph

__all__ = [
    "SnapRegistry",
    "TraversalGraph",
    "SkierDistribution",
    "DOWNSTREAM_NOT_COMPUTED",
    "ResortTrafficState",
    "TrafficInfo",
]
