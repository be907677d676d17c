"""Smoke tests for module imports, configuration validation and the demo layout.

Quick tests that verify the system is correctly installed and configured.
"""

import importlib

import pytest

from skiresort_flow.config import FlowConfig, SnapSettings
from skiresort_flow.constants import DecisionConfig, DistributionConfig, LiftConfig, NameConfig
from skiresort_flow.demo import build_demo_resort
from skiresort_flow.model.enums import SkillLevel, SnapPointType, TrailDifficulty
from skiresort_flow.simulation.resort import Resort

# =============================================================================
# MODULE IMPORT TESTS
# =============================================================================


class TestModuleImports:
    """Parametrized smoke tests for module imports."""

    @pytest.mark.parametrize(
        "module_path,class_name",
        [
            # Core modules
            pytest.param("skiresort_flow.core.snap_registry", "SnapRegistry", id="core_registry"),
            pytest.param("skiresort_flow.core.traversal_graph", "TraversalGraph", id="core_graph"),
            pytest.param("skiresort_flow.core.distribution", "SkierDistribution", id="core_distribution"),
            pytest.param("skiresort_flow.core.traffic_state", "ResortTrafficState", id="core_traffic"),
            # Model modules
            pytest.param("skiresort_flow.model.skier", "Skier", id="model_skier"),
            pytest.param("skiresort_flow.model.needs", "SkierNeeds", id="model_needs"),
            pytest.param("skiresort_flow.model.satisfaction", "SkierSatisfaction", id="model_satisfaction"),
            pytest.param("skiresort_flow.model.lodge", "Lodge", id="model_lodge"),
            # Simulation modules
            pytest.param("skiresort_flow.simulation.resort", "Resort", id="sim_resort"),
            pytest.param("skiresort_flow.simulation.decision_engine", "SkierDecisionEngine", id="sim_engine"),
            pytest.param("skiresort_flow.simulation.state_machine", "SkierStateMachine", id="sim_statemachine"),
            pytest.param("skiresort_flow.simulation.day_simulation", "VisitorFlowSystem", id="sim_batch"),
            pytest.param("skiresort_flow.simulation.realtime", "RealtimeSimulation", id="sim_realtime"),
        ],
    )
    def test_module_import(self, module_path: str, class_name: str) -> None:
        """Module can be imported without errors."""
        module = importlib.import_module(module_path)
        assert getattr(module, class_name) is not None


# =============================================================================
# CONFIGURATION VALIDATION TESTS
# =============================================================================


class TestConfigurationValidation:
    """Configuration constants are valid and consistent."""

    def test_preference_rows_cover_all_difficulties(self) -> None:
        for skill, row in DistributionConfig.PREFERENCES.items():
            assert set(row) == set(DistributionConfig.DIFFICULTIES), skill
            assert all(0.0 <= w <= 1.0 for w in row.values())

    def test_desperate_pairs_are_outside_caps(self) -> None:
        """A desperate pairing is never also an allowed pairing."""
        for skill, difficulty in DistributionConfig.DESPERATE_ONLY:
            assert difficulty not in DistributionConfig.ALLOWED_DIFFICULTIES[skill]

    def test_every_skill_has_an_allowed_difficulty(self) -> None:
        for skill in DistributionConfig.SKILLS:
            assert DistributionConfig.ALLOWED_DIFFICULTIES[skill]

    def test_enum_values_match_table_keys(self) -> None:
        assert [s.value for s in SkillLevel] == DistributionConfig.SKILLS
        assert [d.value for d in TrailDifficulty] == DistributionConfig.DIFFICULTIES
        assert set(NameConfig.TRAIL_PREFIXES) == set(DistributionConfig.DIFFICULTIES)

    def test_depth_discounts_decrease(self) -> None:
        discounts = DecisionConfig.DOWNSTREAM_DEPTH_DISCOUNTS
        assert discounts == sorted(discounts, reverse=True)

    def test_lift_types_have_positive_capacity(self) -> None:
        assert all(capacity > 0 for capacity in LiftConfig.CAPACITY_BY_TYPE.values())

    def test_sessions_get_independent_settings(self) -> None:
        first, second = FlowConfig(), FlowConfig()
        first.snap.snap_radius_3d = 1.0
        assert second.snap.snap_radius_3d == SnapSettings().snap_radius_3d


# =============================================================================
# DEMO LAYOUT
# =============================================================================


class TestDemoResort:
    """The demo resort wires up as documented."""

    def test_graph_size(self, demo_resort: Resort) -> None:
        """16 snap points; 18 edges (1 base, 2 rides, 5 top->start, 5 bodies, 5 end->bottom)."""
        stats = demo_resort.get_stats()
        assert stats["snap_points"] == 16
        assert stats["graph_nodes"] == 16
        assert stats["graph_edges"] == 18
        assert stats["trails_by_difficulty"] == {"green": 1, "blue": 2, "black": 1, "double_black": 1}

    def test_entity_ids(self, demo_resort: Resort) -> None:
        assert [demo_resort.lifts[i].name for i in (1, 2)] == ["Valley Express", "Summit Chair"]
        assert demo_resort.trails[5].name == "Traverse"
        assert demo_resort.lodges[8].name == "Valley Lodge"

    def test_traverse_feeds_summit_chair(self, demo_resort: Resort) -> None:
        registry = demo_resort.registry
        end = registry.get_point(point_type=SnapPointType.TRAIL_END, owner_id=5)
        bottom = registry.get_point(point_type=SnapPointType.LIFT_BOTTOM, owner_id=2)
        assert demo_resort.graph.has_edge(source=end, target=bottom)

    def test_rebuild_is_deterministic(self, demo_resort: Resort) -> None:
        other = build_demo_resort(config=FlowConfig(seed=1))
        assert demo_resort.graph.edge_keys() == other.graph.edge_keys()
