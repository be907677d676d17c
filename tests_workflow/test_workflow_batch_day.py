"""Integration test for the batch day workflow.

Tests several days on the demo resort: spawn -> plan -> ride -> ski -> depart,
with the satisfaction multiplier feeding the next day's visitor count.
"""

from skiresort_flow.model.enums import SkillLevel, TrailDifficulty
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.simulation.day_simulation import VisitorFlowSystem
from skiresort_flow.simulation.resort import Resort

BASE_VISITORS = 120


class TestBatchDayWorkflow:
    """Full days through VisitorFlowSystem."""

    def test_multi_day_cycle(self, demo_resort: Resort) -> None:
        """Three days: accounting holds and the multiplier drives tomorrow's visitors.

        Tests:
        - served + unserved == total every day
        - the economy state receives the multiplier
        - advance_day scales the next visitor target
        - all traffic counters are back to zero after each day
        """
        state = SimulationState(visitors_today=BASE_VISITORS)
        flow = VisitorFlowSystem(resort=demo_resort)

        for day in range(1, 4):
            expected_visitors = state.visitors_today
            stats = flow.simulate_day(state=state)

            assert stats.total_visitors == expected_visitors
            assert stats.served_visitors + stats.unserved_visitors == stats.total_visitors
            assert sum(stats.served_by_skill.values()) == stats.served_visitors
            assert stats.total_runs >= stats.served_visitors
            assert 0.2 <= state.visitor_multiplier <= 1.2
            assert state.visitor_multiplier == flow.satisfaction_system.get_visitor_multiplier()

            for info in demo_resort.traffic.get_all_trail_traffic().values():
                assert info.occupancy == 0 and info.pending_intent == 0

            state.advance_day(base_visitors=BASE_VISITORS)
            assert state.day == day + 1
            assert state.visitors_today == round(BASE_VISITORS * state.visitor_multiplier)

    def test_beginners_stay_on_easy_terrain(self, demo_resort: Resort) -> None:
        """Beginners never ski black or double black while green/blue exist."""
        demo_resort.distribution.set_skill_distribution({SkillLevel.BEGINNER: 1.0})
        stats = VisitorFlowSystem(resort=demo_resort).simulate_day(state=SimulationState(visitors_today=80))

        assert stats.runs_by_difficulty[TrailDifficulty.BLACK] == 0
        assert stats.runs_by_difficulty[TrailDifficulty.DOUBLE_BLACK] == 0
        assert stats.runs_by_difficulty[TrailDifficulty.GREEN] > 0
        assert stats.served_by_skill[SkillLevel.BEGINNER] == stats.served_visitors

    def test_experts_use_the_summit(self, demo_resort: Resort) -> None:
        """Experts prefer double black; the summit trails are only reachable via Traverse."""
        demo_resort.distribution.set_skill_distribution({SkillLevel.EXPERT: 1.0})
        stats = VisitorFlowSystem(resort=demo_resort).simulate_day(state=SimulationState(visitors_today=80))

        summit_runs = stats.runs_by_difficulty[TrailDifficulty.BLACK] + stats.runs_by_difficulty[
            TrailDifficulty.DOUBLE_BLACK
        ]
        assert summit_runs > 0
        assert stats.runs_by_difficulty[TrailDifficulty.BLUE] > 0  # Traverse is the way up

    def test_closed_resort_loses_visitors(self, demo_resort: Resort) -> None:
        """Removing every lift leaves all visitors unserved and drops the multiplier."""
        for lift_id in list(demo_resort.lifts):
            demo_resort.remove_lift(lift_id=lift_id)
        state = SimulationState(visitors_today=50)
        stats = VisitorFlowSystem(resort=demo_resort).simulate_day(state=state)

        assert stats.served_visitors == 0
        assert stats.unserved_rate == 1.0
        assert state.visitor_multiplier < 1.0
