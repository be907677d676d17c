"""Tests for day simulation, real-time stepping, lodges and resort satisfaction.

Tests: try_enter_lodge, complete_lodge_visit, SatisfactionSystem, DayStats,
       VisitorFlowSystem, RealtimeSimulation
Focus: Visitor accounting, multiplier feedback, traffic counters after a day
"""

import pytest

from skiresort_flow.config import ResortSatisfactionSettings
from skiresort_flow.model.enums import SkierState, SkillLevel, TrailDifficulty
from skiresort_flow.model.lodge import LodgePricing
from skiresort_flow.model.position import Position
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.amenities import complete_lodge_visit, try_enter_lodge
from skiresort_flow.simulation.day_simulation import DayStats, VisitorFlowSystem
from skiresort_flow.simulation.realtime import RealtimeSimulation
from skiresort_flow.simulation.resort import Resort
from skiresort_flow.simulation.satisfaction_system import SatisfactionSystem


def _assert_traffic_idle(resort: Resort) -> None:
    for info in list(resort.traffic.get_all_trail_traffic().values()) + list(
        resort.traffic.get_all_lift_traffic().values()
    ):
        assert info.occupancy == 0 and info.pending_intent == 0


# =============================================================================
# LODGES
# =============================================================================


class TestLodgeVisits:
    """try_enter_lodge / complete_lodge_visit."""

    def test_no_need_no_visit(self, loop_resort: Resort, beginner: Skier) -> None:
        loop_resort.add_lodge(entrance=Position(20.0, 0.0, 10.0))
        assert try_enter_lodge(resort=loop_resort, skier=beginner, position=Position(13.0, 0.0, 5.0)) is None
        assert beginner.needs.unfulfilled_need_attempts == 0

    def test_hungry_skier_enters_nearby_lodge(self, loop_resort: Resort, beginner: Skier) -> None:
        lodge = loop_resort.add_lodge(entrance=Position(13.0, 0.0, 35.0))
        beginner.needs.hunger = 0.9
        entered = try_enter_lodge(resort=loop_resort, skier=beginner, position=Position(13.0, 0.0, 5.0))
        assert entered is lodge
        assert lodge.occupancy == 1
        assert beginner.needs.walking_distance == pytest.approx(30.0)

    def test_full_lodge_records_unfulfilled_need(self, loop_resort: Resort, beginner: Skier) -> None:
        lodge = loop_resort.add_lodge(entrance=Position(20.0, 0.0, 10.0), capacity=1)
        assert lodge.check_in()
        beginner.needs.bladder = 0.9
        assert try_enter_lodge(resort=loop_resort, skier=beginner, position=Position(13.0, 0.0, 5.0)) is None
        assert beginner.needs.unfulfilled_need_attempts == 1

    def test_far_lodge_records_unfulfilled_need(self, loop_resort: Resort, beginner: Skier) -> None:
        loop_resort.add_lodge(entrance=Position(500.0, 0.0, 500.0))
        beginner.needs.hunger = 0.9
        assert try_enter_lodge(resort=loop_resort, skier=beginner, position=Position(13.0, 0.0, 5.0)) is None
        assert beginner.needs.unfulfilled_need_attempts == 1

    def test_visit_fulfils_urgent_needs_and_charges(self, loop_resort: Resort, beginner: Skier) -> None:
        lodge = loop_resort.add_lodge(
            entrance=Position(20.0, 0.0, 10.0), pricing=LodgePricing(food_price=16.0, bathroom_price=2.0)
        )
        lodge.check_in()
        needs = beginner.needs
        needs.hunger, needs.bladder, needs.fatigue = 0.9, 0.5, 0.5

        complete_lodge_visit(skier=beginner, lodge=lodge, rest_minutes=10.0)
        assert needs.hunger == 0.0
        assert needs.bladder == 0.5  # Below threshold, not used
        assert needs.fatigue == pytest.approx(0.4)
        assert needs.lodge_visit_count == 1
        assert needs.average_price_penalty == pytest.approx(-0.1)
        assert lodge.occupancy == 0


# =============================================================================
# RESORT SATISFACTION
# =============================================================================


class TestSatisfactionSystem:
    """Blending, end-of-day penalty and clamps."""

    def test_blend_with_history(self, beginner: Skier) -> None:
        system = SatisfactionSystem()
        score = beginner.get_satisfaction()
        system.update_from_active_skiers(skiers=[beginner])
        assert system.realtime_satisfaction == pytest.approx(score)
        assert system.satisfaction == pytest.approx(0.7 * score + 0.3 * 1.0)

    def test_empty_population_keeps_value(self) -> None:
        system = SatisfactionSystem()
        system.update_from_active_skiers(skiers=[])
        assert system.satisfaction == 1.0

    def test_unserved_penalty(self) -> None:
        system = SatisfactionSystem()
        stats = DayStats(total_visitors=10, served_visitors=5, unserved_visitors=5)
        system.end_of_day(stats=stats)
        assert system.satisfaction == pytest.approx(1.0 - 0.3 * 0.5)

    def test_no_visitors_no_penalty(self) -> None:
        system = SatisfactionSystem()
        system.end_of_day(stats=DayStats())
        assert system.satisfaction == 1.0

    def test_clamped_to_bounds(self) -> None:
        system = SatisfactionSystem(settings=ResortSatisfactionSettings(unserved_penalty=5.0))
        system.end_of_day(stats=DayStats(total_visitors=1, unserved_visitors=1))
        assert system.satisfaction == 0.2

        high = SatisfactionSystem(settings=ResortSatisfactionSettings(initial=1.19, realtime_blend=0.0))
        high.satisfaction = 5.0
        high.update_from_active_skiers(skiers=[Skier(id=1, skill_level=SkillLevel.EXPERT, desired_runs=1)])
        assert high.satisfaction == 1.2

    def test_apply_and_reset(self) -> None:
        system = SatisfactionSystem()
        system.satisfaction = 0.6
        state = SimulationState()
        system.apply_to(state=state)
        assert state.visitor_multiplier == 0.6 and state.satisfaction == 0.6
        system.reset()
        assert system.get_visitor_multiplier() == 1.0


# =============================================================================
# DAY STATS
# =============================================================================


class TestDayStats:
    def test_departures_split_by_service(self) -> None:
        stats = DayStats()
        served = Skier(id=1, skill_level=SkillLevel.ADVANCED, desired_runs=3, runs_completed=2)
        unserved = Skier(id=2, skill_level=SkillLevel.BEGINNER, desired_runs=3)
        stats.record_departure(skier=served)
        stats.record_departure(skier=unserved)
        stats.record_run(difficulty=TrailDifficulty.BLACK)

        assert stats.total_visitors == 2
        assert stats.served_by_skill[SkillLevel.ADVANCED] == 1
        assert stats.unserved_by_skill[SkillLevel.BEGINNER] == 1
        assert stats.unserved_rate == 0.5
        assert stats.total_runs == 1
        expected = (served.get_satisfaction() + unserved.get_satisfaction()) / 2
        assert stats.average_satisfaction == pytest.approx(expected)
        assert "2 visitors (1 served, 1 unserved)" in stats.summary()

    def test_empty_day_rates(self) -> None:
        stats = DayStats()
        assert stats.unserved_rate == 0.0 and stats.average_satisfaction == 0.0


# =============================================================================
# BATCH DAY
# =============================================================================


class TestVisitorFlowSystem:
    """Sequential batch simulation."""

    def test_every_visitor_accounted(self, loop_resort: Resort) -> None:
        state = SimulationState(visitors_today=25)
        flow = VisitorFlowSystem(resort=loop_resort)
        stats = flow.simulate_day(state=state)

        assert stats.total_visitors == 25
        assert stats.served_visitors + stats.unserved_visitors == 25
        assert stats.served_visitors == 25  # One reachable green loop serves everyone
        assert stats.runs_by_difficulty[TrailDifficulty.GREEN] == stats.total_runs > 0
        assert state.visitor_multiplier == flow.satisfaction_system.satisfaction
        _assert_traffic_idle(loop_resort)

    def test_no_base_everyone_unserved(self, empty_resort: Resort) -> None:
        empty_resort.add_lift(bottom=Position(0, 0, 0), top=Position(0, 300, 400))
        state = SimulationState(visitors_today=10)
        stats = VisitorFlowSystem(resort=empty_resort).simulate_day(state=state)
        assert stats.unserved_visitors == 10 and stats.total_runs == 0
        assert state.visitor_multiplier < 1.0

    def test_zero_visitors(self, loop_resort: Resort) -> None:
        state = SimulationState(visitors_today=0)
        stats = VisitorFlowSystem(resort=loop_resort).simulate_day(state=state)
        assert stats.total_visitors == 0
        assert state.visitor_multiplier == 1.0

    def test_beginners_avoid_double_black(self, two_trail_resort: Resort) -> None:
        two_trail_resort.distribution.set_skill_distribution({SkillLevel.BEGINNER: 1.0})
        stats = VisitorFlowSystem(resort=two_trail_resort).simulate_day(state=SimulationState(visitors_today=30))
        assert stats.runs_by_difficulty[TrailDifficulty.DOUBLE_BLACK] == 0
        assert stats.runs_by_difficulty[TrailDifficulty.GREEN] > 0

    def test_later_visitors_see_earlier_usage(self, two_trail_resort: Resort) -> None:
        """Usage stays in the tracker for the day, so each visitor plans on updated deficits."""
        flow = VisitorFlowSystem(resort=two_trail_resort)
        traffic = two_trail_resort.traffic
        stats = DayStats()
        seen = []
        for skier_id in range(1, 11):
            seen.append(tuple(traffic.get_trail_deficit(trail_id=t) for t in (2, 3)))
            flow.simulate_visitor(skier=flow.engine.spawn_skier(skier_id=skier_id), stats=stats)

        assert len(set(seen)) > 1
        occupancy = sum(traffic.get_trail_info(trail_id=t).occupancy for t in (2, 3))
        assert occupancy == stats.total_runs > 0
        assert sum(traffic.get_trail_deficit(trail_id=t) for t in (2, 3)) == pytest.approx(0.0, abs=1e-9)

        flow.release_day_usage()
        _assert_traffic_idle(two_trail_resort)
        info = traffic.get_trail_info(trail_id=2)
        assert info.deficit == pytest.approx(info.target_share)

    def test_visitor_finishes_at_base(self, loop_resort: Resort) -> None:
        flow = VisitorFlowSystem(resort=loop_resort)
        skier = flow.engine.spawn_skier(skier_id=1)
        flow.simulate_visitor(skier=skier, stats=DayStats())
        assert skier.current_state == SkierState.AT_BASE
        assert skier.runs_completed >= 1


# =============================================================================
# REAL-TIME
# =============================================================================


class TestRealtimeSimulation:
    """Tick-driven stepping."""

    def test_spawn_without_base(self, empty_resort: Resort) -> None:
        sim = RealtimeSimulation(resort=empty_resort)
        assert sim.spawn_skiers(count=5) == []
        assert sim.active_skiers == []

    def test_non_positive_tick_is_noop(self, loop_resort: Resort) -> None:
        sim = RealtimeSimulation(resort=loop_resort)
        sim.spawn_skiers(count=2)
        assert sim.tick(delta_minutes=0.0) == []
        assert sim.elapsed_minutes == 0.0

    def test_everyone_departs_eventually(self, loop_resort: Resort) -> None:
        sim = RealtimeSimulation(resort=loop_resort)
        spawned = sim.spawn_skiers(count=8)
        departed = []
        for _ in range(300):
            departed.extend(sim.tick(delta_minutes=1.0))

        assert {s.id for s in departed} == {s.id for s in spawned}
        assert sim.active_skiers == []
        assert sim.stats.total_visitors == 8
        assert sim.stats.served_visitors == 8
        assert all(s.current_state == SkierState.DEPARTED for s in departed)
        _assert_traffic_idle(loop_resort)

    def test_counters_track_skiers_on_mountain(self, loop_resort: Resort) -> None:
        sim = RealtimeSimulation(resort=loop_resort)
        sim.spawn_skiers(count=20)
        for _ in range(6):
            sim.tick(delta_minutes=0.5)
            on_lifts_or_trails = sum(
                1 for s in sim.active_skiers if s.current_state in (SkierState.RIDING_LIFT, SkierState.SKIING_TRAIL)
            )
            assert loop_resort.traffic.total_skiers_on_mountain() == on_lifts_or_trails

    def test_hungry_skier_visits_lodge(self, loop_resort: Resort) -> None:
        lodge = loop_resort.add_lodge(entrance=Position(20.0, 0.0, 10.0))
        sim = RealtimeSimulation(resort=loop_resort)
        (skier,) = sim.spawn_skiers(count=1)
        skier.needs.hunger = 0.95

        visited = False
        for _ in range(40):
            sim.tick(delta_minutes=0.5)
            if skier.current_state == SkierState.AT_AMENITY:
                visited = True
                assert lodge.occupancy == 1
                break
        assert visited

        for _ in range(50):
            sim.tick(delta_minutes=0.5)
        assert skier.needs.hunger < 0.7
        assert lodge.occupancy == 0

    def test_end_day_resets(self, loop_resort: Resort) -> None:
        sim = RealtimeSimulation(resort=loop_resort)
        sim.spawn_skiers(count=10)
        for _ in range(3):
            sim.tick(delta_minutes=1.0)

        state = SimulationState()
        stats = sim.end_day(state=state)
        assert stats.total_visitors == 10
        assert sim.active_skiers == []
        assert sim.stats.total_visitors == 0 and sim.elapsed_minutes == 0.0
        assert state.visitor_multiplier == sim.satisfaction_system.satisfaction
        _assert_traffic_idle(loop_resort)
        assert set(loop_resort.traffic.get_all_trail_traffic()) == {2}
