"""Batch day simulation.

Visitors are generated up front and processed one at a time: each runs its
whole decide/route/ride/ski loop before the next visitor starts. Rides and
runs fire the intended and entered tracker events but their exits are held
until the day ends, so occupancy counts each entity's usage so far today and
a later visitor's deficits reflect where earlier visitors went.

Results are collected in DayStats (served/unserved visitors by skill, runs by
difficulty) and fed to the SatisfactionSystem, which writes the visitor
multiplier back to the economy state.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from skiresort_flow.model.enums import PathStepType, SkierState, SkillLevel, TrailDifficulty
from skiresort_flow.model.goal import SkierGoal
from skiresort_flow.model.position import Position
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.amenities import complete_lodge_visit, try_enter_lodge
from skiresort_flow.simulation.decision_engine import SkierDecisionEngine
from skiresort_flow.simulation.resort import Resort
from skiresort_flow.simulation.satisfaction_system import SatisfactionSystem

logger = logging.getLogger(__name__)


@dataclass
class DayStats:
    """Aggregate statistics of one simulated day.

    Attributes:
        total_visitors: Visitors that arrived
        served_visitors: Visitors that completed at least one run
        unserved_visitors: Visitors that left without a run
        served_by_skill: Served visitors per skill level
        unserved_by_skill: Unserved visitors per skill level
        runs_by_difficulty: Completed runs per trail difficulty
        satisfaction_sum: Sum of departing visitors' satisfaction
    """

    total_visitors: int = 0
    served_visitors: int = 0
    unserved_visitors: int = 0
    served_by_skill: dict[SkillLevel, int] = field(default_factory=lambda: {s: 0 for s in SkillLevel})
    unserved_by_skill: dict[SkillLevel, int] = field(default_factory=lambda: {s: 0 for s in SkillLevel})
    runs_by_difficulty: dict[TrailDifficulty, int] = field(default_factory=lambda: {d: 0 for d in TrailDifficulty})
    satisfaction_sum: float = 0.0

    def record_departure(self, skier: Skier) -> None:
        self.total_visitors += 1
        if skier.was_served:
            self.served_visitors += 1
            self.served_by_skill[skier.skill_level] += 1
        else:
            self.unserved_visitors += 1
            self.unserved_by_skill[skier.skill_level] += 1
        self.satisfaction_sum += skier.get_satisfaction()

    def record_run(self, difficulty: TrailDifficulty) -> None:
        self.runs_by_difficulty[difficulty] += 1

    @property
    def total_runs(self) -> int:
        return sum(self.runs_by_difficulty.values())

    @property
    def unserved_rate(self) -> float:
        if self.total_visitors == 0:
            return 0.0
        return self.unserved_visitors / self.total_visitors

    @property
    def average_satisfaction(self) -> float:
        if self.total_visitors == 0:
            return 0.0
        return self.satisfaction_sum / self.total_visitors

    def summary(self) -> str:
        runs = ", ".join(f"{d.value}={n}" for d, n in self.runs_by_difficulty.items())
        return (
            f"{self.total_visitors} visitors ({self.served_visitors} served, {self.unserved_visitors} unserved), "
            f"{self.total_runs} runs [{runs}], avg satisfaction {self.average_satisfaction:.2f}"
        )


class VisitorFlowSystem:
    """Sequential batch simulation of a whole day.

    Example:
        flow = VisitorFlowSystem(resort=resort)
        stats = flow.simulate_day(state=SimulationState(visitors_today=200))
    """

    def __init__(
        self,
        resort: Resort,
        engine: Optional[SkierDecisionEngine] = None,
        satisfaction_system: Optional[SatisfactionSystem] = None,
    ) -> None:
        self.resort = resort
        self.engine = engine or SkierDecisionEngine(resort=resort)
        self.satisfaction_system = satisfaction_system or SatisfactionSystem(
            settings=resort.config.resort_satisfaction
        )
        self.motion = resort.config.motion

    def simulate_day(self, state: SimulationState) -> DayStats:
        """Simulate state.visitors_today visitors and update the economy state.

        Args:
            state: Economy state (visitor target in, multiplier out)

        Returns:
            Statistics of the day.
        """
        stats = DayStats()
        visitors = [self.engine.spawn_skier(skier_id=i + 1) for i in range(max(0, state.visitors_today))]
        if self.resort.get_base_spawn() is None:
            logger.warning("No base spawn registered: every visitor leaves unserved")

        for skier in visitors:
            self.simulate_visitor(skier=skier, stats=stats)
            stats.record_departure(skier=skier)

        self.release_day_usage()
        self.satisfaction_system.update_from_active_skiers(skiers=visitors)
        self.satisfaction_system.end_of_day(stats=stats)
        self.satisfaction_system.apply_to(state=state)
        logger.info(f"Day {state.day}: {stats.summary()}")
        return stats

    def simulate_visitor(self, skier: Skier, stats: DayStats) -> None:
        """Run one visitor's full day until it stops wanting to ski."""
        visitor_settings = self.resort.config.visitors
        max_plans = visitor_settings.runs_per_visitor * visitor_settings.plan_attempts_per_run
        base = self.resort.get_base_spawn()
        position = base.position if base is not None else None

        for _ in range(max_plans):
            goal = self.engine.plan_new_goal(skier=skier)
            if goal.is_return_to_base or goal.is_complete or position is None:
                break
            position = self._execute_plan(skier=skier, goal=goal, origin=position, stats=stats)

        skier.current_state = SkierState.AT_BASE

    def release_day_usage(self) -> None:
        """Drop the day's accumulated usage so the next day starts from capacity shares."""
        self.resort.traffic.clear()
        self.resort.rebuild()

    def _execute_plan(self, skier: Skier, goal: SkierGoal, origin: Position, stats: DayStats) -> Position:
        """Walk the plan step by step. Returns the final position.

        Intended and entered events are fired per ride and run; the matching
        exits are left to release_day_usage at the end of the day.
        """
        traffic = self.resort.traffic
        motion = self.motion
        position = origin
        step = goal.get_current_step()

        while step is not None:
            if step.step_type == PathStepType.RIDE_LIFT:
                lift = self.resort.get_lift(step.entity_id)
                if lift is None:
                    break
                walk = position.distance_to(other=lift.bottom)
                skier.needs.add_walking_distance(distance=walk)
                skier.needs.update_needs(minutes=walk / motion.walk_speed)

                traffic.on_lift_intended(lift_id=lift.id)
                self.engine.on_lift_wait(skier=skier, wait_minutes=motion.queue_wait_min)
                traffic.on_lift_entered(lift_id=lift.id)
                ride_minutes = max(motion.min_activity_min, lift.length_m / motion.lift_speed)
                skier.needs.update_needs(minutes=ride_minutes)
                skier.needs.recover(minutes=ride_minutes)

                skier.current_state = SkierState.RIDING_LIFT
                skier.current_lift_id = lift.id
                position = lift.top
            else:
                trail = self.resort.get_trail(step.entity_id)
                if trail is None:
                    break
                skier.needs.add_walking_distance(distance=position.distance_to(other=trail.start))
                traffic.on_trail_intended(trail_id=trail.id)
                traffic.on_trail_entered(trail_id=trail.id)
                skier.needs.update_needs(minutes=max(motion.min_activity_min, trail.length_m / motion.ski_speed))

                skier.current_state = SkierState.SKIING_TRAIL
                skier.current_trail_id = trail.id
                self.engine.on_run_completed(skier=skier, trail=trail)
                stats.record_run(difficulty=trail.difficulty)
                position = trail.end

                lodge = try_enter_lodge(resort=self.resort, skier=skier, position=position)
                if lodge is not None:
                    skier.needs.update_needs(minutes=motion.amenity_visit_min)
                    complete_lodge_visit(skier=skier, lodge=lodge, rest_minutes=motion.amenity_visit_min)

            step = goal.advance_to_next_step()

        return position
