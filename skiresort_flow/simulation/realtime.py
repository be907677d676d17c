"""Real-time stepping of skiers through the resort.

Every active skier owns a SkierStateMachine and a countdown of minutes left in
its current activity. A tick advances needs, counts the activity down and,
when it hits zero, completes the activity and starts the next one, carrying
the leftover minutes over. Traffic tracker events fire from the state machine
hooks, so crowding and deficits reflect where skiers actually are.

Activity durations (MotionSettings):
    WALKING_TO_LIFT: distance to the lift bottom / walk speed
    IN_QUEUE: queue wait (zero by default)
    RIDING_LIFT: lift length / lift speed
    SKIING_TRAIL: trail length / ski speed
    AT_AMENITY: amenity visit minutes
"""

import logging
from dataclasses import dataclass
from typing import Optional

from skiresort_flow.model.enums import PathStepType, SkierState
from skiresort_flow.model.goal import PathStep
from skiresort_flow.model.position import Position
from skiresort_flow.model.simulation_state import SimulationState
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.amenities import complete_lodge_visit, try_enter_lodge
from skiresort_flow.simulation.day_simulation import DayStats
from skiresort_flow.simulation.decision_engine import SkierDecisionEngine
from skiresort_flow.simulation.resort import Resort
from skiresort_flow.simulation.satisfaction_system import SatisfactionSystem
from skiresort_flow.simulation.state_machine import SkierStateMachine

logger = logging.getLogger(__name__)


@dataclass
class ActiveSkier:
    """A skier on the mountain with its machine and activity countdown.

    Attributes:
        skier: The agent
        machine: State machine bound to the agent
        position: Where the current activity started or ends
        remaining_min: Minutes left in the current activity
        plans_made: Goals planned so far (bounded per visitor)
        lodge_id: Lodge the skier is inside (AT_AMENITY only)
    """

    skier: Skier
    machine: SkierStateMachine
    position: Position
    remaining_min: float = 0.0
    plans_made: int = 0
    lodge_id: Optional[int] = None


class RealtimeSimulation:
    """Tick-driven simulation of a resort day.

    Example:
        sim = RealtimeSimulation(resort=resort)
        sim.spawn_skiers(count=50)
        for _ in range(480):
            sim.tick(delta_minutes=1.0)
        stats = sim.end_day()
    """

    def __init__(
        self,
        resort: Resort,
        engine: Optional[SkierDecisionEngine] = None,
        satisfaction_system: Optional[SatisfactionSystem] = None,
        trace_transitions: bool = False,
    ) -> None:
        self.resort = resort
        self.engine = engine or SkierDecisionEngine(resort=resort)
        self.satisfaction_system = satisfaction_system or SatisfactionSystem(
            settings=resort.config.resort_satisfaction
        )
        self.motion = resort.config.motion
        self.trace_transitions = trace_transitions

        self.stats = DayStats()
        self.elapsed_minutes = 0.0
        self._active: list[ActiveSkier] = []
        self._next_skier_id = 1

    @property
    def active_skiers(self) -> list[Skier]:
        return [a.skier for a in self._active]

    # =========================================================================
    # Spawning
    # =========================================================================

    def spawn_skiers(self, count: int) -> list[Skier]:
        """Spawn skiers at the base area. Without a base nobody can arrive."""
        base = self.resort.get_base_spawn()
        if base is None:
            logger.warning(f"No base spawn registered: {count} skiers could not arrive")
            return []

        spawned = []
        for _ in range(count):
            skier = self.engine.spawn_skier(skier_id=self._next_skier_id)
            self._next_skier_id += 1
            machine = SkierStateMachine.create(
                skier=skier, tracker=self.resort.traffic, add_logger=self.trace_transitions
            )
            self._active.append(ActiveSkier(skier=skier, machine=machine, position=base.position))
            spawned.append(skier)
        return spawned

    # =========================================================================
    # Stepping
    # =========================================================================

    def tick(self, delta_minutes: float) -> list[Skier]:
        """Advance all active skiers by delta_minutes.

        Returns:
            Skiers that departed during this tick.
        """
        if delta_minutes <= 0:
            return []

        departed = []
        for active in self._active:
            self._advance_needs(active=active, minutes=delta_minutes)
            active.remaining_min -= delta_minutes

            completions = 0
            while active.remaining_min <= 0 and completions < self.motion.max_completions_per_tick:
                carry = -active.remaining_min
                self._complete_activity(active=active)
                completions += 1
                if active.machine.is_departed:
                    break
                active.remaining_min -= carry

            if active.machine.is_departed:
                self.stats.record_departure(skier=active.skier)
                departed.append(active.skier)

        self._active = [a for a in self._active if not a.machine.is_departed]
        self.satisfaction_system.update_from_active_skiers(skiers=self.active_skiers)
        self.elapsed_minutes += delta_minutes
        return departed

    def _advance_needs(self, active: ActiveSkier, minutes: float) -> None:
        needs = active.skier.needs
        needs.update_needs(minutes=minutes)
        state = active.skier.current_state
        if state == SkierState.RIDING_LIFT:
            needs.recover(minutes=minutes)
        elif state == SkierState.AT_AMENITY:
            needs.rest(minutes=minutes)

    def _complete_activity(self, active: ActiveSkier) -> None:
        state = active.skier.current_state
        if state == SkierState.AT_BASE:
            self._on_at_base(active=active)
        elif state == SkierState.WALKING_TO_LIFT:
            active.machine.join_queue()
            active.remaining_min = self.motion.queue_wait_min
        elif state == SkierState.IN_QUEUE:
            self._on_queue_done(active=active)
        elif state == SkierState.RIDING_LIFT:
            lift = self.resort.get_lift(active.skier.current_lift_id)
            if lift is not None:
                active.position = lift.top
            self._continue_plan(active=active)
        elif state == SkierState.SKIING_TRAIL:
            self._on_run_done(active=active)
        elif state == SkierState.AT_AMENITY:
            self._on_lodge_done(active=active)

    def _on_at_base(self, active: ActiveSkier) -> None:
        step = self._plan(active=active)
        if step is None:
            active.machine.depart()
            logger.debug(f"Skier {active.skier.id} departed after {active.skier.runs_completed} runs")
            return
        self._start_step(active=active, step=step)

    def _on_queue_done(self, active: ActiveSkier) -> None:
        skier = active.skier
        lift = self.resort.get_lift(skier.current_lift_id)
        self.engine.on_lift_wait(skier=skier, wait_minutes=self.motion.queue_wait_min)
        active.machine.board_lift()
        length = lift.length_m if lift is not None else 0.0
        active.remaining_min = max(self.motion.min_activity_min, length / self.motion.lift_speed)

    def _on_run_done(self, active: ActiveSkier) -> None:
        skier = active.skier
        trail = self.resort.get_trail(skier.current_trail_id)
        if trail is not None:
            self.engine.on_run_completed(skier=skier, trail=trail)
            self.stats.record_run(difficulty=trail.difficulty)
            active.position = trail.end

        lodge = try_enter_lodge(resort=self.resort, skier=skier, position=active.position)
        if lodge is not None:
            active.machine.visit_amenity()
            active.lodge_id = lodge.id
            active.remaining_min = self.motion.amenity_visit_min
            return
        self._continue_plan(active=active)

    def _on_lodge_done(self, active: ActiveSkier) -> None:
        lodge = self.resort.get_lodge(active.lodge_id)
        if lodge is not None:
            # Resting already happened tick by tick
            complete_lodge_visit(skier=active.skier, lodge=lodge, rest_minutes=0.0)
        active.lodge_id = None
        self._continue_plan(active=active)

    # =========================================================================
    # Plans
    # =========================================================================

    def _plan(self, active: ActiveSkier) -> Optional[PathStep]:
        """Plan a new goal; None when the skier should head home."""
        visitors = self.resort.config.visitors
        if active.plans_made >= visitors.runs_per_visitor * visitors.plan_attempts_per_run:
            return None
        active.plans_made += 1
        goal = self.engine.plan_new_goal(skier=active.skier)
        if goal.is_return_to_base or goal.is_complete:
            return None
        return goal.get_current_step()

    def _continue_plan(self, active: ActiveSkier) -> None:
        """Move to the next step of the goal, replanning when it ran out or went stale."""
        goal = active.skier.current_goal
        step = goal.advance_to_next_step() if goal is not None else None
        if step is None or not self._step_exists(step=step):
            step = self._plan(active=active)
        if step is None:
            self._return_to_base(active=active)
            return
        self._start_step(active=active, step=step)

    def _step_exists(self, step: PathStep) -> bool:
        if step.step_type == PathStepType.RIDE_LIFT:
            return self.resort.get_lift(step.entity_id) is not None
        return self.resort.get_trail(step.entity_id) is not None

    def _start_step(self, active: ActiveSkier, step: Optional[PathStep]) -> None:
        if step is None or not self._step_exists(step=step):
            self._return_to_base(active=active)
            return

        skier = active.skier
        if step.step_type == PathStepType.RIDE_LIFT:
            lift = self.resort.get_lift(step.entity_id)
            if not active.machine.try_transition("head_to_lift", lift_id=lift.id):
                self._return_to_base(active=active)
                return
            walk = active.position.distance_to(other=lift.bottom)
            skier.needs.add_walking_distance(distance=walk)
            active.position = lift.bottom
            active.remaining_min = walk / self.motion.walk_speed
        else:
            trail = self.resort.get_trail(step.entity_id)
            if not active.machine.try_transition("start_trail", trail_id=trail.id):
                self._return_to_base(active=active)
                return
            skier.needs.add_walking_distance(distance=active.position.distance_to(other=trail.start))
            active.position = trail.start
            active.remaining_min = max(self.motion.min_activity_min, trail.length_m / self.motion.ski_speed)

    def _return_to_base(self, active: ActiveSkier) -> None:
        """Send the skier home; from the base it departs on its next completion."""
        if active.skier.current_state == SkierState.AT_BASE:
            active.machine.depart()
            return
        active.machine.return_to_base()
        base = self.resort.get_base_spawn()
        if base is not None:
            active.position = base.position
        active.remaining_min = 0.0

    # =========================================================================
    # End of Day
    # =========================================================================

    def end_day(self, state: Optional[SimulationState] = None) -> DayStats:
        """Close the day: count everyone still on the mountain and reset traffic.

        Args:
            state: Economy state to receive satisfaction and visitor multiplier

        Returns:
            Statistics of the finished day (a fresh DayStats starts afterwards).
        """
        for active in self._active:
            lodge = self.resort.get_lodge(active.lodge_id)
            if lodge is not None:
                lodge.check_out()
            self.stats.record_departure(skier=active.skier)
        self.satisfaction_system.update_from_active_skiers(skiers=self.active_skiers)
        self._active = []

        self.resort.traffic.clear()
        self.resort.rebuild()

        stats = self.stats
        self.satisfaction_system.end_of_day(stats=stats)
        if state is not None:
            self.satisfaction_system.apply_to(state=state)
        logger.info(f"Real-time day ended after {self.elapsed_minutes:.0f} min: {stats.summary()}")

        self.stats = DayStats()
        self.elapsed_minutes = 0.0
        return stats
