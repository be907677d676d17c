"""State machine for one skier in real-time stepping.

Uses python-statemachine with the Skier dataclass as model; the machine writes
the active SkierState into skier.current_state.

States:
    AT_BASE: Arrived at (or returned to) the base area, deciding
    WALKING_TO_LIFT: Walking to the bottom station of the next lift
    IN_QUEUE: Waiting at the lift (wait-time hook, zero by default)
    RIDING_LIFT: On the lift
    SKIING_TRAIL: On a trail
    AT_AMENITY: Inside a lodge
    DEPARTED: Left the resort (final)

Transitions:
    AT_BASE | SKIING_TRAIL | AT_AMENITY -> WALKING_TO_LIFT: head_to_lift(lift_id)
    WALKING_TO_LIFT -> IN_QUEUE: join_queue
    IN_QUEUE -> RIDING_LIFT: board_lift
    RIDING_LIFT | SKIING_TRAIL | AT_AMENITY -> SKIING_TRAIL: start_trail(trail_id)
    SKIING_TRAIL -> AT_AMENITY: visit_amenity
    RIDING_LIFT | SKIING_TRAIL | AT_AMENITY -> AT_BASE: return_to_base
    AT_BASE -> DEPARTED: depart

Traffic events fire from transition hooks, in the order skiers are stepped:
    before head_to_lift     -> lift intended
    enter RIDING_LIFT       -> lift entered
    exit RIDING_LIFT        -> lift exited
    before start_trail      -> trail intended
    enter SKIING_TRAIL      -> trail entered
    exit SKIING_TRAIL       -> trail completed
A skier who has announced a lift always reaches it (no return_to_base while
walking or queueing), so every intent is eventually converted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from skiresort_flow.model.enums import SkierState
from skiresort_flow.model.skier import Skier

if TYPE_CHECKING:
    from skiresort_flow.core.traffic_state import ResortTrafficState

logger = logging.getLogger(__name__)


class SkierTransitionLogger:
    """Listener that traces every skier transition at debug level.

    Usage:
        sm = SkierStateMachine(skier=skier, tracker=resort.traffic)
        sm.add_listener(SkierTransitionLogger(skier_id=skier.id))
    """

    def __init__(self, skier_id: int) -> None:
        self.skier_id = skier_id

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.debug(f"[SKIER {self.skier_id}] {source.name} --({event})--> {target.name}")


class SkierStateMachine(StateMachine):
    """Per-skier state machine firing traffic tracker events.

    See module docstring for the transition table and event mapping.
    """

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    at_base = State("AtBase", value=SkierState.AT_BASE, initial=True)
    walking_to_lift = State("WalkingToLift", value=SkierState.WALKING_TO_LIFT)
    in_queue = State("InQueue", value=SkierState.IN_QUEUE)
    riding_lift = State("RidingLift", value=SkierState.RIDING_LIFT)
    skiing_trail = State("SkiingTrail", value=SkierState.SKIING_TRAIL)
    at_amenity = State("AtAmenity", value=SkierState.AT_AMENITY)
    departed = State("Departed", value=SkierState.DEPARTED, final=True)

    # ==========================================================================
    # Transitions
    # ==========================================================================

    head_to_lift = at_base.to(walking_to_lift) | skiing_trail.to(walking_to_lift) | at_amenity.to(walking_to_lift)
    join_queue = walking_to_lift.to(in_queue)
    board_lift = in_queue.to(riding_lift)
    start_trail = riding_lift.to(skiing_trail) | skiing_trail.to(skiing_trail) | at_amenity.to(skiing_trail)
    visit_amenity = skiing_trail.to(at_amenity)
    return_to_base = riding_lift.to(at_base) | skiing_trail.to(at_base) | at_amenity.to(at_base)
    depart = at_base.to(departed)

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, skier: Skier, tracker: Optional[ResortTrafficState] = None) -> None:
        """Initialize state machine with the skier as model.

        Args:
            skier: Model; its current_state is used as start state
            tracker: Traffic tracker notified on transitions (None = no tracking)
        """
        self.tracker = tracker
        super().__init__(model=skier, state_field="current_state")

    @property
    def skier(self) -> Skier:
        return self.model

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_at_base(self) -> bool:
        return self.at_base.is_active

    @property
    def is_departed(self) -> bool:
        return self.departed.is_active

    # ==========================================================================
    # Transition Actions
    # ==========================================================================

    def before_head_to_lift(self, lift_id: int) -> None:
        """Announce the lift before walking starts."""
        if self.tracker is not None:
            self.tracker.on_lift_intended(lift_id=lift_id)

    def on_head_to_lift(self, lift_id: int) -> None:
        self.skier.current_lift_id = lift_id

    def before_start_trail(self, trail_id: int) -> None:
        if self.tracker is not None:
            self.tracker.on_trail_intended(trail_id=trail_id)

    def on_start_trail(self, trail_id: int) -> None:
        # Runs after leaving the previous trail, so completion uses the old id
        self.skier.current_trail_id = trail_id

    # ==========================================================================
    # Entry/Exit Hooks
    # ==========================================================================

    def on_enter_riding_lift(self) -> None:
        if self.tracker is not None and self.skier.current_lift_id is not None:
            self.tracker.on_lift_entered(lift_id=self.skier.current_lift_id)

    def on_exit_riding_lift(self) -> None:
        if self.tracker is not None and self.skier.current_lift_id is not None:
            self.tracker.on_lift_exited(lift_id=self.skier.current_lift_id)

    def on_enter_skiing_trail(self) -> None:
        if self.tracker is not None and self.skier.current_trail_id is not None:
            self.tracker.on_trail_entered(trail_id=self.skier.current_trail_id)

    def on_exit_skiing_trail(self) -> None:
        if self.tracker is not None and self.skier.current_trail_id is not None:
            self.tracker.on_trail_completed(trail_id=self.skier.current_trail_id)

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    def get_state_name(self) -> str:
        return self.current_state.name

    def get_available_actions(self) -> list[str]:
        return [t.event for t in self.current_state.transitions]

    def __repr__(self) -> str:
        return f"SkierStateMachine(skier={self.skier.id}, state={self.get_state_name()})"

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition hooks

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed for skier {self.skier.id} in {self.get_state_name()}")
            return False

    @staticmethod
    def create(
        skier: Skier, tracker: Optional[ResortTrafficState] = None, add_logger: bool = True
    ) -> "SkierStateMachine":
        """Factory method creating the machine with an optional transition logger."""
        sm = SkierStateMachine(skier=skier, tracker=tracker)
        if add_logger:
            sm.add_listener(SkierTransitionLogger(skier_id=skier.id))
        return sm
