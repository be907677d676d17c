"""Skier State Machine - transition truth table and traffic hooks.

Tests: SkierStateMachine, SkierTransitionLogger
Focus: Allowed/forbidden events per state, tracker events fired by hooks

Matrix Reference (from state_machine.py docstring):
    7 states x 7 events = 49 combinations, 13 valid
"""

import logging

import pytest
from statemachine.exceptions import TransitionNotAllowed

from skiresort_flow.core.traffic_state import ResortTrafficState
from skiresort_flow.model.enums import SkierState, SkillLevel
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.state_machine import SkierStateMachine

# =============================================================================
# TRUTH TABLE
# =============================================================================

VALID_TRANSITIONS: dict[str, dict[SkierState, SkierState]] = {
    "head_to_lift": {
        SkierState.AT_BASE: SkierState.WALKING_TO_LIFT,
        SkierState.SKIING_TRAIL: SkierState.WALKING_TO_LIFT,
        SkierState.AT_AMENITY: SkierState.WALKING_TO_LIFT,
    },
    "join_queue": {SkierState.WALKING_TO_LIFT: SkierState.IN_QUEUE},
    "board_lift": {SkierState.IN_QUEUE: SkierState.RIDING_LIFT},
    "start_trail": {
        SkierState.RIDING_LIFT: SkierState.SKIING_TRAIL,
        SkierState.SKIING_TRAIL: SkierState.SKIING_TRAIL,
        SkierState.AT_AMENITY: SkierState.SKIING_TRAIL,
    },
    "visit_amenity": {SkierState.SKIING_TRAIL: SkierState.AT_AMENITY},
    "return_to_base": {
        SkierState.RIDING_LIFT: SkierState.AT_BASE,
        SkierState.SKIING_TRAIL: SkierState.AT_BASE,
        SkierState.AT_AMENITY: SkierState.AT_BASE,
    },
    "depart": {SkierState.AT_BASE: SkierState.DEPARTED},
}

ALL_COMBINATIONS = [(event, state) for event in VALID_TRANSITIONS for state in SkierState]
VALID = [(e, s) for e, s in ALL_COMBINATIONS if s in VALID_TRANSITIONS[e]]
INVALID = [(e, s) for e, s in ALL_COMBINATIONS if s not in VALID_TRANSITIONS[e]]


def _skier_in(state: SkierState) -> Skier:
    skier = Skier(id=1, skill_level=SkillLevel.INTERMEDIATE, desired_runs=5)
    skier.current_state = state
    skier.current_lift_id = 1
    skier.current_trail_id = 2
    return skier


@pytest.fixture
def tracker() -> ResortTrafficState:
    traffic = ResortTrafficState()
    traffic.register_lift(lift_id=1, capacity=5)
    traffic.register_trail(trail_id=2, capacity=5)
    traffic.register_trail(trail_id=3, capacity=5)
    return traffic


class TestTransitionMatrix:
    """Every event from every state."""

    def test_matrix_size(self) -> None:
        assert len(ALL_COMBINATIONS) == 49
        assert len(VALID) == 13

    @pytest.mark.parametrize("event,state", VALID)
    def test_valid_transition(self, event: str, state: SkierState) -> None:
        skier = _skier_in(state)
        sm = SkierStateMachine.create(skier=skier, add_logger=False)
        sm.send(event, lift_id=1, trail_id=2)
        assert skier.current_state == VALID_TRANSITIONS[event][state]

    @pytest.mark.parametrize("event,state", INVALID)
    def test_invalid_transition(self, event: str, state: SkierState) -> None:
        skier = _skier_in(state)
        sm = SkierStateMachine.create(skier=skier, add_logger=False)
        with pytest.raises(TransitionNotAllowed):
            sm.send(event, lift_id=1, trail_id=2)
        assert skier.current_state == state

    def test_no_return_to_base_while_walking_or_queueing(self) -> None:
        """An announced lift is always reached."""
        for state in (SkierState.WALKING_TO_LIFT, SkierState.IN_QUEUE):
            sm = SkierStateMachine.create(skier=_skier_in(state), add_logger=False)
            assert "return_to_base" not in sm.get_available_actions()

    def test_try_transition_reports_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        sm = SkierStateMachine.create(skier=_skier_in(SkierState.AT_BASE), add_logger=False)
        with caplog.at_level(logging.WARNING):
            assert not sm.try_transition("board_lift")
        assert "not allowed" in caplog.text
        assert sm.is_at_base

    def test_depart_is_final(self) -> None:
        sm = SkierStateMachine.create(skier=_skier_in(SkierState.AT_BASE), add_logger=False)
        sm.depart()
        assert sm.is_departed
        assert sm.get_available_actions() == []


class TestTrafficHooks:
    """Tracker events fired from transition hooks."""

    def test_full_lift_ride(self, tracker: ResortTrafficState) -> None:
        """intended -> entered -> exited for the lift, then trail intended/entered."""
        skier = Skier(id=1, skill_level=SkillLevel.INTERMEDIATE, desired_runs=5)
        sm = SkierStateMachine.create(skier=skier, tracker=tracker, add_logger=False)

        sm.head_to_lift(lift_id=1)
        lift = tracker.get_lift_info(lift_id=1)
        assert skier.current_lift_id == 1
        assert (lift.pending_intent, lift.occupancy) == (1, 0)

        sm.join_queue()
        sm.board_lift()
        assert (lift.pending_intent, lift.occupancy) == (0, 1)

        sm.start_trail(trail_id=2)
        trail = tracker.get_trail_info(trail_id=2)
        assert lift.occupancy == 0
        assert (trail.pending_intent, trail.occupancy) == (0, 1)
        assert skier.current_trail_id == 2
        assert tracker.get_trail_recent_popularity(trail_id=2) == 1.0

    def test_trail_to_trail_completes_old_trail(self, tracker: ResortTrafficState) -> None:
        skier = _skier_in(SkierState.SKIING_TRAIL)
        tracker.on_trail_entered(trail_id=2)
        sm = SkierStateMachine.create(skier=skier, tracker=tracker, add_logger=False)

        sm.start_trail(trail_id=3)
        assert tracker.get_trail_info(trail_id=2).occupancy == 0
        assert tracker.get_trail_info(trail_id=3).occupancy == 1
        assert skier.current_trail_id == 3

    def test_lodge_visit_completes_trail(self, tracker: ResortTrafficState) -> None:
        skier = _skier_in(SkierState.SKIING_TRAIL)
        tracker.on_trail_entered(trail_id=2)
        sm = SkierStateMachine.create(skier=skier, tracker=tracker, add_logger=False)

        sm.visit_amenity()
        assert tracker.get_trail_info(trail_id=2).occupancy == 0
        sm.return_to_base()
        assert tracker.get_trail_info(trail_id=2).occupancy == 0
        assert skier.current_state == SkierState.AT_BASE

    def test_return_from_lift_exits_lift(self, tracker: ResortTrafficState) -> None:
        skier = _skier_in(SkierState.RIDING_LIFT)
        tracker.on_lift_entered(lift_id=1)
        sm = SkierStateMachine.create(skier=skier, tracker=tracker, add_logger=False)
        sm.return_to_base()
        assert tracker.get_lift_info(lift_id=1).occupancy == 0

    def test_without_tracker(self) -> None:
        sm = SkierStateMachine.create(skier=_skier_in(SkierState.AT_BASE), add_logger=False)
        sm.head_to_lift(lift_id=4)
        assert sm.skier.current_lift_id == 4


class TestTransitionLogger:
    def test_logs_every_transition(self, caplog: pytest.LogCaptureFixture) -> None:
        sm = SkierStateMachine.create(skier=_skier_in(SkierState.AT_BASE), add_logger=True)
        with caplog.at_level(logging.DEBUG, logger="skiresort_flow.simulation.state_machine"):
            sm.head_to_lift(lift_id=1)
            sm.join_queue()
        assert "[SKIER 1] AtBase --(" in caplog.text
        assert "--> InQueue" in caplog.text

    def test_repr_names_state(self) -> None:
        sm = SkierStateMachine.create(skier=_skier_in(SkierState.IN_QUEUE), add_logger=False)
        assert repr(sm) == "SkierStateMachine(skier=1, state=InQueue)"
