"""Agents and stepping on top of the core classes.

- Resort: Infrastructure manager owning registry, graph, traffic and distribution
- SkierDecisionEngine: Goal selection and skill-aware routing per skier
- SkierStateMachine: Per-skier python-statemachine firing traffic events
- VisitorFlowSystem: Sequential batch simulation of a day
- RealtimeSimulation: Tick-driven simulation of a day
- SatisfactionSystem: Resort satisfaction and visitor multiplier
"""

from skiresort_flow.simulation.amenities import complete_lodge_visit, try_enter_lodge
from skiresort_flow.simulation.day_simulation import DayStats, VisitorFlowSystem
from skiresort_flow.simulation.decision_engine import SkierDecisionEngine
from skiresort_flow.simulation.realtime import ActiveSkier, RealtimeSimulation
from skiresort_flow.simulation.resort import Resort
from skiresort_flow.simulation.satisfaction_system import SatisfactionSystem
from skiresort_flow.simulation.state_machine import SkierStateMachine, SkierTransitionLogger

__all__ = [
    "Resort",
    "SkierDecisionEngine",
    "SkierStateMachine",
    "SkierTransitionLogger",
    "DayStats",
    "VisitorFlowSystem",
    "ActiveSkier",
    "RealtimeSimulation",
    "SatisfactionSystem",
    "try_enter_lodge",
    "complete_lodge_visit",
]
