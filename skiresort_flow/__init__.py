"""Ski Resort Flow - Simulate visitors skiing a resort's lifts and trails.

An agent-based flow simulation featuring:
- Snap-point traversal graph connecting lifts, trails and the base area
- Skill-aware destination choice and routing
- Self-balancing traffic via capacity deficits and recent-choice memory
- Pluggable weighted satisfaction factors
- Batch day simulation and real-time stepping with per-skier state machines

Modules:
    model: Data structures (Position, SnapPoint, Lift, Trail, Lodge, Skier, Goal)
    core: Foundation classes (registry, traversal graph, distribution, traffic)
    simulation: Resort manager, decision engine, day and real-time simulation

Example:
    from skiresort_flow.config import FlowConfig
    from skiresort_flow.simulation import Resort, VisitorFlowSystem
    from skiresort_flow.model import SimulationState
"""
