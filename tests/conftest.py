"""Shared pytest fixtures for skiresort_flow tests.

Provides small hand-built resorts with explicit geometry.

COORDINATE SYSTEM:
    World units are meters, y points up. Every fixture places stations and
    trail ends well inside the 25 unit snap radius (or clearly outside it)
    so edge creation never depends on floating point boundaries.
"""

from typing import Callable

import pytest

from skiresort_flow.config import FlowConfig
from skiresort_flow.model.enums import SkillLevel, TrailDifficulty
from skiresort_flow.model.needs import SkierNeeds
from skiresort_flow.model.position import Position
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.decision_engine import SkierDecisionEngine
from skiresort_flow.simulation.resort import Resort

# =============================================================================
# CONFIG
# =============================================================================


@pytest.fixture
def config() -> FlowConfig:
    """Seeded config so random rolls are reproducible."""
    return FlowConfig(seed=1)


@pytest.fixture
def empty_resort(config: FlowConfig) -> Resort:
    return Resort(config=config)


# =============================================================================
# RESORTS
# =============================================================================


@pytest.fixture
def loop_resort(config: FlowConfig) -> Resort:
    """Base -> one chairlift -> one green trail back to the lift bottom.

    Geometry:
        base (0, 0, 0), lift bottom 10 units east, lift top 400 up the hill
        trail start 5 units from the top, trail end ~5.8 units from the bottom
    """
    resort = Resort(config=config)
    resort.add_base(position=Position(x=0.0, y=0.0, z=0.0), rebuild=False)
    resort.add_lift(
        bottom=Position(x=10.0, y=0.0, z=0.0),
        top=Position(x=10.0, y=300.0, z=400.0),
        name="Loop Lift",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(x=15.0, y=300.0, z=400.0), Position(x=60.0, y=150.0, z=200.0), Position(x=13.0, y=0.0, z=5.0)],
        difficulty=TrailDifficulty.GREEN,
        name="Loop Green",
        rebuild=False,
    )
    resort.rebuild()
    return resort


@pytest.fixture
def two_trail_resort(config: FlowConfig) -> Resort:
    """One lift serving a green and a double black trail, both back to the bottom.

    Entity ids: lift 1, green trail 2, double black trail 3.
    """
    resort = Resort(config=config)
    resort.add_base(position=Position(x=0.0, y=0.0, z=0.0), rebuild=False)
    resort.add_lift(
        bottom=Position(x=10.0, y=0.0, z=0.0),
        top=Position(x=10.0, y=300.0, z=400.0),
        name="Twin Lift",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(x=15.0, y=300.0, z=400.0), Position(x=13.0, y=0.0, z=5.0)],
        difficulty=TrailDifficulty.GREEN,
        name="Easy Street",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(x=5.0, y=300.0, z=405.0), Position(x=7.0, y=0.0, z=5.0)],
        difficulty=TrailDifficulty.DOUBLE_BLACK,
        name="Widowmaker",
        rebuild=False,
    )
    resort.rebuild()
    return resort


# =============================================================================
# SKIERS
# =============================================================================


def make_skier(skill: SkillLevel, skier_id: int = 1, desired_runs: int = 5) -> Skier:
    """Fresh skier at the base with default needs."""
    return Skier(id=skier_id, skill_level=skill, desired_runs=desired_runs, needs=SkierNeeds())


@pytest.fixture
def beginner() -> Skier:
    return make_skier(skill=SkillLevel.BEGINNER)


@pytest.fixture
def intermediate() -> Skier:
    return make_skier(skill=SkillLevel.INTERMEDIATE)


@pytest.fixture
def loop_engine(loop_resort: Resort) -> SkierDecisionEngine:
    return SkierDecisionEngine(resort=loop_resort)


@pytest.fixture
def skier_factory() -> Callable[..., Skier]:
    """Factory building skiers of any skill (tests call it with skill=...)."""
    return make_skier
