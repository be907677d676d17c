"""Shared pytest fixtures for skiresort_flow workflow tests.

Workflow tests run whole days on the demo resort from skiresort_flow.demo.
Keep this file minimal: resort layouts live in the demo module.

DEMO ENTITY IDS:
    Lifts: 1 Valley Express, 2 Summit Chair
    Trails: 3 Meadow (green), 4 Panorama (blue), 5 Traverse (blue),
            6 Couloir (black), 7 The Chute (double black)
    Lodge: 8 Valley Lodge
"""

import pytest

from skiresort_flow.config import FlowConfig
from skiresort_flow.demo import build_demo_resort
from skiresort_flow.simulation.resort import Resort


@pytest.fixture
def demo_resort() -> Resort:
    """Fresh seeded demo resort per test."""
    return build_demo_resort(config=FlowConfig(seed=42))
