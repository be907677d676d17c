"""Small two-lift demo resort used by scripts and end-to-end tests.

Layout (y is altitude):
    Base Area -> Valley Express (lift) -> Meadow (green) / Panorama (blue) back
    to the valley, or Traverse (blue) over to the Summit Chair, which serves
    Couloir (black) and The Chute (double black) laps.
    A lodge sits next to the valley station.
"""

from typing import Optional

from skiresort_flow.config import FlowConfig
from skiresort_flow.model.enums import TrailDifficulty
from skiresort_flow.model.position import Position
from skiresort_flow.simulation.resort import Resort


def build_demo_resort(config: Optional[FlowConfig] = None) -> Resort:
    """Build the demo resort with a single graph rebuild at the end."""
    resort = Resort(config=config or FlowConfig(seed=42))

    resort.add_base(position=Position(0.0, 1000.0, 0.0), name="Base Area", rebuild=False)

    resort.add_lift(
        bottom=Position(20.0, 1000.0, 0.0),
        top=Position(20.0, 1400.0, 800.0),
        lift_type="chairlift",
        name="Valley Express",
        rebuild=False,
    )
    resort.add_lift(
        bottom=Position(300.0, 1200.0, 400.0),
        top=Position(300.0, 1800.0, 1200.0),
        lift_type="gondola",
        name="Summit Chair",
        rebuild=False,
    )

    resort.add_trail(
        points=[Position(30.0, 1395.0, 800.0), Position(60.0, 1200.0, 400.0), Position(35.0, 1005.0, 10.0)],
        difficulty=TrailDifficulty.GREEN,
        name="Meadow",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(0.0, 1398.0, 810.0), Position(-40.0, 1150.0, 350.0), Position(10.0, 1003.0, 15.0)],
        difficulty=TrailDifficulty.BLUE,
        name="Panorama",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(25.0, 1395.0, 815.0), Position(160.0, 1300.0, 600.0), Position(290.0, 1205.0, 395.0)],
        difficulty=TrailDifficulty.BLUE,
        name="Traverse",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(310.0, 1795.0, 1200.0), Position(340.0, 1500.0, 800.0), Position(305.0, 1205.0, 410.0)],
        difficulty=TrailDifficulty.BLACK,
        name="Couloir",
        rebuild=False,
    )
    resort.add_trail(
        points=[Position(290.0, 1798.0, 1210.0), Position(260.0, 1500.0, 800.0), Position(295.0, 1203.0, 412.0)],
        difficulty=TrailDifficulty.DOUBLE_BLACK,
        name="The Chute",
        rebuild=False,
    )

    resort.add_lodge(entrance=Position(30.0, 1000.0, 20.0), name="Valley Lodge", rebuild=False)

    resort.rebuild()
    return resort
