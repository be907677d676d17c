"""Lodge visits shared by batch and real-time stepping.

After a run, a skier with urgent hunger or bladder looks for a lodge near
the trail end. A free lodge admits the skier; otherwise the failed attempt
is recorded and later penalized by the satisfaction factors.
"""

import logging
from typing import Optional

from skiresort_flow.model.lodge import Lodge
from skiresort_flow.model.position import Position
from skiresort_flow.model.skier import Skier
from skiresort_flow.simulation.resort import Resort

logger = logging.getLogger(__name__)


def try_enter_lodge(resort: Resort, skier: Skier, position: Position) -> Optional[Lodge]:
    """Check the skier into a nearby lodge if hunger or bladder is urgent.

    Args:
        resort: Resort owning the lodges
        skier: Skier looking for amenities
        position: Where the skier currently is (usually a trail end)

    Returns:
        The lodge the skier entered, or None (no need, or no free lodge nearby).
    """
    if not skier.needs.has_lodge_need():
        return None

    lodge = resort.find_lodge_near(position=position, max_distance=resort.config.motion.lodge_search_radius)
    if lodge is None or not lodge.check_in():
        skier.needs.record_unfulfilled_need()
        logger.debug(f"Skier {skier.id} found no free lodge near {position!r}")
        return None

    skier.needs.add_walking_distance(distance=position.distance_to(other=lodge.entrance))
    return lodge


def complete_lodge_visit(skier: Skier, lodge: Lodge, rest_minutes: float) -> None:
    """Fulfil needs, charge prices and check the skier out."""
    needs = skier.needs
    if needs.hunger >= needs.hunger_threshold:
        needs.eat()
    if needs.bladder >= needs.bladder_threshold:
        needs.use_bathroom()
    needs.rest(minutes=rest_minutes)
    needs.add_price_penalty(penalty=lodge.pricing.calculate_price_impact())
    lodge.check_out()
