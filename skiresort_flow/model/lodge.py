"""Lodge - Amenity building where skiers eat, use the bathroom and rest.

Lodges register a single BUILDING_ENTRANCE snap point. Each visit charges
the lodge's prices; the price-to-baseline ratio of every service produces a
small satisfaction bonus (cheap) or penalty (expensive).
"""

import logging
from dataclasses import dataclass, field

from skiresort_flow.constants import LodgeConfig
from skiresort_flow.model.enums import SnapPointType
from skiresort_flow.model.position import Position
from skiresort_flow.model.snap_point import SnapPoint

logger = logging.getLogger(__name__)


@dataclass
class LodgePricing:
    """Prices charged per service.

    Attributes:
        bathroom_price: Price of a bathroom visit
        food_price: Price of a meal
        rest_price: Price of resting (usually free)
    """

    bathroom_price: float = LodgeConfig.BASE_BATHROOM_PRICE
    food_price: float = LodgeConfig.BASE_FOOD_PRICE
    rest_price: float = LodgeConfig.BASE_REST_PRICE

    def price_ratios(self) -> dict[str, float]:
        """Price-to-baseline ratio per service with a non-zero baseline."""
        ratios: dict[str, float] = {}
        for service, price, baseline in (
            ("bathroom", self.bathroom_price, LodgeConfig.BASE_BATHROOM_PRICE),
            ("food", self.food_price, LodgeConfig.BASE_FOOD_PRICE),
            ("rest", self.rest_price, LodgeConfig.BASE_REST_PRICE),
        ):
            if baseline > 0:
                ratios[service] = price / baseline
        return ratios

    def calculate_price_impact(self) -> float:
        """Satisfaction impact of one visit at these prices.

        Per service: ratio <= 1 gives a bonus of min(MAX_CHEAP_BONUS, (1 - ratio) * CHEAP_BONUS_SCALE),
        ratio > 1 gives -(ratio - 1) * EXPENSIVE_PENALTY_SCALE. The sum is floored at MAX_VISIT_PENALTY.

        Returns:
            Signed impact, negative when overpriced.
        """
        impact = 0.0
        for ratio in self.price_ratios().values():
            if ratio <= 1.0:
                impact += min(LodgeConfig.MAX_CHEAP_BONUS, (1.0 - ratio) * LodgeConfig.CHEAP_BONUS_SCALE)
            else:
                impact -= (ratio - 1.0) * LodgeConfig.EXPENSIVE_PENALTY_SCALE
        return max(LodgeConfig.MAX_VISIT_PENALTY, impact)


@dataclass
class Lodge:
    """An amenity building.

    Attributes:
        id: Unique entity identifier (shared id space with lifts and trails)
        name: Display name
        entrance: Entrance position
        pricing: Service prices
        capacity: Maximum simultaneous guests
        occupancy: Current guests
    """

    id: int
    name: str
    entrance: Position
    pricing: LodgePricing = field(default_factory=LodgePricing)
    capacity: int = LodgeConfig.DEFAULT_CAPACITY
    occupancy: int = 0

    @property
    def is_full(self) -> bool:
        return self.occupancy >= self.capacity

    def snap_points(self) -> list[SnapPoint]:
        return [
            SnapPoint(
                point_type=SnapPointType.BUILDING_ENTRANCE,
                owner_id=self.id,
                position=self.entrance,
                name=f"{self.name} (entrance)",
            )
        ]

    def check_in(self) -> bool:
        """Admit a guest. Returns False when the lodge is full."""
        if self.is_full:
            logger.debug(f"Lodge {self.id} full ({self.occupancy}/{self.capacity})")
            return False
        self.occupancy += 1
        return True

    def check_out(self) -> None:
        self.occupancy = max(0, self.occupancy - 1)
