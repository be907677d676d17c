"""Simulate a few days on the demo resort and print traffic and visitor statistics.

Developer utility: runs the batch day simulation for several days (visitor
numbers follow the satisfaction multiplier), then one real-time day.

Run: python scripts/simulate_day.py
"""

import logging

from skiresort_flow.config import FlowConfig
from skiresort_flow.demo import build_demo_resort
from skiresort_flow.model import SimulationState
from skiresort_flow.simulation import RealtimeSimulation, VisitorFlowSystem

BASE_VISITORS = 150
BATCH_DAYS = 3
REALTIME_DAY_MINUTES = 8 * 60
TICK_MINUTES = 1.0


def simulate() -> None:
    """Run batch days followed by one real-time day."""
    resort = build_demo_resort(config=FlowConfig(seed=7))
    print(f"Resort: {resort.get_stats()}")

    state = SimulationState(visitors_today=BASE_VISITORS)
    flow = VisitorFlowSystem(resort=resort)
    for _ in range(BATCH_DAYS):
        stats = flow.simulate_day(state=state)
        print(f"Day {state.day}: {stats.summary()} -> multiplier {state.visitor_multiplier:.2f}")
        state.advance_day(base_visitors=BASE_VISITORS)

    realtime = RealtimeSimulation(resort=resort, satisfaction_system=flow.satisfaction_system)
    realtime.spawn_skiers(count=state.visitors_today)
    minutes = 0.0
    while minutes < REALTIME_DAY_MINUTES and realtime.active_skiers:
        realtime.tick(delta_minutes=TICK_MINUTES)
        minutes += TICK_MINUTES
        if int(minutes) % 60 == 0:
            report = resort.get_traffic_report()
            print(f"{minutes:.0f} min: {len(realtime.active_skiers)} active, {report['skiers_on_mountain']} on lifts/trails")

    stats = realtime.end_day(state=state)
    print(f"Real-time day {state.day}: {stats.summary()} -> multiplier {state.visitor_multiplier:.2f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    simulate()
