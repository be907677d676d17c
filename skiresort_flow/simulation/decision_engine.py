"""SkierDecisionEngine - Per-skier goal selection and skill-aware routing.

Goal selection (deterministic for a seeded random source):
1. Skier no longer wants to ski (runs met, fatigue >= 0.9, satisfaction <= 0.2)
   -> ReturnToBase goal with fixed priority.
2. Pick a destination among trails the skier's skill allows (desperate-only
   trails only when no allowed trail exists). No candidate or all weights zero
   -> no-path penalty, ReturnToBase.
3. Weighted roll (cumulative sum), up to 3 attempts each checked for
   reachability; otherwise a uniformly random candidate.
4. Route with skill-aware BFS. Failure -> half the no-path penalty and a
   search over all allowed trails in random order; still nothing -> ReturnToBase.
5. Convert the snap point path to steps: LiftBottom -> RideLift,
   TrailStart -> SkiTrail; LiftTop and TrailEnd are elided.

Destination weights combine the effective weight (with downstream look-ahead),
the preferred-difficulty boost, traffic terms from the deficit tracker (deficit
favours under-used trails, recent popularity damps herding, crowding damps
packed trails) and a novelty bonus for trails the skier has not skied yet.
Each skier's personality shifts those strengths a little.
"""

import logging
import random
from typing import Optional

from skiresort_flow.core.distribution import DOWNSTREAM_NOT_COMPUTED
from skiresort_flow.model.enums import PathStepType, SkierState, SnapPointType
from skiresort_flow.model.goal import PathStep, SkierGoal
from skiresort_flow.model.needs import SkierNeeds
from skiresort_flow.model.skier import Skier, SkierPersonality
from skiresort_flow.model.snap_point import SnapPoint
from skiresort_flow.model.trail import Trail
from skiresort_flow.simulation.resort import Resort

logger = logging.getLogger(__name__)


class SkierDecisionEngine:
    """Decision and routing engine for all skiers of a resort.

    Example:
        engine = SkierDecisionEngine(resort=resort)
        skier = engine.spawn_skier(skier_id=1)
        goal = engine.plan_new_goal(skier=skier)
    """

    def __init__(self, resort: Resort, rng: Optional[random.Random] = None) -> None:
        self.resort = resort
        self.config = resort.config
        self.rng = rng or resort.rng

    # =========================================================================
    # Spawning
    # =========================================================================

    def spawn_skier(self, skier_id: int) -> Skier:
        """Create a skier with rolled skill level, desired run count and personality."""
        distribution = self.resort.distribution
        skill = distribution.get_random_skill_level(rng=self.rng)
        magnitude = self.config.decision.personality_magnitude
        return Skier(
            id=skier_id,
            skill_level=skill,
            desired_runs=distribution.roll_desired_runs(skill=skill, rng=self.rng),
            needs=SkierNeeds.from_settings(settings=self.config.needs),
            exit_fatigue=self.config.decision.exit_fatigue,
            exit_satisfaction=self.config.decision.exit_satisfaction,
            personality=SkierPersonality.generate(skier_id=skier_id, magnitude=magnitude),
        )

    # =========================================================================
    # Goal Selection
    # =========================================================================

    def plan_new_goal(self, skier: Skier) -> SkierGoal:
        """Choose the skier's next objective and store it as current_goal."""
        goal = self._plan(skier=skier)
        skier.current_goal = goal
        return goal

    def _plan(self, skier: Skier) -> SkierGoal:
        if not skier.wants_to_keep_skiing():
            logger.debug(f"Skier {skier.id} done skiing ({skier.runs_completed}/{skier.desired_runs} runs)")
            return self._return_to_base()

        start = self.get_current_position(skier=skier)
        if start is None:
            logger.warning(f"Skier {skier.id} has no position (no base spawn registered)")
            self._apply_no_path_penalty(skier=skier, scale=1.0)
            return self._return_to_base()

        trail = self.choose_destination_trail(skier=skier, start=start)
        if trail is None:
            logger.debug(f"Skier {skier.id} ({skier.skill_level.value}) has no choosable trail")
            self._apply_no_path_penalty(skier=skier, scale=1.0)
            return self._return_to_base()

        steps = self.find_path_to_trail(skier=skier, trail=trail, start=start)
        if steps is None:
            self._apply_no_path_penalty(skier=skier, scale=0.5)
            found = self.find_any_reachable_path(skier=skier, start=start)
            if found is None:
                logger.debug(f"Skier {skier.id} cannot reach any trail from {start!r}")
                return self._return_to_base()
            trail, steps = found

        logger.debug(f"Skier {skier.id} heading to trail {trail.id} via {len(steps)} steps")
        return SkierGoal.create_ski_goal(destination_trail_id=trail.id, steps=steps)

    def _return_to_base(self) -> SkierGoal:
        return SkierGoal.create_return_to_base(priority=self.config.decision.return_to_base_priority)

    def _apply_no_path_penalty(self, skier: Skier, scale: float) -> None:
        skier.needs.adjust_satisfaction(delta=self.config.modifiers.no_path_penalty * scale)

    # =========================================================================
    # Destination Choice
    # =========================================================================

    def choose_destination_trail(self, skier: Skier, start: Optional[SnapPoint] = None) -> Optional[Trail]:
        """Pick a destination trail by weighted roll with reachability retries.

        Args:
            skier: Skier choosing
            start: Routing start (current position if None)

        Returns:
            Chosen trail, or None if no candidate has positive weight.
        """
        distribution = self.resort.distribution
        skill = skier.skill_level
        trails = self.resort.valid_trails()

        candidates = [t for t in trails if distribution.is_allowed(skill, t.difficulty)]
        if not candidates:
            # Last resort: only reached when no allowed trail exists at all
            candidates = [t for t in trails if distribution.is_desperate_only(skill, t.difficulty)]
        if not candidates:
            return None

        weights = [self.get_trail_weight(skier=skier, trail=t) for t in candidates]
        if sum(weights) <= 0:
            return None

        start = start or self.get_current_position(skier=skier)
        for _ in range(self.config.decision.destination_attempts):
            pick = self._weighted_pick(candidates=candidates, weights=weights)
            if start is not None and self._is_reachable(skier=skier, start=start, trail=pick):
                return pick

        return self.rng.choice(candidates)

    def _weighted_pick(self, candidates: list[Trail], weights: list[float]) -> Trail:
        """Cumulative-sum roulette selection."""
        roll = self.rng.random() * sum(weights)
        cumulative = 0.0
        for trail, weight in zip(candidates, weights):
            cumulative += weight
            if cumulative >= roll and weight > 0:
                return trail
        return next(t for t, w in reversed(list(zip(candidates, weights))) if w > 0)

    def get_trail_weight(self, skier: Skier, trail: Trail) -> float:
        """Selection weight of a trail for a skier.

        Effective weight and preferred boost, then the traffic terms: deficit
        bias, herding damping and crowding damping (each floored at
        min_bias_factor), then the novelty bonus. The skier's personality
        shifts every traffic and novelty strength.
        """
        distribution = self.resort.distribution
        decision = self.config.decision
        personality = skier.personality
        skill = skier.skill_level

        downstream = DOWNSTREAM_NOT_COMPUTED
        if decision.use_downstream_lookahead:
            downstream = self.compute_downstream_preference(skier=skier, trail=trail)

        weight = distribution.get_effective_weight(
            skill=skill, difficulty=trail.difficulty, downstream_best_preference=downstream
        )
        if distribution.get_preference(skill, trail.difficulty) >= decision.preferred_threshold:
            weight *= decision.preferred_difficulty_boost

        traffic = self.resort.traffic
        floor = decision.min_bias_factor
        deficit_strength = max(0.0, decision.deficit_bias_strength + personality.deficit)
        weight *= max(floor, 1.0 + deficit_strength * traffic.get_trail_deficit(trail_id=trail.id))
        herding_strength = max(0.0, decision.herding_penalty_strength + personality.herding)
        weight *= max(floor, 1.0 - herding_strength * traffic.get_trail_recent_popularity(trail_id=trail.id))
        crowding_strength = max(0.0, decision.crowding_penalty_strength + personality.crowding)
        weight *= max(floor, 1.0 - crowding_strength * traffic.get_trail_crowding(trail_id=trail.id))

        # Novelty is relative: a trail already skied gives up the bonus unskied trails keep
        if trail.id in skier.trails_skied:
            weight /= 1.0 + max(0.0, decision.novelty_bonus_strength + personality.novelty)
        return weight

    def compute_downstream_preference(self, skier: Skier, trail: Trail) -> float:
        """Best discounted preference reachable after skiing a trail.

        Trails reached after skiing more intermediate trails are discounted by
        DecisionSettings.downstream_depth_discounts. Returns 0.0 for dead ends.
        """
        end = self.resort.registry.get_point(point_type=SnapPointType.TRAIL_END, owner_id=trail.id)
        if end is None:
            return 0.0

        distribution = self.resort.distribution
        discounts = self.config.decision.downstream_depth_discounts
        if not discounts:
            return 0.0
        allowed = distribution.get_allowed_difficulties(skill=skier.skill_level)
        reachable = self.resort.graph.reachable_trail_starts(
            start=end,
            max_trail_hops=len(discounts) - 1,
            allowed_difficulties=allowed,
            trail_difficulties=self.resort.trail_difficulties(),
        )

        best = 0.0
        for trail_id, hops in reachable.items():
            candidate = self.resort.trails.get(trail_id)
            if candidate is None or candidate.difficulty not in allowed:
                continue
            best = max(best, distribution.get_preference(skier.skill_level, candidate.difficulty) * discounts[hops])
        return best

    # =========================================================================
    # Routing
    # =========================================================================

    def get_current_position(self, skier: Skier) -> Optional[SnapPoint]:
        """Snap point used as routing start for the skier's current state."""
        registry = self.resort.registry
        base = self.resort.get_base_spawn()
        state = skier.current_state

        if state == SkierState.AT_BASE:
            return base
        if state == SkierState.RIDING_LIFT and skier.current_lift_id is not None:
            return registry.get_point(point_type=SnapPointType.LIFT_TOP, owner_id=skier.current_lift_id) or base
        if state in (SkierState.SKIING_TRAIL, SkierState.AT_AMENITY) and skier.current_trail_id is not None:
            return registry.get_point(point_type=SnapPointType.TRAIL_END, owner_id=skier.current_trail_id) or base
        if skier.current_lift_id is not None:
            return registry.get_point(point_type=SnapPointType.LIFT_BOTTOM, owner_id=skier.current_lift_id) or base
        return base

    def _find_snap_path(self, skier: Skier, start: SnapPoint, trail: Trail) -> Optional[list[SnapPoint]]:
        target = self.resort.registry.get_point(point_type=SnapPointType.TRAIL_START, owner_id=trail.id)
        if target is None:
            return None
        return self.resort.graph.find_path(
            start=start,
            target=target,
            allowed_difficulties=self.resort.distribution.get_allowed_difficulties(skill=skier.skill_level),
            trail_difficulties=self.resort.trail_difficulties(),
        )

    def _is_reachable(self, skier: Skier, start: SnapPoint, trail: Trail) -> bool:
        return self._find_snap_path(skier=skier, start=start, trail=trail) is not None

    def find_path_to_trail(
        self, skier: Skier, trail: Trail, start: Optional[SnapPoint] = None
    ) -> Optional[list[PathStep]]:
        """Plan steps from the skier's position to the start of a trail.

        Returns:
            Ordered steps (ending with skiing the trail), or None if unreachable.
        """
        start = start or self.get_current_position(skier=skier)
        if start is None:
            return None
        path = self._find_snap_path(skier=skier, start=start, trail=trail)
        if path is None:
            return None
        return self.convert_to_path_steps(path=path)

    def find_any_reachable_path(
        self, skier: Skier, start: Optional[SnapPoint] = None
    ) -> Optional[tuple[Trail, list[PathStep]]]:
        """Try every allowed trail in random order until one is reachable."""
        distribution = self.resort.distribution
        allowed = [t for t in self.resort.valid_trails() if distribution.is_allowed(skier.skill_level, t.difficulty)]
        for trail in self.rng.sample(allowed, k=len(allowed)):
            steps = self.find_path_to_trail(skier=skier, trail=trail, start=start)
            if steps is not None:
                return trail, steps
        return None

    def convert_to_path_steps(self, path: list[SnapPoint]) -> list[PathStep]:
        """Keep only actionable nodes: lift bottoms and trail starts."""
        steps = []
        for point in path:
            if point.point_type == SnapPointType.LIFT_BOTTOM:
                lift = self.resort.get_lift(point.owner_id)
                steps.append(
                    PathStep(step_type=PathStepType.RIDE_LIFT, entity_id=point.owner_id, name=lift.name if lift else "")
                )
            elif point.point_type == SnapPointType.TRAIL_START:
                trail = self.resort.get_trail(point.owner_id)
                steps.append(
                    PathStep(step_type=PathStepType.SKI_TRAIL, entity_id=point.owner_id, name=trail.name if trail else "")
                )
        return steps

    # =========================================================================
    # Outcome Callbacks
    # =========================================================================

    def on_run_completed(self, skier: Skier, trail: Trail) -> None:
        """Count the run and apply run-outcome satisfaction modifiers as one delta."""
        modifiers = self.config.modifiers
        decision = self.config.decision
        skier.runs_completed += 1
        skier.trails_skied.add(trail.id)
        skier.needs.on_run_completed()

        delta = modifiers.successful_run_bonus
        preference = self.resort.distribution.get_preference(skier.skill_level, trail.difficulty)
        if preference >= decision.preferred_threshold:
            delta += modifiers.preferred_trail_bonus
            skier.preferred_runs_completed += 1
        elif preference <= decision.wrong_difficulty_threshold:
            delta += modifiers.wrong_difficulty_penalty * 0.5
        skier.needs.adjust_satisfaction(delta=delta)

    def on_lift_wait(self, skier: Skier, wait_minutes: float) -> None:
        """Record lift wait; the penalty scales with the wait, one unit per interval."""
        skier.needs.add_wait_time(seconds=wait_minutes * 60.0)
        interval = self.config.decision.wait_penalty_interval_min
        if interval > 0 and wait_minutes > 0:
            skier.needs.adjust_satisfaction(delta=self.config.modifiers.long_wait_penalty * wait_minutes / interval)
