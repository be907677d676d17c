"""Runtime configuration for one flow simulation session.

FlowConfig is owned by the session (Resort, engines, simulations) and passed
explicitly to every component, so several resorts or test fixtures can run
side by side with different tunables. All defaults come from constants.py.

Example:
    config = FlowConfig()
    config.snap.snap_radius_3d = 30.0
    config.decision.herding_penalty_strength = 0.0
    resort = Resort(config=config)
"""

from dataclasses import dataclass, field

from skiresort_flow.constants import (
    DecisionConfig,
    DistributionConfig,
    MotionConfig,
    NeedsConfig,
    ResortSatisfactionConfig,
    SatisfactionModifierConfig,
    SnapConfig,
    TrafficConfig,
    VisitorConfig,
)
from skiresort_flow.model.enums import SkillLevel, TrailDifficulty


def _default_skill_distribution() -> dict[SkillLevel, float]:
    return {SkillLevel(k): v for k, v in DistributionConfig.SKILL_DISTRIBUTION.items()}


def _default_preferences() -> dict[SkillLevel, dict[TrailDifficulty, float]]:
    return {
        SkillLevel(skill): {TrailDifficulty(d): w for d, w in row.items()}
        for skill, row in DistributionConfig.PREFERENCES.items()
    }


def _default_allowed() -> dict[SkillLevel, set[TrailDifficulty]]:
    return {
        SkillLevel(skill): {TrailDifficulty(d) for d in difficulties}
        for skill, difficulties in DistributionConfig.ALLOWED_DIFFICULTIES.items()
    }


def _default_desperate_pairs() -> set[tuple[SkillLevel, TrailDifficulty]]:
    return {(SkillLevel(s), TrailDifficulty(d)) for s, d in DistributionConfig.DESPERATE_ONLY}


def _default_skill_bonus() -> dict[SkillLevel, int]:
    return {SkillLevel(k): v for k, v in VisitorConfig.DESIRED_RUNS_SKILL_BONUS.items()}


class DistanceMetric:
    """Distance metric used to gate traversal graph edges."""

    EUCLIDEAN_3D = "euclidean_3d"
    MANHATTAN_2D = "manhattan_2d"  # Legacy tile grid

    ALL = [EUCLIDEAN_3D, MANHATTAN_2D]


@dataclass
class SnapSettings:
    """Snap radii for graph building."""

    snap_radius_3d: float = SnapConfig.SNAP_RADIUS_3D
    base_radius_multiplier: float = SnapConfig.BASE_RADIUS_MULTIPLIER
    snap_radius_tiles: int = SnapConfig.SNAP_RADIUS_TILES
    metric: str = DistanceMetric.EUCLIDEAN_3D

    def __post_init__(self) -> None:
        if self.metric not in DistanceMetric.ALL:
            raise ValueError(f"Unknown distance metric '{self.metric}', expected one of {DistanceMetric.ALL}")


@dataclass
class DistributionSettings:
    """Skill mix, preference table, hard caps and effective weight constants."""

    skill_distribution: dict[SkillLevel, float] = field(default_factory=_default_skill_distribution)
    preferences: dict[SkillLevel, dict[TrailDifficulty, float]] = field(default_factory=_default_preferences)
    allowed_difficulties: dict[SkillLevel, set[TrailDifficulty]] = field(default_factory=_default_allowed)
    desperate_pairs: set[tuple[SkillLevel, TrailDifficulty]] = field(default_factory=_default_desperate_pairs)

    desperate_weight: float = DistributionConfig.DESPERATE_WEIGHT
    transit_floor_base: float = DistributionConfig.TRANSIT_FLOOR_BASE
    transit_floor_gap_bonus: float = DistributionConfig.TRANSIT_FLOOR_GAP_BONUS
    transit_floor_stretch: float = DistributionConfig.TRANSIT_FLOOR_STRETCH
    downstream_bonus_multiplier: float = DistributionConfig.DOWNSTREAM_BONUS_MULTIPLIER
    downstream_epsilon: float = DistributionConfig.DOWNSTREAM_EPSILON
    dead_end_weight: float = DistributionConfig.DEAD_END_WEIGHT


@dataclass
class DecisionSettings:
    """Destination selection, departure thresholds and traffic bias."""

    preferred_threshold: float = DecisionConfig.PREFERRED_THRESHOLD
    wrong_difficulty_threshold: float = DecisionConfig.WRONG_DIFFICULTY_THRESHOLD
    preferred_difficulty_boost: float = DecisionConfig.PREFERRED_DIFFICULTY_BOOST
    destination_attempts: int = DecisionConfig.DESTINATION_ATTEMPTS
    return_to_base_priority: float = DecisionConfig.RETURN_TO_BASE_PRIORITY
    exit_fatigue: float = DecisionConfig.EXIT_FATIGUE
    exit_satisfaction: float = DecisionConfig.EXIT_SATISFACTION
    deficit_bias_strength: float = DecisionConfig.DEFICIT_BIAS_STRENGTH
    herding_penalty_strength: float = DecisionConfig.HERDING_PENALTY_STRENGTH
    min_bias_factor: float = DecisionConfig.MIN_BIAS_FACTOR
    crowding_penalty_strength: float = DecisionConfig.CROWDING_PENALTY_STRENGTH
    novelty_bonus_strength: float = DecisionConfig.NOVELTY_BONUS_STRENGTH
    personality_magnitude: float = DecisionConfig.PERSONALITY_MAGNITUDE
    use_downstream_lookahead: bool = DecisionConfig.USE_DOWNSTREAM_LOOKAHEAD
    downstream_depth_discounts: list[float] = field(
        default_factory=lambda: list(DecisionConfig.DOWNSTREAM_DEPTH_DISCOUNTS)
    )
    wait_penalty_interval_min: float = DecisionConfig.WAIT_PENALTY_INTERVAL_MIN


@dataclass
class SatisfactionModifiers:
    """Fixed satisfaction deltas for run outcomes and waits."""

    preferred_trail_bonus: float = SatisfactionModifierConfig.PREFERRED_TRAIL_BONUS
    wrong_difficulty_penalty: float = SatisfactionModifierConfig.WRONG_DIFFICULTY_PENALTY
    long_wait_penalty: float = SatisfactionModifierConfig.LONG_WAIT_PENALTY
    successful_run_bonus: float = SatisfactionModifierConfig.SUCCESSFUL_RUN_BONUS
    no_path_penalty: float = SatisfactionModifierConfig.NO_PATH_PENALTY


@dataclass
class NeedsSettings:
    """Need thresholds and accrual rates for newly spawned skiers."""

    hunger_threshold: float = NeedsConfig.HUNGER_THRESHOLD
    bladder_threshold: float = NeedsConfig.BLADDER_THRESHOLD
    fatigue_threshold: float = NeedsConfig.FATIGUE_THRESHOLD
    hunger_rate: float = NeedsConfig.HUNGER_RATE
    bladder_rate: float = NeedsConfig.BLADDER_RATE
    fatigue_per_run: float = NeedsConfig.FATIGUE_PER_RUN
    fatigue_recovery_rate: float = NeedsConfig.FATIGUE_RECOVERY_RATE
    initial_satisfaction: float = NeedsConfig.INITIAL_SATISFACTION


@dataclass
class TrafficSettings:
    """Deficit tracker memory and capacity derivation."""

    recent_memory_size: int = TrafficConfig.RECENT_MEMORY_SIZE
    trail_length_per_skier_m: float = TrafficConfig.TRAIL_LENGTH_PER_SKIER_M
    min_trail_capacity: float = TrafficConfig.MIN_TRAIL_CAPACITY
    lift_riders_per_capacity_unit: float = TrafficConfig.LIFT_RIDERS_PER_CAPACITY_UNIT
    min_lift_capacity: float = TrafficConfig.MIN_LIFT_CAPACITY


@dataclass
class VisitorSettings:
    """Visitor generation."""

    runs_per_visitor: int = VisitorConfig.RUNS_PER_VISITOR
    desired_runs_skill_bonus: dict[SkillLevel, int] = field(default_factory=_default_skill_bonus)
    desired_runs_variance: int = VisitorConfig.DESIRED_RUNS_VARIANCE
    min_desired_runs: int = VisitorConfig.MIN_DESIRED_RUNS
    plan_attempts_per_run: int = VisitorConfig.PLAN_ATTEMPTS_PER_RUN


@dataclass
class MotionSettings:
    """Real-time movement speeds and activity durations."""

    walk_speed: float = MotionConfig.WALK_SPEED
    ski_speed: float = MotionConfig.SKI_SPEED
    lift_speed: float = MotionConfig.LIFT_SPEED
    queue_wait_min: float = MotionConfig.QUEUE_WAIT_MIN
    amenity_visit_min: float = MotionConfig.AMENITY_VISIT_MIN
    min_activity_min: float = MotionConfig.MIN_ACTIVITY_MIN
    lodge_search_radius: float = MotionConfig.LODGE_SEARCH_RADIUS
    max_completions_per_tick: int = MotionConfig.MAX_COMPLETIONS_PER_TICK


@dataclass
class ResortSatisfactionSettings:
    """Resort-wide satisfaction blending."""

    initial: float = ResortSatisfactionConfig.INITIAL
    realtime_blend: float = ResortSatisfactionConfig.REALTIME_BLEND
    unserved_penalty: float = ResortSatisfactionConfig.UNSERVED_PENALTY
    min_satisfaction: float = ResortSatisfactionConfig.MIN_SATISFACTION
    max_satisfaction: float = ResortSatisfactionConfig.MAX_SATISFACTION


@dataclass
class FlowConfig:
    """All tunables of one simulation session.

    Attributes:
        snap: Snap radii and distance metric
        distribution: Skill mix, preferences, caps, effective weight constants
        decision: Destination selection and departure thresholds
        modifiers: Satisfaction deltas for run outcomes
        needs: Need thresholds and rates
        traffic: Deficit tracker settings
        visitors: Visitor generation
        motion: Real-time movement
        resort_satisfaction: Resort-wide satisfaction blending
        seed: Seed for the session's random source (None = nondeterministic)
    """

    snap: SnapSettings = field(default_factory=SnapSettings)
    distribution: DistributionSettings = field(default_factory=DistributionSettings)
    decision: DecisionSettings = field(default_factory=DecisionSettings)
    modifiers: SatisfactionModifiers = field(default_factory=SatisfactionModifiers)
    needs: NeedsSettings = field(default_factory=NeedsSettings)
    traffic: TrafficSettings = field(default_factory=TrafficSettings)
    visitors: VisitorSettings = field(default_factory=VisitorSettings)
    motion: MotionSettings = field(default_factory=MotionSettings)
    resort_satisfaction: ResortSatisfactionSettings = field(default_factory=ResortSatisfactionSettings)
    seed: int | None = None
