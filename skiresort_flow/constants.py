"""Configuration constants for Ski Resort Flow.

Default values for every tunable of the flow simulation are centralized here.
Runtime overrides live in skiresort_flow.config.FlowConfig, which copies these
defaults into per-session settings objects.

Classes:
    SnapConfig: Snap radii for traversal graph edges
    DistributionConfig: Skill mix, preference table, hard caps, transit floors
    DecisionConfig: Destination selection and departure thresholds
    SatisfactionModifierConfig: Fixed satisfaction deltas for run outcomes
    NeedsConfig: Need thresholds and accrual rates
    FactorConfig: Satisfaction factor weights and penalty scales
    TrafficConfig: Capacity derivation and recent-choice memory
    VisitorConfig: Runs per visitor and desired-run roll
    MotionConfig: Real-time movement speeds and durations
    LodgeConfig: Lodge pricing baselines and visit impact
    ResortSatisfactionConfig: Resort-wide satisfaction blending
    LiftConfig: Lift types and default throughput
    NameConfig: Creative naming components
"""


class SnapConfig:
    """Snap radii for connecting snap points into the traversal graph."""

    # Standard 3D threshold (world units) for LiftTop->TrailStart, TrailEnd->LiftBottom,
    # TrailEnd->TrailStart edges
    SNAP_RADIUS_3D = 25.0

    # Base spawns connect to lift bottoms within SNAP_RADIUS_3D * multiplier
    BASE_RADIUS_MULTIPLIER = 1.5

    # Legacy 2D tile-grid metric (Manhattan distance in tiles)
    SNAP_RADIUS_TILES = 2


class DistributionConfig:
    """Skill tier mix, preference table and hard caps.

    Tables are keyed by skill level and difficulty names (enum values).
    """

    SKILLS = ["beginner", "intermediate", "advanced", "expert"]
    DIFFICULTIES = ["green", "blue", "black", "double_black"]

    SKILL_DISTRIBUTION = {
        "beginner": 0.20,
        "intermediate": 0.30,
        "advanced": 0.30,
        "expert": 0.20,
    }
    assert abs(sum(SKILL_DISTRIBUTION.values()) - 1.0) < 1e-9

    # Preference weight per (skill, difficulty)
    PREFERENCES = {
        "beginner": {"green": 0.75, "blue": 0.25, "black": 0.0, "double_black": 0.0},
        "intermediate": {"green": 0.20, "blue": 0.60, "black": 0.20, "double_black": 0.0},
        "advanced": {"green": 0.05, "blue": 0.25, "black": 0.55, "double_black": 0.15},
        "expert": {"green": 0.02, "blue": 0.10, "black": 0.30, "double_black": 0.58},
    }
    assert set(PREFERENCES.keys()) == set(SKILLS)

    # Hard caps: difficulties a skill level may ever ski
    ALLOWED_DIFFICULTIES = {
        "beginner": ["green", "blue"],
        "intermediate": ["green", "blue", "black"],
        "advanced": ["green", "blue", "black", "double_black"],
        "expert": ["green", "blue", "black", "double_black"],
    }

    # Pairings only chosen as an absolute last resort
    DESPERATE_ONLY = [
        ("beginner", "black"),
        ("beginner", "double_black"),
        ("intermediate", "double_black"),
    ]

    # Effective weight constants
    DESPERATE_WEIGHT = 0.01
    TRANSIT_FLOOR_BASE = 0.15  # Difficulty at the skier's own level
    TRANSIT_FLOOR_GAP_BONUS = 0.03  # Added per level the trail is below skill
    TRANSIT_FLOOR_STRETCH = 0.08  # Trail exactly one level above skill
    DOWNSTREAM_BONUS_MULTIPLIER = 0.6
    DOWNSTREAM_EPSILON = 0.01  # Downstream values at or below this are dead ends
    DEAD_END_WEIGHT = 0.02
    DOWNSTREAM_NOT_COMPUTED = -1.0


class DecisionConfig:
    """Destination selection and departure thresholds."""

    PREFERRED_THRESHOLD = 0.4  # Preference at/above this counts as a preferred run
    WRONG_DIFFICULTY_THRESHOLD = 0.1  # Preference at/below this counts as forced transit
    PREFERRED_DIFFICULTY_BOOST = 1.5
    DESTINATION_ATTEMPTS = 3
    RETURN_TO_BASE_PRIORITY = 0.5

    # Departure conditions
    EXIT_FATIGUE = 0.9
    EXIT_SATISFACTION = 0.2

    # Traffic bias on destination weights
    DEFICIT_BIAS_STRENGTH = 1.0
    HERDING_PENALTY_STRENGTH = 0.5
    MIN_BIAS_FACTOR = 0.1
    CROWDING_PENALTY_STRENGTH = 1.0  # Per unit of effective load / capacity
    NOVELTY_BONUS_STRENGTH = 0.5  # Relative bonus for trails not yet skied this session
    PERSONALITY_MAGNITUDE = 0.3  # Max per-skier offset on each strength

    # Downstream look-ahead (what lies beyond a candidate trail)
    USE_DOWNSTREAM_LOOKAHEAD = True
    DOWNSTREAM_MAX_TRAIL_HOPS = 3
    DOWNSTREAM_DEPTH_DISCOUNTS = [1.0, 0.7, 0.45]
    assert len(DOWNSTREAM_DEPTH_DISCOUNTS) == DOWNSTREAM_MAX_TRAIL_HOPS

    # Minutes of lift wait per penalty unit
    WAIT_PENALTY_INTERVAL_MIN = 5.0


class SatisfactionModifierConfig:
    """Fixed satisfaction deltas applied to the legacy satisfaction scalar."""

    PREFERRED_TRAIL_BONUS = 0.05
    WRONG_DIFFICULTY_PENALTY = -0.1
    LONG_WAIT_PENALTY = -0.02
    SUCCESSFUL_RUN_BONUS = 0.02
    NO_PATH_PENALTY = -0.15


class NeedsConfig:
    """Need thresholds and accrual rates (per simulated minute unless noted)."""

    HUNGER_THRESHOLD = 0.7
    BLADDER_THRESHOLD = 0.8
    FATIGUE_THRESHOLD = 0.6

    HUNGER_RATE = 0.003
    BLADDER_RATE = 0.006
    FATIGUE_PER_RUN = 0.05
    FATIGUE_RECOVERY_RATE = 0.01

    INITIAL_SATISFACTION = 0.8


class FactorConfig:
    """Weights and penalty scales of the default satisfaction factors."""

    NEEDS_FULFILLMENT_WEIGHT = 1.0
    TRAVERSAL_FRICTION_WEIGHT = 0.8
    LODGE_PRICING_WEIGHT = 0.6
    RETURN_TO_BASE_WEIGHT = 0.7
    RUN_EXPERIENCE_WEIGHT = 1.0

    # Needs fulfillment
    NEED_OVER_THRESHOLD_PENALTY = 0.15
    NEED_EXCESS_SCALE = 0.10  # Extra penalty per unit above threshold
    UNFULFILLED_ATTEMPT_PENALTY = 0.1
    URGENT_TIME_SCALE_MIN = 150.0
    MAX_URGENT_TIME_PENALTY = 0.4

    # Traversal friction
    WALK_DISTANCE_SCALE = 500.0
    MAX_WALK_PENALTY = 0.5
    WAIT_TIME_SCALE_SEC = 1000.0
    MAX_WAIT_PENALTY = 0.3

    # Lodge pricing (score = 1 + avg_penalty * scale)
    PRICE_PENALTY_SCALE = 2.0

    # Return to base
    RETURN_FATIGUE_THRESHOLD = 0.6
    RETURN_WALK_SCALE = 300.0
    MAX_RETURN_PENALTY = 0.4
    RETURN_UNFULFILLED_PENALTY = 0.05

    # Aggregate value when all registered weights sum to zero
    NEUTRAL_SCORE = 0.8


class TrafficConfig:
    """Capacity derivation and recent-choice memory for the deficit tracker."""

    RECENT_MEMORY_SIZE = 8

    TRAIL_LENGTH_PER_SKIER_M = 50.0
    MIN_TRAIL_CAPACITY = 2.0
    LIFT_RIDERS_PER_CAPACITY_UNIT = 200.0
    MIN_LIFT_CAPACITY = 1.0


class VisitorConfig:
    """Visitor generation for day simulation."""

    RUNS_PER_VISITOR = 5
    DESIRED_RUNS_SKILL_BONUS = {
        "beginner": -1,
        "intermediate": 0,
        "advanced": 1,
        "expert": 2,
    }
    DESIRED_RUNS_VARIANCE = 2
    MIN_DESIRED_RUNS = 1
    PLAN_ATTEMPTS_PER_RUN = 3  # Batch mode: plan attempts = runs_per_visitor * this


class MotionConfig:
    """Real-time movement speeds (world units per simulated minute) and durations."""

    WALK_SPEED = 80.0
    SKI_SPEED = 250.0
    LIFT_SPEED = 300.0
    QUEUE_WAIT_MIN = 0.0  # Hook for future queue modelling
    AMENITY_VISIT_MIN = 20.0
    MIN_ACTIVITY_MIN = 0.5  # Shortest time any ride/run/walk takes
    LODGE_SEARCH_RADIUS = 60.0
    MAX_COMPLETIONS_PER_TICK = 6  # Activities one skier may finish within a single tick


class LodgeConfig:
    """Lodge pricing baselines and per-visit satisfaction impact."""

    BASE_BATHROOM_PRICE = 2.0
    BASE_FOOD_PRICE = 8.0
    BASE_REST_PRICE = 0.0

    CHEAP_BONUS_SCALE = 0.05  # Bonus per unit the price ratio is below 1
    MAX_CHEAP_BONUS = 0.05
    EXPENSIVE_PENALTY_SCALE = 0.1  # Penalty per unit the price ratio is above 1
    MAX_VISIT_PENALTY = -0.5

    DEFAULT_CAPACITY = 40


class ResortSatisfactionConfig:
    """Resort-wide satisfaction blending and visitor multiplier bounds."""

    INITIAL = 1.0
    REALTIME_BLEND = 0.7  # Weight of the live skier mean vs. history
    UNSERVED_PENALTY = 0.3
    MIN_SATISFACTION = 0.2
    MAX_SATISFACTION = 1.2


class LiftConfig:
    """Lift types and default throughput (riders per hour)."""

    DEFAULT_CAPACITY = 1000
    CAPACITY_BY_TYPE = {
        "surface_lift": 800,
        "chairlift": 1000,
        "gondola": 1800,
        "aerial_tram": 600,
    }
    TYPES = list(CAPACITY_BY_TYPE.keys())


class NameConfig:
    """Creative naming components for generated lift and trail names."""

    TRAIL_PREFIXES = {
        "green": ["Meadow", "Sunny", "Bunny", "Easy", "Gentle"],
        "blue": ["Alpine", "Panorama", "Forest", "Ridge", "Valley"],
        "black": ["Devil's", "Thunder", "Eagle", "Avalanche", "Storm"],
        "double_black": ["Widowmaker", "Couloir", "Headwall", "Chute", "Abyss"],
    }
    assert set(TRAIL_PREFIXES.keys()) == set(DistributionConfig.DIFFICULTIES)

    TRAIL_SUFFIXES = ["Run", "Trail", "Way", "Descent", "Glade"]

    LIFT_NAMES = ["Alpine Express", "Summit Flyer", "Eagle Chair", "Glacier Link", "Sunrise Lift"]
