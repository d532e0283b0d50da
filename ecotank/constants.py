"""
Central configuration constants for the tank ecosystem simulation.

Hand-tuned coefficients that govern tank stability. Values are preserved
exactly; changing any of them shifts the emergent equilibrium of the tank.
"""

# ============================================================================
# Bootstrap Defaults
# ============================================================================

DEFAULT_SEED = 82064021

# Initial tank conditions for a freshly stocked session
INITIAL_WATER_QUALITY = 0.9
INITIAL_OXYGEN_LEVEL = 0.9
INITIAL_CROWDING = 0.18
INITIAL_AGGRESSION_PRESSURE = 0.14
INITIAL_HARMONY = 0.84

# Fish age at bootstrap: BASE + index * STEP (days)
INITIAL_AGE_DAYS_BASE = 45.0
INITIAL_AGE_DAYS_STEP = 2.6


# ============================================================================
# Compatibility
# ============================================================================

# Score returned for a species pair with no explicit rule (neutral)
DEFAULT_COMPATIBILITY_SCORE = 0.5

# Scores below these thresholds count as hostile
INCOMPATIBILITY_HOSTILITY_THRESHOLD = 0.58
SOCIAL_PRESSURE_HOSTILITY_THRESHOLD = 0.62

# Weight of a species' own population share in its social pressure
SELF_CROWDING_PRESSURE = 0.08


# ============================================================================
# Numeric Guards
# ============================================================================

# Floor for capacity denominators (avoids divide-by-zero)
CAPACITY_EPSILON = 0.001


# ============================================================================
# Environmental Convergence Rates (per second)
# ============================================================================

# Degradation is faster than recovery for every tracked quantity
WATER_QUALITY_RATE_FALLING = 0.30
WATER_QUALITY_RATE_RISING = 0.12

OXYGEN_RATE_FALLING = 0.34
OXYGEN_RATE_RISING = 0.16

STRESS_RATE_RISING = 0.48
STRESS_RATE_FALLING = 0.26

HEALTH_RATE_FALLING = 0.10
HEALTH_RATE_RISING = 0.035


# ============================================================================
# Behavior Timing
# ============================================================================

# Decision timer drawn uniformly from [MIN, MIN + SPAN)
DECISION_TIMER_MIN_SEC = 0.9
DECISION_TIMER_SPAN_SEC = 2.4

# Extra dwell time for low-activity behaviors
DECISION_TIMER_BONUS_SEC = {
    'rest': 1.2,
    'hover': 0.5,
}


# ============================================================================
# Metabolism
# ============================================================================

# Relative activity cost per behavior (scaled by species activity)
BEHAVIOR_ACTIVITY_FACTOR = {
    'cruise': 0.62,
    'school': 0.66,
    'inspect': 0.52,
    'hover': 0.22,
    'dart': 1.08,
    'rest': 0.12,
    'avoid': 0.88,
    'chase': 1.02,
}

# Energy recovery per second by behavior (everything else uses the default)
ENERGY_RECOVERY_RATE = {
    'rest': 0.30,
    'hover': 0.15,
}
ENERGY_RECOVERY_DEFAULT = 0.02

# Hunger accrual per second: BASE + activity_cost * ACTIVITY
HUNGER_RATE_BASE = 0.028
HUNGER_RATE_ACTIVITY = 0.026

SECONDS_PER_DAY = 86400.0


# ============================================================================
# Session Telemetry
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100

# Print ecosystem summary every N ticks
ECOSYSTEM_LOG_INTERVAL = 100
