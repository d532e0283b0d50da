"""
Behavior weighting and selection for individual fish.

Each behavior gets a weight from the fish's own physiology and the tank
metrics; a single uniform draw then picks one by roulette-wheel selection
over the fixed order in BEHAVIOR_ORDER.
"""

from typing import Dict, Mapping, Tuple

from .data_types import FishBehavior, FishState, SpeciesProfile
from .metrics import TankMetrics
from .numeric import clamp
from .constants import (
    DECISION_TIMER_MIN_SEC,
    DECISION_TIMER_SPAN_SEC,
    DECISION_TIMER_BONUS_SEC,
)

# Roulette enumeration order (fixed for reproducibility)
BEHAVIOR_ORDER: Tuple[FishBehavior, ...] = (
    FishBehavior.CRUISE,
    FishBehavior.SCHOOL,
    FishBehavior.INSPECT,
    FishBehavior.HOVER,
    FishBehavior.DART,
    FishBehavior.REST,
    FishBehavior.AVOID,
    FishBehavior.CHASE,
)


def schooling_deficit(species: SpeciesProfile, same_species_count: int) -> float:
    """
    Penalty in [0, 1] for a schooling species kept below its minimum group.

    Minimum group is schooling + 1. Solitary species (schooling == 0) never
    incur a deficit.
    """
    if species.schooling == 0:
        return 0.0
    minimum_group = species.schooling + 1
    if same_species_count >= minimum_group:
        return 0.0
    return clamp((minimum_group - same_species_count) / minimum_group)


def behavior_weights_for_fish(
    fish: FishState,
    species: SpeciesProfile,
    metrics: TankMetrics,
    same_species_count: int
) -> Dict[FishBehavior, float]:
    """
    Raw (unfloored) selection weight for every behavior.

    Args:
        fish: Fish state at the start of the step
        species: The fish's species profile
        metrics: Tank metrics for this step
        same_species_count: Number of fish of this species in the tank

    Returns:
        Dict of FishBehavior -> weight, in BEHAVIOR_ORDER
    """
    deficit = schooling_deficit(species, same_species_count)
    stress = fish.stress
    low_energy = clamp(1.0 - fish.energy)
    social_pressure = metrics.species_social_pressure.get(fish.species_id, 0.0)

    if species.schooling > 0 and same_species_count > 1:
        school = 0.8 + species.schooling * 0.26
    else:
        school = 0.01

    if species.temperament >= 2:
        chase = 0.04 + metrics.aggression_pressure * 0.82 + fish.energy * 0.2 + deficit * 0.22
    else:
        chase = 0.01

    return {
        FishBehavior.CRUISE: 1.2 + species.activity * 0.9 - stress * 0.4,
        FishBehavior.SCHOOL: school,
        FishBehavior.INSPECT: 0.24 + fish.hunger * 0.66 + (1.0 - metrics.harmony) * 0.2,
        FishBehavior.HOVER: 0.2 + low_energy * 0.8 + (1.0 - metrics.oxygen_level_target) * 0.25,
        FishBehavior.DART: 0.05 + stress * 1.2 + metrics.crowding * 0.4,
        FishBehavior.REST: 0.03 + low_energy * 1.1 + (1.0 - fish.health) * 0.45,
        FishBehavior.AVOID: 0.08 + social_pressure * 0.94 + metrics.incompatibility * 0.4,
        FishBehavior.CHASE: chase,
    }


def weighted_behavior_choice(random_value: float,
                             weights: Mapping[FishBehavior, float]) -> FishBehavior:
    """
    Roulette-wheel selection over BEHAVIOR_ORDER.

    Negative weights count as zero and missing behaviors as weight zero.
    Falls back to CRUISE when the total weight is zero.

    Args:
        random_value: Uniform draw in [0, 1)
        weights: Behavior -> weight

    Returns:
        Selected behavior (always a member of FishBehavior)
    """
    floored = [(behavior, max(0.0, weights.get(behavior, 0.0))) for behavior in BEHAVIOR_ORDER]
    total = sum(weight for _, weight in floored)
    if total <= 0:
        return FishBehavior.CRUISE

    cursor = random_value * total
    for behavior, weight in floored:
        cursor -= weight
        if cursor <= 0:
            return behavior

    # Floating point residue
    return FishBehavior.CRUISE


def decision_timer_for(behavior: FishBehavior, random_value: float) -> float:
    """Seconds until the next re-roll, with extra dwell for rest and hover"""
    bonus = DECISION_TIMER_BONUS_SEC.get(FishBehavior(behavior).value, 0.0)
    return DECISION_TIMER_MIN_SEC + random_value * DECISION_TIMER_SPAN_SEC + bonus
