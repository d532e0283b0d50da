"""
Ecosystem step function.

step() is pure: it reads the previous state and the static reference data
and returns a new EcosystemState. The RNG seed, tick counter and every fish
and tank field travel through the return value only.

STEP CONTRACT:

1. Tank metrics are computed once from the population at tick start.
2. Water quality and oxygen converge toward their targets (faster when
   degrading than when recovering).
3. Each fish, in population order, updates stress, optionally re-rolls its
   behavior (consuming two RNG draws), then updates energy, hunger, health
   and age. Fish of unknown species pass through unchanged.
"""

from dataclasses import dataclass, replace
from typing import List

from .data_types import EcosystemState, FishBehavior, FishState, TankConfig
from .species import SpeciesIndex
from .compatibility import CompatibilityLookup
from .metrics import TankMetrics, compute_tank_metrics
from .behavior import (
    behavior_weights_for_fish,
    decision_timer_for,
    schooling_deficit,
    weighted_behavior_choice,
)
from .numeric import clamp, asymmetric_approach
from .rng import next_random
from .constants import (
    WATER_QUALITY_RATE_FALLING,
    WATER_QUALITY_RATE_RISING,
    OXYGEN_RATE_FALLING,
    OXYGEN_RATE_RISING,
    STRESS_RATE_RISING,
    STRESS_RATE_FALLING,
    HEALTH_RATE_FALLING,
    HEALTH_RATE_RISING,
    BEHAVIOR_ACTIVITY_FACTOR,
    ENERGY_RECOVERY_RATE,
    ENERGY_RECOVERY_DEFAULT,
    HUNGER_RATE_BASE,
    HUNGER_RATE_ACTIVITY,
    SECONDS_PER_DAY,
)


@dataclass(frozen=True)
class EcosystemStepInput:
    """Bundled arguments for one step"""
    state: EcosystemState
    species_index: SpeciesIndex
    compatibility: CompatibilityLookup
    tank_config: TankConfig
    dt_sec: float


def find_orphan_fish(state: EcosystemState, species_index: SpeciesIndex) -> List[str]:
    """
    List fish_ids whose species_id is missing from the index.

    Such fish are frozen by step(); a non-empty result indicates a caller
    data-integrity problem.
    """
    return [f.fish_id for f in state.fish if f.species_id not in species_index]


def _activity_cost(behavior: FishBehavior, activity: float) -> float:
    return BEHAVIOR_ACTIVITY_FACTOR[behavior.value] * (0.52 + activity * 0.68)


def _step_fish(
    fish: FishState,
    species,
    metrics: TankMetrics,
    water_quality: float,
    oxygen_level: float,
    dt_sec: float,
    rng_state: int
):
    """
    Advance one fish by dt_sec.

    Returns:
        Tuple of (new FishState, rng_state after any draws)
    """
    same_species_count = metrics.species_counts.get(fish.species_id, 1)
    deficit = schooling_deficit(species, same_species_count)
    social_pressure = metrics.species_social_pressure.get(fish.species_id, 0.0)

    stress_target = clamp(
        0.08
        + metrics.crowding * 0.28
        + (1.0 - oxygen_level) * 0.3
        + (1.0 - water_quality) * 0.22
        + social_pressure * 0.34
        + metrics.aggression_pressure * (0.16 + species.temperament * 0.08)
        + deficit * 0.28
    )
    stress = clamp(asymmetric_approach(
        fish.stress, stress_target, dt_sec, STRESS_RATE_RISING, STRESS_RATE_FALLING
    ))

    decision_timer_sec = max(0.0, fish.decision_timer_sec - dt_sec)
    behavior = fish.behavior

    if decision_timer_sec <= 0 or dt_sec == 0:
        # Weights read the fish as it stood at tick start
        choice_random, rng_state = next_random(rng_state)
        weights = behavior_weights_for_fish(fish, species, metrics, same_species_count)
        behavior = weighted_behavior_choice(choice_random, weights)

        timer_random, rng_state = next_random(rng_state)
        decision_timer_sec = decision_timer_for(behavior, timer_random)

    activity_cost = _activity_cost(behavior, species.activity)
    recovery = ENERGY_RECOVERY_RATE.get(behavior.value, ENERGY_RECOVERY_DEFAULT)
    energy = clamp(fish.energy + (recovery - activity_cost * 0.1 - stress * 0.05) * dt_sec)
    hunger = clamp(fish.hunger + (HUNGER_RATE_BASE + activity_cost * HUNGER_RATE_ACTIVITY) * dt_sec)

    health_target = clamp(
        1.0 - (
            stress * 0.52
            + (1.0 - water_quality) * 0.28
            + (1.0 - oxygen_level) * 0.24
            + metrics.crowding * 0.16
        )
    )
    health = clamp(asymmetric_approach(
        fish.health, health_target, dt_sec, HEALTH_RATE_RISING, HEALTH_RATE_FALLING
    ))

    updated = replace(
        fish,
        age_days=fish.age_days + dt_sec / SECONDS_PER_DAY,
        stress=stress,
        energy=energy,
        hunger=hunger,
        health=health,
        behavior=behavior,
        decision_timer_sec=decision_timer_sec,
    )
    return updated, rng_state


def step(
    state: EcosystemState,
    species_index: SpeciesIndex,
    compatibility: CompatibilityLookup,
    tank_config: TankConfig,
    dt_sec: float
) -> EcosystemState:
    """
    Advance the ecosystem by dt_sec seconds.

    A negative dt_sec is a no-op (the input state is returned as is). A zero
    dt_sec leaves physiology, age and tick unchanged but forces every fish to
    re-roll its behavior.

    Args:
        state: Previous state (not modified)
        species_index: species_id -> SpeciesProfile
        compatibility: Compatibility lookup
        tank_config: Static tank parameters
        dt_sec: Elapsed time in seconds

    Returns:
        New EcosystemState
    """
    if dt_sec < 0:
        return state

    metrics = compute_tank_metrics(state.fish, species_index, compatibility, tank_config)
    rng_state = state.rng_state

    water_quality = clamp(asymmetric_approach(
        state.tank.water_quality, metrics.water_quality_target, dt_sec,
        WATER_QUALITY_RATE_RISING, WATER_QUALITY_RATE_FALLING
    ))
    oxygen_level = clamp(asymmetric_approach(
        state.tank.oxygen_level, metrics.oxygen_level_target, dt_sec,
        OXYGEN_RATE_RISING, OXYGEN_RATE_FALLING
    ))

    fish = []
    for entry in state.fish:
        species = species_index.get(entry.species_id)
        if species is None:
            # Unknown species: freeze, don't drop
            fish.append(entry)
            continue

        updated, rng_state = _step_fish(
            entry, species, metrics, water_quality, oxygen_level, dt_sec, rng_state
        )
        fish.append(updated)

    tank = replace(
        state.tank,
        timestamp_ms=state.tank.timestamp_ms + dt_sec * 1000.0,
        water_quality=water_quality,
        oxygen_level=oxygen_level,
        crowding=metrics.crowding,
        aggression_pressure=metrics.aggression_pressure,
        harmony=metrics.harmony,
        bioload=metrics.bioload,
        incompatibility=metrics.incompatibility,
    )

    return EcosystemState(
        tick=state.tick + (1 if dt_sec > 0 else 0),
        rng_state=rng_state,
        tank=tank,
        fish=tuple(fish),
    )


def step_ecosystem(step_input: EcosystemStepInput) -> EcosystemState:
    """Single-argument form of step()"""
    return step(
        state=step_input.state,
        species_index=step_input.species_index,
        compatibility=step_input.compatibility,
        tank_config=step_input.tank_config,
        dt_sec=step_input.dt_sec,
    )
