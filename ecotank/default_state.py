"""
Seeded bootstrap of an ecosystem session.

Every fish's starting stats and cosmetic lane parameters come from one seed
chain rooted at the session seed, so the same seed always yields the same
initial state.
"""

import math
from typing import Iterable, Optional, Tuple

from .data_types import (
    EcosystemState, FishBehavior, FishState, PopulationGroup, PreferredDepth, TankState
)
from .species import SpeciesIndex, DEFAULT_SPECIES_CATALOG, create_species_index
from .rng import MASK_32, draw_sequence
from .constants import (
    DEFAULT_SEED,
    INITIAL_WATER_QUALITY,
    INITIAL_OXYGEN_LEVEL,
    INITIAL_CROWDING,
    INITIAL_AGGRESSION_PRESSURE,
    INITIAL_HARMONY,
    INITIAL_AGE_DAYS_BASE,
    INITIAL_AGE_DAYS_STEP,
)


DEFAULT_POPULATION = (
    PopulationGroup("neon_tetra", 3),
    PopulationGroup("guppy", 2),
    PopulationGroup("corydoras", 1),
    PopulationGroup("dwarf_gourami", 1),
)

INITIAL_BEHAVIOR = FishBehavior.CRUISE

# Normalized vertical lane band per preferred depth
DEPTH_LANE_RANGES = {
    PreferredDepth.TOP: (0.22, 0.92),
    PreferredDepth.MID: (-0.38, 0.46),
    PreferredDepth.BOTTOM: (-0.95, -0.22),
}

# Uniform draw bounds per fish, in draw order (lane_y is inserted after timer)
FISH_DRAW_RANGES = (
    (0.65, 0.92),       # energy
    (0.08, 0.26),       # stress
    (0.8, 0.97),        # health
    (0.08, 0.35),       # hunger
    (0.9, 2.6),         # decision timer
    (-0.85, 0.85),      # lane_z
    (0.42, 0.82),       # path width
    (0.22, 0.5),        # path depth
    (0.0, math.pi * 2),  # phase
    (0.68, 1.12),       # speed factor
)


def depth_range(preferred_depth: PreferredDepth) -> Tuple[float, float]:
    """Lane band (min, max) for a preferred depth"""
    return DEPTH_LANE_RANGES[PreferredDepth(preferred_depth)]


def create_fish_state(index: int, species_id: str, preferred_depth: PreferredDepth,
                      seed: int) -> Tuple[FishState, int]:
    """
    Create one fish from the seed chain.

    Draw order (fixed): energy, stress, health, hunger, decision timer,
    lane_y, lane_z, path width, path depth, phase, speed factor.

    Args:
        index: Zero-based position in the population (drives id and age)
        species_id: Species of the fish
        preferred_depth: Depth band for lane_y
        seed: Seed to draw from

    Returns:
        Tuple of (FishState, seed after the last draw)
    """
    draws, state = draw_sequence(seed, len(FISH_DRAW_RANGES) + 1)
    ranges = FISH_DRAW_RANGES[:5] + (depth_range(preferred_depth),) + FISH_DRAW_RANGES[5:]
    (energy, stress, health, hunger, timer, lane_y_norm, lane_z_norm,
     path_width_norm, path_depth_norm, phase, speed_factor) = [
        lo + (hi - lo) * float(r) for (lo, hi), r in zip(ranges, draws)
    ]

    fish = FishState(
        fish_id=f"fish-{index + 1}",
        species_id=species_id,
        age_days=INITIAL_AGE_DAYS_BASE + index * INITIAL_AGE_DAYS_STEP,
        energy=energy,
        stress=stress,
        health=health,
        hunger=hunger,
        behavior=INITIAL_BEHAVIOR,
        decision_timer_sec=timer,
        motion_seed=state,
        lane_y_norm=lane_y_norm,
        lane_z_norm=lane_z_norm,
        path_width_norm=path_width_norm,
        path_depth_norm=path_depth_norm,
        phase=phase,
        speed_factor=speed_factor,
    )
    return fish, state


def create_default_ecosystem_state(
    seed: int = DEFAULT_SEED,
    population: Iterable[PopulationGroup] = DEFAULT_POPULATION,
    species_index: Optional[SpeciesIndex] = None,
    timestamp_ms: float = 0.0
) -> EcosystemState:
    """
    Build the initial state for a session.

    Args:
        seed: Root seed (wrapped to 32 bits)
        population: Stocking list, spawned in order
        species_index: Index used to resolve preferred depth (built-in catalog if None)
        timestamp_ms: Starting value of the simulated clock

    Returns:
        EcosystemState at tick 0

    Example:
        state = create_default_ecosystem_state(82064021)
    """
    if species_index is None:
        species_index = create_species_index(DEFAULT_SPECIES_CATALOG)

    state = int(seed) & MASK_32
    fish = []
    fish_index = 0

    for group in population:
        species = species_index.get(group.species_id)
        preferred_depth = species.preferred_depth if species is not None else PreferredDepth.MID
        for _ in range(group.count):
            entry, state = create_fish_state(fish_index, group.species_id, preferred_depth, state)
            fish.append(entry)
            fish_index += 1

    tank = TankState(
        timestamp_ms=timestamp_ms,
        water_quality=INITIAL_WATER_QUALITY,
        oxygen_level=INITIAL_OXYGEN_LEVEL,
        crowding=INITIAL_CROWDING,
        aggression_pressure=INITIAL_AGGRESSION_PRESSURE,
        harmony=INITIAL_HARMONY,
        bioload=0.0,
        incompatibility=0.0,
    )

    return EcosystemState(tick=0, rng_state=state, tank=tank, fish=tuple(fish))
