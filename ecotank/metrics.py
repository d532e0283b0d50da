"""
Tank-wide metrics.

Computed fresh every step from the current population: bioload, oxygen
demand, crowding, incompatibility, per-species social pressure, aggression,
harmony, and the water quality / oxygen targets the tank converges toward.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from .data_types import FishState, TankConfig
from .species import SpeciesIndex
from .compatibility import CompatibilityLookup, get_compatibility_score, hostility
from .numeric import clamp
from .constants import (
    CAPACITY_EPSILON,
    INCOMPATIBILITY_HOSTILITY_THRESHOLD,
    SOCIAL_PRESSURE_HOSTILITY_THRESHOLD,
    SELF_CROWDING_PRESSURE,
)


@dataclass(frozen=True)
class TankMetrics:
    """Snapshot of tank-wide pressures for one step"""
    bioload: float
    oxygen_demand: float
    load_ratio: float
    population_ratio: float
    crowding: float
    aggression_pressure: float
    incompatibility: float
    harmony: float
    water_quality_target: float
    oxygen_level_target: float
    species_counts: Mapping[str, int]
    species_social_pressure: Mapping[str, float]


def sequential_sum(values: np.ndarray) -> float:
    """
    Sum values left to right in population order.

    np.sum switches to pairwise summation at 8+ elements, which can change
    the last bit of the result.
    """
    if len(values) == 0:
        return 0.0
    return float(np.cumsum(values)[-1])


def compute_species_counts(fish: Iterable[FishState]) -> Dict[str, int]:
    """Count fish per species_id (insertion order = first appearance)"""
    counts: Dict[str, int] = {}
    for entry in fish:
        counts[entry.species_id] = counts.get(entry.species_id, 0) + 1
    return counts


def compute_incompatibility(counts: Mapping[str, int], compatibility: CompatibilityLookup) -> float:
    """
    Population-weighted hostility over every unordered species pair present.

    Cross-species pairs weigh countA * countB; same-species pairs weigh
    count choose 2. Returns 0.0 when there are no pairs.
    """
    species = list(counts.items())
    weighted_hostility = 0.0
    weighted_pairs = 0.0

    for i, (species_a, count_a) in enumerate(species):
        for species_b, count_b in species[i:]:
            if species_a == species_b:
                pair_weight = count_a * max(0, count_a - 1) / 2.0
            else:
                pair_weight = float(count_a * count_b)
            if pair_weight <= 0:
                continue

            score = get_compatibility_score(compatibility, species_a, species_b)
            weighted_hostility += hostility(score, INCOMPATIBILITY_HOSTILITY_THRESHOLD) * pair_weight
            weighted_pairs += pair_weight

    if weighted_pairs <= 0:
        return 0.0
    return clamp(weighted_hostility / weighted_pairs)


def compute_species_social_pressure(counts: Mapping[str, int],
                                    compatibility: CompatibilityLookup) -> Dict[str, float]:
    """
    Hostility each species is exposed to, weighted by the others' population share.

    Includes a small self-crowding term proportional to the species' own share.
    """
    total = sum(counts.values())
    pressure_by_species: Dict[str, float] = {}
    if total <= 0:
        return pressure_by_species

    for species_id, count in counts.items():
        pressure = 0.0
        for other_id, other_count in counts.items():
            if other_id == species_id or other_count <= 0:
                continue
            score = get_compatibility_score(compatibility, species_id, other_id)
            pressure += hostility(score, SOCIAL_PRESSURE_HOSTILITY_THRESHOLD) * (other_count / total)
        pressure_by_species[species_id] = clamp(pressure + (count / total) * SELF_CROWDING_PRESSURE)

    return pressure_by_species


def compute_tank_metrics(
    fish: Iterable[FishState],
    species_index: SpeciesIndex,
    compatibility: CompatibilityLookup,
    tank_config: TankConfig
) -> TankMetrics:
    """
    Compute all tank-wide metrics for the current population.

    Fish whose species is missing from the index contribute nothing to the
    per-species sums but still count toward the population size.

    Args:
        fish: Current population
        species_index: species_id -> SpeciesProfile
        compatibility: Compatibility lookup
        tank_config: Static tank parameters

    Returns:
        TankMetrics with every bounded field clamped to [0, 1]
    """
    fish = tuple(fish)
    species_counts = compute_species_counts(fish)

    profiles = [species_index[f.species_id] for f in fish if f.species_id in species_index]
    bioloads = np.array([s.bioload for s in profiles], dtype=np.float64)
    oxygen_uses = np.array([s.oxygen_use for s in profiles], dtype=np.float64)
    activities = np.array([s.activity for s in profiles], dtype=np.float64)
    temperaments = np.array([s.temperament for s in profiles], dtype=np.float64)
    territory_needs = np.array([s.territory_need for s in profiles], dtype=np.float64)

    bioload = sequential_sum(bioloads)
    oxygen_demand = sequential_sum(oxygen_uses * (0.6 + activities * 0.5))
    temperament_sum = sequential_sum(temperaments / 3.0)
    territory_sum = sequential_sum(territory_needs)

    fish_count = max(1, len(fish))
    effective_capacity = (
        tank_config.base_capacity
        * tank_config.filtration_factor
        * (0.82 + tank_config.habitat_factor * 0.28)
    )
    load_ratio = bioload / effective_capacity if effective_capacity > 0 else 1.0
    population_ratio = len(fish) / max(1, tank_config.target_population)

    incompatibility = compute_incompatibility(species_counts, compatibility)
    social_pressure = compute_species_social_pressure(species_counts, compatibility)

    crowding = clamp((population_ratio - 0.68) * 1.06 + max(0.0, load_ratio - 0.85) * 0.72)
    aggression_pressure = clamp(
        temperament_sum / fish_count * 0.42
        + incompatibility * 0.35
        + territory_sum / fish_count * crowding * 0.74
    )

    oxygen_ratio = oxygen_demand / max(
        CAPACITY_EPSILON, tank_config.oxygen_capacity * tank_config.filtration_factor
    )
    oxygen_level_target = clamp(1.0 - max(0.0, oxygen_ratio - 0.66) / 0.8)
    water_quality_target = clamp(
        1.0
        - max(0.0, load_ratio - 0.55) * 0.64
        - crowding * 0.24
        - incompatibility * 0.18
    )
    harmony = clamp(1.0 - (crowding * 0.32 + aggression_pressure * 0.34 + incompatibility * 0.34))

    return TankMetrics(
        bioload=bioload,
        oxygen_demand=oxygen_demand,
        load_ratio=load_ratio,
        population_ratio=population_ratio,
        crowding=crowding,
        aggression_pressure=aggression_pressure,
        incompatibility=incompatibility,
        harmony=harmony,
        water_quality_target=water_quality_target,
        oxygen_level_target=oxygen_level_target,
        species_counts=species_counts,
        species_social_pressure=social_pressure,
    )
