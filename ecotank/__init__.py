"""
Tank Ecosystem Simulation

A deterministic, headless simulator for a community aquarium. Fish carry
energy, stress, health and hunger that evolve under tank-wide water quality,
oxygen, crowding and harmony.

Architecture: step() is the only producer of state. Renderers are consumers.
"""

__version__ = "0.1.0"

from .data_types import (
    SizeClass, PreferredDepth, FishBehavior,
    SpeciesProfile, SpeciesRenderProfile, CompatibilityRule,
    TankConfig, DEFAULT_TANK_CONFIG, PopulationGroup,
    FishState, TankState, EcosystemState,
)
from .species import DEFAULT_SPECIES_CATALOG, create_species_index, get_species, UnknownSpeciesError
from .compatibility import (
    DEFAULT_COMPATIBILITY_RULES, build_compatibility_lookup, get_compatibility_score
)
from .default_state import DEFAULT_POPULATION, create_default_ecosystem_state
from .simulator import EcosystemStepInput, step, step_ecosystem, find_orphan_fish
from .rng import next_random, next_range, next_int
