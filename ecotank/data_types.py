"""
Data types for the tank ecosystem.

Static reference data (species, tank config, compatibility rules) and the
per-session state records. State records are frozen: the simulator builds new
records each step instead of mutating the previous ones.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from enum import Enum


# ============================================================================
# Enumerations
# ============================================================================

class SizeClass(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class PreferredDepth(str, Enum):
    TOP = "top"
    MID = "mid"
    BOTTOM = "bottom"


class FishBehavior(str, Enum):
    """Behaviors a fish can select. Declaration order is the roulette order."""
    CRUISE = "cruise"
    SCHOOL = "school"
    INSPECT = "inspect"
    HOVER = "hover"
    DART = "dart"
    REST = "rest"
    AVOID = "avoid"
    CHASE = "chase"


def _check_unit(name: str, value: float):
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


def _check_tier(name: str, value: int):
    if value not in (0, 1, 2, 3):
        raise ValueError(f"{name} must be an integer tier 0-3, got {value}")


# ============================================================================
# Species Definition
# ============================================================================

@dataclass(frozen=True)
class SpeciesRenderProfile:
    """Cosmetic colors for a renderer (not read by the simulator)"""
    body_rgb: Tuple[float, float, float]
    fin_rgb: Tuple[float, float, float]
    eye_rgb: Tuple[float, float, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'body_rgb': list(self.body_rgb),
            'fin_rgb': list(self.fin_rgb),
            'eye_rgb': list(self.eye_rgb),
        }


@dataclass(frozen=True)
class SpeciesProfile:
    """
    Behavioral and physiological profile shared by every fish of a species.

    Attributes:
        species_id: Unique key (e.g., "neon_tetra")
        label: Display name
        size_class: Body size bucket
        schooling: 0 = never schools, 3 = needs a large group
        temperament: 0 = peaceful, 3 = highly aggressive
        territory_need: Space demand in [0, 1]
        activity: Baseline activity in [0, 1]
        preferred_depth: Water column band the species occupies
        bioload: Waste load contribution (filtration strain)
        oxygen_use: Oxygen demand contribution
        compatibility_tags: Informational tags (e.g., "community")
        render: Cosmetic colors
    """
    species_id: str
    label: str
    size_class: SizeClass
    schooling: int
    temperament: int
    territory_need: float
    activity: float
    preferred_depth: PreferredDepth
    bioload: float
    oxygen_use: float
    compatibility_tags: Tuple[str, ...] = ()
    render: Optional[SpeciesRenderProfile] = None

    def __post_init__(self):
        """Coerce enum fields and validate documented ranges"""
        object.__setattr__(self, 'size_class', SizeClass(self.size_class))
        object.__setattr__(self, 'preferred_depth', PreferredDepth(self.preferred_depth))
        object.__setattr__(self, 'compatibility_tags', tuple(self.compatibility_tags))

        _check_tier('schooling', self.schooling)
        _check_tier('temperament', self.temperament)
        _check_unit('territory_need', self.territory_need)
        _check_unit('activity', self.activity)
        if self.bioload < 0 or self.oxygen_use < 0:
            raise ValueError(f"bioload and oxygen_use must be non-negative for {self.species_id}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'species_id': self.species_id,
            'label': self.label,
            'size_class': self.size_class.value,
            'schooling': self.schooling,
            'temperament': self.temperament,
            'territory_need': self.territory_need,
            'activity': self.activity,
            'preferred_depth': self.preferred_depth.value,
            'bioload': self.bioload,
            'oxygen_use': self.oxygen_use,
            'compatibility_tags': list(self.compatibility_tags),
            'render': self.render.to_dict() if self.render is not None else None,
        }


@dataclass(frozen=True)
class CompatibilityRule:
    """Compatibility score for an unordered species pair (1.0 = fully compatible)"""
    species_a: str
    species_b: str
    score: float


# ============================================================================
# Tank Configuration
# ============================================================================

@dataclass(frozen=True)
class TankConfig:
    """Static capacity and filtration parameters (never mutated by the simulator)"""
    base_capacity: float = 17.0
    oxygen_capacity: float = 15.0
    filtration_factor: float = 1.1
    habitat_factor: float = 0.85
    target_population: int = 16

    def __post_init__(self):
        if self.base_capacity < 0 or self.oxygen_capacity < 0:
            raise ValueError("Tank capacities must be non-negative")
        if self.filtration_factor < 0 or self.habitat_factor < 0:
            raise ValueError("Tank factors must be non-negative")
        if self.target_population < 0:
            raise ValueError("target_population must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base_capacity': self.base_capacity,
            'oxygen_capacity': self.oxygen_capacity,
            'filtration_factor': self.filtration_factor,
            'habitat_factor': self.habitat_factor,
            'target_population': self.target_population,
        }


DEFAULT_TANK_CONFIG = TankConfig()


@dataclass(frozen=True)
class PopulationGroup:
    """Stocking entry: how many fish of a species the tank starts with"""
    species_id: str
    count: int


# ============================================================================
# Session State
# ============================================================================

@dataclass(frozen=True)
class FishState:
    """
    Runtime state of one fish.

    energy, stress, health and hunger stay within [0, 1]. The lane/path/phase
    fields are cosmetic motion parameters for a renderer; the simulator sets
    them at bootstrap and never reads them again.
    """
    fish_id: str
    species_id: str
    age_days: float
    energy: float
    stress: float
    health: float
    hunger: float
    behavior: FishBehavior
    decision_timer_sec: float
    motion_seed: int
    lane_y_norm: float
    lane_z_norm: float
    path_width_norm: float
    path_depth_norm: float
    phase: float
    speed_factor: float

    def __post_init__(self):
        object.__setattr__(self, 'behavior', FishBehavior(self.behavior))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to builtin types (behavior as its string value)"""
        return {
            'fish_id': self.fish_id,
            'species_id': self.species_id,
            'age_days': float(self.age_days),
            'energy': float(self.energy),
            'stress': float(self.stress),
            'health': float(self.health),
            'hunger': float(self.hunger),
            'behavior': self.behavior.value,
            'decision_timer_sec': float(self.decision_timer_sec),
            'motion_seed': int(self.motion_seed),
            'lane_y_norm': float(self.lane_y_norm),
            'lane_z_norm': float(self.lane_z_norm),
            'path_width_norm': float(self.path_width_norm),
            'path_depth_norm': float(self.path_depth_norm),
            'phase': float(self.phase),
            'speed_factor': float(self.speed_factor),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'FishState':
        return cls(**data)


@dataclass(frozen=True)
class TankState:
    """Aggregate tank conditions (all in [0, 1] except bioload and timestamp_ms)"""
    timestamp_ms: float
    water_quality: float
    oxygen_level: float
    crowding: float
    aggression_pressure: float
    harmony: float
    bioload: float
    incompatibility: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp_ms': float(self.timestamp_ms),
            'water_quality': float(self.water_quality),
            'oxygen_level': float(self.oxygen_level),
            'crowding': float(self.crowding),
            'aggression_pressure': float(self.aggression_pressure),
            'harmony': float(self.harmony),
            'bioload': float(self.bioload),
            'incompatibility': float(self.incompatibility),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TankState':
        return cls(**data)


@dataclass(frozen=True)
class EcosystemState:
    """
    Complete simulation state.

    rng_state is the only random state in the system and travels with the
    rest of the state; step() returns the advanced seed.
    """
    tick: int
    rng_state: int
    tank: TankState
    fish: Tuple[FishState, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'fish', tuple(self.fish))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'rng_state': self.rng_state,
            'tank': self.tank.to_dict(),
            'fish': [f.to_dict() for f in self.fish],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EcosystemState':
        return cls(
            tick=data['tick'],
            rng_state=data['rng_state'],
            tank=TankState.from_dict(data['tank']),
            fish=tuple(FishState.from_dict(f) for f in data.get('fish', [])),
        )
